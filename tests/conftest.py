"""Shared fixtures for reviewer matching tests."""

from datetime import date

import pytest

from reviewer_matching.utils.models import MatchingCriteria, ReviewerProfile

REVIEW_START = date(2026, 3, 2)
REVIEW_END = date(2026, 3, 6)


@pytest.fixture()
def review_period():
    """Five-day review period used across the suite."""
    return REVIEW_START, REVIEW_END


@pytest.fixture()
def make_reviewer():
    """Factory for reviewer snapshots, fully available over the review period by default.

    Expertise items are an area name or an (area, proficiency) pair, language
    items are (language, proficiency) pairs.
    """

    def _make(
        reviewer_id="R-1",
        home_organization_id="ORG-B",
        full_name=None,
        expertise=("ATS",),
        languages=(("EN", "NATIVE"),),
        availability_slots=None,
        conflicts_of_interest=(),
        is_lead_qualified=False,
        years_experience=5.0,
        reviews_completed=3,
    ):
        if availability_slots is None:
            availability_slots = [
                {"start_date": REVIEW_START, "end_date": REVIEW_END, "availability_type": "AVAILABLE"}
            ]

        expertise_records = []
        for item in expertise:
            if isinstance(item, str):
                expertise_records.append({"area": item})
            else:
                expertise_records.append({"area": item[0], "proficiency_level": item[1]})

        return ReviewerProfile.model_validate({
            "id": reviewer_id,
            "full_name": full_name or f"Reviewer {reviewer_id}",
            "home_organization_id": home_organization_id,
            "expertise": expertise_records,
            "languages": [{"language": lang, "proficiency": level} for lang, level in languages],
            "availability_slots": list(availability_slots),
            "conflicts_of_interest": list(conflicts_of_interest),
            "is_lead_qualified": is_lead_qualified,
            "years_experience": years_experience,
            "reviews_completed": reviews_completed,
        })

    return _make


@pytest.fixture()
def make_criteria():
    """Factory for matching criteria against ORG-A over the review period."""

    def _make(**overrides):
        data = {
            "target_organization_id": "ORG-A",
            "required_expertise": ["ATS"],
            "preferred_expertise": [],
            "required_languages": ["EN"],
            "review_start_date": REVIEW_START,
            "review_end_date": REVIEW_END,
            "team_size": 2,
        }
        data.update(overrides)
        return MatchingCriteria.model_validate(data)

    return _make
