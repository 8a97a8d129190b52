"""Tests for loading reviewer snapshots and criteria."""

import json
from datetime import date

import pytest
from pydantic import ValidationError

from reviewer_matching.engine.preprocessing import SnapshotLoader
from reviewer_matching.utils.models import AvailabilityType, COIType, ProficiencyLevel

CSV_SNAPSHOT = """id,full_name,home_organization_id,organization_name,is_lead_qualified,reviews_completed,years_experience,expertise,languages,availability_slots,conflicts_of_interest
R-1,Ana Silva,ORG-B,Org B,true,4,12,ATS:EXPERT:10;MET:BASIC,EN:NATIVE;FR:ADVANCED,2026-03-01..2026-03-31:AVAILABLE,ORG-C:FAMILY_RELATIONSHIP
R-2,Omar Haddad,ORG-C,,no,,,CNS,AR:NATIVE;EN:BASIC:conduct,2026-03-01..2026-03-03:ON_ASSIGNMENT:Audit ORG-D,
"""


@pytest.fixture()
def loader():
    return SnapshotLoader()


def test_process_json_list(loader, tmp_path):
    path = tmp_path / "reviewers.json"
    path.write_text(json.dumps([
        {
            "id": "R-1",
            "full_name": "Ana Silva",
            "home_organization_id": "ORG-B",
            "expertise": [{"area": "ATS", "proficiency_level": "EXPERT"}],
            "languages": [{"language": "EN", "proficiency": "NATIVE"}],
            "availability_slots": [
                {"start_date": "2026-03-01", "end_date": "2026-03-31", "availability_type": "AVAILABLE"}
            ],
        }
    ]))
    reviewers = loader.load_reviewers(path)

    assert len(reviewers) == 1
    assert reviewers[0].expertise[0].proficiency_level == ProficiencyLevel.EXPERT
    assert reviewers[0].availability_slots[0].end_date == date(2026, 3, 31)


def test_process_json_wrapped(loader, tmp_path):
    path = tmp_path / "reviewers.json"
    path.write_text(json.dumps({"reviewers": [{"id": "R-1", "home_organization_id": "ORG-B"}]}))

    assert [r.id for r in loader.process_json_file(path)] == ["R-1"]


def test_invalid_record_is_raised(loader, tmp_path):
    path = tmp_path / "reviewers.json"
    path.write_text(json.dumps([{"id": "R-1", "home_organization_id": ""}]))

    with pytest.raises(ValidationError):
        loader.process_json_file(path)


def test_process_csv(loader, tmp_path):
    path = tmp_path / "reviewers.csv"
    path.write_text(CSV_SNAPSHOT)
    first, second = loader.load_reviewers(path)

    assert first.is_lead_qualified
    assert first.reviews_completed == 4
    assert first.years_experience == 12.0
    assert [(e.area.value, e.proficiency_level.value) for e in first.expertise] == [
        ("ATS", "EXPERT"),
        ("MET", "BASIC"),
    ]
    assert first.expertise[0].years_experience == 10.0
    assert [lang.value for lang in first.conducted_languages] == ["EN", "FR"]
    assert first.conflicts_of_interest[0].coi_type == COIType.FAMILY_RELATIONSHIP

    assert not second.is_lead_qualified
    assert second.reviews_completed == 0
    assert second.organization_name == ""
    assert second.expertise[0].proficiency_level == ProficiencyLevel.PROFICIENT
    assert [lang.value for lang in second.conducted_languages] == ["AR", "EN"]
    assert second.availability_slots[0].availability_type == AvailabilityType.ON_ASSIGNMENT
    assert second.availability_slots[0].notes == "Audit ORG-D"
    assert second.conflicts_of_interest == []


def test_malformed_slot_is_raised(loader, tmp_path):
    path = tmp_path / "reviewers.csv"
    path.write_text(
        "id,home_organization_id,availability_slots\n"
        "R-1,ORG-B,2026-03-01:AVAILABLE\n"
    )
    with pytest.raises(ValueError, match="Malformed availability slot"):
        loader.process_csv_file(path)


def test_unsupported_file_type(loader, tmp_path):
    path = tmp_path / "reviewers.xlsx"
    path.write_text("")

    with pytest.raises(ValueError, match="Unsupported file type"):
        loader.load_reviewers(path)


def test_missing_file(loader, tmp_path):
    with pytest.raises(FileNotFoundError):
        loader.process_json_file(tmp_path / "missing.json")


def test_load_criteria(loader, tmp_path):
    path = tmp_path / "criteria.json"
    path.write_text(json.dumps({
        "target_organization_id": "ORG-A",
        "required_expertise": ["ATS"],
        "required_languages": ["EN"],
        "review_start_date": "2026-03-02",
        "review_end_date": "2026-03-06",
        "team_size": 2,
        "lead_required": True,
    }))
    criteria = loader.load_criteria(path)

    assert criteria.team_size == 2
    assert criteria.lead_required
