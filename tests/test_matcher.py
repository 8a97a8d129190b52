"""Tests for candidate-pool matching and ranking."""

from reviewer_matching.engine.matcher import (
    can_assign_reviewer,
    filter_by_min_score,
    filter_eligible_only,
    find_matching_reviewers,
    get_top_candidates,
)


def test_results_sorted_by_score(make_reviewer, make_criteria):
    criteria = make_criteria(required_expertise=["ATS", "MET"])
    pool = [
        make_reviewer("R-1", expertise=["ATS"]),
        make_reviewer("R-2", expertise=["ATS", "MET"]),
        make_reviewer("R-3", expertise=[]),
    ]
    results = find_matching_reviewers(criteria, pool)

    assert [r.reviewer_id for r in results] == ["R-2", "R-1", "R-3"]
    assert results[0].percentage >= results[1].percentage >= results[2].percentage


def test_ties_broken_by_experience_then_name_then_id(make_reviewer, make_criteria):
    # Both experience values saturate, so the scores tie
    pool = [
        make_reviewer("R-4", full_name="Carla", years_experience=15, reviews_completed=10),
        make_reviewer("R-3", full_name="Dmitri", years_experience=20, reviews_completed=10),
        make_reviewer("R-2", full_name="Bea", years_experience=15, reviews_completed=10),
        make_reviewer("R-1", full_name="Bea", years_experience=15, reviews_completed=10),
    ]
    results = find_matching_reviewers(make_criteria(), pool)

    assert len({r.percentage for r in results}) == 1
    assert [r.reviewer_id for r in results] == ["R-3", "R-1", "R-2", "R-4"]


def test_ineligible_reviewers_are_retained(make_reviewer, make_criteria):
    pool = [make_reviewer("R-1"), make_reviewer("R-2", home_organization_id="ORG-A")]
    results = find_matching_reviewers(make_criteria(), pool)

    assert len(results) == 2
    assert [r.is_eligible for r in results if r.reviewer_id == "R-2"] == [False]


def test_excluded_reviewers_are_skipped(make_reviewer, make_criteria):
    pool = [make_reviewer("R-1"), make_reviewer("R-2")]
    results = find_matching_reviewers(make_criteria(exclude_reviewer_ids=["R-1"]), pool)

    assert [r.reviewer_id for r in results] == ["R-2"]


def test_empty_pool(make_criteria):
    assert find_matching_reviewers(make_criteria(), []) == []


def test_deterministic(make_reviewer, make_criteria):
    pool = [make_reviewer(f"R-{i}", years_experience=i) for i in range(6)]
    criteria = make_criteria()

    first = [r.model_dump() for r in find_matching_reviewers(criteria, pool)]
    second = [r.model_dump() for r in find_matching_reviewers(criteria, pool)]
    assert first == second


def test_threaded_matches_serial(make_reviewer, make_criteria):
    pool = [
        make_reviewer(f"R-{i}", expertise=["ATS", "MET"][: i % 3], years_experience=i, reviews_completed=i % 4)
        for i in range(12)
    ]
    criteria = make_criteria(required_expertise=["ATS", "MET"])

    serial = find_matching_reviewers(criteria, pool)
    threaded = find_matching_reviewers(criteria, pool, max_workers=4)
    assert [r.model_dump() for r in serial] == [r.model_dump() for r in threaded]


def test_inputs_are_not_mutated(make_reviewer, make_criteria):
    reviewer = make_reviewer()
    criteria = make_criteria()
    before = (reviewer.model_dump(), criteria.model_dump())

    find_matching_reviewers(criteria, [reviewer])
    assert (reviewer.model_dump(), criteria.model_dump()) == before


def test_filter_helpers(make_reviewer, make_criteria):
    pool = [
        make_reviewer("R-1", years_experience=15, reviews_completed=10),
        make_reviewer("R-2"),
        make_reviewer("R-3", home_organization_id="ORG-A"),
    ]
    results = find_matching_reviewers(make_criteria(), pool)

    assert [r.reviewer_id for r in filter_eligible_only(results)] == ["R-1", "R-2"]
    assert [r.reviewer_id for r in filter_by_min_score(results, 95.0)] == ["R-1"]
    assert [r.reviewer_id for r in get_top_candidates(results, 2)] == ["R-1", "R-2"]
    assert get_top_candidates(results, -1) == []


def test_can_assign_reviewer(make_reviewer, make_criteria):
    criteria = make_criteria()

    assert can_assign_reviewer(make_reviewer(), criteria) == (True, [])

    can_assign, reasons = can_assign_reviewer(make_reviewer(home_organization_id="ORG-A"), criteria)
    assert not can_assign
    assert reasons[0] == "Works at target organization"
    assert "Hard COI: Current employer" in reasons
