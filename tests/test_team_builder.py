"""Tests for greedy team assembly."""

from reviewer_matching.engine.matcher import find_matching_reviewers
from reviewer_matching.engine.team_builder import TeamBuilder, build_optimal_team


def build(criteria, pool):
    return build_optimal_team(criteria, find_matching_reviewers(criteria, pool))


def test_complementary_reviewers_are_selected(make_reviewer, make_criteria):
    criteria = make_criteria(required_expertise=["ATS", "MET", "CNS", "SAR"], team_size=2)
    pool = [
        make_reviewer("R-1", expertise=["ATS", "MET"]),
        make_reviewer("R-2", expertise=["CNS", "SAR"]),
        # Higher score, but only adds ground R-1 already covers
        make_reviewer("R-3", expertise=["ATS"], years_experience=20, reviews_completed=10),
    ]
    result = build(criteria, pool)

    assert sorted(m.reviewer_id for m in result.team) == ["R-1", "R-2"]
    assert result.coverage_report.expertise_coverage == 1.0
    assert result.is_viable


def test_forced_ineligible_reviewer_is_included(make_reviewer, make_criteria):
    criteria = make_criteria(
        required_expertise=["ATS", "MET"], team_size=2, must_include_reviewer_ids=["R-X"]
    )
    pool = [
        make_reviewer("R-X", home_organization_id="ORG-A", expertise=["ATS"]),
        make_reviewer("R-Y", expertise=["MET"]),
        make_reviewer("R-Z", expertise=["ATS"], years_experience=20, reviews_completed=10),
    ]
    result = build(criteria, pool)

    assert [m.reviewer_id for m in result.team] == ["R-X", "R-Y"]
    assert result.coverage_report.expertise_coverage == 1.0
    assert result.selection_history[0].forced
    assert not result.selection_history[1].forced
    assert any("R-X" in w and "eligibility issues" in w for w in result.warnings)


def test_ineligible_reviewers_never_fill_gaps(make_reviewer, make_criteria):
    pool = [make_reviewer("R-1"), make_reviewer("R-2", home_organization_id="ORG-A")]
    result = build(make_criteria(team_size=2), pool)

    assert [m.reviewer_id for m in result.team] == ["R-1"]
    assert "Could only find 1 of 2 required team members" in result.warnings
    assert not result.is_viable


def test_team_size_never_exceeded(make_reviewer, make_criteria):
    pool = [make_reviewer(f"R-{i}") for i in range(6)]

    for size in range(0, 5):
        assert len(build(make_criteria(team_size=size), pool).team) == size


def test_zero_team_size(make_reviewer, make_criteria):
    result = build(make_criteria(team_size=0), [make_reviewer("R-1")])

    assert result.team == []
    assert result.warnings == []
    assert result.average_score == 0.0


def test_forced_members_beyond_team_size_are_dropped(make_reviewer, make_criteria):
    criteria = make_criteria(team_size=1, must_include_reviewer_ids=["R-1", "R-2", "R-1"])
    result = build(criteria, [make_reviewer("R-1"), make_reviewer("R-2")])

    assert [m.reviewer_id for m in result.team] == ["R-1"]
    assert "Required reviewer Reviewer R-2 dropped: team size 1 reached" in result.warnings


def test_unknown_forced_reviewer_warns(make_reviewer, make_criteria):
    result = build(make_criteria(team_size=1, must_include_reviewer_ids=["R-404"]), [make_reviewer("R-1")])

    assert [m.reviewer_id for m in result.team] == ["R-1"]
    assert "Required reviewer R-404 is not in the candidate pool" in result.warnings


def test_empty_pool(make_criteria):
    result = build_optimal_team(make_criteria(), [])

    assert result.team == []
    assert result.coverage_report.expertise_coverage == 0.0
    assert result.total_score == 0.0
    assert not result.is_viable


def test_lead_gain_outweighs_score(make_reviewer, make_criteria):
    pool = [
        make_reviewer("R-1", years_experience=15, reviews_completed=10),
        make_reviewer("R-2", is_lead_qualified=True),
    ]
    result = build(make_criteria(team_size=1), pool)

    assert [m.reviewer_id for m in result.team] == ["R-2"]
    assert result.selection_history[0].marginal_gain == 33.0


def test_score_breaks_equal_gain(make_reviewer, make_criteria):
    pool = [
        make_reviewer("R-1"),
        make_reviewer("R-2", years_experience=15, reviews_completed=10),
    ]
    result = build(make_criteria(team_size=1), pool)

    assert [m.reviewer_id for m in result.team] == ["R-2"]


def test_summary_fields(make_reviewer, make_criteria):
    pool = [make_reviewer("R-1", is_lead_qualified=True), make_reviewer("R-2")]
    result = build(make_criteria(team_size=2), pool)

    assert result.requested_size == 2
    assert result.total_score == sum(m.percentage for m in result.team)
    assert result.average_score == result.total_score / 2
    assert [step.round for step in result.selection_history] == [1, 2]


def test_marginal_gain(make_reviewer, make_criteria):
    criteria = make_criteria(required_expertise=["ATS", "MET"], required_languages=["EN", "FR"])
    results = find_matching_reviewers(criteria, [
        make_reviewer("R-1", expertise=["ATS"], languages=[("EN", "NATIVE")]),
        make_reviewer("R-2", expertise=["ATS", "MET"], languages=[("FR", "NATIVE")], is_lead_qualified=True),
    ])
    first, second = sorted(results, key=lambda r: r.reviewer_id)
    builder = TeamBuilder()

    assert builder.calculate_marginal_gain(first, [], criteria) == 18.0
    assert builder.calculate_marginal_gain(first, [second], criteria) == 8.0
    assert builder.calculate_marginal_gain(second, [first], criteria) == 10.0 + 8.0 + 15.0


def test_deterministic(make_reviewer, make_criteria):
    criteria = make_criteria(required_expertise=["ATS", "MET", "CNS"], required_languages=["EN", "FR"], team_size=3)
    pool = [
        make_reviewer("R-1", expertise=["ATS"], languages=[("EN", "NATIVE")]),
        make_reviewer("R-2", expertise=["MET"], languages=[("FR", "ADVANCED")], is_lead_qualified=True),
        make_reviewer("R-3", expertise=["CNS", "ATS"], years_experience=12),
        make_reviewer("R-4", expertise=["ATS"]),
        make_reviewer("R-5", expertise=["MET"], home_organization_id="ORG-A"),
    ]
    results = find_matching_reviewers(criteria, pool)

    first = build_optimal_team(criteria, results).model_dump()
    assert build_optimal_team(criteria, results).model_dump() == first
    assert build_optimal_team(criteria, list(reversed(results))).model_dump() == first
