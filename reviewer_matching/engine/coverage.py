"""
Coverage reporting for a (proposed) review team
"""

from typing import Optional, Sequence

from reviewer_matching.utils.models import (
    CoverageReport,
    MatchingCriteria,
    MatchResult,
    ScoringConfig,
    TeamBalance,
)


class CoverageReporter:
    """
    Aggregates expertise and language coverage of a team.

    Coverage is computed from each member's own match details, so the report
    always agrees with the per-reviewer results it is built from.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        self.config = config or ScoringConfig()

    def classify_balance(self, expertise_coverage: float, language_coverage: float,
                         has_lead: bool) -> TeamBalance:
        """GOOD, FAIR or POOR from coverage and lead qualification"""
        thresholds = self.config.balance_thresholds
        if expertise_coverage < thresholds["poor_expertise"] or language_coverage < thresholds["poor_language"]:
            return TeamBalance.POOR
        if (expertise_coverage >= thresholds["good_expertise"]
                and language_coverage >= thresholds["good_language"]
                and has_lead):
            return TeamBalance.GOOD
        return TeamBalance.FAIR

    def report(self, team: Sequence[MatchResult], criteria: MatchingCriteria) -> CoverageReport:
        """
        Build the coverage report for a team

        Args:
            team: Team members' match results
            criteria: Matching criteria the team is measured against

        Returns:
            CoverageReport
        """
        required_expertise = list(dict.fromkeys(criteria.required_expertise))
        required_languages = list(dict.fromkeys(criteria.required_languages))

        matched_expertise = set()
        matched_languages = set()
        for member in team:
            matched_expertise.update(member.expertise_details.matched_required)
            matched_languages.update(member.language_details.matched_languages)

        expertise_covered = [area for area in required_expertise if area in matched_expertise]
        expertise_missing = [area for area in required_expertise if area not in matched_expertise]
        languages_covered = [language for language in required_languages if language in matched_languages]
        languages_missing = [language for language in required_languages if language not in matched_languages]

        expertise_coverage = len(expertise_covered) / len(required_expertise) if required_expertise else 1.0
        language_coverage = len(languages_covered) / len(required_languages) if required_languages else 1.0
        has_lead = any(member.is_lead_qualified for member in team)

        return CoverageReport(
            expertise_coverage=expertise_coverage,
            expertise_covered=expertise_covered,
            expertise_missing=expertise_missing,
            language_coverage=language_coverage,
            languages_covered=languages_covered,
            languages_missing=languages_missing,
            has_lead_qualified=has_lead,
            team_balance=self.classify_balance(expertise_coverage, language_coverage, has_lead),
        )


def report_coverage(team: Sequence[MatchResult], criteria: MatchingCriteria,
                    config: Optional[ScoringConfig] = None) -> CoverageReport:
    return CoverageReporter(config).report(team, criteria)
