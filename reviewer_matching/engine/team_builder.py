"""
TeamBuilder assembles a review team from ranked match results
"""

import logging
from typing import Dict, List, Optional, Sequence, Tuple

from reviewer_matching.engine.coverage import CoverageReporter
from reviewer_matching.engine.matcher import rank_results
from reviewer_matching.utils.models import (
    CoverageReport,
    MatchingCriteria,
    MatchResult,
    ScoringConfig,
    SelectionStep,
    TeamBuildResult,
)

logger = logging.getLogger(__name__)


class TeamBuilder:
    """
    Greedy team assembly with forced inclusion.

    Must-include reviewers seed the team. Each following round adds the
    eligible candidate with the largest marginal coverage gain, using the
    candidate's own score and then the matcher ranking to break ties.
    """

    def __init__(self, config: Optional[ScoringConfig] = None):
        """
        Initialize the team builder

        Args:
            config: Optional scoring constants (gain weights, thresholds)
        """
        logger.info("Initializing TeamBuilder")
        self.config = config or ScoringConfig()
        self.reporter = CoverageReporter(self.config)

    def calculate_marginal_gain(self, candidate: MatchResult, current_team: List[MatchResult],
                                criteria: MatchingCriteria,
                                current_report: Optional[CoverageReport] = None) -> float:
        """
        Calculate the coverage gain of adding a candidate to the current team

        Args:
            candidate: Candidate match result
            current_team: Members selected so far
            criteria: Matching criteria
            current_report: Coverage of current_team, computed if not given

        Returns:
            Weighted count of newly covered expertise areas, languages and
            lead qualification
        """
        if current_report is None:
            current_report = self.reporter.report(current_team, criteria)
        new_report = self.reporter.report(current_team + [candidate], criteria)

        weights = self.config.gain_weights
        gain = weights["expertise"] * (len(new_report.expertise_covered) - len(current_report.expertise_covered))
        gain += weights["language"] * (len(new_report.languages_covered) - len(current_report.languages_covered))
        if new_report.has_lead_qualified and not current_report.has_lead_qualified:
            gain += weights["lead"]
        return gain

    def _seed_forced_members(self, criteria: MatchingCriteria, by_id: Dict[str, MatchResult],
                             team_size: int) -> Tuple[List[MatchResult], List[SelectionStep], List[str]]:
        team: List[MatchResult] = []
        history: List[SelectionStep] = []
        warnings: List[str] = []

        for reviewer_id in dict.fromkeys(criteria.must_include_reviewer_ids):
            member = by_id.get(reviewer_id)
            if member is None:
                warnings.append(f"Required reviewer {reviewer_id} is not in the candidate pool")
                continue
            if len(team) >= team_size:
                warnings.append(f"Required reviewer {member.full_name} dropped: team size {team_size} reached")
                continue

            team.append(member)
            history.append(SelectionStep(
                round=len(team), reviewer_id=member.reviewer_id, full_name=member.full_name, forced=True
            ))
            if not member.is_eligible:
                warnings.append(
                    f"Required reviewer {member.full_name} has eligibility issues: {member.ineligibility_reason}"
                )
                logger.warning(f"Forced inclusion of ineligible reviewer {member.reviewer_id}")

        return team, history, warnings

    def select_team(self, criteria: MatchingCriteria,
                    pool: Sequence[MatchResult]) -> Tuple[List[MatchResult], List[SelectionStep], List[str]]:
        """
        Run forced inclusion followed by greedy selection

        Args:
            criteria: Matching criteria
            pool: Match results to choose from

        Returns:
            Tuple of (team, selection history, warnings)
        """
        team_size = max(criteria.team_size, 0)
        ranked = rank_results(pool)

        by_id: Dict[str, MatchResult] = {}
        for result in ranked:
            by_id.setdefault(result.reviewer_id, result)

        team, history, warnings = self._seed_forced_members(criteria, by_id, team_size)
        selected_ids = {member.reviewer_id for member in team}

        # Ineligible candidates are only ever present through forced inclusion
        candidates = [
            result for result in by_id.values()
            if result.is_eligible and result.reviewer_id not in selected_ids
        ]
        candidates = rank_results(candidates)

        while len(team) < team_size and candidates:
            current_report = self.reporter.report(team, criteria)
            best_candidate = None
            best_key = None

            for candidate in candidates:
                gain = self.calculate_marginal_gain(candidate, team, criteria, current_report)
                key = (gain, candidate.percentage)
                # Strict comparison keeps the earlier-ranked candidate on ties
                if best_key is None or key > best_key:
                    best_candidate = candidate
                    best_key = key

            team.append(best_candidate)
            candidates.remove(best_candidate)
            history.append(SelectionStep(
                round=len(team),
                reviewer_id=best_candidate.reviewer_id,
                full_name=best_candidate.full_name,
                marginal_gain=best_key[0],
            ))
            logger.debug(
                f"Round {len(team)}: selected {best_candidate.full_name} (gain: {best_key[0]:.1f}, "
                f"score: {best_candidate.percentage:.1f})"
            )

        return team, history, warnings

    def check_viability(self, team: Sequence[MatchResult], report: CoverageReport, requested_size: int) -> bool:
        """A team is viable when it is close to full size and covers the basics"""
        thresholds = self.config.viability_thresholds
        if not team or requested_size <= 0:
            return False
        if len(team) < requested_size * thresholds["min_size_ratio"]:
            return False
        if report.expertise_coverage < thresholds["min_expertise_coverage"]:
            return False
        if report.language_coverage < thresholds["min_language_coverage"]:
            return False
        return True

    def build_optimal_team(self, criteria: MatchingCriteria, pool: Sequence[MatchResult]) -> TeamBuildResult:
        """
        Main public method for team assembly

        Args:
            criteria: Matching criteria
            pool: Match results, typically from ReviewerMatcher

        Returns:
            TeamBuildResult; an empty pool gives an empty team
        """
        team_size = max(criteria.team_size, 0)
        logger.info(f"Assembling team of {team_size} from {len(pool)} candidates")

        team, history, warnings = self.select_team(criteria, pool)
        report = self.reporter.report(team, criteria)

        if team_size > 0:
            if len(team) < team_size:
                warnings.append(f"Could only find {len(team)} of {team_size} required team members")
                logger.warning(f"Team short by {team_size - len(team)} member(s)")
            if not report.has_lead_qualified:
                warnings.append("Team has no lead-qualified reviewer")
            if report.expertise_missing:
                warnings.append(
                    f"Missing expertise coverage: {', '.join(area.value for area in report.expertise_missing)}"
                )
            if report.languages_missing:
                warnings.append(
                    f"Missing language coverage: {', '.join(lang.value for lang in report.languages_missing)}"
                )

        total_score = sum(member.percentage for member in team)
        result = TeamBuildResult(
            team=team,
            coverage_report=report,
            requested_size=team_size,
            total_score=total_score,
            average_score=total_score / len(team) if team else 0.0,
            is_viable=self.check_viability(team, report, team_size),
            warnings=warnings,
            selection_history=history,
        )

        logger.info(
            f"Selected {len(team)} members: expertise {report.expertise_coverage:.0%}, "
            f"languages {report.language_coverage:.0%}, balance {report.team_balance.value}"
        )
        return result


def build_optimal_team(criteria: MatchingCriteria, pool: Sequence[MatchResult],
                       config: Optional[ScoringConfig] = None) -> TeamBuildResult:
    """Assemble a team from match results"""
    return TeamBuilder(config).build_optimal_team(criteria, pool)
