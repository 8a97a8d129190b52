"""
ReviewerMatcher fans the scoring function out over a candidate pool and
ranks the results
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Sequence, Tuple

from reviewer_matching.engine.scoring import ReviewerScorer
from reviewer_matching.utils.models import MatchingCriteria, MatchResult, ReviewerProfile, ScoringConfig

logger = logging.getLogger(__name__)


def ranking_key(result: MatchResult) -> Tuple[float, float, str, str]:
    """Score descending, then years of experience descending, then name and id ascending"""
    return (-result.percentage, -result.years_experience, result.full_name, result.reviewer_id)


def rank_results(results: Sequence[MatchResult]) -> List[MatchResult]:
    return sorted(results, key=ranking_key)


class ReviewerMatcher:
    """Handles reviewer scoring and ranking against matching criteria"""

    def __init__(self, config: Optional[ScoringConfig] = None, max_workers: Optional[int] = None):
        """
        Initialize the matcher

        Args:
            config: Optional scoring constants
            max_workers: Score candidates on this many threads when greater than 1
        """
        logger.info("Initializing ReviewerMatcher")
        self.scorer = ReviewerScorer(config)
        self.max_workers = max_workers

    def find_matching_reviewers(self, criteria: MatchingCriteria,
                                candidates: Sequence[ReviewerProfile]) -> List[MatchResult]:
        """
        Score and rank every candidate

        Ineligible reviewers are kept in the output with is_eligible=False.
        Reviewers listed in criteria.exclude_reviewer_ids are skipped.

        Args:
            criteria: Matching criteria
            candidates: Reviewer snapshots

        Returns:
            Ranked list of MatchResult
        """
        start_time = time.time()
        excluded = set(criteria.exclude_reviewer_ids)
        pool = [reviewer for reviewer in candidates if reviewer.id not in excluded]

        logger.info(
            f"Matching {len(pool)} reviewers against {criteria.target_organization_id} "
            f"({criteria.review_start_date} to {criteria.review_end_date})"
        )

        if self.max_workers and self.max_workers > 1 and len(pool) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                results = list(executor.map(lambda reviewer: self.scorer.score(reviewer, criteria), pool))
        else:
            results = [self.scorer.score(reviewer, criteria) for reviewer in pool]

        ranked = rank_results(results)

        eligible_count = sum(1 for result in ranked if result.is_eligible)
        logger.info(
            f"Found {eligible_count} eligible of {len(ranked)} reviewers in {time.time() - start_time:.2f}s"
        )
        return ranked

    def can_assign_reviewer(self, reviewer: ReviewerProfile,
                            criteria: MatchingCriteria) -> Tuple[bool, List[str]]:
        """
        Check whether a specific reviewer can be assigned

        Returns:
            Tuple of (can_assign, reasons). Reasons lead with the ineligibility
            reason followed by the reviewer's warnings.
        """
        result = self.scorer.score(reviewer, criteria)
        if result.is_eligible:
            return True, []
        return False, [result.ineligibility_reason] + list(result.warnings)


def find_matching_reviewers(criteria: MatchingCriteria, candidates: Sequence[ReviewerProfile],
                            config: Optional[ScoringConfig] = None,
                            max_workers: Optional[int] = None) -> List[MatchResult]:
    """Score and rank a candidate pool"""
    return ReviewerMatcher(config, max_workers).find_matching_reviewers(criteria, candidates)


def can_assign_reviewer(reviewer: ReviewerProfile, criteria: MatchingCriteria,
                        config: Optional[ScoringConfig] = None) -> Tuple[bool, List[str]]:
    return ReviewerMatcher(config).can_assign_reviewer(reviewer, criteria)


def filter_eligible_only(results: Sequence[MatchResult]) -> List[MatchResult]:
    return [result for result in results if result.is_eligible]


def filter_by_min_score(results: Sequence[MatchResult], min_score: float) -> List[MatchResult]:
    return [result for result in results if result.percentage >= min_score]


def get_top_candidates(results: Sequence[MatchResult], limit: int) -> List[MatchResult]:
    return list(results[:max(limit, 0)])
