"""
Reviewer Matching & Team Composition Engine
"""

from reviewer_matching.engine.availability import (
    find_common_availability,
    has_assignment_conflict,
    is_available_for_period,
    resolve_day,
    summarize_availability,
)
from reviewer_matching.engine.coi import apply_verification, check_team_coi, evaluate_coi
from reviewer_matching.engine.coverage import CoverageReporter, report_coverage
from reviewer_matching.engine.matcher import (
    ReviewerMatcher,
    can_assign_reviewer,
    filter_by_min_score,
    filter_eligible_only,
    find_matching_reviewers,
    get_top_candidates,
)
from reviewer_matching.engine.scoring import ReviewerScorer, score_reviewer
from reviewer_matching.engine.team_builder import TeamBuilder, build_optimal_team
from reviewer_matching.utils.models import (
    AvailabilitySlot,
    AvailabilitySummary,
    COICheckResult,
    ConflictOfInterest,
    CoverageReport,
    MatchingCriteria,
    MatchResult,
    ReviewerProfile,
    ScoringConfig,
    TeamBuildResult,
    VerificationDecision,
)

__version__ = "0.1.0"
