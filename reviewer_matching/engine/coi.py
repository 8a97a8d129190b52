"""
Conflict-of-interest rules for reviewers against a target organization
"""

import logging
from datetime import date
from typing import List, Optional, Sequence

from reviewer_matching.config.settings import COI_REASONS
from reviewer_matching.utils.models import (
    COICheckResult,
    COISeverity,
    COIType,
    ConflictOfInterest,
    ReviewerCOIStatus,
    ReviewerProfile,
    TeamCOICheckResult,
    VerificationDecision,
    VerificationDecisionType,
)

logger = logging.getLogger(__name__)

# Most restrictive verdict first
_BLOCKING, _WAIVED, _SOFT = 0, 1, 2


def home_organization_conflict(reviewer: ReviewerProfile, target_organization_id: str) -> Optional[COICheckResult]:
    """
    The implicit conflict every reviewer has against their own employer.

    It is always HARD and can never be waived.
    """
    if not reviewer.home_organization_id or not reviewer.home_organization_id.strip():
        raise ValueError(f"Reviewer {reviewer.id} is missing home_organization_id")
    if reviewer.home_organization_id != target_organization_id:
        return None
    return COICheckResult(
        organization_id=target_organization_id,
        has_conflict=True,
        severity=COISeverity.HARD,
        can_override=False,
        coi_type=COIType.HOME_ORGANIZATION,
        reason=COI_REASONS["HOME_ORGANIZATION"],
    )


def is_coi_in_force(coi: ConflictOfInterest, as_of: date, period_end: Optional[date] = None) -> bool:
    """
    Inactive conflicts, conflicts that ended before as_of, and conflicts that
    only start after the period (as_of..period_end) are ignored
    """
    if not coi.is_active:
        return False
    if coi.end_date is not None and coi.end_date < as_of:
        return False
    if coi.start_date is not None and coi.start_date > (period_end or as_of):
        return False
    return True


def has_active_waiver(coi: ConflictOfInterest, as_of: date) -> bool:
    """A WAIVE decision holds until its expiry date (inclusive)"""
    if coi.verification_decision != VerificationDecisionType.WAIVE:
        return False
    if coi.waiver_expiry_date is not None and coi.waiver_expiry_date < as_of:
        return False
    return True


def _classify(coi: ConflictOfInterest, as_of: date) -> int:
    if coi.severity == COISeverity.SOFT:
        return _SOFT
    return _WAIVED if has_active_waiver(coi, as_of) else _BLOCKING


def evaluate_coi(reviewer: ReviewerProfile, target_organization_id: str,
                 as_of: Optional[date] = None, period_end: Optional[date] = None) -> COICheckResult:
    """
    Evaluate a reviewer's conflicts against a target organization

    Args:
        reviewer: Reviewer snapshot
        target_organization_id: Organization under review
        as_of: Reference date for COI end dates and waiver expiry, today
            when not given
        period_end: Last day of the review; conflicts starting after it
            are ignored. Defaults to as_of

    Returns:
        COICheckResult describing the most restrictive conflict found
    """
    if as_of is None:
        as_of = date.today()

    home_conflict = home_organization_conflict(reviewer, target_organization_id)
    if home_conflict is not None:
        return home_conflict

    applicable = [
        coi for coi in reviewer.conflicts_of_interest
        if coi.organization_id == target_organization_id and is_coi_in_force(coi, as_of, period_end)
    ]
    if not applicable:
        return COICheckResult(organization_id=target_organization_id)

    # Stable min keeps declaration order among equally restrictive conflicts
    worst = min(applicable, key=lambda coi: _classify(coi, as_of))
    verdict = _classify(worst, as_of)

    return COICheckResult(
        organization_id=target_organization_id,
        has_conflict=True,
        severity=worst.severity,
        can_override=verdict != _BLOCKING,
        is_waived=verdict == _WAIVED,
        coi_type=worst.coi_type,
        reason=COI_REASONS.get(worst.coi_type.value, "Conflict of interest"),
    )


def apply_verification(coi: ConflictOfInterest, decision: VerificationDecision) -> ConflictOfInterest:
    """
    Record an admin verification decision on a conflict

    Args:
        coi: Declared conflict
        decision: Validated decision (WAIVE/REJECT carry a justification)

    Returns:
        Verified copy of the conflict. REJECT is recorded as confirming the
        conflict exists; only WAIVE makes a HARD conflict overridable.
    """
    if not isinstance(decision, VerificationDecision):
        decision = VerificationDecision.model_validate(decision)

    update = {
        "is_verified": True,
        "verification_decision": decision.decision,
        "justification": decision.justification.strip() or None,
        "waiver_expiry_date": decision.waiver_expiry_date,
    }
    logger.info(
        f"Recorded {decision.decision.value} on {coi.coi_type.value} conflict with {coi.organization_id}"
    )
    return coi.model_copy(update=update)


def check_team_coi(reviewers: Sequence[ReviewerProfile], target_organization_id: str,
                   as_of: Optional[date] = None, period_end: Optional[date] = None) -> TeamCOICheckResult:
    """
    Check every member of a proposed team against the target organization

    Args:
        reviewers: Proposed team members
        target_organization_id: Organization under review
        as_of: Reference date passed to evaluate_coi, today when not given
        period_end: Last day of the review passed to evaluate_coi

    Returns:
        TeamCOICheckResult; the team can proceed only with no blocked members
    """
    statuses: List[ReviewerCOIStatus] = []
    blocked: List[str] = []
    warning: List[str] = []
    override: List[str] = []

    for reviewer in reviewers:
        check = evaluate_coi(reviewer, target_organization_id, as_of, period_end)
        if check.has_conflict and not check.can_override:
            status = "blocked"
            blocked.append(reviewer.id)
        elif check.is_waived:
            status = "override_active"
            override.append(reviewer.id)
        elif check.has_conflict:
            status = "warning"
            warning.append(reviewer.id)
        else:
            status = "eligible"
        statuses.append(ReviewerCOIStatus(
            reviewer_id=reviewer.id, full_name=reviewer.full_name, status=status, check=check
        ))

    if blocked:
        logger.warning(f"{len(blocked)} reviewer(s) blocked by conflicts with {target_organization_id}")

    return TeamCOICheckResult(
        organization_id=target_organization_id,
        reviewers=statuses,
        blocked_reviewer_ids=blocked,
        warning_reviewer_ids=warning,
        override_reviewer_ids=override,
        can_proceed=not blocked,
    )
