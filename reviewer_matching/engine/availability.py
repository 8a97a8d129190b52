"""
Availability rules: day-level slot resolution and coverage summaries
"""

import logging
from datetime import date, timedelta
from typing import Dict, Iterator, List, Mapping, Optional, Sequence

from reviewer_matching.config.settings import COMMON_AVAILABILITY_MIN_DAYS, TENTATIVE_DAY_WEIGHT
from reviewer_matching.utils.models import (
    AvailabilitySlot,
    AvailabilitySummary,
    AvailabilityType,
    CommonAvailabilityWindow,
)

logger = logging.getLogger(__name__)


def _check_range(start: date, end: date) -> None:
    if end < start:
        raise ValueError(f"Invalid date range: end {end} is before start {start}")


def iter_days(start: date, end: date) -> Iterator[date]:
    """Yield every day from start to end, inclusive"""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def count_days(start: date, end: date) -> int:
    """Inclusive number of days between two dates (0 if end precedes start)"""
    return max((end - start).days + 1, 0)


def resolve_day(slots: Sequence[AvailabilitySlot], day: date) -> AvailabilityType:
    """
    Resolve the availability type of a single day.

    The last slot in input order that covers the day wins. A day with no
    covering slot is UNAVAILABLE.
    """
    for slot in reversed(slots):
        if slot.start_date <= day <= slot.end_date:
            return slot.availability_type
    return AvailabilityType.UNAVAILABLE


def resolve_days(slots: Sequence[AvailabilitySlot], start: date, end: date) -> Dict[date, AvailabilityType]:
    """
    Resolve every day of an inclusive range.

    Equivalent to calling resolve_day for each day: slots are painted over
    the range in input order so later slots overwrite earlier ones.
    """
    _check_range(start, end)
    per_day = {day: AvailabilityType.UNAVAILABLE for day in iter_days(start, end)}

    for slot in slots:
        if slot.end_date < start or slot.start_date > end:
            continue
        for day in iter_days(max(slot.start_date, start), min(slot.end_date, end)):
            per_day[day] = slot.availability_type

    return per_day


def summarize_availability(slots: Sequence[AvailabilitySlot], range_start: date, range_end: date,
                           tentative_weight: float = TENTATIVE_DAY_WEIGHT) -> AvailabilitySummary:
    """
    Summarize a reviewer's availability over a date range

    Args:
        slots: Availability slots in declaration order
        range_start: First day of the range
        range_end: Last day of the range (inclusive)
        tentative_weight: Weight of a TENTATIVE day in the coverage

    Returns:
        AvailabilitySummary with per-day classification and coverage in [0, 1]
    """
    per_day = resolve_days(slots, range_start, range_end)
    total_days = len(per_day)

    counts = {availability_type: 0 for availability_type in AvailabilityType}
    for availability_type in per_day.values():
        counts[availability_type] += 1

    if total_days == 0:
        coverage = 0.0
    else:
        weighted = counts[AvailabilityType.AVAILABLE] + tentative_weight * counts[AvailabilityType.TENTATIVE]
        coverage = min(max(weighted / total_days, 0.0), 1.0)

    # Notes of assignments that actually occupy days in the range
    conflicts: List[str] = []
    for slot in slots:
        if slot.availability_type != AvailabilityType.ON_ASSIGNMENT or not slot.notes:
            continue
        if slot.notes in conflicts:
            continue
        first = max(slot.start_date, range_start)
        last = min(slot.end_date, range_end)
        if any(resolve_day(slots, day) == AvailabilityType.ON_ASSIGNMENT for day in iter_days(first, last)):
            conflicts.append(slot.notes)

    return AvailabilitySummary(
        coverage=coverage,
        available_days=counts[AvailabilityType.AVAILABLE],
        tentative_days=counts[AvailabilityType.TENTATIVE],
        unavailable_days=counts[AvailabilityType.UNAVAILABLE],
        on_assignment_days=counts[AvailabilityType.ON_ASSIGNMENT],
        total_days=total_days,
        per_day_type=per_day,
        conflicts=conflicts,
    )


def is_available_for_period(slots: Sequence[AvailabilitySlot], start: date, end: date,
                            accept_tentative: bool = False) -> bool:
    """Check that every day of the period resolves to AVAILABLE (or TENTATIVE if accepted)"""
    accepted = {AvailabilityType.AVAILABLE}
    if accept_tentative:
        accepted.add(AvailabilityType.TENTATIVE)
    return all(day_type in accepted for day_type in resolve_days(slots, start, end).values())


def has_assignment_conflict(start: date, end: date, slots: Sequence[AvailabilitySlot]) -> bool:
    """Check whether a date range overlaps any ON_ASSIGNMENT slot"""
    _check_range(start, end)
    for slot in slots:
        if slot.availability_type != AvailabilityType.ON_ASSIGNMENT:
            continue
        if slot.start_date <= end and start <= slot.end_date:
            return True
    return False


def find_common_availability(team_slots: Mapping[str, Sequence[AvailabilitySlot]], start: date, end: date,
                             min_days: int = COMMON_AVAILABILITY_MIN_DAYS) -> List[CommonAvailabilityWindow]:
    """
    Find runs of consecutive days on which every reviewer is available

    Args:
        team_slots: Reviewer id -> availability slots
        start: First day of the search range
        end: Last day of the search range (inclusive)
        min_days: Shortest run worth reporting

    Returns:
        Windows in chronological order. TENTATIVE days count as available.
    """
    _check_range(start, end)
    if not team_slots:
        return []

    accepted = {AvailabilityType.AVAILABLE, AvailabilityType.TENTATIVE}
    resolved = [resolve_days(slots, start, end) for slots in team_slots.values()]

    windows: List[CommonAvailabilityWindow] = []
    run_start: Optional[date] = None
    run_end: Optional[date] = None

    for day in iter_days(start, end):
        if all(per_day[day] in accepted for per_day in resolved):
            if run_start is None:
                run_start = day
            run_end = day
            continue
        if run_start is not None:
            windows.append(CommonAvailabilityWindow(
                start_date=run_start, end_date=run_end, days_count=count_days(run_start, run_end)
            ))
            run_start = run_end = None

    if run_start is not None:
        windows.append(CommonAvailabilityWindow(
            start_date=run_start, end_date=run_end, days_count=count_days(run_start, run_end)
        ))

    windows = [window for window in windows if window.days_count >= min_days]
    logger.debug(f"Found {len(windows)} common availability windows for {len(team_slots)} reviewers")
    return windows
