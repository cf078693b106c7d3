"""
pm_engines.milestones -- Milestone timing and badge policy.

Responsibility:
    Compute the signed number of days between a milestone's target date
    and a given "today", and decide which status badge (days remaining,
    completed on, or none) a milestone qualifies for.

Architecture position:
    Engines -- pure calculation layer, zero I/O.
    May only import pm_kernel.

Invariants enforced:
    - Purity: ``today`` is always an explicit parameter; this module never
      reads the clock.
    - ``days_until`` is negative for overdue targets and zero on the day.

Usage:
    from datetime import date
    from pm_engines.milestones import days_until

    days_until(date(2024, 9, 30), today=date(2024, 9, 25))   # 5
    days_until("2024-09-20", today="2024-09-25")             # -5
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from pm_kernel.domain.entities import Milestone, MilestoneStatus
from pm_kernel.logging_config import get_logger

logger = get_logger("engines.milestones")


class BadgeKind(str, Enum):
    DAYS_REMAINING = "days_remaining"
    COMPLETED_ON = "completed_on"
    NONE = "none"


@dataclass(frozen=True)
class MilestoneBadge:
    """
    Which timing badge a milestone shows, with its payload.

    ``days_remaining`` is set only for DAYS_REMAINING; ``completed_on``
    only for COMPLETED_ON.
    """

    kind: BadgeKind
    days_remaining: int | None = None
    completed_on: date | None = None


NO_BADGE = MilestoneBadge(kind=BadgeKind.NONE)


def _as_date(value: date | str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(value)


def days_until(target_date: date | str, today: date | str) -> int:
    """
    Whole days from ``today`` to ``target_date``.

    Both arguments are calendar dates (or ISO 8601 date strings), so the
    ceiling of the day difference is the difference itself.
    """
    return (_as_date(target_date) - _as_date(today)).days


def milestone_badge(milestone: Milestone, today: date | str) -> MilestoneBadge:
    """
    Badge policy.

        UPCOMING with days_until >= 0     -> DAYS_REMAINING (day count)
        ACHIEVED with an actual_date      -> COMPLETED_ON (actual date)
        anything else                     -> NONE
    """
    if milestone.status == MilestoneStatus.UPCOMING:
        remaining = days_until(milestone.target_date, today)
        if remaining >= 0:
            return MilestoneBadge(kind=BadgeKind.DAYS_REMAINING, days_remaining=remaining)
        logger.debug("milestone_upcoming_overdue", extra={
            "milestone_id": milestone.id,
            "days_until": remaining,
        })
        return NO_BADGE

    if milestone.status == MilestoneStatus.ACHIEVED and milestone.actual_date is not None:
        return MilestoneBadge(kind=BadgeKind.COMPLETED_ON, completed_on=milestone.actual_date)

    return NO_BADGE


def count_achieved(milestones: Iterable[Milestone]) -> int:
    """Number of milestones with status ACHIEVED."""
    return sum(1 for m in milestones if m.is_achieved)
