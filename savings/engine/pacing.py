"""
Pacing analyzer - compares actual progress with a linear savings schedule.

Linear schedule: saving starts at goal.created_at and reaches 100% at
midnight of goal.target_date. A goal is on track while its progress is no more
than PACE_TOLERANCE percentage points behind that schedule.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import ROUND_HALF_UP, Decimal
from typing import Optional

from savings.domain.goal import Goal
from savings.engine.progress import compute_progress, compute_remaining

DAYS_PER_MONTH = Decimal("30")  # 30-day month approximation, not calendar-accurate
PACE_TOLERANCE = Decimal("5")

_SECONDS_PER_DAY = Decimal("86400")
_HUNDRED = Decimal("100")
_CENT = Decimal("0.01")


@dataclass(frozen=True)
class Pacing:
    """All fields are None when the goal has no target date."""
    days_remaining: Optional[int] = None
    monthly_needed: Optional[Decimal] = None
    on_track: Optional[bool] = None

    @property
    def has_deadline(self) -> bool:
        return self.days_remaining is not None

    @property
    def is_past_due(self) -> bool:
        return self.days_remaining is not None and self.days_remaining < 0


def _align(value: datetime, reference: datetime) -> datetime:
    """
    Bring value to the same naive/aware flavour as reference.

    Naive timestamps are UTC wall-clock time: they are converted to the
    reference zone, not relabelled.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    if reference.tzinfo is None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.astimezone(reference.tzinfo)


def _days_between(start: datetime, end: datetime) -> Decimal:
    delta = end - start
    seconds = Decimal(delta.days) * _SECONDS_PER_DAY + Decimal(delta.seconds) \
        + Decimal(delta.microseconds) / Decimal(1_000_000)
    return seconds / _SECONDS_PER_DAY


def deadline_of(target_date: date, now: datetime) -> datetime:
    """Target date taken at midnight in the timezone of now."""
    return datetime.combine(target_date, time.min, tzinfo=now.tzinfo)


def analyze_pacing(
    goal: Goal,
    now: datetime,
    current_amount: Decimal,
    tolerance: Decimal = PACE_TOLERANCE
) -> Pacing:
    """
    Days left, monthly contribution needed and on-track flag for a goal

    Args:
        goal: Goal snapshot
        now: Current moment
        current_amount: Resolved current amount of the goal
        tolerance: Allowed lag behind the linear schedule, in percentage points

    Returns:
        Pacing; days_remaining may be negative (past due), monthly_needed is
        rounded to cents and None when no forward window is left

    Zero-length window (target_date at or before created_at): no schedule can
    be drawn, so the goal is on track only if it is already fully funded.
    """
    if goal.target_date is None:
        return Pacing()

    deadline = deadline_of(goal.target_date, now)
    days_remaining = math.ceil(_days_between(now, deadline))

    monthly_needed = None
    if days_remaining > 0:
        remaining = compute_remaining(goal, current_amount)
        monthly_needed = (remaining / (Decimal(days_remaining) / DAYS_PER_MONTH)).quantize(
            _CENT, rounding=ROUND_HALF_UP
        )

    progress = compute_progress(goal, current_amount)
    total_days = _days_between(_align(goal.created_at, now), deadline)

    if total_days <= 0:
        on_track = progress >= _HUNDRED
    else:
        elapsed = total_days - days_remaining
        expected_progress = elapsed / total_days * _HUNDRED
        on_track = progress >= expected_progress - tolerance

    return Pacing(
        days_remaining=days_remaining,
        monthly_needed=monthly_needed,
        on_track=on_track,
    )
