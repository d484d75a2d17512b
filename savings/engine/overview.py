"""
Goals overview - full recompute of every derived figure from one snapshot.

Nothing here is cached: callers invoke build_overview() again after they
observe a data change, and the new result replaces the old one wholesale.
"""
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence

from savings.domain.goal import Goal
from savings.engine.aggregate import GoalTotals, aggregate
from savings.engine.allocations import AccountSnapshot, index_accounts, resolve_current_amount
from savings.engine.pacing import PACE_TOLERANCE, Pacing, analyze_pacing
from savings.engine.progress import compute_progress, compute_remaining

_HUNDRED = Decimal("100")


@dataclass(frozen=True)
class GoalStatus:
    goal: Goal
    current_amount: Decimal
    progress: Decimal
    remaining: Decimal
    pacing: Pacing

    @property
    def is_ready_to_complete(self) -> bool:
        """Цель достигла 100%, но пользователь ещё не отметил её выполненной"""
        return self.progress >= _HUNDRED and not self.goal.is_completed


@dataclass(frozen=True)
class GoalsOverview:
    goals: List[GoalStatus]
    totals: GoalTotals

    @property
    def active_count(self) -> int:
        return sum(1 for s in self.goals if not s.goal.is_completed)

    @property
    def completed_count(self) -> int:
        return sum(1 for s in self.goals if s.goal.is_completed)


def recompute_goal_balances(goals: Iterable[Goal], accounts: AccountSnapshot) -> Dict[int, Decimal]:
    """goal_id -> current saved amount for every goal"""
    by_id = index_accounts(accounts)
    return {goal.goal_id: resolve_current_amount(goal, by_id) for goal in goals}


def build_overview(
    goals: Sequence[Goal],
    accounts: AccountSnapshot,
    now: datetime,
    tolerance: Decimal = PACE_TOLERANCE
) -> GoalsOverview:
    """
    Per-goal status plus portfolio totals

    Goals that are not completed come first, completed ones after them;
    input order is kept inside each group.
    """
    balances = recompute_goal_balances(goals, accounts)

    statuses = []
    for goal in sorted(goals, key=lambda g: g.is_completed):
        current = balances[goal.goal_id]
        statuses.append(GoalStatus(
            goal=goal,
            current_amount=current,
            progress=compute_progress(goal, current),
            remaining=compute_remaining(goal, current),
            pacing=analyze_pacing(goal, now, current, tolerance=tolerance),
        ))

    return GoalsOverview(goals=statuses, totals=aggregate(goals, balances))


def pacing_label(pacing: Pacing) -> str:
    """Short deadline text for a goal card."""
    if not pacing.has_deadline:
        return ""
    if pacing.is_past_due:
        return "past due"
    if pacing.days_remaining == 0:
        return "due today"
    if pacing.days_remaining == 1:
        return "1 day left"
    return f"{pacing.days_remaining} days left"
