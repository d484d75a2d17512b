"""
Goal aggregator - portfolio totals over goals that are not completed yet.
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping

from savings.domain.goal import Goal


@dataclass(frozen=True)
class GoalTotals:
    total_saved: Decimal
    total_target: Decimal


def aggregate(goals: Iterable[Goal], current_amounts: Mapping[int, Decimal]) -> GoalTotals:
    """
    Sum saved and target amounts, both measured from each goal's starting balance

    Completed goals are skipped. Sums are not clamped: a goal whose starting
    balance exceeds its target pulls total_target below zero.
    A goal absent from current_amounts counts as nothing saved yet.
    """
    total_saved = Decimal("0")
    total_target = Decimal("0")

    for goal in goals:
        if goal.is_completed:
            continue
        current = current_amounts.get(goal.goal_id, goal.starting_balance)
        total_saved += current - goal.starting_balance
        total_target += goal.target_amount - goal.starting_balance

    return GoalTotals(total_saved=total_saved, total_target=total_target)
