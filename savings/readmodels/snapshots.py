"""
Snapshot loaders - read models -> immutable domain values for the engine
"""
from collections import defaultdict
from decimal import Decimal
from typing import Dict, List

from sqlalchemy.orm import Session

from savings.domain.account import Account
from savings.domain.allocation import AllocationKind, AllocationRule
from savings.domain.goal import Goal
from savings.infrastructure.db.models import AccountInfo, GoalAllocationInfo, GoalInfo


def load_accounts(db: Session) -> Dict[str, Account]:
    """Все известные счета: {account_id: Account}"""
    rows = db.query(AccountInfo).order_by(AccountInfo.name).all()
    return {
        row.account_id: Account(
            account_id=row.account_id,
            name=row.name,
            balance=Decimal(row.balance),
            account_type=row.account_type,
        )
        for row in rows
    }


def _rules_by_goal(db: Session) -> Dict[int, List[AllocationRule]]:
    rules: Dict[int, List[AllocationRule]] = defaultdict(list)
    rows = db.query(GoalAllocationInfo).order_by(
        GoalAllocationInfo.goal_id, GoalAllocationInfo.position
    ).all()
    for row in rows:
        rules[row.goal_id].append(AllocationRule(
            account_id=row.account_id,
            kind=AllocationKind(row.allocation_type),
            value=Decimal(row.allocation_value),
        ))
    return rules


def to_goal(row: GoalInfo, rules: List[AllocationRule]) -> Goal:
    return Goal(
        goal_id=row.goal_id,
        name=row.name,
        target_amount=Decimal(row.target_amount),
        target_date=row.target_date,
        allocations=tuple(rules),
        starting_balance=Decimal(row.starting_balance),
        icon=row.icon,
        color=row.color,
        is_active=row.is_active,
        is_completed=row.is_completed,
        completed_at=row.completed_at,
        created_at=row.created_at,
    )


def load_goals(db: Session) -> List[Goal]:
    """Все цели в порядке создания, с правилами привязки"""
    rules = _rules_by_goal(db)
    rows = db.query(GoalInfo).order_by(GoalInfo.created_at, GoalInfo.goal_id).all()
    return [to_goal(row, rules.get(row.goal_id, [])) for row in rows]


def load_goal(db: Session, goal_id: int) -> Goal | None:
    row = db.query(GoalInfo).filter(GoalInfo.goal_id == goal_id).first()
    if row is None:
        return None
    rows = db.query(GoalAllocationInfo).filter(
        GoalAllocationInfo.goal_id == goal_id
    ).order_by(GoalAllocationInfo.position).all()
    rules = [
        AllocationRule(r.account_id, AllocationKind(r.allocation_type), Decimal(r.allocation_value))
        for r in rows
    ]
    return to_goal(row, rules)
