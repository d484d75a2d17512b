"""
GoalsProjector - builds goals and goal_allocations read models from events
"""
from decimal import Decimal
from datetime import date, datetime

from savings.readmodels.projectors.base import BaseProjector
from savings.infrastructure.db.models import GoalInfo, GoalAllocationInfo, EventLog

_SCALAR_FIELDS = ("name", "icon", "color", "is_active")
_DECIMAL_FIELDS = ("target_amount", "starting_balance")


class GoalsProjector(BaseProjector):
    """
    Builds goals read model from events

    Обрабатывает события:
    - goal_created: создать цель с правилами привязки
    - goal_updated: обновить поля; allocations заменяются целиком
    - goal_completed / goal_reopened: статус выполнения
    - goal_deleted: удалить цель и её правила
    """

    def __init__(self, db):
        super().__init__(db, projector_name="goals")

    def handle_event(self, event: EventLog) -> None:
        if event.event_type == "goal_created":
            self._handle_goal_created(event)
        elif event.event_type == "goal_updated":
            self._handle_goal_updated(event)
        elif event.event_type == "goal_completed":
            self._handle_goal_completed(event)
        elif event.event_type == "goal_reopened":
            self._handle_goal_reopened(event)
        elif event.event_type == "goal_deleted":
            self._handle_goal_deleted(event)

    def _get_goal(self, goal_id: int) -> GoalInfo | None:
        self.db.flush()
        return self.db.query(GoalInfo).filter(GoalInfo.goal_id == goal_id).first()

    def _handle_goal_created(self, event: EventLog) -> None:
        payload = event.payload_json

        if self._get_goal(payload["goal_id"]):
            return

        goal = GoalInfo(
            goal_id=payload["goal_id"],
            name=payload["name"],
            target_amount=Decimal(payload["target_amount"]),
            target_date=_parse_date(payload.get("target_date")),
            starting_balance=Decimal(payload.get("starting_balance", "0")),
            icon=payload["icon"],
            color=payload["color"],
            is_active=True,
            is_completed=False,
            created_at=datetime.fromisoformat(payload["created_at"])
        )
        self.db.add(goal)
        self._replace_allocations(goal.goal_id, payload.get("allocations") or [])
        self.db.flush()

    def _handle_goal_updated(self, event: EventLog) -> None:
        payload = event.payload_json

        goal = self._get_goal(payload["goal_id"])
        if not goal:
            return

        for name in _SCALAR_FIELDS:
            if name in payload:
                setattr(goal, name, payload[name])
        for name in _DECIMAL_FIELDS:
            if name in payload:
                setattr(goal, name, Decimal(payload[name]))
        if "target_date" in payload:
            goal.target_date = _parse_date(payload["target_date"])
        if "allocations" in payload:
            self._replace_allocations(goal.goal_id, payload["allocations"] or [])

    def _handle_goal_completed(self, event: EventLog) -> None:
        payload = event.payload_json

        goal = self._get_goal(payload["goal_id"])
        if goal:
            goal.is_completed = True
            goal.completed_at = datetime.fromisoformat(payload["completed_at"])

    def _handle_goal_reopened(self, event: EventLog) -> None:
        goal = self._get_goal(event.payload_json["goal_id"])
        if goal:
            goal.is_completed = False
            goal.completed_at = None

    def _handle_goal_deleted(self, event: EventLog) -> None:
        goal_id = event.payload_json["goal_id"]
        self.db.flush()
        self.db.query(GoalAllocationInfo).filter(GoalAllocationInfo.goal_id == goal_id).delete()
        self.db.query(GoalInfo).filter(GoalInfo.goal_id == goal_id).delete()

    def _replace_allocations(self, goal_id: int, allocations: list[dict]) -> None:
        self.db.query(GoalAllocationInfo).filter(GoalAllocationInfo.goal_id == goal_id).delete()
        self.db.flush()
        for position, item in enumerate(allocations):
            self.db.add(GoalAllocationInfo(
                goal_id=goal_id,
                position=position,
                account_id=item["account_id"],
                allocation_type=item["allocation_type"],
                allocation_value=Decimal(item["allocation_value"]),
            ))

    def reset(self) -> None:
        self.db.query(GoalAllocationInfo).delete()
        self.db.query(GoalInfo).delete()
        super().reset()


def _parse_date(value: str | None) -> date | None:
    return date.fromisoformat(value) if value else None
