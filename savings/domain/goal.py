"""
Goal domain entity - savings goal snapshot and event payloads
"""
from dataclasses import dataclass, field, replace
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Iterable, Optional, Tuple

from savings.domain.allocation import AllocationRule

DEFAULT_ICON = "🎯"
DEFAULT_COLOR = "#3b82f6"


@dataclass(frozen=True)
class Goal:
    """
    Goal domain entity (immutable snapshot)

    Goal не персистится напрямую - use cases генерируют события для event_log,
    read model (GoalInfo) строится projector'ом. Движок получает цели как
    неизменяемые снапшоты: редактирование собирает новую цель-кандидата
    через with_allocations или mark_completed и отправляет её целиком.

    Пустой allocations означает ручной учёт: текущая сумма = starting_balance.
    """
    goal_id: int
    name: str
    target_amount: Decimal
    created_at: datetime
    target_date: Optional[date] = None
    allocations: Tuple[AllocationRule, ...] = field(default_factory=tuple)
    starting_balance: Decimal = Decimal("0")
    icon: str = DEFAULT_ICON
    color: str = DEFAULT_COLOR
    is_active: bool = True
    is_completed: bool = False
    completed_at: Optional[datetime] = None

    @property
    def is_manual(self) -> bool:
        return not self.allocations

    def with_allocations(self, allocations: Iterable[AllocationRule]) -> "Goal":
        return replace(self, allocations=tuple(allocations))

    def mark_completed(self, at: datetime) -> "Goal":
        return replace(self, is_completed=True, completed_at=at)

    # ------------------------------------------------------------------
    # Event payloads
    # ------------------------------------------------------------------

    @staticmethod
    def create(
        goal_id: int,
        name: str,
        target_amount: str,
        starting_balance: str,
        allocations: Iterable[AllocationRule] = (),
        target_date: Optional[date] = None,
        icon: str = DEFAULT_ICON,
        color: str = DEFAULT_COLOR,
        created_at: Optional[datetime] = None
    ) -> Dict[str, Any]:
        """
        Создать событие goal_created

        Args:
            goal_id: ID цели
            name: Название цели
            target_amount: Целевая сумма (строка для Decimal)
            starting_balance: Сумма на момент создания (строка для Decimal)
            allocations: Правила привязки к счетам
            target_date: Дедлайн (опционально)
            icon: Иконка / emoji
            color: Цвет прогресс-бара
            created_at: Время создания (default: now)

        Returns:
            Event payload для сохранения в event_log
        """
        return {
            "goal_id": goal_id,
            "name": name,
            "target_amount": target_amount,
            "starting_balance": starting_balance,
            "allocations": [rule.to_payload() for rule in allocations],
            "target_date": target_date.isoformat() if target_date else None,
            "icon": icon,
            "color": color,
            "created_at": (created_at or datetime.now(timezone.utc)).isoformat()
        }

    @staticmethod
    def update(goal_id: int, **changes) -> Dict[str, Any]:
        """
        Создать событие goal_updated

        Returns:
            Event payload для сохранения в event_log
        """
        payload: Dict[str, Any] = {
            "goal_id": goal_id,
            "updated_at": datetime.now(timezone.utc).isoformat()
        }
        if "allocations" in changes:
            changes["allocations"] = [rule.to_payload() for rule in changes["allocations"]]
        if isinstance(changes.get("target_date"), date):
            changes["target_date"] = changes["target_date"].isoformat()
        payload.update(changes)
        return payload

    @staticmethod
    def complete(goal_id: int, completed_at: Optional[datetime] = None) -> Dict[str, Any]:
        """Создать событие goal_completed"""
        return {
            "goal_id": goal_id,
            "completed_at": (completed_at or datetime.now(timezone.utc)).isoformat()
        }

    @staticmethod
    def reopen_event(goal_id: int) -> Dict[str, Any]:
        """Создать событие goal_reopened"""
        return {
            "goal_id": goal_id,
            "reopened_at": datetime.now(timezone.utc).isoformat()
        }

    @staticmethod
    def delete(goal_id: int) -> Dict[str, Any]:
        """Создать событие goal_deleted"""
        return {
            "goal_id": goal_id,
            "deleted_at": datetime.now(timezone.utc).isoformat()
        }
