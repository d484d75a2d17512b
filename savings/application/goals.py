"""
Goal use cases - business logic for savings goal operations

Every use case validates a whole candidate goal, appends one event,
commits and runs GoalsProjector so the read model is current on return.
"""
import logging
from datetime import date, datetime, timezone
from typing import Iterable

from sqlalchemy.orm import Session

from savings.application.validation import (
    GoalNotFoundError,
    GoalValidationError,
    validate_allocations,
    validate_name,
    validate_starting_balance,
    validate_target_amount,
)
from savings.domain.allocation import AllocationRule
from savings.domain.goal import DEFAULT_COLOR, DEFAULT_ICON, Goal
from savings.engine.allocations import resolve_current_amount
from savings.infrastructure.eventlog.repository import EventLogRepository
from savings.readmodels.projectors.goals import GoalsProjector
from savings.readmodels.snapshots import load_accounts, load_goal

logger = logging.getLogger(__name__)


class _GoalUseCase:
    def __init__(self, db: Session):
        self.db = db
        self.event_repo = EventLogRepository(db)

    def _require_goal(self, goal_id: int) -> Goal:
        goal = load_goal(self.db, goal_id)
        if goal is None:
            raise GoalNotFoundError(f"Цель #{goal_id} не найдена")
        return goal

    def _commit(self, event_type: str, payload: dict, idempotency_key: str | None = None) -> None:
        self.event_repo.append_event(
            event_type=event_type,
            payload=payload,
            idempotency_key=idempotency_key
        )
        self.db.commit()
        GoalsProjector(self.db).run()


class CreateGoalUseCase(_GoalUseCase):
    """Use case: Создать новую цель накопления"""

    def execute(
        self,
        name: str,
        target_amount: str,
        target_date: date | None = None,
        allocations: Iterable[AllocationRule] = (),
        starting_balance: str | None = None,
        icon: str = DEFAULT_ICON,
        color: str = DEFAULT_COLOR,
        now: datetime | None = None
    ) -> int:
        """
        Создать цель

        Args:
            name: Название цели
            target_amount: Целевая сумма
            target_date: Дедлайн (опционально)
            allocations: Правила привязки к счетам (пусто - ручной учёт)
            starting_balance: Сумма на старте. None - для привязанной цели
                берётся текущая сумма по счетам (прогресс считается с момента
                создания), для ручной - 0
            icon: Иконка
            color: Цвет
            now: Время создания (default: сейчас, UTC)

        Returns:
            goal_id: ID созданной цели
        """
        created_at = now or datetime.now(timezone.utc)
        accounts = load_accounts(self.db)

        candidate = Goal(
            goal_id=self._generate_goal_id(),
            name=validate_name(name),
            target_amount=validate_target_amount(target_amount),
            target_date=target_date,
            allocations=validate_allocations(allocations, accounts),
            icon=icon,
            color=color,
            created_at=created_at,
        )

        if starting_balance is not None:
            start = validate_starting_balance(starting_balance)
        elif not candidate.is_manual:
            start = resolve_current_amount(candidate, accounts)
        else:
            start = validate_starting_balance("0")

        payload = Goal.create(
            goal_id=candidate.goal_id,
            name=candidate.name,
            target_amount=str(candidate.target_amount),
            starting_balance=str(start),
            allocations=candidate.allocations,
            target_date=candidate.target_date,
            icon=candidate.icon,
            color=candidate.color,
            created_at=created_at
        )
        self._commit("goal_created", payload, idempotency_key=f"goal-create-{candidate.goal_id}")

        logger.info("Goal %s created (%d allocation(s))", candidate.goal_id, len(candidate.allocations))
        return candidate.goal_id

    def _generate_goal_id(self) -> int:
        return self.event_repo.count_events(event_types=["goal_created"]) + 1


class UpdateGoalUseCase(_GoalUseCase):
    """Use case: Обновить цель (название, сумма, дедлайн, оформление, активность)"""

    def execute(
        self,
        goal_id: int,
        name: str | None = None,
        target_amount: str | None = None,
        target_date: date | None = ...,  # sentinel: ... means "not provided"
        starting_balance: str | None = None,
        icon: str | None = None,
        color: str | None = None,
        is_active: bool | None = None
    ) -> None:
        self._require_goal(goal_id)

        changes = {}

        if name is not None:
            changes["name"] = validate_name(name)
        if target_amount is not None:
            changes["target_amount"] = str(validate_target_amount(target_amount))
        if target_date is not ...:
            changes["target_date"] = target_date
        if starting_balance is not None:
            changes["starting_balance"] = str(validate_starting_balance(starting_balance))
        if icon is not None:
            changes["icon"] = icon
        if color is not None:
            changes["color"] = color
        if is_active is not None:
            changes["is_active"] = is_active

        if not changes:
            return

        self._commit("goal_updated", Goal.update(goal_id, **changes))


class SetGoalAllocationsUseCase(_GoalUseCase):
    """
    Use case: Заменить правила привязки цели целиком

    Добавление/удаление правила делается на кандидате (Goal.with_allocations),
    сюда приходит готовый список.
    """

    def execute(self, goal_id: int, allocations: Iterable[AllocationRule]) -> None:
        goal = self._require_goal(goal_id)

        if goal.is_completed:
            raise GoalValidationError("Нельзя менять привязки выполненной цели")

        candidate = goal.with_allocations(
            validate_allocations(allocations, load_accounts(self.db))
        )

        self._commit("goal_updated", Goal.update(goal_id, allocations=candidate.allocations))
        logger.info("Goal %s allocations replaced (%d rule(s))", goal_id, len(candidate.allocations))


class CompleteGoalUseCase(_GoalUseCase):
    """Use case: Отметить цель выполненной (действие пользователя, не автоматическое)"""

    def execute(self, goal_id: int, now: datetime | None = None) -> None:
        goal = self._require_goal(goal_id)

        if goal.is_completed:
            raise GoalValidationError("Цель уже выполнена")

        candidate = goal.mark_completed(now or datetime.now(timezone.utc))

        self._commit("goal_completed", Goal.complete(goal_id, completed_at=candidate.completed_at))
        logger.info("Goal %s completed", goal_id)


class ReopenGoalUseCase(_GoalUseCase):
    """Use case: Вернуть выполненную цель в работу"""

    def execute(self, goal_id: int) -> None:
        goal = self._require_goal(goal_id)

        if not goal.is_completed:
            raise GoalValidationError("Цель не выполнена")

        self._commit("goal_reopened", Goal.reopen_event(goal_id))


class DeleteGoalUseCase(_GoalUseCase):
    """Use case: Удалить цель (безусловно и необратимо)"""

    def execute(self, goal_id: int) -> None:
        self._require_goal(goal_id)
        self._commit("goal_deleted", Goal.delete(goal_id))
        logger.info("Goal %s deleted", goal_id)
