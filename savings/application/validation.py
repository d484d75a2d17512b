"""
Goal input validation - runs before anything reaches the engine or the event log
"""
from decimal import Decimal
from typing import Iterable, Mapping

from savings.domain.account import Account
from savings.domain.allocation import AllocationKind, AllocationRule


class GoalValidationError(ValueError):
    """Ошибка валидации цели"""
    pass


class GoalNotFoundError(GoalValidationError):
    """Цель не найдена"""
    pass


def validate_name(name: str) -> str:
    name = name.strip()
    if not name:
        raise GoalValidationError("Название цели не может быть пустым")
    return name


def validate_target_amount(value) -> Decimal:
    amount = Decimal(str(value))
    if amount <= 0:
        raise GoalValidationError("Целевая сумма должна быть больше нуля")
    return amount


def validate_starting_balance(value) -> Decimal:
    amount = Decimal(str(value))
    if amount < 0:
        raise GoalValidationError("Начальный баланс не может быть отрицательным")
    return amount


def validate_allocations(
    rules: Iterable[AllocationRule],
    accounts: Mapping[str, Account]
) -> tuple[AllocationRule, ...]:
    """
    Проверить правила привязки цели к счетам

    - процент в диапазоне 0..100
    - фиксированная сумма >= 0
    - каждый счёт не более одного раза
    - счёт существует

    Returns:
        Правила в исходном порядке

    Raises:
        GoalValidationError: при первом нарушении
    """
    rules = tuple(rules)
    seen: set[str] = set()

    for rule in rules:
        if rule.account_id in seen:
            raise GoalValidationError(f"Счёт {rule.account_id} указан дважды")
        seen.add(rule.account_id)

        if rule.account_id not in accounts:
            raise GoalValidationError(f"Счёт {rule.account_id} не найден")

        if rule.kind is AllocationKind.PERCENTAGE:
            if not Decimal("0") <= rule.value <= Decimal("100"):
                raise GoalValidationError("Процент должен быть от 0 до 100")
        elif rule.value < 0:
            raise GoalValidationError("Фиксированная сумма не может быть отрицательной")

    return rules
