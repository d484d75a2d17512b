"""
Allocation rule - a goal's claim on part of one account's balance
"""
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Dict


class AllocationKind(str, Enum):
    PERCENTAGE = "percentage"  # Доля баланса счёта, 0-100
    FIXED = "fixed"            # Фиксированная сумма, не больше баланса счёта


@dataclass(frozen=True)
class AllocationRule:
    """
    Allocation rule (value object)

    Связывает цель со счётом. Для PERCENTAGE value - процент (0-100),
    для FIXED - сумма в валюте счёта (>= 0). Диапазоны проверяет
    application layer, не движок.
    """
    account_id: str
    kind: AllocationKind
    value: Decimal

    @classmethod
    def percentage(cls, account_id: str, value) -> "AllocationRule":
        return cls(account_id=account_id, kind=AllocationKind.PERCENTAGE, value=Decimal(str(value)))

    @classmethod
    def fixed(cls, account_id: str, value) -> "AllocationRule":
        return cls(account_id=account_id, kind=AllocationKind.FIXED, value=Decimal(str(value)))

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "AllocationRule":
        """
        Build a rule from its stored JSON shape

        Example:
            >>> AllocationRule.from_payload(
            ...     {"account_id": "acc-1", "allocation_type": "fixed", "allocation_value": "500"}
            ... )
            AllocationRule(account_id='acc-1', kind=<AllocationKind.FIXED: 'fixed'>, value=Decimal('500'))
        """
        return cls(
            account_id=str(payload["account_id"]),
            kind=AllocationKind(payload["allocation_type"]),
            value=Decimal(str(payload["allocation_value"])),
        )

    def to_payload(self) -> Dict[str, Any]:
        return {
            "account_id": self.account_id,
            "allocation_type": self.kind.value,
            "allocation_value": str(self.value),
        }
