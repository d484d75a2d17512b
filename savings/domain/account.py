"""
Account domain entity - snapshot of a ledger account balance
"""
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional
from datetime import datetime, timezone


@dataclass(frozen=True)
class Account:
    """
    Account snapshot (read-only)

    Счета принадлежат внешнему леджеру: сервис получает последний известный
    баланс и никогда не меняет его сам. Один снапшот используется на весь
    проход пересчёта целей.
    """
    account_id: str
    name: str
    balance: Decimal
    account_type: Optional[str] = None

    @staticmethod
    def sync(
        account_id: str,
        name: str,
        balance: str,
        account_type: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Создать событие account_synced

        Args:
            account_id: ID счёта во внешнем леджере
            name: Название счёта
            balance: Текущий баланс (строка для Decimal)
            account_type: Тип счёта (checking, savings, ...)

        Returns:
            Event payload для сохранения в event_log
        """
        return {
            "account_id": account_id,
            "name": name,
            "balance": balance,
            "account_type": account_type,
            "synced_at": datetime.now(timezone.utc).isoformat()
        }

    @staticmethod
    def remove(account_id: str) -> Dict[str, Any]:
        """Создать событие account_removed"""
        return {
            "account_id": account_id,
            "removed_at": datetime.now(timezone.utc).isoformat()
        }
