"""
AccountsProjector - builds accounts read model from ledger snapshot events
"""
from decimal import Decimal
from datetime import datetime

from savings.readmodels.projectors.base import BaseProjector
from savings.infrastructure.db.models import AccountInfo, EventLog


class AccountsProjector(BaseProjector):
    """
    Builds accounts read model from events

    Обрабатывает события:
    - account_synced: создать счёт или обновить баланс
    - account_removed: удалить счёт (правила целей на него дают 0)
    """

    def __init__(self, db):
        super().__init__(db, projector_name="accounts")

    def handle_event(self, event: EventLog) -> None:
        if event.event_type == "account_synced":
            self._handle_account_synced(event)
        elif event.event_type == "account_removed":
            self._handle_account_removed(event)

    def _handle_account_synced(self, event: EventLog) -> None:
        payload = event.payload_json

        self.db.flush()
        account = self.db.query(AccountInfo).filter(
            AccountInfo.account_id == payload["account_id"]
        ).first()

        if account is None:
            account = AccountInfo(account_id=payload["account_id"])
            self.db.add(account)

        account.name = payload["name"]
        account.balance = Decimal(payload["balance"])
        account.account_type = payload.get("account_type")
        account.synced_at = datetime.fromisoformat(payload["synced_at"])
        self.db.flush()

    def _handle_account_removed(self, event: EventLog) -> None:
        self.db.flush()
        self.db.query(AccountInfo).filter(
            AccountInfo.account_id == event.payload_json["account_id"]
        ).delete()

    def reset(self) -> None:
        self.db.query(AccountInfo).delete()
        super().reset()
