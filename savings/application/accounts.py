"""
Account use cases - record the ledger's freshest balances
"""
import logging
from typing import Iterable

from sqlalchemy.orm import Session

from savings.domain.account import Account
from savings.infrastructure.eventlog.repository import EventLogRepository
from savings.readmodels.projectors.accounts import AccountsProjector
from savings.readmodels.snapshots import load_accounts

logger = logging.getLogger(__name__)


class SyncAccountsUseCase:
    """
    Use case: Синхронизировать снапшот счетов из леджера

    Счёт, которого больше нет в снапшоте, удаляется (remove_missing=True);
    правила целей на него после этого дают 0.
    """

    def __init__(self, db: Session):
        self.db = db
        self.event_repo = EventLogRepository(db)

    def execute(self, accounts: Iterable[Account], remove_missing: bool = True) -> int:
        """
        Returns:
            Количество записанных событий
        """
        known = load_accounts(self.db)
        seen: set[str] = set()
        written = 0

        for account in accounts:
            seen.add(account.account_id)
            current = known.get(account.account_id)
            if current == account:
                continue
            self.event_repo.append_event(
                event_type="account_synced",
                payload=Account.sync(
                    account_id=account.account_id,
                    name=account.name,
                    balance=str(account.balance),
                    account_type=account.account_type
                )
            )
            written += 1

        if remove_missing:
            for account_id in known.keys() - seen:
                self.event_repo.append_event(
                    event_type="account_removed",
                    payload=Account.remove(account_id)
                )
                written += 1

        self.db.commit()
        AccountsProjector(self.db).run()

        logger.info("Accounts sync: %d change(s) from %d account(s)", written, len(seen))
        return written
