"""
Account API endpoints (ledger snapshot in, balances out)
"""
from decimal import Decimal

from fastapi import APIRouter, Depends
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from savings.api.deps import get_db
from savings.application.accounts import SyncAccountsUseCase
from savings.domain.account import Account
from savings.readmodels.snapshots import load_accounts
from savings.utils.validation import validate_and_normalize_amount


router = APIRouter(prefix="/api/v1/accounts", tags=["accounts"])


# === Request/Response models ===

class AccountPayload(BaseModel):
    account_id: str
    name: str
    balance: str  # Decimal as string
    account_type: str | None = None

    @field_validator("balance")
    @classmethod
    def validate_balance(cls, v: str) -> str:
        return validate_and_normalize_amount(v, max_decimal_places=2)


class SyncAccountsRequest(BaseModel):
    accounts: list[AccountPayload]
    remove_missing: bool = True


class SyncAccountsResponse(BaseModel):
    changes: int


# === Endpoints ===

@router.get("/", response_model=list[AccountPayload])
def list_accounts(db: Session = Depends(get_db)):
    """Список счетов с последними балансами"""
    return [
        AccountPayload(
            account_id=a.account_id,
            name=a.name,
            balance=str(a.balance),
            account_type=a.account_type
        )
        for a in load_accounts(db).values()
    ]


@router.put("/", response_model=SyncAccountsResponse)
def sync_accounts(req: SyncAccountsRequest, db: Session = Depends(get_db)):
    """Записать снапшот счетов из леджера"""
    use_case = SyncAccountsUseCase(db)
    changes = use_case.execute(
        [
            Account(
                account_id=a.account_id,
                name=a.name,
                balance=Decimal(a.balance),
                account_type=a.account_type
            )
            for a in req.accounts
        ],
        remove_missing=req.remove_missing
    )
    return SyncAccountsResponse(changes=changes)
