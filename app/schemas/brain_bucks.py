"""Brain Bucks schemas."""
from pydantic import BaseModel


class LedgerEntryResponse(BaseModel):
    """One ledger entry."""

    id: str
    action_type: str
    amount: int
    description: str | None
    reference_id: str | None
    balance_after: int
    created_at: str

    class Config:
        from_attributes = True


class BalanceResponse(BaseModel):
    """Cached balance next to the ledger sum it must equal."""

    balance: int
    ledger_total: int
    consistent: bool


class LedgerListResponse(BaseModel):
    """Paginated ledger history."""

    entries: list[LedgerEntryResponse]
    limit: int
    offset: int
