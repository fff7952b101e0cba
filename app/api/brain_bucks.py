"""Brain Bucks API endpoints."""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, get_ledger
from app.models.user import User
from app.schemas.brain_bucks import BalanceResponse, LedgerEntryResponse, LedgerListResponse
from app.services.brain_bucks import BrainBucksLedger

router = APIRouter(prefix="/brain-bucks", tags=["brain-bucks"])


@router.get("", response_model=BalanceResponse)
def get_balance(
    db: Session = Depends(get_db),
    ledger: BrainBucksLedger = Depends(get_ledger),
    current_user: User = Depends(get_current_user),
):
    """Current balance and the ledger total it is derived from."""
    balance = ledger.get_balance(db, current_user.id)
    ledger_total = ledger.replay_balance(db, current_user.id)
    return BalanceResponse(
        balance=balance,
        ledger_total=ledger_total,
        consistent=balance == ledger_total,
    )


@router.get("/ledger", response_model=LedgerListResponse)
def get_ledger_history(
    limit: int = Query(50, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    ledger: BrainBucksLedger = Depends(get_ledger),
    current_user: User = Depends(get_current_user),
):
    """Ledger history, newest first."""
    entries = ledger.history(db, current_user.id, limit=limit, offset=offset)
    return LedgerListResponse(
        entries=[LedgerEntryResponse.model_validate(e) for e in entries],
        limit=limit,
        offset=offset,
    )


@router.post("/reconcile", response_model=BalanceResponse)
def reconcile_balance(
    db: Session = Depends(get_db),
    ledger: BrainBucksLedger = Depends(get_ledger),
    current_user: User = Depends(get_current_user),
):
    """Rebuild the cached balance from the ledger."""
    balance = ledger.reconcile(db, current_user.id)
    return BalanceResponse(balance=balance, ledger_total=balance, consistent=True)
