"""Rewards Vault API endpoints."""
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, get_ledger
from app.models.user import User
from app.schemas.reward import (
    RewardCreate,
    RewardRedeemedResponse,
    RewardResponse,
    SuggestedRewardResponse,
)
from app.services.brain_bucks import BrainBucksLedger
from app.services.reward_catalog import get_suggested_rewards
from app.services.rewards import (
    add_suggested_reward,
    create_reward,
    list_rewards,
    redeem_reward,
)

router = APIRouter(prefix="/rewards", tags=["rewards"])


@router.get("", response_model=list[RewardResponse])
def get_rewards(
    include_redeemed: bool = Query(True, description="Include already redeemed rewards"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """List active rewards, cheapest first."""
    return list_rewards(db, current_user.id, include_redeemed=include_redeemed)


@router.post("", response_model=RewardResponse, status_code=status.HTTP_201_CREATED)
def add_reward(
    reward_data: RewardCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Add a custom reward to the vault."""
    return create_reward(
        db,
        current_user.id,
        title=reward_data.title,
        cost=reward_data.cost,
        category=reward_data.category,
        description=reward_data.description,
    )


@router.get("/suggestions", response_model=list[SuggestedRewardResponse])
def list_suggested_rewards():
    """Starter rewards (no auth required)."""
    return [
        SuggestedRewardResponse(slug=slug, **template)
        for slug, template in get_suggested_rewards().items()
    ]


@router.post("/suggestions/{slug}", response_model=RewardResponse, status_code=status.HTTP_201_CREATED)
def add_suggested(
    slug: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Add a starter reward to the vault."""
    return add_suggested_reward(db, current_user.id, slug)


@router.post("/{reward_id}/redeem", response_model=RewardRedeemedResponse)
def redeem(
    reward_id: str,
    db: Session = Depends(get_db),
    ledger: BrainBucksLedger = Depends(get_ledger),
    current_user: User = Depends(get_current_user),
):
    """Spend Brain Bucks on a reward (409 when the balance is too low)."""
    reward, balance = redeem_reward(db, ledger, current_user, reward_id)
    return RewardRedeemedResponse(
        reward=RewardResponse.model_validate(reward),
        brain_bucks_balance=balance,
    )
