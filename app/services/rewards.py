"""Rewards Vault service."""
import logging
from datetime import datetime

from sqlalchemy.orm import Session

from app.database import commit_or_rollback
from app.errors import NotFoundError, ValidationError
from app.models.reward import Reward
from app.models.user import User
from app.services.brain_bucks import BrainBucksLedger
from app.services.reward_catalog import REWARD_CATEGORIES, get_suggested_rewards

logger = logging.getLogger(__name__)

REWARD_REDEEMED = "reward_redeemed"


def get_reward(db: Session, user_id: str, reward_id: str) -> Reward:
    reward = db.query(Reward).filter(Reward.id == reward_id, Reward.user_id == user_id).first()
    if not reward:
        raise NotFoundError("Reward not found")
    return reward


def list_rewards(db: Session, user_id: str, include_redeemed: bool = True) -> list[Reward]:
    """Active rewards, cheapest first."""
    query = db.query(Reward).filter(Reward.user_id == user_id, Reward.is_active == 1)
    if not include_redeemed:
        query = query.filter(Reward.is_redeemed == 0)
    return query.order_by(Reward.cost.asc(), Reward.created_at.asc()).all()


def create_reward(
    db: Session,
    user_id: str,
    title: str,
    cost: int,
    category: str = "treat",
    description: str | None = None,
) -> Reward:
    title = (title or "").strip()
    if not title:
        raise ValidationError("Reward title is required")
    if isinstance(cost, bool) or not isinstance(cost, int) or cost < 1:
        raise ValidationError("Reward cost must be at least 1 Brain Buck")
    if category not in REWARD_CATEGORIES:
        raise ValidationError(f"Unknown reward category: {category}")

    reward = Reward(
        user_id=user_id,
        title=title,
        description=(description or "").strip() or None,
        cost=cost,
        category=category,
    )
    db.add(reward)
    commit_or_rollback(db, "Could not save your reward. Please try again.")
    db.refresh(reward)
    return reward


def add_suggested_reward(db: Session, user_id: str, slug: str) -> Reward:
    template = get_suggested_rewards().get(slug)
    if not template:
        raise NotFoundError("Suggested reward not found")
    return create_reward(db, user_id, **template)


def redeem_reward(
    db: Session,
    ledger: BrainBucksLedger,
    user: User,
    reward_id: str,
) -> tuple[Reward, int]:
    """Spend Brain Bucks on a reward and mark it redeemed, atomically.

    On InsufficientFundsError neither the reward nor the balance changes.
    """
    with ledger.user_transaction(db, user.id):
        reward = get_reward(db, user.id, reward_id)
        if not reward.is_active:
            raise ValidationError("Reward is no longer available")
        if reward.is_redeemed:
            raise ValidationError("Reward was already redeemed")

        # Only one caller, in any process, can flip is_redeemed from 0 to 1
        claimed = db.query(Reward).filter(
            Reward.id == reward.id,
            Reward.user_id == user.id,
            Reward.is_active == 1,
            Reward.is_redeemed == 0,
        ).update(
            {Reward.is_redeemed: 1, Reward.redeemed_at: datetime.utcnow().isoformat()},
            synchronize_session=False,
        )
        if not claimed:
            raise ValidationError("Reward was already redeemed")

        balance = ledger.debit(db, user.id, reward.cost, REWARD_REDEEMED, f"Redeemed: {reward.title}", reference_id=reward.id)

    db.refresh(reward)
    logger.info("User %s redeemed reward %s for %s Brain Bucks", user.id, reward.id, reward.cost)
    return reward, balance
