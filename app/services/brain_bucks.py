"""Brain Bucks ledger: the point balance as a materialized view over the ledger.

Every credit or debit runs inside ``BrainBucksLedger.user_transaction``, which

* serializes writers for the same user within this process with a per-user lock,
* changes the cached balance with a single ``UPDATE ... SET balance = balance + delta``
  statement (guarded by ``balance >= amount`` for debits), so concurrent writers
  in other processes cannot lose an update either, and
* commits the ledger row, the balance update and whatever else the caller did in
  the block as one database transaction, or rolls all of it back.

Callers that change other state alongside a ledger write (redeeming a reward,
completing a task) guard that change with a conditional UPDATE too, since the
per-user lock only covers this process.

The cached ``users.brain_bucks_balance`` must always equal the sum of the user's
``brain_bucks_ledger.amount`` values; ``replay_balance`` and ``reconcile`` exist
to check and repair that.
"""
import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import func, literal_column
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.errors import InsufficientFundsError, NotFoundError, PersistenceError, ValidationError
from app.models.ledger import LedgerEntry
from app.models.user import User

logger = logging.getLogger(__name__)

_ACTIVE_USER_KEY = "brain_bucks_user_transaction"

# Insertion order breaks created_at ties; the ledger is append-only
_LEDGER_ROWID = literal_column("brain_bucks_ledger.rowid")


class BrainBucksLedger:
    """Credits and debits Brain Bucks for users, one user at a time."""

    def __init__(self) -> None:
        self._locks: dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, user_id: str) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = self._locks[user_id] = threading.Lock()
            return lock

    @contextmanager
    def user_transaction(self, db: Session, user_id: str) -> Iterator[None]:
        """Run the block as one serialized, all-or-nothing transaction for ``user_id``.

        Nested blocks for the same user on the same session join the outer one.
        Opening a block for a different user inside an open block is an error.
        """
        active = db.info.get(_ACTIVE_USER_KEY)
        if active == user_id:
            yield
            return
        if active is not None:
            raise RuntimeError(
                f"Brain Bucks transaction for user {active} is still open; "
                f"cannot start one for user {user_id} on the same session"
            )

        with self._lock_for(user_id):
            db.info[_ACTIVE_USER_KEY] = user_id
            try:
                yield
                db.commit()
            except SQLAlchemyError as exc:
                db.rollback()
                logger.error("Brain Bucks transaction failed for user %s", user_id, exc_info=exc)
                raise PersistenceError("Could not save your changes. Please try again.") from exc
            except Exception:
                db.rollback()
                raise
            finally:
                db.info.pop(_ACTIVE_USER_KEY, None)

    def credit(
        self,
        db: Session,
        user_id: str,
        amount: int,
        action_type: str,
        description: str | None = None,
        reference_id: str | None = None,
    ) -> int:
        """Add ``amount`` Brain Bucks and return the new balance.

        Non-positive amounts are rejected with ValidationError.
        """
        _check_amount(amount)
        with self.user_transaction(db, user_id):
            updated = db.query(User).filter(User.id == user_id).update(
                {User.brain_bucks_balance: User.brain_bucks_balance + amount},
                synchronize_session=False,
            )
            if not updated:
                raise NotFoundError("Profile not found")
            balance = self._append(db, user_id, amount, action_type, description, reference_id)

        logger.info("Credited %s Brain Bucks to user %s (%s), balance %s", amount, user_id, action_type, balance)
        return balance

    def debit(
        self,
        db: Session,
        user_id: str,
        amount: int,
        action_type: str,
        description: str | None = None,
        reference_id: str | None = None,
    ) -> int:
        """Spend ``amount`` Brain Bucks and return the new balance.

        Raises InsufficientFundsError, writing nothing, when the balance is too low.
        """
        _check_amount(amount)
        with self.user_transaction(db, user_id):
            updated = db.query(User).filter(
                User.id == user_id,
                User.brain_bucks_balance >= amount,
            ).update(
                {User.brain_bucks_balance: User.brain_bucks_balance - amount},
                synchronize_session=False,
            )
            if not updated:
                balance = self.get_balance(db, user_id)
                logger.warning(
                    "Insufficient Brain Bucks for user %s: balance %s, required %s",
                    user_id, balance, amount,
                )
                raise InsufficientFundsError(balance=balance, required=amount)
            balance = self._append(db, user_id, -amount, action_type, description, reference_id)

        logger.info("Debited %s Brain Bucks from user %s (%s), balance %s", amount, user_id, action_type, balance)
        return balance

    def get_balance(self, db: Session, user_id: str) -> int:
        """Return the cached balance."""
        balance = db.query(User.brain_bucks_balance).filter(User.id == user_id).scalar()
        if balance is None:
            raise NotFoundError("Profile not found")
        return balance

    def replay_balance(self, db: Session, user_id: str) -> int:
        """Return the balance recomputed from every ledger entry."""
        return db.query(func.coalesce(func.sum(LedgerEntry.amount), 0)).filter(
            LedgerEntry.user_id == user_id,
        ).scalar()

    def reconcile(self, db: Session, user_id: str) -> int:
        """Overwrite the cached balance with the ledger sum and return it."""
        with self.user_transaction(db, user_id):
            cached = self.get_balance(db, user_id)
            replayed = self.replay_balance(db, user_id)
            if cached != replayed:
                logger.warning(
                    "Brain Bucks drift for user %s: cached %s, ledger %s",
                    user_id, cached, replayed,
                )
                db.query(User).filter(User.id == user_id).update(
                    {User.brain_bucks_balance: replayed},
                    synchronize_session=False,
                )
        return replayed

    def history(self, db: Session, user_id: str, limit: int = 50, offset: int = 0) -> list[LedgerEntry]:
        """Newest-first ledger entries for a user."""
        return (
            db.query(LedgerEntry)
            .filter(LedgerEntry.user_id == user_id)
            .order_by(LedgerEntry.created_at.desc(), _LEDGER_ROWID.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def _append(
        self,
        db: Session,
        user_id: str,
        amount: int,
        action_type: str,
        description: str | None,
        reference_id: str | None,
    ) -> int:
        balance = self.get_balance(db, user_id)
        db.add(LedgerEntry(
            user_id=user_id,
            action_type=action_type,
            amount=amount,
            description=description,
            reference_id=reference_id,
            balance_after=balance,
        ))
        db.flush()

        # Keep any loaded profile in step with the UPDATE above
        for obj in list(db):
            if isinstance(obj, User) and obj.id == user_id:
                db.expire(obj, ["brain_bucks_balance"])
        return balance


def _check_amount(amount: int) -> None:
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        raise ValidationError("Brain Bucks amount must be a positive whole number")
