"""SQLAlchemy models package."""
from app.models.account import Account
from app.models.auth import RefreshSession
from app.models.user import User, UserPreferences
from app.models.task import Task
from app.models.memory import MemoryEntry
from app.models.reward import Reward
from app.models.ledger import LedgerEntry

__all__ = [
    "Account",
    "RefreshSession",
    "User",
    "UserPreferences",
    "Task",
    "MemoryEntry",
    "Reward",
    "LedgerEntry",
]
