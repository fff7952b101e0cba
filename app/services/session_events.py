"""Session change notifications (sign up, sign in, refresh, sign out)."""
import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime

logger = logging.getLogger(__name__)

SIGNED_UP = "signed_up"
SIGNED_IN = "signed_in"
TOKEN_REFRESHED = "token_refreshed"
SIGNED_OUT = "signed_out"


@dataclass(frozen=True)
class SessionEvent:
    """One change in an account's session state."""

    event: str
    account_id: str
    occurred_at: str = field(default_factory=lambda: datetime.utcnow().isoformat())


SessionListener = Callable[[SessionEvent], None]


class SessionEventBus:
    """Synchronous fan-out of session events to subscribed callbacks."""

    def __init__(self) -> None:
        self._listeners: list[SessionListener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that unregisters it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def publish(self, event: str, account_id: str) -> SessionEvent:
        session_event = SessionEvent(event=event, account_id=account_id)
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(session_event)
            except Exception:
                # The session change is already committed at this point
                logger.exception("Session listener %r failed on %s", listener, event)
        return session_event


def log_session_event(session_event: SessionEvent) -> None:
    """Default listener installed by the app."""
    logger.info("Session %s for account %s", session_event.event, session_event.account_id)
