"""
Process-wide session state with an explicit lifecycle.

The broker holds the current credential and notifies subscribers
synchronously whenever it changes (login, logout, external expiry).
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionCredential:
    """
    Verified session credential.

    Attributes:
        user_id: Identity provider user id
        role_claim: Raw role claim; may be missing or unrecognised
        expires_at: Expiry instant, if the credential carries one
    """
    user_id: str
    role_claim: Optional[str] = None
    expires_at: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        if self.expires_at is None:
            return False
        return (now or datetime.now(timezone.utc)) >= self.expires_at


CredentialCallback = Callable[[Optional[SessionCredential]], None]


class SessionBroker:
    """
    Owns the current credential and its change subscription.

    Callbacks run on the publishing thread before ``publish`` returns, so
    every subscriber observes a credential change within the same tick.
    """

    def __init__(self, credential: Optional[SessionCredential] = None):
        self._credential = credential
        self._subscribers: List[CredentialCallback] = []
        self._lock = threading.RLock()

    @property
    def current(self) -> Optional[SessionCredential]:
        return self._credential

    def subscribe(self, callback: CredentialCallback) -> Callable[[], None]:
        """Register ``callback``; returns a function that unsubscribes it."""
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, credential: Optional[SessionCredential]) -> None:
        with self._lock:
            self._credential = credential
            subscribers = list(self._subscribers)
        logger.info(
            "Session changed: %s",
            f"user {credential.user_id}" if credential else "signed out",
        )
        for callback in subscribers:
            callback(credential)

    def login(self, credential: SessionCredential) -> None:
        self.publish(credential)

    def logout(self) -> None:
        self.publish(None)

    def expire_if_due(self, now: Optional[datetime] = None) -> bool:
        """Publish a sign-out if the current credential has expired."""
        credential = self._credential
        if credential is not None and credential.is_expired(now):
            logger.info(f"Session for user {credential.user_id} expired")
            self.publish(None)
            return True
        return False
