"""
Identity & role resolution.

Turns a session credential into a ``Principal`` and keeps every open view
informed of the current principal as the session changes.
"""

import logging
from typing import Callable, List, Optional, Tuple

from sqlalchemy.orm import Session, sessionmaker

from haven.models.enums import UserRole
from haven.models.profile import Profile
from haven.services.auth.session_broker import SessionBroker, SessionCredential
from haven.services.common.permissions import Principal

logger = logging.getLogger(__name__)

# user id -> (stored role, assigned block), or None when no profile exists
ProfileLookup = Callable[[str], Optional[Tuple[UserRole, Optional[str]]]]
PrincipalListener = Callable[[Optional[Principal]], None]


def resolve_principal(
    credential: Optional[SessionCredential],
    profile_lookup: Optional[ProfileLookup] = None,
) -> Optional[Principal]:
    """
    Resolve the acting principal for a credential.

    The stored profile decides the role and block, so role changes made by
    an admin apply to sessions already issued. Without a profile the
    credential's role claim is used, and a missing or unrecognised claim
    resolves to ``student``.
    """
    if credential is None:
        return None

    claimed = UserRole.from_claim(credential.role_claim)
    stored = profile_lookup(credential.user_id) if profile_lookup is not None else None

    if stored is None:
        if credential.role_claim is not None and claimed.value != str(credential.role_claim).strip().lower():
            logger.warning(
                f"Unrecognised role claim '{credential.role_claim}' for user "
                f"{credential.user_id}; defaulting to student"
            )
        return Principal(user_id=credential.user_id, role=claimed)

    role, block = stored
    if role is not claimed:
        logger.warning(
            f"Role claim '{credential.role_claim}' for user {credential.user_id} "
            f"does not match stored role '{role.value}'; using stored role"
        )
    return Principal(
        user_id=credential.user_id,
        role=role,
        assigned_block=block if role is UserRole.WARDEN else None,
    )


def session_profile_lookup(session: Session) -> ProfileLookup:
    """Profile lookup reading ``profiles`` through ``session``."""

    def lookup(user_id: str) -> Optional[Tuple[UserRole, Optional[str]]]:
        profile = session.get(Profile, user_id)
        if profile is None:
            return None
        return UserRole.from_claim(profile.role), profile.assigned_block

    return lookup


def factory_profile_lookup(session_factory: sessionmaker) -> ProfileLookup:
    """Profile lookup that opens a short-lived session per call."""

    def lookup(user_id: str) -> Optional[Tuple[UserRole, Optional[str]]]:
        with session_factory() as session:
            return session_profile_lookup(session)(user_id)

    return lookup


class RoleResolver:
    """
    Sole consumer of the session broker's change subscription.

    Lifecycle: ``start`` once at startup, ``stop`` on teardown. Every
    credential change re-resolves the principal and fans it out to all
    registered listeners synchronously.
    """

    def __init__(self, broker: SessionBroker, profile_lookup: Optional[ProfileLookup] = None):
        self._broker = broker
        self._profile_lookup = profile_lookup
        self._listeners: List[PrincipalListener] = []
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._principal: Optional[Principal] = None

    @property
    def principal(self) -> Optional[Principal]:
        return self._principal

    @property
    def role(self) -> Optional[UserRole]:
        return self._principal.role if self._principal else None

    def start(self) -> Optional[Principal]:
        if self._unsubscribe is None:
            self._unsubscribe = self._broker.subscribe(self._on_credential_change)
        self._on_credential_change(self._broker.current)
        return self._principal

    def stop(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._principal = None

    def add_listener(self, listener: PrincipalListener) -> Callable[[], None]:
        """Register a view; it immediately receives the current principal."""
        self._listeners.append(listener)
        listener(self._principal)

        def remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return remove

    def _on_credential_change(self, credential: Optional[SessionCredential]) -> None:
        self._principal = resolve_principal(credential, self._profile_lookup)
        logger.info(
            "Resolved principal: %s",
            f"{self._principal.user_id} as {self._principal.role.value}" if self._principal else "anonymous",
        )
        for listener in list(self._listeners):
            listener(self._principal)
