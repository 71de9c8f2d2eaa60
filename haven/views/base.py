"""
Base class for dashboard views bound to the role resolver.
"""

from typing import Callable, Optional, Tuple

from haven.models.enums import UserRole
from haven.services.auth.role_resolver import RoleResolver
from haven.services.common.permissions import Principal, guard_view


class DashboardView:
    """
    A screen that receives the current principal from the resolver.

    Subclasses set ``required_roles``. When the principal cannot see the
    view, ``redirect_to`` holds the login view or the principal's own
    landing view.
    """

    required_roles: Tuple[UserRole, ...] = ()

    def __init__(self, resolver: RoleResolver):
        self.principal: Optional[Principal] = None
        self.redirect_to: Optional[str] = None
        self.error_message: Optional[str] = None
        self._detach: Optional[Callable[[], None]] = resolver.add_listener(self._on_principal)

    @property
    def allowed(self) -> bool:
        return self.redirect_to is None

    def _on_principal(self, principal: Optional[Principal]) -> None:
        self.principal = principal
        self.redirect_to = guard_view(principal, self.required_roles).redirect_to
        self.on_principal_change(principal)

    def on_principal_change(self, principal: Optional[Principal]) -> None:
        pass

    def close(self) -> None:
        """Detach from the resolver. Writes already issued still complete."""
        if self._detach is not None:
            self._detach()
            self._detach = None
