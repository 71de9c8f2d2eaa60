# haven/services/common/permissions.py
"""
Role-based access helpers.

The role set is closed ({admin, warden, student}) and ``admin`` satisfies
any role requirement. Denied navigation is answered with the caller's own
landing view rather than an error page.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from haven.core.exceptions import ForbiddenError
from haven.models.enums import UserRole

LOGIN_VIEW = "/login"

LANDING_VIEWS: Dict[UserRole, str] = {
    UserRole.ADMIN: "/admin",
    UserRole.WARDEN: "/warden",
    UserRole.STUDENT: "/student",
}

if set(LANDING_VIEWS) != set(UserRole):
    raise RuntimeError("LANDING_VIEWS must map every UserRole")


STAFF_ROLES = (UserRole.ADMIN, UserRole.WARDEN)


@dataclass(frozen=True)
class Principal:
    """
    The resolved identity acting on the service layer.

    Attributes:
        user_id: Identity provider user id (equals ``Profile.id``)
        role: Resolved role
        assigned_block: Block a warden is responsible for, else None
    """
    user_id: str
    role: UserRole
    assigned_block: Optional[str] = None

    @property
    def is_staff(self) -> bool:
        return self.role.is_staff

    @property
    def landing_view(self) -> str:
        return landing_view(self.role)


@dataclass(frozen=True)
class NavigationDecision:
    """Outcome of a view guard: proceed, or go to ``redirect_to``."""
    allowed: bool
    redirect_to: Optional[str] = None


def can_access(role: UserRole, required_roles: Iterable[UserRole]) -> bool:
    """
    True iff ``role`` is admin or one of ``required_roles``.

    Example:
        >>> can_access(UserRole.ADMIN, [UserRole.WARDEN])
        True
        >>> can_access(UserRole.STUDENT, [UserRole.WARDEN])
        False
    """
    return role is UserRole.ADMIN or role in set(required_roles)


def landing_view(role: UserRole) -> str:
    return LANDING_VIEWS[role]


def guard_view(
    principal: Optional[Principal],
    required_roles: Iterable[UserRole],
) -> NavigationDecision:
    """
    Decide whether a view may render for the current principal.

    No principal sends the caller to the login view; a role without access
    is sent to its own landing view.
    """
    if principal is None:
        return NavigationDecision(allowed=False, redirect_to=LOGIN_VIEW)
    if can_access(principal.role, required_roles):
        return NavigationDecision(allowed=True)
    return NavigationDecision(allowed=False, redirect_to=principal.landing_view)


def require_role(
    principal: Principal,
    allowed_roles: Iterable[UserRole],
    *,
    action: Optional[str] = None,
) -> None:
    """
    Assert that principal may perform an action reserved for ``allowed_roles``.

    Raises:
        ForbiddenError: If principal lacks the role
    """
    allowed = list(allowed_roles)
    if not can_access(principal.role, allowed):
        what = f" to {action}" if action else ""
        raise ForbiddenError(
            f"Role '{principal.role.value}' is not permitted{what}",
            role=principal.role.value,
            required_roles=[r.value for r in allowed],
        )


def require_staff(principal: Principal, *, action: Optional[str] = None) -> None:
    require_role(principal, STAFF_ROLES, action=action)


def require_admin(principal: Principal, *, action: Optional[str] = None) -> None:
    require_role(principal, (UserRole.ADMIN,), action=action)
