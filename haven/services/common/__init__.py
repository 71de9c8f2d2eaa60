from haven.services.common.permissions import (
    LANDING_VIEWS,
    LOGIN_VIEW,
    NavigationDecision,
    Principal,
    can_access,
    guard_view,
    landing_view,
    require_admin,
    require_role,
    require_staff,
)

__all__ = [
    "LANDING_VIEWS",
    "LOGIN_VIEW",
    "NavigationDecision",
    "Principal",
    "can_access",
    "guard_view",
    "landing_view",
    "require_admin",
    "require_role",
    "require_staff",
]
