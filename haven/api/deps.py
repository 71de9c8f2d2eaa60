# haven/api/deps.py
from __future__ import annotations

from typing import Any, Callable, Generator, Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from haven.config.database import get_session_factory
from haven.config.settings import Settings, get_settings
from haven.core.exceptions import ForbiddenError, UnauthorizedError
from haven.models.enums import UserRole
from haven.services.auth import TokenService, resolve_principal, session_profile_lookup
from haven.services.base import ServiceResult
from haven.services.common.permissions import Principal, can_access

bearer_scheme = HTTPBearer(auto_error=False)


# ------------------------------------------------------------------ #
# DB / settings
# ------------------------------------------------------------------ #
def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a SQLAlchemy Session from the shared factory.
    """
    db = get_session_factory()()
    try:
        yield db
    finally:
        db.close()


def get_app_settings() -> Settings:
    return get_settings()


def get_token_service(settings: Settings = Depends(get_app_settings)) -> TokenService:
    return TokenService(settings=settings)


# ------------------------------------------------------------------ #
# Current principal
# ------------------------------------------------------------------ #
def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> Principal:
    """
    Verify the bearer token and resolve the acting principal.

    Raises 401 when the token is missing, invalid or expired.
    """
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Missing bearer token")

    credential = tokens.verify(credentials.credentials)
    return resolve_principal(credential, session_profile_lookup(db))


def require_roles(*roles: UserRole) -> Callable[..., Principal]:
    """
    Dependency factory gating a route to ``roles`` (admin always passes).

    Example:
        @router.get("/overview")
        def overview(principal: Principal = Depends(require_roles(UserRole.WARDEN))):
            ...
    """

    def dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        if not can_access(principal.role, roles):
            exc = ForbiddenError(
                f"Role '{principal.role.value}' cannot access this resource",
                role=principal.role.value,
                required_roles=[r.value for r in roles],
            )
            exc.details["redirect_to"] = principal.landing_view
            raise exc
        return principal

    return dependency


# ------------------------------------------------------------------ #
# Result handling
# ------------------------------------------------------------------ #
def unwrap(result: ServiceResult) -> Any:
    """Return the result data or raise an HTTPException carrying the service error."""
    if result.is_success:
        return result.data
    error = result.error
    raise HTTPException(
        status_code=error.status_code if error else 500,
        detail=error.to_dict() if error else {"message": result.message},
    )


__all__ = [
    "get_db",
    "get_app_settings",
    "get_token_service",
    "get_current_principal",
    "require_roles",
    "unwrap",
]
