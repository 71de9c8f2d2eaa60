from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from haven.api.deps import get_current_principal, get_db, get_token_service, unwrap
from haven.schemas.profile import PrincipalResponse, SignupRequest
from haven.services.auth import RegistrationService, TokenService
from haven.services.common.permissions import Principal

router = APIRouter()


@router.post("/signup", response_model=PrincipalResponse, status_code=status.HTTP_201_CREATED)
def signup(
    payload: SignupRequest,
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> PrincipalResponse:
    """Create a resident account and return a session token for it."""
    profile = unwrap(RegistrationService(db).signup(payload))
    principal = Principal(user_id=profile.id, role=profile.role)
    return PrincipalResponse(
        user_id=principal.user_id,
        role=principal.role,
        landing_view=principal.landing_view,
        access_token=tokens.create_session_token(profile.id, profile.role),
    )


@router.get("/me", response_model=PrincipalResponse)
def me(principal: Principal = Depends(get_current_principal)) -> PrincipalResponse:
    return PrincipalResponse(
        user_id=principal.user_id,
        role=principal.role,
        assigned_block=principal.assigned_block,
        landing_view=principal.landing_view,
    )
