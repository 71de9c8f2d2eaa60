"""
Signed session token management.

Issues and verifies HS256 JWTs carrying the user id (``sub``) and the
role claim consumed by the role resolver.
"""

import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import jwt

from haven.config.settings import Settings, get_settings
from haven.core.exceptions import InvalidTokenError, TokenExpiredError
from haven.models.enums import UserRole
from haven.services.auth.session_broker import SessionCredential

logger = logging.getLogger(__name__)


class TokenService:
    """
    JWT token manager for session credentials.
    """

    def __init__(
        self,
        secret_key: Optional[str] = None,
        algorithm: Optional[str] = None,
        access_token_expire_minutes: Optional[int] = None,
        settings: Optional[Settings] = None,
    ):
        settings = settings or get_settings()
        self.secret_key = secret_key or settings.JWT_SECRET_KEY
        self.algorithm = algorithm or settings.JWT_ALGORITHM
        self.access_token_expire_minutes = (
            access_token_expire_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES
        )

    def create_session_token(
        self,
        user_id: str,
        role: Optional[UserRole] = None,
        expires_delta: Optional[timedelta] = None,
        additional_claims: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Create a signed session token.

        Args:
            user_id: User identifier
            role: Role claim; omitted from the token when None
            expires_delta: Custom expiration time
            additional_claims: Extra claims to include
        """
        now = datetime.now(timezone.utc)
        expire = now + (expires_delta or timedelta(minutes=self.access_token_expire_minutes))

        payload: Dict[str, Any] = {
            "sub": str(user_id),
            "iat": now,
            "exp": expire,
            "jti": secrets.token_hex(16),
        }
        if role is not None:
            payload["role"] = role.value
        if additional_claims:
            payload.update(additional_claims)

        token = jwt.encode(payload, self.secret_key, algorithm=self.algorithm)
        logger.debug(f"Session token created for user {user_id}")
        return token

    def verify(self, token: str) -> SessionCredential:
        """
        Verify a token and return the credential it carries.

        Raises:
            TokenExpiredError: If the token is expired
            InvalidTokenError: If the token is malformed or badly signed
        """
        try:
            payload = jwt.decode(token, self.secret_key, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as e:
            logger.warning("Token verification failed: token expired")
            raise TokenExpiredError() from e
        except jwt.InvalidTokenError as e:
            logger.warning(f"Token verification failed: {e}")
            raise InvalidTokenError(reason=str(e)) from e

        user_id = payload.get("sub")
        if not user_id:
            raise InvalidTokenError(reason="missing subject")

        exp = payload.get("exp")
        return SessionCredential(
            user_id=str(user_id),
            role_claim=payload.get("role"),
            expires_at=datetime.fromtimestamp(exp, tz=timezone.utc) if exp else None,
        )
