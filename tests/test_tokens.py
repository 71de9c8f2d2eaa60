from datetime import timedelta

import pytest

from haven.core.exceptions import InvalidTokenError, TokenExpiredError
from haven.models.enums import UserRole
from haven.services.auth import TokenService


def test_round_trip_carries_user_and_role(tokens):
    credential = tokens.verify(tokens.create_session_token("u1", UserRole.WARDEN))
    assert credential.user_id == "u1"
    assert credential.role_claim == "warden"
    assert credential.expires_at is not None


def test_token_without_role_claim(tokens):
    credential = tokens.verify(tokens.create_session_token("u1"))
    assert credential.role_claim is None


def test_expired_token_is_rejected(tokens):
    token = tokens.create_session_token("u1", UserRole.STUDENT, expires_delta=timedelta(seconds=-5))
    with pytest.raises(TokenExpiredError):
        tokens.verify(token)


def test_foreign_signature_is_rejected(tokens):
    other = TokenService(secret_key="another-secret-key-that-is-long-enough-32b")
    with pytest.raises(InvalidTokenError):
        tokens.verify(other.create_session_token("u1", UserRole.ADMIN))


def test_garbage_token_is_rejected(tokens):
    with pytest.raises(InvalidTokenError):
        tokens.verify("not-a-jwt")
