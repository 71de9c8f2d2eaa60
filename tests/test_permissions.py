import pytest

from haven.core.exceptions import ForbiddenError
from haven.models.enums import UserRole
from haven.services.common.permissions import (
    LANDING_VIEWS,
    LOGIN_VIEW,
    Principal,
    can_access,
    guard_view,
    require_admin,
    require_staff,
)


@pytest.mark.parametrize(
    "role, required, expected",
    [
        (UserRole.ADMIN, [UserRole.WARDEN], True),
        (UserRole.ADMIN, [UserRole.STUDENT], True),
        (UserRole.ADMIN, [], True),
        (UserRole.WARDEN, [UserRole.WARDEN], True),
        (UserRole.WARDEN, [UserRole.STUDENT], False),
        (UserRole.STUDENT, [UserRole.WARDEN, UserRole.ADMIN], False),
        (UserRole.STUDENT, [UserRole.STUDENT], True),
    ],
)
def test_can_access(role, required, expected):
    assert can_access(role, required) is expected


def test_every_role_has_a_landing_view():
    assert set(LANDING_VIEWS) == set(UserRole)


def test_guard_without_principal_goes_to_login():
    decision = guard_view(None, [UserRole.STUDENT])
    assert not decision.allowed
    assert decision.redirect_to == LOGIN_VIEW


def test_guard_denial_redirects_to_own_landing_view():
    student = Principal("u1", UserRole.STUDENT)
    decision = guard_view(student, [UserRole.WARDEN])
    assert not decision.allowed
    assert decision.redirect_to == "/student"


def test_guard_allows_admin_everywhere():
    admin = Principal("a1", UserRole.ADMIN)
    assert guard_view(admin, [UserRole.STUDENT]).allowed
    assert guard_view(admin, [UserRole.WARDEN]).allowed


@pytest.mark.parametrize("claim", [None, "", "superuser", 42])
def test_unknown_role_claim_defaults_to_student(claim):
    assert UserRole.from_claim(claim) is UserRole.STUDENT


def test_role_claim_is_case_insensitive():
    assert UserRole.from_claim(" Warden ") is UserRole.WARDEN


def test_require_helpers_raise_forbidden():
    student = Principal("u1", UserRole.STUDENT)
    warden = Principal("w1", UserRole.WARDEN, "A")

    with pytest.raises(ForbiddenError):
        require_staff(student)
    with pytest.raises(ForbiddenError) as exc_info:
        require_admin(warden, action="delete rooms")

    assert exc_info.value.status_code == 403
    assert exc_info.value.details["role"] == "warden"
    require_staff(warden)
