from datetime import date

import pytest

from haven.core.exceptions import ErrorCode, ValidationError
from haven.models import AttendanceStatus, RosterStatus, UserRole
from haven.services.attendance import AttendanceService
from haven.services.auth import RoleResolver, SessionBroker, SessionCredential
from haven.services.base import ServiceError, ServiceResult
from haven.views import AttendanceRosterView, OptimisticCommand

DAY = date(2024, 3, 11)


def warden_in_block_a(user_id):
    """Users whose id starts with "w" are wardens of block A; others have no profile."""
    return (UserRole.WARDEN, "A") if user_id.startswith("w") else None


def failed(message="rejected") -> ServiceResult:
    return ServiceResult.failure(ServiceError.from_app_exception(ValidationError(message)))


# ---------------------------------------------------------------------------
# OptimisticCommand
# ---------------------------------------------------------------------------
def test_confirmed_write_keeps_new_values():
    state = {"s1": "unmarked"}
    command = OptimisticCommand(state, {"s1": "present"}, lambda: ServiceResult.success(None))

    result = command.execute()

    assert result.is_success
    assert state == {"s1": "present"}
    assert not command.rolled_back


def test_rejected_write_restores_previous_values():
    state = {"s1": "absent"}
    seen_during_write = {}

    def remote():
        seen_during_write.update(state)
        return failed()

    command = OptimisticCommand(state, {"s1": "present", "s2": "present"}, remote)
    result = command.execute()

    assert seen_during_write == {"s1": "present", "s2": "present"}
    assert not result.is_success
    assert command.rolled_back
    assert state == {"s1": "absent"}


def test_exception_in_write_restores_and_propagates():
    state = {"title": "old"}

    def remote():
        raise RuntimeError("connection reset")

    with pytest.raises(RuntimeError):
        OptimisticCommand(state, {"title": "new"}, remote).execute()
    assert state == {"title": "old"}


# ---------------------------------------------------------------------------
# AttendanceRosterView
# ---------------------------------------------------------------------------
@pytest.fixture
def broker():
    return SessionBroker()


@pytest.fixture
def resolver(broker):
    resolver = RoleResolver(broker, profile_lookup=warden_in_block_a)
    resolver.start()
    return resolver


@pytest.fixture
def roster_view(db, resolver, broker):
    broker.login(SessionCredential("warden-1", "warden"))
    view = AttendanceRosterView(resolver, AttendanceService(db), DAY)
    yield view
    view.close()


def test_view_guard_follows_session(broker, resolver, db):
    view = AttendanceRosterView(resolver, AttendanceService(db), DAY)
    assert view.redirect_to == "/login"

    broker.login(SessionCredential("u1", "student"))
    assert view.redirect_to == "/student"
    assert view.refresh().error_code is ErrorCode.UNAUTHORIZED

    broker.login(SessionCredential("w1", "warden"))
    assert view.allowed
    assert view.block == "A"


def test_roster_view_marks_optimistically(db, factory, roster_view):
    room = factory.room(block="A")
    s1, s2 = factory.student(room=room), factory.student(room=room)

    assert roster_view.refresh().is_success
    assert roster_view.statuses == {s1.id: RosterStatus.UNMARKED, s2.id: RosterStatus.UNMARKED}

    assert roster_view.mark(s1.id, AttendanceStatus.ABSENT).is_success
    assert roster_view.statuses[s1.id] is RosterStatus.ABSENT

    assert roster_view.mark_all_present().is_success
    assert set(roster_view.statuses.values()) == {RosterStatus.PRESENT}


def test_roster_view_reverts_rejected_mark(factory, roster_view):
    outsider = factory.student(room=factory.room(block="B"))
    roster_view.refresh()

    result = roster_view.mark(outsider.id, AttendanceStatus.PRESENT)

    assert result.error_code is ErrorCode.FORBIDDEN
    assert outsider.id not in roster_view.statuses
    assert roster_view.error_message == result.message


def test_logout_clears_roster(factory, broker, roster_view):
    factory.student(room=factory.room(block="A"))
    roster_view.refresh()
    assert roster_view.statuses

    broker.logout()

    assert roster_view.statuses == {}
    assert roster_view.redirect_to == "/login"


def test_closed_view_stops_following_session(db, broker, resolver):
    view = AttendanceRosterView(resolver, AttendanceService(db), DAY)
    view.close()

    broker.login(SessionCredential("w1", "warden"))

    assert view.principal is None
