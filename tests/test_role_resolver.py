from datetime import datetime, timedelta, timezone

from haven.models.enums import UserRole
from haven.services.auth import (
    ProfileService,
    RoleResolver,
    SessionBroker,
    SessionCredential,
    factory_profile_lookup,
    resolve_principal,
)


def test_resolve_principal_defaults_to_student():
    principal = resolve_principal(SessionCredential("u1", None))
    assert principal.role is UserRole.STUDENT
    assert principal.assigned_block is None


def test_resolve_principal_without_credential_is_anonymous():
    assert resolve_principal(None) is None


def test_warden_block_comes_from_profile(factory, session_factory):
    profile = factory.profile(UserRole.WARDEN, assigned_block="B")
    principal = resolve_principal(
        SessionCredential(profile.id, "warden"),
        factory_profile_lookup(session_factory),
    )
    assert principal.role is UserRole.WARDEN
    assert principal.assigned_block == "B"


def test_claim_used_when_no_profile_exists(session_factory):
    principal = resolve_principal(
        SessionCredential("ghost", "admin"),
        factory_profile_lookup(session_factory),
    )
    assert principal.role is UserRole.ADMIN


def test_stored_role_overrides_stale_claim_after_demotion(factory, session_factory, admin):
    warden = factory.profile(UserRole.WARDEN, assigned_block="A")
    assert ProfileService(factory.session).change_role(admin, warden.id, UserRole.STUDENT).is_success

    principal = resolve_principal(
        SessionCredential(warden.id, "warden"),
        factory_profile_lookup(session_factory),
    )
    assert principal.role is UserRole.STUDENT
    assert principal.assigned_block is None


def test_stored_role_applies_after_promotion(factory, session_factory, admin):
    student = factory.profile(UserRole.STUDENT)
    assert ProfileService(factory.session).change_role(admin, student.id, UserRole.WARDEN).is_success

    principal = resolve_principal(
        SessionCredential(student.id, "student"),
        factory_profile_lookup(session_factory),
    )
    assert principal.role is UserRole.WARDEN


def test_block_ignored_for_non_wardens():
    principal = resolve_principal(SessionCredential("a1", "admin"), lambda uid: (UserRole.ADMIN, "C"))
    assert principal.role is UserRole.ADMIN
    assert principal.assigned_block is None


def test_resolver_propagates_every_credential_change_to_all_views():
    broker = SessionBroker()
    resolver = RoleResolver(broker, profile_lookup=lambda uid: (UserRole.WARDEN, "A"))
    resolver.start()

    seen_a, seen_b = [], []
    resolver.add_listener(seen_a.append)
    resolver.add_listener(seen_b.append)

    broker.login(SessionCredential("w1", "warden"))
    assert seen_a[-1].role is UserRole.WARDEN
    assert seen_a[-1].assigned_block == "A"
    assert seen_b[-1] == seen_a[-1]

    broker.logout()
    assert seen_a[-1] is None
    assert seen_b[-1] is None
    # initial (anonymous), login, logout
    assert len(seen_a) == 3


def test_expired_session_signs_out():
    broker = SessionBroker()
    resolver = RoleResolver(broker)
    resolver.start()

    past = datetime.now(timezone.utc) - timedelta(minutes=1)
    broker.login(SessionCredential("u1", "student", expires_at=past))
    assert resolver.role is UserRole.STUDENT

    assert broker.expire_if_due() is True
    assert resolver.principal is None


def test_stopped_resolver_ignores_changes():
    broker = SessionBroker()
    resolver = RoleResolver(broker)
    resolver.start()
    resolver.stop()

    broker.login(SessionCredential("a1", "admin"))
    assert resolver.principal is None


def test_removed_listener_stops_receiving():
    broker = SessionBroker()
    resolver = RoleResolver(broker)
    resolver.start()

    seen = []
    remove = resolver.add_listener(seen.append)
    remove()
    broker.login(SessionCredential("a1", "admin"))
    assert seen == [None]
