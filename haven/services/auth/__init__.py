from haven.services.auth.session_broker import SessionBroker, SessionCredential
from haven.services.auth.token_service import TokenService
from haven.services.auth.role_resolver import (
    RoleResolver,
    factory_profile_lookup,
    resolve_principal,
    session_profile_lookup,
)
from haven.services.auth.registration_service import RegistrationService
from haven.services.auth.profile_service import ProfileService

__all__ = [
    "SessionBroker",
    "SessionCredential",
    "TokenService",
    "RoleResolver",
    "resolve_principal",
    "session_profile_lookup",
    "factory_profile_lookup",
    "RegistrationService",
    "ProfileService",
]
