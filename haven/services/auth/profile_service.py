"""
Administrator-side profile management: role changes and warden blocks.
"""

from typing import List, Optional

from sqlalchemy.orm import Session

from haven.config.settings import Settings, get_settings
from haven.core.exceptions import ValidationError
from haven.models.enums import UserRole
from haven.models.profile import Profile
from haven.repositories.profile_repository import ProfileRepository
from haven.services.base import BaseService, ServiceResult
from haven.services.common.permissions import Principal, require_admin


class ProfileService(BaseService):
    """Role and block assignment; admin only."""

    def __init__(self, db_session: Session, settings: Optional[Settings] = None):
        super().__init__(db_session)
        self.settings = settings or get_settings()
        self.profiles = ProfileRepository(db_session)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def list_profiles(
        self,
        principal: Principal,
        role: Optional[UserRole] = None,
    ) -> ServiceResult[List[Profile]]:
        try:
            require_admin(principal, action="list profiles")
            rows = self.profiles.list_by_role(role) if role else self.profiles.list_all()
            return ServiceResult.success(rows, metadata={"count": len(rows)})
        except Exception as e:
            return self._handle_exception(e, "list profiles")

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def change_role(
        self,
        principal: Principal,
        profile_id: str,
        role: UserRole,
    ) -> ServiceResult[Profile]:
        """
        Change a profile's role.

        Leaving the warden role clears the assigned block.
        """
        try:
            require_admin(principal, action="change roles")
            role = UserRole(role)

            with self.transaction():
                profile = self.profiles.get_or_raise(profile_id, "Profile")
                patch = {"role": role}
                if role is not UserRole.WARDEN:
                    patch["assigned_block"] = None
                profile = self.profiles.update(patch, profile_id)

            self._log_operation("change_role", profile_id, {"role": role.value})
            return ServiceResult.success(profile, message=f"Role changed to {role.value}")

        except Exception as e:
            return self._handle_exception(e, "change role", profile_id)

    def assign_block(
        self,
        principal: Principal,
        profile_id: str,
        block: str,
    ) -> ServiceResult[Profile]:
        try:
            require_admin(principal, action="assign warden blocks")
            block = block.strip().upper()
            if block not in self.settings.HOSTEL_BLOCKS:
                raise ValidationError(
                    f"Unknown block '{block}'",
                    field="block",
                    field_errors={"block": [f"must be one of {', '.join(self.settings.HOSTEL_BLOCKS)}"]},
                )

            with self.transaction():
                profile = self.profiles.get_or_raise(profile_id, "Profile")
                if profile.role is not UserRole.WARDEN:
                    raise ValidationError("Only wardens can be assigned a block", field="role")
                profile = self.profiles.update({"assigned_block": block}, profile_id)

            self._log_operation("assign_block", profile_id, {"block": block})
            return ServiceResult.success(profile, message=f"Warden assigned to block {block}")

        except Exception as e:
            return self._handle_exception(e, "assign block", profile_id)
