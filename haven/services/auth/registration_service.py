"""
Account signup: creates the identity profile and, for residents, the
student record linked to it.
"""

from typing import Optional

from sqlalchemy.orm import Session

from haven.core.exceptions import AlreadyExistsError
from haven.models.enums import UserRole
from haven.models.profile import Profile
from haven.models.base import new_id
from haven.repositories.profile_repository import ProfileRepository
from haven.repositories.student_repository import StudentRepository
from haven.schemas.profile import SignupRequest
from haven.services.base import BaseService, ServiceResult


class RegistrationService(BaseService):
    """
    Every new account starts as a student; only an administrator can
    promote it afterwards (see ``ProfileService.change_role``).
    """

    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.profiles = ProfileRepository(db_session)
        self.students = StudentRepository(db_session)

    def signup(self, request: SignupRequest) -> ServiceResult[Profile]:
        """
        Create profile and student record in one transaction.

        Args:
            request: Signup payload

        Returns:
            ServiceResult containing the new Profile
        """
        try:
            user_id = request.user_id or new_id()
            email = str(request.email).lower()

            with self.transaction():
                if self.profiles.get(user_id) is not None:
                    raise AlreadyExistsError("Profile", "id", user_id)
                if self.profiles.select({"email": email}, limit=1):
                    raise AlreadyExistsError("Profile", "email", email)

                profile = self.profiles.insert({
                    "id": user_id,
                    "name": request.name,
                    "email": email,
                    "phone": request.phone,
                    "role": UserRole.STUDENT,
                })
                self.students.insert({
                    "user_id": user_id,
                    "name": request.name,
                    "email": email,
                    "phone": request.phone,
                    "course": request.course,
                    "parent_phone": request.parent_phone,
                    "address": request.address,
                    "blood_group": request.blood_group,
                })

            self._log_operation("signup", user_id, {"user_id": user_id})
            return ServiceResult.success(profile, message="Account created")

        except Exception as e:
            return self._handle_exception(e, "signup", request.email)

    def get_profile(self, user_id: str) -> ServiceResult[Optional[Profile]]:
        try:
            return ServiceResult.success(self.profiles.get_or_raise(user_id, "Profile"))
        except Exception as e:
            return self._handle_exception(e, "get profile", user_id)
