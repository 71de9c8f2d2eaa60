# haven/repositories/profile_repository.py
from __future__ import annotations

from typing import List

from sqlalchemy.orm import Session

from haven.models.enums import UserRole
from haven.models.profile import Profile
from haven.repositories.base import BaseRepository


class ProfileRepository(BaseRepository[Profile]):
    def __init__(self, session: Session):
        super().__init__(session, Profile)

    def list_by_role(self, role: UserRole) -> List[Profile]:
        return self.select({"role": role}, order_by=["name"])

    def list_all(self) -> List[Profile]:
        return self.select(order_by=["name"])
