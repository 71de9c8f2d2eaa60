# haven/repositories/mess_menu_repository.py
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from haven.models.enums import DayOfWeek
from haven.models.mess_menu import MessMenuDay
from haven.repositories.base import BaseRepository


class MessMenuRepository(BaseRepository[MessMenuDay]):
    def __init__(self, session: Session):
        super().__init__(session, MessMenuDay)

    def week(self) -> List[MessMenuDay]:
        return sorted(self.select(), key=lambda day: day.day_of_week.order)

    def for_day(self, day: DayOfWeek) -> Optional[MessMenuDay]:
        rows = self.select({"day_of_week": day}, limit=1)
        return rows[0] if rows else None

    def save_days(self, rows: Sequence[Dict[str, Any]]) -> List[MessMenuDay]:
        return self.upsert(rows, ("day_of_week",))
