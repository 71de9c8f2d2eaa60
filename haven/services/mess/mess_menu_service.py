"""
Weekly mess menu.
"""

from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy.orm import Session

from haven.core.exceptions import ValidationError
from haven.models.enums import DayOfWeek
from haven.models.mess_menu import MessMenuDay
from haven.repositories.mess_menu_repository import MessMenuRepository
from haven.services.base import BaseService, ServiceResult
from haven.services.common.permissions import Principal, require_staff

MEAL_FIELDS = ("breakfast", "lunch", "snacks", "dinner")


class MessMenuService(BaseService):
    """One row per weekday; saving a day overwrites it."""

    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.menu = MessMenuRepository(db_session)

    def update_week(
        self,
        principal: Principal,
        days: Sequence[Dict[str, Any]],
    ) -> ServiceResult[List[MessMenuDay]]:
        """
        Upsert the given days.

        Args:
            days: Mappings with ``day_of_week`` and any of the meal fields
        """
        try:
            require_staff(principal, action="update the mess menu")
            rows = []
            seen = set()
            for entry in days:
                day = DayOfWeek(entry["day_of_week"])
                if day in seen:
                    raise ValidationError(f"{day.value} listed twice", field="day_of_week")
                seen.add(day)
                rows.append({"day_of_week": day, **{f: entry.get(f) for f in MEAL_FIELDS}})
            if not rows:
                raise ValidationError("No menu days given", field="days")

            with self.transaction():
                self.menu.save_days(rows)
                week = self.menu.week()

            self._log_operation("update_menu", ",".join(d.value for d in seen))
            return ServiceResult.success(week, message="Menu updated")

        except (KeyError, ValueError) as e:
            return self._handle_exception(
                ValidationError(f"Invalid menu entry: {e}", field="day_of_week"), "update mess menu"
            )
        except Exception as e:
            return self._handle_exception(e, "update mess menu")

    def week(self) -> ServiceResult[List[MessMenuDay]]:
        """Stored days ordered Monday to Sunday."""
        try:
            return ServiceResult.success(self.menu.week())
        except Exception as e:
            return self._handle_exception(e, "get weekly menu")

    def today(self, on_date: Optional[date] = None) -> ServiceResult[Optional[MessMenuDay]]:
        try:
            day = DayOfWeek.for_date(on_date or date.today())
            return ServiceResult.success(self.menu.for_day(day), metadata={"day": day.value})
        except Exception as e:
            return self._handle_exception(e, "get today's menu")
