"""
Warden attendance roster screen.
"""

from datetime import date
from typing import Dict, List, Optional

from haven.core.exceptions import UnauthorizedError
from haven.models.enums import AttendanceStatus, RosterStatus, UserRole
from haven.schemas.attendance import RosterEntry
from haven.services.attendance.attendance_service import AttendanceService
from haven.services.auth.role_resolver import RoleResolver
from haven.services.base import ServiceError, ServiceResult
from haven.services.common.permissions import Principal
from haven.views.base import DashboardView
from haven.views.optimistic import OptimisticCommand


class AttendanceRosterView(DashboardView):
    """
    Day roster for one block with optimistic marking.

    ``statuses`` is the local state the screen renders; marks show up in
    it immediately and are reverted if the store rejects the write.
    """

    required_roles = (UserRole.WARDEN,)

    def __init__(
        self,
        resolver: RoleResolver,
        service: AttendanceService,
        on_date: date,
        block: Optional[str] = None,
    ):
        self.service = service
        self.on_date = on_date
        self._requested_block = block
        self.entries: List[RosterEntry] = []
        self.statuses: Dict[str, RosterStatus] = {}
        super().__init__(resolver)

    @property
    def block(self) -> Optional[str]:
        if self.principal is not None and self.principal.assigned_block:
            return self.principal.assigned_block
        return self._requested_block

    def on_principal_change(self, principal: Optional[Principal]) -> None:
        if principal is None or not self.allowed:
            self.entries = []
            self.statuses = {}

    def refresh(self) -> ServiceResult[List[RosterEntry]]:
        if not self.allowed or self.principal is None:
            return self._denied()
        result = self.service.day_roster_for(self.principal, self.block, self.on_date)
        if result.is_success:
            self.entries = result.data
            self.statuses = {entry.student_id: entry.status for entry in self.entries}
            self.error_message = None
        else:
            self.error_message = result.message
        return result

    def mark(self, student_id: str, status: AttendanceStatus) -> ServiceResult:
        if not self.allowed or self.principal is None:
            return self._denied()
        status = AttendanceStatus(status)
        principal = self.principal
        command = OptimisticCommand(
            self.statuses,
            {student_id: RosterStatus(status.value)},
            lambda: self.service.mark_attendance(principal, student_id, self.on_date, status),
        )
        return self._run(command)

    def mark_all_present(self) -> ServiceResult:
        if not self.allowed or self.principal is None:
            return self._denied()
        student_ids = [entry.student_id for entry in self.entries]
        principal = self.principal
        command = OptimisticCommand(
            self.statuses,
            {sid: RosterStatus.PRESENT for sid in student_ids},
            lambda: self.service.mark_all_present(principal, student_ids, self.on_date),
        )
        return self._run(command)

    def _run(self, command: OptimisticCommand) -> ServiceResult:
        result = command.execute()
        self.error_message = None if result.is_success else result.message
        return result

    def _denied(self) -> ServiceResult:
        exc = UnauthorizedError(f"Redirecting to {self.redirect_to}")
        return ServiceResult.failure(ServiceError.from_app_exception(exc))
