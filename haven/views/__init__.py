from haven.views.optimistic import OptimisticCommand
from haven.views.base import DashboardView
from haven.views.attendance_roster import AttendanceRosterView

__all__ = ["OptimisticCommand", "DashboardView", "AttendanceRosterView"]
