from haven.repositories.base import BaseRepository, translate_store_error
from haven.repositories.profile_repository import ProfileRepository
from haven.repositories.room_repository import RoomRepository
from haven.repositories.student_repository import StudentRepository
from haven.repositories.attendance_repository import AttendanceRepository
from haven.repositories.fee_repository import FeeRepository
from haven.repositories.complaint_repository import ComplaintRepository
from haven.repositories.notice_repository import NoticeRepository, AdmissionQueryRepository
from haven.repositories.mess_menu_repository import MessMenuRepository

__all__ = [
    "BaseRepository",
    "translate_store_error",
    "ProfileRepository",
    "RoomRepository",
    "StudentRepository",
    "AttendanceRepository",
    "FeeRepository",
    "ComplaintRepository",
    "NoticeRepository",
    "AdmissionQueryRepository",
    "MessMenuRepository",
]
