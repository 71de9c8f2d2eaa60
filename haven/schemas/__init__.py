from haven.schemas.base import (
    BaseSchema,
    BaseCreateSchema,
    BaseUpdateSchema,
    BaseResponseSchema,
    TimestampedResponseSchema,
)
from haven.schemas.profile import (
    SignupRequest,
    ProfileResponse,
    RoleChangeRequest,
    BlockAssignmentRequest,
    PrincipalResponse,
)
from haven.schemas.room import RoomCreate, RoomUpdate, RoomResponse, RoomAssignment
from haven.schemas.student import (
    StudentResponse,
    StudentSelfUpdate,
    StudentAdminUpdate,
    BlockStudentEntry,
)
from haven.schemas.attendance import (
    AttendanceMark,
    BulkPresentRequest,
    AttendanceResponse,
    RosterEntry,
)
from haven.schemas.fee import FeeCreate, FeeResponse, FeeBreakdown
from haven.schemas.complaint import ComplaintCreate, RoomChangeRequest, ComplaintResponse
from haven.schemas.notice import (
    NoticeCreate,
    NoticeResponse,
    AdmissionQueryCreate,
    AdmissionQueryResponse,
)
from haven.schemas.mess import MenuDayUpdate, WeeklyMenuUpdate, MenuDayResponse
from haven.schemas.dashboard import AdminOverview, WardenOverview
