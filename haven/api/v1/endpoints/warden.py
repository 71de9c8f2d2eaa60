import datetime as dt
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from haven.api.deps import get_db, require_roles, unwrap
from haven.api.v1.endpoints._converters import complaint_response, complaint_responses
from haven.core.exceptions import ValidationError
from haven.models.enums import ComplaintStatus, UserRole
from haven.schemas.attendance import AttendanceMark, AttendanceResponse, BulkPresentRequest, RosterEntry
from haven.schemas.complaint import ComplaintResponse
from haven.schemas.dashboard import WardenOverview
from haven.schemas.mess import MenuDayResponse, WeeklyMenuUpdate
from haven.schemas.notice import AdmissionQueryResponse, NoticeCreate, NoticeResponse
from haven.schemas.room import RoomResponse
from haven.schemas.student import BlockStudentEntry
from haven.services.attendance import AttendanceService
from haven.services.common.permissions import Principal
from haven.services.complaint import ComplaintService
from haven.services.dashboard import DashboardService
from haven.services.inquiry import AdmissionQueryService
from haven.services.mess import MessMenuService
from haven.services.notice import NoticeService
from haven.services.room import RoomOccupancyService

router = APIRouter()

staff = require_roles(UserRole.WARDEN)


def _block_for(principal: Principal, block: Optional[str]) -> str:
    block = principal.assigned_block or block
    if not block:
        raise ValidationError("A block is required", field="block")
    return block


@router.get("/overview", response_model=WardenOverview)
def overview(
    on_date: Optional[dt.date] = Query(default=None, alias="date"),
    block: Optional[str] = None,
    principal: Principal = Depends(staff),
    db: Session = Depends(get_db),
):
    return unwrap(DashboardService(db).warden_overview(principal, on_date, block))


# ------------------------------------------------------------------ #
# Attendance
# ------------------------------------------------------------------ #
@router.get("/roster", response_model=List[RosterEntry])
def day_roster(
    on_date: Optional[dt.date] = Query(default=None, alias="date"),
    block: Optional[str] = None,
    principal: Principal = Depends(staff),
    db: Session = Depends(get_db),
):
    result = AttendanceService(db).day_roster_for(
        principal,
        _block_for(principal, block),
        on_date or dt.date.today(),
    )
    return unwrap(result)


@router.post("/attendance", response_model=AttendanceResponse)
def mark_attendance(payload: AttendanceMark, principal: Principal = Depends(staff), db: Session = Depends(get_db)):
    result = AttendanceService(db).mark_attendance(principal, payload.student_id, payload.date, payload.status)
    return AttendanceResponse.model_validate(unwrap(result))


@router.post("/attendance/mark-all-present", response_model=List[AttendanceResponse])
def mark_all_present(
    payload: BulkPresentRequest,
    principal: Principal = Depends(staff),
    db: Session = Depends(get_db),
):
    result = AttendanceService(db).mark_all_present(principal, payload.student_ids, payload.date)
    return [AttendanceResponse.model_validate(r) for r in unwrap(result)]


# ------------------------------------------------------------------ #
# Block residents & rooms
# ------------------------------------------------------------------ #
@router.get("/students", response_model=List[BlockStudentEntry])
def block_students(
    block: Optional[str] = None,
    principal: Principal = Depends(staff),
    db: Session = Depends(get_db),
):
    return unwrap(DashboardService(db).block_students(principal, block))


@router.get("/rooms", response_model=List[RoomResponse])
def block_rooms(
    block: Optional[str] = None,
    principal: Principal = Depends(staff),
    db: Session = Depends(get_db),
):
    rooms = unwrap(RoomOccupancyService(db).list_rooms(principal.assigned_block or block))
    return [RoomResponse.model_validate(r) for r in rooms]


# ------------------------------------------------------------------ #
# Complaints
# ------------------------------------------------------------------ #
@router.get("/complaints", response_model=List[ComplaintResponse])
def list_complaints(
    status_filter: Optional[ComplaintStatus] = Query(default=None, alias="status"),
    principal: Principal = Depends(staff),
    db: Session = Depends(get_db),
):
    return complaint_responses(unwrap(ComplaintService(db).list_complaints(principal, status_filter)))


@router.post("/complaints/{complaint_id}/resolve", response_model=ComplaintResponse)
def resolve_complaint(complaint_id: str, principal: Principal = Depends(staff), db: Session = Depends(get_db)):
    return complaint_response(unwrap(ComplaintService(db).resolve(principal, complaint_id)))


# ------------------------------------------------------------------ #
# Notices, queries, mess menu
# ------------------------------------------------------------------ #
@router.get("/notices", response_model=List[NoticeResponse])
def list_notices(principal: Principal = Depends(staff), db: Session = Depends(get_db)):
    return [NoticeResponse.model_validate(n) for n in unwrap(NoticeService(db).list_notices())]


@router.post("/notices", response_model=NoticeResponse, status_code=status.HTTP_201_CREATED)
def post_notice(payload: NoticeCreate, principal: Principal = Depends(staff), db: Session = Depends(get_db)):
    return NoticeResponse.model_validate(unwrap(NoticeService(db).post(principal, payload.title, payload.message)))


@router.delete("/notices/{notice_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_notice(notice_id: str, principal: Principal = Depends(staff), db: Session = Depends(get_db)):
    unwrap(NoticeService(db).delete(principal, notice_id))


@router.get("/queries", response_model=List[AdmissionQueryResponse])
def list_queries(principal: Principal = Depends(staff), db: Session = Depends(get_db)):
    rows = unwrap(AdmissionQueryService(db).list_queries(principal))
    return [AdmissionQueryResponse.model_validate(q) for q in rows]


@router.put("/mess-menu", response_model=List[MenuDayResponse])
def update_menu(payload: WeeklyMenuUpdate, principal: Principal = Depends(staff), db: Session = Depends(get_db)):
    days = [day.model_dump() for day in payload.days]
    return [MenuDayResponse.model_validate(d) for d in unwrap(MessMenuService(db).update_week(principal, days))]
