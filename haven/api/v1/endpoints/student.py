from typing import List, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from haven.api.deps import get_db, require_roles, unwrap
from haven.api.v1.endpoints._converters import complaint_response, complaint_responses, fee_response
from haven.models.enums import UserRole
from haven.schemas.attendance import AttendanceResponse
from haven.schemas.complaint import ComplaintCreate, ComplaintResponse, RoomChangeRequest
from haven.schemas.fee import FeeResponse
from haven.schemas.mess import MenuDayResponse
from haven.schemas.notice import NoticeResponse
from haven.schemas.student import StudentResponse, StudentSelfUpdate
from haven.services.attendance import AttendanceService
from haven.services.common.permissions import Principal
from haven.services.complaint import ComplaintService
from haven.services.fee import FeeLedgerService, PaymentService
from haven.services.mess import MessMenuService
from haven.services.notice import NoticeService
from haven.services.student import StudentService

router = APIRouter()

resident = require_roles(UserRole.STUDENT)


def _own_student_id(principal: Principal, db: Session) -> str:
    return unwrap(StudentService(db).get_own(principal)).id


@router.get("/me", response_model=StudentResponse)
def my_record(principal: Principal = Depends(resident), db: Session = Depends(get_db)):
    return StudentResponse.model_validate(unwrap(StudentService(db).get_own(principal)))


@router.patch("/me", response_model=StudentResponse)
def update_my_record(
    payload: StudentSelfUpdate,
    principal: Principal = Depends(resident),
    db: Session = Depends(get_db),
):
    patch = payload.model_dump(exclude_unset=True, mode="json")
    return StudentResponse.model_validate(unwrap(StudentService(db).update_self(principal, patch)))


# ------------------------------------------------------------------ #
# Fee
# ------------------------------------------------------------------ #
@router.get("/fee", response_model=Optional[FeeResponse])
def my_fee(principal: Principal = Depends(resident), db: Session = Depends(get_db)):
    fee = unwrap(FeeLedgerService(db).fee_for_student(principal, _own_student_id(principal, db)))
    return fee_response(fee) if fee is not None else None


@router.post("/fee/{fee_id}/pay", response_model=FeeResponse)
def pay_fee(fee_id: str, principal: Principal = Depends(resident), db: Session = Depends(get_db)):
    """Simulated payment; a repeat submission while processing is rejected with 409."""
    return fee_response(unwrap(PaymentService(db).pay(principal, fee_id)))


# ------------------------------------------------------------------ #
# Attendance
# ------------------------------------------------------------------ #
@router.get("/attendance", response_model=List[AttendanceResponse])
def my_attendance(principal: Principal = Depends(resident), db: Session = Depends(get_db)):
    rows = unwrap(AttendanceService(db).history_for(principal, _own_student_id(principal, db)))
    return [AttendanceResponse.model_validate(r) for r in rows]


# ------------------------------------------------------------------ #
# Complaints
# ------------------------------------------------------------------ #
@router.get("/complaints", response_model=List[ComplaintResponse])
def my_complaints(principal: Principal = Depends(resident), db: Session = Depends(get_db)):
    rows = unwrap(ComplaintService(db).list_for_student(principal, _own_student_id(principal, db)))
    return complaint_responses(rows)


@router.post("/complaints", response_model=ComplaintResponse, status_code=status.HTTP_201_CREATED)
def file_complaint(
    payload: ComplaintCreate,
    principal: Principal = Depends(resident),
    db: Session = Depends(get_db),
):
    result = ComplaintService(db).file(
        principal,
        _own_student_id(principal, db),
        payload.title,
        payload.description,
    )
    return complaint_response(unwrap(result))


@router.delete("/complaints/{complaint_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_complaint(complaint_id: str, principal: Principal = Depends(resident), db: Session = Depends(get_db)):
    unwrap(ComplaintService(db).delete(principal, complaint_id))


@router.post("/room-change-request", response_model=ComplaintResponse, status_code=status.HTTP_201_CREATED)
def request_room_change(
    payload: RoomChangeRequest,
    principal: Principal = Depends(resident),
    db: Session = Depends(get_db),
):
    result = ComplaintService(db).file_room_change_request(
        principal,
        _own_student_id(principal, db),
        payload.preferred_block,
        payload.reason,
    )
    return complaint_response(unwrap(result))


# ------------------------------------------------------------------ #
# Notices & mess menu
# ------------------------------------------------------------------ #
@router.get("/notices", response_model=List[NoticeResponse])
def notice_preview(principal: Principal = Depends(resident), db: Session = Depends(get_db)):
    return [NoticeResponse.model_validate(n) for n in unwrap(NoticeService(db).preview())]


@router.get("/mess-menu", response_model=List[MenuDayResponse])
def mess_menu(principal: Principal = Depends(resident), db: Session = Depends(get_db)):
    return [MenuDayResponse.model_validate(d) for d in unwrap(MessMenuService(db).week())]


@router.get("/mess-menu/today", response_model=Optional[MenuDayResponse])
def todays_menu(principal: Principal = Depends(resident), db: Session = Depends(get_db)):
    day = unwrap(MessMenuService(db).today())
    return MenuDayResponse.model_validate(day) if day is not None else None
