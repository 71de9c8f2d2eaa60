from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from haven.api.deps import get_db, require_roles, unwrap
from haven.api.v1.endpoints._converters import (
    complaint_response,
    complaint_responses,
    fee_response,
    fee_responses,
)
from haven.models.enums import ComplaintStatus, UserRole
from haven.schemas.complaint import ComplaintResponse
from haven.schemas.dashboard import AdminOverview
from haven.schemas.fee import FeeBreakdown, FeeCreate, FeeResponse
from haven.schemas.notice import AdmissionQueryResponse
from haven.schemas.profile import BlockAssignmentRequest, ProfileResponse, RoleChangeRequest
from haven.schemas.room import RoomAssignment, RoomCreate, RoomResponse, RoomUpdate
from haven.schemas.student import StudentAdminUpdate, StudentResponse
from haven.services.auth import ProfileService
from haven.services.common.permissions import Principal
from haven.services.complaint import ComplaintService
from haven.services.dashboard import DashboardService
from haven.services.fee import FeeLedgerService
from haven.services.inquiry import AdmissionQueryService
from haven.services.room import RoomOccupancyService
from haven.services.student import StudentService

router = APIRouter()

admin_only = require_roles(UserRole.ADMIN)


@router.get("/overview", response_model=AdminOverview)
def overview(principal: Principal = Depends(admin_only), db: Session = Depends(get_db)):
    return unwrap(DashboardService(db).admin_overview(principal))


# ------------------------------------------------------------------ #
# Students
# ------------------------------------------------------------------ #
@router.get("/students", response_model=List[StudentResponse])
def list_students(principal: Principal = Depends(admin_only), db: Session = Depends(get_db)):
    return [StudentResponse.model_validate(s) for s in unwrap(StudentService(db).list_students(principal))]


@router.patch("/students/{student_id}", response_model=StudentResponse)
def update_student(
    student_id: str,
    payload: StudentAdminUpdate,
    principal: Principal = Depends(admin_only),
    db: Session = Depends(get_db),
):
    patch = payload.model_dump(exclude_unset=True, mode="json")
    return StudentResponse.model_validate(unwrap(StudentService(db).update_student(principal, student_id, patch)))


@router.put("/students/{student_id}/room", response_model=StudentResponse)
def assign_room(
    student_id: str,
    payload: RoomAssignment,
    principal: Principal = Depends(admin_only),
    db: Session = Depends(get_db),
):
    result = RoomOccupancyService(db).assign_student(principal, student_id, payload.room_id)
    return StudentResponse.model_validate(unwrap(result))


@router.delete("/students/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_student(student_id: str, principal: Principal = Depends(admin_only), db: Session = Depends(get_db)):
    unwrap(StudentService(db).delete_student(principal, student_id))


# ------------------------------------------------------------------ #
# Rooms
# ------------------------------------------------------------------ #
@router.get("/rooms", response_model=List[RoomResponse])
def list_rooms(
    block: Optional[str] = None,
    principal: Principal = Depends(admin_only),
    db: Session = Depends(get_db),
):
    return [RoomResponse.model_validate(r) for r in unwrap(RoomOccupancyService(db).list_rooms(block))]


@router.post("/rooms", response_model=RoomResponse, status_code=status.HTTP_201_CREATED)
def create_room(payload: RoomCreate, principal: Principal = Depends(admin_only), db: Session = Depends(get_db)):
    result = RoomOccupancyService(db).create_room(
        principal,
        payload.room_no,
        payload.block,
        payload.capacity,
        payload.under_maintenance,
    )
    return RoomResponse.model_validate(unwrap(result))


@router.patch("/rooms/{room_id}", response_model=RoomResponse)
def update_room(
    room_id: str,
    payload: RoomUpdate,
    principal: Principal = Depends(admin_only),
    db: Session = Depends(get_db),
):
    patch = payload.model_dump(exclude_unset=True)
    return RoomResponse.model_validate(unwrap(RoomOccupancyService(db).update_room(principal, room_id, patch)))


@router.delete("/rooms/{room_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_room(room_id: str, principal: Principal = Depends(admin_only), db: Session = Depends(get_db)):
    unwrap(RoomOccupancyService(db).delete_room(principal, room_id))


# ------------------------------------------------------------------ #
# Profiles & wardens
# ------------------------------------------------------------------ #
@router.get("/profiles", response_model=List[ProfileResponse])
def list_profiles(
    role: Optional[UserRole] = None,
    principal: Principal = Depends(admin_only),
    db: Session = Depends(get_db),
):
    return [ProfileResponse.model_validate(p) for p in unwrap(ProfileService(db).list_profiles(principal, role))]


@router.put("/profiles/{profile_id}/role", response_model=ProfileResponse)
def change_role(
    profile_id: str,
    payload: RoleChangeRequest,
    principal: Principal = Depends(admin_only),
    db: Session = Depends(get_db),
):
    return ProfileResponse.model_validate(unwrap(ProfileService(db).change_role(principal, profile_id, payload.role)))


@router.put("/wardens/{profile_id}/block", response_model=ProfileResponse)
def assign_block(
    profile_id: str,
    payload: BlockAssignmentRequest,
    principal: Principal = Depends(admin_only),
    db: Session = Depends(get_db),
):
    return ProfileResponse.model_validate(unwrap(ProfileService(db).assign_block(principal, profile_id, payload.block)))


# ------------------------------------------------------------------ #
# Fees
# ------------------------------------------------------------------ #
@router.get("/fees", response_model=List[FeeResponse])
def list_fees(principal: Principal = Depends(admin_only), db: Session = Depends(get_db)):
    return fee_responses(unwrap(FeeLedgerService(db).list_fees(principal)))


@router.get("/fees/breakdown", response_model=FeeBreakdown)
def fee_breakdown(principal: Principal = Depends(admin_only), db: Session = Depends(get_db)):
    return unwrap(FeeLedgerService(db).breakdown(principal))


@router.post("/fees", response_model=FeeResponse, status_code=status.HTTP_201_CREATED)
def issue_fee(payload: FeeCreate, principal: Principal = Depends(admin_only), db: Session = Depends(get_db)):
    result = FeeLedgerService(db).issue_fee(
        principal,
        payload.student_id,
        payload.amount,
        payload.due_date,
        payload.payment_type,
    )
    return fee_response(unwrap(result))


@router.post("/fees/{fee_id}/mark-paid", response_model=FeeResponse)
def mark_paid(fee_id: str, principal: Principal = Depends(admin_only), db: Session = Depends(get_db)):
    return fee_response(unwrap(FeeLedgerService(db).mark_paid(principal, fee_id)))


@router.post("/fees/{fee_id}/mark-overdue", response_model=FeeResponse)
def mark_overdue(fee_id: str, principal: Principal = Depends(admin_only), db: Session = Depends(get_db)):
    return fee_response(unwrap(FeeLedgerService(db).mark_overdue(principal, fee_id)))


# ------------------------------------------------------------------ #
# Complaints & queries
# ------------------------------------------------------------------ #
@router.get("/complaints", response_model=List[ComplaintResponse])
def list_complaints(
    status_filter: Optional[ComplaintStatus] = Query(default=None, alias="status"),
    principal: Principal = Depends(admin_only),
    db: Session = Depends(get_db),
):
    return complaint_responses(unwrap(ComplaintService(db).list_complaints(principal, status_filter)))


@router.post("/complaints/{complaint_id}/resolve", response_model=ComplaintResponse)
def resolve_complaint(complaint_id: str, principal: Principal = Depends(admin_only), db: Session = Depends(get_db)):
    return complaint_response(unwrap(ComplaintService(db).resolve(principal, complaint_id)))


@router.delete("/complaints/{complaint_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_complaint(complaint_id: str, principal: Principal = Depends(admin_only), db: Session = Depends(get_db)):
    unwrap(ComplaintService(db).delete(principal, complaint_id))


@router.get("/queries", response_model=List[AdmissionQueryResponse])
def list_queries(principal: Principal = Depends(admin_only), db: Session = Depends(get_db)):
    rows = unwrap(AdmissionQueryService(db).list_queries(principal))
    return [AdmissionQueryResponse.model_validate(q) for q in rows]


@router.delete("/queries/{query_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_query(query_id: str, principal: Principal = Depends(admin_only), db: Session = Depends(get_db)):
    unwrap(AdmissionQueryService(db).delete(principal, query_id))
