"""
ORM-to-schema conversions shared by the dashboard routers.
"""

from datetime import date
from typing import Iterable, List, Optional

from haven.models.complaint import Complaint
from haven.models.fee import FeeRecord
from haven.schemas.complaint import ComplaintResponse
from haven.schemas.fee import FeeResponse
from haven.services.fee import display_status


def fee_response(fee: FeeRecord, today: Optional[date] = None) -> FeeResponse:
    response = FeeResponse.model_validate(fee)
    response.display_status = display_status(fee, today)
    return response


def fee_responses(fees: Iterable[FeeRecord]) -> List[FeeResponse]:
    today = date.today()
    return [fee_response(fee, today) for fee in fees]


def complaint_response(complaint: Complaint) -> ComplaintResponse:
    response = ComplaintResponse.model_validate(complaint)
    student = complaint.student
    if student is not None:
        response.student_name = student.name
        response.room_no = student.room.room_no if student.room else None
    return response


def complaint_responses(complaints: Iterable[Complaint]) -> List[ComplaintResponse]:
    return [complaint_response(c) for c in complaints]
