from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from haven.api.deps import get_db, unwrap
from haven.schemas.notice import AdmissionQueryCreate, AdmissionQueryResponse
from haven.services.inquiry import AdmissionQueryService

router = APIRouter()


@router.post("/queries", response_model=AdmissionQueryResponse, status_code=status.HTTP_201_CREATED)
def submit_query(payload: AdmissionQueryCreate, db: Session = Depends(get_db)):
    """Anonymous admission inquiry from the public site."""
    result = AdmissionQueryService(db).submit(
        payload.full_name,
        str(payload.email),
        payload.room_type,
        payload.message,
    )
    return AdmissionQueryResponse.model_validate(unwrap(result))
