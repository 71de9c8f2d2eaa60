"""
API v1 Router - aggregates the dashboard endpoints.
"""
from fastapi import APIRouter

from haven.api.v1.endpoints import admin, auth, public, student, warden

router = APIRouter(
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        409: {"description": "Conflict"},
        422: {"description": "Validation Error"},
        503: {"description": "Record store unavailable"},
    }
)

router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(admin.router, prefix="/admin", tags=["Admin Dashboard"])
router.include_router(warden.router, prefix="/warden", tags=["Warden Dashboard"])
router.include_router(student.router, prefix="/student", tags=["Student Dashboard"])
router.include_router(public.router, prefix="/public", tags=["Public"])
