from haven.core.exceptions import ErrorCode
from haven.services.base.base_service import BaseService
from haven.services.base.service_result import ErrorSeverity, ServiceError, ServiceResult

__all__ = [
    "BaseService",
    "ErrorCode",
    "ErrorSeverity",
    "ServiceError",
    "ServiceResult",
]
