"""
Service result patterns for standardized response handling.

Every public service method returns a ``ServiceResult``; callers branch on
``is_success`` instead of catching exceptions, and the API layer turns a
failed result into the matching HTTP error.
"""

from typing import TypeVar, Generic, Optional, Any, Dict
from dataclasses import dataclass, field
from enum import Enum
from datetime import datetime, timezone

from haven.core.exceptions import BaseAppException, ErrorCode


class ErrorSeverity(str, Enum):
    """Error severity levels."""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class ServiceError:
    """A failed operation as shown to the acting user."""

    code: ErrorCode
    message: str
    severity: ErrorSeverity = ErrorSeverity.ERROR
    details: Optional[Dict[str, Any]] = None
    status_code: int = 500
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def from_app_exception(
        cls,
        exception: BaseAppException,
        severity: ErrorSeverity = ErrorSeverity.WARNING,
    ) -> "ServiceError":
        return cls(
            code=exception.error_code,
            message=exception.message,
            severity=severity,
            details=exception.details or None,
            status_code=exception.status_code,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "severity": self.severity.value,
            "details": self.details,
            "timestamp": self.timestamp.isoformat(),
        }


TData = TypeVar("TData")


@dataclass
class ServiceResult(Generic[TData]):
    """
    Outcome of one service operation.

    Attributes:
        is_success: Operation success indicator
        data: Result data (if successful)
        error: Error information (if failed)
        message: Human-readable status message
        metadata: Extra context such as counts or a ``changed`` flag
    """

    is_success: bool
    data: Optional[TData] = None
    error: Optional[ServiceError] = None
    message: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(
        cls,
        data: Optional[TData] = None,
        message: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None,
    ) -> "ServiceResult[TData]":
        return cls(is_success=True, data=data, message=message, metadata=metadata or {})

    @classmethod
    def failure(cls, error: ServiceError) -> "ServiceResult[TData]":
        return cls(is_success=False, error=error, message=error.message)

    @property
    def error_code(self) -> Optional[ErrorCode]:
        return self.error.code if self.error else None

    def __bool__(self) -> bool:
        return self.is_success

    def __repr__(self) -> str:
        if self.is_success:
            return f"ServiceResult(ok: {self.message or 'done'})"
        return f"ServiceResult({self.error_code.value}: {self.message})"


__all__ = [
    "ErrorSeverity",
    "ServiceError",
    "ServiceResult",
]
