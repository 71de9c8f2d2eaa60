"""
Custom Exceptions for the Haven hostel operations core

Every failure that crosses a service boundary is one of the classes below.
Each carries an ``ErrorCode`` and the HTTP status the API layer responds with,
so the acting user always receives a human-readable message.
"""

from typing import Any, Dict, List, Optional
from enum import Enum


class ErrorCode(str, Enum):
    """Standard error codes for the application"""
    # General errors
    INTERNAL_ERROR = "INTERNAL_ERROR"
    OPERATION_FAILED = "OPERATION_FAILED"

    # Authentication & Authorization
    UNAUTHORIZED = "UNAUTHORIZED"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"
    TOKEN_INVALID = "TOKEN_INVALID"
    FORBIDDEN = "FORBIDDEN"

    # Validation errors
    VALIDATION_ERROR = "VALIDATION_ERROR"

    # Lookup errors
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    # Invariant violations
    CONFLICT = "CONFLICT"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    CAPACITY_EXCEEDED = "CAPACITY_EXCEEDED"
    CAPACITY_BELOW_OCCUPANCY = "CAPACITY_BELOW_OCCUPANCY"
    ROOM_NOT_EMPTY = "ROOM_NOT_EMPTY"
    ROOM_UNDER_MAINTENANCE = "ROOM_UNDER_MAINTENANCE"
    ATTENDANCE_CONFLICT = "ATTENDANCE_CONFLICT"
    INVALID_TRANSITION = "INVALID_TRANSITION"
    PAYMENT_IN_PROGRESS = "PAYMENT_IN_PROGRESS"

    # Record store errors
    RELATION_MISSING = "RELATION_MISSING"
    TRANSIENT_FAILURE = "TRANSIENT_FAILURE"


class BaseAppException(Exception):
    """
    Base exception class for all application exceptions.

    Provides consistent error handling across the application with
    structured error information.
    """

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.INTERNAL_ERROR,
        details: Optional[Dict[str, Any]] = None,
        status_code: int = 500
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.status_code = status_code
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary format"""
        return {
            "error": {
                "message": self.message,
                "code": self.error_code.value,
                "details": self.details,
                "type": self.__class__.__name__
            }
        }

    def __str__(self) -> str:
        return f"{self.error_code.value}: {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message='{self.message}', error_code='{self.error_code.value}')"


class OperationError(BaseAppException):
    """Exception raised when an operation fails"""

    def __init__(
        self,
        message: str = "Operation failed",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, ErrorCode.OPERATION_FAILED, details, 500)


# ========================================
# Authentication & Authorization Exceptions
# ========================================

class UnauthorizedError(BaseAppException):
    """Credential missing, invalid or expired."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message, error_code, details, 401)


class TokenExpiredError(UnauthorizedError):
    """Exception raised when a session token has expired"""

    def __init__(self, message: str = "Session has expired"):
        super().__init__(message, ErrorCode.TOKEN_EXPIRED)


class InvalidTokenError(UnauthorizedError):
    """Exception raised when a session token cannot be verified"""

    def __init__(self, message: str = "Invalid session token", reason: Optional[str] = None):
        details = {"reason": reason} if reason else {}
        super().__init__(message, ErrorCode.TOKEN_INVALID, details)


class ForbiddenError(BaseAppException):
    """The authenticated role lacks the capability for the action."""

    def __init__(
        self,
        message: str = "Access denied",
        role: Optional[str] = None,
        required_roles: Optional[List[str]] = None,
    ):
        details: Dict[str, Any] = {}
        if role is not None:
            details["role"] = role
        if required_roles:
            details["required_roles"] = required_roles
        super().__init__(message, ErrorCode.FORBIDDEN, details, 403)


# ========================================
# Validation & Lookup Exceptions
# ========================================

class ValidationError(BaseAppException):
    """Exception raised when data validation fails"""

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        field_errors: Optional[Dict[str, List[str]]] = None,
    ):
        details: Dict[str, Any] = {}
        if field:
            details["field"] = field
        if field_errors:
            details["field_errors"] = field_errors
        super().__init__(message, ErrorCode.VALIDATION_ERROR, details, 422)
        self.field = field


class ResourceNotFoundError(BaseAppException):
    """Exception raised when a requested resource is not found"""

    def __init__(
        self,
        resource_type: str = "Resource",
        resource_id: Optional[str] = None,
        message: Optional[str] = None
    ):
        if not message:
            message = f"{resource_type} not found"
            if resource_id:
                message += f" (ID: {resource_id})"

        details = {
            "resource_type": resource_type,
            "resource_id": resource_id
        }
        super().__init__(message, ErrorCode.RESOURCE_NOT_FOUND, details, 404)
        self.resource_type = resource_type
        self.resource_id = resource_id


# ========================================
# Conflict Exceptions
# ========================================

class ConflictError(BaseAppException):
    """An operation would violate an invariant of the current state."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode = ErrorCode.CONFLICT,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code, details, 409)


class AlreadyExistsError(ConflictError):
    """Raised when a uniqueness rule would be broken."""

    def __init__(self, resource_type: str, field: str, value: Any):
        super().__init__(
            f"{resource_type} with {field}='{value}' already exists",
            ErrorCode.ALREADY_EXISTS,
            {"resource_type": resource_type, "field": field, "value": str(value)},
        )


class CapacityExceeded(ConflictError):
    """The target room has no free bed."""

    def __init__(self, room_id: str, capacity: int):
        super().__init__(
            f"Room {room_id} is full ({capacity}/{capacity})",
            ErrorCode.CAPACITY_EXCEEDED,
            {"room_id": room_id, "capacity": capacity},
        )


class CapacityBelowOccupancy(ConflictError):
    """Room capacity cannot shrink below the residents already assigned."""

    def __init__(self, room_id: str, capacity: int, occupied: int):
        super().__init__(
            f"Capacity {capacity} is below current occupancy {occupied} for room {room_id}",
            ErrorCode.CAPACITY_BELOW_OCCUPANCY,
            {"room_id": room_id, "capacity": capacity, "occupied": occupied},
        )


class RoomNotEmpty(ConflictError):
    """A room with residents cannot be deleted."""

    def __init__(self, room_id: str, occupied: int):
        super().__init__(
            f"Room {room_id} still has {occupied} resident(s) assigned",
            ErrorCode.ROOM_NOT_EMPTY,
            {"room_id": room_id, "occupied": occupied},
        )


class RoomUnderMaintenance(ConflictError):
    """New residents cannot be placed in a room under maintenance."""

    def __init__(self, room_id: str):
        super().__init__(
            f"Room {room_id} is under maintenance",
            ErrorCode.ROOM_UNDER_MAINTENANCE,
            {"room_id": room_id},
        )


class AttendanceConflict(ConflictError):
    """Concurrent writes raced on the same (student, date) key."""

    def __init__(self, message: str = "Attendance record was modified concurrently"):
        super().__init__(message, ErrorCode.ATTENDANCE_CONFLICT)


class InvalidTransition(ConflictError):
    """A state machine was asked to move along an edge it does not have."""

    def __init__(self, entity: str, from_state: str, to_state: str):
        super().__init__(
            f"{entity} cannot move from '{from_state}' to '{to_state}'",
            ErrorCode.INVALID_TRANSITION,
            {"entity": entity, "from": from_state, "to": to_state},
        )


class PaymentInProgress(ConflictError):
    """A payment for the same fee is already being processed."""

    def __init__(self, fee_id: str):
        super().__init__(
            f"Payment for fee {fee_id} is already being processed",
            ErrorCode.PAYMENT_IN_PROGRESS,
            {"fee_id": fee_id},
        )


# ========================================
# Record Store Exceptions
# ========================================

class StoreError(BaseAppException):
    """Base class for failures reported by the record store."""

    def __init__(
        self,
        message: str,
        error_code: ErrorCode,
        collection: Optional[str] = None,
        status_code: int = 503,
    ):
        details = {"collection": collection} if collection else {}
        super().__init__(message, error_code, details, status_code)
        self.collection = collection


class RelationMissing(StoreError):
    """The backing collection does not exist (deployment or schema error)."""

    def __init__(self, collection: Optional[str] = None, message: Optional[str] = None):
        super().__init__(
            message or f"Collection '{collection}' does not exist",
            ErrorCode.RELATION_MISSING,
            collection,
        )


class TransientStoreError(StoreError):
    """Network, timeout or connection failure; the user may retry manually."""

    def __init__(self, message: str = "Record store is unreachable", collection: Optional[str] = None):
        super().__init__(message, ErrorCode.TRANSIENT_FAILURE, collection)


__all__ = [
    "ErrorCode",
    "BaseAppException",
    "OperationError",
    "UnauthorizedError",
    "TokenExpiredError",
    "InvalidTokenError",
    "ForbiddenError",
    "ValidationError",
    "ResourceNotFoundError",
    "ConflictError",
    "AlreadyExistsError",
    "CapacityExceeded",
    "CapacityBelowOccupancy",
    "RoomNotEmpty",
    "RoomUnderMaintenance",
    "AttendanceConflict",
    "InvalidTransition",
    "PaymentInProgress",
    "StoreError",
    "RelationMissing",
    "TransientStoreError",
]
