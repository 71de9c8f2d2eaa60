"""
Base service class providing common functionality for all services.
"""

from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from sqlalchemy.orm import Session

from haven.config.logging import get_logger
from haven.core.exceptions import BaseAppException, ErrorCode, StoreError
from haven.services.base.service_result import (
    ErrorSeverity,
    ServiceError,
    ServiceResult,
)


class BaseService:
    """
    Base service with common behaviors:
    - Shared logger and db session
    - Consistent error handling via ServiceResult
    - Transaction management utilities

    Services raise application exceptions internally and convert them to a
    failed ``ServiceResult`` at their public boundary, so every failure is
    scoped to the single operation that produced it.
    """

    def __init__(self, db_session: Session):
        self.db: Session = db_session
        self._logger = get_logger(f"haven.services.{self.__class__.__name__}")

    # -------------------------------------------------------------------------
    # Exception & Error Handling
    # -------------------------------------------------------------------------

    def _handle_exception(
        self,
        exception: Exception,
        operation: str,
        entity_ref: Optional[Any] = None,
        additional_context: Optional[Dict[str, Any]] = None,
    ) -> ServiceResult:
        """
        Convert exception to a ServiceResult failure with logging.

        Application exceptions keep their own code and message; anything
        else is reported as an internal error.
        """
        context = {
            "operation": operation,
            "entity_ref": str(entity_ref) if entity_ref is not None else None,
            "exception_type": type(exception).__name__,
        }
        if additional_context:
            context.update(additional_context)

        if isinstance(exception, StoreError):
            self._logger.error(f"Store failure during {operation}: {exception}", extra=context)
            return ServiceResult.failure(
                ServiceError.from_app_exception(exception, ErrorSeverity.ERROR)
            )

        if isinstance(exception, BaseAppException):
            self._logger.warning(f"{operation} rejected: {exception}", extra=context)
            return ServiceResult.failure(ServiceError.from_app_exception(exception))

        self._logger.error(
            f"Error during {operation}: {exception}",
            exc_info=True,
            extra=context,
        )
        return ServiceResult.failure(
            ServiceError(
                code=ErrorCode.INTERNAL_ERROR,
                message=f"Failed to {operation.replace('_', ' ')}",
                severity=ErrorSeverity.CRITICAL,
                details={"error": str(exception)},
            )
        )

    # -------------------------------------------------------------------------
    # Transaction Management
    # -------------------------------------------------------------------------

    @contextmanager
    def transaction(self, auto_commit: bool = True) -> Iterator[Session]:
        """
        Context manager for database transactions with automatic rollback.

        Example:
            with self.transaction():
                self.rooms.insert(data)
                # automatic commit on success, rollback on exception
        """
        try:
            yield self.db
            if auto_commit:
                self._commit()
        except Exception:
            self._rollback()
            raise

    def _commit(self) -> None:
        try:
            self.db.commit()
        except Exception as e:
            self._logger.error(f"Commit failed: {e}")
            self._rollback()
            raise

    def _rollback(self) -> None:
        """Rollback the current transaction, suppressing rollback errors."""
        try:
            self.db.rollback()
            self._logger.debug("Transaction rolled back")
        except Exception as e:
            # Rollback errors must not mask the original error
            self._logger.warning(f"Rollback failed: {e}")

    # -------------------------------------------------------------------------
    # Utility Methods
    # -------------------------------------------------------------------------

    def _log_operation(
        self,
        operation: str,
        entity_ref: Optional[Any] = None,
        extra: Optional[Dict[str, Any]] = None,
    ) -> None:
        context = {"operation": operation, "entity_ref": str(entity_ref) if entity_ref else None}
        if extra:
            context.update(extra)
        self._logger.info(f"{operation}: {entity_ref}", extra=context)
