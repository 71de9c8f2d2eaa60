"""
Resident-initiated fee payment.

No money moves: after a simulated processing window the fee follows the
ordinary ``paid`` transition. While a payment for a fee is processing, a
second submission for the same fee is rejected.
"""

import threading
import time
from typing import Callable, Optional, Set

from sqlalchemy.orm import Session

from haven.config.settings import Settings, get_settings
from haven.core.exceptions import ForbiddenError, PaymentInProgress
from haven.models.enums import FeeStatus
from haven.models.fee import FeeRecord
from haven.repositories.fee_repository import FeeRepository
from haven.repositories.student_repository import StudentRepository
from haven.services.base import BaseService, ServiceResult
from haven.services.common.permissions import Principal
from haven.services.fee.fee_ledger_service import FeeLedgerService


class InFlightGuard:
    """Process-wide set of keys currently being processed."""

    def __init__(self):
        self._keys: Set[str] = set()
        self._lock = threading.Lock()

    def acquire(self, key: str) -> bool:
        with self._lock:
            if key in self._keys:
                return False
            self._keys.add(key)
            return True

    def release(self, key: str) -> None:
        with self._lock:
            self._keys.discard(key)

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._keys


payment_guard = InFlightGuard()


class PaymentService(BaseService):
    """Simulated payment of a resident's own fee."""

    def __init__(
        self,
        db_session: Session,
        settings: Optional[Settings] = None,
        guard: Optional[InFlightGuard] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        super().__init__(db_session)
        self.settings = settings or get_settings()
        self.guard = guard or payment_guard
        self._sleep = sleep
        self.fees = FeeRepository(db_session)
        self.students = StudentRepository(db_session)
        self.ledger = FeeLedgerService(db_session)

    def pay(self, principal: Principal, fee_id: str) -> ServiceResult[FeeRecord]:
        """
        Pay the caller's own fee.

        Failure codes:
            FORBIDDEN when the fee belongs to someone else,
            PAYMENT_IN_PROGRESS on a repeat submission during processing
        """
        try:
            fee = self.fees.get_or_raise(fee_id, "Fee")
            student = self.students.get_or_raise(fee.student_id, "Student")
            if student.user_id != principal.user_id:
                raise ForbiddenError("You can only pay your own fees", role=principal.role.value)

            if fee.status is FeeStatus.PAID:
                return ServiceResult.success(fee, message="Fee already paid", metadata={"changed": False})

            if not self.guard.acquire(fee_id):
                raise PaymentInProgress(fee_id)
            try:
                self._logger.info(f"Processing payment for fee {fee_id}")
                # No transaction is held across the processing window.
                self.db.rollback()
                self._sleep(self.settings.PAYMENT_SIMULATION_DELAY_SECONDS)
                with self.transaction():
                    fee, changed = self.ledger.settle(fee_id)
            finally:
                self.guard.release(fee_id)

            return ServiceResult.success(
                fee,
                message="Payment successful",
                metadata={"changed": changed},
            )

        except Exception as e:
            return self._handle_exception(e, "pay fee", fee_id, {"user_id": principal.user_id})
