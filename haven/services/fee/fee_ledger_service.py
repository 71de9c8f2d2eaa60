"""
Fee ledger.

Status lifecycle (no edge back to ``pending``)::

    pending -> paid
    pending -> overdue
    overdue -> paid
    paid    (terminal)

``overdue`` is only persisted by an explicit operator action; a pending fee
past its due date merely *reads* as overdue (see ``display_status``).
"""

from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Dict, FrozenSet, List, Optional

from sqlalchemy.orm import Session

from haven.core.exceptions import AlreadyExistsError, ForbiddenError, InvalidTransition, ValidationError
from haven.models.enums import FeeStatus, PaymentType
from haven.models.fee import FeeRecord
from haven.repositories.fee_repository import FeeRepository
from haven.repositories.student_repository import StudentRepository
from haven.schemas.fee import FeeBreakdown
from haven.services.base import BaseService, ServiceResult
from haven.services.common.permissions import Principal, require_admin

FEE_TRANSITIONS: Dict[FeeStatus, FrozenSet[FeeStatus]] = {
    FeeStatus.PENDING: frozenset({FeeStatus.PAID, FeeStatus.OVERDUE}),
    FeeStatus.OVERDUE: frozenset({FeeStatus.PAID}),
    FeeStatus.PAID: frozenset(),
}

if set(FEE_TRANSITIONS) != set(FeeStatus):
    raise RuntimeError("FEE_TRANSITIONS must cover every FeeStatus")


def can_transition(current: FeeStatus, target: FeeStatus) -> bool:
    return target in FEE_TRANSITIONS[current]


def display_status(fee: FeeRecord, today: Optional[date] = None) -> FeeStatus:
    """Status to show on screen; never written back."""
    today = today or date.today()
    if fee.status is FeeStatus.PENDING and fee.due_date < today:
        return FeeStatus.OVERDUE
    return fee.status


class FeeLedgerService(BaseService):
    """One fee record per student with a monotonic status."""

    def __init__(self, db_session: Session):
        super().__init__(db_session)
        self.fees = FeeRepository(db_session)
        self.students = StudentRepository(db_session)

    # -------------------------------------------------------------------------
    # Issuing
    # -------------------------------------------------------------------------

    def issue_fee(
        self,
        principal: Principal,
        student_id: str,
        amount: Decimal,
        due_date: date,
        payment_type: PaymentType = PaymentType.SEMI_ANNUAL,
    ) -> ServiceResult[FeeRecord]:
        """
        Create the student's fee record for the current cycle.

        An outstanding (pending/overdue) record blocks a new one; a paid
        record is removed and replaced by the new cycle.
        """
        try:
            require_admin(principal, action="issue fees")
            try:
                amount = Decimal(str(amount))
            except InvalidOperation:
                amount = None
            if amount is None or not amount.is_finite():
                raise ValidationError("Amount must be a number", field="amount")
            if amount < 0:
                raise ValidationError("Amount cannot be negative", field="amount")

            with self.transaction():
                self.students.get_or_raise(student_id, "Student")
                existing = self.fees.get_by_student(student_id)
                if existing is not None:
                    if existing.status is not FeeStatus.PAID:
                        raise AlreadyExistsError("Fee", "student_id", student_id)
                    self.fees.delete(existing.id)

                fee = self.fees.insert({
                    "student_id": student_id,
                    "amount": amount,
                    "payment_type": PaymentType(payment_type),
                    "due_date": due_date,
                    "status": FeeStatus.PENDING,
                    "payment_date": None,
                })

            self._log_operation("issue_fee", fee.id, {"student_id": student_id, "amount": str(amount)})
            return ServiceResult.success(fee, message="Fee issued")

        except Exception as e:
            return self._handle_exception(e, "issue fee", student_id)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def mark_paid(self, principal: Principal, fee_id: str) -> ServiceResult[FeeRecord]:
        """
        Move a fee to ``paid`` and stamp ``payment_date``.

        Already paid is a successful no-op; ``payment_date`` keeps the
        first transition time.
        """
        try:
            require_admin(principal, action="mark fees paid")
            with self.transaction():
                fee, changed = self.settle(fee_id)

            return ServiceResult.success(
                fee,
                message="Fee marked as paid" if changed else "Fee already paid",
                metadata={"changed": changed},
            )

        except Exception as e:
            return self._handle_exception(e, "mark fee paid", fee_id)

    def settle(self, fee_id: str) -> tuple[FeeRecord, bool]:
        """
        Apply the ``paid`` transition inside the caller's transaction.

        Returns:
            The fee and whether anything changed
        """
        fee = self.fees.get_or_raise(fee_id, "Fee")
        if fee.status is FeeStatus.PAID:
            return fee, False
        if not can_transition(fee.status, FeeStatus.PAID):
            raise InvalidTransition("Fee", fee.status.value, FeeStatus.PAID.value)

        fee = self.fees.update(
            {"status": FeeStatus.PAID, "payment_date": datetime.now(timezone.utc)},
            fee_id,
        )
        self._log_operation("mark_paid", fee_id, {"student_id": fee.student_id})
        return fee, True

    def mark_overdue(self, principal: Principal, fee_id: str) -> ServiceResult[FeeRecord]:
        try:
            require_admin(principal, action="mark fees overdue")
            with self.transaction():
                fee = self.fees.get_or_raise(fee_id, "Fee")
                changed = fee.status is not FeeStatus.OVERDUE
                if changed:
                    if not can_transition(fee.status, FeeStatus.OVERDUE):
                        raise InvalidTransition("Fee", fee.status.value, FeeStatus.OVERDUE.value)
                    fee = self.fees.update({"status": FeeStatus.OVERDUE}, fee_id)

            if changed:
                self._log_operation("mark_overdue", fee_id)
            return ServiceResult.success(fee, metadata={"changed": changed})

        except Exception as e:
            return self._handle_exception(e, "mark fee overdue", fee_id)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_fees(self, principal: Principal) -> ServiceResult[List[FeeRecord]]:
        try:
            require_admin(principal, action="list fees")
            rows = self.fees.list_with_students()
            return ServiceResult.success(rows, metadata={"count": len(rows)})
        except Exception as e:
            return self._handle_exception(e, "list fees")

    def fee_for_student(self, principal: Principal, student_id: str) -> ServiceResult[Optional[FeeRecord]]:
        """The student's current fee record, or None when none was issued."""
        try:
            student = self.students.get_or_raise(student_id, "Student")
            if not principal.is_staff and student.user_id != principal.user_id:
                raise ForbiddenError("Residents can only view their own fees", role=principal.role.value)
            return ServiceResult.success(self.fees.get_by_student(student_id))
        except Exception as e:
            return self._handle_exception(e, "get student fee", student_id)

    def breakdown(self, principal: Principal) -> ServiceResult[FeeBreakdown]:
        try:
            require_admin(principal, action="view fee breakdown")
            rows = self.fees.select()
            counts = {status: 0 for status in FeeStatus}
            total = Decimal("0")
            collected = Decimal("0")
            for fee in rows:
                counts[fee.status] += 1
                total += fee.amount
                if fee.status is FeeStatus.PAID:
                    collected += fee.amount
            return ServiceResult.success(
                FeeBreakdown(counts=counts, total_amount=total, collected_amount=collected)
            )
        except Exception as e:
            return self._handle_exception(e, "build fee breakdown")
