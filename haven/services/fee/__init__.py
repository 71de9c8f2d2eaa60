from haven.services.fee.fee_ledger_service import (
    FEE_TRANSITIONS,
    FeeLedgerService,
    can_transition,
    display_status,
)
from haven.services.fee.payment_service import InFlightGuard, PaymentService, payment_guard

__all__ = [
    "FEE_TRANSITIONS",
    "FeeLedgerService",
    "can_transition",
    "display_status",
    "InFlightGuard",
    "PaymentService",
    "payment_guard",
]
