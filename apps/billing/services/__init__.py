"""
Billing app services layer.

Services contain the payment allocation and settlement logic.
All state-changing operations run in one transaction with the customer's
row locked against concurrent payments.
"""

from .exceptions import (
    BillingServiceError,
    CustomerNotFoundError,
    RepairNotFoundError,
    ChargesBelowPaidError,
    InvalidAmountError,
    InvalidPaymentMethodError,
    OverpaymentError,
    RepairNotBillableError,
    RepairLockedError,
    LedgerIntegrityError,
    TransientStorageError,
)

from .ledger import (
    BillLedger,
    CustomerLedger,
    compute_bill_ledger,
    get_customer_ledger,
    get_bill_ledger,
    get_customer_billing_summary,
)

from .allocation import (
    Allocation,
    allocate_payment,
    validate_payment_input,
)

from .settlement import (
    CommissionRate,
    Settlement,
    resolve_commission_rate,
    compute_settlement,
    settle_repair,
)

from .payment_processing import (
    CreatedPayment,
    PaymentResult,
    apply_customer_payment,
    apply_repair_payment,
    recalculate_repair_charges,
)


__all__ = [
    # Exceptions
    'BillingServiceError',
    'CustomerNotFoundError',
    'RepairNotFoundError',
    'ChargesBelowPaidError',
    'InvalidAmountError',
    'InvalidPaymentMethodError',
    'OverpaymentError',
    'RepairNotBillableError',
    'RepairLockedError',
    'LedgerIntegrityError',
    'TransientStorageError',

    # Ledger
    'BillLedger',
    'CustomerLedger',
    'compute_bill_ledger',
    'get_customer_ledger',
    'get_bill_ledger',
    'get_customer_billing_summary',

    # Allocation
    'Allocation',
    'allocate_payment',
    'validate_payment_input',

    # Settlement
    'CommissionRate',
    'Settlement',
    'resolve_commission_rate',
    'compute_settlement',
    'settle_repair',

    # Payment processing
    'CreatedPayment',
    'PaymentResult',
    'apply_customer_payment',
    'apply_repair_payment',
    'recalculate_repair_charges',
]
