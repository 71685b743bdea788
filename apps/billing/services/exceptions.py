"""
Domain-specific exceptions for the billing app.

These exceptions represent business rule violations and storage failures
raised by the payment services. Each carries a user-safe ``message`` and the
HTTP ``status_code`` the views answer with.
"""


class BillingServiceError(Exception):
    """Base exception for all billing service errors."""

    status_code = 400
    default_message = 'Billing operation failed'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class CustomerNotFoundError(BillingServiceError):
    """Raised when the paying customer does not exist."""
    status_code = 404
    default_message = 'Customer not found'


class RepairNotFoundError(BillingServiceError):
    """Raised when a repair does not exist."""
    status_code = 404
    default_message = 'Repair not found'


class InvalidAmountError(BillingServiceError):
    """Raised when the amount is missing, not positive, or the method is missing."""
    default_message = 'Positive amount and method are required'


class InvalidPaymentMethodError(InvalidAmountError):
    """Raised when the payment method is not a recognized PaymentMethod."""
    default_message = 'Invalid payment method'


class OverpaymentError(BillingServiceError):
    """Raised when the amount exceeds what is due."""
    default_message = 'Payment exceeds total due across all items'


class RepairNotBillableError(BillingServiceError):
    """Raised when paying a repair whose status is outside the billable set."""
    default_message = 'Repair is not billable'


class RepairLockedError(BillingServiceError):
    """Raised when paying a repair that is already settled."""
    default_message = 'Repair is already fully paid'


class ChargesBelowPaidError(BillingServiceError):
    """Raised when edited charges would total less than what was already paid."""
    default_message = 'Charges cannot total less than the amount already paid'


class LedgerIntegrityError(BillingServiceError):
    """Raised when stored billing data violates ledger invariants."""
    status_code = 500
    default_message = 'Internal server error'


class TransientStorageError(BillingServiceError):
    """Raised on lock timeouts, deadlocks or lost connections; safe to retry."""
    status_code = 503
    default_message = 'Payment could not be recorded, please retry'
