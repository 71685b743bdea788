"""
Payment processing service.

Records money received from a customer. Each call is one database
transaction: the customer row is locked, dues are read, the amount is
allocated oldest repair first, a Payment row and an audit entry are written
per repair, and repairs that become fully paid are settled. Any error rolls
the whole call back; either every payment of the call is stored or none is.

Example:
    Paying 600 against repairs owing 500 (older) and 800 (newer)::

        from apps.billing.services import apply_customer_payment

        result = apply_customer_payment(
            customer_id=customer.id,
            amount='600.00',
            method='CASH',
            acting_user=request.user,
        )
        # result.created_payments: 500 on the older repair (now locked),
        # 100 on the newer one
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from django.conf import settings
from django.db import connection, transaction, OperationalError

from apps.accounts.models import User
from apps.audit.models import AuditAction
from apps.audit.services import log_audit
from apps.billing.models import Payment

from .allocation import allocate_payment, validate_payment_input
from .exceptions import (
    ChargesBelowPaidError,
    LedgerIntegrityError,
    OverpaymentError,
    RepairLockedError,
    RepairNotBillableError,
    TransientStorageError,
)
from .ledger import BillLedger, get_bill_ledger, get_customer_ledger
from .settlement import settle_repair

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CreatedPayment:
    payment: Payment
    repair_id: UUID
    amount: Decimal


@dataclass(frozen=True)
class PaymentResult:
    created_payments: List[CreatedPayment] = field(default_factory=list)

    @property
    def total_applied(self) -> Decimal:
        return sum((created.amount for created in self.created_payments), Decimal('0.00'))


def apply_customer_payment(
    *,
    customer_id: UUID,
    amount,
    method: str,
    acting_user: Optional[User]
) -> PaymentResult:
    """
    Allocate a customer payment across their open repairs, oldest first.

    Args:
        customer_id: UUID of the paying customer
        amount: Amount received (validated and converted to Decimal)
        method: PaymentMethod value
        acting_user: Staff member receiving the money

    Returns:
        PaymentResult listing one CreatedPayment per repair that received money

    Raises:
        InvalidAmountError: If amount/method are missing or amount is not positive
        InvalidPaymentMethodError: If method is not recognized
        CustomerNotFoundError: If the customer doesn't exist
        OverpaymentError: If amount exceeds the combined due of all open repairs
        LedgerIntegrityError: If stored payments exceed a repair's total
        TransientStorageError: On lock timeout, deadlock or lost connection
    """
    amount, method = validate_payment_input(amount, method)

    try:
        with transaction.atomic():
            _set_lock_timeout()

            ledger = get_customer_ledger(customer_id=customer_id, lock=True)
            if ledger.overpaid_bills:
                raise LedgerIntegrityError()

            allocations = allocate_payment(amount, ledger.open_bills)

            created = [
                _record_payment(
                    allocation.bill,
                    allocation.amount,
                    method=method,
                    acting_user=acting_user,
                    customer_bill=True,
                )
                for allocation in allocations
            ]
    except OperationalError as exc:
        logger.warning("Customer %s payment aborted by storage error: %s", customer_id, exc)
        raise TransientStorageError() from exc

    logger.info(
        "Customer %s paid %s by %s across %d repair(s)",
        customer_id, amount, method, len(created),
    )
    return PaymentResult(created_payments=created)


def apply_repair_payment(
    *,
    repair_id: UUID,
    amount,
    method: str,
    acting_user: Optional[User]
) -> PaymentResult:
    """
    Record a payment against one repair.

    Uses the same locking, settlement and audit rules as
    apply_customer_payment, limited to a single repair.

    Raises:
        InvalidAmountError: If amount/method are missing or amount is not positive
        InvalidPaymentMethodError: If method is not recognized
        RepairNotFoundError: If the repair doesn't exist
        RepairNotBillableError: If the repair's status is not billable
        RepairLockedError: If the repair is already settled
        OverpaymentError: If amount exceeds the repair's due
        LedgerIntegrityError: If stored payments exceed the repair's total
        TransientStorageError: On lock timeout, deadlock or lost connection
    """
    amount, method = validate_payment_input(amount, method)

    try:
        with transaction.atomic():
            _set_lock_timeout()

            bill = get_bill_ledger(repair_id=repair_id, lock=True)
            if not bill.repair.is_billable:
                raise RepairNotBillableError()
            if bill.repair.is_locked:
                raise RepairLockedError()
            if bill.is_overpaid:
                raise LedgerIntegrityError()
            if amount > bill.due:
                raise OverpaymentError('Payment exceeds amount due')

            created = [
                _record_payment(
                    allocation.bill,
                    allocation.amount,
                    method=method,
                    acting_user=acting_user,
                    customer_bill=False,
                )
                for allocation in allocate_payment(amount, [bill])
            ]
    except OperationalError as exc:
        logger.warning("Repair %s payment aborted by storage error: %s", repair_id, exc)
        raise TransientStorageError() from exc

    logger.info("Repair %s paid %s by %s", repair_id, amount, method)
    return PaymentResult(created_payments=created)


def recalculate_repair_charges(*, repair_id: UUID) -> BillLedger:
    """
    Refresh a repair's cached total from its charge lines.

    Runs under the same customer lock as payments. If money was already
    received and the new total equals it, the repair is settled here, since
    no later payment would ever reach it.

    Args:
        repair_id: UUID of the repair whose charges changed

    Returns:
        BillLedger with the new total

    Raises:
        RepairNotFoundError: If the repair doesn't exist
        RepairLockedError: If the repair is already settled
        ChargesBelowPaidError: If the charges total less than what was paid
        TransientStorageError: On lock timeout, deadlock or lost connection
    """
    try:
        with transaction.atomic():
            _set_lock_timeout()

            bill = get_bill_ledger(repair_id=repair_id, lock=True)
            repair = bill.repair
            if repair.is_locked:
                raise RepairLockedError()

            new_total = repair.charges_total()
            if new_total < bill.paid:
                raise ChargesBelowPaidError()

            repair.total_charges = new_total
            update_fields = ['total_charges', 'updated_at']

            if bill.paid > 0 and settle_repair(repair, bill.paid) is not None:
                update_fields += ['is_locked', 'staff_share_amount', 'shop_share_amount']

            repair.save(update_fields=update_fields)
    except OperationalError as exc:
        logger.warning("Repair %s charge update aborted by storage error: %s", repair_id, exc)
        raise TransientStorageError() from exc

    logger.info("Repair %s total set to %s (paid %s)", repair_id, new_total, bill.paid)
    return BillLedger(repair=repair, total=new_total, paid=bill.paid)


def _record_payment(
    bill: BillLedger,
    amount: Decimal,
    *,
    method: str,
    acting_user: Optional[User],
    customer_bill: bool
) -> CreatedPayment:
    """Persist one allocation: payment row, settlement, audit entry."""
    repair = bill.repair

    payment = Payment.objects.create(
        repair=repair,
        amount=amount,
        method=method,
        received_by=acting_user,
    )

    new_paid = bill.paid + amount
    if new_paid > repair.total_charges:
        raise LedgerIntegrityError()

    settlement = settle_repair(repair, new_paid)
    if settlement is not None:
        repair.save(update_fields=[
            'is_locked',
            'staff_share_amount',
            'shop_share_amount',
            'updated_at',
        ])

    log_audit(
        actor=acting_user,
        repair=repair,
        action=AuditAction.PAYMENT_RECEIVED,
        metadata={
            'payment_id': str(payment.id),
            'amount': str(amount),
            'method': method,
            'new_paid': str(new_paid),
            'total': str(repair.total_charges),
            'locked': repair.is_locked,
            'staff_share': str(repair.staff_share_amount),
            'shop_share': str(repair.shop_share_amount),
            'customer_bill': customer_bill,
        },
    )

    return CreatedPayment(payment=payment, repair_id=repair.id, amount=amount)


def _set_lock_timeout():
    """Bound how long this transaction waits for row locks (PostgreSQL only)."""
    if connection.vendor != 'postgresql':
        return

    with connection.cursor() as cursor:
        cursor.execute('SET LOCAL lock_timeout = %s', [int(settings.BILLING_LOCK_TIMEOUT_MS)])
