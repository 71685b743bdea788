"""
Ledger reader.

Computes what each billable repair of a customer costs, what has been paid
and what is still due. Performs no writes. When called with ``lock=True``
inside ``transaction.atomic()`` the customer row and its repair rows are
locked so the amounts cannot change before the caller commits.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List
from uuid import UUID

from django.core.exceptions import ValidationError

from apps.customers.models import Customer
from apps.repairs.models import Repair, BILLABLE_STATUSES

from .exceptions import CustomerNotFoundError, RepairNotFoundError

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')


@dataclass(frozen=True)
class BillLedger:
    """Totals for one repair at the moment it was read."""

    repair: Repair
    total: Decimal
    paid: Decimal

    @property
    def due(self) -> Decimal:
        return self.total - self.paid

    @property
    def is_open(self) -> bool:
        """Open bills can still receive money."""
        return not self.repair.is_locked and self.due > 0

    @property
    def is_overpaid(self) -> bool:
        return self.due < 0


@dataclass(frozen=True)
class CustomerLedger:
    """A customer's billable repairs, oldest first."""

    customer: Customer
    bills: List[BillLedger] = field(default_factory=list)

    @property
    def open_bills(self) -> List[BillLedger]:
        return [bill for bill in self.bills if bill.is_open]

    @property
    def overpaid_bills(self) -> List[BillLedger]:
        return [bill for bill in self.bills if bill.is_overpaid]

    @property
    def combined_total(self) -> Decimal:
        return sum((bill.total for bill in self.bills), ZERO)

    @property
    def combined_paid(self) -> Decimal:
        return sum((bill.paid for bill in self.bills), ZERO)

    @property
    def combined_due(self) -> Decimal:
        return sum((bill.due for bill in self.bills), ZERO)

    @property
    def open_due(self) -> Decimal:
        return sum((bill.due for bill in self.open_bills), ZERO)


def compute_bill_ledger(repair: Repair) -> BillLedger:
    """
    Compute totals for a repair from its payments.

    Uses prefetched ``payments`` when available. A negative due means more
    money was recorded than charged; it is logged so it can be investigated.
    """
    paid = sum((payment.amount for payment in repair.payments.all()), ZERO)
    bill = BillLedger(repair=repair, total=repair.total_charges, paid=paid)

    if bill.is_overpaid:
        logger.error(
            "Repair %s has negative due: total=%s paid=%s",
            repair.id, bill.total, bill.paid,
        )

    return bill


def lock_customer(customer_id: UUID) -> Customer:
    """
    Fetch a customer and lock its row until the transaction ends.

    All payment paths take this lock before reading repairs, so payments for
    the same customer run one after another.
    """
    return _get_customer(customer_id, lock=True)


def get_customer_ledger(
    *,
    customer_id: UUID,
    lock: bool = False,
    with_charges: bool = False
) -> CustomerLedger:
    """
    Load a customer's billable repairs with their dues.

    Args:
        customer_id: UUID of the customer
        lock: Lock the customer and repair rows (requires an open transaction)
        with_charges: Also prefetch charge lines (for display)

    Returns:
        CustomerLedger with repairs ordered by created_at ascending

    Raises:
        CustomerNotFoundError: If the customer doesn't exist
    """
    customer = _get_customer(customer_id, lock=lock)

    repairs = (
        Repair.objects
        .filter(customer=customer, status__in=BILLABLE_STATUSES)
        .order_by('created_at', 'id')
    )
    if lock:
        repairs = repairs.select_for_update()

    prefetch = ['payments__received_by', 'charges'] if with_charges else ['payments']
    repairs = repairs.prefetch_related(*prefetch)

    bills = [compute_bill_ledger(repair) for repair in repairs]
    return CustomerLedger(customer=customer, bills=bills)


def get_bill_ledger(*, repair_id: UUID, lock: bool = False) -> BillLedger:
    """
    Load one repair with its due.

    With ``lock=True`` the owning customer is locked first, the same order
    get_customer_ledger uses, then the repair row.

    Raises:
        RepairNotFoundError: If the repair doesn't exist
    """
    try:
        customer_id = (
            Repair.objects
            .values_list('customer_id', flat=True)
            .get(id=repair_id)
        )
    except (Repair.DoesNotExist, ValidationError):
        raise RepairNotFoundError()

    if lock:
        lock_customer(customer_id)

    repairs = Repair.objects.prefetch_related('payments')
    if lock:
        repairs = repairs.select_for_update()

    try:
        repair = repairs.get(id=repair_id)
    except Repair.DoesNotExist:
        raise RepairNotFoundError()

    return compute_bill_ledger(repair)


def get_customer_billing_summary(*, customer_id: UUID) -> CustomerLedger:
    """
    Read-only billing view of a customer: every billable repair with its
    charges, payments and dues plus combined totals.

    Raises:
        CustomerNotFoundError: If the customer doesn't exist
    """
    return get_customer_ledger(customer_id=customer_id, with_charges=True)


def _get_customer(customer_id, lock=False):
    customers = Customer.objects.all()
    if lock:
        customers = customers.select_for_update()

    try:
        return customers.get(id=customer_id)
    except (Customer.DoesNotExist, ValidationError):
        raise CustomerNotFoundError()
