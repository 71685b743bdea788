"""
Payment allocation.

Pure functions: given an amount and a customer's open bills (oldest first),
decide how much money each bill receives. Nothing here touches the database.

Algorithm:
    1. total_due = sum of every bill's due
    2. Reject the whole payment if amount > total_due
    3. Walk the bills oldest first, applying min(remaining, due) to each
    4. Stop as soon as nothing remains

The allocations always sum exactly to the amount and no bill receives more
than it owes.
"""

import re
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, List, Sequence, Tuple

from apps.billing.models import PaymentMethod

from .exceptions import InvalidAmountError, InvalidPaymentMethodError, OverpaymentError

CENT = Decimal('0.01')
ZERO = Decimal('0.00')

# Payment.amount is DecimalField(max_digits=10, decimal_places=2)
MAX_AMOUNT = Decimal('99999999.99')

# Plain decimal notation only (no exponents, underscores or special values)
AMOUNT_PATTERN = re.compile(r"^[+-]?(?:\d+(?:\.\d*)?|\.\d+)$")


@dataclass(frozen=True)
class Allocation:
    """Money applied to a single bill."""

    bill: Any
    amount: Decimal


def validate_payment_input(amount, method) -> Tuple[Decimal, str]:
    """
    Normalize a payment request.

    Args:
        amount: Amount as received from the caller (str, int, Decimal...)
        method: Payment method code

    Returns:
        tuple: (amount as Decimal with 2 places, PaymentMethod value)

    Raises:
        InvalidAmountError: If amount is missing, not a number, not positive,
            has more than 2 decimal places, or method is missing
        InvalidPaymentMethodError: If method is not a PaymentMethod value

    Example:
        >>> validate_payment_input('150.5', 'CASH')
        (Decimal('150.50'), 'CASH')
    """
    if amount is None or amount == '' or isinstance(amount, bool) or not method:
        raise InvalidAmountError()

    text = str(amount).strip()
    if not AMOUNT_PATTERN.match(text):
        raise InvalidAmountError()

    try:
        value = Decimal(text)
    except (InvalidOperation, ValueError):
        raise InvalidAmountError()

    if not value.is_finite() or value <= 0 or value > MAX_AMOUNT:
        raise InvalidAmountError()

    if value != value.quantize(CENT):
        raise InvalidAmountError()

    if method not in PaymentMethod.values:
        raise InvalidPaymentMethodError()

    return value.quantize(CENT), PaymentMethod(method).value


def total_due(bills: Sequence[Any]) -> Decimal:
    """Sum of the positive dues of ``bills``."""
    return sum((bill.due for bill in bills if bill.due > 0), ZERO)


def allocate_payment(amount: Decimal, bills: Sequence[Any]) -> List[Allocation]:
    """
    Distribute a payment across bills, oldest first.

    Args:
        amount: Positive payment amount
        bills: Bills ordered oldest first; each exposes ``due``

    Returns:
        list[Allocation]: One entry per bill that receives money, in bill
        order. Bills with nothing due are skipped.

    Raises:
        InvalidAmountError: If amount is not positive
        OverpaymentError: If amount exceeds the combined due of all bills

    Example:
        Two bills owing 500 and 800, paying 600::

            allocations = allocate_payment(Decimal('600'), [older, newer])
            # [Allocation(older, 500), Allocation(newer, 100)]
    """
    if amount is None or amount <= 0:
        raise InvalidAmountError()

    if amount > total_due(bills):
        raise OverpaymentError()

    allocations = []
    remaining = amount

    for bill in bills:
        if remaining <= 0:
            break

        applied = min(remaining, bill.due)
        if applied <= 0:
            continue

        allocations.append(Allocation(bill=bill, amount=applied))
        remaining -= applied

    # Verification (safety check)
    if remaining != 0:
        raise OverpaymentError()

    return allocations
