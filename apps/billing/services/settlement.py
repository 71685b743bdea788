"""
Settlement calculator.

When a repair's cumulative payments reach its total, the repair is locked and
its total is split between the assigned technician and the shop. Settlement
happens once per repair; a locked repair is never split again.

The staff share is rounded to the cent and the shop share is the remainder,
so ``staff_share + shop_share == total`` exactly.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from apps.accounts.models import User, RoleCode
from apps.repairs.models import Repair

from .exceptions import LedgerIntegrityError

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


@dataclass(frozen=True)
class CommissionRate:
    """
    Technician commission resolved for one settlement.

    Either ``flat`` (a stored rate applies) or ``none`` (rate 0, the shop
    keeps everything).
    """

    kind: str
    rate: Decimal

    FLAT = 'flat'
    NONE = 'none'

    @classmethod
    def flat(cls, rate) -> 'CommissionRate':
        return cls(kind=cls.FLAT, rate=Decimal(rate))

    @classmethod
    def none(cls) -> 'CommissionRate':
        return cls(kind=cls.NONE, rate=Decimal('0'))


@dataclass(frozen=True)
class Settlement:
    staff_share: Decimal
    shop_share: Decimal
    commission: CommissionRate


def resolve_commission_rate(technician: Optional[User]) -> CommissionRate:
    """
    Decide the commission for a repair's assignee.

    Only users with the TECHNICIAN role and a stored commission rate earn a
    staff share. No assignee, any other role, or a null rate gives 0%.

    Raises:
        LedgerIntegrityError: If the stored rate is outside [0, 1]
    """
    if technician is None:
        return CommissionRate.none()

    if technician.role_code != RoleCode.TECHNICIAN or technician.commission_rate is None:
        return CommissionRate.none()

    rate = Decimal(technician.commission_rate)
    if rate < 0 or rate > 1:
        logger.error(
            "Technician %s has commission rate %s outside [0, 1]",
            technician.id, rate,
        )
        raise LedgerIntegrityError()

    return CommissionRate.flat(rate)


def compute_settlement(total: Decimal, commission: CommissionRate) -> Settlement:
    """
    Split a repair total between technician and shop.

    Example:
        >>> s = compute_settlement(Decimal('1000.00'), CommissionRate.flat('0.3'))
        >>> s.staff_share, s.shop_share
        (Decimal('300.00'), Decimal('700.00'))
    """
    staff_share = (total * commission.rate).quantize(CENT, rounding=ROUND_HALF_UP)
    shop_share = total - staff_share

    return Settlement(
        staff_share=staff_share,
        shop_share=shop_share,
        commission=commission,
    )


def load_technician(user_id) -> Optional[User]:
    """Fetch the assignee with their role, or None."""
    if user_id is None:
        return None
    return User.objects.select_related('role').filter(id=user_id).first()


def settle_repair(repair: Repair, new_paid: Decimal) -> Optional[Settlement]:
    """
    Lock and split a repair if ``new_paid`` covers its total.

    Mutates ``repair`` in memory; the caller saves it inside its transaction.

    Args:
        repair: Repair receiving money
        new_paid: Cumulative amount paid including the current payment

    Returns:
        Settlement when the repair became locked by this call, else None
    """
    if repair.is_locked or new_paid < repair.total_charges:
        return None

    technician = load_technician(repair.assigned_to_id)
    settlement = compute_settlement(
        repair.total_charges,
        resolve_commission_rate(technician),
    )

    repair.is_locked = True
    repair.staff_share_amount = settlement.staff_share
    repair.shop_share_amount = settlement.shop_share

    logger.info(
        "Repair %s settled: total=%s staff=%s shop=%s commission=%s",
        repair.id, repair.total_charges, settlement.staff_share,
        settlement.shop_share, settlement.commission.kind,
    )
    return settlement
