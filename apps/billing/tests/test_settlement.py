import pytest
from decimal import Decimal

from apps.accounts.models import User, Role, RoleCode
from apps.billing.services.exceptions import LedgerIntegrityError
from apps.billing.services.settlement import (
    CommissionRate,
    compute_settlement,
    resolve_commission_rate,
    settle_repair,
)


def staff_user(role_code, rate):
    """Unsaved user; commission resolution needs no database."""
    return User(
        email='staff@example.com',
        role=Role(code=role_code, name=role_code),
        commission_rate=rate,
    )


# =============================================================================
# Commission resolution
# =============================================================================

class TestResolveCommissionRate:

    def test_technician_with_rate_gets_flat_commission(self):
        commission = resolve_commission_rate(staff_user(RoleCode.TECHNICIAN, Decimal('0.3')))

        assert commission.kind == CommissionRate.FLAT
        assert commission.rate == Decimal('0.3')

    def test_no_assignee_means_no_commission(self):
        assert resolve_commission_rate(None) == CommissionRate.none()

    def test_technician_without_rate_means_no_commission(self):
        assert resolve_commission_rate(staff_user(RoleCode.TECHNICIAN, None)) == CommissionRate.none()

    def test_non_technician_rate_ignored(self):
        """Only technicians earn commission, even if another role has a rate."""
        assert resolve_commission_rate(staff_user(RoleCode.FRONT_DESK, Decimal('0.5'))) == CommissionRate.none()

    @pytest.mark.parametrize('rate', [Decimal('1.5'), Decimal('-0.1')])
    def test_rate_outside_unit_interval_is_integrity_error(self, rate):
        with pytest.raises(LedgerIntegrityError):
            resolve_commission_rate(staff_user(RoleCode.TECHNICIAN, rate))


# =============================================================================
# Share computation
# =============================================================================

class TestComputeSettlement:

    def test_thirty_percent_split(self):
        settlement = compute_settlement(Decimal('1000.00'), CommissionRate.flat('0.3'))

        assert settlement.staff_share == Decimal('300.00')
        assert settlement.shop_share == Decimal('700.00')

    def test_no_commission_shop_keeps_total(self):
        settlement = compute_settlement(Decimal('450.00'), CommissionRate.none())

        assert settlement.staff_share == Decimal('0.00')
        assert settlement.shop_share == Decimal('450.00')

    def test_staff_share_rounds_half_up(self):
        # 0.05 * 0.5 = 0.025 -> 0.03
        settlement = compute_settlement(Decimal('0.05'), CommissionRate.flat('0.5'))

        assert settlement.staff_share == Decimal('0.03')
        assert settlement.shop_share == Decimal('0.02')

    @pytest.mark.parametrize('total, rate', [
        ('99.99', '0.3333'),
        ('0.01', '0.5'),
        ('1234.57', '0.1250'),
        ('10.00', '1'),
    ])
    def test_shares_add_up_to_total(self, total, rate):
        settlement = compute_settlement(Decimal(total), CommissionRate.flat(rate))

        assert settlement.staff_share + settlement.shop_share == Decimal(total)
        assert settlement.staff_share == settlement.staff_share.quantize(Decimal('0.01'))


# =============================================================================
# settle_repair
# =============================================================================

@pytest.mark.django_db
class TestSettleRepair:

    def test_fully_paid_repair_is_locked_and_split(self, make_repair, customer, technician):
        repair = make_repair(customer, '1000.00', assigned_to=technician)

        settlement = settle_repair(repair, Decimal('1000.00'))

        assert settlement is not None
        assert repair.is_locked is True
        assert repair.staff_share_amount == Decimal('300.00')
        assert repair.shop_share_amount == Decimal('700.00')

    def test_partially_paid_repair_untouched(self, make_repair, customer, technician):
        repair = make_repair(customer, '1000.00', assigned_to=technician)

        assert settle_repair(repair, Decimal('999.99')) is None
        assert repair.is_locked is False
        assert repair.staff_share_amount == Decimal('0.00')

    def test_locked_repair_never_resettled(self, make_repair, customer, technician):
        repair = make_repair(customer, '1000.00', assigned_to=technician)
        settle_repair(repair, Decimal('1000.00'))
        repair.save()

        # Rate changes after settlement must not move the recorded shares
        technician.commission_rate = Decimal('0.9000')
        technician.save()

        assert settle_repair(repair, Decimal('1000.00')) is None
        assert repair.staff_share_amount == Decimal('300.00')

    def test_unassigned_repair_goes_to_shop(self, make_repair, customer):
        repair = make_repair(customer, '200.00')

        settle_repair(repair, Decimal('200.00'))

        assert repair.staff_share_amount == Decimal('0.00')
        assert repair.shop_share_amount == Decimal('200.00')
