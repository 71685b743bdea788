"""
Tests for billing permission classes and role permission checks.
"""
import pytest
from unittest.mock import Mock
from django.contrib.auth.models import AnonymousUser

from apps.accounts.models import User, Role, RoleCode, Permission
from apps.billing.permissions import CanTakePayment, CanViewBilling


def request_for(user):
    request = Mock()
    request.user = user
    return request


@pytest.mark.django_db
class TestCanTakePayment:

    def test_front_desk_allowed(self, cashier):
        assert CanTakePayment().has_permission(request_for(cashier), Mock()) is True

    def test_role_without_permission_denied(self, technician):
        assert CanTakePayment().has_permission(request_for(technician), Mock()) is False

    def test_user_without_role_denied(self, outsider):
        assert CanTakePayment().has_permission(request_for(outsider), Mock()) is False

    def test_anonymous_denied(self):
        assert CanTakePayment().has_permission(request_for(AnonymousUser()), Mock()) is False

    def test_wildcard_role_allowed(self):
        admin_role = Role.objects.create(code=RoleCode.ADMIN, name='Admin', permissions=[Permission.ALL])
        admin = User.objects.create_user(email='admin@example.com', password='TestPass123!', role=admin_role)

        assert CanTakePayment().has_permission(request_for(admin), Mock()) is True

    def test_superuser_allowed(self):
        root = User.objects.create_superuser(email='root@example.com', password='TestPass123!')

        assert CanTakePayment().has_permission(request_for(root), Mock()) is True


@pytest.mark.django_db
class TestCanViewBilling:

    def test_manage_billing_allowed(self):
        role = Role.objects.create(code='ACCOUNTANT', name='Accountant', permissions=[Permission.MANAGE_BILLING])
        user = User.objects.create_user(email='acc@example.com', password='TestPass123!', role=role)

        assert CanViewBilling().has_permission(request_for(user), Mock()) is True
        assert CanTakePayment().has_permission(request_for(user), Mock()) is False

    def test_take_payment_allowed(self, cashier):
        assert CanViewBilling().has_permission(request_for(cashier), Mock()) is True
