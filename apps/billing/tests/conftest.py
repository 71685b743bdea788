import pytest
from decimal import Decimal
from datetime import timedelta
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, Role, RoleCode, Permission
from apps.customers.models import Customer
from apps.repairs.models import Repair, RepairCharge, RepairStatus
from apps.billing.services import recalculate_repair_charges


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


@pytest.fixture
def front_desk_role(db):
    """Role allowed to take payments and view billing."""
    return Role.objects.create(
        code=RoleCode.FRONT_DESK,
        name='Front desk',
        permissions=[Permission.TAKE_PAYMENT, Permission.MANAGE_BILLING],
    )


@pytest.fixture
def technician_role(db):
    """Role without billing permissions."""
    return Role.objects.create(
        code=RoleCode.TECHNICIAN,
        name='Technician',
        permissions=[],
    )


@pytest.fixture
def cashier(db, front_desk_role):
    """Front desk user who receives payments."""
    return User.objects.create_user(
        email='cashier@example.com',
        password='TestPass123!',
        display_name='Cashier',
        role=front_desk_role,
    )


@pytest.fixture
def technician(db, technician_role):
    """Technician earning 30% commission."""
    return User.objects.create_user(
        email='tech@example.com',
        password='TestPass123!',
        display_name='Tech One',
        role=technician_role,
        commission_rate=Decimal('0.3000'),
    )


@pytest.fixture
def technician_without_rate(db, technician_role):
    """Technician with no stored commission rate."""
    return User.objects.create_user(
        email='tech2@example.com',
        password='TestPass123!',
        display_name='Tech Two',
        role=technician_role,
    )


@pytest.fixture
def outsider(db):
    """Authenticated user without any role."""
    return User.objects.create_user(
        email='outsider@example.com',
        password='TestPass123!',
        display_name='Outsider User',
    )


@pytest.fixture
def cashier_client(api_client, cashier):
    """Return API client authenticated as cashier."""
    refresh = RefreshToken.for_user(cashier)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def technician_client(api_client, technician):
    """Return API client authenticated as technician."""
    refresh = RefreshToken.for_user(technician)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def outsider_client(api_client, outsider):
    """Return API client authenticated as outsider."""
    refresh = RefreshToken.for_user(outsider)
    api_client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return api_client


@pytest.fixture
def customer(db):
    """Create a test customer."""
    return Customer.objects.create(
        name='Jana Novakova',
        phone='+420777123456',
        email='jana@example.com',
    )


@pytest.fixture
def other_customer(db):
    """Create a second customer."""
    return Customer.objects.create(name='Petr Svoboda', phone='+420777654321')


@pytest.fixture
def make_repair(db):
    """
    Factory creating a repair with one charge line.

    ``age_days`` sets created_at that many days in the past, so tests control
    which repair is the oldest.
    """
    def _make_repair(customer, total, *, status=RepairStatus.REPAIRED,
                     assigned_to=None, age_days=0, device='Phone'):
        repair = Repair.objects.create(
            customer=customer,
            assigned_to=assigned_to,
            status=status,
            device_description=device,
        )
        RepairCharge.objects.create(
            repair=repair,
            description='Labour and parts',
            amount=Decimal(total),
        )
        recalculate_repair_charges(repair_id=repair.pk)

        Repair.objects.filter(pk=repair.pk).update(
            created_at=timezone.now() - timedelta(days=age_days)
        )
        repair.refresh_from_db()
        return repair

    return _make_repair


@pytest.fixture
def older_repair(make_repair, customer, technician):
    """Repair owing 500.00, created 10 days ago."""
    return make_repair(customer, '500.00', assigned_to=technician, age_days=10, device='Laptop')


@pytest.fixture
def newer_repair(make_repair, customer, technician):
    """Repair owing 800.00, created 2 days ago."""
    return make_repair(customer, '800.00', assigned_to=technician, age_days=2, device='Tablet')
