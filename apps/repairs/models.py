from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


class RepairStatus(models.TextChoices):
    RECEIVED = 'RECEIVED', 'Received'
    IN_PROGRESS = 'IN_PROGRESS', 'In progress'
    WAITING_PARTS = 'WAITING_PARTS', 'Waiting for parts'
    REPAIRED = 'REPAIRED', 'Repaired'
    UNREPAIRABLE = 'UNREPAIRABLE', 'Unrepairable'
    DELIVERED = 'DELIVERED', 'Delivered'


# Only finished jobs can be paid for
BILLABLE_STATUSES = (RepairStatus.REPAIRED, RepairStatus.UNREPAIRABLE)


class Repair(models.Model):
    """
    One billable repair job (the customer's bill).

    ``total_charges`` caches the sum of the charge lines. Once fully paid the
    repair is locked and the total is split between the assigned technician
    and the shop; locking never happens twice.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    customer = models.ForeignKey(
        'customers.Customer',
        on_delete=models.CASCADE,
        related_name='repairs'
    )
    assigned_to = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_repairs'
    )

    status = models.CharField(
        max_length=20,
        choices=RepairStatus.choices,
        default=RepairStatus.RECEIVED
    )
    device_description = models.CharField(max_length=200, blank=True)

    # Financial details
    total_charges = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )

    # Settlement
    is_locked = models.BooleanField(default=False)
    staff_share_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00')
    )
    shop_share_amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00')
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'repairs'
        indexes = [
            models.Index(fields=['customer', 'status', 'created_at'], name='repairs_custome_5c7d21_idx'),
            models.Index(fields=['is_locked'], name='repairs_is_lock_0b9e44_idx'),
        ]
        ordering = ['created_at', 'id']

    def __str__(self):
        device = self.device_description or 'Repair'
        return f"{device} - {self.total_charges} ({self.get_status_display()})"

    @property
    def is_billable(self):
        return self.status in BILLABLE_STATUSES

    def charges_total(self):
        """
        Sum of the charge lines.

        Does not touch ``total_charges``; billing updates the cached total
        under the customer lock (see billing.services.recalculate_repair_charges).
        """
        from django.db.models import Sum

        return self.charges.aggregate(total=Sum('amount'))['total'] or Decimal('0.00')


class RepairCharge(models.Model):
    """Charge line item on a repair."""

    repair = models.ForeignKey(
        Repair,
        on_delete=models.CASCADE,
        related_name='charges'
    )
    description = models.CharField(max_length=255)
    amount = models.DecimalField(max_digits=10, decimal_places=2)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'repair_charges'
        ordering = ['created_at']

    def __str__(self):
        return f"{self.description}: {self.amount}"
