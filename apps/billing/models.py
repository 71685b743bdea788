from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from decimal import Decimal
import uuid

from apps.audit.exceptions import ImmutableRecordError


class PaymentMethod(models.TextChoices):
    CASH = 'CASH', 'Cash'
    CARD = 'CARD', 'Card'
    BANK_TRANSFER = 'BANK_TRANSFER', 'Bank transfer'
    OTHER = 'OTHER', 'Other'


class Payment(models.Model):
    """
    Money applied to exactly one repair.

    Payments are never updated or deleted; a repair's due is always
    ``total_charges - sum(payments.amount)``.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    repair = models.ForeignKey(
        'repairs.Repair',
        on_delete=models.PROTECT,
        related_name='payments'
    )
    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.01'))]
    )
    method = models.CharField(max_length=20, choices=PaymentMethod.choices)

    received_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='payments_received'
    )
    received_at = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'payments'
        indexes = [
            models.Index(fields=['repair', 'received_at'], name='payments_repair__3e1f0a_idx'),
            models.Index(fields=['method', 'received_at'], name='payments_method_7a2c9d_idx'),
        ]
        ordering = ['received_at']

    def __str__(self):
        return f"{self.amount} {self.get_method_display()} -> {self.repair_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError("Payments cannot be modified once recorded")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError("Payments cannot be deleted")
