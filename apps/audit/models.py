from django.db import models

from .exceptions import ImmutableRecordError


class AuditAction(models.TextChoices):
    PAYMENT_RECEIVED = 'PAYMENT_RECEIVED', 'Payment received'


class AuditLog(models.Model):
    """Append-only audit trail entry."""

    actor = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='audit_entries'
    )
    # Traceability only: the entry outlives the repair it points at
    repair = models.ForeignKey(
        'repairs.Repair',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        db_constraint=False,
        related_name='audit_entries'
    )
    entity_type = models.CharField(max_length=50)
    entity_id = models.CharField(max_length=64)
    action = models.CharField(max_length=50, choices=AuditAction.choices)
    metadata = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        indexes = [
            models.Index(fields=['entity_type', 'entity_id'], name='audit_logs_entity__9f3b12_idx'),
            models.Index(fields=['action', 'created_at'], name='audit_logs_action_4c8e07_idx'),
        ]
        ordering = ['created_at', 'id']

    def __str__(self):
        return f"{self.action} {self.entity_type}:{self.entity_id}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise ImmutableRecordError("Audit entries are write-once")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ImmutableRecordError("Audit entries cannot be deleted")
