"""
Audit trail service.

Entries are written inside the caller's transaction so they commit or roll
back together with the change they describe.
"""

from typing import Optional

from apps.accounts.models import User
from apps.repairs.models import Repair

from .models import AuditLog


def log_audit(
    *,
    actor: Optional[User],
    repair: Optional[Repair],
    action: str,
    metadata: Optional[dict] = None,
    entity_type: str = 'Repair',
    entity_id=None,
) -> AuditLog:
    """
    Append an audit entry.

    Args:
        actor: Staff member who performed the action
        repair: Repair the action affected (weak reference)
        action: AuditAction value
        metadata: JSON-serializable details of the change
        entity_type: Type of the affected entity
        entity_id: Primary key of the affected entity; defaults to the repair's

    Returns:
        Created AuditLog instance
    """
    if entity_id is None and repair is not None:
        entity_id = repair.id

    return AuditLog.objects.create(
        actor=actor,
        repair=repair,
        entity_type=entity_type,
        entity_id=str(entity_id),
        action=action,
        metadata=metadata or {},
    )
