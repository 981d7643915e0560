from typing import Optional
from navtree.extensions import db
from navtree.models.audit_log import AuditLog


def log_action(
    *,
    tenant_id: str,
    actor_id: Optional[str],
    action: str,
    entity_type: str,
    entity_id: Optional[str],
    payload: dict | None = None
) -> AuditLog:
    """
    Stage an immutable audit row in the current transaction.
    """
    log = AuditLog()

    log.tenant_id = tenant_id
    log.actor_id = actor_id
    log.action = action
    log.entity_type = entity_type
    log.entity_id = entity_id or "*"
    log.payload = payload or {}

    db.session.add(log)
    return log
