"""
Audit logging service
"""
from sqlalchemy.orm import Session
from leave_compliance.models.audit_log import AuditLog
from leave_compliance.models.leave import LeaveRequestAudit, LeaveAuditAction
from leave_compliance.utils.datetime_utils import now_utc
from leave_compliance.utils.json_serializer import sanitize_for_json
from typing import Optional, Dict, Any


def log_audit(
    db: Session,
    tenant_id: int,
    actor_id: int,
    action: str,
    entity_type: str,
    entity_id: Optional[int] = None,
    meta: Optional[Dict[str, Any]] = None
) -> AuditLog:
    """
    Create an admin audit log entry

    Args:
        db: Database session
        tenant_id: Tenant the entity belongs to
        actor_id: ID of the user performing the action
        action: Action type (e.g., "LEAVE_TYPE_CREATE", "BLACKOUT_DELETE")
        entity_type: Type of entity (e.g., "leave_types", "blackout_periods")
        entity_id: ID of the affected entity (optional)
        meta: Additional metadata as dictionary (optional)

    Returns:
        Created AuditLog instance
    """
    safe_meta = sanitize_for_json(meta) if meta is not None else None

    # Explicitly set created_at to avoid SQLite issues with server_default
    audit_log = AuditLog(
        tenant_id=tenant_id,
        actor_id=actor_id,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        meta_json=safe_meta,
        created_at=now_utc()
    )
    db.add(audit_log)
    db.commit()
    db.refresh(audit_log)
    return audit_log


def add_request_audit(
    db: Session,
    request_id: int,
    changed_by: int,
    action: LeaveAuditAction,
    old_values: Optional[Dict[str, Any]] = None,
    new_values: Optional[Dict[str, Any]] = None,
    reason: Optional[str] = None,
    ip_address: Optional[str] = None,
) -> LeaveRequestAudit:
    """
    Stage a leave request audit row. Does not commit: the caller commits it
    together with the status change it describes.
    """
    entry = LeaveRequestAudit(
        request_id=request_id,
        changed_by=changed_by,
        action=action,
        old_values=sanitize_for_json(old_values) if old_values is not None else None,
        new_values=sanitize_for_json(new_values) if new_values is not None else None,
        reason=reason,
        ip_address=ip_address,
        created_at=now_utc(),
    )
    db.add(entry)
    return entry
