"""
Leave type service - tenant-defined categories of leave
"""
from typing import List, Optional
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from leave_compliance.models.leave import LeaveType
from leave_compliance.schemas.leave_type import LeaveTypeCreate, LeaveTypeUpdate
from leave_compliance.services.audit_service import log_audit
from leave_compliance.utils.datetime_utils import now_utc


def list_leave_types(db: Session, tenant_id: int, include_inactive: bool = False) -> List[LeaveType]:
    """List the tenant's leave types ordered by name (active only unless asked)"""
    query = db.query(LeaveType).filter(LeaveType.tenant_id == tenant_id)
    if not include_inactive:
        query = query.filter(LeaveType.is_active == True)
    return query.order_by(LeaveType.name).all()


def get_leave_type(db: Session, tenant_id: int, leave_type_id: int) -> Optional[LeaveType]:
    """Get a leave type by ID within the tenant, active or not"""
    return db.query(LeaveType).filter(
        LeaveType.id == leave_type_id,
        LeaveType.tenant_id == tenant_id,
    ).first()


def _get_or_404(db: Session, tenant_id: int, leave_type_id: int) -> LeaveType:
    leave_type = get_leave_type(db, tenant_id, leave_type_id)
    if not leave_type:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Leave type not found"
        )
    return leave_type


def _ensure_code_free(db: Session, tenant_id: int, code: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(LeaveType).filter(LeaveType.tenant_id == tenant_id, LeaveType.code == code)
    if exclude_id is not None:
        query = query.filter(LeaveType.id != exclude_id)
    if query.first():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Leave type with code '{code}' already exists"
        )


def create_leave_type(db: Session, tenant_id: int, data: LeaveTypeCreate, actor_id: int) -> LeaveType:
    """
    Create a leave type

    Raises:
        HTTPException: 409 if the code is already used in the tenant
    """
    _ensure_code_free(db, tenant_id, data.code)

    now = now_utc()
    leave_type = LeaveType(tenant_id=tenant_id, created_at=now, updated_at=now, **data.model_dump())
    db.add(leave_type)
    db.commit()
    db.refresh(leave_type)

    log_audit(
        db=db,
        tenant_id=tenant_id,
        actor_id=actor_id,
        action="LEAVE_TYPE_CREATE",
        entity_type="leave_types",
        entity_id=leave_type.id,
        meta=data.model_dump(),
    )
    return leave_type


def update_leave_type(
    db: Session,
    tenant_id: int,
    leave_type_id: int,
    data: LeaveTypeUpdate,
    actor_id: int
) -> LeaveType:
    """
    Partially update a leave type

    Raises:
        HTTPException: 404 if not found, 409 if the new code is taken
    """
    leave_type = _get_or_404(db, tenant_id, leave_type_id)
    changes = data.model_dump(exclude_unset=True)
    if "code" in changes and changes["code"] != leave_type.code:
        _ensure_code_free(db, tenant_id, changes["code"], exclude_id=leave_type.id)

    for field, value in changes.items():
        setattr(leave_type, field, value)
    # Explicitly update updated_at for SQLite compatibility
    leave_type.updated_at = now_utc()

    db.commit()
    db.refresh(leave_type)

    log_audit(
        db=db,
        tenant_id=tenant_id,
        actor_id=actor_id,
        action="LEAVE_TYPE_UPDATE",
        entity_type="leave_types",
        entity_id=leave_type.id,
        meta=changes,
    )
    return leave_type


def deactivate_leave_type(db: Session, tenant_id: int, leave_type_id: int, actor_id: int) -> LeaveType:
    """
    Soft-delete a leave type. Existing requests and balances keep referencing it;
    new requests against it fail compliance with INVALID_LEAVE_TYPE.
    """
    leave_type = _get_or_404(db, tenant_id, leave_type_id)
    leave_type.is_active = False
    leave_type.updated_at = now_utc()
    db.commit()
    db.refresh(leave_type)

    log_audit(
        db=db,
        tenant_id=tenant_id,
        actor_id=actor_id,
        action="LEAVE_TYPE_DEACTIVATE",
        entity_type="leave_types",
        entity_id=leave_type.id,
        meta={"code": leave_type.code},
    )
    return leave_type
