"""
Blackout period registry - date ranges during which leave is disallowed
"""
from datetime import date
from typing import List, Optional, Tuple
from sqlalchemy import or_
from sqlalchemy.orm import Session
from fastapi import HTTPException, status
from leave_compliance.models.blackout import BlackoutPeriod
from leave_compliance.models.department import Department
from leave_compliance.models.leave import LeaveType
from leave_compliance.schemas.blackout import BlackoutPeriodCreate, BlackoutPeriodUpdate
from leave_compliance.services.audit_service import log_audit
from leave_compliance.utils.datetime_utils import now_utc


def _validate_range(start_date: date, end_date: date) -> None:
    if end_date < start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="End date must be after start date"
        )


def _validate_scope(db: Session, tenant_id: int, leave_type_id: Optional[int], department_id: Optional[int]) -> None:
    """Referenced leave type / department must exist in the same tenant"""
    if leave_type_id is not None:
        exists = db.query(LeaveType.id).filter(
            LeaveType.id == leave_type_id, LeaveType.tenant_id == tenant_id
        ).first()
        if not exists:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Leave type {leave_type_id} not found"
            )
    if department_id is not None:
        exists = db.query(Department.id).filter(
            Department.id == department_id, Department.tenant_id == tenant_id
        ).first()
        if not exists:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Department {department_id} not found"
            )


def list_blackout_periods(
    db: Session,
    tenant_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    leave_type_id: Optional[int] = None,
    department_id: Optional[int] = None,
    page: int = 1,
    page_size: int = 20
) -> Tuple[List[BlackoutPeriod], int]:
    """
    List blackout periods with filters and pagination

    Args:
        start_date: Only periods ending on or after this date
        end_date: Only periods starting on or before this date
        leave_type_id: Only periods scoped to this leave type
        department_id: Only periods scoped to this department

    Returns:
        Tuple of (periods ordered by start_date, total count)
    """
    query = db.query(BlackoutPeriod).filter(BlackoutPeriod.tenant_id == tenant_id)
    if start_date:
        query = query.filter(BlackoutPeriod.end_date >= start_date)
    if end_date:
        query = query.filter(BlackoutPeriod.start_date <= end_date)
    if leave_type_id is not None:
        query = query.filter(BlackoutPeriod.leave_type_id == leave_type_id)
    if department_id is not None:
        query = query.filter(BlackoutPeriod.department_id == department_id)

    total = query.count()
    periods = query.order_by(BlackoutPeriod.start_date, BlackoutPeriod.id).offset(
        (page - 1) * page_size
    ).limit(page_size).all()
    return periods, total


def get_blackout_period(db: Session, tenant_id: int, period_id: int) -> BlackoutPeriod:
    period = db.query(BlackoutPeriod).filter(
        BlackoutPeriod.id == period_id,
        BlackoutPeriod.tenant_id == tenant_id,
    ).first()
    if not period:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Blackout period not found"
        )
    return period


def create_blackout_period(db: Session, tenant_id: int, data: BlackoutPeriodCreate, actor_id: int) -> BlackoutPeriod:
    """
    Create a blackout period

    Raises:
        HTTPException: 400 if end_date is before start_date or a scope reference is unknown
    """
    _validate_range(data.start_date, data.end_date)
    _validate_scope(db, tenant_id, data.leave_type_id, data.department_id)

    now = now_utc()
    period = BlackoutPeriod(tenant_id=tenant_id, created_at=now, updated_at=now, **data.model_dump())
    db.add(period)
    db.commit()
    db.refresh(period)

    log_audit(
        db=db,
        tenant_id=tenant_id,
        actor_id=actor_id,
        action="BLACKOUT_CREATE",
        entity_type="blackout_periods",
        entity_id=period.id,
        meta=data.model_dump(),
    )
    return period


def update_blackout_period(
    db: Session,
    tenant_id: int,
    period_id: int,
    data: BlackoutPeriodUpdate,
    actor_id: int
) -> BlackoutPeriod:
    """
    Partially update a blackout period. The resulting range is re-validated.
    Explicit nulls for leave_type_id / department_id widen the scope to everything.
    """
    period = get_blackout_period(db, tenant_id, period_id)
    changes = data.model_dump(exclude_unset=True)

    new_start = changes.get("start_date") or period.start_date
    new_end = changes.get("end_date") or period.end_date
    _validate_range(new_start, new_end)
    _validate_scope(db, tenant_id, changes.get("leave_type_id"), changes.get("department_id"))

    for field, value in changes.items():
        if field in ("name", "start_date", "end_date") and value is None:
            continue
        setattr(period, field, value)
    period.updated_at = now_utc()

    db.commit()
    db.refresh(period)

    log_audit(
        db=db,
        tenant_id=tenant_id,
        actor_id=actor_id,
        action="BLACKOUT_UPDATE",
        entity_type="blackout_periods",
        entity_id=period.id,
        meta=changes,
    )
    return period


def delete_blackout_period(db: Session, tenant_id: int, period_id: int, actor_id: int) -> None:
    """Hard delete. Requests that were rejected against the period are not revisited."""
    period = get_blackout_period(db, tenant_id, period_id)
    meta = {"name": period.name, "start_date": period.start_date, "end_date": period.end_date}
    db.delete(period)
    db.commit()

    log_audit(
        db=db,
        tenant_id=tenant_id,
        actor_id=actor_id,
        action="BLACKOUT_DELETE",
        entity_type="blackout_periods",
        entity_id=period_id,
        meta=meta,
    )


def find_conflicting_periods(
    db: Session,
    tenant_id: int,
    start_date: date,
    end_date: date,
    leave_type_id: int,
    department_id: Optional[int]
) -> List[BlackoutPeriod]:
    """
    Blackout periods intersecting [start_date, end_date] whose scope matches the
    request. NULL scope columns match every leave type / department.

    Returns:
        Matching periods ordered by (start_date, id)
    """
    query = db.query(BlackoutPeriod).filter(
        BlackoutPeriod.tenant_id == tenant_id,
        BlackoutPeriod.start_date <= end_date,
        BlackoutPeriod.end_date >= start_date,
        or_(BlackoutPeriod.leave_type_id.is_(None), BlackoutPeriod.leave_type_id == leave_type_id),
    )
    if department_id is None:
        query = query.filter(BlackoutPeriod.department_id.is_(None))
    else:
        query = query.filter(
            or_(BlackoutPeriod.department_id.is_(None), BlackoutPeriod.department_id == department_id)
        )
    return query.order_by(BlackoutPeriod.start_date, BlackoutPeriod.id).all()
