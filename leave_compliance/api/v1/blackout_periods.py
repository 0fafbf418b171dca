"""
Blackout period endpoints
"""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from leave_compliance.constants import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from leave_compliance.core.deps import get_db, get_current_user, require_permission
from leave_compliance.core.permissions import MANAGE_HOLIDAYS
from leave_compliance.models.employee import Employee
from leave_compliance.schemas.blackout import (
    BlackoutPeriodCreate,
    BlackoutPeriodUpdate,
    BlackoutPeriodOut,
    BlackoutPeriodListResponse,
)
from leave_compliance.schemas.common import MessageOut, PaginationOut
from leave_compliance.services import blackout_service

router = APIRouter()


@router.get("", response_model=BlackoutPeriodListResponse)
async def list_blackout_periods_endpoint(
    start_date: Optional[date] = Query(None, description="Periods ending on or after this date"),
    end_date: Optional[date] = Query(None, description="Periods starting on or before this date"),
    leave_type_id: Optional[int] = Query(None),
    department_id: Optional[int] = Query(None),
    page: int = Query(1, ge=1),
    page_size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """List blackout periods"""
    periods, total = blackout_service.list_blackout_periods(
        db,
        current_user.tenant_id,
        start_date=start_date,
        end_date=end_date,
        leave_type_id=leave_type_id,
        department_id=department_id,
        page=page,
        page_size=page_size,
    )
    return BlackoutPeriodListResponse(
        periods=[BlackoutPeriodOut.model_validate(p) for p in periods],
        pagination=PaginationOut.build(page, page_size, total),
    )


@router.post("", response_model=BlackoutPeriodOut, status_code=201)
async def create_blackout_period_endpoint(
    data: BlackoutPeriodCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(MANAGE_HOLIDAYS))
):
    """Create a blackout period"""
    return blackout_service.create_blackout_period(db, current_user.tenant_id, data, actor_id=current_user.id)


@router.put("/{period_id}", response_model=BlackoutPeriodOut)
async def update_blackout_period_endpoint(
    period_id: int,
    data: BlackoutPeriodUpdate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(MANAGE_HOLIDAYS))
):
    """Update a blackout period"""
    return blackout_service.update_blackout_period(
        db, current_user.tenant_id, period_id, data, actor_id=current_user.id
    )


@router.delete("/{period_id}", response_model=MessageOut)
async def delete_blackout_period_endpoint(
    period_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(MANAGE_HOLIDAYS))
):
    """Delete a blackout period"""
    blackout_service.delete_blackout_period(db, current_user.tenant_id, period_id, actor_id=current_user.id)
    return MessageOut(message="Blackout period deleted")
