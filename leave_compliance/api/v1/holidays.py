"""
Holiday calendar endpoints
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from leave_compliance.core.deps import get_db, get_current_user, require_permission
from leave_compliance.core.permissions import MANAGE_HOLIDAYS
from leave_compliance.models.employee import Employee
from leave_compliance.schemas.common import MessageOut
from leave_compliance.schemas.holiday import HolidayCreate, HolidayBulkCreate, HolidayBulkResult, HolidayOut
from leave_compliance.services.holiday_service import (
    create_holiday,
    bulk_create_holidays,
    list_holidays,
    delete_holiday,
)

router = APIRouter()


@router.get("", response_model=List[HolidayOut])
async def list_holidays_endpoint(
    year: Optional[int] = Query(None, ge=1900, le=2100, description="Calendar year (default: current year)"),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """List holidays for a year"""
    return list_holidays(db, current_user.tenant_id, year=year)


@router.post("", response_model=HolidayOut, status_code=201)
async def create_holiday_endpoint(
    data: HolidayCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(MANAGE_HOLIDAYS))
):
    """Create a holiday"""
    return create_holiday(db, current_user.tenant_id, data, actor_id=current_user.id)


@router.post("/bulk", response_model=HolidayBulkResult, status_code=201)
async def bulk_create_holidays_endpoint(
    data: HolidayBulkCreate,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(MANAGE_HOLIDAYS))
):
    """Import a year of holidays"""
    holidays = bulk_create_holidays(db, current_user.tenant_id, data, actor_id=current_user.id)
    return HolidayBulkResult(
        year=data.year,
        created=len(holidays),
        holidays=[HolidayOut.model_validate(h) for h in holidays],
    )


@router.delete("/{holiday_id}", response_model=MessageOut)
async def delete_holiday_endpoint(
    holiday_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(MANAGE_HOLIDAYS))
):
    """Delete a holiday"""
    delete_holiday(db, current_user.tenant_id, holiday_id, actor_id=current_user.id)
    return MessageOut(message="Holiday deleted")
