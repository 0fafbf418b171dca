"""
Team calendar endpoint
"""
from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from leave_compliance.core.deps import get_db, require_permission
from leave_compliance.core.permissions import VIEW_TEAM_CALENDAR
from leave_compliance.models.employee import Employee
from leave_compliance.models.leave import LeaveRequestStatus
from leave_compliance.schemas.calendar import TeamCalendarResponse
from leave_compliance.services.calendar_service import get_team_calendar

router = APIRouter()


@router.get("", response_model=TeamCalendarResponse)
async def team_calendar_endpoint(
    start_date: date = Query(..., description="Window start (inclusive)"),
    end_date: date = Query(..., description="Window end (inclusive)"),
    employee_ids: Optional[List[int]] = Query(None),
    department_id: Optional[int] = Query(None),
    leave_type_ids: Optional[List[int]] = Query(None),
    statuses: Optional[List[LeaveRequestStatus]] = Query(None, description="Defaults to pending and approved"),
    include_holidays: bool = Query(True),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(VIEW_TEAM_CALENDAR))
):
    """Leave requests and holidays for the caller's team in a date window"""
    return get_team_calendar(
        db,
        current_user,
        start_date,
        end_date,
        employee_ids=employee_ids,
        department_id=department_id,
        leave_type_ids=leave_type_ids,
        statuses=statuses,
        include_holidays=include_holidays,
    )
