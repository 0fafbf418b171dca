"""
Leave analytics endpoints
"""
from datetime import date
from typing import Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from leave_compliance.core.deps import get_db, require_permission
from leave_compliance.core.permissions import VIEW_TEAM_CALENDAR
from leave_compliance.models.employee import Employee
from leave_compliance.schemas.analytics import (
    LeaveSummaryResponse,
    TrendGranularity,
    TrendsResponse,
    UtilizationGroupBy,
    UtilizationResponse,
)
from leave_compliance.services.analytics_service import default_window, get_summary, get_trends, get_utilization

router = APIRouter()


@router.get("/utilization", response_model=UtilizationResponse)
async def utilization_endpoint(
    start_date: Optional[date] = Query(None, description="Defaults to Jan 1 of the current year"),
    end_date: Optional[date] = Query(None, description="Defaults to today"),
    employee_id: Optional[int] = Query(None),
    department_id: Optional[int] = Query(None),
    group_by: UtilizationGroupBy = Query("employee"),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(VIEW_TEAM_CALENDAR))
):
    """Approved leave days grouped by employee, department or leave type"""
    start_date, end_date = default_window(start_date, end_date)
    return get_utilization(
        db,
        current_user,
        start_date,
        end_date,
        employee_id=employee_id,
        department_id=department_id,
        group_by=group_by,
    )


@router.get("/trends", response_model=TrendsResponse)
async def trends_endpoint(
    start_date: Optional[date] = Query(None, description="Defaults to Jan 1 of the current year"),
    end_date: Optional[date] = Query(None, description="Defaults to today"),
    granularity: TrendGranularity = Query("month"),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(VIEW_TEAM_CALENDAR))
):
    """Approved leave per month, quarter or year and leave type"""
    start_date, end_date = default_window(start_date, end_date)
    return get_trends(db, current_user, start_date, end_date, granularity=granularity)


@router.get("/summary", response_model=LeaveSummaryResponse)
async def summary_endpoint(
    start_date: Optional[date] = Query(None, description="Defaults to Jan 1 of the current year"),
    end_date: Optional[date] = Query(None, description="Defaults to today"),
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(VIEW_TEAM_CALENDAR))
):
    start_date, end_date = default_window(start_date, end_date)
    return get_summary(db, current_user, start_date, end_date)
