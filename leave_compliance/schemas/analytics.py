"""
Leave analytics schemas
"""
from datetime import date
from typing import List, Literal, Optional, Union
from pydantic import BaseModel, ConfigDict

UtilizationGroupBy = Literal["employee", "department", "leave_type"]
TrendGranularity = Literal["month", "quarter", "year"]


class LeaveTypeUsage(BaseModel):
    leave_type_id: int
    leave_type_name: str
    days: float
    requests: int


# extra="forbid" keeps each row matched to exactly one member of the union below
class EmployeeUtilization(BaseModel):
    model_config = ConfigDict(extra="forbid")

    employee_id: int
    employee_name: str
    department_id: Optional[int] = None
    department_name: str
    total_days: float
    total_requests: int
    leave_types: List[LeaveTypeUsage]


class DepartmentUtilization(BaseModel):
    model_config = ConfigDict(extra="forbid")

    department_id: Optional[int] = None
    department_name: str
    total_days: float
    total_requests: int
    employee_count: int
    leave_types: List[LeaveTypeUsage]


class LeaveTypeUtilization(BaseModel):
    model_config = ConfigDict(extra="forbid")

    leave_type_id: int
    leave_type_name: str
    leave_type_code: str
    total_days: float
    total_requests: int
    employee_count: int


class UtilizationResponse(BaseModel):
    utilization: List[Union[EmployeeUtilization, DepartmentUtilization, LeaveTypeUtilization]]
    group_by: UtilizationGroupBy


class TrendPoint(BaseModel):
    """Approved leave of one type in one period (``2030-03``, ``Q1 2030`` or ``2030``)"""
    period: str
    period_start: date
    leave_type_id: int
    leave_type_name: str
    total_days: float
    total_requests: int
    employee_count: int


class TrendsResponse(BaseModel):
    trends: List[TrendPoint]
    granularity: TrendGranularity


class LeaveTypeTotal(BaseModel):
    leave_type_id: int
    leave_type_name: str
    total_days: float
    total_requests: int


class LeaveSummary(BaseModel):
    total_days_taken: float
    average_per_employee: float
    pending_requests: int
    total_employees: int
    leave_type_breakdown: List[LeaveTypeTotal]


class AnalyticsPeriod(BaseModel):
    start_date: date
    end_date: date


class LeaveSummaryResponse(BaseModel):
    summary: LeaveSummary
    period: AnalyticsPeriod
