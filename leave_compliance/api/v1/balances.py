"""
Leave balance endpoints
"""
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from leave_compliance.core.deps import get_db, get_current_user, require_permission
from leave_compliance.core.permissions import MANAGE_BALANCES, VIEW_TEAM_CALENDAR
from leave_compliance.models.employee import Employee
from leave_compliance.schemas.balance import (
    BalanceAdjustRequest,
    BalanceAdjustResult,
    BalanceOut,
    EmployeeBalancesOut,
)
from leave_compliance.services import balance_service

router = APIRouter()


@router.get("/me", response_model=List[BalanceOut])
async def my_balances(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(get_current_user)
):
    """Current-period balances of the caller"""
    return balance_service.list_employee_balances(db, current_user.tenant_id, current_user.id)


@router.get("/team", response_model=List[EmployeeBalancesOut])
async def team_balances(
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(VIEW_TEAM_CALENDAR))
):
    """Balances of the caller's direct reports"""
    return balance_service.list_team_balances(db, current_user)


@router.get("/{employee_id}", response_model=EmployeeBalancesOut)
async def employee_balances(
    employee_id: int,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(MANAGE_BALANCES))
):
    """Current-period balances of one employee"""
    employee = balance_service.get_employee_or_404(db, current_user.tenant_id, employee_id)
    return {
        "employee_id": employee.id,
        "employee_name": employee.name,
        "emp_code": employee.emp_code,
        "balances": balance_service.list_employee_balances(db, current_user.tenant_id, employee.id),
    }


@router.post("/{employee_id}/adjust", response_model=BalanceAdjustResult)
async def adjust_employee_balance(
    employee_id: int,
    data: BalanceAdjustRequest,
    db: Session = Depends(get_db),
    current_user: Employee = Depends(require_permission(MANAGE_BALANCES))
):
    """Manually credit or debit an employee's balance"""
    return balance_service.adjust_balance(db, current_user.tenant_id, employee_id, data, actor_id=current_user.id)
