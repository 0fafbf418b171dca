"""
Leave balance service - per-employee, per-type, per-period balances.

- remaining = balance_days - used_ytd.
- Every mutation goes through apply_adjustment, which locks the row and writes a LeaveTransaction.
- MANUAL_ADJUST moves balance_days; APPROVE_DEDUCT raises used_ytd; CANCEL_RECREDIT lowers it (floored at 0).
"""
import logging
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session
from fastapi import HTTPException, status

from leave_compliance.models.employee import Employee
from leave_compliance.models.leave import (
    LeaveBalance,
    LeaveTransaction,
    LeaveTransactionAction,
    LeaveType,
)
from leave_compliance.schemas.balance import BalanceAdjustRequest
from leave_compliance.services.audit_service import log_audit
from leave_compliance.utils.datetime_utils import now_utc, today_utc

logger = logging.getLogger(__name__)


def _to_decimal(value: float) -> Decimal:
    return Decimal(str(value))


def get_active_balance(
    db: Session,
    tenant_id: int,
    employee_id: int,
    leave_type_id: int,
    on_date: date,
) -> Optional[LeaveBalance]:
    """Balance row whose period covers on_date (latest period_start wins)"""
    return (
        db.query(LeaveBalance)
        .filter(
            LeaveBalance.tenant_id == tenant_id,
            LeaveBalance.employee_id == employee_id,
            LeaveBalance.leave_type_id == leave_type_id,
            LeaveBalance.period_start <= on_date,
            LeaveBalance.period_end >= on_date,
        )
        .order_by(LeaveBalance.period_start.desc())
        .first()
    )


def ensure_balance_for_year(
    db: Session,
    tenant_id: int,
    employee_id: int,
    leave_type_id: int,
    on_date: date,
) -> LeaveBalance:
    """Return the balance covering on_date, creating an empty Jan 1 - Dec 31 row if missing. Does not commit."""
    balance = get_active_balance(db, tenant_id, employee_id, leave_type_id, on_date)
    if balance:
        return balance
    now = now_utc()
    balance = LeaveBalance(
        tenant_id=tenant_id,
        employee_id=employee_id,
        leave_type_id=leave_type_id,
        balance_days=Decimal("0"),
        used_ytd=Decimal("0"),
        period_start=date(on_date.year, 1, 1),
        period_end=date(on_date.year, 12, 31),
        created_at=now,
        updated_at=now,
    )
    db.add(balance)
    db.flush()
    logger.info(
        "balance row created: tenant_id=%s employee_id=%s leave_type_id=%s period_start=%s",
        tenant_id, employee_id, leave_type_id, balance.period_start,
    )
    return balance


def _log_transaction(
    db: Session,
    balance: LeaveBalance,
    leave_request_id: Optional[int],
    delta_days: Decimal,
    action: LeaveTransactionAction,
    reason: str,
    actor_id: Optional[int],
) -> LeaveTransaction:
    t = LeaveTransaction(
        tenant_id=balance.tenant_id,
        balance_id=balance.id,
        leave_request_id=leave_request_id,
        delta_days=delta_days,
        action=action,
        reason=reason,
        actor_id=actor_id,
        action_at=now_utc(),
    )
    db.add(t)
    return t


def apply_adjustment(
    db: Session,
    balance: LeaveBalance,
    delta_days: float,
    action: LeaveTransactionAction,
    reason: str,
    actor_id: Optional[int],
    leave_request_id: Optional[int] = None,
) -> LeaveBalance:
    """
    Single mutation path for a balance row. Does not commit.

    The row is re-read with SELECT ... FOR UPDATE so concurrent approvals
    against the same balance serialize. populate_existing() overwrites the
    identity-map copy, so the checks below run on the committed values.

    Args:
        db: Database session
        balance: Balance row to mutate
        delta_days: Signed day delta (negative for APPROVE_DEDUCT, positive for CANCEL_RECREDIT)
        action: Kind of mutation
        reason: Ledger reason (required)
        actor_id: Employee performing the change
        leave_request_id: Request that caused the change, if any

    Returns:
        The locked, updated balance row

    Raises:
        HTTPException: 409 if a deduction would take the remaining balance below zero
            on a leave type that disallows it, or a credit would exceed max_balance
    """
    locked = (
        db.query(LeaveBalance)
        .filter(LeaveBalance.id == balance.id)
        .populate_existing()
        .with_for_update()
        .first()
    )
    leave_type = db.query(LeaveType).filter(LeaveType.id == locked.leave_type_id).first()
    delta = _to_decimal(delta_days)
    before_balance = locked.balance_days or Decimal("0")
    before_used = locked.used_ytd or Decimal("0")

    if action == LeaveTransactionAction.MANUAL_ADJUST:
        new_balance = before_balance + delta
        new_used = before_used
    elif action == LeaveTransactionAction.APPROVE_DEDUCT:
        if delta > 0:
            raise ValueError("APPROVE_DEDUCT takes a negative delta")
        new_balance = before_balance
        new_used = before_used - delta
    elif action == LeaveTransactionAction.CANCEL_RECREDIT:
        if delta < 0:
            raise ValueError("CANCEL_RECREDIT takes a positive delta")
        new_balance = before_balance
        new_used = max(Decimal("0"), before_used - delta)
    else:
        raise ValueError(f"Unknown balance action: {action}")

    if delta < 0 and new_balance - new_used < 0 and not (leave_type and leave_type.allow_negative_balance):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=(
                f"Insufficient balance: remaining {float(before_balance - before_used):g} days, "
                f"change {float(delta):g} days"
            ),
        )
    if (
        delta > 0
        and action == LeaveTransactionAction.MANUAL_ADJUST
        and leave_type is not None
        and leave_type.max_balance is not None
        and new_balance > leave_type.max_balance
    ):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Adjustment would exceed the maximum balance of {float(leave_type.max_balance):g} days",
        )

    locked.balance_days = new_balance
    locked.used_ytd = new_used
    # Explicitly update updated_at for SQLite compatibility
    locked.updated_at = now_utc()
    _log_transaction(db, locked, leave_request_id, delta, action, reason, actor_id)
    db.flush()

    logger.info(
        "balance mutation: balance_id=%s action=%s delta=%s balance_days %s->%s used_ytd %s->%s leave_request_id=%s",
        locked.id, action.value, delta, before_balance, new_balance, before_used, new_used, leave_request_id,
    )
    return locked


def balance_to_dict(balance: LeaveBalance) -> Dict[str, Any]:
    """Flatten a balance row with its leave type for BalanceOut"""
    leave_type = balance.leave_type
    return {
        "id": balance.id,
        "employee_id": balance.employee_id,
        "leave_type_id": balance.leave_type_id,
        "leave_type_name": leave_type.name,
        "leave_type_code": leave_type.code,
        "color": leave_type.color,
        "balance_days": float(balance.balance_days or 0),
        "used_ytd": float(balance.used_ytd or 0),
        "remaining_balance": balance.remaining_balance,
        "period_start": balance.period_start,
        "period_end": balance.period_end,
        "notes": balance.notes,
    }


def get_employee_or_404(db: Session, tenant_id: int, employee_id: int) -> Employee:
    employee = db.query(Employee).filter(
        Employee.id == employee_id,
        Employee.tenant_id == tenant_id,
    ).first()
    if not employee:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Employee not found"
        )
    return employee


def list_employee_balances(
    db: Session,
    tenant_id: int,
    employee_id: int,
    on_date: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """Current-period balances for one employee, ordered by leave type name"""
    on_date = on_date or today_utc()
    rows = (
        db.query(LeaveBalance)
        .join(LeaveType, LeaveType.id == LeaveBalance.leave_type_id)
        .filter(
            LeaveBalance.tenant_id == tenant_id,
            LeaveBalance.employee_id == employee_id,
            LeaveBalance.period_start <= on_date,
            LeaveBalance.period_end >= on_date,
        )
        .order_by(LeaveType.name, LeaveBalance.period_start.desc())
        .all()
    )
    # One row per leave type: the latest period covering on_date
    seen = set()
    result = []
    for row in rows:
        if row.leave_type_id in seen:
            continue
        seen.add(row.leave_type_id)
        result.append(balance_to_dict(row))
    return result


def list_team_balances(db: Session, manager: Employee, on_date: Optional[date] = None) -> List[Dict[str, Any]]:
    """Balances of the manager's active direct reports"""
    reports = (
        db.query(Employee)
        .filter(
            Employee.tenant_id == manager.tenant_id,
            Employee.manager_id == manager.id,
            Employee.active == True,
        )
        .order_by(Employee.name)
        .all()
    )
    return [
        {
            "employee_id": e.id,
            "employee_name": e.name,
            "emp_code": e.emp_code,
            "balances": list_employee_balances(db, manager.tenant_id, e.id, on_date),
        }
        for e in reports
    ]


def adjust_balance(
    db: Session,
    tenant_id: int,
    employee_id: int,
    data: BalanceAdjustRequest,
    actor_id: int,
) -> Dict[str, Any]:
    """
    Manual balance adjustment by an administrator

    Creates the current calendar-year balance row when missing.

    Raises:
        HTTPException: 404 if the employee or leave type is not in the tenant,
            409 if the adjustment breaks the balance limits
    """
    get_employee_or_404(db, tenant_id, employee_id)
    leave_type = db.query(LeaveType).filter(
        LeaveType.id == data.leave_type_id,
        LeaveType.tenant_id == tenant_id,
    ).first()
    if not leave_type:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Leave type not found"
        )

    balance = ensure_balance_for_year(db, tenant_id, employee_id, leave_type.id, today_utc())
    balance = apply_adjustment(
        db,
        balance,
        data.adjustment_days,
        LeaveTransactionAction.MANUAL_ADJUST,
        data.reason,
        actor_id,
    )
    if data.notes is not None:
        balance.notes = data.notes
    db.commit()
    db.refresh(balance)

    log_audit(
        db=db,
        tenant_id=tenant_id,
        actor_id=actor_id,
        action="BALANCE_ADJUST",
        entity_type="leave_balances",
        entity_id=balance.id,
        meta={
            "employee_id": employee_id,
            "leave_type_id": leave_type.id,
            "adjustment_days": data.adjustment_days,
            "reason": data.reason,
        },
    )
    return {
        "success": True,
        "balance_id": balance.id,
        "new_balance": float(balance.balance_days),
        "remaining_balance": balance.remaining_balance,
        "adjustment": data.adjustment_days,
    }
