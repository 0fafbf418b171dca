"""
Leave balance schemas
"""
from datetime import date
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator


class BalanceAdjustRequest(BaseModel):
    """Manual balance adjustment. Positive credits days, negative removes them."""
    leave_type_id: int
    adjustment_days: float = Field(..., description="Non-zero day delta, in half-day steps")
    reason: str = Field(..., min_length=1, max_length=500, description="Why the balance changed")
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator("adjustment_days")
    @classmethod
    def validate_adjustment(cls, v: float) -> float:
        if v == 0:
            raise ValueError("adjustment_days must be non-zero")
        if (v * 2) != int(v * 2):
            raise ValueError("adjustment_days must be a multiple of 0.5")
        return v


class BalanceOut(BaseModel):
    """One balance row with its leave type"""
    id: int
    employee_id: int
    leave_type_id: int
    leave_type_name: str
    leave_type_code: str
    color: str
    balance_days: float
    used_ytd: float
    remaining_balance: float
    period_start: date
    period_end: date
    notes: Optional[str] = None


class EmployeeBalancesOut(BaseModel):
    employee_id: int
    employee_name: str
    emp_code: str
    balances: List[BalanceOut]


class BalanceAdjustResult(BaseModel):
    success: bool = True
    balance_id: int
    new_balance: float
    remaining_balance: float
    adjustment: float
