"""
Leave compliance evaluator - decides whether a prospective leave request may be created.

Checks run in a fixed order and the first failing check wins:
  1. leave type must resolve to an active type       -> INVALID_LEAVE_TYPE
  2. working-day count (weekends, holidays, half days)
  3. a balance row must exist                         -> NO_BALANCE_RECORD
  4. remaining balance must cover the request         -> INSUFFICIENT_BALANCE
  5. minimum entitlement must stay reserved           -> MINIMUM_ENTITLEMENT_VIOLATION
  6. no scoped blackout period may cover a date       -> BLACKOUT_PERIOD_CONFLICT

Everything here is a pure function of its arguments: nothing is read from or
written to the database. Rejections are returned as values; only malformed
input (end before start, a balance belonging to someone else) raises.
"""
import enum
from datetime import date, timedelta
from typing import Any, Iterable, List, Literal, Optional, Set, Union

from pydantic import BaseModel, ConfigDict, model_validator

# Monday=0 ... Sunday=6
WEEKEND_DAYS = frozenset({5, 6})
HALF_DAY = 0.5


class ComplianceErrorCode(str, enum.Enum):
    INVALID_LEAVE_TYPE = "INVALID_LEAVE_TYPE"
    NO_BALANCE_RECORD = "NO_BALANCE_RECORD"
    INSUFFICIENT_BALANCE = "INSUFFICIENT_BALANCE"
    MINIMUM_ENTITLEMENT_VIOLATION = "MINIMUM_ENTITLEMENT_VIOLATION"
    BLACKOUT_PERIOD_CONFLICT = "BLACKOUT_PERIOD_CONFLICT"


class LeaveRequestDraft(BaseModel):
    """The request being evaluated, before anything is persisted."""
    employee_id: int
    leave_type_id: int
    start_date: date
    end_date: date
    half_day_start: bool = False
    half_day_end: bool = False
    department_id: Optional[int] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def check_date_order(self) -> "LeaveRequestDraft":
        if self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date")
        return self


class BlackoutPeriodInfo(BaseModel):
    id: int
    name: str
    start_date: date
    end_date: date
    reason: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ComplianceApproved(BaseModel):
    valid: Literal[True] = True
    requested_days: float


class InvalidLeaveType(BaseModel):
    valid: Literal[False] = False
    error_code: Literal["INVALID_LEAVE_TYPE"] = "INVALID_LEAVE_TYPE"
    message: str


class NoBalanceRecord(BaseModel):
    valid: Literal[False] = False
    error_code: Literal["NO_BALANCE_RECORD"] = "NO_BALANCE_RECORD"
    message: str
    requested_days: float


class InsufficientBalance(BaseModel):
    valid: Literal[False] = False
    error_code: Literal["INSUFFICIENT_BALANCE"] = "INSUFFICIENT_BALANCE"
    message: str
    available_balance: float
    requested_days: float


class MinimumEntitlementViolation(BaseModel):
    valid: Literal[False] = False
    error_code: Literal["MINIMUM_ENTITLEMENT_VIOLATION"] = "MINIMUM_ENTITLEMENT_VIOLATION"
    message: str
    requested_days: float
    current_balance: float
    used_ytd: float
    period_end: date
    minimum_entitlement: float
    would_remain: float


class BlackoutPeriodConflict(BaseModel):
    valid: Literal[False] = False
    error_code: Literal["BLACKOUT_PERIOD_CONFLICT"] = "BLACKOUT_PERIOD_CONFLICT"
    message: str
    requested_days: float
    blackout_period: BlackoutPeriodInfo


ComplianceRejection = Union[
    InvalidLeaveType,
    NoBalanceRecord,
    InsufficientBalance,
    MinimumEntitlementViolation,
    BlackoutPeriodConflict,
]
ComplianceResult = Union[ComplianceApproved, ComplianceRejection]


def _fmt_days(value: float) -> str:
    """2.0 -> '2', 2.5 -> '2.5'"""
    return f"{value:g}"


def _holiday_dates(holidays: Iterable[Any]) -> Set[date]:
    """Accept plain dates or holiday rows with a ``date`` attribute."""
    dates = set()
    for h in holidays:
        dates.add(h if isinstance(h, date) else h.date)
    return dates


def iter_dates(start_date: date, end_date: date):
    """Yield each calendar date from start_date to end_date inclusive."""
    current = start_date
    while current <= end_date:
        yield current
        current += timedelta(days=1)


def is_working_day(check_date: date, holiday_dates: Set[date]) -> bool:
    return check_date.weekday() not in WEEKEND_DAYS and check_date not in holiday_dates


def count_working_days(
    start_date: date,
    end_date: date,
    holidays: Iterable[Any] = (),
    half_day_start: bool = False,
    half_day_end: bool = False,
) -> float:
    """
    Count leave days in [start_date, end_date].

    Weekends and holiday dates contribute nothing. Every other date contributes
    1.0, less 0.5 on the start date when half_day_start is set and less 0.5 on
    the end date when half_day_end is set. A single day with both flags yields 0.

    Raises:
        ValueError: If start_date is after end_date
    """
    if start_date > end_date:
        raise ValueError(f"start_date {start_date} is after end_date {end_date}")

    holiday_dates = _holiday_dates(holidays)
    total = 0.0
    for d in iter_dates(start_date, end_date):
        if not is_working_day(d, holiday_dates):
            continue
        contribution = 1.0
        if d == start_date and half_day_start:
            contribution -= HALF_DAY
        if d == end_date and half_day_end:
            contribution -= HALF_DAY
        total += contribution
    return total


def violates_minimum_entitlement(remaining: float, requested_days: float, minimum_entitlement: float) -> bool:
    """
    Minimum entitlement policy: the organization requires ``minimum_entitlement``
    days to stay reserved until the period ends, so a request may not take the
    remaining balance below that floor.
    """
    return remaining - requested_days < minimum_entitlement


def blackout_applies(period: Any, leave_type_id: int, department_id: Optional[int]) -> bool:
    """NULL leave_type_id / department_id on the period match every request."""
    if period.leave_type_id is not None and period.leave_type_id != leave_type_id:
        return False
    if period.department_id is not None and period.department_id != department_id:
        return False
    return True


def find_blackout_conflict(
    blackout_periods: Iterable[Any],
    start_date: date,
    end_date: date,
    leave_type_id: int,
    department_id: Optional[int],
) -> Optional[Any]:
    """
    Return the first blackout period covering any date of the request, scanning
    dates in order and periods by (start_date, id). None when nothing matches.
    """
    scoped = sorted(
        (p for p in blackout_periods if blackout_applies(p, leave_type_id, department_id)),
        key=lambda p: (p.start_date, p.id),
    )
    if not scoped:
        return None
    for d in iter_dates(start_date, end_date):
        for period in scoped:
            if period.start_date <= d <= period.end_date:
                return period
    return None


def evaluate_leave_request(
    draft: LeaveRequestDraft,
    leave_type: Optional[Any],
    balance: Optional[Any],
    blackout_periods: Iterable[Any] = (),
    holidays: Iterable[Any] = (),
) -> ComplianceResult:
    """
    Decide whether ``draft`` may be created.

    Args:
        draft: The prospective request
        leave_type: LeaveType row for draft.leave_type_id (None when it does not resolve)
        balance: Employee's current LeaveBalance row for that type (None when absent)
        blackout_periods: Candidate blackout periods; scoping is re-checked here
        holidays: Holiday rows or dates excluded from the day count

    Returns:
        ComplianceApproved or one of the rejection models
    """
    if leave_type is None or not leave_type.is_active or leave_type.id != draft.leave_type_id:
        return InvalidLeaveType(message="Invalid or inactive leave type")

    requested_days = count_working_days(
        draft.start_date,
        draft.end_date,
        holidays,
        half_day_start=draft.half_day_start,
        half_day_end=draft.half_day_end,
    )

    if balance is None:
        return NoBalanceRecord(
            message="No leave balance record found for this leave type",
            requested_days=requested_days,
        )
    if balance.employee_id != draft.employee_id or balance.leave_type_id != draft.leave_type_id:
        raise ValueError("balance does not belong to the requesting employee and leave type")

    balance_days = float(balance.balance_days or 0)
    used_ytd = float(balance.used_ytd or 0)
    remaining = balance_days - used_ytd

    if remaining < requested_days and not leave_type.allow_negative_balance:
        return InsufficientBalance(
            message=(
                f"Insufficient leave balance. Available: {_fmt_days(remaining)} days, "
                f"requested: {_fmt_days(requested_days)} days"
            ),
            available_balance=remaining,
            requested_days=requested_days,
        )

    if leave_type.enforce_minimum_entitlement and leave_type.minimum_entitlement_days is not None:
        minimum = float(leave_type.minimum_entitlement_days)
        if violates_minimum_entitlement(remaining, requested_days, minimum):
            would_remain = remaining - requested_days
            return MinimumEntitlementViolation(
                message=(
                    f"This request would leave {_fmt_days(would_remain)} days, below the minimum "
                    f"entitlement of {_fmt_days(minimum)} days to keep until {balance.period_end.isoformat()}"
                ),
                requested_days=requested_days,
                current_balance=balance_days,
                used_ytd=used_ytd,
                period_end=balance.period_end,
                minimum_entitlement=minimum,
                would_remain=would_remain,
            )

    conflict = find_blackout_conflict(
        blackout_periods,
        draft.start_date,
        draft.end_date,
        draft.leave_type_id,
        draft.department_id,
    )
    if conflict is not None:
        return BlackoutPeriodConflict(
            message=(
                f"Leave request conflicts with blackout period: {conflict.name} "
                f"({conflict.start_date.isoformat()} to {conflict.end_date.isoformat()})"
            ),
            requested_days=requested_days,
            blackout_period=BlackoutPeriodInfo.model_validate(conflict),
        )

    return ComplianceApproved(requested_days=requested_days)


def rejection_codes() -> List[str]:
    """Closed set of rejection codes, in evaluation order."""
    return [code.value for code in ComplianceErrorCode]
