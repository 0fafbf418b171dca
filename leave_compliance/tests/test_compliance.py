"""
Tests for the leave compliance evaluator (no database)
"""
from datetime import date
from types import SimpleNamespace

import pytest
from pydantic import ValidationError

from leave_compliance.services.compliance import (
    BlackoutPeriodConflict,
    ComplianceApproved,
    InsufficientBalance,
    InvalidLeaveType,
    LeaveRequestDraft,
    MinimumEntitlementViolation,
    NoBalanceRecord,
    blackout_applies,
    count_working_days,
    evaluate_leave_request,
    rejection_codes,
    violates_minimum_entitlement,
)

MON = date(2030, 3, 4)
TUE = date(2030, 3, 5)
WED = date(2030, 3, 6)
FRI = date(2030, 3, 8)
SAT = date(2030, 3, 9)
SUN = date(2030, 3, 10)
NEXT_MON = date(2030, 3, 11)


def leave_type(**overrides):
    fields = dict(
        id=1,
        is_active=True,
        allow_negative_balance=False,
        enforce_minimum_entitlement=False,
        minimum_entitlement_days=None,
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def balance(balance_days=10, used_ytd=0, **overrides):
    fields = dict(
        employee_id=7,
        leave_type_id=1,
        balance_days=balance_days,
        used_ytd=used_ytd,
        period_end=date(2030, 12, 31),
    )
    fields.update(overrides)
    return SimpleNamespace(**fields)


def blackout(id, start, end, leave_type_id=None, department_id=None, name="Freeze"):
    return SimpleNamespace(
        id=id,
        name=name,
        start_date=start,
        end_date=end,
        leave_type_id=leave_type_id,
        department_id=department_id,
        reason="Release week",
    )


def draft(start=MON, end=FRI, **overrides):
    fields = dict(employee_id=7, leave_type_id=1, start_date=start, end_date=end, department_id=3)
    fields.update(overrides)
    return LeaveRequestDraft(**fields)


# --- working day count ---


def test_full_week_counts_five_days():
    assert count_working_days(MON, FRI) == 5.0


def test_weekend_contributes_nothing():
    assert count_working_days(SAT, SUN) == 0.0
    assert count_working_days(FRI, NEXT_MON) == 2.0


def test_holiday_dates_are_excluded():
    assert count_working_days(MON, FRI, [WED]) == 4.0


def test_holiday_rows_are_accepted():
    holiday = SimpleNamespace(date=TUE, is_half_day=True)
    # Half-day holidays still exclude the whole day
    assert count_working_days(MON, FRI, [holiday]) == 4.0


def test_half_day_flags_on_boundaries():
    assert count_working_days(MON, FRI, half_day_start=True) == 4.5
    assert count_working_days(MON, FRI, half_day_end=True) == 4.5
    assert count_working_days(MON, FRI, half_day_start=True, half_day_end=True) == 4.0


def test_single_day_with_both_half_flags_is_zero():
    assert count_working_days(MON, MON, half_day_start=True, half_day_end=True) == 0.0


def test_half_day_on_weekend_boundary_has_no_effect():
    assert count_working_days(SAT, NEXT_MON, half_day_start=True) == 1.0


def test_count_rejects_inverted_range():
    with pytest.raises(ValueError):
        count_working_days(FRI, MON)


def test_draft_rejects_inverted_range():
    with pytest.raises(ValidationError):
        draft(start=FRI, end=MON)


# --- ordered checks ---


def test_approved_when_everything_passes():
    result = evaluate_leave_request(draft(), leave_type(), balance())
    assert isinstance(result, ComplianceApproved)
    assert result.valid is True
    assert result.requested_days == 5.0


def test_missing_leave_type_is_invalid():
    result = evaluate_leave_request(draft(), None, balance())
    assert isinstance(result, InvalidLeaveType)
    assert result.error_code == "INVALID_LEAVE_TYPE"


def test_inactive_leave_type_is_invalid_even_without_balance():
    result = evaluate_leave_request(draft(), leave_type(is_active=False), None)
    assert result.error_code == "INVALID_LEAVE_TYPE"


def test_mismatched_leave_type_is_invalid():
    result = evaluate_leave_request(draft(), leave_type(id=2), balance())
    assert result.error_code == "INVALID_LEAVE_TYPE"


def test_missing_balance():
    result = evaluate_leave_request(draft(), leave_type(), None)
    assert isinstance(result, NoBalanceRecord)
    assert result.requested_days == 5.0


def test_balance_of_another_employee_raises():
    with pytest.raises(ValueError):
        evaluate_leave_request(draft(), leave_type(), balance(employee_id=99))


def test_insufficient_balance_reports_available_and_requested():
    result = evaluate_leave_request(draft(), leave_type(), balance(balance_days=6, used_ytd=2))
    assert isinstance(result, InsufficientBalance)
    assert result.available_balance == 4.0
    assert result.requested_days == 5.0


def test_exact_balance_is_enough():
    result = evaluate_leave_request(draft(), leave_type(), balance(balance_days=5))
    assert result.valid is True


def test_negative_balance_allowed_skips_balance_check():
    result = evaluate_leave_request(draft(), leave_type(allow_negative_balance=True), balance(balance_days=1))
    assert result.valid is True


def test_balance_check_runs_before_blackout_check():
    periods = [blackout(1, MON, FRI)]
    result = evaluate_leave_request(draft(), leave_type(), balance(balance_days=1), periods)
    assert result.error_code == "INSUFFICIENT_BALANCE"


def test_minimum_entitlement_violation():
    lt = leave_type(enforce_minimum_entitlement=True, minimum_entitlement_days=5)
    result = evaluate_leave_request(draft(), lt, balance(balance_days=8))
    assert isinstance(result, MinimumEntitlementViolation)
    assert result.current_balance == 8.0
    assert result.used_ytd == 0.0
    assert result.minimum_entitlement == 5.0
    assert result.would_remain == 3.0
    assert result.period_end == date(2030, 12, 31)


def test_minimum_entitlement_respected_at_boundary():
    lt = leave_type(enforce_minimum_entitlement=True, minimum_entitlement_days=5)
    result = evaluate_leave_request(draft(), lt, balance(balance_days=10))
    assert result.valid is True


def test_minimum_entitlement_ignored_when_not_enforced():
    lt = leave_type(enforce_minimum_entitlement=False, minimum_entitlement_days=5)
    result = evaluate_leave_request(draft(), lt, balance(balance_days=8))
    assert result.valid is True


def test_violates_minimum_entitlement_predicate():
    assert violates_minimum_entitlement(8, 5, 5) is True
    assert violates_minimum_entitlement(10, 5, 5) is False


def test_blackout_conflict_reports_period():
    periods = [blackout(4, WED, WED, name="Launch")]
    result = evaluate_leave_request(draft(), leave_type(), balance(), periods)
    assert isinstance(result, BlackoutPeriodConflict)
    assert result.blackout_period.id == 4
    assert result.blackout_period.name == "Launch"
    assert result.blackout_period.start_date == WED


def test_first_blackout_by_start_date_then_id_wins():
    periods = [
        blackout(9, TUE, FRI, name="Later id"),
        blackout(5, TUE, WED, name="Earlier id"),
        blackout(1, WED, FRI, name="Later start"),
    ]
    result = evaluate_leave_request(draft(), leave_type(), balance(), periods)
    assert result.blackout_period.id == 5


def test_blackout_scoped_to_other_leave_type_is_ignored():
    periods = [blackout(1, MON, FRI, leave_type_id=2)]
    assert evaluate_leave_request(draft(), leave_type(), balance(), periods).valid is True


def test_blackout_scoped_to_other_department_is_ignored():
    periods = [blackout(1, MON, FRI, department_id=8)]
    assert evaluate_leave_request(draft(), leave_type(), balance(), periods).valid is True


def test_blackout_scoped_to_own_department_applies():
    periods = [blackout(1, MON, FRI, department_id=3, leave_type_id=1)]
    assert evaluate_leave_request(draft(), leave_type(), balance(), periods).error_code == "BLACKOUT_PERIOD_CONFLICT"


def test_department_scoped_blackout_skips_employee_without_department():
    period = blackout(1, MON, FRI, department_id=3)
    assert blackout_applies(period, 1, None) is False
    assert blackout_applies(blackout(2, MON, FRI), 1, None) is True


def test_blackout_on_weekend_only_still_conflicts():
    periods = [blackout(1, SAT, SUN)]
    result = evaluate_leave_request(draft(start=FRI, end=NEXT_MON), leave_type(), balance(), periods)
    assert result.error_code == "BLACKOUT_PERIOD_CONFLICT"


def test_blackout_outside_range_is_ignored():
    periods = [blackout(1, NEXT_MON, NEXT_MON)]
    assert evaluate_leave_request(draft(), leave_type(), balance(), periods).valid is True


def test_holidays_reduce_requested_days_before_balance_check():
    result = evaluate_leave_request(draft(), leave_type(), balance(balance_days=4), holidays=[WED])
    assert result.valid is True
    assert result.requested_days == 4.0


def test_rejection_codes_are_closed_and_ordered():
    assert rejection_codes() == [
        "INVALID_LEAVE_TYPE",
        "NO_BALANCE_RECORD",
        "INSUFFICIENT_BALANCE",
        "MINIMUM_ENTITLEMENT_VIOLATION",
        "BLACKOUT_PERIOD_CONFLICT",
    ]


def test_evaluator_does_not_mutate_inputs():
    bal = balance(balance_days=10, used_ytd=1)
    evaluate_leave_request(draft(), leave_type(), bal, [blackout(1, NEXT_MON, NEXT_MON)], [WED])
    assert bal.balance_days == 10
    assert bal.used_ytd == 1
