"""
Tests for the team calendar endpoint
"""
from datetime import date

from fastapi import status

from leave_compliance.models.holiday import HolidayCalendar
from leave_compliance.tests.conftest import auth_headers, make_balance, make_employee
from leave_compliance.utils.datetime_utils import now_utc

URL = "/api/v1/leave/team-calendar"
REQUESTS_URL = "/api/v1/leave/requests"
MARCH = "start_date=2030-03-01&end_date=2030-03-31"


def submit(client, employee, leave_type, start, end):
    payload = {"leave_type_id": leave_type.id, "start_date": start, "end_date": end}
    response = client.post(REQUESTS_URL, json=payload, headers=auth_headers(employee))
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()


def test_manager_sees_team_requests_and_holidays(client, db, tenant, manager, employee, leave_type, balance):
    db.add(HolidayCalendar(tenant_id=tenant.id, date=date(2030, 3, 15), name="Spring Day", created_at=now_utc()))
    db.commit()
    req = submit(client, employee, leave_type, "2030-03-04", "2030-03-06")

    response = client.get(f"{URL}?{MARCH}", headers=auth_headers(manager))

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data["events"]) == 1
    event = data["events"][0]
    assert event["id"] == f"request-{req['id']}"
    assert event["type"] == "leave"
    assert event["employee_name"] == "Erin Employee"
    assert event["status"] == "pending"
    assert event["days_count"] == 3.0
    assert [h["title"] for h in data["holidays"]] == ["Spring Day"]
    assert data["holidays"][0]["id"].startswith("holiday-")
    assert data["summary"] == {
        "total_requests": 1,
        "pending_requests": 1,
        "approved_requests": 0,
        "holidays": 1,
    }


def test_manager_does_not_see_outside_team(client, db, tenant, manager, leave_type):
    outsider = make_employee(db, tenant, "EMP900", "Olly Outsider")
    make_balance(db, outsider, leave_type)
    submit(client, outsider, leave_type, "2030-03-04", "2030-03-06")

    data = client.get(f"{URL}?{MARCH}", headers=auth_headers(manager)).json()
    assert data["events"] == []


def test_indirect_reports_are_visible(client, db, tenant, manager, employee, leave_type):
    grand_report = make_employee(db, tenant, "EMP500", "Gale Grandreport", manager=employee)
    make_balance(db, grand_report, leave_type)
    submit(client, grand_report, leave_type, "2030-03-04", "2030-03-04")

    data = client.get(f"{URL}?{MARCH}", headers=auth_headers(manager)).json()
    assert [e["employee_id"] for e in data["events"]] == [grand_report.id]


def test_cancelled_requests_hidden_by_default(client, admin, employee, leave_type, balance):
    req = submit(client, employee, leave_type, "2030-03-04", "2030-03-06")
    client.delete(f"{REQUESTS_URL}/{req['id']}", headers=auth_headers(employee))

    default = client.get(f"{URL}?{MARCH}", headers=auth_headers(admin)).json()
    explicit = client.get(f"{URL}?{MARCH}&statuses=cancelled", headers=auth_headers(admin)).json()

    assert default["events"] == []
    assert [e["status"] for e in explicit["events"]] == ["cancelled"]


def test_filters_and_holiday_toggle(client, db, tenant, admin, employee, leave_type, balance):
    db.add(HolidayCalendar(tenant_id=tenant.id, date=date(2030, 3, 15), name="Spring Day", created_at=now_utc()))
    db.commit()
    submit(client, employee, leave_type, "2030-03-04", "2030-03-06")

    other_type = client.get(
        f"{URL}?{MARCH}&leave_type_ids=9999&include_holidays=false", headers=auth_headers(admin)
    ).json()
    assert other_type["events"] == []
    assert other_type["holidays"] == []

    by_employee = client.get(f"{URL}?{MARCH}&employee_ids={employee.id}", headers=auth_headers(admin)).json()
    assert len(by_employee["events"]) == 1


def test_window_limits(client, manager):
    inverted = client.get(f"{URL}?start_date=2030-03-31&end_date=2030-03-01", headers=auth_headers(manager))
    too_long = client.get(f"{URL}?start_date=2030-01-01&end_date=2031-01-02", headers=auth_headers(manager))
    full_year = client.get(f"{URL}?start_date=2030-01-01&end_date=2030-12-31", headers=auth_headers(manager))

    assert inverted.status_code == status.HTTP_400_BAD_REQUEST
    assert too_long.status_code == status.HTTP_400_BAD_REQUEST
    assert full_year.status_code == status.HTTP_200_OK


def test_employee_cannot_view_team_calendar(client, employee):
    response = client.get(f"{URL}?{MARCH}", headers=auth_headers(employee))
    assert response.status_code == status.HTTP_403_FORBIDDEN
