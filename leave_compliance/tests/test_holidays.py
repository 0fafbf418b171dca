"""
Tests for holiday calendar endpoints
"""
from fastapi import status

from leave_compliance.tests.conftest import auth_headers

URL = "/api/v1/leave/holidays"


def create(client, user, day, name="Holiday", **extra):
    payload = {"date": day, "name": name}
    payload.update(extra)
    return client.post(URL, json=payload, headers=auth_headers(user))


def test_create_holiday(client, admin):
    response = create(client, admin, "2030-12-25", "Christmas Day", country="US")

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["date"] == "2030-12-25"
    assert data["is_half_day"] is False
    assert data["country"] == "US"


def test_duplicate_date_conflicts(client, admin):
    create(client, admin, "2030-12-25", "Christmas Day")
    response = create(client, admin, "2030-12-25", "Also Christmas")
    assert response.status_code == status.HTTP_409_CONFLICT


def test_employee_cannot_create(client, employee):
    response = create(client, employee, "2030-12-25")
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_list_by_year_sorted(client, admin, employee):
    create(client, admin, "2030-12-25", "Christmas Day")
    create(client, admin, "2030-01-01", "New Year")
    create(client, admin, "2029-07-04", "Last Year")

    response = client.get(f"{URL}?year=2030", headers=auth_headers(employee))

    assert response.status_code == status.HTTP_200_OK
    assert [h["name"] for h in response.json()] == ["New Year", "Christmas Day"]


def test_bulk_create(client, admin):
    payload = {
        "year": 2030,
        "country": "US",
        "holidays": [
            {"date": "2030-01-01", "name": "New Year"},
            {"date": "2030-07-04", "name": "Independence Day"},
            {"date": "2030-12-24", "name": "Christmas Eve", "is_half_day": True},
        ],
    }
    response = client.post(f"{URL}/bulk", json=payload, headers=auth_headers(admin))

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["year"] == 2030
    assert data["created"] == 3
    assert all(h["country"] == "US" for h in data["holidays"])


def test_bulk_date_outside_year_rejected(client, admin):
    payload = {"year": 2030, "holidays": [{"date": "2031-01-01", "name": "Next New Year"}]}
    response = client.post(f"{URL}/bulk", json=payload, headers=auth_headers(admin))
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_bulk_repeated_date_rejected(client, admin):
    payload = {
        "year": 2030,
        "holidays": [
            {"date": "2030-05-01", "name": "Labour Day"},
            {"date": "2030-05-01", "name": "May Day"},
        ],
    }
    response = client.post(f"{URL}/bulk", json=payload, headers=auth_headers(admin))
    assert response.status_code == status.HTTP_400_BAD_REQUEST


def test_bulk_existing_date_conflicts_and_creates_nothing(client, admin, employee):
    create(client, admin, "2030-05-01", "Labour Day")
    payload = {
        "year": 2030,
        "holidays": [
            {"date": "2030-01-01", "name": "New Year"},
            {"date": "2030-05-01", "name": "May Day"},
        ],
    }
    response = client.post(f"{URL}/bulk", json=payload, headers=auth_headers(admin))

    assert response.status_code == status.HTTP_409_CONFLICT
    listed = client.get(f"{URL}?year=2030", headers=auth_headers(employee)).json()
    assert [h["name"] for h in listed] == ["Labour Day"]


def test_bulk_year_out_of_range(client, admin):
    payload = {"year": 2019, "holidays": [{"date": "2019-01-01", "name": "Old"}]}
    response = client.post(f"{URL}/bulk", json=payload, headers=auth_headers(admin))
    assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_delete_holiday(client, admin, employee):
    holiday_id = create(client, admin, "2030-12-25", "Christmas Day").json()["id"]

    response = client.delete(f"{URL}/{holiday_id}", headers=auth_headers(admin))

    assert response.status_code == status.HTTP_200_OK
    assert client.get(f"{URL}?year=2030", headers=auth_headers(employee)).json() == []


def test_delete_unknown_holiday(client, admin):
    response = client.delete(f"{URL}/9999", headers=auth_headers(admin))
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_holidays_are_tenant_scoped(client, db, other_tenant, admin):
    from leave_compliance.models.employee import Role
    from leave_compliance.tests.conftest import make_employee

    create(client, admin, "2030-12-25", "Christmas Day")
    stranger = make_employee(db, other_tenant, "ADM900", "Sam Stranger", role=Role.ADMIN)

    assert client.get(f"{URL}?year=2030", headers=auth_headers(stranger)).json() == []
    # Same date is free in another tenant
    assert create(client, stranger, "2030-12-25", "Christmas Day").status_code == status.HTTP_201_CREATED
