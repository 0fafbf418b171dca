"""
Tests for leave type endpoints
"""
from fastapi import status

from leave_compliance.models.audit_log import AuditLog
from leave_compliance.tests.conftest import auth_headers, make_leave_type

URL = "/api/v1/leave/types"


def test_create_leave_type(client, db, admin):
    payload = {
        "name": "Annual Leave",
        "code": "ANNUAL",
        "minimum_entitlement_days": 5,
        "enforce_minimum_entitlement": True,
        "color": "#10B981",
    }
    response = client.post(URL, json=payload, headers=auth_headers(admin))

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["code"] == "ANNUAL"
    assert data["requires_approval"] is True
    assert data["minimum_entitlement_days"] == 5.0
    assert data["is_active"] is True

    audit = db.query(AuditLog).filter(AuditLog.entity_type == "leave_types").one()
    assert audit.entity_id == data["id"]


def test_default_color(client, admin):
    response = client.post(URL, json={"name": "Sick Leave", "code": "SICK"}, headers=auth_headers(admin))
    assert response.json()["color"] == "#3B82F6"


def test_duplicate_code_conflicts(client, admin, leave_type):
    response = client.post(URL, json={"name": "Another PTO", "code": "PTO"}, headers=auth_headers(admin))
    assert response.status_code == status.HTTP_409_CONFLICT


def test_same_code_allowed_in_other_tenant(client, db, other_tenant, admin):
    make_leave_type(db, other_tenant, code="PTO")
    response = client.post(URL, json={"name": "PTO", "code": "PTO"}, headers=auth_headers(admin))
    assert response.status_code == status.HTTP_201_CREATED


def test_invalid_code_and_color_rejected(client, admin):
    lower = client.post(URL, json={"name": "Bad", "code": "pto"}, headers=auth_headers(admin))
    color = client.post(URL, json={"name": "Bad", "code": "BAD", "color": "blue"}, headers=auth_headers(admin))

    assert lower.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
    assert color.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


def test_employee_cannot_create(client, employee):
    response = client.post(URL, json={"name": "Bonus", "code": "BONUS"}, headers=auth_headers(employee))
    assert response.status_code == status.HTTP_403_FORBIDDEN


def test_list_is_tenant_scoped_and_sorted(client, db, tenant, other_tenant, employee):
    make_leave_type(db, tenant, code="SICK", name="Sick Leave")
    make_leave_type(db, tenant, code="ANNUAL", name="Annual Leave")
    make_leave_type(db, other_tenant, code="OTHER", name="Other Tenant Leave")

    response = client.get(URL, headers=auth_headers(employee))

    assert response.status_code == status.HTTP_200_OK
    assert [t["code"] for t in response.json()] == ["ANNUAL", "SICK"]


def test_update_leave_type(client, admin, leave_type):
    response = client.put(
        f"{URL}/{leave_type.id}",
        json={"requires_approval": False, "max_balance": 30},
        headers=auth_headers(admin),
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["requires_approval"] is False
    assert data["max_balance"] == 30.0
    assert data["name"] == "Paid Time Off"


def test_update_to_taken_code_conflicts(client, db, tenant, admin, leave_type):
    sick = make_leave_type(db, tenant, code="SICK", name="Sick Leave")
    response = client.put(f"{URL}/{sick.id}", json={"code": "PTO"}, headers=auth_headers(admin))
    assert response.status_code == status.HTTP_409_CONFLICT


def test_update_unknown_type_is_not_found(client, admin):
    response = client.put(f"{URL}/9999", json={"name": "Ghost"}, headers=auth_headers(admin))
    assert response.status_code == status.HTTP_404_NOT_FOUND


def test_delete_deactivates(client, db, admin, leave_type):
    response = client.delete(f"{URL}/{leave_type.id}", headers=auth_headers(admin))

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["success"] is True
    db.refresh(leave_type)
    assert leave_type.is_active is False

    listed = client.get(URL, headers=auth_headers(admin)).json()
    assert listed == []
    with_inactive = client.get(f"{URL}?include_inactive=true", headers=auth_headers(admin)).json()
    assert [t["id"] for t in with_inactive] == [leave_type.id]


def test_include_inactive_ignored_for_employees(client, db, employee, leave_type):
    leave_type.is_active = False
    db.commit()

    response = client.get(f"{URL}?include_inactive=true", headers=auth_headers(employee))
    assert response.json() == []
