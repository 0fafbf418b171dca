"""
Tests for the tenant bootstrap script
"""
from init_tenant import init_tenant
from leave_compliance.models.employee import Employee, Role
from leave_compliance.tests.conftest import auth_headers


def test_init_tenant_creates_owner(db):
    tenant, owner = init_tenant(db, "Initech", "OWN001", "Bill Lumbergh")

    assert tenant.active is True
    assert owner.role == Role.OWNER
    assert owner.tenant_id == tenant.id


def test_init_tenant_is_idempotent(db):
    first_tenant, first_owner = init_tenant(db, "Initech", "OWN001", "Bill Lumbergh")
    second_tenant, second_owner = init_tenant(db, "Initech", "OWN001", "Bill Lumbergh")

    assert first_tenant.id == second_tenant.id
    assert first_owner.id == second_owner.id
    assert db.query(Employee).count() == 1


def test_bootstrapped_owner_can_manage_leave_types(client, db):
    _, owner = init_tenant(db, "Initech", "OWN001", "Bill Lumbergh")

    response = client.post(
        "/api/v1/leave/types",
        json={"name": "Paid Time Off", "code": "PTO"},
        headers=auth_headers(owner),
    )
    assert response.status_code == 201
