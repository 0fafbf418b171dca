"""
Bootstrap a tenant with an owner account for local development.

Employees normally arrive from the HR system of record; this creates just
enough rows to call the API and prints a bearer token for the owner.

Usage:
    python init_tenant.py "Acme Corp" OWN001 "Olivia Owner"
"""
import argparse
import logging
import sys

from leave_compliance.core.logging import setup_logging
from leave_compliance.core.security import create_access_token
from leave_compliance.db.session import SessionLocal
from leave_compliance.models.employee import Employee, Role
from leave_compliance.models.tenant import Tenant

logger = logging.getLogger(__name__)


def init_tenant(db, tenant_name, emp_code, owner_name, features=None):
    """
    Create the tenant and its owner unless they already exist. Commits.

    Returns:
        Tuple of (tenant, owner)
    """
    tenant = db.query(Tenant).filter(Tenant.name == tenant_name).first()
    if tenant is None:
        tenant = Tenant(name=tenant_name, features=features, active=True)
        db.add(tenant)
        db.flush()
        logger.info("tenant created: tenant_id=%s name=%s", tenant.id, tenant_name)

    owner = db.query(Employee).filter(
        Employee.tenant_id == tenant.id,
        Employee.emp_code == emp_code,
    ).first()
    if owner is None:
        owner = Employee(
            tenant_id=tenant.id,
            emp_code=emp_code,
            name=owner_name,
            role=Role.OWNER,
            active=True,
        )
        db.add(owner)
        logger.info("owner created: tenant_id=%s emp_code=%s", tenant.id, emp_code)
    else:
        logger.info("owner already exists: tenant_id=%s emp_code=%s", tenant.id, emp_code)

    db.commit()
    db.refresh(tenant)
    db.refresh(owner)
    return tenant, owner


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Create a tenant and owner, print a dev token")
    parser.add_argument("tenant_name")
    parser.add_argument("emp_code")
    parser.add_argument("owner_name")
    parser.add_argument(
        "--features",
        default=None,
        help="Comma-separated feature slugs (default: settings.DEFAULT_FEATURES)",
    )
    args = parser.parse_args(argv)
    features = [f.strip() for f in args.features.split(",") if f.strip()] if args.features else None

    setup_logging()
    db = SessionLocal()
    try:
        tenant, owner = init_tenant(db, args.tenant_name, args.emp_code, args.owner_name, features)
    finally:
        db.close()

    print(f"Tenant: {tenant.name} (id={tenant.id})")
    print(f"Owner: {owner.emp_code} (id={owner.id})")
    print(f"Token: {create_access_token({'sub': str(owner.id)})}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
