"""
Holiday calendar service - business logic for holiday management
"""
import logging
from datetime import date
from typing import List, Optional
from sqlalchemy.orm import Session
from sqlalchemy import and_
from fastapi import HTTPException, status
from leave_compliance.models.holiday import HolidayCalendar
from leave_compliance.schemas.holiday import HolidayBulkCreate, HolidayCreate
from leave_compliance.services.audit_service import log_audit
from leave_compliance.utils.datetime_utils import now_utc, today_utc

logger = logging.getLogger(__name__)


def list_holidays(db: Session, tenant_id: int, year: Optional[int] = None) -> List[HolidayCalendar]:
    """
    List a tenant's holidays for one calendar year, ordered by date

    Args:
        db: Database session
        tenant_id: Caller's tenant
        year: Calendar year (defaults to the current year)
    """
    year = year or today_utc().year
    return db.query(HolidayCalendar).filter(
        HolidayCalendar.tenant_id == tenant_id,
        HolidayCalendar.date >= date(year, 1, 1),
        HolidayCalendar.date <= date(year, 12, 31),
    ).order_by(HolidayCalendar.date).all()


def get_holiday(db: Session, tenant_id: int, holiday_id: int) -> Optional[HolidayCalendar]:
    """Get a holiday by ID within the tenant"""
    return db.query(HolidayCalendar).filter(
        HolidayCalendar.id == holiday_id,
        HolidayCalendar.tenant_id == tenant_id,
    ).first()


def _ensure_date_free(db: Session, tenant_id: int, holiday_date: date) -> None:
    existing = db.query(HolidayCalendar).filter(
        HolidayCalendar.tenant_id == tenant_id,
        HolidayCalendar.date == holiday_date,
    ).first()
    if existing:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Holiday already exists for date {holiday_date}"
        )


def create_holiday(db: Session, tenant_id: int, data: HolidayCreate, actor_id: int) -> HolidayCalendar:
    """
    Create a new holiday

    Raises:
        HTTPException: 409 if the tenant already has a holiday on that date
    """
    _ensure_date_free(db, tenant_id, data.date)

    # Explicitly set created_at to avoid SQLite issues with server_default
    holiday = HolidayCalendar(
        tenant_id=tenant_id,
        date=data.date,
        name=data.name,
        is_half_day=data.is_half_day,
        country=data.country,
        region=data.region,
        created_at=now_utc(),
    )
    db.add(holiday)
    db.commit()
    db.refresh(holiday)

    log_audit(
        db=db,
        tenant_id=tenant_id,
        actor_id=actor_id,
        action="HOLIDAY_CREATE",
        entity_type="holiday_calendars",
        entity_id=holiday.id,
        meta={"date": holiday.date, "name": holiday.name, "is_half_day": holiday.is_half_day},
    )
    return holiday


def bulk_create_holidays(db: Session, tenant_id: int, data: HolidayBulkCreate, actor_id: int) -> List[HolidayCalendar]:
    """
    Import a set of holidays for one year in a single transaction

    Raises:
        HTTPException: 400 if a date falls outside the year or repeats in the payload,
            409 if a date already has a holiday
    """
    seen = set()
    for item in data.holidays:
        if item.date.year != data.year:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Date {item.date} does not fall within year {data.year}"
            )
        if item.date in seen:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Duplicate date {item.date} in request"
            )
        seen.add(item.date)
        _ensure_date_free(db, tenant_id, item.date)

    now = now_utc()
    holidays = [
        HolidayCalendar(
            tenant_id=tenant_id,
            date=item.date,
            name=item.name,
            is_half_day=item.is_half_day,
            country=data.country,
            region=data.region,
            created_at=now,
        )
        for item in data.holidays
    ]
    db.add_all(holidays)
    db.commit()
    for holiday in holidays:
        db.refresh(holiday)

    logger.info("holiday bulk import: tenant_id=%s year=%s count=%s", tenant_id, data.year, len(holidays))
    log_audit(
        db=db,
        tenant_id=tenant_id,
        actor_id=actor_id,
        action="HOLIDAY_BULK_CREATE",
        entity_type="holiday_calendars",
        meta={"year": data.year, "count": len(holidays)},
    )
    return sorted(holidays, key=lambda h: h.date)


def delete_holiday(db: Session, tenant_id: int, holiday_id: int, actor_id: int) -> None:
    """
    Delete a holiday

    Raises:
        HTTPException: 404 if the holiday does not exist in the tenant
    """
    holiday = get_holiday(db, tenant_id, holiday_id)
    if not holiday:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Holiday with id {holiday_id} not found"
        )
    meta = {"date": holiday.date, "name": holiday.name}
    db.delete(holiday)
    db.commit()

    log_audit(
        db=db,
        tenant_id=tenant_id,
        actor_id=actor_id,
        action="HOLIDAY_DELETE",
        entity_type="holiday_calendars",
        entity_id=holiday_id,
        meta=meta,
    )


def get_holidays_in_range(
    db: Session,
    tenant_id: int,
    from_date: date,
    to_date: date
) -> List[HolidayCalendar]:
    """
    Get the tenant's holidays within the given date range

    Args:
        db: Database session
        tenant_id: Tenant to read
        from_date: Start date (inclusive)
        to_date: End date (inclusive)

    Returns:
        HolidayCalendar rows ordered by date
    """
    return db.query(HolidayCalendar).filter(
        and_(
            HolidayCalendar.tenant_id == tenant_id,
            HolidayCalendar.date >= from_date,
            HolidayCalendar.date <= to_date
        )
    ).order_by(HolidayCalendar.date).all()
