"""Ramadan calendar: settings, day generation and per-day request rollups.

Saving a Ramadan range always rebuilds its day rows: every existing row for
the settings is deleted and the full range is inserted again, numbered from 1.
The two steps are committed separately, so a failure after the delete leaves
the calendar empty until the next save. Per-day "closed" flags do not survive
a rebuild.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import ESTIMATED_RAMADAN_2026, EXPECTED_RAMADAN_DAY_COUNTS
from app.core.config import settings as app_settings
from app.models.ramadan import IftarRequest, RamadanDay, RamadanSettings
from app.schemas.ramadan import (
    BookingWindowOut,
    DraftRangeOut,
    RamadanCalendarOut,
    RamadanDayOut,
    RamadanSettingsOut,
    RamadanSettingsPayload,
)
from app.services.masjids import get_masjid_or_404
from app.services.persistence import commit_or_raise, surface_db_error

logger = logging.getLogger(__name__)

STATUS_CLOSED = "Closed"
STATUS_AVAILABLE = "Available"
STATUS_APPROVED = "Approved"
STATUS_PENDING = "Taken (pending)"


@dataclass
class DayAggregate:
    day_id: int
    total_requests: int = 0
    approved_requests: int = 0


def enumerate_days(start_date: date, end_date: date) -> list[tuple[int, date]]:
    """(day_number, date) for every date in the closed range, numbered from 1."""

    if start_date > end_date:
        raise ValueError("Start date must be before or equal to end date.")
    total = (end_date - start_date).days + 1
    return [(offset + 1, start_date + timedelta(days=offset)) for offset in range(total)]


def draft_day_count(start_date: date | None, end_date: date | None) -> int | None:
    if start_date is None or end_date is None or start_date > end_date:
        return None
    return (end_date - start_date).days + 1


def day_count_warning(count: int | None) -> str | None:
    if count is None or count in EXPECTED_RAMADAN_DAY_COUNTS:
        return None
    return f"Ramadan usually lasts 29 or 30 days; this range has {count}."


def aggregate_requests(rows: Iterable[tuple[int, str]]) -> dict[int, DayAggregate]:
    """Fold (ramadan_day_id, status) pairs into per-day totals."""

    aggregates: dict[int, DayAggregate] = {}
    for day_id, request_status in rows:
        aggregate = aggregates.get(day_id)
        if aggregate is None:
            aggregate = aggregates[day_id] = DayAggregate(day_id=day_id)
        aggregate.total_requests += 1
        if request_status == "approved":
            aggregate.approved_requests += 1
    return aggregates


def day_status(is_open_for_requests: bool, aggregate: DayAggregate | None) -> str:
    if not is_open_for_requests:
        return STATUS_CLOSED
    if aggregate is None or aggregate.total_requests == 0:
        return STATUS_AVAILABLE
    if aggregate.approved_requests > 0:
        return STATUS_APPROVED
    return STATUS_PENDING


def default_booking_window(start_date: date, now: datetime | None = None) -> BookingWindowOut:
    """From now until the day before Ramadan starts. Not validated against anything."""

    now = now or datetime.now(timezone.utc)
    booking_end = datetime.combine(start_date - timedelta(days=1), time.min, tzinfo=timezone.utc)
    return BookingWindowOut(booking_start=now, booking_end=booking_end)


def estimated_range() -> DraftRangeOut:
    start_date, end_date = (date.fromisoformat(value) for value in ESTIMATED_RAMADAN_2026)
    count = draft_day_count(start_date, end_date)
    return DraftRangeOut(start_date=start_date, end_date=end_date, day_count=count, warning=day_count_warning(count))


def describe_draft(start_date: date | None, end_date: date | None) -> DraftRangeOut:
    count = draft_day_count(start_date, end_date)
    return DraftRangeOut(start_date=start_date, end_date=end_date, day_count=count, warning=day_count_warning(count))


# persistence ---------------------------------------------------------------


def get_settings(db: Session, masjid_id: int, year: int | None = None) -> RamadanSettings | None:
    year = year or app_settings.RAMADAN_TARGET_YEAR
    return (
        db.query(RamadanSettings)
        .filter(RamadanSettings.masjid_id == masjid_id, RamadanSettings.gregorian_year == year)
        .first()
    )


def load_day_aggregates(db: Session, ramadan_id: int) -> dict[int, DayAggregate]:
    rows = (
        db.query(IftarRequest.ramadan_day_id, IftarRequest.status)
        .filter(IftarRequest.ramadan_id == ramadan_id)
        .all()
    )
    return aggregate_requests((row[0], row[1]) for row in rows)


def serialize_day(day: RamadanDay, aggregate: DayAggregate | None) -> RamadanDayOut:
    return RamadanDayOut(
        id=day.id,
        ramadan_id=day.ramadan_id,
        masjid_id=day.masjid_id,
        day_number=day.day_number,
        date=day.date,
        is_open_for_requests=day.is_open_for_requests,
        approved_request_id=day.approved_request_id,
        total_requests=aggregate.total_requests if aggregate else 0,
        approved_requests=aggregate.approved_requests if aggregate else 0,
        status=day_status(day.is_open_for_requests, aggregate),
    )


def build_calendar(db: Session, ramadan: RamadanSettings | None, *, message: str | None = None) -> RamadanCalendarOut:
    if ramadan is None:
        return RamadanCalendarOut(settings=None, days=[], day_count=0, message=message)
    days = (
        db.query(RamadanDay)
        .filter(RamadanDay.ramadan_id == ramadan.id)
        .order_by(RamadanDay.day_number.asc())
        .all()
    )
    aggregates = load_day_aggregates(db, ramadan.id)
    return RamadanCalendarOut(
        settings=RamadanSettingsOut.from_orm(ramadan),
        days=[serialize_day(day, aggregates.get(day.id)) for day in days],
        day_count=len(days),
        warning=day_count_warning(len(days)) if days else None,
        message=message,
    )


def load_calendar(db: Session, masjid_id: int, year: int | None = None) -> RamadanCalendarOut:
    get_masjid_or_404(db, masjid_id)
    return build_calendar(db, get_settings(db, masjid_id, year))


def regenerate_days(db: Session, ramadan: RamadanSettings) -> int:
    """Delete every day row for ``ramadan`` and insert the full range again."""

    try:
        planned = enumerate_days(ramadan.start_date, ramadan.end_date)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid start/end dates in saved settings."
        ) from exc

    try:
        removed = (
            db.query(RamadanDay)
            .filter(RamadanDay.ramadan_id == ramadan.id)
            .delete(synchronize_session=False)
        )
        db.commit()
    except SQLAlchemyError as exc:
        raise surface_db_error(db, exc, "ramadan_days_delete_failed", ramadan_id=ramadan.id) from exc

    try:
        db.add_all(
            RamadanDay(
                ramadan_id=ramadan.id,
                masjid_id=ramadan.masjid_id,
                day_number=day_number,
                date=day_date,
                is_open_for_requests=True,
            )
            for day_number, day_date in planned
        )
        db.commit()
    except SQLAlchemyError as exc:
        raise surface_db_error(db, exc, "ramadan_days_insert_failed", ramadan_id=ramadan.id) from exc

    logger.info(
        "ramadan_days_regenerated",
        extra={"ramadan_id": ramadan.id, "removed": removed, "inserted": len(planned)},
    )
    return len(planned)


def save_settings(
    db: Session,
    masjid_id: int,
    payload: RamadanSettingsPayload,
    year: int | None = None,
) -> RamadanCalendarOut:
    get_masjid_or_404(db, masjid_id)
    year = year or app_settings.RAMADAN_TARGET_YEAR
    if not payload.start_date or not payload.end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Please set both start and end date for Ramadan."
        )
    if payload.start_date > payload.end_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Start date must be before or equal to end date."
        )

    ramadan = get_settings(db, masjid_id, year)
    if ramadan is None:
        ramadan = RamadanSettings(masjid_id=masjid_id, gregorian_year=year)
        db.add(ramadan)
    ramadan.hijri_year = payload.hijri_year
    ramadan.start_date = payload.start_date
    ramadan.end_date = payload.end_date
    ramadan.is_active = payload.is_active
    ramadan.booking_start = payload.booking_start
    ramadan.booking_end = payload.booking_end
    commit_or_raise(db, "ramadan_settings_save_failed", masjid_id=masjid_id, year=year)
    db.refresh(ramadan)
    logger.info("ramadan_settings_saved", extra={"ramadan_id": ramadan.id, "masjid_id": masjid_id})

    regenerate_days(db, ramadan)
    return build_calendar(db, ramadan, message="Ramadan days regenerated from the saved schedule.")


def set_day_open(db: Session, masjid_id: int, day_id: int, is_open: bool) -> RamadanDayOut:
    day = (
        db.query(RamadanDay)
        .filter(RamadanDay.id == day_id, RamadanDay.masjid_id == masjid_id)
        .first()
    )
    if not day:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ramadan day not found")
    day.is_open_for_requests = is_open
    commit_or_raise(db, "ramadan_day_update_failed", day_id=day_id)
    db.refresh(day)
    return serialize_day(day, load_day_aggregates(db, day.ramadan_id).get(day.id))
