from __future__ import annotations

import logging
import re
from datetime import date, datetime, time, timedelta

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.config import PRAYER_KEYS
from app.models.prayer_time import MasjidPrayerTime
from app.schemas.prayer_time import PrayerDayOut, PrayerDaySave, PrayerTimeRow
from app.services.masjids import get_masjid_or_404
from app.services.persistence import commit_or_raise

logger = logging.getLogger(__name__)

TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")


def parse_hhmm(value: str, *, label: str) -> time:
    if not TIME_PATTERN.match(value or ""):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Please enter a valid {label} time (HH:MM).")
    try:
        return datetime.strptime(value, "%H:%M").time()
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail=f"Please enter a valid {label} time (HH:MM)."
        ) from exc


def format_hhmm(value: time | None) -> str:
    return value.strftime("%H:%M") if value else ""


def build_empty_rows(masjid_id: int, day: date) -> list[PrayerTimeRow]:
    return [PrayerTimeRow(masjid_id=masjid_id, date=day, prayer=key) for key in PRAYER_KEYS]


def _rows_for_day(db: Session, masjid_id: int, day: date) -> list[MasjidPrayerTime]:
    return (
        db.query(MasjidPrayerTime)
        .filter(MasjidPrayerTime.masjid_id == masjid_id, MasjidPrayerTime.date == day)
        .all()
    )


def _merge(masjid_id: int, day: date, existing: list[MasjidPrayerTime]) -> list[PrayerTimeRow]:
    by_prayer = {row.prayer: row for row in existing}
    merged: list[PrayerTimeRow] = []
    for key in PRAYER_KEYS:
        found = by_prayer.get(key)
        if found is None:
            merged.append(PrayerTimeRow(masjid_id=masjid_id, date=day, prayer=key))
            continue
        merged.append(
            PrayerTimeRow(
                id=found.id,
                masjid_id=masjid_id,
                date=day,
                prayer=key,
                start_time=format_hhmm(found.start_time),
                jamaat_time=format_hhmm(found.jamaat_time),
            )
        )
    return merged


def load_day(db: Session, masjid_id: int, day: date) -> PrayerDayOut:
    get_masjid_or_404(db, masjid_id)
    existing = _rows_for_day(db, masjid_id, day)
    return PrayerDayOut(masjid_id=masjid_id, date=day, rows=_merge(masjid_id, day, existing))


def copy_from_previous_day(db: Session, masjid_id: int, day: date) -> PrayerDayOut:
    """Previous day's times re-dated onto ``day``; nothing is written."""

    get_masjid_or_404(db, masjid_id)
    previous = day - timedelta(days=1)
    source = _rows_for_day(db, masjid_id, previous)
    if not source:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No prayer times found for the previous day to copy from.",
        )
    current = {row.prayer: row for row in _rows_for_day(db, masjid_id, day)}
    rows = _merge(masjid_id, day, source)
    for row in rows:
        saved = current.get(row.prayer)
        row.id = saved.id if saved else None
        if row.start_time == "" and saved is not None:
            row.start_time = format_hhmm(saved.start_time)
            row.jamaat_time = format_hhmm(saved.jamaat_time)
    return PrayerDayOut(
        masjid_id=masjid_id,
        date=day,
        rows=rows,
        message=f"Copied times from {previous.isoformat()} into the current day (not yet saved).",
    )


def clear_day(db: Session, masjid_id: int, day: date) -> PrayerDayOut:
    get_masjid_or_404(db, masjid_id)
    deleted = (
        db.query(MasjidPrayerTime)
        .filter(MasjidPrayerTime.masjid_id == masjid_id, MasjidPrayerTime.date == day)
        .delete(synchronize_session=False)
    )
    commit_or_raise(db, "prayer_times_clear_failed", masjid_id=masjid_id, date=day.isoformat())
    logger.info("prayer_times_cleared", extra={"masjid_id": masjid_id, "date": day.isoformat(), "deleted": deleted})
    return PrayerDayOut(
        masjid_id=masjid_id,
        date=day,
        rows=build_empty_rows(masjid_id, day),
        message="All prayer times cleared for this day.",
    )


def save_day(db: Session, masjid_id: int, payload: PrayerDaySave) -> PrayerDayOut:
    """Save one day as edited.

    Filled rows are upserted on (masjid, date, prayer). Rows left empty are
    deleted for that day rather than kept, so the stored day always matches
    the editor. With every row empty the whole day is cleared.
    """

    get_masjid_or_404(db, masjid_id)
    day = payload.date

    filled: dict[str, tuple[time, time]] = {}
    for row in payload.rows:
        start_raw = row.start_time.strip()
        jamaat_raw = row.jamaat_time.strip()
        if bool(start_raw) != bool(jamaat_raw):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"For {row.prayer.upper()} you must set both start and jamā‘ah, or leave both empty.",
            )
        if start_raw:
            filled[row.prayer] = (parse_hhmm(start_raw, label="start"), parse_hhmm(jamaat_raw, label="jamāʿah"))

    if not filled:
        return clear_day(db, masjid_id, day)

    existing = {row.prayer: row for row in _rows_for_day(db, masjid_id, day)}
    for prayer, (start_value, jamaat_value) in filled.items():
        row = existing.get(prayer)
        if row is None:
            db.add(
                MasjidPrayerTime(
                    masjid_id=masjid_id,
                    date=day,
                    prayer=prayer,
                    start_time=start_value,
                    jamaat_time=jamaat_value,
                )
            )
        else:
            row.start_time = start_value
            row.jamaat_time = jamaat_value
    for prayer, row in existing.items():
        if prayer not in filled:
            db.delete(row)
    commit_or_raise(db, "prayer_times_save_failed", masjid_id=masjid_id, date=day.isoformat())
    logger.info(
        "prayer_times_saved",
        extra={"masjid_id": masjid_id, "date": day.isoformat(), "prayers": sorted(filled)},
    )
    result = load_day(db, masjid_id, day)
    result.message = "Prayer times saved for this day."
    return result
