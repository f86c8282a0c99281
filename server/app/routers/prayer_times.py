from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth.deps import require_admin
from app.core.db import get_db
from app.models.user import User
from app.schemas.prayer_time import PrayerDayOut, PrayerDaySave
from app.services import prayer_times as prayer_times_service

router = APIRouter(prefix="/masjids/{masjid_id}/prayer-times", tags=["prayer-times"])


@router.get("", response_model=PrayerDayOut, status_code=status.HTTP_200_OK)
def get_prayer_day(
    masjid_id: int,
    day: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> PrayerDayOut:
    return prayer_times_service.load_day(db, masjid_id, day)


@router.get("/previous", response_model=PrayerDayOut, status_code=status.HTTP_200_OK)
def copy_previous_day(
    masjid_id: int,
    day: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> PrayerDayOut:
    return prayer_times_service.copy_from_previous_day(db, masjid_id, day)


@router.put("", response_model=PrayerDayOut, status_code=status.HTTP_200_OK)
def save_prayer_day(
    masjid_id: int,
    payload: PrayerDaySave,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> PrayerDayOut:
    return prayer_times_service.save_day(db, masjid_id, payload)


@router.delete("", response_model=PrayerDayOut, status_code=status.HTTP_200_OK)
def clear_prayer_day(
    masjid_id: int,
    day: date = Query(..., alias="date"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> PrayerDayOut:
    return prayer_times_service.clear_day(db, masjid_id, day)
