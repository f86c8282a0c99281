from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth.deps import require_admin
from app.core.db import get_db
from app.models.user import User
from app.schemas.ramadan import (
    BookingWindowOut,
    DayOpenUpdate,
    DraftRangeOut,
    RamadanCalendarOut,
    RamadanDayOut,
    RamadanSettingsPayload,
)
from app.services import ramadan as ramadan_service

router = APIRouter(tags=["ramadan"])


@router.get("/ramadan/estimate", response_model=DraftRangeOut, status_code=status.HTTP_200_OK)
def estimated_ramadan_range(_: User = Depends(require_admin)) -> DraftRangeOut:
    return ramadan_service.estimated_range()


@router.get("/ramadan/draft", response_model=DraftRangeOut, status_code=status.HTTP_200_OK)
def describe_draft_range(
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    _: User = Depends(require_admin),
) -> DraftRangeOut:
    return ramadan_service.describe_draft(start_date, end_date)


@router.get("/ramadan/booking-window", response_model=BookingWindowOut, status_code=status.HTTP_200_OK)
def default_booking_window(
    start_date: date = Query(...),
    _: User = Depends(require_admin),
) -> BookingWindowOut:
    return ramadan_service.default_booking_window(start_date)


@router.get("/masjids/{masjid_id}/ramadan", response_model=RamadanCalendarOut, status_code=status.HTTP_200_OK)
def get_ramadan_calendar(
    masjid_id: int,
    year: int | None = Query(default=None, ge=2000, le=2100),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> RamadanCalendarOut:
    return ramadan_service.load_calendar(db, masjid_id, year)


@router.put("/masjids/{masjid_id}/ramadan", response_model=RamadanCalendarOut, status_code=status.HTTP_200_OK)
def save_ramadan_settings(
    masjid_id: int,
    payload: RamadanSettingsPayload,
    year: int | None = Query(default=None, ge=2000, le=2100),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> RamadanCalendarOut:
    return ramadan_service.save_settings(db, masjid_id, payload, year)


@router.patch(
    "/masjids/{masjid_id}/ramadan/days/{day_id}",
    response_model=RamadanDayOut,
    status_code=status.HTTP_200_OK,
)
def set_ramadan_day_open(
    masjid_id: int,
    day_id: int,
    payload: DayOpenUpdate,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> RamadanDayOut:
    return ramadan_service.set_day_open(db, masjid_id, day_id, payload.is_open_for_requests)
