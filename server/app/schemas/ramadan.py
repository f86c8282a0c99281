from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

DayStatus = Literal["Closed", "Available", "Approved", "Taken (pending)"]


class RamadanSettingsPayload(BaseModel):
    hijri_year: Optional[int] = Field(None, ge=1300, le=1600)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_active: bool = True
    booking_start: Optional[datetime] = None
    booking_end: Optional[datetime] = None


class RamadanSettingsOut(BaseModel):
    id: int
    masjid_id: int
    gregorian_year: int
    hijri_year: Optional[int]
    start_date: date
    end_date: date
    is_active: bool
    booking_start: Optional[datetime]
    booking_end: Optional[datetime]

    class Config:
        from_attributes = True


class RamadanDayOut(BaseModel):
    id: int
    ramadan_id: int
    masjid_id: int
    day_number: int
    date: date
    is_open_for_requests: bool
    approved_request_id: Optional[int]
    total_requests: int = 0
    approved_requests: int = 0
    status: DayStatus


class RamadanCalendarOut(BaseModel):
    settings: Optional[RamadanSettingsOut]
    days: list[RamadanDayOut]
    day_count: int
    warning: Optional[str] = None
    message: Optional[str] = None


class BookingWindowOut(BaseModel):
    booking_start: datetime
    booking_end: datetime


class DraftRangeOut(BaseModel):
    start_date: Optional[date]
    end_date: Optional[date]
    day_count: Optional[int]
    warning: Optional[str] = None


class DayOpenUpdate(BaseModel):
    is_open_for_requests: bool
