from __future__ import annotations

from datetime import date
from typing import Literal, Optional

from pydantic import BaseModel

PrayerKey = Literal["fajr", "dhuhr", "asr", "maghrib", "isha"]


class PrayerTimeRow(BaseModel):
    id: Optional[int] = None
    masjid_id: int
    date: date
    prayer: PrayerKey
    start_time: str = ""
    jamaat_time: str = ""


class PrayerDayOut(BaseModel):
    masjid_id: int
    date: date
    rows: list[PrayerTimeRow]
    message: Optional[str] = None


class PrayerTimeInput(BaseModel):
    prayer: PrayerKey
    start_time: str = ""
    jamaat_time: str = ""


class PrayerDaySave(BaseModel):
    date: date
    rows: list[PrayerTimeInput]
