from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

IftarRequestStatus = Literal["requested", "approved", "rejected", "cancelled_by_user"]


class IftarRequestAdminRow(BaseModel):
    id: int
    masjid_name: str
    city: str
    day_number: Optional[int]
    date: Optional[date]
    requester_name: Optional[str]
    phone: Optional[str]
    message: Optional[str]
    status: IftarRequestStatus
    created_at: datetime


class IftarDecision(BaseModel):
    status: Literal["approved", "rejected"]


class IftarRequestCreate(BaseModel):
    requester_name: str = Field(..., min_length=1, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)
    message: Optional[str] = Field(None, max_length=2000)


class IftarRequestOut(BaseModel):
    id: int
    ramadan_id: int
    ramadan_day_id: int
    requester_name: Optional[str]
    phone: Optional[str]
    message: Optional[str]
    status: IftarRequestStatus
    created_at: datetime

    class Config:
        from_attributes = True
