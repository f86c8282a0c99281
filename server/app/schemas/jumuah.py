from __future__ import annotations

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field, validator

JumuahStatus = Literal["active", "future", "expired"]


class JumuahSlotPayload(BaseModel):
    slot: int
    khutbah_time: str
    jamaat_time: str
    language: str = Field("", max_length=64)
    notes: str = ""
    valid_from: Optional[date] = None
    valid_to: Optional[date] = None

    @validator("valid_to")
    def validate_range(cls, value: Optional[date], values: dict) -> Optional[date]:
        start = values.get("valid_from")
        if value and start and value < start:
            raise ValueError("Valid to cannot be before valid from")
        return value


class JumuahSlotOut(BaseModel):
    id: int
    masjid_id: int
    slot: int
    khutbah_time: str
    jamaat_time: str
    language: Optional[str]
    notes: Optional[str]
    valid_from: Optional[date]
    valid_to: Optional[date]
    status: JumuahStatus
    created_at: datetime
    updated_at: datetime
