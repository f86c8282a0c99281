from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class MasjidOut(BaseModel):
    id: int
    slug: str
    official_name: str
    short_name: Optional[str]
    city: str
    region: Optional[str]
    address_line1: Optional[str]
    address_line2: Optional[str]
    postal_code: Optional[str]
    timezone: str
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MasjidPayload(BaseModel):
    """Console form; required fields are checked by the service so the message matches the form."""

    slug: str = Field("", max_length=160)
    official_name: str = Field("", max_length=255)
    short_name: str = Field("", max_length=120)
    city: str = Field("", max_length=120)
    region: str = Field("", max_length=120)
    address_line1: str = Field("", max_length=255)
    address_line2: str = Field("", max_length=255)
    postal_code: str = Field("", max_length=30)
    timezone: str = Field("", max_length=64)
    is_active: bool = True
