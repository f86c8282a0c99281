from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

AnnouncementCategory = Literal["general", "jumuah", "event", "ramadan", "urgent"]
AnnouncementStatus = Literal["active", "upcoming", "past"]
StatusFilter = Literal["active", "upcoming", "past", "all"]


class AnnouncementPayload(BaseModel):
    title: str = Field("", max_length=255)
    body: str = ""
    category: AnnouncementCategory = "general"
    is_pinned: bool = False
    starts_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None


class AnnouncementOut(BaseModel):
    id: int
    masjid_id: int
    title: str
    body: str
    category: AnnouncementCategory
    starts_at: Optional[datetime]
    ends_at: Optional[datetime]
    is_pinned: bool
    created_at: datetime
    status: AnnouncementStatus


class AnnouncementListResponse(BaseModel):
    items: list[AnnouncementOut]
    total: int
    active_count: int
