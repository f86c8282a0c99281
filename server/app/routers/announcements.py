from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.auth.deps import require_admin
from app.core.db import get_db
from app.models.user import User
from app.schemas.announcement import (
    AnnouncementListResponse,
    AnnouncementOut,
    AnnouncementPayload,
    StatusFilter,
)
from app.services import announcements as announcements_service

router = APIRouter(prefix="/masjids/{masjid_id}/announcements", tags=["announcements"])

CategoryFilter = Literal["all", "general", "jumuah", "event", "ramadan", "urgent"]


@router.get("", response_model=AnnouncementListResponse, status_code=status.HTTP_200_OK)
def list_announcements(
    masjid_id: int,
    status_filter: StatusFilter = Query(default="active", alias="status"),
    category: CategoryFilter = Query(default="all"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> AnnouncementListResponse:
    return announcements_service.list_announcements(
        db, masjid_id, status_filter=status_filter, category=category
    )


@router.post("", response_model=AnnouncementOut, status_code=status.HTTP_201_CREATED)
def create_announcement(
    masjid_id: int,
    payload: AnnouncementPayload,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> AnnouncementOut:
    return announcements_service.create_announcement(db, masjid_id, payload)


@router.put("/{announcement_id}", response_model=AnnouncementOut, status_code=status.HTTP_200_OK)
def update_announcement(
    masjid_id: int,
    announcement_id: int,
    payload: AnnouncementPayload,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> AnnouncementOut:
    return announcements_service.update_announcement(db, masjid_id, announcement_id, payload)


@router.delete("/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_announcement(
    masjid_id: int,
    announcement_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> Response:
    announcements_service.delete_announcement(db, masjid_id, announcement_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
