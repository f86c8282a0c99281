from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.announcement import MasjidAnnouncement
from app.schemas.announcement import AnnouncementListResponse, AnnouncementOut, AnnouncementPayload
from app.services.masjids import get_masjid_or_404
from app.services.persistence import commit_or_raise

logger = logging.getLogger(__name__)


def as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def announcement_status(row: MasjidAnnouncement, now: datetime) -> str:
    now = as_utc(now)
    ends_at = as_utc(row.ends_at)
    starts_at = as_utc(row.starts_at)
    if ends_at and ends_at < now:
        return "past"
    if starts_at and starts_at > now:
        return "upcoming"
    return "active"


def _serialize(row: MasjidAnnouncement, now: datetime) -> AnnouncementOut:
    return AnnouncementOut(
        id=row.id,
        masjid_id=row.masjid_id,
        title=row.title,
        body=row.body,
        category=row.category,
        starts_at=as_utc(row.starts_at),
        ends_at=as_utc(row.ends_at),
        is_pinned=row.is_pinned,
        created_at=as_utc(row.created_at),
        status=announcement_status(row, now),
    )


def _sort_key(item: AnnouncementOut) -> tuple:
    # pinned first, then newest window start (or creation) first
    reference = item.starts_at or item.created_at
    return (0 if item.is_pinned else 1, -reference.timestamp())


def list_announcements(
    db: Session,
    masjid_id: int,
    *,
    status_filter: str = "active",
    category: str = "all",
    now: datetime | None = None,
) -> AnnouncementListResponse:
    get_masjid_or_404(db, masjid_id)
    now = now or datetime.now(timezone.utc)
    rows = db.query(MasjidAnnouncement).filter(MasjidAnnouncement.masjid_id == masjid_id).all()
    annotated = [_serialize(row, now) for row in rows]
    active_count = sum(1 for item in annotated if item.status == "active")

    items = annotated
    if status_filter != "all":
        items = [item for item in items if item.status == status_filter]
    if category != "all":
        items = [item for item in items if item.category == category]
    items.sort(key=_sort_key)
    return AnnouncementListResponse(items=items, total=len(items), active_count=active_count)


def _clean(payload: AnnouncementPayload) -> dict:
    title = payload.title.strip()
    if not title:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Title is required.")
    body = payload.body.strip()
    if not body:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Body text is required.")
    return {
        "title": title,
        "body": body,
        "category": payload.category,
        "is_pinned": payload.is_pinned,
        "starts_at": as_utc(payload.starts_at),
        "ends_at": as_utc(payload.ends_at),
    }


def _get_or_404(db: Session, masjid_id: int, announcement_id: int) -> MasjidAnnouncement:
    row = (
        db.query(MasjidAnnouncement)
        .filter(MasjidAnnouncement.id == announcement_id, MasjidAnnouncement.masjid_id == masjid_id)
        .first()
    )
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Announcement not found")
    return row


def create_announcement(db: Session, masjid_id: int, payload: AnnouncementPayload) -> AnnouncementOut:
    get_masjid_or_404(db, masjid_id)
    row = MasjidAnnouncement(masjid_id=masjid_id, created_at=datetime.now(timezone.utc), **_clean(payload))
    db.add(row)
    commit_or_raise(db, "announcement_create_failed", masjid_id=masjid_id)
    db.refresh(row)
    logger.info("announcement_created", extra={"masjid_id": masjid_id, "announcement_id": row.id})
    return _serialize(row, datetime.now(timezone.utc))


def update_announcement(
    db: Session, masjid_id: int, announcement_id: int, payload: AnnouncementPayload
) -> AnnouncementOut:
    row = _get_or_404(db, masjid_id, announcement_id)
    for key, value in _clean(payload).items():
        setattr(row, key, value)
    commit_or_raise(db, "announcement_update_failed", masjid_id=masjid_id, announcement_id=announcement_id)
    db.refresh(row)
    return _serialize(row, datetime.now(timezone.utc))


def delete_announcement(db: Session, masjid_id: int, announcement_id: int) -> None:
    row = _get_or_404(db, masjid_id, announcement_id)
    db.delete(row)
    commit_or_raise(db, "announcement_delete_failed", masjid_id=masjid_id, announcement_id=announcement_id)
    logger.info("announcement_deleted", extra={"masjid_id": masjid_id, "announcement_id": announcement_id})
