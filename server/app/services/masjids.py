from __future__ import annotations

import logging

from fastapi import HTTPException, status
from slugify import slugify
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.masjid import Masjid
from app.schemas.masjid import MasjidOut, MasjidPayload
from app.services.persistence import commit_or_raise

logger = logging.getLogger(__name__)


def slugify_name(value: str) -> str:
    """Lowercase; runs of anything but unicode letters/numbers become a single dash."""

    return slugify(value or "", allow_unicode=True, lowercase=True, separator="-")


def _blank_to_none(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned or None


def get_masjid_or_404(db: Session, masjid_id: int) -> Masjid:
    masjid = db.get(Masjid, masjid_id)
    if not masjid:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Masjid not found")
    return masjid


def list_masjids(db: Session, *, include_hidden: bool = True) -> list[MasjidOut]:
    query = db.query(Masjid)
    if not include_hidden:
        query = query.filter(Masjid.is_active.is_(True))
    rows = query.order_by(Masjid.city.asc(), Masjid.official_name.asc()).all()
    return [MasjidOut.from_orm(row) for row in rows]


def _clean_payload(payload: MasjidPayload) -> dict:
    official_name = payload.official_name.strip()
    if not official_name:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Official name is required.")
    city = payload.city.strip()
    if not city:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="City is required.")
    slug = (payload.slug.strip() or slugify_name(official_name)).strip()
    if not slug:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Slug could not be generated – please enter a slug manually.",
        )
    return {
        "slug": slug,
        "official_name": official_name,
        "short_name": _blank_to_none(payload.short_name),
        "city": city,
        "region": _blank_to_none(payload.region),
        "address_line1": _blank_to_none(payload.address_line1),
        "address_line2": _blank_to_none(payload.address_line2),
        "postal_code": _blank_to_none(payload.postal_code),
        "timezone": payload.timezone.strip() or settings.DEFAULT_TIMEZONE,
        "is_active": payload.is_active,
    }


def _ensure_slug_free(db: Session, slug: str, exclude_id: int | None = None) -> None:
    query = db.query(Masjid).filter(Masjid.slug == slug)
    if exclude_id is not None:
        query = query.filter(Masjid.id != exclude_id)
    if query.first():
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Another masjid already uses this slug")


def create_masjid(db: Session, payload: MasjidPayload) -> MasjidOut:
    data = _clean_payload(payload)
    _ensure_slug_free(db, data["slug"])
    masjid = Masjid(**data)
    db.add(masjid)
    commit_or_raise(db, "masjid_create_failed", slug=masjid.slug)
    db.refresh(masjid)
    logger.info("masjid_created", extra={"masjid_id": masjid.id, "slug": masjid.slug})
    return MasjidOut.from_orm(masjid)


def update_masjid(db: Session, masjid_id: int, payload: MasjidPayload) -> MasjidOut:
    masjid = get_masjid_or_404(db, masjid_id)
    data = _clean_payload(payload)
    _ensure_slug_free(db, data["slug"], exclude_id=masjid.id)
    for key, value in data.items():
        setattr(masjid, key, value)
    commit_or_raise(db, "masjid_update_failed", slug=masjid.slug)
    db.refresh(masjid)
    return MasjidOut.from_orm(masjid)


def toggle_active(db: Session, masjid_id: int) -> MasjidOut:
    masjid = get_masjid_or_404(db, masjid_id)
    masjid.is_active = not masjid.is_active
    commit_or_raise(db, "masjid_toggle_failed", slug=masjid.slug)
    db.refresh(masjid)
    logger.info("masjid_visibility_changed", extra={"masjid_id": masjid.id, "is_active": masjid.is_active})
    return MasjidOut.from_orm(masjid)
