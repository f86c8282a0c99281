from __future__ import annotations

import logging
from datetime import date

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.config import MAX_JUMUAH_SLOT
from app.models.jumuah import MasjidJumuahTime
from app.schemas.jumuah import JumuahSlotOut, JumuahSlotPayload
from app.services.masjids import get_masjid_or_404
from app.services.persistence import commit_or_raise
from app.services.prayer_times import format_hhmm, parse_hhmm

logger = logging.getLogger(__name__)


def slot_status(row: MasjidJumuahTime, today: date) -> str:
    if row.valid_to and row.valid_to < today:
        return "expired"
    if row.valid_from and row.valid_from > today:
        return "future"
    return "active"


def _serialize(row: MasjidJumuahTime, today: date) -> JumuahSlotOut:
    return JumuahSlotOut(
        id=row.id,
        masjid_id=row.masjid_id,
        slot=row.slot,
        khutbah_time=format_hhmm(row.khutbah_time),
        jamaat_time=format_hhmm(row.jamaat_time),
        language=row.language,
        notes=row.notes,
        valid_from=row.valid_from,
        valid_to=row.valid_to,
        status=slot_status(row, today),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _get_slot_or_404(db: Session, masjid_id: int, slot_id: int) -> MasjidJumuahTime:
    row = (
        db.query(MasjidJumuahTime)
        .filter(MasjidJumuahTime.id == slot_id, MasjidJumuahTime.masjid_id == masjid_id)
        .first()
    )
    if not row:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Jumuʿah slot not found")
    return row


def _clean(payload: JumuahSlotPayload) -> dict:
    if payload.slot <= 0 or payload.slot > MAX_JUMUAH_SLOT:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Slot must be a number between 1 and {MAX_JUMUAH_SLOT}.",
        )
    return {
        "slot": payload.slot,
        "khutbah_time": parse_hhmm(payload.khutbah_time, label="khutbah"),
        "jamaat_time": parse_hhmm(payload.jamaat_time, label="jamāʿah"),
        "language": payload.language.strip() or None,
        "notes": payload.notes.strip() or None,
        "valid_from": payload.valid_from,
        "valid_to": payload.valid_to,
    }


def list_slots(db: Session, masjid_id: int, *, today: date | None = None) -> list[JumuahSlotOut]:
    get_masjid_or_404(db, masjid_id)
    today = today or date.today()
    rows = (
        db.query(MasjidJumuahTime)
        .filter(MasjidJumuahTime.masjid_id == masjid_id)
        .order_by(MasjidJumuahTime.slot.asc(), MasjidJumuahTime.id.asc())
        .all()
    )
    return [_serialize(row, today) for row in rows]


def create_slot(db: Session, masjid_id: int, payload: JumuahSlotPayload) -> JumuahSlotOut:
    get_masjid_or_404(db, masjid_id)
    row = MasjidJumuahTime(masjid_id=masjid_id, **_clean(payload))
    db.add(row)
    commit_or_raise(db, "jumuah_slot_create_failed", masjid_id=masjid_id)
    db.refresh(row)
    logger.info("jumuah_slot_created", extra={"masjid_id": masjid_id, "slot": row.slot})
    return _serialize(row, date.today())


def update_slot(db: Session, masjid_id: int, slot_id: int, payload: JumuahSlotPayload) -> JumuahSlotOut:
    row = _get_slot_or_404(db, masjid_id, slot_id)
    for key, value in _clean(payload).items():
        setattr(row, key, value)
    commit_or_raise(db, "jumuah_slot_update_failed", masjid_id=masjid_id, slot_id=slot_id)
    db.refresh(row)
    return _serialize(row, date.today())


def delete_slot(db: Session, masjid_id: int, slot_id: int) -> None:
    row = _get_slot_or_404(db, masjid_id, slot_id)
    db.delete(row)
    commit_or_raise(db, "jumuah_slot_delete_failed", masjid_id=masjid_id, slot_id=slot_id)
    logger.info("jumuah_slot_deleted", extra={"masjid_id": masjid_id, "slot_id": slot_id})
