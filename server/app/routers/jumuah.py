from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.auth.deps import require_admin
from app.core.db import get_db
from app.models.user import User
from app.schemas.jumuah import JumuahSlotOut, JumuahSlotPayload
from app.services import jumuah as jumuah_service

router = APIRouter(prefix="/masjids/{masjid_id}/jumuah", tags=["jumuah"])


@router.get("", response_model=list[JumuahSlotOut], status_code=status.HTTP_200_OK)
def list_jumuah_slots(
    masjid_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> list[JumuahSlotOut]:
    return jumuah_service.list_slots(db, masjid_id)


@router.post("", response_model=JumuahSlotOut, status_code=status.HTTP_201_CREATED)
def create_jumuah_slot(
    masjid_id: int,
    payload: JumuahSlotPayload,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> JumuahSlotOut:
    return jumuah_service.create_slot(db, masjid_id, payload)


@router.put("/{slot_id}", response_model=JumuahSlotOut, status_code=status.HTTP_200_OK)
def update_jumuah_slot(
    masjid_id: int,
    slot_id: int,
    payload: JumuahSlotPayload,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> JumuahSlotOut:
    return jumuah_service.update_slot(db, masjid_id, slot_id, payload)


@router.delete("/{slot_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_jumuah_slot(
    masjid_id: int,
    slot_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> Response:
    jumuah_service.delete_slot(db, masjid_id, slot_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
