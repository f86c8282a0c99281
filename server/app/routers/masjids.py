from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.auth.deps import require_admin
from app.core.db import get_db
from app.models.user import User
from app.schemas.masjid import MasjidOut, MasjidPayload
from app.services import masjids as masjids_service

router = APIRouter(prefix="/masjids", tags=["masjids"])


@router.get("", response_model=list[MasjidOut], status_code=status.HTTP_200_OK)
def list_masjids(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> list[MasjidOut]:
    return masjids_service.list_masjids(db, include_hidden=True)


@router.get("/public", response_model=list[MasjidOut], status_code=status.HTTP_200_OK)
def list_public_masjids(db: Session = Depends(get_db)) -> list[MasjidOut]:
    """Masjids visible in the mobile app."""

    return masjids_service.list_masjids(db, include_hidden=False)


@router.post("", response_model=MasjidOut, status_code=status.HTTP_201_CREATED)
def create_masjid(
    payload: MasjidPayload,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> MasjidOut:
    return masjids_service.create_masjid(db, payload)


@router.get("/{masjid_id}", response_model=MasjidOut, status_code=status.HTTP_200_OK)
def get_masjid(
    masjid_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> MasjidOut:
    return MasjidOut.from_orm(masjids_service.get_masjid_or_404(db, masjid_id))


@router.put("/{masjid_id}", response_model=MasjidOut, status_code=status.HTTP_200_OK)
def update_masjid(
    masjid_id: int,
    payload: MasjidPayload,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> MasjidOut:
    return masjids_service.update_masjid(db, masjid_id, payload)


@router.post("/{masjid_id}/toggle-active", response_model=MasjidOut, status_code=status.HTTP_200_OK)
def toggle_masjid_visibility(
    masjid_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> MasjidOut:
    return masjids_service.toggle_active(db, masjid_id)
