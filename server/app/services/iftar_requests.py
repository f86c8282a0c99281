from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.models.masjid import Masjid
from app.models.ramadan import IftarRequest, RamadanDay, RamadanSettings
from app.models.user import User
from app.schemas.iftar import IftarRequestAdminRow, IftarRequestCreate, IftarRequestOut
from app.services.persistence import commit_or_raise

logger = logging.getLogger(__name__)

CANCELLABLE_STATUSES = {"requested", "approved"}


def list_admin_requests(db: Session, *, status_filter: str | None = None) -> list[IftarRequestAdminRow]:
    """Every request with its day and masjid, newest day first.

    Requests whose day was removed by a calendar rebuild still show up, without
    a day number or date.
    """

    query = (
        db.query(IftarRequest, RamadanDay, Masjid)
        .join(RamadanSettings, RamadanSettings.id == IftarRequest.ramadan_id)
        .join(Masjid, Masjid.id == RamadanSettings.masjid_id)
        .outerjoin(RamadanDay, RamadanDay.id == IftarRequest.ramadan_day_id)
    )
    if status_filter:
        query = query.filter(IftarRequest.status == status_filter)
    rows = query.order_by(
        RamadanDay.date.is_(None).asc(),
        RamadanDay.date.desc(),
        IftarRequest.created_at.desc(),
    ).all()
    return [
        IftarRequestAdminRow(
            id=request.id,
            masjid_name=masjid.official_name,
            city=masjid.city,
            day_number=day.day_number if day else None,
            date=day.date if day else None,
            requester_name=request.requester_name,
            phone=request.phone,
            message=request.message,
            status=request.status,
            created_at=request.created_at,
        )
        for request, day, masjid in rows
    ]


def _get_request_or_404(db: Session, request_id: int) -> IftarRequest:
    request = db.get(IftarRequest, request_id)
    if not request:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Iftar request not found")
    return request


def decide_request(db: Session, request_id: int, decision: str) -> IftarRequestOut:
    request = _get_request_or_404(db, request_id)
    if request.status == "cancelled_by_user":
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT, detail="This request was cancelled by the requester."
        )
    request.status = decision
    request.updated_at = datetime.now(timezone.utc)

    day = db.get(RamadanDay, request.ramadan_day_id)
    if day is not None:
        if decision == "approved":
            day.approved_request_id = request.id
        elif day.approved_request_id == request.id:
            day.approved_request_id = None
    commit_or_raise(db, "iftar_request_decision_failed", request_id=request_id)
    db.refresh(request)
    logger.info(
        "iftar_request_decided",
        extra={"request_id": request.id, "status": decision, "day_id": request.ramadan_day_id},
    )
    return IftarRequestOut.from_orm(request)


def create_request(db: Session, day_id: int, payload: IftarRequestCreate, requester: User) -> IftarRequestOut:
    day = db.get(RamadanDay, day_id)
    if not day:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Ramadan day not found")
    ramadan = day.ramadan
    if ramadan is None or not ramadan.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Ramadan iftar requests are not active.")
    if not day.is_open_for_requests:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="This day is closed for requests.")

    existing = (
        db.query(IftarRequest)
        .filter(IftarRequest.ramadan_day_id == day.id, IftarRequest.requester_id == requester.id)
        .first()
    )
    if existing:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You already requested this day.")

    now = datetime.now(timezone.utc)
    request = IftarRequest(
        ramadan_id=day.ramadan_id,
        ramadan_day_id=day.id,
        requester_id=requester.id,
        requester_name=payload.requester_name.strip(),
        phone=(payload.phone or "").strip() or None,
        message=(payload.message or "").strip() or None,
        status="requested",
        created_at=now,
        updated_at=now,
    )
    db.add(request)
    commit_or_raise(db, "iftar_request_create_failed", day_id=day.id, requester_id=requester.id)
    db.refresh(request)
    logger.info("iftar_request_created", extra={"request_id": request.id, "day_id": day.id})
    return IftarRequestOut.from_orm(request)


def list_my_requests(db: Session, requester: User) -> list[IftarRequestOut]:
    rows = (
        db.query(IftarRequest)
        .filter(IftarRequest.requester_id == requester.id)
        .order_by(IftarRequest.created_at.desc())
        .all()
    )
    return [IftarRequestOut.from_orm(row) for row in rows]


def cancel_request(db: Session, request_id: int, requester: User) -> IftarRequestOut:
    request = _get_request_or_404(db, request_id)
    if request.requester_id != requester.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Iftar request not found")
    if request.status not in CANCELLABLE_STATUSES:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="This request can no longer be cancelled.")

    request.status = "cancelled_by_user"
    request.updated_at = datetime.now(timezone.utc)
    day = db.get(RamadanDay, request.ramadan_day_id)
    if day is not None and day.approved_request_id == request.id:
        day.approved_request_id = None
    commit_or_raise(db, "iftar_request_cancel_failed", request_id=request_id)
    db.refresh(request)
    logger.info("iftar_request_cancelled", extra={"request_id": request.id})
    return IftarRequestOut.from_orm(request)
