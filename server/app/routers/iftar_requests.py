from __future__ import annotations

from typing import Literal

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.auth.deps import get_current_user, require_admin
from app.core.db import get_db
from app.models.user import User
from app.schemas.iftar import IftarDecision, IftarRequestAdminRow, IftarRequestCreate, IftarRequestOut
from app.services import iftar_requests as iftar_service

router = APIRouter(tags=["iftar-requests"])

StatusFilter = Literal["requested", "approved", "rejected", "cancelled_by_user"]


@router.get("/iftar-requests", response_model=list[IftarRequestAdminRow], status_code=status.HTTP_200_OK)
def list_iftar_requests(
    status_filter: StatusFilter | None = Query(default=None, alias="status"),
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> list[IftarRequestAdminRow]:
    return iftar_service.list_admin_requests(db, status_filter=status_filter)


@router.get("/iftar-requests/mine", response_model=list[IftarRequestOut], status_code=status.HTTP_200_OK)
def list_my_iftar_requests(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> list[IftarRequestOut]:
    return iftar_service.list_my_requests(db, user)


@router.patch("/iftar-requests/{request_id}", response_model=IftarRequestOut, status_code=status.HTTP_200_OK)
def decide_iftar_request(
    request_id: int,
    payload: IftarDecision,
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> IftarRequestOut:
    return iftar_service.decide_request(db, request_id, payload.status)


@router.post("/iftar-requests/{request_id}/cancel", response_model=IftarRequestOut, status_code=status.HTTP_200_OK)
def cancel_iftar_request(
    request_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> IftarRequestOut:
    return iftar_service.cancel_request(db, request_id, user)


@router.post(
    "/ramadan-days/{day_id}/requests",
    response_model=IftarRequestOut,
    status_code=status.HTTP_201_CREATED,
)
def request_iftar_day(
    day_id: int,
    payload: IftarRequestCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> IftarRequestOut:
    return iftar_service.create_request(db, day_id, payload, user)
