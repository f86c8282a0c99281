from __future__ import annotations

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from app.auth.deps import require_admin
from app.core.db import get_db
from app.models.user import User
from app.schemas.analytics import AnalyticsDashboard, AppProfileIngest
from app.services import analytics as analytics_service

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("", response_model=AnalyticsDashboard, status_code=status.HTTP_200_OK)
def analytics_dashboard(
    db: Session = Depends(get_db),
    _: User = Depends(require_admin),
) -> AnalyticsDashboard:
    return analytics_service.load_dashboard(db)


@router.post("/profiles", status_code=status.HTTP_200_OK)
def ingest_app_profile(
    payload: AppProfileIngest,
    response: Response,
    db: Session = Depends(get_db),
) -> dict[str, object]:
    profile, created = analytics_service.upsert_profile(db, payload)
    if created:
        response.status_code = status.HTTP_201_CREATED
    return {"install_id": profile.install_id, "created": created}
