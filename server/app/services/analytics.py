"""Onboarding analytics over the profiles reported by the mobile app."""

from __future__ import annotations

import logging
import math
from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.config import ANALYTICS_MIN_BAR_PERCENT, ANALYTICS_TOP_MASJIDS
from app.models.app_profile import AppProfile
from app.models.masjid import Masjid
from app.schemas.analytics import (
    AgeBreakdownRow,
    AnalyticsDashboard,
    AnalyticsOverview,
    AppProfileIngest,
    LanguageBreakdownRow,
    MasjidBreakdownRow,
    RoleBreakdownRow,
)
from app.services.persistence import commit_or_raise

logger = logging.getLogger(__name__)

UNKNOWN_LABEL = "unknown"
EMPTY_MESSAGE = "No onboarding profiles found yet. Data will appear as soon as users complete onboarding."


def percent(part: int, whole: int) -> int:
    """Whole-number percentage, halves rounded up."""

    if whole <= 0:
        return 0
    return int(math.floor(part * 100 / whole + 0.5))


def bar_percent(part: int, largest: int) -> int:
    return percent(part, largest) or ANALYTICS_MIN_BAR_PERCENT


def load_overview(db: Session) -> AnalyticsOverview | None:
    total = db.query(func.count(AppProfile.id)).scalar() or 0
    if total == 0:
        return None
    masjid_count = (
        db.query(func.count(func.distinct(AppProfile.primary_masjid_id)))
        .filter(AppProfile.primary_masjid_id.isnot(None))
        .scalar()
        or 0
    )
    push = db.query(func.count(AppProfile.id)).filter(AppProfile.push_opt_in.is_(True)).scalar() or 0
    marketing = db.query(func.count(AppProfile.id)).filter(AppProfile.marketing_opt_in.is_(True)).scalar() or 0
    return AnalyticsOverview(
        total_profiles=total,
        masjid_count=masjid_count,
        push_opt_in_count=push,
        marketing_opt_in_count=marketing,
        push_opt_in_percent=percent(push, total),
        marketing_opt_in_percent=percent(marketing, total),
    )


def _grouped_counts(db: Session, column) -> list[tuple[str, int]]:
    rows = (
        db.query(column, func.count(AppProfile.id))
        .group_by(column)
        .all()
    )
    return [(value or UNKNOWN_LABEL, count) for value, count in rows]


def by_masjid(db: Session, total: int) -> list[MasjidBreakdownRow]:
    count_column = func.count(AppProfile.id).label("profile_count")
    rows = (
        db.query(AppProfile.primary_masjid_id, Masjid.official_name, Masjid.city, count_column)
        .outerjoin(Masjid, Masjid.id == AppProfile.primary_masjid_id)
        .group_by(AppProfile.primary_masjid_id, Masjid.official_name, Masjid.city)
        .order_by(count_column.desc(), Masjid.official_name.asc())
        .limit(ANALYTICS_TOP_MASJIDS)
        .all()
    )
    largest = max((row[3] for row in rows), default=0)
    return [
        MasjidBreakdownRow(
            masjid_id=masjid_id,
            masjid_name=name,
            city=city,
            profile_count=count,
            share_percent=percent(count, total),
            bar_percent=bar_percent(count, largest),
        )
        for masjid_id, name, city, count in rows
    ]


def by_role(db: Session, total: int) -> list[RoleBreakdownRow]:
    counts = sorted(_grouped_counts(db, AppProfile.user_role), key=lambda item: (-item[1], item[0]))
    return [
        RoleBreakdownRow(user_role=role, profile_count=count, share_percent=percent(count, total))
        for role, count in counts
    ]


def by_age_band(db: Session, total: int) -> list[AgeBreakdownRow]:
    counts = sorted(_grouped_counts(db, AppProfile.age_band))
    largest = max((count for _, count in counts), default=0)
    return [
        AgeBreakdownRow(
            age_band=band,
            profile_count=count,
            share_percent=percent(count, total),
            bar_percent=bar_percent(count, largest),
        )
        for band, count in counts
    ]


def by_app_language(db: Session, total: int) -> list[LanguageBreakdownRow]:
    counts = sorted(_grouped_counts(db, AppProfile.app_language), key=lambda item: (-item[1], item[0]))
    largest = max((count for _, count in counts), default=0)
    return [
        LanguageBreakdownRow(
            app_language=language,
            profile_count=count,
            share_percent=percent(count, total),
            bar_percent=bar_percent(count, largest),
        )
        for language, count in counts
    ]


def load_dashboard(db: Session) -> AnalyticsDashboard:
    overview = load_overview(db)
    if overview is None:
        return AnalyticsDashboard(
            overview=None,
            by_masjid=[],
            by_role=[],
            by_age_band=[],
            by_app_language=[],
            message=EMPTY_MESSAGE,
        )
    total = overview.total_profiles
    return AnalyticsDashboard(
        overview=overview,
        by_masjid=by_masjid(db, total),
        by_role=by_role(db, total),
        by_age_band=by_age_band(db, total),
        by_app_language=by_app_language(db, total),
    )


def upsert_profile(db: Session, payload: AppProfileIngest) -> tuple[AppProfile, bool]:
    """Insert or refresh the profile for ``install_id``; returns (row, created)."""

    profile = db.query(AppProfile).filter(AppProfile.install_id == payload.install_id).first()
    created = profile is None
    if created:
        profile = AppProfile(install_id=payload.install_id)
        db.add(profile)

    primary_masjid_id = payload.primary_masjid_id
    if primary_masjid_id is not None and db.get(Masjid, primary_masjid_id) is None:
        logger.warning(
            "app_profile_unknown_masjid",
            extra={"install_id": payload.install_id, "masjid_id": primary_masjid_id},
        )
        primary_masjid_id = None

    profile.primary_masjid_id = primary_masjid_id
    profile.user_role = payload.user_role
    profile.age_band = payload.age_band
    profile.app_language = payload.app_language
    profile.push_opt_in = payload.push_opt_in
    profile.marketing_opt_in = payload.marketing_opt_in
    profile.updated_at = datetime.utcnow()
    commit_or_raise(db, "app_profile_upsert_failed", install_id=payload.install_id)
    db.refresh(profile)
    logger.info("app_profile_upserted", extra={"install_id": profile.install_id, "is_new": created})
    return profile, created
