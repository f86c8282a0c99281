from __future__ import annotations

import logging
from datetime import date, time, timedelta

from sqlalchemy.orm import Session

from app.auth.security import hash_password
from app.config import PRAYER_KEYS, SUPER_ADMIN_ROLE
from app.core.config import settings
from app.core.db import Base, SessionLocal, engine
from app.core.logging import configure_logging
from app.models.announcement import MasjidAnnouncement
from app.models.app_profile import AppProfile
from app.models.jumuah import MasjidJumuahTime
from app.models.masjid import Masjid
from app.models.prayer_time import MasjidPrayerTime
from app.models.ramadan import IftarRequest, RamadanDay, RamadanSettings
from app.models.user import Profile, User
from app.services.masjids import slugify_name
from app.services.ramadan import regenerate_days

logger = logging.getLogger(__name__)

DEMO_USERS = [
    ("superadmin@example.com", "Super Admin", "Demo123!", SUPER_ADMIN_ROLE),
    ("imam@example.com", "Masjid Imam", "Demo123!", "member"),
    ("family.rahman@example.com", "Rahman Family", "Demo123!", "member"),
    ("family.khan@example.com", "Khan Family", "Demo123!", "member"),
]

DEMO_MASJIDS = [
    {
        "official_name": "Masjid al-Huda",
        "short_name": "al-Huda",
        "city": "Bolzano",
        "region": "South Tyrol",
        "address_line1": "Via Roma 12",
        "postal_code": "39100",
    },
    {
        "official_name": "Centro Culturale Islamico Merano",
        "short_name": "CCI Merano",
        "city": "Merano",
        "region": "South Tyrol",
        "address_line1": "Via Piave 4",
        "postal_code": "39012",
    },
    {
        "official_name": "Moschea di Trento",
        "short_name": None,
        "city": "Trento",
        "region": "Trentino",
        "address_line1": "Via Brennero 30",
        "postal_code": "38121",
    },
]

# (start, jamaat) for a winter day in Bolzano
DEMO_PRAYER_TIMES = {
    "fajr": (time(5, 52), time(6, 15)),
    "dhuhr": (time(12, 24), time(13, 0)),
    "asr": (time(15, 45), time(16, 0)),
    "maghrib": (time(17, 21), time(17, 26)),
    "isha": (time(18, 52), time(19, 30)),
}

DEMO_APP_PROFILES = [
    ("install-demo-0001", "Bolzano", "worshipper", "18-24", "it", True, False),
    ("install-demo-0002", "Bolzano", "worshipper", "25-34", "de", True, True),
    ("install-demo-0003", "Bolzano", "parent", "35-44", "ar", False, False),
    ("install-demo-0004", "Merano", "worshipper", "25-34", "en", True, False),
    ("install-demo-0005", "Merano", "student", "18-24", "ur", True, True),
    ("install-demo-0006", "Trento", "worshipper", "45-54", "it", False, False),
    ("install-demo-0007", None, None, None, None, False, False),
]


def ensure_user(db: Session, email: str, full_name: str, password: str, role: str) -> User:
    user = db.query(User).filter_by(email=email).first()
    if user is None:
        user = User(
            email=email,
            full_name=full_name,
            hashed_password=hash_password(password),
            is_active=True,
        )
        db.add(user)
        db.commit()
        db.refresh(user)

    if user.profile is None:
        user.profile = Profile(role=role)
    else:
        user.profile.role = role
    db.commit()
    return user


def ensure_masjids(db: Session) -> dict[str, Masjid]:
    masjids: dict[str, Masjid] = {}
    for entry in DEMO_MASJIDS:
        slug = slugify_name(entry["official_name"])
        masjid = db.query(Masjid).filter_by(slug=slug).first()
        if masjid is None:
            masjid = Masjid(slug=slug, timezone=settings.DEFAULT_TIMEZONE, is_active=True, **entry)
            db.add(masjid)
            db.flush()
        masjids[entry["city"]] = masjid
    db.commit()
    return masjids


def ensure_prayer_times(db: Session, masjid: Masjid, days: int = 7) -> None:
    today = date.today()
    for offset in range(days):
        day = today + timedelta(days=offset)
        for key in PRAYER_KEYS:
            exists = (
                db.query(MasjidPrayerTime)
                .filter_by(masjid_id=masjid.id, date=day, prayer=key)
                .first()
            )
            if exists:
                continue
            start_value, jamaat_value = DEMO_PRAYER_TIMES[key]
            db.add(
                MasjidPrayerTime(
                    masjid_id=masjid.id,
                    date=day,
                    prayer=key,
                    start_time=start_value,
                    jamaat_time=jamaat_value,
                )
            )
    db.commit()


def ensure_jumuah(db: Session, masjid: Masjid) -> None:
    if db.query(MasjidJumuahTime).filter_by(masjid_id=masjid.id).count():
        return
    db.add_all(
        [
            MasjidJumuahTime(
                masjid_id=masjid.id,
                slot=1,
                khutbah_time=time(13, 0),
                jamaat_time=time(13, 30),
                language="Arabic / Italian",
            ),
            MasjidJumuahTime(
                masjid_id=masjid.id,
                slot=2,
                khutbah_time=time(14, 30),
                jamaat_time=time(14, 45),
                language="German",
                notes="Additional Friday prayer for overflow.",
            ),
        ]
    )
    db.commit()


def ensure_announcements(db: Session, masjid: Masjid) -> None:
    if db.query(MasjidAnnouncement).filter_by(masjid_id=masjid.id).count():
        return
    db.add_all(
        [
            MasjidAnnouncement(
                masjid_id=masjid.id,
                title="German khutbah at 14:30",
                body="The second Jumuʿah this Friday will have the khutbah in German.",
                category="jumuah",
                is_pinned=True,
            ),
            MasjidAnnouncement(
                masjid_id=masjid.id,
                title="Ramadan iftar sponsorship",
                body="Families can now request to sponsor an iftar evening from the app.",
                category="ramadan",
            ),
        ]
    )
    db.commit()


def ensure_ramadan(db: Session, masjid: Masjid) -> RamadanSettings:
    year = settings.RAMADAN_TARGET_YEAR
    ramadan = db.query(RamadanSettings).filter_by(masjid_id=masjid.id, gregorian_year=year).first()
    if ramadan is None:
        ramadan = RamadanSettings(
            masjid_id=masjid.id,
            gregorian_year=year,
            hijri_year=1447,
            start_date=date(2026, 2, 28),
            end_date=date(2026, 3, 29),
            is_active=True,
        )
        db.add(ramadan)
        db.commit()
        db.refresh(ramadan)
        regenerate_days(db, ramadan)
    return ramadan


def ensure_iftar_requests(db: Session, ramadan: RamadanSettings, requesters: list[User]) -> None:
    days = (
        db.query(RamadanDay)
        .filter_by(ramadan_id=ramadan.id)
        .order_by(RamadanDay.day_number.asc())
        .limit(len(requesters))
        .all()
    )
    for day, user in zip(days, requesters):
        exists = db.query(IftarRequest).filter_by(ramadan_day_id=day.id, requester_id=user.id).first()
        if exists:
            continue
        db.add(
            IftarRequest(
                ramadan_id=ramadan.id,
                ramadan_day_id=day.id,
                requester_id=user.id,
                requester_name=user.full_name,
                phone="+39 333 000 0000",
                message="We would like to sponsor this evening.",
                status="requested",
            )
        )
    db.commit()


def ensure_app_profiles(db: Session, masjids: dict[str, Masjid]) -> None:
    for install_id, city, role, band, language, push, marketing in DEMO_APP_PROFILES:
        if db.query(AppProfile).filter_by(install_id=install_id).first():
            continue
        masjid = masjids.get(city) if city else None
        db.add(
            AppProfile(
                install_id=install_id,
                primary_masjid_id=masjid.id if masjid else None,
                user_role=role,
                age_band=band,
                app_language=language,
                push_opt_in=push,
                marketing_opt_in=marketing,
            )
        )
    db.commit()


def main() -> None:
    configure_logging()
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        users = {email: ensure_user(db, email, name, password, role) for email, name, password, role in DEMO_USERS}
        masjids = ensure_masjids(db)
        primary = masjids["Bolzano"]
        ensure_prayer_times(db, primary)
        ensure_jumuah(db, primary)
        ensure_announcements(db, primary)
        ramadan = ensure_ramadan(db, primary)
        requesters = [users["family.rahman@example.com"], users["family.khan@example.com"]]
        ensure_iftar_requests(db, ramadan, requesters)
        ensure_app_profiles(db, masjids)
        logger.info("seed_demo_complete", extra={"masjids": len(masjids), "users": len(users)})
    finally:
        db.close()


if __name__ == "__main__":
    main()
