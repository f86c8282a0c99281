from __future__ import annotations

import os
from collections.abc import Generator
from datetime import date

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app.auth.deps import get_current_user
from app.auth.security import hash_password
from app.core.config import settings
from app.core.db import Base, get_db
from app.main import app
from app.models.masjid import Masjid
from app.models.ramadan import RamadanSettings
from app.models.user import Profile, User
from app.services.ramadan import regenerate_days

SQLALCHEMY_TEST_URL = "sqlite+pysqlite:///:memory:"
engine = create_engine(SQLALCHEMY_TEST_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool)
TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, expire_on_commit=False)

TEST_PASSWORD = "Secret123!"


def override_get_db() -> Generator[Session, None, None]:
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_database() -> Generator[None, None, None]:
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    session = TestingSessionLocal()
    try:
        yield session
        session.commit()
    finally:
        session.close()


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    app.dependency_overrides.clear()
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def authorize(client: TestClient):
    def _apply(user: User):
        app.dependency_overrides[get_current_user] = lambda: user

    yield _apply
    app.dependency_overrides.pop(get_current_user, None)


@pytest.fixture()
def super_admin_ids(monkeypatch):
    def _apply(*user_ids: int):
        monkeypatch.setattr(settings, "SUPER_ADMIN_USER_IDS", list(user_ids))

    return _apply


def _make_user(session: Session, email: str, full_name: str, role: str | None) -> User:
    user = User(
        email=email,
        full_name=full_name,
        hashed_password=hash_password(TEST_PASSWORD),
        is_active=True,
    )
    if role is not None:
        user.profile = Profile(role=role)
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


@pytest.fixture()
def super_admin_user(db_session: Session) -> User:
    return _make_user(db_session, "admin@example.com", "Super Admin", "super_admin")


@pytest.fixture()
def member_user(db_session: Session) -> User:
    return _make_user(db_session, "member@example.com", "Community Member", "member")


@pytest.fixture()
def second_member_user(db_session: Session) -> User:
    return _make_user(db_session, "family@example.com", "Rahman Family", "member")


@pytest.fixture()
def sample_masjid(db_session: Session) -> Masjid:
    masjid = Masjid(
        slug="masjid-al-huda",
        official_name="Masjid al-Huda",
        city="Bolzano",
        region="South Tyrol",
        timezone="Europe/Rome",
        is_active=True,
    )
    db_session.add(masjid)
    db_session.commit()
    db_session.refresh(masjid)
    return masjid


@pytest.fixture()
def ramadan_2026(db_session: Session, sample_masjid: Masjid) -> RamadanSettings:
    ramadan = RamadanSettings(
        masjid_id=sample_masjid.id,
        gregorian_year=2026,
        hijri_year=1447,
        start_date=date(2026, 2, 28),
        end_date=date(2026, 3, 29),
        is_active=True,
    )
    db_session.add(ramadan)
    db_session.commit()
    db_session.refresh(ramadan)
    regenerate_days(db_session, ramadan)
    return ramadan


@pytest.fixture()
def login(client: TestClient):
    """Sign in through the HTML form so the session cookie lands on the client."""

    def _login(email: str, password: str = TEST_PASSWORD, next_path: str = "/admin"):
        return client.post(
            "/login",
            data={"email": email, "password": password, "next": next_path},
            follow_redirects=False,
        )

    return _login


@pytest.fixture()
def test_password() -> str:
    return TEST_PASSWORD


@pytest.fixture()
def make_user(db_session: Session):
    def _make(email: str, full_name: str = "Test User", role: str | None = "member") -> User:
        return _make_user(db_session, email, full_name, role)

    return _make
