from __future__ import annotations

from app.models.app_profile import AppProfile
from app.services.analytics import EMPTY_MESSAGE, bar_percent, percent


def test_percentages_round_half_up():
    assert percent(1, 3) == 33
    assert percent(2, 3) == 67
    assert percent(1, 8) == 13
    assert percent(0, 0) == 0


def test_zero_bar_width_is_drawn_as_minimum():
    assert bar_percent(0, 5) == 4
    assert bar_percent(1, 50) == 2
    assert bar_percent(5, 5) == 100


def test_empty_dashboard_explains_itself(client, authorize, super_admin_user):
    authorize(super_admin_user)
    resp = client.get("/analytics")
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["overview"] is None
    assert body["by_masjid"] == []
    assert body["message"] == EMPTY_MESSAGE


def test_dashboard_breakdowns(client, authorize, super_admin_user, sample_masjid, db_session):
    db_session.add_all(
        [
            AppProfile(install_id="install-1", primary_masjid_id=sample_masjid.id, user_role="parent",
                       age_band="25-34", app_language="it", push_opt_in=True),
            AppProfile(install_id="install-2", primary_masjid_id=sample_masjid.id, user_role="parent",
                       age_band="25-34", app_language="it", push_opt_in=True),
            AppProfile(install_id="install-3", age_band="18-24", app_language="en", marketing_opt_in=True),
        ]
    )
    db_session.commit()
    authorize(super_admin_user)

    body = client.get("/analytics").json()
    assert body["message"] is None
    assert body["overview"] == {
        "total_profiles": 3,
        "masjid_count": 1,
        "push_opt_in_count": 2,
        "marketing_opt_in_count": 1,
        "push_opt_in_percent": 67,
        "marketing_opt_in_percent": 33,
    }

    masjids = body["by_masjid"]
    assert masjids[0]["masjid_name"] == "Masjid al-Huda"
    assert masjids[0]["city"] == "Bolzano"
    assert (masjids[0]["profile_count"], masjids[0]["share_percent"], masjids[0]["bar_percent"]) == (2, 67, 100)
    assert masjids[1]["masjid_id"] is None
    assert (masjids[1]["share_percent"], masjids[1]["bar_percent"]) == (33, 50)

    assert [(row["user_role"], row["profile_count"]) for row in body["by_role"]] == [("parent", 2), ("unknown", 1)]
    assert [(row["age_band"], row["bar_percent"]) for row in body["by_age_band"]] == [("18-24", 50), ("25-34", 100)]
    assert [row["app_language"] for row in body["by_app_language"]] == ["it", "en"]


def test_dashboard_requires_admin(client, authorize, member_user):
    authorize(member_user)
    assert client.get("/analytics").status_code == 403


def test_profile_ingest_creates_then_updates(client, sample_masjid, db_session):
    payload = {
        "install_id": "device-abc",
        "primary_masjid_id": sample_masjid.id,
        "user_role": "student",
        "age_band": "18-24",
        "app_language": "de",
        "push_opt_in": True,
    }
    created = client.post("/analytics/profiles", json=payload)
    assert created.status_code == 201, created.text
    assert created.json() == {"install_id": "device-abc", "created": True}

    updated = client.post("/analytics/profiles", json={**payload, "app_language": "ar", "primary_masjid_id": 999})
    assert updated.status_code == 200
    assert updated.json()["created"] is False

    db_session.expire_all()
    rows = db_session.query(AppProfile).all()
    assert len(rows) == 1
    assert rows[0].app_language == "ar"
    assert rows[0].primary_masjid_id is None
