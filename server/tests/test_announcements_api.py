from __future__ import annotations

from datetime import datetime, timedelta, timezone

from app.models.announcement import MasjidAnnouncement
from app.services.announcements import announcement_status

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_announcement_status_windows():
    assert announcement_status(MasjidAnnouncement(starts_at=None, ends_at=None), NOW) == "active"
    assert announcement_status(MasjidAnnouncement(starts_at=NOW + timedelta(days=1), ends_at=None), NOW) == "upcoming"
    assert announcement_status(MasjidAnnouncement(starts_at=None, ends_at=NOW - timedelta(hours=1)), NOW) == "past"
    # naive timestamps are read as UTC
    naive_end = (NOW - timedelta(minutes=5)).replace(tzinfo=None)
    assert announcement_status(MasjidAnnouncement(starts_at=None, ends_at=naive_end), NOW) == "past"


def _seed(db_session, masjid_id, **fields):
    row = MasjidAnnouncement(masjid_id=masjid_id, body="Details", created_at=datetime.now(timezone.utc), **fields)
    db_session.add(row)
    db_session.commit()
    return row


def test_list_filters_and_pinned_first(client, authorize, super_admin_user, sample_masjid, db_session):
    now = datetime.now(timezone.utc)
    _seed(db_session, sample_masjid.id, title="Older", category="general", starts_at=now - timedelta(days=3))
    _seed(db_session, sample_masjid.id, title="Newer", category="event", starts_at=now - timedelta(days=1))
    _seed(db_session, sample_masjid.id, title="Pinned", category="jumuah", is_pinned=True, starts_at=now - timedelta(days=5))
    _seed(db_session, sample_masjid.id, title="Later", category="ramadan", starts_at=now + timedelta(days=2))
    _seed(db_session, sample_masjid.id, title="Gone", category="urgent", ends_at=now - timedelta(days=1))
    authorize(super_admin_user)
    url = f"/masjids/{sample_masjid.id}/announcements"

    active = client.get(url)
    assert active.status_code == 200, active.text
    body = active.json()
    assert [item["title"] for item in body["items"]] == ["Pinned", "Newer", "Older"]
    assert body["total"] == 3
    assert body["active_count"] == 3

    upcoming = client.get(url, params={"status": "upcoming"}).json()
    assert [item["title"] for item in upcoming["items"]] == ["Later"]
    assert upcoming["active_count"] == 3

    past = client.get(url, params={"status": "past"}).json()
    assert [item["title"] for item in past["items"]] == ["Gone"]

    events = client.get(url, params={"status": "all", "category": "event"}).json()
    assert [item["title"] for item in events["items"]] == ["Newer"]
    assert events["total"] == 1


def test_announcement_crud_and_validation(client, authorize, super_admin_user, sample_masjid):
    authorize(super_admin_user)
    url = f"/masjids/{sample_masjid.id}/announcements"

    missing_title = client.post(url, json={"title": "  ", "body": "Text"})
    assert missing_title.status_code == 400
    assert missing_title.json()["detail"] == "Title is required."

    missing_body = client.post(url, json={"title": "Eid prayer", "body": ""})
    assert missing_body.status_code == 400
    assert missing_body.json()["detail"] == "Body text is required."

    created = client.post(url, json={"title": "Eid prayer", "body": "Eid prayer at 08:00", "category": "event"})
    assert created.status_code == 201, created.text
    announcement_id = created.json()["id"]
    assert created.json()["status"] == "active"

    updated = client.put(
        f"{url}/{announcement_id}",
        json={"title": "Eid prayer", "body": "Eid prayer at 08:30", "category": "event", "is_pinned": True},
    )
    assert updated.status_code == 200
    assert updated.json()["is_pinned"] is True
    assert updated.json()["body"] == "Eid prayer at 08:30"

    deleted = client.delete(f"{url}/{announcement_id}")
    assert deleted.status_code == 204
    assert client.get(url, params={"status": "all"}).json()["total"] == 0


def test_invalid_category_is_rejected(client, authorize, super_admin_user, sample_masjid):
    authorize(super_admin_user)
    resp = client.post(
        f"/masjids/{sample_masjid.id}/announcements",
        json={"title": "Hello", "body": "World", "category": "sports"},
    )
    assert resp.status_code == 422
