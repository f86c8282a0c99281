from __future__ import annotations

from datetime import date, time, timedelta

from app.models.jumuah import MasjidJumuahTime
from app.services.jumuah import slot_status


def test_slot_status_by_validity_window():
    today = date(2026, 1, 23)
    assert slot_status(MasjidJumuahTime(valid_from=None, valid_to=None), today) == "active"
    assert slot_status(MasjidJumuahTime(valid_from=date(2026, 2, 1), valid_to=None), today) == "future"
    assert slot_status(MasjidJumuahTime(valid_from=None, valid_to=date(2026, 1, 22)), today) == "expired"
    assert slot_status(MasjidJumuahTime(valid_from=today, valid_to=today), today) == "active"


def test_jumuah_slot_crud(client, authorize, super_admin_user, sample_masjid):
    authorize(super_admin_user)
    url = f"/masjids/{sample_masjid.id}/jumuah"
    create_resp = client.post(
        url,
        json={"slot": 2, "khutbah_time": "14:30", "jamaat_time": "14:45", "language": "German"},
    )
    assert create_resp.status_code == 201, create_resp.text
    created = create_resp.json()
    assert created["status"] == "active"
    assert created["khutbah_time"] == "14:30"
    assert created["notes"] is None

    client.post(url, json={"slot": 1, "khutbah_time": "13:00", "jamaat_time": "13:30"})
    listing = client.get(url)
    assert listing.status_code == 200
    assert [item["slot"] for item in listing.json()] == [1, 2]

    update_resp = client.put(
        f"{url}/{created['id']}",
        json={
            "slot": 2,
            "khutbah_time": "14:15",
            "jamaat_time": "14:45",
            "valid_from": (date.today() + timedelta(days=7)).isoformat(),
        },
    )
    assert update_resp.status_code == 200, update_resp.text
    assert update_resp.json()["khutbah_time"] == "14:15"
    assert update_resp.json()["status"] == "future"
    assert update_resp.json()["language"] is None

    delete_resp = client.delete(f"{url}/{created['id']}")
    assert delete_resp.status_code == 204
    assert [item["slot"] for item in client.get(url).json()] == [1]


def test_jumuah_validation_messages(client, authorize, super_admin_user, sample_masjid):
    authorize(super_admin_user)
    url = f"/masjids/{sample_masjid.id}/jumuah"

    bad_slot = client.post(url, json={"slot": 6, "khutbah_time": "13:00", "jamaat_time": "13:30"})
    assert bad_slot.status_code == 400
    assert bad_slot.json()["detail"] == "Slot must be a number between 1 and 5."

    bad_khutbah = client.post(url, json={"slot": 1, "khutbah_time": "1pm", "jamaat_time": "13:30"})
    assert bad_khutbah.status_code == 400
    assert bad_khutbah.json()["detail"] == "Please enter a valid khutbah time (HH:MM)."

    bad_jamaat = client.post(url, json={"slot": 1, "khutbah_time": "13:00", "jamaat_time": ""})
    assert bad_jamaat.status_code == 400
    assert bad_jamaat.json()["detail"] == "Please enter a valid jamāʿah time (HH:MM)."

    inverted = client.post(
        url,
        json={
            "slot": 1,
            "khutbah_time": "13:00",
            "jamaat_time": "13:30",
            "valid_from": "2026-03-01",
            "valid_to": "2026-02-01",
        },
    )
    assert inverted.status_code == 422


def test_expired_slot_is_listed_as_expired(client, authorize, super_admin_user, sample_masjid, db_session):
    db_session.add(
        MasjidJumuahTime(
            masjid_id=sample_masjid.id,
            slot=3,
            khutbah_time=time(12, 30),
            jamaat_time=time(13, 0),
            valid_to=date.today() - timedelta(days=1),
        )
    )
    db_session.commit()
    authorize(super_admin_user)
    listing = client.get(f"/masjids/{sample_masjid.id}/jumuah").json()
    assert listing[0]["status"] == "expired"


def test_unknown_slot_is_404(client, authorize, super_admin_user, sample_masjid):
    authorize(super_admin_user)
    resp = client.delete(f"/masjids/{sample_masjid.id}/jumuah/999")
    assert resp.status_code == 404
