from __future__ import annotations

from app.models.ramadan import IftarRequest, RamadanDay


def _days(db_session, ramadan_id):
    db_session.expire_all()
    return (
        db_session.query(RamadanDay)
        .filter(RamadanDay.ramadan_id == ramadan_id)
        .order_by(RamadanDay.day_number.asc())
        .all()
    )


def test_calendar_without_settings_is_empty(client, authorize, super_admin_user, sample_masjid):
    authorize(super_admin_user)
    resp = client.get(f"/masjids/{sample_masjid.id}/ramadan")
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["settings"] is None
    assert body["days"] == []
    assert body["day_count"] == 0


def test_save_settings_generates_numbered_days(client, authorize, super_admin_user, sample_masjid):
    authorize(super_admin_user)
    resp = client.put(
        f"/masjids/{sample_masjid.id}/ramadan",
        json={"hijri_year": 1447, "start_date": "2026-02-28", "end_date": "2026-03-29", "is_active": True},
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["message"] == "Ramadan days regenerated from the saved schedule."
    assert body["settings"]["gregorian_year"] == 2026
    assert body["day_count"] == 30
    assert body["warning"] is None
    assert [day["day_number"] for day in body["days"]] == list(range(1, 31))
    assert body["days"][0]["date"] == "2026-02-28"
    assert body["days"][1]["date"] == "2026-03-01"
    assert all(day["status"] == "Available" for day in body["days"])


def test_short_range_saves_with_warning(client, authorize, super_admin_user, sample_masjid):
    authorize(super_admin_user)
    resp = client.put(
        f"/masjids/{sample_masjid.id}/ramadan",
        json={"start_date": "2026-02-28", "end_date": "2026-03-01"},
    )
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["day_count"] == 2
    assert [(day["day_number"], day["date"]) for day in body["days"]] == [(1, "2026-02-28"), (2, "2026-03-01")]
    assert "has 2" in body["warning"]


def test_save_requires_both_dates_in_order(client, authorize, super_admin_user, sample_masjid):
    authorize(super_admin_user)
    url = f"/masjids/{sample_masjid.id}/ramadan"

    missing = client.put(url, json={"start_date": "2026-02-28"})
    assert missing.status_code == 400
    assert missing.json()["detail"] == "Please set both start and end date for Ramadan."

    inverted = client.put(url, json={"start_date": "2026-03-02", "end_date": "2026-03-01"})
    assert inverted.status_code == 400
    assert inverted.json()["detail"] == "Start date must be before or equal to end date."


def test_resave_replaces_days_and_resets_closed_flags(
    client, authorize, super_admin_user, sample_masjid, ramadan_2026, db_session
):
    authorize(super_admin_user)
    first_day = _days(db_session, ramadan_2026.id)[0]

    toggle = client.patch(
        f"/masjids/{sample_masjid.id}/ramadan/days/{first_day.id}",
        json={"is_open_for_requests": False},
    )
    assert toggle.status_code == 200, toggle.text
    assert toggle.json()["status"] == "Closed"

    resave = client.put(
        f"/masjids/{sample_masjid.id}/ramadan",
        json={"start_date": "2026-03-01", "end_date": "2026-03-29", "hijri_year": 1447},
    )
    assert resave.status_code == 200
    days = _days(db_session, ramadan_2026.id)
    assert len(days) == 29
    assert [day.day_number for day in days] == list(range(1, 30))
    assert days[0].date.isoformat() == "2026-03-01"
    assert all(day.is_open_for_requests for day in days)


def test_day_statuses_follow_request_aggregates(
    client, authorize, super_admin_user, sample_masjid, ramadan_2026, db_session, member_user
):
    days = _days(db_session, ramadan_2026.id)
    db_session.add_all(
        [
            IftarRequest(ramadan_id=ramadan_2026.id, ramadan_day_id=days[0].id, requester_id=member_user.id, status="requested"),
            IftarRequest(ramadan_id=ramadan_2026.id, ramadan_day_id=days[1].id, requester_id=member_user.id, status="approved"),
            IftarRequest(ramadan_id=ramadan_2026.id, ramadan_day_id=days[2].id, requester_id=member_user.id, status="requested"),
        ]
    )
    days[2].is_open_for_requests = False
    db_session.commit()
    authorize(super_admin_user)

    body = client.get(f"/masjids/{sample_masjid.id}/ramadan").json()
    statuses = [day["status"] for day in body["days"][:4]]
    assert statuses == ["Taken (pending)", "Approved", "Closed", "Available"]
    assert body["days"][1]["approved_requests"] == 1
    assert body["days"][0]["total_requests"] == 1


def test_unknown_day_toggle_is_404(client, authorize, super_admin_user, sample_masjid):
    authorize(super_admin_user)
    resp = client.patch(
        f"/masjids/{sample_masjid.id}/ramadan/days/999",
        json={"is_open_for_requests": False},
    )
    assert resp.status_code == 404


def test_estimate_draft_and_booking_window(client, authorize, super_admin_user):
    authorize(super_admin_user)
    estimate = client.get("/ramadan/estimate").json()
    assert estimate["start_date"] == "2026-02-28"
    assert estimate["end_date"] == "2026-03-29"
    assert estimate["day_count"] == 30

    draft = client.get("/ramadan/draft", params={"start_date": "2026-02-28", "end_date": "2026-03-31"}).json()
    assert draft["day_count"] == 32
    assert "has 32" in draft["warning"]

    window = client.get("/ramadan/booking-window", params={"start_date": "2026-02-28"})
    assert window.status_code == 200
    assert window.json()["booking_end"].startswith("2026-02-27T00:00:00")


def test_ramadan_endpoints_require_admin(client, authorize, member_user, sample_masjid):
    authorize(member_user)
    assert client.get(f"/masjids/{sample_masjid.id}/ramadan").status_code == 403
    assert client.get("/ramadan/estimate").status_code == 403


def test_resave_same_range_keeps_dates_and_numbers(
    client, authorize, super_admin_user, sample_masjid, ramadan_2026, db_session
):
    before = [(day.day_number, day.date) for day in _days(db_session, ramadan_2026.id)]
    authorize(super_admin_user)
    resp = client.put(
        f"/masjids/{sample_masjid.id}/ramadan",
        json={"hijri_year": 1447, "start_date": "2026-02-28", "end_date": "2026-03-29", "is_active": True},
    )
    assert resp.status_code == 200, resp.text
    after = [(day.day_number, day.date) for day in _days(db_session, ramadan_2026.id)]
    assert after == before
    assert [number for number, _ in after] == list(range(1, 31))


def test_rebuild_leaves_existing_requests_orphaned(
    client, authorize, super_admin_user, member_user, sample_masjid, ramadan_2026, db_session
):
    old_first_id = _days(db_session, ramadan_2026.id)[0].id
    authorize(member_user)
    created = client.post(f"/ramadan-days/{old_first_id}/requests", json={"requester_name": "Rahman Family"})
    assert created.status_code == 201, created.text

    authorize(super_admin_user)
    resave = client.put(
        f"/masjids/{sample_masjid.id}/ramadan",
        json={"hijri_year": 1447, "start_date": "2026-03-10", "end_date": "2026-04-07", "is_active": True},
    )
    assert resave.status_code == 200, resave.text
    new_days = resave.json()["days"]
    assert new_days[0]["date"] == "2026-03-10"
    assert new_days[0]["status"] == "Available"
    assert new_days[0]["total_requests"] == 0
    assert old_first_id not in {day["id"] for day in new_days}

    listing = client.get("/iftar-requests").json()
    assert len(listing) == 1
    assert listing[0]["id"] == created.json()["id"]
    assert listing[0]["day_number"] is None
    assert listing[0]["date"] is None

    authorize(member_user)
    again = client.post(f"/ramadan-days/{new_days[0]['id']}/requests", json={"requester_name": "Rahman Family"})
    assert again.status_code == 201, again.text
