from __future__ import annotations

import logging
from datetime import time

import pytest
from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app.models.jumuah import MasjidJumuahTime
from app.services.persistence import commit_or_raise


def _failing_commit(error):
    def _commit(self):
        raise error

    return _commit


def test_commit_or_raise_rolls_back_and_logs(db_session, sample_masjid, monkeypatch, caplog):
    sample_masjid.city = "Merano"
    locked = OperationalError("COMMIT", {}, Exception("database is locked"))
    monkeypatch.setattr(Session, "commit", _failing_commit(locked))

    with caplog.at_level(logging.ERROR, logger="app.services.persistence"):
        with pytest.raises(HTTPException) as excinfo:
            commit_or_raise(db_session, "masjid_update_failed", slug=sample_masjid.slug)

    assert excinfo.value.status_code == 500
    assert excinfo.value.detail == "database is locked"
    record = next(item for item in caplog.records if item.getMessage() == "masjid_update_failed")
    assert record.slug == "masjid-al-huda"
    assert record.error == "database is locked"
    monkeypatch.undo()
    db_session.expire_all()
    assert sample_masjid.city == "Bolzano"


def test_failed_delete_is_surfaced_and_kept(client, authorize, super_admin_user, sample_masjid, db_session, monkeypatch):
    slot = MasjidJumuahTime(masjid_id=sample_masjid.id, slot=1, khutbah_time=time(13, 0), jamaat_time=time(13, 30))
    db_session.add(slot)
    db_session.commit()
    slot_id = slot.id
    authorize(super_admin_user)
    url = f"/masjids/{sample_masjid.id}/jumuah"

    with monkeypatch.context() as patch:
        patch.setattr(Session, "commit", _failing_commit(OperationalError("COMMIT", {}, Exception("database is locked"))))
        resp = client.delete(f"{url}/{slot_id}")
    assert resp.status_code == 500
    assert resp.json()["detail"] == "database is locked"

    listing = client.get(url).json()
    assert [row["id"] for row in listing] == [slot_id]


def test_constraint_violation_is_conflict(client, authorize, super_admin_user, monkeypatch):
    authorize(super_admin_user)
    duplicate = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed: public_masjids.slug"))

    with monkeypatch.context() as patch:
        patch.setattr(Session, "commit", _failing_commit(duplicate))
        resp = client.post("/masjids", json={"official_name": "Moschea di Trento", "city": "Trento", "region": "Trentino"})
    assert resp.status_code == 409
    assert resp.json()["detail"] == "UNIQUE constraint failed: public_masjids.slug"
    assert client.get("/masjids").json() == []
