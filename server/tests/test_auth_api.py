from __future__ import annotations

from app.auth.client import AuthClient


def test_login_and_whoami_with_bearer_token(client, super_admin_user, test_password):
    resp = client.post("/auth/login", json={"email": super_admin_user.email, "password": test_password})
    assert resp.status_code == 200, resp.text
    token = resp.json()["access_token"]
    assert resp.json()["token_type"] == "bearer"

    me = client.get("/auth/whoami", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200, me.text
    assert me.json() == {
        "id": super_admin_user.id,
        "user": "admin@example.com",
        "full_name": "Super Admin",
        "role": "super_admin",
        "is_admin": True,
    }


def test_login_rejects_bad_password(client, member_user):
    resp = client.post("/auth/login", json={"email": member_user.email, "password": "wrong"})
    assert resp.status_code == 401
    assert resp.json()["detail"] == "Invalid login credentials"


def test_whoami_requires_token(client):
    assert client.get("/auth/whoami").status_code == 401
    assert client.get("/auth/whoami", headers={"Authorization": "Bearer junk"}).status_code == 401


def test_member_is_not_admin(client, authorize, member_user):
    authorize(member_user)
    body = client.get("/auth/whoami").json()
    assert body["role"] == "member"
    assert body["is_admin"] is False


def test_recover_answers_the_same_for_unknown_email(client, member_user):
    known = client.post("/auth/recover", json={"email": member_user.email})
    unknown = client.post("/auth/recover", json={"email": "nobody@example.com"})
    assert known.status_code == unknown.status_code == 202
    assert known.json() == unknown.json()


def test_reset_password_with_code(client, db_session, member_user):
    code = AuthClient(db_session).reset_password_for_email(member_user.email)

    mismatch = client.post(
        "/auth/reset-password",
        json={"code": code, "password": "new-secret", "password_confirm": "other-secret"},
    )
    assert mismatch.status_code == 400
    assert mismatch.json()["detail"] == "Passwords do not match."

    resp = client.post(
        "/auth/reset-password",
        json={"code": code, "password": "new-secret", "password_confirm": "new-secret"},
    )
    assert resp.status_code == 200, resp.text
    assert resp.json()["access_token"]

    relogin = client.post("/auth/login", json={"email": member_user.email, "password": "new-secret"})
    assert relogin.status_code == 200
