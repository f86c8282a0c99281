from __future__ import annotations

import pytest

from app.auth.client import AuthClient
from app.core.config import settings

HTML = {"accept": "text/html"}


@pytest.mark.parametrize("path, heading", [("/", "Your masjid, always in your pocket"),
                                           ("/privacy", "Privacy Policy"),
                                           ("/terms", "Terms &amp; Conditions")])
def test_public_pages_render(client, path, heading):
    resp = client.get(path)
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert heading in resp.text


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_unknown_paths_redirect_browsers_home(client):
    resp = client.get("/some/where", headers=HTML, follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/"
    assert client.get("/some/where").status_code == 404


def test_console_requires_sign_in(client):
    resp = client.get("/admin/analytics", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login?next=/admin/analytics"


def test_sign_in_redirect_keeps_query_string(client, login, super_admin_user, sample_masjid):
    resp = client.get(f"/admin/ramadan?masjid_id={sample_masjid.id}", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == f"/login?next=/admin/ramadan%3Fmasjid_id%3D{sample_masjid.id}"

    signed_in = login(super_admin_user.email, next_path=f"/admin/ramadan?masjid_id={sample_masjid.id}")
    assert signed_in.headers["location"] == f"/admin/ramadan?masjid_id={sample_masjid.id}"


def test_login_validation_and_bad_credentials(client, login, member_user):
    empty = client.post("/login", data={"email": "", "password": ""})
    assert empty.status_code == 400
    assert "Please enter email and password." in empty.text

    wrong = login(member_user.email, password="nope")
    assert wrong.status_code == 400
    assert "Invalid login credentials" in wrong.text


def test_member_sees_access_denied(client, login, member_user):
    resp = login(member_user.email)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/admin"
    assert settings.SESSION_COOKIE_NAME in resp.cookies

    page = client.get("/admin")
    assert page.status_code == 403
    assert "Access denied" in page.text
    assert member_user.email in page.text


def test_admin_sees_console_tabs(client, login, super_admin_user, sample_masjid):
    login(super_admin_user.email)

    masjids = client.get("/admin")
    assert masjids.status_code == 200
    assert "Masjid al-Huda" in masjids.text
    assert "/admin/analytics" in masjids.text

    analytics = client.get("/admin/analytics")
    assert analytics.status_code == 200
    assert "No onboarding profiles found yet." in analytics.text

    assert client.get("/admin/nonsense").status_code == 404


def test_login_page_redirects_when_signed_in(client, login, super_admin_user):
    login(super_admin_user.email)
    resp = client.get("/login", params={"next": "//evil.example"}, follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/admin"


def test_logout_clears_session(client, login, super_admin_user):
    login(super_admin_user.email)
    resp = client.post("/logout", follow_redirects=False)
    assert resp.status_code == 303
    assert resp.headers["location"] == "/login"
    assert client.get("/admin", follow_redirects=False).status_code == 303


def test_reset_page_without_session(client):
    resp = client.get("/reset-password")
    assert resp.status_code == 200
    assert "No reset session found." in resp.text

    linked_error = client.get("/reset-password", params={"error_description": "Email link is invalid or has expired"})
    assert linked_error.status_code == 400
    assert "Email link is invalid or has expired" in linked_error.text

    bad_code = client.get("/reset-password", params={"code": "unknown"})
    assert bad_code.status_code == 400
    assert "This reset link is invalid or expired." in bad_code.text


def test_reset_flow_through_emailed_code(client, db_session, login, member_user):
    code = AuthClient(db_session).reset_password_for_email(member_user.email)
    assert code

    landing = client.get("/reset-password", params={"code": code})
    assert landing.status_code == 200
    assert "Set a new password for your account." in landing.text

    short = client.post("/reset-password", data={"password": "abc", "password_confirm": "abc"})
    assert short.status_code == 400
    assert "Password must be at least 6 characters." in short.text

    mismatch = client.post("/reset-password", data={"password": "abcdef", "password_confirm": "abcdeg"})
    assert mismatch.status_code == 400
    assert "Passwords do not match." in mismatch.text

    done = client.post(
        "/reset-password",
        data={"password": "new-secret", "password_confirm": "new-secret"},
        follow_redirects=False,
    )
    assert done.status_code == 303
    assert done.headers["location"] == "/login?reset=1"

    notice = client.get("/login", params={"reset": 1})
    assert "Password updated. Please sign in with your new password." in notice.text
    assert login(member_user.email, password="new-secret").status_code == 303


def test_reset_submit_without_session(client):
    resp = client.post("/reset-password", data={"password": "abcdef", "password_confirm": "abcdef"})
    assert resp.status_code == 400
    assert "No reset session found." in resp.text
