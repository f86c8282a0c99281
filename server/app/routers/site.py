"""Server-rendered pages: public marketing site, sign-in, password reset and the guarded console."""

from __future__ import annotations

import logging
from datetime import date
from urllib.parse import quote

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from fastapi.templating import Jinja2Templates
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.auth.client import AuthClient, AuthError
from app.auth.session import SessionMirror
from app.config import (
    ANNOUNCEMENT_CATEGORIES,
    CONSOLE_TABS,
    CONTACT_EMAIL,
    MIN_PASSWORD_LENGTH,
    PRAYER_LABELS,
    TEMPLATES_DIR,
)
from app.core.config import settings
from app.core.db import get_db
from app.schemas.ramadan import RamadanSettingsPayload
from app.services import analytics as analytics_service
from app.services import announcements as announcements_service
from app.services import iftar_requests as iftar_service
from app.services import jumuah as jumuah_service
from app.services import masjids as masjids_service
from app.services import prayer_times as prayer_times_service
from app.services import ramadan as ramadan_service

logger = logging.getLogger(__name__)

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

router = APIRouter(tags=["site"], include_in_schema=False)

DEFAULT_NEXT = "/admin"
NO_RESET_SESSION = (
    "No reset session found. The link may be expired, already used, "
    "or your site isn’t serving /reset-password correctly."
)

PRAYER_PREVIEW = (
    {"label": "Fajr", "start": "05:52", "jamaat": "06:15"},
    {"label": "Dhuhr", "start": "12:24", "jamaat": "13:00"},
    {"label": "Asr", "start": "15:45", "jamaat": "16:00"},
    {"label": "Maghrib", "start": "17:21", "jamaat": "17:26"},
    {"label": "Isha", "start": "18:52", "jamaat": "19:30"},
)

FEATURES = (
    {"title": "Live Prayer Times",
     "body": "Get accurate start times and Jamā'ah times for all five daily prayers, updated directly by your masjid."},
    {"title": "Jumu'ah Schedule",
     "body": "View Friday prayer slots, khutbah times, and languages. Never miss Jumu'ah again."},
    {"title": "Announcements",
     "body": "Receive important updates, event notifications, and community news from your masjid's admin team."},
    {"title": "Ramadan Mode",
     "body": "Special Ramadan features including iftar times, taraweeh schedules, and sponsorship opportunities."},
    {"title": "Multilingual",
     "body": "Available in Italian, German, English, Arabic, and Urdu, serving our diverse community."},
    {"title": "Privacy First",
     "body": "No public chat, no comments, no tracking. Just verified information from your masjid."},
)


def _render(request: Request, name: str, context: dict | None = None, status_code: int = 200) -> HTMLResponse:
    base = {"current_year": date.today().year, "contact_email": CONTACT_EMAIL}
    base.update(context or {})
    return templates.TemplateResponse(request, name, base, status_code=status_code)


def _safe_next(value: str | None) -> str:
    # only same-site absolute paths
    if not value or not value.startswith("/") or value.startswith("//"):
        return DEFAULT_NEXT
    return value


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        settings.SESSION_COOKIE_NAME,
        token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        samesite="lax",
        secure=settings.ENVIRONMENT != "local",
    )


def _restore_mirror(request: Request, db: Session) -> SessionMirror:
    mirror = SessionMirror(AuthClient(db))
    return mirror.restore(request.cookies.get(settings.SESSION_COOKIE_NAME) or "")


# public pages --------------------------------------------------------------


@router.get("/", response_class=HTMLResponse)
def home(request: Request) -> HTMLResponse:
    return _render(request, "home.html", {"prayer_preview": PRAYER_PREVIEW, "features": FEATURES})


@router.get("/privacy", response_class=HTMLResponse)
def privacy(request: Request) -> HTMLResponse:
    return _render(request, "privacy.html")


@router.get("/terms", response_class=HTMLResponse)
def terms(request: Request) -> HTMLResponse:
    return _render(request, "terms.html")


# sign in / out -------------------------------------------------------------


@router.get("/login", response_class=HTMLResponse)
def login_form(request: Request, next: str | None = None, reset: int = 0, db: Session = Depends(get_db)):
    with _restore_mirror(request, db) as mirror:
        if mirror.user is not None:
            return RedirectResponse(_safe_next(next), status_code=status.HTTP_303_SEE_OTHER)
    notice = "Password updated. Please sign in with your new password." if reset else None
    return _render(request, "login.html", {"next": _safe_next(next), "email": "", "error": None, "notice": notice})


@router.post("/login", response_class=HTMLResponse)
def login_submit(
    request: Request,
    email: str = Form(default=""),
    password: str = Form(default=""),
    next: str = Form(default=DEFAULT_NEXT),
    db: Session = Depends(get_db),
):
    target = _safe_next(next)
    context = {"next": target, "email": email, "notice": None}
    if not email.strip() or not password:
        context["error"] = "Please enter email and password."
        return _render(request, "login.html", context, status_code=status.HTTP_400_BAD_REQUEST)

    client = AuthClient(db)
    try:
        session = client.sign_in_with_password(email, password)
    except AuthError as exc:
        context["error"] = str(exc)
        return _render(request, "login.html", context, status_code=status.HTTP_400_BAD_REQUEST)

    response = RedirectResponse(target, status_code=status.HTTP_303_SEE_OTHER)
    _set_session_cookie(response, session.access_token)
    return response


@router.post("/logout")
def logout(request: Request, db: Session = Depends(get_db)) -> RedirectResponse:
    client = AuthClient(db)
    client.set_session(request.cookies.get(settings.SESSION_COOKIE_NAME))
    client.sign_out()
    response = RedirectResponse("/login", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


# console -------------------------------------------------------------------

MASJID_TABS = {"ramadan", "prayers", "jumuah", "announcements"}
REQUEST_STATUSES = ("requested", "approved", "rejected", "cancelled_by_user")
ANNOUNCEMENT_STATUSES = ("active", "upcoming", "past", "all")


def _login_redirect(request: Request, path: str | None = None) -> RedirectResponse:
    if path is None:
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"
    return RedirectResponse(f"/login?next={quote(path, safe='/')}", status_code=status.HTTP_303_SEE_OTHER)


def _console_user(
    request: Request, db: Session, *, next_path: str | None = None
) -> tuple[str | None, Response | None]:
    """Signed-in admin's email, or the redirect / denial page to return instead."""

    with _restore_mirror(request, db) as mirror:
        if mirror.user is None:
            return None, _login_redirect(request, next_path)
        if not mirror.is_admin:
            logger.warning("console_access_denied", extra={"user_id": mirror.user.id})
            denied = _render(
                request,
                "access_denied.html",
                {"email": mirror.user.email},
                status_code=status.HTTP_403_FORBIDDEN,
            )
            return None, denied
        return mirror.user.email, None


def _pick_masjid(masjids: list, masjid_id: int | None):
    if masjid_id is None:
        return masjids[0] if masjids else None
    for masjid in masjids:
        if masjid.id == masjid_id:
            return masjid
    raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Masjid not found")


def _parse_date(value: str) -> date | None:
    try:
        return date.fromisoformat(value.strip()) if value.strip() else None
    except ValueError:
        return None


def _tab_context(
    db: Session,
    key: str,
    masjid,
    *,
    day: date | None,
    status_filter: str | None,
    category: str | None,
) -> dict:
    if key == "masjids":
        return {}
    if key == "requests":
        chosen = status_filter if status_filter in REQUEST_STATUSES else None
        return {
            "requests": iftar_service.list_admin_requests(db, status_filter=chosen),
            "request_statuses": REQUEST_STATUSES,
            "status_filter": chosen or "all",
        }
    if key == "analytics":
        return {"dashboard": analytics_service.load_dashboard(db)}
    if masjid is None:
        return {}
    if key == "ramadan":
        return {
            "calendar": ramadan_service.load_calendar(db, masjid.id),
            "estimate": ramadan_service.estimated_range(),
        }
    if key == "prayers":
        return {
            "prayer_day": prayer_times_service.load_day(db, masjid.id, day or date.today()),
            "prayer_labels": PRAYER_LABELS,
        }
    if key == "jumuah":
        return {"slots": jumuah_service.list_slots(db, masjid.id)}
    chosen_status = status_filter if status_filter in ANNOUNCEMENT_STATUSES else "active"
    chosen_category = category if category in ANNOUNCEMENT_CATEGORIES else "all"
    return {
        "announcements": announcements_service.list_announcements(
            db, masjid.id, status_filter=chosen_status, category=chosen_category
        ),
        "announcement_statuses": ANNOUNCEMENT_STATUSES,
        "categories": ANNOUNCEMENT_CATEGORIES,
        "status_filter": chosen_status,
        "category": chosen_category,
    }


def _render_console(
    request: Request,
    db: Session,
    tab: str,
    email: str,
    *,
    masjid_id: int | None = None,
    day: date | None = None,
    status_filter: str | None = None,
    category: str | None = None,
    notice: str | None = None,
    error: str | None = None,
    status_code: int = status.HTTP_200_OK,
) -> HTMLResponse:
    tabs = [{"key": key, "title": title, "subtitle": subtitle} for key, title, subtitle in CONSOLE_TABS]
    active = next((item for item in tabs if item["key"] == tab), None)
    if active is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown console tab")

    masjids = masjids_service.list_masjids(db)
    masjid = _pick_masjid(masjids, masjid_id) if tab in MASJID_TABS else None
    context = {
        "tabs": tabs,
        "active_tab": active,
        "email": email,
        "masjids": masjids,
        "selected_masjid": masjid,
        "notice": notice,
        "error": error,
    }
    context.update(
        _tab_context(db, tab, masjid, day=day, status_filter=status_filter, category=category)
    )
    return _render(request, "console.html", context, status_code=status_code)


@router.get("/admin", response_class=HTMLResponse)
@router.get("/admin/{tab}", response_class=HTMLResponse)
def console(
    request: Request,
    tab: str = "masjids",
    masjid_id: int | None = None,
    day: date | None = Query(default=None, alias="date"),
    status_filter: str | None = Query(default=None, alias="status"),
    category: str | None = None,
    db: Session = Depends(get_db),
):
    email, denied = _console_user(request, db)
    if denied is not None:
        return denied
    return _render_console(
        request,
        db,
        tab,
        email,
        masjid_id=masjid_id,
        day=day,
        status_filter=status_filter,
        category=category,
    )


@router.post("/admin/requests/{request_id}", response_class=HTMLResponse)
def decide_iftar_request(
    request: Request,
    request_id: int,
    decision: str = Form(default=""),
    db: Session = Depends(get_db),
):
    email, denied = _console_user(request, db, next_path="/admin/requests")
    if denied is not None:
        return denied
    if decision not in ("approved", "rejected"):
        return _render_console(
            request, db, "requests", email, error="Unknown decision.", status_code=status.HTTP_400_BAD_REQUEST
        )
    try:
        iftar_service.decide_request(db, request_id, decision)
    except HTTPException as exc:
        return _render_console(request, db, "requests", email, error=exc.detail, status_code=exc.status_code)
    return RedirectResponse("/admin/requests", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/admin/ramadan/settings", response_class=HTMLResponse)
def save_ramadan_from_console(
    request: Request,
    masjid_id: int = Form(...),
    start_date: str = Form(default=""),
    end_date: str = Form(default=""),
    hijri_year: str = Form(default=""),
    is_active: str | None = Form(default=None),
    db: Session = Depends(get_db),
):
    email, denied = _console_user(request, db, next_path=f"/admin/ramadan?masjid_id={masjid_id}")
    if denied is not None:
        return denied

    start, end = _parse_date(start_date), _parse_date(end_date)
    current = ramadan_service.get_settings(db, masjid_id)
    if current is not None and current.booking_start and current.booking_end:
        booking_start, booking_end = current.booking_start, current.booking_end
    elif start is not None:
        window = ramadan_service.default_booking_window(start)
        booking_start, booking_end = window.booking_start, window.booking_end
    else:
        booking_start = booking_end = None
    try:
        payload = RamadanSettingsPayload(
            hijri_year=int(hijri_year) if hijri_year.strip().isdigit() else None,
            start_date=start,
            end_date=end,
            is_active=is_active is not None,
            booking_start=booking_start,
            booking_end=booking_end,
        )
    except ValidationError:
        return _render_console(
            request,
            db,
            "ramadan",
            email,
            masjid_id=masjid_id,
            error="Please enter a valid Hijri year.",
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    try:
        calendar = ramadan_service.save_settings(db, masjid_id, payload)
    except HTTPException as exc:
        return _render_console(
            request, db, "ramadan", email, masjid_id=masjid_id, error=exc.detail, status_code=exc.status_code
        )
    return _render_console(request, db, "ramadan", email, masjid_id=masjid_id, notice=calendar.message)


@router.post("/admin/ramadan/days/{day_id}", response_class=HTMLResponse)
def toggle_ramadan_day_from_console(
    request: Request,
    day_id: int,
    masjid_id: int = Form(...),
    is_open: str = Form(default="0"),
    db: Session = Depends(get_db),
):
    back = f"/admin/ramadan?masjid_id={masjid_id}"
    email, denied = _console_user(request, db, next_path=back)
    if denied is not None:
        return denied
    try:
        ramadan_service.set_day_open(db, masjid_id, day_id, is_open == "1")
    except HTTPException as exc:
        return _render_console(
            request, db, "ramadan", email, masjid_id=masjid_id, error=exc.detail, status_code=exc.status_code
        )
    return RedirectResponse(back, status_code=status.HTTP_303_SEE_OTHER)


# password reset ------------------------------------------------------------


@router.get("/reset-password", response_class=HTMLResponse)
def reset_password_form(
    request: Request,
    code: str | None = None,
    error: str | None = None,
    error_description: str | None = None,
    db: Session = Depends(get_db),
):
    context = {"ready": False, "is_error": True, "min_length": MIN_PASSWORD_LENGTH}
    if error or error_description:
        context["message"] = error_description or error or "Invalid link."
        return _render(request, "reset_password.html", context, status_code=status.HTTP_400_BAD_REQUEST)

    if code:
        client = AuthClient(db)
        try:
            session = client.exchange_code_for_session(code)
        except AuthError as exc:
            context["message"] = str(exc)
            return _render(request, "reset_password.html", context, status_code=status.HTTP_400_BAD_REQUEST)
        context.update(ready=True, is_error=False, message="Set a new password for your account.")
        response = _render(request, "reset_password.html", context)
        _set_session_cookie(response, session.access_token)
        return response

    with _restore_mirror(request, db) as mirror:
        if mirror.session is None:
            context["message"] = NO_RESET_SESSION
            return _render(request, "reset_password.html", context)
    context.update(ready=True, is_error=False, message="Set a new password for your account.")
    return _render(request, "reset_password.html", context)


@router.post("/reset-password", response_class=HTMLResponse)
def reset_password_submit(
    request: Request,
    password: str = Form(default=""),
    password_confirm: str = Form(default=""),
    db: Session = Depends(get_db),
):
    context = {"ready": True, "is_error": True, "min_length": MIN_PASSWORD_LENGTH}
    if len(password) < MIN_PASSWORD_LENGTH:
        context["message"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
        return _render(request, "reset_password.html", context, status_code=status.HTTP_400_BAD_REQUEST)
    if password != password_confirm:
        context["message"] = "Passwords do not match."
        return _render(request, "reset_password.html", context, status_code=status.HTTP_400_BAD_REQUEST)

    client = AuthClient(db)
    if client.set_session(request.cookies.get(settings.SESSION_COOKIE_NAME)) is None:
        context.update(ready=False, message=NO_RESET_SESSION)
        return _render(request, "reset_password.html", context, status_code=status.HTTP_400_BAD_REQUEST)
    try:
        client.update_user(password=password)
    except AuthError as exc:
        context["message"] = str(exc) or "Could not update password."
        return _render(request, "reset_password.html", context, status_code=status.HTTP_400_BAD_REQUEST)
    client.sign_out()

    response = RedirectResponse("/login?reset=1", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(settings.SESSION_COOKIE_NAME)
    return response


# unknown paths fall back to the landing page for browsers; API clients get a plain 404
@router.get("/{path:path}", response_class=HTMLResponse)
def fallback(path: str, request: Request):
    if "text/html" not in request.headers.get("accept", ""):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)
