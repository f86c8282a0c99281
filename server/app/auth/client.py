"""Password auth bound to one client session.

Every state change is pushed to listeners registered through
``on_auth_state_change`` so views can mirror the session instead of polling.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Callable

from jose import JWTError
from sqlalchemy.orm import Session

from app.auth.security import (
    create_access_token,
    decode_access_token,
    generate_recovery_code,
    hash_password,
    hash_token,
    now_utc,
    verify_password,
)
from app.config import MIN_PASSWORD_LENGTH
from app.core.config import settings
from app.models.user import PasswordRecoveryToken, User
from app.services.email_sender import get_email_sender
from app.services.email_templates import render_password_recovery_email

logger = logging.getLogger(__name__)


class AuthError(Exception):
    pass


class AuthEvent(str, enum.Enum):
    INITIAL_SESSION = "INITIAL_SESSION"
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    PASSWORD_RECOVERY = "PASSWORD_RECOVERY"
    USER_UPDATED = "USER_UPDATED"


@dataclass
class AuthSession:
    access_token: str
    expires_at: datetime
    user: User


AuthListener = Callable[[AuthEvent, "AuthSession | None"], None]


@dataclass
class Subscription:
    _client: "AuthClient"
    _callback: AuthListener
    active: bool = field(default=True)

    def unsubscribe(self) -> None:
        if not self.active:
            return
        self.active = False
        self._client._listeners = [cb for cb in self._client._listeners if cb is not self._callback]


def _normalize_expiry(value: datetime) -> datetime:
    # SQLite drops tzinfo on round-trip
    if value.tzinfo is None:
        return value.replace(tzinfo=now_utc().tzinfo)
    return value


class AuthClient:
    def __init__(self, db: Session) -> None:
        self.db = db
        self._session: AuthSession | None = None
        self._listeners: list[AuthListener] = []

    # listeners -----------------------------------------------------------

    def on_auth_state_change(self, callback: AuthListener) -> Subscription:
        self._listeners.append(callback)
        return Subscription(self, callback)

    def _emit(self, event: AuthEvent) -> None:
        logger.info(
            "auth_state_change",
            extra={"event": event.value, "user_id": self._session.user.id if self._session else None},
        )
        for callback in list(self._listeners):
            callback(event, self._session)

    def _issue(self, user: User) -> AuthSession:
        token, expires_at = create_access_token(subject=str(user.id), role=user.role)
        return AuthSession(access_token=token, expires_at=expires_at, user=user)

    # session -------------------------------------------------------------

    def get_session(self) -> AuthSession | None:
        return self._session

    def set_session(self, access_token: str | None) -> AuthSession | None:
        """Restore a session from a stored token; bad tokens simply yield no session."""

        self._session = None
        if access_token:
            try:
                payload = decode_access_token(access_token)
            except JWTError:
                logger.info("auth_session_token_rejected")
                payload = None
            if payload is not None:
                user = self._load_user(payload.get("sub"))
                if user is not None:
                    expires_at = datetime.fromtimestamp(payload["exp"], tz=now_utc().tzinfo)
                    self._session = AuthSession(access_token=access_token, expires_at=expires_at, user=user)
        self._emit(AuthEvent.INITIAL_SESSION)
        return self._session

    def _load_user(self, subject: str | None) -> User | None:
        if subject is None:
            return None
        try:
            user = self.db.get(User, int(subject))
        except (TypeError, ValueError):
            return None
        if not user or not user.is_active:
            return None
        return user

    def sign_in_with_password(self, email: str, password: str) -> AuthSession:
        user = self.db.query(User).filter(User.email == email.strip().lower()).first()
        if not user or not user.is_active or not verify_password(password, user.hashed_password):
            logger.warning("auth_sign_in_failed", extra={"email": email})
            raise AuthError("Invalid login credentials")
        user.last_login_at = now_utc()
        self.db.commit()
        self._session = self._issue(user)
        self._emit(AuthEvent.SIGNED_IN)
        return self._session

    def sign_out(self) -> None:
        self._session = None
        self._emit(AuthEvent.SIGNED_OUT)

    # password recovery ---------------------------------------------------

    def reset_password_for_email(self, email: str, *, redirect_to: str | None = None) -> str | None:
        """Email a recovery link. Returns the raw code (None for unknown emails)."""

        user = self.db.query(User).filter(User.email == email.strip().lower()).first()
        if not user or not user.is_active:
            logger.info("auth_recovery_unknown_email")
            return None
        code = generate_recovery_code()
        self.db.add(
            PasswordRecoveryToken(
                user_id=user.id,
                token_hash=hash_token(code),
                expires_at=now_utc() + timedelta(minutes=settings.RECOVERY_TOKEN_EXPIRE_MINUTES),
            )
        )
        self.db.commit()
        base = redirect_to or f"{settings.PUBLIC_SITE_URL.rstrip('/')}/reset-password"
        link = f"{base}?code={code}"
        subject, html_body, text_body = render_password_recovery_email(user, link)
        sent, _ = get_email_sender().send(subject=subject, html_body=html_body, text_body=text_body, to=[user.email])
        logger.info("auth_recovery_requested", extra={"user_id": user.id, "email_sent": sent})
        return code

    def exchange_code_for_session(self, code: str) -> AuthSession:
        record = (
            self.db.query(PasswordRecoveryToken)
            .filter(PasswordRecoveryToken.token_hash == hash_token(code))
            .first()
        )
        if record is None or record.used_at is not None:
            raise AuthError("This reset link is invalid or expired.")
        if _normalize_expiry(record.expires_at) < now_utc():
            raise AuthError("This reset link is invalid or expired.")
        user = record.user
        if not user or not user.is_active:
            raise AuthError("This reset link is invalid or expired.")
        record.used_at = now_utc()
        self.db.commit()
        self._session = self._issue(user)
        self._emit(AuthEvent.PASSWORD_RECOVERY)
        return self._session

    def update_user(self, *, password: str) -> User:
        if self._session is None:
            raise AuthError("Auth session missing!")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
        user = self._session.user
        user.hashed_password = hash_password(password)
        self.db.commit()
        self._emit(AuthEvent.USER_UPDATED)
        return user


def complete_password_reset(client: AuthClient, code: str, password: str, password_confirm: str) -> User:
    """Check the new password pair, then trade the recovery code for a session and set it."""

    if len(password) < MIN_PASSWORD_LENGTH:
        raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters.")
    if password != password_confirm:
        raise AuthError("Passwords do not match.")
    client.exchange_code_for_session(code)
    return client.update_user(password=password)
