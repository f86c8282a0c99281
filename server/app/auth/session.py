from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.auth.client import AuthClient, AuthEvent, AuthSession, Subscription
from app.config import SUPER_ADMIN_ROLE
from app.core.config import settings
from app.models.user import Profile as ProfileRow
from app.models.user import User

logger = logging.getLogger(__name__)


@dataclass
class Profile:
    id: int
    role: str | None


ProfileLoader = Callable[[int], Profile]


def is_admin_identity(user_id: int | None, role: str | None) -> bool:
    """Admin if the profile role is super_admin or the id is in the configured override list."""

    if role == SUPER_ADMIN_ROLE:
        return True
    return user_id is not None and user_id in settings.SUPER_ADMIN_USER_IDS


def load_profile(db: Session, user_id: int) -> Profile:
    try:
        row = db.get(ProfileRow, user_id)
    except SQLAlchemyError:
        logger.exception("profile_load_failed", extra={"user_id": user_id})
        return Profile(id=user_id, role=None)
    if row is None:
        logger.warning("profile_missing", extra={"user_id": user_id})
        return Profile(id=user_id, role=None)
    return Profile(id=row.id, role=row.role)


class SessionMirror:
    """Local copy of the session/user/profile pushed by an AuthClient."""

    def __init__(self, client: AuthClient, profile_loader: ProfileLoader | None = None) -> None:
        self._client = client
        self._profile_loader = profile_loader or (lambda user_id: load_profile(client.db, user_id))
        self.loading = True
        self.session: AuthSession | None = None
        self.user: User | None = None
        self.profile: Profile | None = None
        self._subscription: Subscription | None = client.on_auth_state_change(self._handle_change)

    def __enter__(self) -> "SessionMirror":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @property
    def is_admin(self) -> bool:
        return is_admin_identity(
            self.user.id if self.user else None,
            self.profile.role if self.profile else None,
        )

    def restore(self, access_token: str | None = None) -> "SessionMirror":
        """Initial session read; the listener does the mirroring."""

        try:
            if access_token is not None:
                self._client.set_session(access_token)
            else:
                self._mirror(self._client.get_session())
        finally:
            self.loading = False
        return self

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    def _handle_change(self, event: AuthEvent, session: AuthSession | None) -> None:
        if self._subscription is None:
            return
        logger.debug("session_mirror_event", extra={"event": event.value})
        self._mirror(session)

    def _mirror(self, session: AuthSession | None) -> None:
        self.session = session
        self.user = session.user if session else None
        if self.user is None:
            self.profile = None
            return
        try:
            self.profile = self._profile_loader(self.user.id)
        except Exception:
            logger.exception("profile_loader_error", extra={"user_id": self.user.id})
            self.profile = Profile(id=self.user.id, role=None)
