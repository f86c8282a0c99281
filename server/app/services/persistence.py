"""Commit helpers shared by the services.

A failed write is rolled back, logged under the caller's event name and
surfaced to the client with the driver's message verbatim.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)


def surface_db_error(db: Session, exc: SQLAlchemyError, event: str, **context) -> HTTPException:
    db.rollback()
    message = str(getattr(exc, "orig", None) or exc)
    logger.error(event, extra={**context, "error": message})
    code = status.HTTP_409_CONFLICT if isinstance(exc, IntegrityError) else status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=message)


def commit_or_raise(db: Session, event: str, **context) -> None:
    try:
        db.commit()
    except SQLAlchemyError as exc:
        raise surface_db_error(db, exc, event, **context) from exc
