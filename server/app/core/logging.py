from __future__ import annotations

import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Apply the root log level and format once per process."""

    resolved = (level or settings.LOG_LEVEL).upper()
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=resolved, format=LOG_FORMAT)
    root.setLevel(resolved)
    # uvicorn's access log duplicates request lines we do not need in local runs
    if settings.ENVIRONMENT == "local":
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
