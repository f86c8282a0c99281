"""API and page routers for the UmmahWay console."""

from app.routers import (
    analytics,
    announcements,
    auth,
    iftar_requests,
    jumuah,
    masjids,
    prayer_times,
    ramadan,
    site,
)  # noqa: F401
