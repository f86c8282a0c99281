import logging

import app.models
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import STATIC_DIR
from app.core.config import settings
from app.core.logging import configure_logging
from app.routers import analytics as analytics_router
from app.routers import announcements as announcements_router
from app.routers import auth as auth_router
from app.routers import iftar_requests as iftar_requests_router
from app.routers import jumuah as jumuah_router
from app.routers import masjids as masjids_router
from app.routers import prayer_times as prayer_times_router
from app.routers import ramadan as ramadan_router
from app.routers import site as site_router

configure_logging()

app = FastAPI(title="UmmahWay Console API", version="0.1.0")

logger = logging.getLogger(__name__)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health", tags=["health"])
def health() -> dict[str, str]:
    return {"status": "ok"}


app.include_router(auth_router.router)
app.include_router(masjids_router.router)
app.include_router(prayer_times_router.router)
app.include_router(jumuah_router.router)
app.include_router(announcements_router.router)
app.include_router(ramadan_router.router)
app.include_router(iftar_requests_router.router)
app.include_router(analytics_router.router)
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
# Site router last: it ends with a catch-all page route.
app.include_router(site_router.router)


@app.on_event("startup")
def log_startup() -> None:
    logger.info("app_startup", extra={"environment": settings.ENVIRONMENT})
