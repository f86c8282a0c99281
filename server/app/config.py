from __future__ import annotations

from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent

TEMPLATES_DIR = BASE_DIR / "templates"
STATIC_DIR = BASE_DIR / "static"

PRAYER_KEYS = ("fajr", "dhuhr", "asr", "maghrib", "isha")
PRAYER_LABELS = {
    "fajr": "Fajr",
    "dhuhr": "Dhuhr",
    "asr": "Asr",
    "maghrib": "Maghrib",
    "isha": "Isha",
}

MAX_JUMUAH_SLOT = 5

ANNOUNCEMENT_CATEGORIES = ("general", "jumuah", "event", "ramadan", "urgent")

# Lunar month lengths; anything else is flagged, not rejected.
EXPECTED_RAMADAN_DAY_COUNTS = (29, 30)
ESTIMATED_RAMADAN_2026 = ("2026-02-28", "2026-03-29")

SUPER_ADMIN_ROLE = "super_admin"
MIN_PASSWORD_LENGTH = 6

ANALYTICS_TOP_MASJIDS = 5
ANALYTICS_MIN_BAR_PERCENT = 4

# (key, title, subtitle) for each console tab, in display order
CONSOLE_TABS = (
    ("masjids", "Masjid directory & onboarding",
     "Onboard new masjids, manage their profiles and control which ones are visible in the mobile app."),
    ("ramadan", "Ramadan & Iftar Sponsorship 2026",
     "Configure Ramadan calendar and booking window used by the mobile app."),
    ("requests", "Iftar sponsorship requests",
     "Review, approve or reject iftar sponsorship requests from the community."),
    ("prayers", "Daily prayer times",
     "Set official daily start and jamā‘ah times for each masjid and day."),
    ("jumuah", "Jumuʿah timings & Friday slots",
     "Manage Jumuʿah khutbah and jamā‘ah slots, languages and overflow timings."),
    ("announcements", "Masjid announcements",
     "Publish official announcements for each masjid: Jumuʿah, events, Ramadan and urgent alerts."),
    ("analytics", "Users & onboarding insights",
     "See who is using the app: masjid distribution, gender and age bands, and notification opt-in rates."),
)

CONTACT_EMAIL = "info@example.com"
