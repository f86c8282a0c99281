from .user import PasswordRecoveryToken, Profile, User  # noqa: F401
from .masjid import Masjid  # noqa: F401
from .prayer_time import MasjidPrayerTime  # noqa: F401
from .jumuah import MasjidJumuahTime  # noqa: F401
from .announcement import MasjidAnnouncement  # noqa: F401
from .ramadan import IftarRequest, RamadanDay, RamadanSettings  # noqa: F401
from .app_profile import AppProfile  # noqa: F401
