from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from app.core.db import Base


class Masjid(Base):
    __tablename__ = "public_masjids"

    id = Column(Integer, primary_key=True)
    slug = Column(String(160), unique=True, nullable=False, index=True)
    official_name = Column(String(255), nullable=False)
    short_name = Column(String(120), nullable=True)
    city = Column(String(120), nullable=False, index=True)
    region = Column(String(120), nullable=True)
    address_line1 = Column(String(255), nullable=True)
    address_line2 = Column(String(255), nullable=True)
    postal_code = Column(String(30), nullable=True)
    timezone = Column(String(64), nullable=False, default="Europe/Rome")
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    prayer_times = relationship("MasjidPrayerTime", back_populates="masjid", cascade="all, delete-orphan")
    jumuah_times = relationship("MasjidJumuahTime", back_populates="masjid", cascade="all, delete-orphan")
    announcements = relationship("MasjidAnnouncement", back_populates="masjid", cascade="all, delete-orphan")
    ramadan_settings = relationship("RamadanSettings", back_populates="masjid", cascade="all, delete-orphan")
