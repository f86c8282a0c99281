from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Time, UniqueConstraint
from sqlalchemy.orm import relationship

from app.core.db import Base


class MasjidPrayerTime(Base):
    __tablename__ = "masjid_prayer_times"
    __table_args__ = (UniqueConstraint("masjid_id", "date", "prayer", name="uq_prayer_time_masjid_date_prayer"),)

    id = Column(Integer, primary_key=True)
    masjid_id = Column(Integer, ForeignKey("public_masjids.id", ondelete="CASCADE"), nullable=False, index=True)
    date = Column(Date, nullable=False, index=True)
    prayer = Column(String(16), nullable=False)
    start_time = Column(Time, nullable=False)
    jamaat_time = Column(Time, nullable=False)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    masjid = relationship("Masjid", back_populates="prayer_times")
