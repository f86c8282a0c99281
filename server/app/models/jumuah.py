from __future__ import annotations

from datetime import datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, String, Text, Time
from sqlalchemy.orm import relationship

from app.core.db import Base


class MasjidJumuahTime(Base):
    __tablename__ = "masjid_jumuah_times"

    id = Column(Integer, primary_key=True)
    masjid_id = Column(Integer, ForeignKey("public_masjids.id", ondelete="CASCADE"), nullable=False, index=True)
    slot = Column(Integer, nullable=False)
    khutbah_time = Column(Time, nullable=False)
    jamaat_time = Column(Time, nullable=False)
    language = Column(String(64), nullable=True)
    notes = Column(Text, nullable=True)
    valid_from = Column(Date, nullable=True)
    valid_to = Column(Date, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    masjid = relationship("Masjid", back_populates="jumuah_times")
