from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from app.core.db import Base


class RamadanSettings(Base):
    __tablename__ = "ramadan_settings"
    __table_args__ = (UniqueConstraint("masjid_id", "gregorian_year", name="uq_ramadan_settings_masjid_year"),)

    id = Column(Integer, primary_key=True)
    masjid_id = Column(Integer, ForeignKey("public_masjids.id", ondelete="CASCADE"), nullable=False, index=True)
    gregorian_year = Column(Integer, nullable=False)
    hijri_year = Column(Integer, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    booking_start = Column(DateTime(timezone=True), nullable=True)
    booking_end = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    masjid = relationship("Masjid", back_populates="ramadan_settings")
    days = relationship(
        "RamadanDay",
        back_populates="ramadan",
        order_by="RamadanDay.day_number",
        passive_deletes=True,
    )


class RamadanDay(Base):
    __tablename__ = "ramadan_iftar_days"
    # Day ids must never be reused after a rebuild; requests keep pointing at the old ones.
    __table_args__ = (
        UniqueConstraint("ramadan_id", "day_number", name="uq_ramadan_day_number"),
        {"sqlite_autoincrement": True},
    )

    id = Column(Integer, primary_key=True)
    ramadan_id = Column(Integer, ForeignKey("ramadan_settings.id", ondelete="CASCADE"), nullable=False, index=True)
    masjid_id = Column(Integer, ForeignKey("public_masjids.id", ondelete="CASCADE"), nullable=False, index=True)
    day_number = Column(Integer, nullable=False)
    date = Column(Date, nullable=False)
    is_open_for_requests = Column(Boolean, nullable=False, default=True)
    # No FK: day rows are dropped and recreated on every regeneration.
    approved_request_id = Column(Integer, nullable=True)

    ramadan = relationship("RamadanSettings", back_populates="days")
    masjid = relationship("Masjid")


class IftarRequest(Base):
    __tablename__ = "iftar_requests"
    __table_args__ = (UniqueConstraint("ramadan_day_id", "requester_id", name="uq_iftar_request_day_requester"),)

    id = Column(Integer, primary_key=True)
    ramadan_id = Column(Integer, ForeignKey("ramadan_settings.id", ondelete="CASCADE"), nullable=False, index=True)
    # Plain integer: requests outlive a regenerated calendar and simply stop matching.
    ramadan_day_id = Column(Integer, nullable=False, index=True)
    requester_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    requester_name = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    message = Column(Text, nullable=True)
    status = Column(String(32), nullable=False, default="requested")
    created_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    ramadan = relationship("RamadanSettings")
    requester = relationship("User")
