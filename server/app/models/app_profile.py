from __future__ import annotations

from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String

from app.core.db import Base


class AppProfile(Base):
    """Onboarding profile reported by a mobile install."""

    __tablename__ = "app_profiles"

    id = Column(Integer, primary_key=True)
    install_id = Column(String(64), unique=True, nullable=False, index=True)
    primary_masjid_id = Column(Integer, ForeignKey("public_masjids.id", ondelete="SET NULL"), nullable=True, index=True)
    user_role = Column(String(64), nullable=True)
    age_band = Column(String(32), nullable=True)
    app_language = Column(String(16), nullable=True)
    push_opt_in = Column(Boolean, nullable=False, default=False)
    marketing_opt_in = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)
