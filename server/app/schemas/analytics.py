from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class AnalyticsOverview(BaseModel):
    total_profiles: int
    masjid_count: int
    push_opt_in_count: int
    marketing_opt_in_count: int
    push_opt_in_percent: int
    marketing_opt_in_percent: int


class MasjidBreakdownRow(BaseModel):
    masjid_id: Optional[int]
    masjid_name: Optional[str]
    city: Optional[str]
    profile_count: int
    share_percent: int
    bar_percent: int


class RoleBreakdownRow(BaseModel):
    user_role: str
    profile_count: int
    share_percent: int


class AgeBreakdownRow(BaseModel):
    age_band: str
    profile_count: int
    share_percent: int
    bar_percent: int


class LanguageBreakdownRow(BaseModel):
    app_language: str
    profile_count: int
    share_percent: int
    bar_percent: int


class AnalyticsDashboard(BaseModel):
    overview: Optional[AnalyticsOverview]
    by_masjid: list[MasjidBreakdownRow]
    by_role: list[RoleBreakdownRow]
    by_age_band: list[AgeBreakdownRow]
    by_app_language: list[LanguageBreakdownRow]
    message: Optional[str] = None


class AppProfileIngest(BaseModel):
    install_id: str = Field(..., min_length=4, max_length=64)
    primary_masjid_id: Optional[int] = None
    user_role: Optional[str] = Field(None, max_length=64)
    age_band: Optional[str] = Field(None, max_length=32)
    app_language: Optional[str] = Field(None, max_length=16)
    push_opt_in: bool = False
    marketing_opt_in: bool = False
