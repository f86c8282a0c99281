"""initial console schema

Revision ID: 0001_initial_console_schema
Revises:
Create Date: 2025-11-01
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = "0001_initial_console_schema"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("full_name", sa.String(length=255), nullable=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "profiles",
        sa.Column("id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
        sa.Column("role", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_profiles_role", "profiles", ["role"])

    op.create_table(
        "password_recovery_tokens",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("token_hash", sa.String(length=255), nullable=False, unique=True),
        sa.Column("expires_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("used_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_password_recovery_tokens_user_id", "password_recovery_tokens", ["user_id"])

    op.create_table(
        "public_masjids",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("slug", sa.String(length=160), nullable=False, unique=True),
        sa.Column("official_name", sa.String(length=255), nullable=False),
        sa.Column("short_name", sa.String(length=120), nullable=True),
        sa.Column("city", sa.String(length=120), nullable=False),
        sa.Column("region", sa.String(length=120), nullable=True),
        sa.Column("address_line1", sa.String(length=255), nullable=True),
        sa.Column("address_line2", sa.String(length=255), nullable=True),
        sa.Column("postal_code", sa.String(length=30), nullable=True),
        sa.Column("timezone", sa.String(length=64), nullable=False, server_default="Europe/Rome"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_public_masjids_slug", "public_masjids", ["slug"], unique=True)
    op.create_index("ix_public_masjids_city", "public_masjids", ["city"])

    op.create_table(
        "masjid_prayer_times",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("masjid_id", sa.Integer(), sa.ForeignKey("public_masjids.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("prayer", sa.String(length=16), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("jamaat_time", sa.Time(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("masjid_id", "date", "prayer", name="uq_prayer_time_masjid_date_prayer"),
    )
    op.create_index("ix_masjid_prayer_times_masjid_id", "masjid_prayer_times", ["masjid_id"])
    op.create_index("ix_masjid_prayer_times_date", "masjid_prayer_times", ["date"])

    op.create_table(
        "masjid_jumuah_times",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("masjid_id", sa.Integer(), sa.ForeignKey("public_masjids.id", ondelete="CASCADE"), nullable=False),
        sa.Column("slot", sa.Integer(), nullable=False),
        sa.Column("khutbah_time", sa.Time(), nullable=False),
        sa.Column("jamaat_time", sa.Time(), nullable=False),
        sa.Column("language", sa.String(length=64), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("valid_from", sa.Date(), nullable=True),
        sa.Column("valid_to", sa.Date(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_masjid_jumuah_times_masjid_id", "masjid_jumuah_times", ["masjid_id"])

    op.create_table(
        "masjid_announcements",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("masjid_id", sa.Integer(), sa.ForeignKey("public_masjids.id", ondelete="CASCADE"), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("body", sa.Text(), nullable=False),
        sa.Column("category", sa.String(length=32), nullable=False, server_default="general"),
        sa.Column("starts_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("ends_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("is_pinned", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_masjid_announcements_masjid_id", "masjid_announcements", ["masjid_id"])

    op.create_table(
        "ramadan_settings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("masjid_id", sa.Integer(), sa.ForeignKey("public_masjids.id", ondelete="CASCADE"), nullable=False),
        sa.Column("gregorian_year", sa.Integer(), nullable=False),
        sa.Column("hijri_year", sa.Integer(), nullable=True),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("booking_start", sa.DateTime(timezone=True), nullable=True),
        sa.Column("booking_end", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("masjid_id", "gregorian_year", name="uq_ramadan_settings_masjid_year"),
    )
    op.create_index("ix_ramadan_settings_masjid_id", "ramadan_settings", ["masjid_id"])

    op.create_table(
        "ramadan_iftar_days",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("ramadan_id", sa.Integer(), sa.ForeignKey("ramadan_settings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("masjid_id", sa.Integer(), sa.ForeignKey("public_masjids.id", ondelete="CASCADE"), nullable=False),
        sa.Column("day_number", sa.Integer(), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("is_open_for_requests", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("approved_request_id", sa.Integer(), nullable=True),
        sa.UniqueConstraint("ramadan_id", "day_number", name="uq_ramadan_day_number"),
        sqlite_autoincrement=True,
    )
    op.create_index("ix_ramadan_iftar_days_ramadan_id", "ramadan_iftar_days", ["ramadan_id"])
    op.create_index("ix_ramadan_iftar_days_masjid_id", "ramadan_iftar_days", ["masjid_id"])

    op.create_table(
        "iftar_requests",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("ramadan_id", sa.Integer(), sa.ForeignKey("ramadan_settings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("ramadan_day_id", sa.Integer(), nullable=False),
        sa.Column("requester_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("requester_name", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=50), nullable=True),
        sa.Column("message", sa.Text(), nullable=True),
        sa.Column("status", sa.String(length=32), nullable=False, server_default="requested"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.UniqueConstraint("ramadan_day_id", "requester_id", name="uq_iftar_request_day_requester"),
    )
    op.create_index("ix_iftar_requests_ramadan_id", "iftar_requests", ["ramadan_id"])
    op.create_index("ix_iftar_requests_ramadan_day_id", "iftar_requests", ["ramadan_day_id"])
    op.create_index("ix_iftar_requests_requester_id", "iftar_requests", ["requester_id"])

    op.create_table(
        "app_profiles",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("install_id", sa.String(length=64), nullable=False, unique=True),
        sa.Column(
            "primary_masjid_id",
            sa.Integer(),
            sa.ForeignKey("public_masjids.id", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("user_role", sa.String(length=64), nullable=True),
        sa.Column("age_band", sa.String(length=32), nullable=True),
        sa.Column("app_language", sa.String(length=16), nullable=True),
        sa.Column("push_opt_in", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("marketing_opt_in", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_app_profiles_install_id", "app_profiles", ["install_id"], unique=True)
    op.create_index("ix_app_profiles_primary_masjid_id", "app_profiles", ["primary_masjid_id"])


def downgrade() -> None:
    op.drop_table("app_profiles")
    op.drop_table("iftar_requests")
    op.drop_table("ramadan_iftar_days")
    op.drop_table("ramadan_settings")
    op.drop_table("masjid_announcements")
    op.drop_table("masjid_jumuah_times")
    op.drop_table("masjid_prayer_times")
    op.drop_table("public_masjids")
    op.drop_table("password_recovery_tokens")
    op.drop_table("profiles")
    op.drop_table("users")
