"""initial schema

Revision ID: 0001_initial
Revises:
Create Date: 2026-10-19
"""

from alembic import op
import sqlalchemy as sa

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

OT_TYPE = sa.Enum("replacement", "normal", "holiday", "day_off", "night", name="ot_type")


def _timestamps(updated: bool = True) -> list[sa.Column]:
    cols = [sa.Column("createdAt", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False)]
    if updated:
        cols.append(sa.Column("updatedAt", sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=False))
    return cols


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("username", sa.String(100), nullable=False),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("isActive", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_username", "users", ["username"], unique=True)

    op.create_table(
        "refresh_tokens",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("userId", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("token", sa.Text(), nullable=False, unique=True),
        sa.Column("expiresAt", sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column("revoked", sa.Boolean(), nullable=False),
        *_timestamps(updated=False),
    )
    op.create_index("ix_refresh_tokens_userId", "refresh_tokens", ["userId"])

    op.create_table(
        "drivers",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("staffId", sa.String(50), nullable=False),
        sa.Column("carNumber", sa.String(50), nullable=True),
        sa.Column("contactNumber", sa.String(30), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_drivers_staffId", "drivers", ["staffId"], unique=True)

    op.create_table(
        "shifts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(100), nullable=False, unique=True),
        sa.Column("startTime", sa.Time(), nullable=False),
        sa.Column("endTime", sa.Time(), nullable=False),
        *_timestamps(updated=False),
    )

    op.create_table(
        "driver_shifts",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("driverId", sa.Integer(), sa.ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("shiftId", sa.Integer(), sa.ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False),
        sa.Column("isPrimary", sa.Boolean(), nullable=False),
        sa.UniqueConstraint("driverId", "shiftId", name="uq_driver_shift"),
    )
    op.create_index("ix_driver_shifts_driverId", "driver_shifts", ["driverId"])

    op.create_table(
        "schedules",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("driverId", sa.Integer(), sa.ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("isDayOff", sa.Boolean(), nullable=False),
        sa.Column("isAnnualLeave", sa.Boolean(), nullable=False),
        sa.Column("remark", sa.Text(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("driverId", "date", name="uq_schedule_driver_date"),
    )
    op.create_index("ix_schedules_driverId", "schedules", ["driverId"])
    op.create_index("ix_schedules_date", "schedules", ["date"])

    op.create_table(
        "replacements",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("scheduleId", sa.Integer(), sa.ForeignKey("schedules.id", ondelete="CASCADE"), nullable=False),
        sa.Column("replacementDriverId", sa.Integer(), sa.ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("shiftId", sa.Integer(), sa.ForeignKey("shifts.id", ondelete="CASCADE"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("scheduleId", "shiftId", name="uq_replacement_schedule_shift"),
    )
    op.create_index("ix_replacements_scheduleId", "replacements", ["scheduleId"])
    op.create_index("ix_replacements_replacementDriverId", "replacements", ["replacementDriverId"])

    op.create_table(
        "overtime_records",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("driverId", sa.Integer(), sa.ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("hours", sa.Numeric(6, 2), nullable=False),
        sa.Column("otType", OT_TYPE, nullable=False),
        sa.Column("otRate", sa.Numeric(3, 2), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_overtime_records_driverId", "overtime_records", ["driverId"])
    op.create_index("ix_overtime_records_date", "overtime_records", ["date"])

    op.create_table(
        "driver_monthly_dayoff",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("driverId", sa.Integer(), sa.ForeignKey("drivers.id", ondelete="CASCADE"), nullable=False),
        sa.Column("month", sa.Integer(), nullable=False),
        sa.Column("year", sa.Integer(), nullable=False),
        sa.Column("dayOfWeek", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("driverId", "month", "year", name="uq_dayoff_driver_month_year"),
        sa.CheckConstraint("month >= 1 AND month <= 12", name="ck_dayoff_month"),
        sa.CheckConstraint('"dayOfWeek" >= 0 AND "dayOfWeek" <= 6', name="ck_dayoff_day_of_week"),
    )
    op.create_index("ix_driver_monthly_dayoff_driverId", "driver_monthly_dayoff", ["driverId"])

    op.create_table(
        "holidays",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(150), nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        *_timestamps(updated=False),
    )
    op.create_index("ix_holidays_date", "holidays", ["date"], unique=True)

    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("userId", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("action", sa.String(100), nullable=False),
        sa.Column("entityType", sa.String(100), nullable=False),
        sa.Column("entityId", sa.Integer(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        *_timestamps(updated=False),
    )
    op.create_index("ix_audit_logs_createdAt", "audit_logs", ["createdAt"])


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("holidays")
    op.drop_table("driver_monthly_dayoff")
    op.drop_table("overtime_records")
    op.drop_table("replacements")
    op.drop_table("schedules")
    op.drop_table("driver_shifts")
    op.drop_table("shifts")
    op.drop_table("drivers")
    op.drop_table("refresh_tokens")
    op.drop_table("users")
    OT_TYPE.drop(op.get_bind(), checkfirst=True)
