"""
Import all models here so that:
1. Alembic can auto-detect them when generating migrations
2. Relationships between models resolve correctly

Parent tables are imported before child tables.
"""

from app.models.user import User
from app.models.refresh_token import RefreshToken
from app.models.driver import Driver
from app.models.shift import Shift, DriverShift
from app.models.schedule import Schedule
from app.models.replacement import Replacement
from app.models.overtime_record import OvertimeRecord, OTType
from app.models.monthly_dayoff import MonthlyDayoffPattern
from app.models.holiday import Holiday
from app.models.audit_log import AuditLog

__all__ = [
    "User",
    "RefreshToken",
    "Driver",
    "Shift",
    "DriverShift",
    "Schedule",
    "Replacement",
    "OvertimeRecord",
    "OTType",
    "MonthlyDayoffPattern",
    "Holiday",
    "AuditLog",
]
