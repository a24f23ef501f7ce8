from datetime import date
from enum import Enum
from pydantic import BaseModel
from typing import Optional


class AbsenceType(str, Enum):
    DAY_OFF      = "day_off"
    ANNUAL_LEAVE = "annual_leave"


class ScheduleToggleRequest(BaseModel):
    driverId: int
    date:     date
    type:     AbsenceType


class ScheduleRemarkRequest(BaseModel):
    remark: Optional[str] = None
