from pydantic import BaseModel
from typing import Optional


class AssignReplacementRequest(BaseModel):
    scheduleId:          int
    replacementDriverId: int
    shiftId:             Optional[int] = None   # None = every uncovered shift of the absent driver


class UpdateReplacementRequest(BaseModel):
    replacementDriverId: int
