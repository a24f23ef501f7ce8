from datetime import date
from pydantic import BaseModel, Field, field_validator

from app.models.overtime_record import OTType


class OvertimeCreateRequest(BaseModel):
    driverId: int
    date:     date
    hours:    float = Field(ge=0.5, le=24)
    otType:   OTType

    @field_validator("otType")
    @classmethod
    def not_replacement(cls, v: OTType) -> OTType:
        if v == OTType.REPLACEMENT:
            raise ValueError("Replacement overtime is recorded by assigning a replacement driver")
        return v
