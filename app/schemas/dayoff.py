from pydantic import BaseModel, Field, field_validator

from app.utils.calendar import today_local


class DayoffPatternRequest(BaseModel):
    driverId:  int
    month:     int = Field(ge=1, le=12)
    year:      int
    dayOfWeek: int = Field(ge=0, le=6, description="0 = Sunday ... 6 = Saturday")

    @field_validator("year")
    @classmethod
    def not_in_past(cls, v: int) -> int:
        if v < today_local().year:
            raise ValueError("Year cannot be earlier than the current year")
        return v
