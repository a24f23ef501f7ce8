from datetime import date
from pydantic import BaseModel, field_validator


class HolidayCreateRequest(BaseModel):
    name: str
    date: date

    @field_validator("name")
    @classmethod
    def not_empty(cls, v):
        if not v.strip(): raise ValueError("Holiday name cannot be empty")
        return v.strip()
