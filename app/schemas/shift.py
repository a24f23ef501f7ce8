from datetime import time
from pydantic import BaseModel, field_validator
from typing import Optional


class ShiftCreateRequest(BaseModel):
    name:      str
    startTime: time
    endTime:   time

    @field_validator("name")
    @classmethod
    def not_empty(cls, v):
        if not v.strip(): raise ValueError("Shift name cannot be empty")
        return v.strip()


class ShiftUpdateRequest(BaseModel):
    name:      Optional[str]  = None
    startTime: Optional[time] = None
    endTime:   Optional[time] = None
