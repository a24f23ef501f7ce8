from pydantic import BaseModel, field_validator
from typing import Optional


class DriverShiftItem(BaseModel):
    shiftId:   int
    isPrimary: bool = False


def _unique_shifts(v: list[DriverShiftItem] | None) -> list[DriverShiftItem] | None:
    if v is None:
        return v
    ids = [s.shiftId for s in v]
    if len(ids) != len(set(ids)):
        raise ValueError("A shift can only be assigned once")
    return v


class DriverCreateRequest(BaseModel):
    name:          str
    staffId:       str
    carNumber:     Optional[str] = None
    contactNumber: Optional[str] = None
    shifts:        list[DriverShiftItem] = []

    @field_validator("name")
    @classmethod
    def name_length(cls, v):
        if len(v.strip()) < 2: raise ValueError("Name must be at least 2 characters")
        return v.strip()

    @field_validator("staffId")
    @classmethod
    def not_empty(cls, v):
        if not v.strip(): raise ValueError("Staff ID cannot be empty")
        return v.strip()

    @field_validator("shifts")
    @classmethod
    def unique_shifts(cls, v):
        return _unique_shifts(v)


class DriverUpdateRequest(BaseModel):
    name:          Optional[str] = None
    staffId:       Optional[str] = None
    carNumber:     Optional[str] = None
    contactNumber: Optional[str] = None
    shifts:        Optional[list[DriverShiftItem]] = None   # None = leave assignments untouched

    @field_validator("shifts")
    @classmethod
    def unique_shifts(cls, v):
        return _unique_shifts(v)
