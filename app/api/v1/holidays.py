from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.holiday import HolidayCreateRequest
from app.schemas.common import success_response
from app.services.holiday_service import holiday_service

router = APIRouter(prefix="/holidays")


@router.get("", summary="List public holidays")
def list_holidays(
    year: Optional[int] = Query(None),
    db:   Session       = Depends(get_db),
    _:    User          = Depends(get_current_user),
):
    return success_response("Holidays retrieved", holiday_service.list_holidays(db, year))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Add a public holiday")
def create_holiday(
    body: HolidayCreateRequest,
    db:   Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return success_response("Holiday added", holiday_service.create_holiday(db, body, current_user.id))


@router.delete("/{holiday_id}", summary="Remove a public holiday")
def delete_holiday(
    holiday_id: int,
    db:         Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    holiday_service.delete_holiday(db, holiday_id, current_user.id)
    return success_response("Holiday removed")
