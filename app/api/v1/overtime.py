from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from app.database import get_db
from app.dependencies import get_current_user
from app.models.overtime_record import OTType
from app.models.user import User
from app.schemas.overtime import OvertimeCreateRequest
from app.schemas.common import success_response
from app.services.overtime_service import overtime_service
from app.utils.calendar import today_local

router = APIRouter(prefix="/overtime")


@router.get("", summary="Overtime records for a month")
def list_overtime(
    year:     Optional[int]    = Query(None, ge=2000, le=2100),
    month:    Optional[int]    = Query(None, ge=1, le=12),
    driverId: Optional[int]    = Query(None),
    otType:   Optional[OTType] = Query(None),
    db:       Session          = Depends(get_db),
    _:        User             = Depends(get_current_user),
):
    today = today_local()
    data = overtime_service.list_records(db, year or today.year, month or today.month, driverId, otType)
    return success_response("Overtime records retrieved", data)


@router.get("/{record_id}", summary="Get overtime record by ID")
def get_overtime(record_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return success_response("Overtime record retrieved", overtime_service.get_record(db, record_id))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Record manual overtime")
def create_overtime(
    body: OvertimeCreateRequest,
    db:   Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = overtime_service.create_record(db, body, current_user.id)
    return success_response("Overtime recorded", data)


@router.delete("/{record_id}", summary="Delete overtime record")
def delete_overtime(
    record_id: int,
    db:        Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    overtime_service.delete_record(db, record_id, current_user.id)
    return success_response("Overtime record deleted")
