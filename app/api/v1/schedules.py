from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.schedule import ScheduleToggleRequest, ScheduleRemarkRequest
from app.schemas.common import success_response
from app.services.replacement_service import replacement_service
from app.services.schedule_service import schedule_service
from app.utils.calendar import today_local

router = APIRouter(prefix="/schedules")


# ─── Calendar Views ───────────────────────────────────────────────────────────
@router.get("/day", summary="Schedules, coverage and available drivers for one date")
def day_view(
    day: Optional[date] = Query(None, alias="date", description="YYYY-MM-DD, defaults to today"),
    db:  Session        = Depends(get_db),
    _:   User           = Depends(get_current_user),
):
    on_date = day or today_local()
    return success_response("Day schedule retrieved", schedule_service.day_view(db, on_date))


@router.get("/calendar", summary="Absences per date for a month")
def month_calendar(
    year:  Optional[int] = Query(None, ge=2000, le=2100),
    month: Optional[int] = Query(None, ge=1, le=12),
    db:    Session       = Depends(get_db),
    _:     User          = Depends(get_current_user),
):
    today = today_local()
    data = schedule_service.month_calendar(db, year or today.year, month or today.month)
    return success_response("Calendar retrieved", data)


# ─── Status ───────────────────────────────────────────────────────────────────
@router.post("/toggle", summary="Toggle day-off or annual leave for a driver on a date")
def toggle_status(
    body: ScheduleToggleRequest,
    db:   Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = schedule_service.toggle_status(db, body, current_user.id)
    return success_response(f"Status set to {data['status']}", data)


@router.get("/{schedule_id}", summary="Get schedule by ID")
def get_schedule(schedule_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return success_response("Schedule retrieved", schedule_service.get_schedule(db, schedule_id))


@router.patch("/{schedule_id}/remark", summary="Set or clear the remark of a schedule")
def set_remark(
    schedule_id: int,
    body:        ScheduleRemarkRequest,
    db:          Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = schedule_service.set_remark(db, schedule_id, body, current_user.id)
    return success_response("Remark updated", data)


@router.get("/{schedule_id}/replacements", summary="Replacements assigned to a schedule")
def list_replacements(schedule_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    data = replacement_service.list_for_schedule(db, schedule_id)
    return success_response("Replacements retrieved", data)
