from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.dayoff import DayoffPatternRequest
from app.schemas.common import success_response, paginated_response
from app.services.dayoff_service import dayoff_service

router = APIRouter(prefix="/dayoff-patterns")


@router.get("", summary="List monthly day-off patterns (newest first)")
def list_patterns(
    page:     int           = Query(1, ge=1),
    limit:    int           = Query(20, ge=1, le=100),
    month:    Optional[int] = Query(None, ge=1, le=12),
    year:     Optional[int] = Query(None),
    driverId: Optional[int] = Query(None),
    db:       Session       = Depends(get_db),
    _:        User          = Depends(get_current_user),
):
    data, total = dayoff_service.list_patterns(db, page, limit, month, year, driverId)
    return paginated_response("Day-off patterns retrieved", data, total, page, limit)


@router.get("/{pattern_id}", summary="Get day-off pattern by ID")
def get_pattern(pattern_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return success_response("Day-off pattern retrieved", dayoff_service.get_pattern(db, pattern_id))


@router.put("", summary="Set a driver's weekly day off for a month")
def set_pattern(
    body: DayoffPatternRequest,
    db:   Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Creates or replaces the pattern for (driverId, month, year) and writes a
    day-off schedule row for every matching date. Day-off rows of that month
    on other weekdays are removed together with their replacements.
    """
    data = dayoff_service.set_pattern(db, body, current_user.id)
    return success_response(f"Day-off pattern saved, {len(data['dates'])} day(s) scheduled", data)


@router.delete("/{pattern_id}", summary="Delete pattern and its day-off schedules")
def delete_pattern(
    pattern_id: int,
    db:         Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = dayoff_service.delete_pattern(db, pattern_id, current_user.id)
    return success_response("Day-off pattern deleted", data)
