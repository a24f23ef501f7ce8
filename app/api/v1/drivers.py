from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import Optional

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.driver import DriverCreateRequest, DriverUpdateRequest
from app.schemas.common import success_response, paginated_response
from app.services.driver_service import driver_service

router = APIRouter(prefix="/drivers")


@router.get("", summary="List drivers")
def list_drivers(
    page:   int           = Query(1, ge=1),
    limit:  int           = Query(20, ge=1, le=100),
    search: Optional[str] = Query(None, description="Name or staff ID"),
    db:     Session       = Depends(get_db),
    _:      User          = Depends(get_current_user),
):
    data, total = driver_service.list_drivers(db, page, limit, search)
    return paginated_response("Drivers retrieved successfully", data, total, page, limit)


@router.get("/{driver_id}", summary="Get driver with shifts and day-off patterns")
def get_driver(driver_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return success_response("Driver retrieved", driver_service.get_driver(db, driver_id))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Register a driver")
def create_driver(
    body: DriverCreateRequest,
    db:   Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = driver_service.create_driver(db, body, current_user.id)
    return success_response("Driver registered successfully", data)


@router.put("/{driver_id}", summary="Update driver info and shift assignments")
def update_driver(
    driver_id: int,
    body:      DriverUpdateRequest,
    db:        Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = driver_service.update_driver(db, driver_id, body, current_user.id)
    return success_response("Driver updated successfully", data)


@router.delete("/{driver_id}", summary="Delete driver with schedules, patterns and overtime")
def delete_driver(
    driver_id: int,
    db:        Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    driver_service.delete_driver(db, driver_id, current_user.id)
    return success_response("Driver deleted successfully")
