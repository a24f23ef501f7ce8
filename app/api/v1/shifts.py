from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.shift import ShiftCreateRequest, ShiftUpdateRequest
from app.schemas.common import success_response
from app.services.shift_service import shift_service

router = APIRouter(prefix="/shifts")


@router.get("", summary="List shifts")
def list_shifts(db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return success_response("Shifts retrieved successfully", shift_service.list_shifts(db))


@router.post("/seed", summary="Create the default shifts that do not exist yet")
def seed_shifts(db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    data = shift_service.seed_defaults(db, current_user.id)
    return success_response(f"{len(data)} shift(s) created", data)


@router.get("/{shift_id}", summary="Get shift by ID")
def get_shift(shift_id: int, db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return success_response("Shift retrieved", shift_service.get_shift(db, shift_id))


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create shift")
def create_shift(
    body: ShiftCreateRequest,
    db:   Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return success_response("Shift created successfully", shift_service.create_shift(db, body, current_user.id))


@router.put("/{shift_id}", summary="Update shift")
def update_shift(
    shift_id: int,
    body:     ShiftUpdateRequest,
    db:       Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = shift_service.update_shift(db, shift_id, body, current_user.id)
    return success_response("Shift updated successfully", data)


@router.delete("/{shift_id}", summary="Delete shift")
def delete_shift(
    shift_id: int,
    db:       Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    shift_service.delete_shift(db, shift_id, current_user.id)
    return success_response("Shift deleted successfully")
