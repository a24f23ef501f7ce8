from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.dependencies import get_current_user
from app.models.user import User
from app.schemas.replacement import AssignReplacementRequest, UpdateReplacementRequest
from app.schemas.common import success_response
from app.services.replacement_service import replacement_service

router = APIRouter(prefix="/replacements")


@router.post("", status_code=status.HTTP_201_CREATED, summary="Assign a replacement driver")
def assign_replacement(
    body: AssignReplacementRequest,
    db:   Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Covers one shift of an absent driver, or every uncovered shift when
    shiftId is omitted. Each covered shift adds 8 overtime hours to the
    replacement driver.
    """
    data = replacement_service.assign_replacement(db, body, current_user.id)
    return success_response(f"Replacement assigned to {len(data)} shift(s)", data)


@router.put("/{replacement_id}", summary="Hand a replacement over to another driver")
def update_replacement(
    replacement_id: int,
    body:           UpdateReplacementRequest,
    db:             Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    data = replacement_service.update_replacement(db, replacement_id, body, current_user.id)
    return success_response("Replacement updated", data)


@router.delete("/{replacement_id}", summary="Remove a replacement and its overtime")
def delete_replacement(
    replacement_id: int,
    db:             Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    replacement_service.delete_replacement(db, replacement_id, current_user.id)
    return success_response("Replacement removed")
