from datetime import time
from sqlalchemy.orm import Session

from app.models.replacement import Replacement
from app.models.shift import Shift
from app.schemas.shift import ShiftCreateRequest, ShiftUpdateRequest
from app.services.overtime_service import release_replacement_overtime
from app.utils.audit import log_action
from app.utils.exceptions import NotFoundException, DuplicateEntryException

DEFAULT_SHIFTS = [
    ("Morning Shift",   time(7, 0),   time(16, 0)),
    ("Afternoon Shift", time(16, 0),  time(0, 0)),
    ("Night Shift",     time(0, 0),   time(7, 0)),
    ("Project Driver",  time(8, 30),  time(18, 0)),
]


def serialize_shift(s: Shift) -> dict:
    return {
        "id":        s.id,
        "name":      s.name,
        "startTime": s.startTime.isoformat(timespec="minutes"),
        "endTime":   s.endTime.isoformat(timespec="minutes"),
    }


class ShiftService:

    def list_shifts(self, db: Session) -> list[dict]:
        return [serialize_shift(s) for s in db.query(Shift).order_by(Shift.id).all()]

    def get_shift(self, db: Session, shift_id: int) -> dict:
        s = db.query(Shift).filter(Shift.id == shift_id).first()
        if not s: raise NotFoundException("Shift")
        return serialize_shift(s)

    def create_shift(self, db: Session, data: ShiftCreateRequest, actor_id: int | None) -> dict:
        if db.query(Shift).filter(Shift.name == data.name).first():
            raise DuplicateEntryException("Shift name already exists", field="name")
        s = Shift(name=data.name, startTime=data.startTime, endTime=data.endTime)
        db.add(s)
        db.flush()
        log_action(db, actor_id, "CREATE", "Shift", s.id, f"Created shift {s.name}")
        db.commit()
        db.refresh(s)
        return serialize_shift(s)

    def update_shift(self, db: Session, shift_id: int, data: ShiftUpdateRequest, actor_id: int) -> dict:
        s = db.query(Shift).filter(Shift.id == shift_id).first()
        if not s: raise NotFoundException("Shift")

        if data.name and data.name != s.name:
            if db.query(Shift).filter(Shift.name == data.name).first():
                raise DuplicateEntryException("Shift name already exists", field="name")
            s.name = data.name
        if data.startTime is not None: s.startTime = data.startTime
        if data.endTime is not None:   s.endTime   = data.endTime

        log_action(db, actor_id, "UPDATE", "Shift", s.id, f"Updated shift {s.name}")
        db.commit()
        db.refresh(s)
        return serialize_shift(s)

    def delete_shift(self, db: Session, shift_id: int, actor_id: int) -> None:
        s = db.query(Shift).filter(Shift.id == shift_id).first()
        if not s: raise NotFoundException("Shift")

        for r in db.query(Replacement).filter(Replacement.shiftId == s.id).all():
            release_replacement_overtime(db, r.replacementDriverId, r.schedule.date)
            db.delete(r)

        log_action(db, actor_id, "DELETE", "Shift", s.id, f"Deleted shift {s.name}")
        db.delete(s)
        db.commit()

    def seed_defaults(self, db: Session, actor_id: int | None = None) -> list[dict]:
        """Create the standard shift blocks that do not exist yet (matched by name)."""
        existing = {s.name for s in db.query(Shift).all()}
        created = []
        for name, start, end in DEFAULT_SHIFTS:
            if name in existing:
                continue
            s = Shift(name=name, startTime=start, endTime=end)
            db.add(s)
            created.append(s)
        db.flush()
        for s in created:
            log_action(db, actor_id, "CREATE", "Shift", s.id, f"Seeded shift {s.name}")
        db.commit()
        return [serialize_shift(s) for s in created]


shift_service = ShiftService()
