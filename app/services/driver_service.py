from sqlalchemy.orm import Session
from sqlalchemy import or_

from app.models.driver import Driver
from app.models.shift import Shift, DriverShift
from app.schemas.driver import DriverCreateRequest, DriverUpdateRequest, DriverShiftItem
from app.utils.audit import log_action
from app.utils.calendar import weekday_name
from app.utils.exceptions import NotFoundException, DuplicateEntryException


def serialize_driver_brief(d: Driver | None) -> dict | None:
    if d is None:
        return None
    return {
        "id":        d.id,
        "name":      d.name,
        "staffId":   d.staffId,
        "carNumber": d.carNumber,
    }


def _serialize(d: Driver, with_patterns: bool = False) -> dict:
    result = {
        "id":            d.id,
        "name":          d.name,
        "staffId":       d.staffId,
        "carNumber":     d.carNumber,
        "contactNumber": d.contactNumber,
        "shifts": [{
            "shiftId":   ds.shift.id,
            "name":      ds.shift.name,
            "startTime": ds.shift.startTime.isoformat(timespec="minutes"),
            "endTime":   ds.shift.endTime.isoformat(timespec="minutes"),
            "isPrimary": ds.isPrimary,
        } for ds in sorted(d.shifts, key=lambda x: (not x.isPrimary, x.shiftId))],
        "createdAt":     d.createdAt.isoformat() if d.createdAt else None,
    }
    if with_patterns:
        patterns = sorted(d.dayoff_patterns, key=lambda p: (p.year, p.month), reverse=True)
        result["dayoffPatterns"] = [{
            "id":        p.id,
            "month":     p.month,
            "year":      p.year,
            "dayOfWeek": p.dayOfWeek,
            "dayName":   weekday_name(p.dayOfWeek),
        } for p in patterns]
    return result


class DriverService:

    def list_drivers(self, db: Session, page: int, limit: int, search: str | None) -> tuple[list[dict], int]:
        q = db.query(Driver)
        if search:
            kw = f"%{search}%"
            q = q.filter(or_(Driver.name.ilike(kw), Driver.staffId.ilike(kw)))
        total = q.count()
        items = q.order_by(Driver.name).offset((page - 1) * limit).limit(limit).all()
        return [_serialize(d) for d in items], total

    def get_driver(self, db: Session, driver_id: int) -> dict:
        d = db.query(Driver).filter(Driver.id == driver_id).first()
        if not d: raise NotFoundException("Driver")
        return _serialize(d, with_patterns=True)

    def create_driver(self, db: Session, data: DriverCreateRequest, actor_id: int) -> dict:
        if db.query(Driver).filter(Driver.staffId == data.staffId).first():
            raise DuplicateEntryException("Staff ID already exists", field="staffId")

        d = Driver(
            name=data.name,
            staffId=data.staffId,
            carNumber=data.carNumber,
            contactNumber=data.contactNumber,
        )
        db.add(d)
        db.flush()
        self._replace_shifts(db, d, data.shifts)
        log_action(db, actor_id, "CREATE", "Driver", d.id,
                   f"Registered driver {d.name} ({d.staffId})")
        db.commit()
        db.refresh(d)
        return _serialize(d)

    def update_driver(self, db: Session, driver_id: int, data: DriverUpdateRequest, actor_id: int) -> dict:
        d = db.query(Driver).filter(Driver.id == driver_id).first()
        if not d: raise NotFoundException("Driver")

        if data.staffId and data.staffId != d.staffId:
            if db.query(Driver).filter(Driver.staffId == data.staffId).first():
                raise DuplicateEntryException("Staff ID already exists", field="staffId")
            d.staffId = data.staffId
        if data.name:                      d.name          = data.name
        if data.carNumber is not None:     d.carNumber     = data.carNumber or None
        if data.contactNumber is not None: d.contactNumber = data.contactNumber or None
        if data.shifts is not None:
            self._replace_shifts(db, d, data.shifts)

        log_action(db, actor_id, "UPDATE", "Driver", d.id, f"Updated driver {d.name}")
        db.commit()
        db.refresh(d)
        return _serialize(d)

    def delete_driver(self, db: Session, driver_id: int, actor_id: int) -> None:
        d = db.query(Driver).filter(Driver.id == driver_id).first()
        if not d: raise NotFoundException("Driver")

        # Replacements on this driver's schedules disappear with it; hand back their overtime
        from app.services.replacement_service import release_schedule_replacements
        for s in d.schedules:
            release_schedule_replacements(db, s)

        log_action(db, actor_id, "DELETE", "Driver", d.id, f"Deleted driver {d.name} ({d.staffId})")
        db.delete(d)
        db.commit()

    def _replace_shifts(self, db: Session, d: Driver, items: list[DriverShiftItem]) -> None:
        shift_ids = [i.shiftId for i in items]
        if shift_ids:
            found = {s.id for s in db.query(Shift).filter(Shift.id.in_(shift_ids)).all()}
            if len(found) != len(set(shift_ids)):
                raise NotFoundException("Shift")

        # Old rows must be gone before re-inserting the same (driverId, shiftId)
        d.shifts.clear()
        db.flush()
        for item in items:
            d.shifts.append(DriverShift(shiftId=item.shiftId, isPrimary=item.isPrimary))
        db.flush()


driver_service = DriverService()
