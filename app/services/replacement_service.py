import enum
import logging

from sqlalchemy.orm import Session

from app.config import settings
from app.models.driver import Driver
from app.models.replacement import Replacement
from app.models.schedule import Schedule
from app.models.shift import Shift
from app.schemas.replacement import AssignReplacementRequest, UpdateReplacementRequest
from app.services.driver_service import serialize_driver_brief
from app.services.overtime_service import accrue_replacement_overtime, release_replacement_overtime
from app.utils.audit import log_action
from app.utils.exceptions import (
    NotFoundException, DuplicateEntryException,
    ScheduleNotAbsentException, InvalidReplacementException,
)

logger = logging.getLogger(__name__)


class Coverage(str, enum.Enum):
    UNCOVERED = "uncovered"
    PARTIAL   = "partial"
    COVERED   = "covered"


def coverage_of(schedule: Schedule) -> Coverage:
    """How many of the absent driver's shifts have a replacement."""
    covered = {r.shiftId for r in schedule.replacements}
    required = {ds.shiftId for ds in schedule.driver.shifts}
    if not required:
        return Coverage.COVERED if covered else Coverage.UNCOVERED
    hits = len(required & covered)
    if hits == 0:
        return Coverage.UNCOVERED
    if hits < len(required):
        return Coverage.PARTIAL
    return Coverage.COVERED


def needs_replacement(schedule: Schedule) -> bool:
    return schedule.is_absent and coverage_of(schedule) != Coverage.COVERED


def release_schedule_replacements(db: Session, schedule: Schedule) -> int:
    """
    Give back the overtime of every replacement on a schedule that is about
    to be deleted. The replacement rows themselves go with the schedule.
    """
    for r in schedule.replacements:
        release_replacement_overtime(db, r.replacementDriverId, schedule.date)
    return len(schedule.replacements)


def serialize_replacement(r: Replacement) -> dict:
    return {
        "id":                r.id,
        "scheduleId":        r.scheduleId,
        "date":              r.schedule.date.isoformat(),
        "absentDriver":      serialize_driver_brief(r.schedule.driver),
        "replacementDriver": serialize_driver_brief(r.replacement_driver),
        "shift":             {"id": r.shift.id, "name": r.shift.name},
    }


class ReplacementService:

    def list_for_schedule(self, db: Session, schedule_id: int) -> list[dict]:
        schedule = db.query(Schedule).filter(Schedule.id == schedule_id).first()
        if not schedule: raise NotFoundException("Schedule")
        return [serialize_replacement(r) for r in sorted(schedule.replacements, key=lambda r: r.shiftId)]

    def assign_replacement(self, db: Session, data: AssignReplacementRequest, actor_id: int) -> list[dict]:
        schedule = db.query(Schedule).filter(Schedule.id == data.scheduleId).first()
        if not schedule: raise NotFoundException("Schedule")
        if not schedule.is_absent:
            raise ScheduleNotAbsentException()

        driver = self._check_candidate(db, schedule, data.replacementDriverId)

        if data.shiftId is not None:
            shift = db.query(Shift).filter(Shift.id == data.shiftId).first()
            if not shift: raise NotFoundException("Shift")
            taken = db.query(Replacement).filter(
                Replacement.scheduleId == schedule.id,
                Replacement.shiftId == shift.id,
            ).first()
            if taken:
                raise DuplicateEntryException("This shift already has a replacement driver", field="shiftId")
            shift_ids = [shift.id]
        else:
            covered = {r.shiftId for r in schedule.replacements}
            shift_ids = sorted(ds.shiftId for ds in schedule.driver.shifts if ds.shiftId not in covered)
            if not shift_ids:
                raise InvalidReplacementException("There is no uncovered shift left for this driver")

        created = [
            Replacement(scheduleId=schedule.id, replacementDriverId=driver.id, shiftId=sid)
            for sid in shift_ids
        ]
        db.add_all(created)
        db.flush()

        accrue_replacement_overtime(
            db, driver.id, schedule.date, hours=settings.REPLACEMENT_OT_HOURS * len(created),
        )
        for r in created:
            log_action(db, actor_id, "ASSIGN", "Replacement", r.id,
                       f"{driver.name} covers shift #{r.shiftId} of {schedule.driver.name} on {schedule.date}")
        db.commit()
        db.expire(schedule, ["replacements"])

        logger.info(f"Assigned driver={driver.id} to {len(created)} shift(s) of schedule={schedule.id}")
        for r in created:
            db.refresh(r)
        return [serialize_replacement(r) for r in created]

    def update_replacement(
        self, db: Session, replacement_id: int, data: UpdateReplacementRequest, actor_id: int,
    ) -> dict:
        r = db.query(Replacement).filter(Replacement.id == replacement_id).first()
        if not r: raise NotFoundException("Replacement")

        if r.replacementDriverId == data.replacementDriverId:
            return serialize_replacement(r)

        schedule = r.schedule
        new_driver = self._check_candidate(db, schedule, data.replacementDriverId)
        old_driver_id = r.replacementDriverId

        r.replacementDriverId = new_driver.id
        release_replacement_overtime(db, old_driver_id, schedule.date)
        accrue_replacement_overtime(db, new_driver.id, schedule.date)

        log_action(db, actor_id, "UPDATE", "Replacement", r.id,
                   f"Replacement on {schedule.date} moved from driver #{old_driver_id} to {new_driver.name}")
        db.commit()
        db.refresh(r)
        return serialize_replacement(r)

    def delete_replacement(self, db: Session, replacement_id: int, actor_id: int) -> None:
        r = db.query(Replacement).filter(Replacement.id == replacement_id).first()
        if not r: raise NotFoundException("Replacement")

        schedule = r.schedule
        release_replacement_overtime(db, r.replacementDriverId, schedule.date)
        log_action(db, actor_id, "DELETE", "Replacement", r.id,
                   f"Removed replacement driver #{r.replacementDriverId} from shift #{r.shiftId} on {schedule.date}")
        db.delete(r)
        db.commit()
        db.expire(schedule, ["replacements"])

    def _check_candidate(self, db: Session, schedule: Schedule, driver_id: int) -> Driver:
        driver = db.query(Driver).filter(Driver.id == driver_id).first()
        if not driver: raise NotFoundException("Replacement driver")
        if driver.id == schedule.driverId:
            raise InvalidReplacementException("A driver cannot replace themselves")

        own = db.query(Schedule).filter(
            Schedule.driverId == driver.id,
            Schedule.date == schedule.date,
        ).first()
        if own and own.is_absent:
            raise InvalidReplacementException(f"{driver.name} is also off on {schedule.date}")
        return driver


replacement_service = ReplacementService()
