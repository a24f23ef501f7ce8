from datetime import date

from sqlalchemy.orm import Session

from app.models.driver import Driver
from app.models.holiday import Holiday
from app.models.schedule import Schedule
from app.schemas.schedule import ScheduleToggleRequest, ScheduleRemarkRequest, AbsenceType
from app.services.driver_service import serialize_driver_brief
from app.services.replacement_service import coverage_of, needs_replacement
from app.utils.audit import log_action
from app.utils.calendar import iter_month, month_range, sunday_based_weekday, weekday_name
from app.utils.exceptions import NotFoundException


def serialize_schedule(s: Schedule) -> dict:
    return {
        "id":               s.id,
        "driver":           serialize_driver_brief(s.driver),
        "date":             s.date.isoformat(),
        "isDayOff":         s.isDayOff,
        "isAnnualLeave":    s.isAnnualLeave,
        "status":           s.status_label,
        "remark":           s.remark,
        "replacements": [{
            "id":                r.id,
            "shift":             {"id": r.shift.id, "name": r.shift.name},
            "replacementDriver": serialize_driver_brief(r.replacement_driver),
        } for r in sorted(s.replacements, key=lambda r: r.shiftId)],
        "coverage":         coverage_of(s).value if s.is_absent else None,
        "needsReplacement": needs_replacement(s),
    }


class ScheduleService:

    def get_schedule(self, db: Session, schedule_id: int) -> dict:
        s = db.query(Schedule).filter(Schedule.id == schedule_id).first()
        if not s: raise NotFoundException("Schedule")
        return serialize_schedule(s)

    def toggle_status(self, db: Session, data: ScheduleToggleRequest, actor_id: int) -> dict:
        """
        Flip day-off or annual-leave for a driver on a date. Switching one flag
        on always switches the other one off.
        """
        driver = db.query(Driver).filter(Driver.id == data.driverId).first()
        if not driver: raise NotFoundException("Driver")

        s = db.query(Schedule).filter(
            Schedule.driverId == driver.id,
            Schedule.date == data.date,
        ).first()
        if s:
            if data.type == AbsenceType.DAY_OFF:
                s.isDayOff = not s.isDayOff
                s.isAnnualLeave = False
            else:
                s.isAnnualLeave = not s.isAnnualLeave
                s.isDayOff = False
        else:
            s = Schedule(
                driverId=driver.id,
                date=data.date,
                isDayOff=data.type == AbsenceType.DAY_OFF,
                isAnnualLeave=data.type == AbsenceType.ANNUAL_LEAVE,
            )
            db.add(s)
        db.flush()

        log_action(db, actor_id, "UPDATE", "Schedule", s.id,
                   f"{driver.name} on {data.date}: {s.status_label}")
        db.commit()
        db.refresh(s)
        return serialize_schedule(s)

    def set_remark(self, db: Session, schedule_id: int, data: ScheduleRemarkRequest, actor_id: int) -> dict:
        s = db.query(Schedule).filter(Schedule.id == schedule_id).first()
        if not s: raise NotFoundException("Schedule")
        s.remark = (data.remark or "").strip() or None
        log_action(db, actor_id, "UPDATE", "Schedule", s.id, f"Remark updated for {s.date}")
        db.commit()
        db.refresh(s)
        return serialize_schedule(s)

    def day_view(self, db: Session, on_date: date) -> dict:
        drivers = db.query(Driver).order_by(Driver.name).all()
        schedules = db.query(Schedule).filter(Schedule.date == on_date).all()
        holiday = db.query(Holiday).filter(Holiday.date == on_date).first()

        absent_ids = {s.driverId for s in schedules if s.is_absent}
        schedules.sort(key=lambda s: s.driver.name)
        return {
            "date":             on_date.isoformat(),
            "weekday":          weekday_name(sunday_based_weekday(on_date)),
            "holiday":          holiday.name if holiday else None,
            "schedules":        [serialize_schedule(s) for s in schedules],
            "availableDrivers": [serialize_driver_brief(d) for d in drivers if d.id not in absent_ids],
        }

    def month_calendar(self, db: Session, year: int, month: int) -> dict:
        start, end = month_range(year, month)
        schedules = db.query(Schedule).filter(
            Schedule.date >= start,
            Schedule.date <= end,
        ).all()
        holidays = {
            h.date: h.name for h in db.query(Holiday).filter(Holiday.date >= start, Holiday.date <= end).all()
        }

        by_date: dict[date, list[Schedule]] = {}
        for s in schedules:
            if s.is_absent:
                by_date.setdefault(s.date, []).append(s)

        days = []
        for d in iter_month(year, month):
            absences = sorted(by_date.get(d, []), key=lambda s: s.driver.name)
            days.append({
                "date":    d.isoformat(),
                "weekday": weekday_name(sunday_based_weekday(d)),
                "holiday": holidays.get(d),
                "absences": [{
                    "scheduleId":       s.id,
                    "driver":           serialize_driver_brief(s.driver),
                    "status":           s.status_label,
                    "coverage":         coverage_of(s).value,
                    "needsReplacement": needs_replacement(s),
                } for s in absences],
                "needsReplacementCount": sum(1 for s in absences if needs_replacement(s)),
            })
        return {"year": year, "month": month, "days": days}


schedule_service = ScheduleService()
