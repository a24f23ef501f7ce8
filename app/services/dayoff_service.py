"""
Monthly day-off patterns.

A pattern says "driver X is off every <weekday> in <month>/<year>". Saving a
pattern keeps the driver's day-off schedule rows for that month in step with
it: rows on the pattern's weekday are upserted with isDayOff=true, day-off
rows on any other date of the month are removed (their replacement overtime
is given back first). Deleting a pattern removes the month's day-off rows
together with the pattern.

The request schema carries all range checks on month, weekday and year.
"""
import logging
from datetime import date

from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.orm import Session

from app.models.driver import Driver
from app.models.monthly_dayoff import MonthlyDayoffPattern
from app.models.replacement import Replacement
from app.models.schedule import Schedule
from app.schemas.dayoff import DayoffPatternRequest
from app.services.driver_service import serialize_driver_brief
from app.services.replacement_service import release_schedule_replacements
from app.utils.audit import log_action
from app.utils.calendar import dates_matching_weekday, month_range, weekday_name
from app.utils.exceptions import NotFoundException

logger = logging.getLogger(__name__)

_UPSERT_DIALECTS = {"postgresql": pg_insert, "sqlite": sqlite_insert}


def _serialize(p: MonthlyDayoffPattern) -> dict:
    return {
        "id":        p.id,
        "driver":    serialize_driver_brief(p.driver),
        "month":     p.month,
        "year":      p.year,
        "dayOfWeek": p.dayOfWeek,
        "dayName":   weekday_name(p.dayOfWeek),
        "dates":     [d.isoformat() for d in dates_matching_weekday(p.year, p.month, p.dayOfWeek)],
        "updatedAt": p.updatedAt.isoformat() if p.updatedAt else None,
    }


class DayoffService:

    def list_patterns(
        self, db: Session, page: int, limit: int,
        month: int | None, year: int | None, driver_id: int | None,
    ) -> tuple[list[dict], int]:
        q = db.query(MonthlyDayoffPattern)
        if month:     q = q.filter(MonthlyDayoffPattern.month == month)
        if year:      q = q.filter(MonthlyDayoffPattern.year == year)
        if driver_id: q = q.filter(MonthlyDayoffPattern.driverId == driver_id)
        total = q.count()
        items = q.order_by(MonthlyDayoffPattern.createdAt.desc(), MonthlyDayoffPattern.id.desc())\
                 .offset((page - 1) * limit).limit(limit).all()
        return [_serialize(p) for p in items], total

    def get_pattern(self, db: Session, pattern_id: int) -> dict:
        p = db.query(MonthlyDayoffPattern).filter(MonthlyDayoffPattern.id == pattern_id).first()
        if not p: raise NotFoundException("Day-off pattern")
        return _serialize(p)

    def set_pattern(self, db: Session, data: DayoffPatternRequest, actor_id: int | None) -> dict:
        driver = db.query(Driver).filter(Driver.id == data.driverId).first()
        if not driver: raise NotFoundException("Driver")

        pattern = db.query(MonthlyDayoffPattern).filter(
            MonthlyDayoffPattern.driverId == driver.id,
            MonthlyDayoffPattern.month == data.month,
            MonthlyDayoffPattern.year == data.year,
        ).first()
        if pattern:
            action = "UPDATE"
            pattern.dayOfWeek = data.dayOfWeek
        else:
            action = "CREATE"
            pattern = MonthlyDayoffPattern(
                driverId=driver.id, month=data.month, year=data.year, dayOfWeek=data.dayOfWeek,
            )
            db.add(pattern)
        db.flush()

        dates = dates_matching_weekday(data.year, data.month, data.dayOfWeek)
        cleared = self._clear_day_offs(db, driver.id, data.year, data.month, keep=set(dates))
        self._upsert_day_offs(db, driver.id, dates)
        self._warn_if_covering(db, driver, dates)

        log_action(db, actor_id, action, "MonthlyDayoffPattern", pattern.id,
                   f"{driver.name} off every {weekday_name(data.dayOfWeek)} in "
                   f"{data.year}-{data.month:02d}: {len(dates)} day(s) set, {cleared} cleared")
        db.commit()
        # Schedule rows were written with Core statements; drop stale ORM state
        db.expire_all()

        logger.info(
            f"Expanded pattern={pattern.id} driver={driver.id} {data.year}-{data.month:02d} "
            f"dow={data.dayOfWeek}: {len(dates)} upserted, {cleared} cleared"
        )
        return _serialize(pattern)

    def delete_pattern(self, db: Session, pattern_id: int, actor_id: int | None) -> dict:
        p = db.query(MonthlyDayoffPattern).filter(MonthlyDayoffPattern.id == pattern_id).first()
        if not p: raise NotFoundException("Day-off pattern")

        driver_id, year, month = p.driverId, p.year, p.month
        removed = self._clear_day_offs(db, driver_id, year, month, keep=set())
        log_action(db, actor_id, "DELETE", "MonthlyDayoffPattern", p.id,
                   f"Removed day-off pattern of driver #{driver_id} for {year}-{month:02d} "
                   f"and {removed} day-off schedule(s)")
        db.delete(p)
        db.commit()

        logger.info(f"Deleted pattern={pattern_id} driver={driver_id} {year}-{month:02d}: {removed} rows removed")
        return {"deletedSchedules": removed}

    def _warn_if_covering(self, db: Session, driver: Driver, dates: list[date]) -> None:
        """The pattern is applied even where the driver is already covering someone that day."""
        covering = db.query(Replacement).join(Schedule, Replacement.scheduleId == Schedule.id).filter(
            Replacement.replacementDriverId == driver.id,
            Schedule.date.in_(dates),
        ).all()
        for r in covering:
            logger.warning(
                f"Driver={driver.id} set off on {r.schedule.date} while covering "
                f"schedule={r.scheduleId} shift={r.shiftId}"
            )

    def _clear_day_offs(self, db: Session, driver_id: int, year: int, month: int, keep: set[date]) -> int:
        """Delete the driver's day-off rows in the month whose date is not in `keep`."""
        start, end = month_range(year, month)
        rows = db.query(Schedule).filter(
            Schedule.driverId == driver_id,
            Schedule.date >= start,
            Schedule.date <= end,
            Schedule.isDayOff == True,
        ).all()
        stale = [s for s in rows if s.date not in keep]
        for s in stale:
            release_schedule_replacements(db, s)
            db.delete(s)
        db.flush()
        return len(stale)

    def _upsert_day_offs(self, db: Session, driver_id: int, dates: list[date]) -> None:
        """
        Insert a day-off row per date; on (driverId, date) conflict only
        isDayOff is switched on, everything else on the row is kept.
        """
        if not dates:
            return
        insert = _UPSERT_DIALECTS.get(db.get_bind().dialect.name)
        if insert is None:
            self._upsert_day_offs_orm(db, driver_id, dates)
            return

        stmt = insert(Schedule).values([
            {"driverId": driver_id, "date": d, "isDayOff": True, "isAnnualLeave": False}
            for d in dates
        ])
        stmt = stmt.on_conflict_do_update(
            index_elements=["driverId", "date"],
            set_={"isDayOff": True, "updatedAt": func.now()},
        )
        db.execute(stmt)

    def _upsert_day_offs_orm(self, db: Session, driver_id: int, dates: list[date]) -> None:
        existing = {
            s.date: s for s in db.query(Schedule).filter(
                Schedule.driverId == driver_id,
                Schedule.date.in_(dates),
            ).all()
        }
        for d in dates:
            if d in existing:
                existing[d].isDayOff = True
            else:
                db.add(Schedule(driverId=driver_id, date=d, isDayOff=True, isAnnualLeave=False))
        db.flush()


dayoff_service = DayoffService()
