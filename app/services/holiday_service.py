from datetime import date

from sqlalchemy.orm import Session

from app.models.holiday import Holiday
from app.schemas.holiday import HolidayCreateRequest
from app.utils.audit import log_action
from app.utils.exceptions import NotFoundException, DuplicateEntryException


def _serialize(h: Holiday) -> dict:
    return {"id": h.id, "name": h.name, "date": h.date.isoformat()}


class HolidayService:

    def list_holidays(self, db: Session, year: int | None) -> list[dict]:
        q = db.query(Holiday)
        if year:
            q = q.filter(Holiday.date >= date(year, 1, 1), Holiday.date <= date(year, 12, 31))
        return [_serialize(h) for h in q.order_by(Holiday.date).all()]

    def create_holiday(self, db: Session, data: HolidayCreateRequest, actor_id: int) -> dict:
        if db.query(Holiday).filter(Holiday.date == data.date).first():
            raise DuplicateEntryException("A holiday already exists on this date", field="date")
        h = Holiday(name=data.name, date=data.date)
        db.add(h)
        db.flush()
        log_action(db, actor_id, "CREATE", "Holiday", h.id, f"Holiday {h.name} on {h.date}")
        db.commit()
        db.refresh(h)
        return _serialize(h)

    def delete_holiday(self, db: Session, holiday_id: int, actor_id: int) -> None:
        h = db.query(Holiday).filter(Holiday.id == holiday_id).first()
        if not h: raise NotFoundException("Holiday")
        log_action(db, actor_id, "DELETE", "Holiday", h.id, f"Removed holiday {h.name} on {h.date}")
        db.delete(h)
        db.commit()


holiday_service = HolidayService()
