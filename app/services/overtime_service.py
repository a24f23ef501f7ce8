"""
Overtime ledger.

Replacement overtime is kept as a single OvertimeRecord per
(driver, date, otType="replacement"): covering a shift adds a fixed block of
hours to it, giving a shift back removes exactly that block and drops the
record once nothing is left. Manually recorded overtime (normal, holiday,
day-off, night) is stored as independent records.
"""
import logging
from datetime import date
from decimal import Decimal

from sqlalchemy.orm import Session

from app.config import settings
from app.models.driver import Driver
from app.models.overtime_record import OvertimeRecord, OTType, OT_RATES, OT_LABELS
from app.schemas.overtime import OvertimeCreateRequest
from app.services.driver_service import serialize_driver_brief
from app.utils.audit import log_action
from app.utils.calendar import month_range
from app.utils.exceptions import NotFoundException

logger = logging.getLogger(__name__)


def _to_decimal(value) -> Decimal:
    return value if isinstance(value, Decimal) else Decimal(str(value))


def _replacement_record(db: Session, driver_id: int, on_date: date) -> OvertimeRecord | None:
    return db.query(OvertimeRecord).filter(
        OvertimeRecord.driverId == driver_id,
        OvertimeRecord.date == on_date,
        OvertimeRecord.otType == OTType.REPLACEMENT,
    ).first()


def accrue_replacement_overtime(
    db: Session, driver_id: int, on_date: date, hours: float | None = None,
) -> OvertimeRecord:
    """
    Add replacement overtime for a driver on a date, merging into the existing
    replacement record if there is one. Flushes but does NOT commit.
    """
    amount = _to_decimal(settings.REPLACEMENT_OT_HOURS if hours is None else hours)
    record = _replacement_record(db, driver_id, on_date)
    if record:
        record.hours = _to_decimal(record.hours) + amount
    else:
        record = OvertimeRecord(
            driverId=driver_id,
            date=on_date,
            hours=amount,
            otType=OTType.REPLACEMENT,
            otRate=_to_decimal(settings.REPLACEMENT_OT_RATE),
        )
        db.add(record)
    db.flush()
    logger.info(f"OT +{amount}h driver={driver_id} date={on_date} -> {record.hours}h")
    return record


def release_replacement_overtime(
    db: Session, driver_id: int, on_date: date, hours: float | None = None,
) -> OvertimeRecord | None:
    """
    Remove one replacement contribution. The record is deleted only when the
    remainder reaches zero. Returns the surviving record, or None.
    Flushes but does NOT commit.
    """
    amount = _to_decimal(settings.REPLACEMENT_OT_HOURS if hours is None else hours)
    record = _replacement_record(db, driver_id, on_date)
    if not record:
        logger.warning(f"No replacement OT to release for driver={driver_id} date={on_date}")
        return None

    remaining = _to_decimal(record.hours) - amount
    if remaining <= 0:
        db.delete(record)
        db.flush()
        logger.info(f"OT -{amount}h driver={driver_id} date={on_date} -> record removed")
        return None

    record.hours = remaining
    db.flush()
    logger.info(f"OT -{amount}h driver={driver_id} date={on_date} -> {remaining}h")
    return record


def serialize_overtime(r: OvertimeRecord) -> dict:
    return {
        "id":          r.id,
        "driver":      serialize_driver_brief(r.driver),
        "date":        r.date.isoformat(),
        "hours":       float(r.hours),
        "otType":      r.otType.value,
        "otTypeLabel": OT_LABELS[r.otType],
        "otRate":      float(r.otRate),
        "total":       r.total,
    }


class OvertimeService:

    def list_records(
        self, db: Session, year: int, month: int,
        driver_id: int | None, ot_type: OTType | None = None,
    ) -> dict:
        start, end = month_range(year, month)
        q = db.query(OvertimeRecord).filter(
            OvertimeRecord.date >= start,
            OvertimeRecord.date <= end,
        )
        if driver_id: q = q.filter(OvertimeRecord.driverId == driver_id)
        if ot_type:   q = q.filter(OvertimeRecord.otType == ot_type)
        records = q.order_by(OvertimeRecord.date, OvertimeRecord.id).all()

        return {
            "period":  {"year": year, "month": month, "startDate": start.isoformat(), "endDate": end.isoformat()},
            "summary": {
                "totalRecords": len(records),
                "totalHours":   round(sum(float(r.hours) for r in records), 2),
                "totalValue":   round(sum(r.total for r in records), 2),
            },
            "records": [serialize_overtime(r) for r in records],
        }

    def get_record(self, db: Session, record_id: int) -> dict:
        r = db.query(OvertimeRecord).filter(OvertimeRecord.id == record_id).first()
        if not r: raise NotFoundException("Overtime record")
        return serialize_overtime(r)

    def create_record(self, db: Session, data: OvertimeCreateRequest, actor_id: int) -> dict:
        driver = db.query(Driver).filter(Driver.id == data.driverId).first()
        if not driver: raise NotFoundException("Driver")

        r = OvertimeRecord(
            driverId=driver.id,
            date=data.date,
            hours=_to_decimal(data.hours),
            otType=data.otType,
            otRate=_to_decimal(OT_RATES[data.otType]),
        )
        db.add(r)
        db.flush()
        log_action(db, actor_id, "CREATE", "OvertimeRecord", r.id,
                   f"{data.hours}h {data.otType.value} OT for {driver.name} on {data.date}")
        db.commit()
        db.refresh(r)
        return serialize_overtime(r)

    def delete_record(self, db: Session, record_id: int, actor_id: int) -> None:
        r = db.query(OvertimeRecord).filter(OvertimeRecord.id == record_id).first()
        if not r: raise NotFoundException("Overtime record")
        log_action(db, actor_id, "DELETE", "OvertimeRecord", r.id,
                   f"Deleted {r.otType.value} OT of driver #{r.driverId} on {r.date}")
        db.delete(r)
        db.commit()


overtime_service = OvertimeService()
