import io
from datetime import date

import openpyxl
from sqlalchemy.orm import Session

from app.models.driver import Driver
from app.models.holiday import Holiday
from app.models.monthly_dayoff import MonthlyDayoffPattern
from app.models.overtime_record import OvertimeRecord
from app.models.schedule import Schedule
from app.models.shift import Shift
from app.services.overtime_service import overtime_service
from app.services.replacement_service import needs_replacement
from app.services.shift_service import serialize_shift
from app.utils.calendar import month_range, today_local, weekday_name

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

DAILY_COLUMNS = ["No", "Day off", "Car Number", "Driver Name", "AL&OFF", "Replacement", "Remark", "Contact"]
OVERTIME_COLUMNS = ["Driver Name", "Staff ID", "Date", "Hours", "OT Type", "Rate", "Total"]


def _workbook_bytes(wb: openpyxl.Workbook) -> bytes:
    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


class ReportService:

    # ─── Dashboard ────────────────────────────────────────────────────────────
    def dashboard(self, db: Session) -> dict:
        today = today_local()
        start, end = month_range(today.year, today.month)

        ot_hours = sum(
            float(r.hours) for r in db.query(OvertimeRecord).filter(
                OvertimeRecord.date >= start,
                OvertimeRecord.date <= end,
            ).all()
        )
        absent = [
            s for s in db.query(Schedule).filter(Schedule.date == today).all() if s.is_absent
        ]
        holiday = db.query(Holiday).filter(Holiday.date == today).first()

        return {
            "date":               today.isoformat(),
            "driverCount":        db.query(Driver).count(),
            "monthOvertimeHours": round(ot_hours, 2),
            "absentToday":        len(absent),
            "needsReplacement":   sum(1 for s in absent if needs_replacement(s)),
            "holiday":            holiday.name if holiday else None,
        }

    # ─── Daily Schedule ───────────────────────────────────────────────────────
    def daily_schedule(self, db: Session, on_date: date) -> dict:
        """
        One row per driver per shift, grouped by shift block, in the layout of
        the printed daily roster.
        """
        schedules = {s.driverId: s for s in db.query(Schedule).filter(Schedule.date == on_date).all()}
        patterns = {
            p.driverId: p for p in db.query(MonthlyDayoffPattern).filter(
                MonthlyDayoffPattern.year == on_date.year,
                MonthlyDayoffPattern.month == on_date.month,
            ).all()
        }
        holiday = db.query(Holiday).filter(Holiday.date == on_date).first()

        blocks = []
        for shift in db.query(Shift).order_by(Shift.id).all():
            members = sorted(shift.drivers, key=lambda ds: (not ds.isPrimary, ds.driver.name))
            rows = []
            for no, ds in enumerate(members, start=1):
                driver = ds.driver
                schedule = schedules.get(driver.id)
                pattern = patterns.get(driver.id)
                rows.append({
                    "no":          no,
                    "dayOff":      weekday_name(pattern.dayOfWeek) if pattern else "",
                    "carNumber":   driver.carNumber or "",
                    "driverName":  driver.name,
                    "alOff":       self._al_off(schedule),
                    "replacement": self._replacement_name(schedule, shift.id),
                    "remark":      (schedule.remark or "") if schedule else "",
                    "contact":     driver.contactNumber or "",
                })
            blocks.append({"shift": serialize_shift(shift), "rows": rows})

        return {
            "date":    on_date.isoformat(),
            "holiday": holiday.name if holiday else None,
            "columns": DAILY_COLUMNS,
            "blocks":  blocks,
        }

    def export_daily_schedule(self, db: Session, on_date: date) -> tuple[bytes, str]:
        report = self.daily_schedule(db, on_date)

        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Daily Schedule"
        ws.append([f"Daily Schedule {report['date']}" + (f" ({report['holiday']})" if report["holiday"] else "")])
        for block in report["blocks"]:
            shift = block["shift"]
            ws.append([])
            ws.append([f"{shift['name']} ({shift['startTime']}-{shift['endTime']})"])
            ws.append(DAILY_COLUMNS)
            for row in block["rows"]:
                ws.append([
                    row["no"], row["dayOff"], row["carNumber"], row["driverName"],
                    row["alOff"], row["replacement"], row["remark"], row["contact"],
                ])

        return _workbook_bytes(wb), f"daily_schedule_{on_date.isoformat()}.xlsx"

    # ─── Overtime ─────────────────────────────────────────────────────────────
    def overtime_report(self, db: Session, year: int, month: int, driver_id: int | None) -> dict:
        return overtime_service.list_records(db, year, month, driver_id)

    def export_overtime(self, db: Session, year: int, month: int, driver_id: int | None) -> tuple[bytes, str]:
        report = self.overtime_report(db, year, month, driver_id)

        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = "Overtime Report"
        ws.append(OVERTIME_COLUMNS)
        for r in report["records"]:
            ws.append([
                r["driver"]["name"], r["driver"]["staffId"], r["date"],
                r["hours"], r["otTypeLabel"], r["otRate"], r["total"],
            ])
        ws.append([])
        ws.append(["Total", "", "", report["summary"]["totalHours"], "", "", report["summary"]["totalValue"]])

        return _workbook_bytes(wb), f"overtime_report_{year}-{month:02d}.xlsx"

    @staticmethod
    def _al_off(schedule: Schedule | None) -> str:
        if not schedule:           return ""
        if schedule.isAnnualLeave: return "AL"
        if schedule.isDayOff:      return "OFF"
        return ""

    @staticmethod
    def _replacement_name(schedule: Schedule | None, shift_id: int) -> str:
        if not schedule:
            return ""
        r = next((r for r in schedule.replacements if r.shiftId == shift_id), None)
        return r.replacement_driver.name if r else ""


report_service = ReportService()
