import io
from datetime import date

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session
from typing import Literal, Optional

from app.database import get_db
from app.dependencies import get_current_user
from app.models.audit_log import AuditLog
from app.models.user import User
from app.schemas.common import success_response, paginated_response
from app.services.report_service import report_service, XLSX_MEDIA_TYPE
from app.utils.calendar import today_local

router = APIRouter(prefix="/reports")

ReportFormat = Literal["json", "xlsx"]


def _spreadsheet(content: bytes, filename: str) -> StreamingResponse:
    return StreamingResponse(
        io.BytesIO(content),
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ─── Dashboard ────────────────────────────────────────────────────────────────
@router.get("/dashboard", summary="Today's headline numbers")
def dashboard(db: Session = Depends(get_db), _: User = Depends(get_current_user)):
    return success_response("Dashboard retrieved", report_service.dashboard(db))


# ─── Daily Schedule ───────────────────────────────────────────────────────────
@router.get("/daily-schedule", summary="Daily schedule per shift block (JSON or .xlsx)")
def daily_schedule(
    day:    Optional[date] = Query(None, alias="date", description="YYYY-MM-DD, defaults to today"),
    format: ReportFormat   = Query("json"),
    db:     Session        = Depends(get_db),
    _:      User           = Depends(get_current_user),
):
    on_date = day or today_local()
    if format == "xlsx":
        return _spreadsheet(*report_service.export_daily_schedule(db, on_date))
    return success_response("Daily schedule generated", report_service.daily_schedule(db, on_date))


# ─── Overtime ─────────────────────────────────────────────────────────────────
@router.get("/overtime", summary="Monthly overtime report (JSON or .xlsx)")
def overtime_report(
    year:     Optional[int] = Query(None, ge=2000, le=2100),
    month:    Optional[int] = Query(None, ge=1, le=12),
    driverId: Optional[int] = Query(None),
    format:   ReportFormat  = Query("json"),
    db:       Session       = Depends(get_db),
    _:        User          = Depends(get_current_user),
):
    today = today_local()
    year, month = year or today.year, month or today.month
    if format == "xlsx":
        return _spreadsheet(*report_service.export_overtime(db, year, month, driverId))
    return success_response("Overtime report generated", report_service.overtime_report(db, year, month, driverId))


# ─── Audit Logs ───────────────────────────────────────────────────────────────
@router.get("/audit-logs", summary="Audit logs")
def get_audit_logs(
    page:       int            = Query(1, ge=1),
    limit:      int            = Query(50, ge=1, le=200),
    userId:     Optional[int]  = Query(None),
    entityType: Optional[str]  = Query(None),
    action:     Optional[str]  = Query(None),
    db:         Session        = Depends(get_db),
    _:          User           = Depends(get_current_user),
):
    q = db.query(AuditLog)
    if userId:     q = q.filter(AuditLog.userId     == userId)
    if entityType: q = q.filter(AuditLog.entityType == entityType)
    if action:     q = q.filter(AuditLog.action     == action)

    total = q.count()
    items = q.order_by(AuditLog.createdAt.desc(), AuditLog.id.desc()).offset((page - 1) * limit).limit(limit).all()

    data = [{
        "id":          l.id,
        "user":        {"id": l.user.id, "username": l.user.username} if l.user else None,
        "action":      l.action,
        "entityType":  l.entityType,
        "entityId":    l.entityId,
        "description": l.description,
        "createdAt":   l.createdAt.isoformat() if l.createdAt else None,
    } for l in items]

    return paginated_response("Audit logs retrieved", data, total, page, limit)
