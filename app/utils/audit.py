from sqlalchemy.orm import Session
from app.models.audit_log import AuditLog


def log_action(
    db: Session,
    user_id: int | None,
    action: str,
    entity_type: str,
    entity_id: int | None = None,
    description: str | None = None,
) -> None:
    """
    Write an audit log entry.

    Args:
        db:          Active DB session (will NOT commit, the caller does)
        user_id:     ID of user performing the action (None = system action)
        action:      Verb: CREATE, UPDATE, DELETE, ASSIGN, EXPAND, LOGIN, LOGOUT, etc.
        entity_type: Model name: "Schedule", "Replacement", "Driver", etc.
        entity_id:   Primary key of the affected record
        description: Human-readable description

    Usage:
        log_action(db, current_user.id, "ASSIGN", "Replacement", replacement.id,
                   f"{driver.name} covers {shift.name} on {schedule.date}")
        db.commit()
    """
    entry = AuditLog(
        userId=user_id,
        action=action,
        entityType=entity_type,
        entityId=entity_id,
        description=description,
    )
    db.add(entry)
    # No commit: the entry belongs to the caller's transaction
