from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.activity_log import ActivityLog


def log_activity(
    db: Session,
    *,
    actor: str | None,
    action: str,
    entity_type: str | None = None,
    entity_id: str | None = None,
    details: dict | None = None,
) -> None:
    """Stage an audit record on the caller's transaction; it commits or rolls back with it."""
    record = ActivityLog(
        actor=actor,
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        details=details or {},
    )
    db.add(record)


def recent_activity(db: Session, *, entity_type: str | None = None, limit: int = 100) -> list[ActivityLog]:
    stmt = select(ActivityLog).order_by(ActivityLog.created_at.desc(), ActivityLog.id)
    if entity_type is not None:
        stmt = stmt.where(ActivityLog.entity_type == entity_type)
    return list(db.execute(stmt.limit(limit)).scalars())
