"""Report persistence."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.models.report import Report
from app.schemas.report import ReportCreate
from app.services.rate_limit import enforce_rate_limit, increment_rate_limit


def create_report(db: Session, payload: ReportCreate) -> Report:
    """Record a flag against a spot or review."""
    enforce_rate_limit(db, payload.anonymous_id, "report")

    report = Report(
        target_type=payload.target_type,
        target_id=payload.target_id,
        reason=payload.reason,
        note=payload.note or None,
        anonymous_id=payload.anonymous_id,
    )
    try:
        db.add(report)
        db.commit()
        db.refresh(report)
    except Exception:
        db.rollback()
        raise
    increment_rate_limit(db, payload.anonymous_id, "report")
    return report
