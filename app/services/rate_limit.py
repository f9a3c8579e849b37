"""Per anonymous id daily rate limits for user submissions."""

from __future__ import annotations

from datetime import date

from sqlalchemy.orm import Session

from app.models.rate_limit import RateLimit, utcnow

LIMITS = {
    "spot": 5,
    "review": 20,
    "report": 10,
}


class RateLimitExceeded(Exception):
    """Raised when an anonymous id used up its daily quota for an action."""

    def __init__(self, action: str, limit: int) -> None:
        super().__init__(f"Daily limit of {limit} {action} submissions reached")
        self.action = action
        self.limit = limit


def _date_key(today: date | None = None) -> str:
    today = today or utcnow().date()
    return today.strftime("%Y%m%d")


def rate_limit_key(anonymous_id: str, action: str, today: date | None = None) -> str:
    return f"{anonymous_id}:{action}:{_date_key(today)}"


def check_rate_limit(db: Session, anonymous_id: str, action: str, today: date | None = None) -> bool:
    """Return True while the caller is still under the daily limit."""
    if action not in LIMITS:
        raise ValueError(f"Unknown rate limited action: {action}")
    row = db.get(RateLimit, rate_limit_key(anonymous_id, action, today))
    return row is None or row.count < LIMITS[action]


def increment_rate_limit(db: Session, anonymous_id: str, action: str, today: date | None = None) -> int:
    """Bump the counter for today and return the new count."""
    key = rate_limit_key(anonymous_id, action, today)
    try:
        row = db.get(RateLimit, key)
        if row:
            row.count += 1
            row.updated_at = utcnow()
        else:
            row = RateLimit(key=key, count=1)
            db.add(row)
        db.commit()
        return row.count
    except Exception:
        db.rollback()
        raise


def enforce_rate_limit(db: Session, anonymous_id: str, action: str, today: date | None = None) -> None:
    if not check_rate_limit(db, anonymous_id, action, today):
        raise RateLimitExceeded(action, LIMITS[action])
