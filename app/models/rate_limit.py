"""Rate limit counter model."""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Integer, String

from app.db.base import Base


def utcnow() -> datetime:
    """Naive UTC timestamp; the counter key is dated in UTC as well."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class RateLimit(Base):
    __tablename__ = "rate_limits"

    key = Column(String(200), primary_key=True)  # {anonymous_id}:{action}:{YYYYMMDD}
    count = Column(Integer, nullable=False, default=0)
    updated_at = Column(DateTime, nullable=False, default=utcnow, onupdate=utcnow)
