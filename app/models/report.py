"""Report model."""

import uuid
from datetime import datetime

from sqlalchemy import Column, DateTime, String

from app.db.base import Base


class Report(Base):
    """Flag raised against a spot or a review."""

    __tablename__ = "reports"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    target_type = Column(String(10), nullable=False)  # spot, review
    target_id = Column(String(36), nullable=False, index=True)
    reason = Column(String(30), nullable=False)
    note = Column(String(500))
    anonymous_id = Column(String(100), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
