"""Review model."""

import uuid
from datetime import datetime

from sqlalchemy import Column, Date, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import relationship

from app.db.base import Base


class Review(Base):
    """Free-text review left on a spot. Immutable once written."""

    __tablename__ = "reviews"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    spot_id = Column(String(36), ForeignKey("spots.id", ondelete="CASCADE"), nullable=False, index=True)
    body = Column(Text, nullable=False)
    confidence = Column(String(10), nullable=False)  # sure, maybe, unsure
    visited_at = Column(Date)
    anonymous_id = Column(String(100), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    spot = relationship("Spot", back_populates="reviews")
