"""Spot model."""

import uuid
from datetime import datetime

from sqlalchemy import Boolean, Column, DateTime, Float, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship

from app.db.base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


class Spot(Base):
    """A mapped point of interest (toilet, smoking area, cafe)."""

    __tablename__ = "spots"
    __table_args__ = (
        UniqueConstraint("source_name", "source_id", name="uq_spots_source"),
    )

    id = Column(String(36), primary_key=True, default=_new_id)
    type = Column(String(20), nullable=False, index=True)  # toilet, smoking, cafe
    title = Column(String(100))
    description = Column(Text, nullable=False)
    evidence_hint = Column(String(500))
    lat = Column(Float, nullable=False)
    lng = Column(Float, nullable=False)
    region_tag = Column(String(50), nullable=False, default="kansai")
    status = Column(String(20), nullable=False, default="active", index=True)  # active, needs_verify, hidden
    is_official = Column(Boolean, nullable=False, default=False)
    anonymous_id = Column(String(100), nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)
    updated_at = Column(DateTime, nullable=False, default=datetime.now, onupdate=datetime.now)
    last_verified_at = Column(DateTime, nullable=False, default=datetime.now)

    toilet_is_free = Column(Boolean)
    toilet_open_24h = Column(Boolean)
    toilet_barrier_free = Column(Boolean)

    smoking_type = Column(String(30))
    smoking_ashtray = Column(Boolean)

    # Bulk import source; (source_name, source_id) is the upsert key
    source_name = Column(String(100))
    source_id = Column(String(100))
    source_url = Column(Text)
    imported_at = Column(DateTime)

    reviews = relationship("Review", back_populates="spot", cascade="all, delete-orphan")
