"""Spot persistence: listing, user submissions and bulk-import upserts."""

from __future__ import annotations

from datetime import datetime
from typing import Iterable

from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.spot import Spot
from app.schemas.spot import SpotCreate
from app.services.rate_limit import enforce_rate_limit, increment_rate_limit

VISIBLE_STATUSES = ("active", "needs_verify")

# Columns an import run is allowed to overwrite on an existing row
IMPORT_FIELDS = (
    "type",
    "title",
    "description",
    "evidence_hint",
    "lat",
    "lng",
    "region_tag",
    "status",
    "is_official",
    "anonymous_id",
    "toilet_is_free",
    "toilet_open_24h",
    "toilet_barrier_free",
    "source_url",
)


def upsert_spot(db: Session, data: dict) -> Spot:
    """Insert or update an imported spot keyed by (source_name, source_id)."""
    if not data.get("source_name") or not data.get("source_id"):
        raise ValueError("source_name and source_id are required for upsert")

    try:
        spot = db.execute(
            select(Spot).where(
                Spot.source_name == data["source_name"],
                Spot.source_id == data["source_id"],
            )
        ).scalar_one_or_none()
        now = datetime.now()
        if spot:
            for field in IMPORT_FIELDS:
                if field in data:
                    setattr(spot, field, data[field])
            spot.imported_at = now
        else:
            spot = Spot(**data)
            spot.imported_at = now
            db.add(spot)
        db.commit()
        db.refresh(spot)
        return spot
    except Exception:
        db.rollback()
        raise


def list_spots(
    db: Session,
    spot_type: str | None = None,
    toilet_free_only: bool = False,
    toilet_24h: bool = False,
    toilet_barrier_free: bool = False,
    smoking_types: Iterable[str] | None = None,
    official_only: bool = False,
) -> list[Spot]:
    """Return visible spots, newest first.

    Toilet and smoking filters only narrow spots of their own type; other
    types pass through untouched.
    """
    stmt = select(Spot).where(Spot.status.in_(VISIBLE_STATUSES))
    if spot_type:
        stmt = stmt.where(Spot.type == spot_type)
    if official_only:
        stmt = stmt.where(Spot.is_official.is_(True))
    if toilet_free_only:
        stmt = stmt.where(or_(Spot.type != "toilet", Spot.toilet_is_free.is_(True)))
    if toilet_24h:
        stmt = stmt.where(or_(Spot.type != "toilet", Spot.toilet_open_24h.is_(True)))
    if toilet_barrier_free:
        stmt = stmt.where(or_(Spot.type != "toilet", Spot.toilet_barrier_free.is_(True)))
    smoking_types = [s for s in (smoking_types or []) if s]
    if smoking_types:
        stmt = stmt.where(or_(Spot.type != "smoking", Spot.smoking_type.in_(smoking_types)))
    stmt = stmt.order_by(Spot.created_at.desc())
    return list(db.execute(stmt).scalars().all())


def get_spot(db: Session, spot_id: str) -> Spot:
    spot = db.get(Spot, spot_id)
    if spot is None:
        raise LookupError(f"Spot not found: {spot_id}")
    return spot


def create_spot(db: Session, payload: SpotCreate) -> Spot:
    """Store a user-submitted spot after checking the daily quota."""
    enforce_rate_limit(db, payload.anonymous_id, "spot")

    is_toilet = payload.type == "toilet"
    is_smoking = payload.type == "smoking"
    spot = Spot(
        type=payload.type,
        title=payload.title or None,
        description=payload.description,
        evidence_hint=payload.evidence_hint or None,
        lat=payload.lat,
        lng=payload.lng,
        region_tag=settings.default_region_tag,
        status="active",
        is_official=False,
        anonymous_id=payload.anonymous_id,
        toilet_is_free=payload.toilet_is_free if is_toilet else None,
        toilet_open_24h=payload.toilet_open_24h if is_toilet else None,
        toilet_barrier_free=payload.toilet_barrier_free if is_toilet else None,
        smoking_type=payload.smoking_type if is_smoking else None,
        smoking_ashtray=payload.smoking_ashtray if is_smoking else None,
    )
    try:
        db.add(spot)
        db.commit()
        db.refresh(spot)
    except Exception:
        db.rollback()
        raise
    increment_rate_limit(db, payload.anonymous_id, "spot")
    return spot
