"""Review persistence."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.models.review import Review
from app.schemas.review import ReviewCreate
from app.services.rate_limit import enforce_rate_limit, increment_rate_limit
from app.services.spots import get_spot


def list_reviews(db: Session, spot_id: str) -> list[Review]:
    """Reviews for one spot, newest first."""
    get_spot(db, spot_id)
    stmt = select(Review).where(Review.spot_id == spot_id).order_by(Review.created_at.desc())
    return list(db.execute(stmt).scalars().all())


def create_review(db: Session, payload: ReviewCreate) -> Review:
    get_spot(db, payload.spot_id)
    enforce_rate_limit(db, payload.anonymous_id, "review")

    review = Review(
        spot_id=payload.spot_id,
        body=payload.body,
        confidence=payload.confidence,
        visited_at=payload.visited_at,
        anonymous_id=payload.anonymous_id,
    )
    try:
        db.add(review)
        db.commit()
        db.refresh(review)
    except Exception:
        db.rollback()
        raise
    increment_rate_limit(db, payload.anonymous_id, "review")
    return review
