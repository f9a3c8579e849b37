"""Spot endpoints."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.review import ReviewOut
from app.schemas.spot import SpotCreate, SpotOut, SpotType
from app.services.rate_limit import RateLimitExceeded
from app.services.reviews import list_reviews
from app.services.spots import create_spot, get_spot, list_spots

router = APIRouter(prefix="/spots", tags=["spots"])


@router.get("", response_model=list[SpotOut])
def read_spots(
    type: SpotType | None = None,
    toilet_free_only: bool = False,
    toilet_24h: bool = False,
    toilet_barrier_free: bool = False,
    smoking_types: str | None = None,
    official_only: bool = False,
    db: Session = Depends(get_db),
) -> list[SpotOut]:
    """Return visible spots; smoking_types is comma separated."""
    smoking = [s.strip() for s in smoking_types.split(",")] if smoking_types else None
    spots = list_spots(
        db,
        spot_type=type,
        toilet_free_only=toilet_free_only,
        toilet_24h=toilet_24h,
        toilet_barrier_free=toilet_barrier_free,
        smoking_types=smoking,
        official_only=official_only,
    )
    return [SpotOut.model_validate(s) for s in spots]


@router.get("/{spot_id}", response_model=SpotOut)
def read_spot(spot_id: str, db: Session = Depends(get_db)) -> SpotOut:
    try:
        return SpotOut.model_validate(get_spot(db, spot_id))
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc


@router.get("/{spot_id}/reviews", response_model=list[ReviewOut])
def read_spot_reviews(spot_id: str, db: Session = Depends(get_db)) -> list[ReviewOut]:
    try:
        reviews = list_reviews(db, spot_id)
    except LookupError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return [ReviewOut.model_validate(r) for r in reviews]


@router.post("", response_model=SpotOut, status_code=status.HTTP_201_CREATED)
def submit_spot(payload: SpotCreate, db: Session = Depends(get_db)) -> SpotOut:
    """Store a user-submitted spot."""
    try:
        spot = create_spot(db, payload)
    except RateLimitExceeded as exc:
        raise HTTPException(status_code=status.HTTP_429_TOO_MANY_REQUESTS, detail=str(exc)) from exc
    return SpotOut.model_validate(spot)
