"""Pydantic schemas for spots."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

SpotType = Literal["toilet", "smoking", "cafe"]
SpotStatus = Literal["active", "needs_verify", "hidden"]
SmokingType = Literal["designated_area", "inside_ok", "outdoor_ok", "heated_only", "unclear"]

SPOT_TYPES = ("toilet", "smoking", "cafe")
DESCRIPTION_MIN_LENGTH = 20


class SpotCreate(BaseModel):
    """User submission from the add-spot form."""

    type: SpotType
    title: Optional[str] = Field(None, max_length=100)
    description: str = Field(
        ...,
        min_length=DESCRIPTION_MIN_LENGTH,
        max_length=1000,
        description="説明は20文字以上必要です",
    )
    evidence_hint: Optional[str] = Field(None, max_length=500)
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    anonymous_id: str = Field(..., min_length=1, max_length=100)
    # Toilet specific
    toilet_is_free: Optional[bool] = None
    toilet_open_24h: Optional[bool] = None
    toilet_barrier_free: Optional[bool] = None
    # Smoking specific
    smoking_type: Optional[SmokingType] = None
    smoking_ashtray: Optional[bool] = None
    agreed_to_rules: Literal[True] = Field(..., description="利用規約への同意が必要です")


class SpotOut(BaseModel):
    id: str
    type: SpotType
    title: Optional[str] = None
    description: str
    evidence_hint: Optional[str] = None
    lat: float
    lng: float
    region_tag: str
    status: SpotStatus
    is_official: bool
    created_at: datetime
    updated_at: datetime
    toilet_is_free: Optional[bool] = None
    toilet_open_24h: Optional[bool] = None
    toilet_barrier_free: Optional[bool] = None
    smoking_type: Optional[SmokingType] = None
    smoking_ashtray: Optional[bool] = None
    source_name: Optional[str] = None
    source_url: Optional[str] = None

    model_config = {"from_attributes": True}
