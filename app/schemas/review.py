"""Schemas for reviews."""

from datetime import date, datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

Confidence = Literal["sure", "maybe", "unsure"]


class ReviewCreate(BaseModel):
    spot_id: str = Field(..., max_length=36, description="Spot being reviewed")
    body: str = Field(..., min_length=10, max_length=1000, description="口コミは10文字以上必要です")
    confidence: Confidence
    visited_at: Optional[date] = None
    anonymous_id: str = Field(..., min_length=1, max_length=100)


class ReviewOut(BaseModel):
    id: str
    spot_id: str
    body: str
    confidence: Confidence
    visited_at: Optional[date] = None
    created_at: datetime

    model_config = {"from_attributes": True}
