"""Schemas for reports."""

from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, Field

ReportReason = Literal["illegal_or_danger", "outdated", "harassment", "wrong_location", "other"]


class ReportCreate(BaseModel):
    target_type: Literal["spot", "review"]
    target_id: str = Field(..., max_length=36)
    reason: ReportReason
    note: Optional[str] = Field(None, max_length=500)
    anonymous_id: str = Field(..., min_length=1, max_length=100)


class ReportOut(BaseModel):
    id: str
    target_type: str
    target_id: str
    reason: ReportReason
    created_at: datetime

    model_config = {"from_attributes": True}
