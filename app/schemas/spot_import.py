"""Schemas for the CSV geocode-and-import run."""

from pydantic import BaseModel, Field


class CsvRow(BaseModel):
    source_id: str = ""
    name: str = ""
    address: str = ""
    category: str = ""
    note: str = ""


class FailedRow(BaseModel):
    source_id: str
    name: str
    address: str
    reason: str


class ImportSummary(BaseModel):
    total: int = 0
    success: int = 0
    failed: list[FailedRow] = Field(default_factory=list)
    skipped: int = 0
    geocode_requests: int = 0

    @property
    def failed_count(self) -> int:
        return len(self.failed)
