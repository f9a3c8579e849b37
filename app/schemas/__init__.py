"""Expose schemas for easier import."""

from app.schemas.spot import SpotCreate, SpotOut  # noqa: F401
from app.schemas.review import ReviewCreate, ReviewOut  # noqa: F401
from app.schemas.report import ReportCreate, ReportOut  # noqa: F401
from app.schemas.spot_import import CsvRow, FailedRow, ImportSummary  # noqa: F401
