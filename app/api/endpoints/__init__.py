"""Expose API endpoint routers."""

from app.api.endpoints import reports, reviews, spots

__all__ = ["spots", "reviews", "reports"]
