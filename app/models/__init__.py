"""Import all models so metadata is complete."""

from app.models.spot import Spot  # noqa: F401
from app.models.review import Review  # noqa: F401
from app.models.report import Report  # noqa: F401
from app.models.rate_limit import RateLimit  # noqa: F401
