"""Database initialization utilities."""

from app import models  # noqa: F401
from app.db.base import Base
from app.db.session import engine


def init_db() -> None:
    """Create all tables that do not exist yet."""
    Base.metadata.create_all(bind=engine)
