"""
Database schema initialization
------------------------------
Creates the spots, reviews, reports and rate_limits tables.
"""

import sys
from pathlib import Path

from dotenv import load_dotenv

BACKEND_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(BACKEND_ROOT / ".env")

sys.path.insert(0, str(BACKEND_ROOT))

from sqlalchemy import inspect

from app.db.init_db import init_db
from app.db.session import engine


def init_db_schema() -> None:
    """Create missing tables and list what exists afterwards."""
    print("Initializing database schema...")
    init_db()
    print("Tables created")

    print("\nTables:")
    for name in sorted(inspect(engine).get_table_names()):
        print(f"  - {name}")


if __name__ == "__main__":
    init_db_schema()
