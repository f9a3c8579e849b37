"""
Spot lookup index creation
--------------------------
Indexes for the map listing query (status + type, newest first) and for
bounding-box lookups on coordinates.
"""

import sys
from pathlib import Path

from dotenv import load_dotenv

BACKEND_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(BACKEND_ROOT / ".env")

sys.path.insert(0, str(BACKEND_ROOT))

from sqlalchemy import text

from app.db.session import engine

INDEXES = {
    "spots_status_type_created_idx": "CREATE INDEX IF NOT EXISTS spots_status_type_created_idx "
    "ON spots (status, type, created_at DESC)",
    "spots_lat_lng_idx": "CREATE INDEX IF NOT EXISTS spots_lat_lng_idx ON spots (lat, lng)",
    "reviews_spot_created_idx": "CREATE INDEX IF NOT EXISTS reviews_spot_created_idx "
    "ON reviews (spot_id, created_at DESC)",
}


def create_indexes() -> None:
    """Create lookup indexes, continuing past individual failures."""
    print("Creating indexes...")

    with engine.connect() as conn:
        for name, ddl in INDEXES.items():
            print(f"  - {name}")
            try:
                conn.execute(text(ddl))
                conn.commit()
                print(f"  ok: {name}")
            except Exception as e:
                print(f"  failed: {name}: {e}")
                conn.rollback()

    print("\nDone")


if __name__ == "__main__":
    create_indexes()
