"""
大阪市公衆トイレ CSV インポートスクリプト
---------------------------------------
data/osaka_toilets.csv の住所を Nominatim でジオコーディングし、spots テーブルに
(source_name, source_id) をキーとして upsert します。

    python scripts/geocode_and_import_osaka_csv.py [--dry-run]

Outputs:
    data/geocode_cache.json  - geocoding cache (address -> lat/lng)
    data/import_failed.json  - rows that could not be imported
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

BACKEND_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(BACKEND_ROOT / ".env")

sys.path.insert(0, str(BACKEND_ROOT))

from app.core.config import settings
from app.services.spot_import import SessionUpserter, format_summary, import_csv_file

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(message)s")
logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="大阪市公衆トイレ CSV → geocode → spots upsert")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Geocode and build payloads without writing to the database",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    print("=== 大阪市公衆トイレ インポートスクリプト ===\n")

    if not os.getenv("DATABASE_URL"):
        print("Error: Missing environment variables", file=sys.stderr)
        print("Required: DATABASE_URL", file=sys.stderr)
        print("\nYou can run in dry-run mode without a database by adding --dry-run", file=sys.stderr)
        if not args.dry_run:
            return 1

    if args.dry_run:
        print("*** DRY RUN MODE - No data will be written to the database ***\n")

    csv_path = settings.import_csv_path
    print(f"Reading CSV: {csv_path}")
    if not csv_path.exists():
        print(f"Error: CSV file not found: {csv_path}", file=sys.stderr)
        return 1

    db = None
    upserter = None
    if not args.dry_run:
        from app.db.session import SessionLocal

        db = SessionLocal()
        upserter = SessionUpserter(db)

    try:
        summary = asyncio.run(
            import_csv_file(
                csv_path=csv_path,
                cache_path=settings.geocode_cache_path,
                failed_path=settings.import_failed_path,
                upserter=upserter,
                dry_run=args.dry_run,
            )
        )
    finally:
        if db is not None:
            db.close()

    print()
    print(format_summary(summary, dry_run=args.dry_run))
    return 0


if __name__ == "__main__":
    sys.exit(main())
