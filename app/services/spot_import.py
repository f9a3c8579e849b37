"""CSV geocode-and-import pipeline for official spots.

Rows are processed strictly one after another: cache lookup, geocoding on a
miss (followed by a fixed pause), payload assembly and an upsert keyed by
``(source_name, source_id)``. Failures never stop the run; they are collected
and written to a JSON file once at the end.
"""

from __future__ import annotations

import asyncio
import csv
import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, Protocol

import aiohttp
from sqlalchemy.orm import Session

from app.core.config import settings
from app.schemas.spot import DESCRIPTION_MIN_LENGTH, SPOT_TYPES
from app.schemas.spot_import import CsvRow, FailedRow, ImportSummary
from app.services.geocoding import CachedGeocoder, Geocoder, NominatimGeocoder
from app.services.spots import upsert_spot
from utils.storage_manager import GeocodeCacheStore, write_failed_rows

logger = logging.getLogger(__name__)

IMPORT_ANONYMOUS_ID = "system_import"
DESCRIPTION_MAX_LENGTH = 1000
EVIDENCE_HINT_MAX_LENGTH = 500

# Human readable label per spot type, used in generated titles and descriptions
SPOT_TYPE_LABELS = {
    "toilet": "公衆トイレ",
    "smoking": "喫煙所",
    "cafe": "カフェ",
}
DESCRIPTION_PADDING = "情報提供をお待ちしています。"
GEOCODING_FAILED = "Geocoding failed"


class Upserter(Protocol):
    def upsert(self, payload: dict[str, Any]) -> None:
        ...


class SessionUpserter:
    """Writes payloads to the spots table through a SQLAlchemy session."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def upsert(self, payload: dict[str, Any]) -> None:
        upsert_spot(self.db, dict(payload))


def read_csv_rows(path: Path) -> list[CsvRow]:
    """Load facility rows; accepts either a ``source_id`` or an ``id`` column."""
    rows: list[CsvRow] = []
    with Path(path).open("r", encoding="utf-8-sig", newline="") as fp:
        reader = csv.DictReader(fp)
        for raw in reader:
            record = {
                (key or "").strip(): (value or "").strip()
                for key, value in raw.items()
                if key is not None
            }
            rows.append(
                CsvRow(
                    source_id=record.get("source_id") or record.get("id", ""),
                    name=record.get("name", ""),
                    address=record.get("address", ""),
                    category=record.get("category", ""),
                    note=record.get("note", ""),
                )
            )
    return rows


def pad_description(text: str) -> str:
    while len(text) < DESCRIPTION_MIN_LENGTH:
        text += DESCRIPTION_PADDING
    return text


def default_title(spot_type: str) -> str:
    return f"{SPOT_TYPE_LABELS.get(spot_type, SPOT_TYPE_LABELS['toilet'])}（自動登録）"


def generate_description(row: CsvRow, spot_type: str = "toilet") -> str:
    """Build a description between 20 and 1000 characters long."""
    parts = [f"{row.address}付近の{default_title(spot_type)}。"]
    if row.note:
        parts.append(f"設備: {row.note}。")
    parts.append("詳細は現地表示または口コミで更新予定。")
    return pad_description(" ".join(parts))[:DESCRIPTION_MAX_LENGTH]


def resolve_spot_type(category: str, default: str | None = None) -> str:
    value = (category or "").strip().lower()
    if value in SPOT_TYPES:
        return value
    return default or settings.import_default_spot_type


def build_spot_payload(
    row: CsvRow,
    lat: float,
    lng: float,
    source_name: str | None = None,
    source_url: str | None = None,
) -> dict[str, Any]:
    """Merge a CSV row with resolved coordinates and the import defaults."""
    note = row.note or ""
    spot_type = resolve_spot_type(row.category)
    is_toilet = spot_type == "toilet"
    return {
        "type": spot_type,
        "title": (row.name or default_title(spot_type))[:100],
        "description": generate_description(row, spot_type),
        "evidence_hint": note[:EVIDENCE_HINT_MAX_LENGTH] or None,
        "lat": lat,
        "lng": lng,
        "region_tag": settings.default_region_tag,
        "status": "active",
        "is_official": True,
        "anonymous_id": IMPORT_ANONYMOUS_ID,
        # toilet columns stay empty on other spot types
        "toilet_is_free": True if is_toilet else None,
        "toilet_open_24h": True if is_toilet and "24時間" in note else None,
        "toilet_barrier_free": True if is_toilet and ("バリアフリー" in note or "身障者" in note) else None,
        "source_name": source_name or settings.import_source_name,
        "source_id": row.source_id,
        "source_url": source_url or settings.import_source_url,
    }


def _failure(row: CsvRow, reason: str) -> FailedRow:
    return FailedRow(source_id=row.source_id, name=row.name, address=row.address, reason=reason)


async def run_import(
    rows: list[CsvRow],
    geocoder: CachedGeocoder,
    upserter: Optional[Upserter],
    dry_run: bool = False,
    delay: float | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> ImportSummary:
    """Process every row in order and return the run summary."""
    if not dry_run and upserter is None:
        raise ValueError("An upserter is required unless running in dry-run mode")
    delay = settings.geocode_delay_seconds if delay is None else delay

    summary = ImportSummary(total=len(rows))
    for index, row in enumerate(rows, start=1):
        logger.info("[%d/%d] Processing: %s", index, len(rows), row.name or row.source_id)

        if not row.address:
            logger.info("  [SKIP] No address")
            summary.skipped += 1
            continue

        requests_before = geocoder.requests
        location = await geocoder.lookup(row.address)
        made_request = geocoder.requests > requests_before

        if location is None:
            logger.info("  [FAILED] Could not geocode address")
            summary.failed.append(_failure(row, GEOCODING_FAILED))
        else:
            logger.info("  [OK] Location: %s, %s", location.lat, location.lng)
            payload = build_spot_payload(row, location.lat, location.lng)

            if dry_run:
                logger.info("  [DRY RUN] Would upsert: %s", json.dumps(payload, ensure_ascii=False))
                summary.success += 1
            else:
                try:
                    upserter.upsert(payload)
                except Exception as exc:
                    logger.info("  [DB ERROR] %s", exc)
                    summary.failed.append(_failure(row, f"DB error: {exc}"))
                else:
                    logger.info("  [INSERTED]")
                    summary.success += 1

        if made_request and delay > 0:
            await sleep(delay)

    summary.geocode_requests = geocoder.requests
    return summary


async def import_csv_file(
    csv_path: Path,
    cache_path: Path,
    failed_path: Path,
    upserter: Optional[Upserter],
    dry_run: bool = False,
    geocoder: Geocoder | None = None,
    delay: float | None = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> ImportSummary:
    """Load the CSV and cache, run the import, then write the failure file."""
    rows = read_csv_rows(csv_path)
    logger.info("Found %d rows", len(rows))

    cache = GeocodeCacheStore(str(cache_path))
    logger.info("Loaded geocode cache with %d entries", len(cache))

    if geocoder is not None:
        summary = await run_import(rows, CachedGeocoder(geocoder, cache), upserter, dry_run, delay, sleep)
    else:
        async with aiohttp.ClientSession() as session:
            nominatim = NominatimGeocoder(session)
            summary = await run_import(rows, CachedGeocoder(nominatim, cache), upserter, dry_run, delay, sleep)

    if summary.failed:
        write_failed_rows(failed_path, [f.model_dump() for f in summary.failed])
        logger.info("Failed rows saved to: %s", failed_path)
    return summary


def format_summary(summary: ImportSummary, dry_run: bool = False) -> str:
    lines = [
        "=== Import Summary ===",
        f"Total rows: {summary.total}",
        f"Success: {summary.success}",
        f"Failed: {summary.failed_count}",
        f"Skipped: {summary.skipped}",
        f"Geocoding requests: {summary.geocode_requests}",
    ]
    if dry_run:
        lines.append("")
        lines.append("*** This was a dry run. No data was written to the database. ***")
    return "\n".join(lines)
