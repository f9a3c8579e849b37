import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)


class GeocodeCacheStore:
    """JSON file cache of address → coordinates.

    The file maps an address to ``{"lat", "lng", "geocodedAt"}``. Entries are
    only ever added; every new entry rewrites the whole file.
    """

    def __init__(self, cache_path: str = "geocode_cache.json") -> None:
        self.path = Path(cache_path)
        if not self.path.parent.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self.entries: Dict[str, Dict] = self._load()

    def _load(self) -> Dict[str, Dict]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Failed to load geocode cache %s, starting fresh: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Geocode cache %s is not a JSON object, starting fresh", self.path)
            return {}
        return data

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, address: str) -> bool:
        return address in self.entries

    def get(self, address: str) -> Optional[Tuple[float, float]]:
        entry = self.entries.get(address)
        if not entry:
            return None
        try:
            return float(entry["lat"]), float(entry["lng"])
        except (KeyError, TypeError, ValueError):
            logger.warning("Unreadable geocode cache entry for %s, geocoding again: %r", address, entry)
            return None

    def put(self, address: str, lat: float, lng: float) -> None:
        self.entries[address] = {
            "lat": lat,
            "lng": lng,
            "geocodedAt": datetime.now(timezone.utc).isoformat(),
        }
        self.save()

    def save(self) -> None:
        with self.path.open("w", encoding="utf-8") as f:
            json.dump(self.entries, f, ensure_ascii=False, indent=2)


def write_failed_rows(path: Path, rows: Iterable[Dict]) -> None:
    rows = list(rows)
    if not rows:
        return
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(rows, f, ensure_ascii=False, indent=2)
