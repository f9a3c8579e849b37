"""Forward geocoding through Nominatim, memoized by a JSON file cache."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Protocol

import aiohttp

from app.core.config import settings
from utils.storage_manager import GeocodeCacheStore

logger = logging.getLogger(__name__)


class Geocoder(Protocol):
    async def geocode(self, address: str) -> Optional[tuple[float, float]]:
        ...


@dataclass
class GeocodeResult:
    lat: float
    lng: float
    from_cache: bool


class NominatimGeocoder:
    """Best-match lookup against the Nominatim search endpoint.

    Errors never propagate: HTTP failures, network errors and empty results
    all come back as ``None``.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str | None = None,
        user_agent: str | None = None,
        city_hint: str | None = None,
        country_codes: str | None = None,
        timeout: float | None = None,
    ) -> None:
        self._session = session
        self.base_url = base_url or settings.nominatim_url
        self.user_agent = user_agent or settings.geocoder_user_agent
        self.city_hint = settings.geocode_city_hint if city_hint is None else city_hint
        self.country_codes = country_codes or settings.geocode_country_codes
        self.timeout = timeout or settings.geocode_timeout_seconds

    def build_query(self, address: str) -> str:
        return f"{address} {self.city_hint}".strip()

    async def geocode(self, address: str) -> Optional[tuple[float, float]]:
        params = {
            "q": self.build_query(address),
            "format": "json",
            "limit": "1",
            "countrycodes": self.country_codes,
        }
        headers = {
            "User-Agent": self.user_agent,
            "Accept": "application/json",
        }
        try:
            async with self._session.get(
                self.base_url,
                params=params,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if not response.ok:
                    logger.error("Nominatim API error: %s", response.status)
                    return None
                data = await response.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as exc:
            logger.error('Geocoding error for "%s": %s', address, exc)
            return None

        if not data:
            return None
        try:
            return float(data[0]["lat"]), float(data[0]["lon"])
        except (KeyError, IndexError, TypeError, ValueError):
            logger.error('Unexpected Nominatim payload for "%s": %r', address, data[0])
            return None


class CachedGeocoder:
    """Check the cache first, hit the network only on a miss."""

    def __init__(self, geocoder: Geocoder, cache: GeocodeCacheStore) -> None:
        self.geocoder = geocoder
        self.cache = cache
        self.requests = 0

    async def lookup(self, address: str) -> Optional[GeocodeResult]:
        cached = self.cache.get(address)
        if cached is not None:
            logger.info("  [CACHE HIT] %s", address)
            return GeocodeResult(lat=cached[0], lng=cached[1], from_cache=True)

        logger.info("  [GEOCODING] %s", address)
        self.requests += 1
        result = await self.geocoder.geocode(address)
        if result is None:
            return None

        lat, lng = result
        self.cache.put(address, lat, lng)
        return GeocodeResult(lat=lat, lng=lng, from_cache=False)
