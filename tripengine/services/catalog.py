"""
Catalog Services.
Provider-package trips come from the in-package catalog; countries, cities and
activities come from the remote catalog service behind a short-lived cache.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Union

from .clock import Clock, SystemClock
from .trips_client import ServiceClient
from ..config import settings
from ..data.provider_trips import provider_trips
from ..models.catalog import CatalogActivity, City, Country, ProviderTrip, TripCategory

logger = logging.getLogger(__name__)


class ProviderCatalog:
    """Lookup over the provider's package trips."""

    def __init__(self, trips: Optional[list[ProviderTrip]] = None):
        self._trips = list(provider_trips if trips is None else trips)

    @property
    def trips(self) -> list[ProviderTrip]:
        return list(self._trips)

    def get_trip(self, trip_id: str) -> Optional[ProviderTrip]:
        for trip in self._trips:
            if trip.id == trip_id:
                return trip
        return None

    def get_trips_by_category(self, category: Union[TripCategory, str]) -> list[ProviderTrip]:
        if category == "all":
            return self.trips
        category = TripCategory(category)
        return [trip for trip in self._trips if trip.category == category]


@dataclass
class CacheEntry:
    value: Any
    cached_at: datetime
    ttl_seconds: int

    def is_fresh(self, now: datetime) -> bool:
        return (now - self.cached_at).total_seconds() < self.ttl_seconds


class TTLCache:
    """In-memory cache whose entries expire after a fixed time-to-live."""

    def __init__(self, ttl_seconds: int, clock: Optional[Clock] = None):
        self.ttl_seconds = ttl_seconds
        self.clock = clock or SystemClock()
        self._entries: dict[str, CacheEntry] = {}

    def get(self, key: str) -> Any:
        """Get cached value if fresh, None otherwise."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.is_fresh(self.clock.now()):
            return entry.value
        del self._entries[key]
        return None

    def set(self, key: str, value: Any):
        self._entries[key] = CacheEntry(
            value=value,
            cached_at=self.clock.now(),
            ttl_seconds=self.ttl_seconds,
        )

    def clear(self):
        self._entries.clear()


class CatalogClient(ServiceClient):
    """Read-only catalog service client with client-side caching."""

    def __init__(self, cache: Optional[TTLCache] = None, **kwargs):
        super().__init__(**kwargs)
        self.cache = cache or TTLCache(settings.catalog_cache_ttl_seconds)

    async def _cached_get(self, path: str) -> Any:
        cached = self.cache.get(path)
        if cached is not None:
            return cached
        data = await self._request("GET", path)
        self.cache.set(path, data)
        return data

    async def get_countries(self) -> list[Country]:
        data = await self._cached_get("/countries")
        return [self._parse(Country, item, "/countries") for item in data or []]

    async def get_country(self, country_id: str) -> Country:
        """Country with nested cities and activities."""
        path = f"/countries/{country_id}/full"
        return self._parse(Country, await self._cached_get(path), path)

    async def get_city(self, city_id: str) -> City:
        path = f"/cities/{city_id}"
        return self._parse(City, await self._cached_get(path), path)

    async def get_city_activities(self, city_id: str) -> list[CatalogActivity]:
        path = f"/categories/city/{city_id}"
        data = await self._cached_get(path)
        activities = [self._parse(CatalogActivity, item, path) for item in data or []]
        logger.info(f"Loaded {len(activities)} activities for city {city_id}")
        return activities
