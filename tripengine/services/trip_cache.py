"""
Trip Cache - Local read/write copy of the traveler's trip list.
"""
from typing import Optional

from ..models.trip import Trip, TripStatus


class TripCache:
    """Ordered trip list, mutated only after successful remote writes."""

    def __init__(self, trips: Optional[list[Trip]] = None):
        self._trips: list[Trip] = list(trips or [])

    @property
    def trips(self) -> list[Trip]:
        return list(self._trips)

    def __len__(self) -> int:
        return len(self._trips)

    def get(self, trip_id: str) -> Optional[Trip]:
        for trip in self._trips:
            if trip.id == trip_id:
                return trip
        return None

    def set_all(self, trips: list[Trip]):
        self._trips = list(trips)

    def add(self, trip: Trip):
        self._trips.insert(0, trip)

    def replace(self, trip: Trip) -> bool:
        """Swap in the service's copy of a trip. Returns False if it was not cached."""
        for index, cached in enumerate(self._trips):
            if cached.id == trip.id:
                self._trips[index] = trip
                return True
        return False

    def mark_cancelled(self, trip_id: str):
        trip = self.get(trip_id)
        if trip is not None:
            self.replace(trip.model_copy(update={"status": TripStatus.CANCELLED}))

    def remove(self, trip_id: str):
        self._trips = [trip for trip in self._trips if trip.id != trip_id]
