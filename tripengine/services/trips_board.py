"""
Trips Board - Owns the traveler's trip list and the lifecycle prompts shown
against it.
"""
import logging
from typing import Optional

from .clock import Clock
from .lifecycle import PromptKind, StatusPrompt, TripLifecycleEvaluator
from .trip_cache import TripCache
from .trip_editor import TripEditDraft, TripMutationService
from .trips_client import TripsClient
from ..errors import TripEngineError, ValidationError
from ..models.trip import Trip, TripPreview, TripRequest, TripStatus

logger = logging.getLogger(__name__)

TRIPS_PER_PAGE = 6


class TripsBoard:
    """
    Trip list of one traveler session.

    The cache and the evaluator's shown-prompt set live as long as the board.
    Remote failures propagate and leave the cache unchanged, except for
    silent refreshes which keep the last known-good list.
    """

    def __init__(self, client: TripsClient, clock: Optional[Clock] = None):
        self.client = client
        self.cache = TripCache()
        self.evaluator = TripLifecycleEvaluator(clock)
        self.editor = TripMutationService(client, self.cache, refresh=self.refresh_silently)

    @property
    def trips(self) -> list[Trip]:
        return self.cache.trips

    async def load(self) -> list[Trip]:
        trips = await self.client.get_all()
        self.cache.set_all(trips)
        logger.info(f"Loaded {len(trips)} trips")
        return self.cache.trips

    async def refresh_silently(self):
        """Re-fetch the list; on failure keep what is displayed."""
        try:
            trips = await self.client.get_all()
        except TripEngineError as e:
            logger.warning(f"Silent trip refresh failed, keeping {len(self.cache)} cached trips: {e}")
            return
        self.cache.set_all(trips)

    def next_prompt(self) -> Optional[StatusPrompt]:
        return self.evaluator.scan(self.cache.trips)

    async def confirm_prompt(self, prompt: StatusPrompt) -> Trip:
        """Apply the transition the prompt asked about."""
        if prompt.kind == PromptKind.START:
            updated = await self.client.start(prompt.trip.id)
        else:
            updated = await self.client.complete(prompt.trip.id)

        self.cache.replace(updated)
        logger.info(f"Trip {updated.id} is now {updated.status.value}")
        await self.refresh_silently()
        return self.cache.get(updated.id) or updated

    def decline_prompt(self, prompt: StatusPrompt) -> Optional[TripEditDraft]:
        """
        Declining a start prompt changes nothing. Declining a complete prompt
        opens the trip for editing so its end date can be extended.
        """
        if prompt.kind == PromptKind.START:
            return None
        trip = self.cache.get(prompt.trip.id) or prompt.trip
        return TripEditDraft.from_trip(trip)

    async def create_trip(self, request: TripRequest) -> Trip:
        trip = await self.client.create(request)
        self.cache.add(trip)
        logger.info(f"Created trip {trip.id} for {trip.display_name} with status {trip.status.value}")
        return trip

    async def preview_trip(self, request: TripRequest) -> TripPreview:
        return await self.client.preview(request)

    async def cancel_trip(self, trip_id: str) -> Trip:
        trip = self._require(trip_id)
        if trip.status.is_closed:
            raise ValidationError(f"A {trip.status.value.lower()} trip cannot be cancelled", field="status")

        returned = await self.client.cancel(trip_id)
        if returned is not None and returned.status == TripStatus.CANCELLED:
            self.cache.replace(returned)
        else:
            self.cache.mark_cancelled(trip_id)
        return self.cache.get(trip_id)

    async def delete_trip(self, trip_id: str):
        """Remove a cancelled trip. Uses the same endpoint as cancel."""
        trip = self._require(trip_id)
        if trip.status != TripStatus.CANCELLED:
            raise ValidationError("Only cancelled trips can be deleted", field="status")

        await self.client.cancel(trip_id)
        self.cache.remove(trip_id)
        logger.info(f"Deleted trip {trip_id}")

    def filter_by_status(self, status: Optional[TripStatus] = None) -> list[Trip]:
        if status is None:
            return self.cache.trips
        return [trip for trip in self.cache.trips if trip.status == status]

    def paginate(self, trips: list[Trip], page: int, per_page: int = TRIPS_PER_PAGE) -> list[Trip]:
        page = max(1, page)
        return trips[(page - 1) * per_page:page * per_page]

    def _require(self, trip_id: str) -> Trip:
        trip = self.cache.get(trip_id)
        if trip is None:
            raise ValidationError(f"Trip {trip_id} not found", field="trip_id")
        return trip
