"""
Trip Editor - Edits an existing trip's dates, duration and activities while
keeping every line total and the grand total consistent with the draft.
"""
import logging
from datetime import date, timedelta
from typing import Awaitable, Callable, Optional

from pydantic import BaseModel, Field

from .pricing import clamp_minimum, line_item_total
from .trip_cache import TripCache
from .trips_client import TripsClient
from ..errors import ValidationError
from ..models.trip import DurationType, Trip, TripActivityRequest, TripRequest

logger = logging.getLogger(__name__)

MIN_DURATION_DAYS = 1
MAX_DURATION_DAYS = 30


class EditableActivity(BaseModel):
    """One activity row of the edit draft."""
    activity_id: str
    activity_name: str = ""
    duration_type: DurationType
    duration_value: int = Field(default=1, ge=1)
    quantity: int = Field(default=1, ge=1)
    unit_price: float = Field(default=0.0, ge=0)
    total_price: float = Field(default=0.0, ge=0)


class TripEditDraft:
    """
    Editable copy of a persisted trip.

    Every change to duration type, duration value or quantity recomputes that
    row's total immediately, so grand_total always matches the rows.
    """

    def __init__(
        self,
        trip_id: str,
        city_id: str,
        start_date: date,
        duration_days: int,
        activities: list[EditableActivity]
    ):
        self.trip_id = trip_id
        self.city_id = city_id
        self.start_date = start_date
        self.duration_days = duration_days
        self.activities = activities

    @classmethod
    def from_trip(cls, trip: Trip) -> "TripEditDraft":
        activities = [
            EditableActivity(
                activity_id=item.activity_id,
                activity_name=item.activity_name,
                duration_type=item.duration_type,
                duration_value=item.duration_value,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.subtotal,
            )
            for item in trip.selected_activities
        ]
        draft = cls(trip.id, trip.city_id, trip.start_date, MIN_DURATION_DAYS, activities)
        draft.set_duration_days(trip.duration_days)
        return draft

    @property
    def end_date(self) -> date:
        return self.start_date + timedelta(days=self.duration_days - 1)

    @property
    def grand_total(self) -> float:
        return sum(activity.total_price for activity in self.activities)

    def set_start_date(self, start_date: date):
        self.start_date = start_date

    def set_duration_days(self, days: int) -> int:
        self.duration_days = min(MAX_DURATION_DAYS, max(MIN_DURATION_DAYS, days))
        return self.duration_days

    def update_activity(self, index: int, **fields) -> EditableActivity:
        """Merge fields into a row and recompute its total."""
        current = self._row(index)

        for name in ("duration_value", "quantity"):
            if name in fields:
                fields[name] = clamp_minimum(int(fields[name]))
        if "duration_type" in fields:
            fields["duration_type"] = DurationType(fields["duration_type"])
        fields.pop("activity_id", None)
        fields.pop("total_price", None)

        updated = current.model_copy(update=fields)
        updated.total_price = line_item_total(
            updated.unit_price,
            updated.duration_value,
            updated.quantity,
        )
        self.activities[index] = updated
        return updated

    def remove_activity(self, index: int) -> EditableActivity:
        self._row(index)
        return self.activities.pop(index)

    def to_request(self) -> TripRequest:
        """Payload with the same shape as the create request."""
        return TripRequest(
            city_id=self.city_id,
            start_date=self.start_date,
            duration_days=self.duration_days,
            selected_activities=[
                TripActivityRequest(
                    activity_id=activity.activity_id,
                    duration_type=activity.duration_type,
                    duration_value=activity.duration_value,
                    quantity=activity.quantity,
                    unit_price=activity.unit_price,
                    total_price=activity.total_price,
                    activity_name=activity.activity_name,
                )
                for activity in self.activities
            ],
        )

    def _row(self, index: int) -> EditableActivity:
        if not 0 <= index < len(self.activities):
            raise ValidationError(f"No activity at position {index}", field="activities")
        return self.activities[index]


class TripMutationService:
    """Submits edit drafts and keeps the local cache in step with the service."""

    def __init__(
        self,
        client: TripsClient,
        cache: TripCache,
        refresh: Optional[Callable[[], Awaitable[None]]] = None
    ):
        self.client = client
        self.cache = cache
        self.refresh = refresh

    def open(self, trip_id: str) -> TripEditDraft:
        trip = self._editable_trip(trip_id)
        return TripEditDraft.from_trip(trip)

    async def submit(self, draft: TripEditDraft) -> Trip:
        """
        Send the full update and adopt the service's copy of the trip.

        On failure the draft and the cache are left as they were and the
        error propagates to the caller.
        """
        self._editable_trip(draft.trip_id)
        request = draft.to_request()

        logger.info(
            f"Updating trip {draft.trip_id}: {len(request.selected_activities)} activities, "
            f"{draft.duration_days} days, draft total {draft.grand_total}"
        )
        updated = await self.client.update(draft.trip_id, request)
        self.cache.replace(updated)

        # Pick up fields the service derives (subtotals, totals, end date)
        if self.refresh is not None:
            await self.refresh()

        return self.cache.get(updated.id) or updated

    def _editable_trip(self, trip_id: str) -> Trip:
        trip = self.cache.get(trip_id)
        if trip is None:
            raise ValidationError(f"Trip {trip_id} not found", field="trip_id")
        if trip.status.is_closed:
            raise ValidationError(f"A {trip.status.value.lower()} trip cannot be edited", field="status")
        return trip
