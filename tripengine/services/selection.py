"""
Activity Selection Store - The traveler's activity choices for one city.
Feeds the "book new trip" flow; makes no remote calls.
"""
import logging
from datetime import date
from typing import Optional

from pydantic import Field

from .pricing import line_item_total
from ..errors import ValidationError
from ..models.base import CamelModel
from ..models.catalog import CatalogActivity
from ..models.trip import DurationType, TripActivityRequest, TripRequest

logger = logging.getLogger(__name__)


class ActivitySelection(CamelModel):
    """Duration and quantity chosen for one activity."""
    activity_id: str
    duration_type: DurationType
    duration_value: int = Field(default=1, description="Hours or days; callers clamp to >= 1")
    quantity: int = Field(default=1, description="Units or people; callers clamp to >= 1")


class ActivitySelectionStore:
    """In-memory mapping of activity id to selection."""

    def __init__(self, activities: Optional[list[CatalogActivity]] = None):
        self._activities: dict[str, CatalogActivity] = {}
        self._selections: dict[str, ActivitySelection] = {}
        self.set_activities(activities or [])

    def set_activities(self, activities: list[CatalogActivity]):
        """Replace the activity catalog used for pricing. Selections are kept."""
        self._activities = {activity.id: activity for activity in activities}

    @property
    def selections(self) -> list[ActivitySelection]:
        return list(self._selections.values())

    def get(self, activity_id: str) -> Optional[ActivitySelection]:
        return self._selections.get(activity_id)

    def is_selected(self, activity_id: str) -> bool:
        return activity_id in self._selections

    def toggle(self, activity_id: str) -> Optional[ActivitySelection]:
        """Select an activity with defaults, or deselect it if already selected."""
        if activity_id in self._selections:
            del self._selections[activity_id]
            return None

        activity = self._activities.get(activity_id)
        default_type = (
            DurationType.HOURS if activity and activity.has_hourly_price else DurationType.DAYS
        )
        selection = ActivitySelection(
            activity_id=activity_id,
            duration_type=default_type,
            duration_value=1,
            quantity=1,
        )
        self._selections[activity_id] = selection
        return selection

    def update(self, activity_id: str, **fields) -> Optional[ActivitySelection]:
        """
        Merge fields into an existing selection.

        No-op when the activity is not selected. Values are not clamped here.
        """
        current = self._selections.get(activity_id)
        if current is None:
            return None

        fields.pop("activity_id", None)
        if "duration_type" in fields:
            fields["duration_type"] = DurationType(fields["duration_type"])
        updated = current.model_copy(update=fields)
        self._selections[activity_id] = updated
        return updated

    def clear(self):
        self._selections.clear()

    def unit_price_of(self, selection: ActivitySelection) -> float:
        activity = self._activities.get(selection.activity_id)
        if activity is None:
            return 0.0
        if selection.duration_type == DurationType.HOURS:
            return activity.price_per_hour
        return activity.price_per_day

    def price_of(self, activity_id: str) -> float:
        """Price of one selected activity; 0 if unselected or unknown."""
        selection = self._selections.get(activity_id)
        if selection is None or activity_id not in self._activities:
            return 0
        return line_item_total(
            self.unit_price_of(selection),
            selection.duration_value,
            selection.quantity,
        )

    def total_price(self) -> float:
        return sum(self.price_of(activity_id) for activity_id in self._selections)

    def build_trip_request(
        self,
        city_id: str,
        start_date: date,
        duration_days: int = 1
    ) -> TripRequest:
        """Build the create payload from the current selections."""
        if not self._selections:
            raise ValidationError("Select at least one activity", field="selected_activities")
        if not 1 <= duration_days <= 30:
            raise ValidationError("Duration must be between 1 and 30 days", field="duration_days")

        lines = []
        for selection in self._selections.values():
            if selection.duration_value < 1 or selection.quantity < 1:
                raise ValidationError(
                    "Duration and quantity must be at least 1",
                    field=selection.activity_id,
                )
            activity = self._activities.get(selection.activity_id)
            unit_price = self.unit_price_of(selection)
            lines.append(TripActivityRequest(
                activity_id=selection.activity_id,
                duration_type=selection.duration_type,
                duration_value=selection.duration_value,
                quantity=selection.quantity,
                unit_price=unit_price,
                total_price=line_item_total(unit_price, selection.duration_value, selection.quantity),
                activity_name=activity.name if activity else "",
            ))

        logger.info(f"Built trip request for city {city_id} with {len(lines)} activities")
        return TripRequest(
            city_id=city_id,
            start_date=start_date,
            duration_days=duration_days,
            selected_activities=lines,
        )
