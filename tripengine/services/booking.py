"""
Booking Session - The single in-progress provider-package booking of a
traveler session, plus the bookings it has confirmed.
"""
import logging
import random
import string
import uuid
from typing import Optional

from .catalog import ProviderCatalog
from .clock import Clock, SystemClock
from .pricing import calculate_price
from ..errors import ValidationError
from ..models.booking import (
    BookedTrip,
    BookedTripStatus,
    BookingInProgress,
    TravelerInfo,
)
from ..models.catalog import ProviderTrip
from ..models.pricing import PriceBreakdown

logger = logging.getLogger(__name__)

CONFIRMATION_ALPHABET = string.ascii_uppercase + string.digits


def generate_confirmation_code() -> str:
    """Code of the form TP-XXXXXX."""
    return "TP-" + "".join(random.choices(CONFIRMATION_ALPHABET, k=6))


def generate_booking_id() -> str:
    return f"book-{uuid.uuid4().hex[:12]}"


class BookingSession:
    """
    Holds at most one booking draft.

    States:
    - Idle: no draft (current is None)
    - Active: a draft exists; start() overwrites it, clear() and complete()
      return to Idle
    """

    def __init__(self, catalog: Optional[ProviderCatalog] = None, clock: Optional[Clock] = None):
        self.catalog = catalog or ProviderCatalog()
        self.clock = clock or SystemClock()
        self.current: Optional[BookingInProgress] = None
        self.booked_trips: list[BookedTrip] = []

    @property
    def is_active(self) -> bool:
        return self.current is not None

    def price_for(self, trip: ProviderTrip, date_id: str, travelers: int) -> PriceBreakdown:
        """Price a trip on one of its dates; an unknown date prices at the base rate."""
        available = trip.get_date(date_id)
        modifier = available.price_modifier if available else 1.0
        return calculate_price(trip.price, modifier, travelers)

    def start(self, trip_id: str) -> Optional[BookingInProgress]:
        """Begin a draft on the trip's first date that still has spots."""
        trip = self.catalog.get_trip(trip_id)
        selectable = [d for d in trip.available_dates if d.is_selectable] if trip else []
        if not selectable:
            logger.info(f"Not starting booking for {trip_id}: no available dates")
            return None

        first_date = selectable[0]
        self.current = BookingInProgress(
            trip_id=trip_id,
            selected_date_id=first_date.id,
            travelers=1,
            traveler_info=TravelerInfo(),
            price_breakdown=self.price_for(trip, first_date.id, 1),
        )
        logger.info(f"Started booking for {trip_id} on date {first_date.id}")
        return self.current

    def update(self, **fields) -> Optional[BookingInProgress]:
        """
        Merge fields into the draft.

        The price breakdown is recomputed only when travelers or the selected
        date is part of the update. Invalid values leave the draft untouched.
        """
        if self.current is None:
            return None

        fields.pop("trip_id", None)
        fields.pop("price_breakdown", None)
        if isinstance(fields.get("traveler_info"), dict):
            fields["traveler_info"] = self.current.traveler_info.model_copy(
                update=fields["traveler_info"]
            )

        updated = self.current.model_copy(update=fields)

        if "travelers" in fields or "selected_date_id" in fields:
            trip = self.catalog.get_trip(updated.trip_id)
            if trip is not None:
                if "selected_date_id" in fields:
                    available = trip.get_date(updated.selected_date_id)
                    if available is not None and not available.is_selectable:
                        raise ValidationError("This date is sold out", field="selected_date_id")
                updated = updated.model_copy(update={
                    "price_breakdown": self.price_for(
                        trip, updated.selected_date_id, updated.travelers
                    ),
                })

        self.current = updated
        return self.current

    def clear(self):
        self.current = None

    def validate(self):
        """Check the draft is ready to be confirmed."""
        if self.current is None:
            raise ValidationError("No booking in progress")

        trip = self.catalog.get_trip(self.current.trip_id)
        if trip is not None and self.current.travelers > trip.max_travelers:
            raise ValidationError(
                f"This trip takes at most {trip.max_travelers} travelers",
                field="travelers",
            )
        if trip is not None:
            selected = trip.get_date(self.current.selected_date_id)
            if selected is not None and not selected.is_selectable:
                raise ValidationError("This date is sold out", field="selected_date_id")

        missing = self.current.traveler_info.get_missing_fields()
        if missing:
            raise ValidationError(
                f"Missing traveler info: {', '.join(missing)}",
                field=missing[0],
            )

    def complete(self) -> Optional[BookedTrip]:
        """Turn the draft into a booked trip; None if there is nothing to book."""
        if self.current is None:
            return None

        trip = self.catalog.get_trip(self.current.trip_id)
        if trip is None:
            return None
        selected = trip.get_date(self.current.selected_date_id)
        if selected is None or not selected.is_selectable:
            return None

        booked = BookedTrip(
            id=generate_booking_id(),
            trip_id=trip.id,
            trip_name=trip.name,
            category=trip.category,
            location=trip.location,
            start_date=selected.start_date,
            end_date=selected.end_date,
            travelers=self.current.travelers,
            total_price=self.current.price_breakdown.total,
            status=BookedTripStatus.UPCOMING,
            booking_date=self.clock.today(),
            confirmation_code=generate_confirmation_code(),
        )
        self.booked_trips.insert(0, booked)
        self.current = None
        logger.info(f"Booked {trip.id} as {booked.id} ({booked.confirmation_code})")
        return booked

    def cancel_booked_trip(self, booking_id: str) -> Optional[BookedTrip]:
        for index, booked in enumerate(self.booked_trips):
            if booked.id == booking_id:
                cancelled = booked.model_copy(update={"status": BookedTripStatus.CANCELLED})
                self.booked_trips[index] = cancelled
                return cancelled
        return None
