"""
Booking models - Provider-package booking draft and confirmed bookings.
"""
from pydantic import Field
from datetime import date
from enum import Enum

from .base import CamelModel
from .catalog import Location, TripCategory
from .pricing import PriceBreakdown


class TravelerInfo(CamelModel):
    """Contact details of the lead traveler."""
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""

    def get_missing_fields(self) -> list[str]:
        return [
            name for name in ("first_name", "last_name", "email", "phone")
            if not getattr(self, name).strip()
        ]

    def is_complete(self) -> bool:
        return not self.get_missing_fields()


class BookingInProgress(CamelModel):
    """The single in-progress booking draft of a session."""
    trip_id: str
    selected_date_id: str
    travelers: int = Field(default=1, ge=1)
    traveler_info: TravelerInfo = Field(default_factory=TravelerInfo)
    price_breakdown: PriceBreakdown


class BookedTripStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class BookedTrip(CamelModel):
    """A confirmed provider-package booking."""
    id: str
    trip_id: str
    trip_name: str
    category: TripCategory
    location: Location
    start_date: date
    end_date: date
    travelers: int = Field(..., ge=1)
    total_price: float = Field(..., ge=0)
    status: BookedTripStatus = BookedTripStatus.UPCOMING
    booking_date: date
    confirmation_code: str = Field(
        ...,
        pattern=r"^TP-[A-Z0-9]{6}$",
        description="Confirmation code shown to the traveler"
    )
