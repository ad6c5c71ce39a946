"""Data models for the trip engine."""
from .booking import BookedTrip, BookedTripStatus, BookingInProgress, TravelerInfo
from .catalog import AvailableDate, CatalogActivity, City, Country, ProviderTrip, TripCategory
from .pricing import PriceBreakdown
from .trip import DurationType, SelectedActivity, Trip, TripPreview, TripRequest, TripStatus

__all__ = [
    "BookedTrip",
    "BookedTripStatus",
    "BookingInProgress",
    "TravelerInfo",
    "AvailableDate",
    "CatalogActivity",
    "City",
    "Country",
    "ProviderTrip",
    "TripCategory",
    "PriceBreakdown",
    "DurationType",
    "SelectedActivity",
    "Trip",
    "TripPreview",
    "TripRequest",
    "TripStatus",
]
