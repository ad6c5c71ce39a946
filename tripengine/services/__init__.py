"""Services for the trip engine."""
from .booking import BookingSession
from .catalog import CatalogClient, ProviderCatalog
from .lifecycle import TripLifecycleEvaluator
from .pricing import calculate_price
from .selection import ActivitySelectionStore
from .trip_editor import TripEditDraft, TripMutationService
from .trips_board import TripsBoard
from .trips_client import TripsClient

__all__ = [
    "BookingSession",
    "CatalogClient",
    "ProviderCatalog",
    "TripLifecycleEvaluator",
    "calculate_price",
    "ActivitySelectionStore",
    "TripEditDraft",
    "TripMutationService",
    "TripsBoard",
    "TripsClient",
]
