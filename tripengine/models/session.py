"""
Session management - One traveler's engine state: activity selections, the
booking draft and the trip list with its prompt history.
"""
from datetime import date, timedelta
from typing import Optional
import uuid

from ..services.booking import BookingSession
from ..services.catalog import ProviderCatalog
from ..services.clock import Clock, SystemClock
from ..services.selection import ActivitySelectionStore
from ..services.trip_editor import TripEditDraft
from ..services.trips_board import TripsBoard
from ..services.trips_client import TripsClient


class TravelerSession:
    """Explicit, injectable container for everything a single traveler edits."""

    def __init__(
        self,
        client: Optional[TripsClient] = None,
        catalog: Optional[ProviderCatalog] = None,
        clock: Optional[Clock] = None
    ):
        self.session_id = str(uuid.uuid4())
        self.clock = clock or SystemClock()
        self.created_at = self.clock.now()
        self.updated_at = self.created_at

        # "Book new trip" flow
        self.city_id: Optional[str] = None
        self.start_date: date = self.clock.today() + timedelta(days=7)
        self.selections = ActivitySelectionStore()

        # Provider-package flow
        self.booking = BookingSession(catalog, self.clock)

        # Persisted trips
        self.board = TripsBoard(client or TripsClient(), self.clock)
        self.edit_draft: Optional[TripEditDraft] = None

    def touch(self):
        self.updated_at = self.clock.now()

    def get_summary(self) -> dict:
        return {
            "session_id": self.session_id,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "city_id": self.city_id,
            "selected_activities": len(self.selections.selections),
            "booking_active": self.booking.is_active,
            "trips_cached": len(self.board.cache),
            "editing_trip": self.edit_draft.trip_id if self.edit_draft else None,
        }


# In-memory session storage
class SessionStore:
    """Simple in-memory session store."""

    def __init__(self):
        self._sessions: dict[str, TravelerSession] = {}

    def create(self, **kwargs) -> TravelerSession:
        """Create a new session."""
        session = TravelerSession(**kwargs)
        self._sessions[session.session_id] = session
        return session

    def get(self, session_id: str) -> Optional[TravelerSession]:
        """Get a session by ID."""
        return self._sessions.get(session_id)

    def delete(self, session_id: str):
        """Delete a session."""
        self._sessions.pop(session_id, None)


# Global session store
session_store = SessionStore()
