"""
Trip Lifecycle Evaluator - Date-driven rules deciding when a trip should be
prompted to start or to complete.
"""
import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Optional

from .clock import Clock, SystemClock
from ..models.trip import Trip, TripStatus

logger = logging.getLogger(__name__)


class PromptKind(str, Enum):
    START = "start"
    COMPLETE = "complete"


@dataclass(frozen=True)
class StatusPrompt:
    """A confirmation the traveler should be asked for."""
    kind: PromptKind
    trip: Trip

    @property
    def key(self) -> tuple[str, PromptKind]:
        return (self.trip.id, self.kind)


def should_prompt_start(trip: Trip, today: date) -> bool:
    """A planned trip starting today."""
    return trip.status == TripStatus.PLANNED and today == trip.start_date


def should_prompt_complete(trip: Trip, today: date) -> bool:
    """A planned or running trip whose end date has passed."""
    completable = trip.status.is_in_progress or trip.status == TripStatus.PLANNED
    return completable and today > trip.end_date


class TripLifecycleEvaluator:
    """
    Scans a trip list for the next prompt to show.

    Each (trip id, prompt kind) pair is shown at most once for the lifetime of
    the evaluator; rescanning after a refresh never re-arms a shown prompt.
    """

    def __init__(self, clock: Optional[Clock] = None):
        self.clock = clock or SystemClock()
        self.dismissed: set[tuple[str, PromptKind]] = set()

    def scan(self, trips: Iterable[Trip]) -> Optional[StatusPrompt]:
        """Return at most one prompt; complete takes priority over start."""
        today = self.clock.today()

        for trip in trips:
            if trip.status == TripStatus.CANCELLED:
                continue

            if (trip.id, PromptKind.COMPLETE) not in self.dismissed and should_prompt_complete(trip, today):
                return self._show(StatusPrompt(PromptKind.COMPLETE, trip))

            if (trip.id, PromptKind.START) not in self.dismissed and should_prompt_start(trip, today):
                return self._show(StatusPrompt(PromptKind.START, trip))

        return None

    def _show(self, prompt: StatusPrompt) -> StatusPrompt:
        self.dismissed.add(prompt.key)
        logger.info(f"Prompting {prompt.kind.value} for trip {prompt.trip.id}")
        return prompt

    def was_shown(self, trip_id: str, kind: PromptKind) -> bool:
        return (trip_id, kind) in self.dismissed

    def reset(self):
        """Forget shown prompts, as on a page reload."""
        self.dismissed.clear()
