"""
Trip models - Persisted trips owned by the remote trips service.
"""
from pydantic import Field, field_validator, model_validator
from typing import Optional
from datetime import date, timedelta
from enum import Enum

from .base import CamelModel, parse_date_only


class DurationType(str, Enum):
    """Whether an activity is priced per hour or per day."""
    HOURS = "HOURS"
    DAYS = "DAYS"

    @classmethod
    def _missing_(cls, value):
        # The service has been seen sending lower-case spellings
        if isinstance(value, str):
            for member in cls:
                if member.value == value.upper():
                    return member
        return None


class TripStatus(str, Enum):
    """Lifecycle state of a persisted trip."""
    PLANNED = "PLANNED"
    CONFIRMED = "CONFIRMED"
    IN_PROGRESS = "IN_PROGRESS"
    ONGOING = "ONGOING"  # Same state as IN_PROGRESS, spelled by the start endpoint
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"

    @property
    def is_in_progress(self) -> bool:
        return self in (TripStatus.IN_PROGRESS, TripStatus.ONGOING)

    @property
    def is_closed(self) -> bool:
        """Closed trips can no longer be edited or cancelled."""
        return self in (TripStatus.CANCELLED, TripStatus.COMPLETED)


class SelectedActivity(CamelModel):
    """Persisted line item of a trip."""
    activity_id: str
    activity_name: str = ""
    duration_type: DurationType
    duration_value: int = Field(..., ge=1)
    quantity: int = Field(..., ge=1)
    unit_price: float = Field(default=0.0, ge=0)
    subtotal: float = Field(
        default=0.0,
        ge=0,
        description="unit_price x duration_value x quantity"
    )


class Trip(CamelModel):
    """A trip as returned by the remote service."""
    id: str
    city_id: str
    city_name: Optional[str] = None
    country: Optional[str] = None
    start_date: date
    end_date: Optional[date] = None
    duration_days: int = Field(default=1, ge=1)
    status: TripStatus = TripStatus.PLANNED
    selected_activities: list[SelectedActivity] = Field(default_factory=list)
    total_cost: float = Field(default=0.0, ge=0)
    currency: Optional[str] = None

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def normalize_dates(cls, value):
        return parse_date_only(value)

    @model_validator(mode="after")
    def derive_end_date(self):
        if self.end_date is None:
            self.end_date = self.start_date + timedelta(days=self.duration_days - 1)
        return self

    @property
    def display_name(self) -> str:
        if self.city_name and self.country:
            return f"{self.city_name}, {self.country}"
        return self.city_name or self.id


class TripActivityRequest(CamelModel):
    """One activity line of a create/update payload."""
    activity_id: str
    duration_type: DurationType
    duration_value: int = Field(..., ge=1)
    quantity: int = Field(..., ge=1)
    unit_price: float = Field(default=0.0, ge=0)
    total_price: float = Field(default=0.0, ge=0)
    activity_name: Optional[str] = None


class TripRequest(CamelModel):
    """Payload for POST /trips and PUT /trips/{id}."""
    city_id: str
    start_date: date
    duration_days: int = Field(..., ge=1, le=30)
    selected_activities: list[TripActivityRequest] = Field(default_factory=list)


class TripPreviewActivity(CamelModel):
    name: str
    duration_type: DurationType
    duration_value: int
    quantity: int
    unit_price: float
    total_price: float


class TripPreview(CamelModel):
    """Server-side cost preview of a trip request."""
    city_name: str = ""
    country_name: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    duration_days: int = 1
    activities: list[TripPreviewActivity] = Field(default_factory=list)
    subtotal: float = 0.0
    taxes: float = 0.0
    service_fee: float = 0.0
    total_price: float = 0.0

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def normalize_dates(cls, value):
        return parse_date_only(value)
