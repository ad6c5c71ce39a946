"""
Catalog models - Read-only destination and provider-package data.
"""
from pydantic import Field, field_validator
from typing import Optional
from datetime import date
from enum import Enum

from .base import CamelModel, parse_date_only


class TripCategory(str, Enum):
    """Provider trip categories."""
    ADVENTURE = "adventure"
    BEACH = "beach"
    MOUNTAIN = "mountain"
    CULTURAL = "cultural"
    CITY_TOURS = "city-tours"


class Difficulty(str, Enum):
    EASY = "easy"
    MODERATE = "moderate"
    CHALLENGING = "challenging"


class CatalogActivity(CamelModel):
    """A bookable activity in a city."""
    id: str
    name: str
    description: Optional[str] = None
    price_per_hour: float = Field(
        default=0.0,
        ge=0,
        description="Cost per hour for this activity"
    )
    price_per_day: float = Field(
        default=0.0,
        ge=0,
        description="Cost per day for this activity"
    )

    @property
    def has_hourly_price(self) -> bool:
        return self.price_per_hour > 0


class City(CamelModel):
    id: str
    name: str
    description: Optional[str] = None
    activities: list[CatalogActivity] = Field(default_factory=list)


class Country(CamelModel):
    id: str
    name: str
    code: str = ""
    description: Optional[str] = None
    cities: list[City] = Field(default_factory=list)


class AvailableDate(CamelModel):
    """A departure of a provider trip."""
    id: str
    start_date: date
    end_date: date
    spots_left: int = Field(
        ...,
        ge=0,
        description="Remaining spots; zero makes the date unselectable"
    )
    price_modifier: float = Field(
        default=1.0,
        gt=0,
        description="Multiplier on the base price (1.0 = normal, 1.2 = peak season)"
    )

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def normalize_dates(cls, value):
        return parse_date_only(value)

    @property
    def is_selectable(self) -> bool:
        return self.spots_left > 0


class Location(CamelModel):
    country: str
    city: str


class ProviderTrip(CamelModel):
    """A package trip sold by the single provider."""
    id: str
    name: str
    category: TripCategory
    description: str = ""
    duration: int = Field(..., ge=1, description="Trip length in days")
    price: float = Field(..., ge=0, description="Base price per person")
    location: Location
    max_travelers: int = Field(default=10, ge=1)
    difficulty: Optional[Difficulty] = None
    available_dates: list[AvailableDate] = Field(default_factory=list)

    def get_date(self, date_id: str) -> Optional[AvailableDate]:
        """Find an available date by id."""
        for available in self.available_dates:
            if available.id == date_id:
                return available
        return None
