"""
Pricing models - Price breakdown for a provider-package booking.
"""
from pydantic import ConfigDict, Field

from .base import CamelModel


class PriceBreakdown(CamelModel):
    """Subtotal plus tax and service fee, summing to total. Immutable once computed."""

    model_config = ConfigDict(frozen=True)

    base_price: float = Field(
        ...,
        ge=0,
        description="Per-traveler price after the date's price modifier"
    )
    travelers: int = Field(..., ge=1)
    subtotal: float = Field(..., ge=0)
    taxes: int = Field(..., ge=0, description="10% of subtotal, rounded")
    service_fee: int = Field(..., ge=0, description="5% of subtotal, rounded")
    total: float = Field(..., ge=0)
