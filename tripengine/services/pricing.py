"""
Price Calculator - Turns a base price, a date modifier and a traveler count
into a price breakdown.
"""
import math

from ..errors import InvalidInput
from ..models.pricing import PriceBreakdown


TAX_RATE = 0.10
SERVICE_FEE_RATE = 0.05


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (not banker's rounding)."""
    return math.floor(value + 0.5)


def calculate_price(base_price: float, price_modifier: float, travelers: int) -> PriceBreakdown:
    """
    Compute the price breakdown for a provider-package booking.

    Tax and service fee are rounded independently from the subtotal, never
    as a rounded sum.

    Args:
        base_price: Catalog price per person
        price_modifier: Multiplier of the chosen date (1.2 = peak season)
        travelers: Number of travelers, at least 1

    Returns:
        PriceBreakdown whose total is subtotal + taxes + service fee
    """
    if travelers < 1:
        raise InvalidInput("At least one traveler is required", field="travelers")
    if base_price < 0:
        raise InvalidInput("Base price cannot be negative", field="base_price")
    if price_modifier <= 0:
        raise InvalidInput("Price modifier must be positive", field="price_modifier")

    adjusted_price = base_price * price_modifier
    subtotal = adjusted_price * travelers
    taxes = round_half_up(subtotal * TAX_RATE)
    service_fee = round_half_up(subtotal * SERVICE_FEE_RATE)

    return PriceBreakdown(
        base_price=adjusted_price,
        travelers=travelers,
        subtotal=subtotal,
        taxes=taxes,
        service_fee=service_fee,
        total=subtotal + taxes + service_fee,
    )


def line_item_total(unit_price: float, duration_value: int, quantity: int) -> float:
    """Price of one activity line: unit price x duration x quantity."""
    return unit_price * duration_value * quantity


def clamp_minimum(value: int, minimum: int = 1) -> int:
    return max(minimum, value)
