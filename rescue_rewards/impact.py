"""
Derived-field rules for rescue deals.

Every value here is computed once when a deal is created and never
recalculated from later state. All functions are deterministic and never
raise on malformed free-text input.
"""

from decimal import Decimal, ROUND_FLOOR
from typing import Dict, Optional, Tuple, Union
import re

from rescue_rewards.models import DealCategory, Priority


# (CO2 kg per unit, waste kg per unit)
IMPACT_COEFFICIENTS: Dict[DealCategory, Tuple[float, float]] = {
    DealCategory.PRODUCE: (2.5, 1.2),
    DealCategory.BAKERY: (1.8, 0.8),
    DealCategory.DAIRY: (3.2, 1.5),
    DealCategory.MEAT: (5.4, 2.1),
}

ECO_POINTS_BASE: Dict[DealCategory, int] = {
    DealCategory.PRODUCE: 12,
    DealCategory.BAKERY: 15,
    DealCategory.DAIRY: 18,
    DealCategory.MEAT: 25,
}

DONATION_BONUS_POINTS = 10

HIGH_PRIORITY_CATEGORIES = (DealCategory.MEAT, DealCategory.DAIRY)

_LEADING_NUMBER = re.compile(r'^\s*([+-]?(?:\d+(?:\.\d*)?|\.\d+))')


def parse_quantity(quantity: Union[str, int, float, None]) -> float:
    """Extract the leading numeric value from free-form quantity text.

    "5kg" -> 5.0, "10 items" -> 10.0, "2.5 lbs" -> 2.5. Text without a numeric
    prefix, and a prefix of zero, degrade to 1.

    Args:
        quantity: Quantity as entered on the deal creation form

    Returns:
        Parsed quantity, never zero
    """
    if isinstance(quantity, bool) or quantity is None:
        return 1.0
    if isinstance(quantity, (int, float)):
        return float(quantity) or 1.0

    match = _LEADING_NUMBER.match(str(quantity))
    if not match:
        return 1.0
    return float(match.group(1)) or 1.0


def round_half_up(value: Union[float, Decimal], places: int = 1) -> float:
    """Round to `places` decimals using floor(scaled + 0.5).

    Works on the decimal representation of the float so that 0.25 rounds to
    0.3 rather than being pulled down by binary representation error.
    """
    scale = Decimal(10) ** places
    scaled = Decimal(str(value)) * scale
    rounded = (scaled + Decimal('0.5')).to_integral_value(rounding=ROUND_FLOOR)
    return float(rounded / scale)


def _to_category(category: Union[DealCategory, str]) -> DealCategory:
    return category if isinstance(category, DealCategory) else DealCategory(category)


def estimate_co2_saved(category: Union[DealCategory, str], quantity: Union[str, float]) -> float:
    """CO2 saved in kg, rounded to one decimal."""
    co2_rate, _ = IMPACT_COEFFICIENTS[_to_category(category)]
    return round_half_up(Decimal(str(co2_rate)) * Decimal(str(parse_quantity(quantity))))


def estimate_waste_prevented(category: Union[DealCategory, str], quantity: Union[str, float]) -> float:
    """Food waste prevented in kg, rounded to one decimal."""
    _, waste_rate = IMPACT_COEFFICIENTS[_to_category(category)]
    return round_half_up(Decimal(str(waste_rate)) * Decimal(str(parse_quantity(quantity))))


def derive_priority(
    category: Union[DealCategory, str],
    discount_percent: Optional[float]
) -> Priority:
    """Handling priority; the first matching rule wins.

    1. Meat or Dairy -> high
    2. discount >= 50 -> high
    3. discount <= 25 -> low
    4. otherwise -> medium

    A missing discount matches neither discount rule.
    """
    if _to_category(category) in HIGH_PRIORITY_CATEGORIES:
        return Priority.HIGH
    if discount_percent is None:
        return Priority.MEDIUM
    if discount_percent >= 50:
        return Priority.HIGH
    if discount_percent <= 25:
        return Priority.LOW
    return Priority.MEDIUM


def calculate_eco_points(
    category: Union[DealCategory, str],
    discount_percent: Optional[float]
) -> int:
    """Eco points awarded for rescuing a deal of this category and discount."""
    base = ECO_POINTS_BASE[_to_category(category)]
    if discount_percent is None:
        multiplier = 1.0
    elif discount_percent >= 50:
        multiplier = 1.5
    elif discount_percent >= 30:
        multiplier = 1.2
    else:
        multiplier = 1.0
    return int(round_half_up(base * multiplier, places=0))


def calculate_donation_eco_points(
    category: Union[DealCategory, str],
    discount_percent: Optional[float]
) -> int:
    return calculate_eco_points(category, discount_percent) + DONATION_BONUS_POINTS
