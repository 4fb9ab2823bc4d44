import math
from typing import Literal

Unit = Literal["kg", "lb"]

KG_TO_LB = 2.20462


def round_half_up(value: float, digits: int = 0) -> float:
    """Round to `digits` decimals with halves going up (2.25 -> 2.3, -2.25 -> -2.2)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def convert_weight(weight_kg: float, target_unit: Unit) -> float:
    if target_unit == "kg":
        return weight_kg
    return weight_kg * KG_TO_LB


def to_kg(weight: float, unit: Unit) -> float:
    """Inverse of convert_weight: bring a display-unit weight back to kg."""
    if unit == "kg":
        return weight
    return weight / KG_TO_LB


def format_weight(weight_kg: float, target_unit: Unit, precision: int = 0) -> float:
    """Convert to the display unit and round.

    precision 0 gives chart-friendly integers; precision 1 keeps half-unit
    working weights such as 12.5.
    """
    return round_half_up(convert_weight(weight_kg, target_unit), precision)
