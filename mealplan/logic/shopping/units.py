"""Unit conversion helpers.

Base units are g (weight), ml (volume), unit (count) and bunch. Aggregation always
works in base units; display formatting happens at the edges.
"""
from typing import Dict, Optional, Tuple

WEIGHT, VOLUME, COUNT = "weight", "volume", "count"

# unit -> (type, base unit, multiplier to base)
UNIT_DEFINITIONS: Dict[str, Tuple[str, str, float]] = {
    'g': (WEIGHT, 'g', 1), 'gram': (WEIGHT, 'g', 1), 'grams': (WEIGHT, 'g', 1),
    'kg': (WEIGHT, 'g', 1000), 'kilogram': (WEIGHT, 'g', 1000), 'kilograms': (WEIGHT, 'g', 1000),
    'oz': (WEIGHT, 'g', 28.35), 'ounce': (WEIGHT, 'g', 28.35), 'ounces': (WEIGHT, 'g', 28.35),
    'lb': (WEIGHT, 'g', 453.6), 'pound': (WEIGHT, 'g', 453.6), 'pounds': (WEIGHT, 'g', 453.6),
    'ml': (VOLUME, 'ml', 1), 'milliliter': (VOLUME, 'ml', 1), 'millilitre': (VOLUME, 'ml', 1),
    'l': (VOLUME, 'ml', 1000), 'liter': (VOLUME, 'ml', 1000), 'litre': (VOLUME, 'ml', 1000),
    'tsp': (VOLUME, 'ml', 5), 'teaspoon': (VOLUME, 'ml', 5), 'teaspoons': (VOLUME, 'ml', 5),
    'tbsp': (VOLUME, 'ml', 15), 'tablespoon': (VOLUME, 'ml', 15), 'tablespoons': (VOLUME, 'ml', 15),
    'cup': (VOLUME, 'ml', 250), 'cups': (VOLUME, 'ml', 250),
    'unit': (COUNT, 'unit', 1), 'units': (COUNT, 'unit', 1),
    'piece': (COUNT, 'unit', 1), 'pieces': (COUNT, 'unit', 1), 'whole': (COUNT, 'unit', 1),
    # bunch is its own base unit; herbs are priced per bunch
    'bunch': (COUNT, 'bunch', 1), 'bunches': (COUNT, 'bunch', 1),
}

# Recipe-level unit vocabulary: everything collapses to g, ml, tsp, tbsp or unit
_RECIPE_UNITS = {'g', 'ml', 'tsp', 'tbsp', 'unit'}


def unit_info(unit: str) -> Optional[Tuple[str, str, float]]:
    if not unit or not isinstance(unit, str):
        return None
    return UNIT_DEFINITIONS.get(unit.strip().lower())


def to_base_unit(qty: float, unit: str) -> Tuple[float, str]:
    """Convert to g/ml/unit/bunch. Unknown units are returned unchanged."""
    info = unit_info(unit)
    if info is None:
        return qty, (unit or "").strip().lower()
    _, base, factor = info
    return qty * factor, base


def normalize_recipe_unit(unit: str) -> Tuple[str, float]:
    """Map a free-form unit onto the recipe vocabulary.

    Returns (unit, multiplier) so "2 kg" becomes (g, 1000) and "1 cup" (ml, 250).
    Unrecognised words are treated as a count.
    """
    u = (unit or "").strip().lower()
    if u in _RECIPE_UNITS:
        return u, 1
    info = UNIT_DEFINITIONS.get(u)
    if info is None:
        return 'unit', 1
    kind, base, factor = info
    if kind == COUNT:
        return 'unit', 1
    if u in ('teaspoon', 'teaspoons'):
        return 'tsp', 1
    if u in ('tablespoon', 'tablespoons'):
        return 'tbsp', 1
    return base, factor


def convert_to_kg(qty: float, unit: str) -> float:
    """Weight-equivalent in kg for pricing. Liquids count 1 ml as 1 g."""
    info = unit_info(unit)
    if info is None:
        return qty * 0.05
    kind, _, factor = info
    if kind == COUNT:
        if (unit or "").strip().lower() in ('bunch', 'bunches'):
            return qty * 0.035
        return qty * 0.1
    return qty * factor / 1000
