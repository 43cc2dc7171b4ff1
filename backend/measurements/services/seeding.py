"""
Unit reference data for measurements.

Units are GLOBAL (not per-tenant). Base units: gram for Weight, milliliter
for Volume, count for Count, each for Each. Factors are exact where the unit
has a legal definition (1 lb = 453.59237 g, 1 US fl oz = 29.5735295625 ml).
"""
from decimal import Decimal

from measurements.models import Unit, UnitFamily


# Default units - these are global and shared by all tenants
DEFAULT_UNITS = [
    # Weight units
    {"code": "g", "name": "gram", "family": UnitFamily.WEIGHT, "factor": "1", "base": "g"},
    {"code": "kg", "name": "kilogram", "family": UnitFamily.WEIGHT, "factor": "1000", "base": "g"},
    {"code": "oz", "name": "ounce", "family": UnitFamily.WEIGHT, "factor": "28.349523125", "base": "g"},
    {"code": "lb", "name": "pound", "family": UnitFamily.WEIGHT, "factor": "453.59237", "base": "g"},

    # Volume units
    {"code": "ml", "name": "milliliter", "family": UnitFamily.VOLUME, "factor": "1", "base": "ml"},
    {"code": "l", "name": "liter", "family": UnitFamily.VOLUME, "factor": "1000", "base": "ml"},
    {"code": "tsp", "name": "teaspoon", "family": UnitFamily.VOLUME, "factor": "4.92892159375", "base": "ml"},
    {"code": "tbsp", "name": "tablespoon", "family": UnitFamily.VOLUME, "factor": "14.78676478125", "base": "ml"},
    {"code": "fl_oz", "name": "fluid ounce", "family": UnitFamily.VOLUME, "factor": "29.5735295625", "base": "ml"},
    {"code": "cup", "name": "cup", "family": UnitFamily.VOLUME, "factor": "236.5882365", "base": "ml"},
    {"code": "pt", "name": "pint", "family": UnitFamily.VOLUME, "factor": "473.176473", "base": "ml"},
    {"code": "qt", "name": "quart", "family": UnitFamily.VOLUME, "factor": "946.352946", "base": "ml"},
    {"code": "gal", "name": "gallon", "family": UnitFamily.VOLUME, "factor": "3785.411784", "base": "ml"},

    # Count units
    {"code": "ct", "name": "count", "family": UnitFamily.COUNT, "factor": "1", "base": "ct"},
    {"code": "dozen", "name": "dozen", "family": UnitFamily.COUNT, "factor": "12", "base": "ct"},
    # Case size depends on the product, so it has no fixed factor
    {"code": "case", "name": "case", "family": UnitFamily.COUNT, "factor": None, "base": "ct"},

    # Each units
    {"code": "each", "name": "each", "family": UnitFamily.EACH, "factor": "1", "base": "each"},
    {"code": "piece", "name": "piece", "family": UnitFamily.EACH, "factor": "1", "base": "each"},
    {"code": "slice", "name": "slice", "family": UnitFamily.EACH, "factor": "1", "base": "each"},
]


# Mapping of common unit string variations to canonical codes
UNIT_STRING_MAPPINGS = {
    # Weight - grams
    "g": "g",
    "gram": "g",
    "grams": "g",
    "gr": "g",
    # Weight - kilograms
    "kg": "kg",
    "kilogram": "kg",
    "kilograms": "kg",
    "kilo": "kg",
    "kilos": "kg",
    # Weight - ounces
    "oz": "oz",
    "ounce": "oz",
    "ounces": "oz",
    # Weight - pounds
    "lb": "lb",
    "lbs": "lb",
    "#": "lb",
    "pound": "lb",
    "pounds": "lb",
    # Volume - milliliters
    "ml": "ml",
    "milliliter": "ml",
    "milliliters": "ml",
    "millilitre": "ml",
    "millilitres": "ml",
    # Volume - liters
    "l": "l",
    "liter": "l",
    "liters": "l",
    "litre": "l",
    "litres": "l",
    # Volume - spoons
    "tsp": "tsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tbsp": "tbsp",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    # Volume - fluid ounces
    "fl_oz": "fl_oz",
    "fl oz": "fl_oz",
    "fluid ounce": "fl_oz",
    "fluid ounces": "fl_oz",
    "floz": "fl_oz",
    # Volume - cups, pints, quarts, gallons
    "c": "cup",
    "cup": "cup",
    "cups": "cup",
    "pt": "pt",
    "pint": "pt",
    "pints": "pt",
    "qt": "qt",
    "quart": "qt",
    "quarts": "qt",
    "gal": "gal",
    "gallon": "gal",
    "gallons": "gal",
    # Count
    "ct": "ct",
    "count": "ct",
    "dozen": "dozen",
    "dz": "dozen",
    "doz": "dozen",
    "case": "case",
    "cases": "case",
    "cs": "case",
    # Each
    "each": "each",
    "ea": "each",
    "piece": "piece",
    "pieces": "piece",
    "pc": "piece",
    "pcs": "piece",
    "slice": "slice",
    "slices": "slice",
}


def seed_units():
    """
    Seed global units. Idempotent: existing codes are left untouched.

    Returns:
        dict: A mapping of unit codes to Unit instances.
    """
    unit_map = {}

    for unit_data in DEFAULT_UNITS:
        factor = unit_data["factor"]
        unit, _ = Unit.objects.get_or_create(
            code=unit_data["code"],
            defaults={
                "name": unit_data["name"],
                "family": unit_data["family"],
                "conversion_to_base": Decimal(factor) if factor is not None else None,
                "base_unit_code": unit_data["base"],
            }
        )
        unit_map[unit.code] = unit

    return unit_map


def map_unit_string_to_code(unit_string: str) -> str | None:
    """
    Map a unit string to its canonical code.

    Args:
        unit_string: The unit string to map (e.g., "pounds", "oz", "each")

    Returns:
        Canonical unit code if found, None otherwise.
    """
    if not unit_string:
        return None

    normalized = unit_string.strip().lower()
    return UNIT_STRING_MAPPINGS.get(normalized)
