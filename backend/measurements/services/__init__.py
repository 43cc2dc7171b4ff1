"""
Measurements services.
"""
from measurements.services.seeding import (
    seed_units,
    map_unit_string_to_code,
    DEFAULT_UNITS,
    UNIT_STRING_MAPPINGS,
)
from measurements.services.conversion_service import UnitConversionTable

__all__ = [
    'seed_units',
    'map_unit_string_to_code',
    'DEFAULT_UNITS',
    'UNIT_STRING_MAPPINGS',
    'UnitConversionTable',
]
