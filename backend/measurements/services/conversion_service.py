"""
Unit conversion service.

Converts quantities between units of the same family through each unit's
linear factor to the family base unit.
"""
import logging
from decimal import Decimal
from typing import Optional

from measurements.models import Unit
from measurements.exceptions import UnitIncompatibleError, UnitMappingError
from measurements.services.seeding import map_unit_string_to_code

logger = logging.getLogger(__name__)


class UnitConversionTable:
    """
    Read-only view over the global unit table.

    Supports:
    - Same-family conversion through the base-unit factor
    - Identity conversion for any unit to itself (even without a factor)
    - String-to-Unit mapping for free-text units

    Units are global reference data, so instances hold no tenant and can be
    shared by every costing call in a request. Results are NOT rounded;
    callers round at their reporting boundary.
    """

    def __init__(self):
        self._unit_cache = {}

    def map_string_to_unit(self, unit_string: str) -> Optional[Unit]:
        """
        Map a unit string (e.g., "Pounds", "lbs", "ea") to a Unit instance.

        Returns:
            Unit instance if found, None otherwise.
        """
        if not unit_string:
            return None

        normalized = unit_string.strip().lower()

        cache_key = f"unit_str:{normalized}"
        if cache_key in self._unit_cache:
            return self._unit_cache[cache_key]

        canonical_code = map_unit_string_to_code(normalized)

        if canonical_code:
            unit = Unit.objects.filter(code=canonical_code).first()
        else:
            # Try direct lookup by code or name
            unit = Unit.objects.filter(code__iexact=normalized).first()

            if not unit:
                unit = Unit.objects.filter(name__iexact=normalized).first()

        self._unit_cache[cache_key] = unit
        return unit

    def get_unit_by_code(self, code: str) -> Optional[Unit]:
        """Get a unit by its exact code, or None."""
        cache_key = f"unit_code:{code}"
        if cache_key in self._unit_cache:
            return self._unit_cache[cache_key]

        unit = Unit.objects.filter(code=code).first()

        self._unit_cache[cache_key] = unit
        return unit

    def conversion_factor(self, from_unit: Unit, to_unit: Unit) -> Decimal:
        """
        Return the multiplier taking a quantity in ``from_unit`` to ``to_unit``.

        Raises:
            UnitIncompatibleError: the units are in different families, or one
                of them has no factor to its base unit.
        """
        if from_unit.pk == to_unit.pk:
            return Decimal("1")

        if from_unit.family != to_unit.family:
            raise UnitIncompatibleError(
                from_unit=from_unit.code,
                to_unit=to_unit.code,
                reason="cross_family",
            )

        if not from_unit.is_convertible or not to_unit.is_convertible:
            raise UnitIncompatibleError(
                from_unit=from_unit.code,
                to_unit=to_unit.code,
                reason="no_base_factor",
            )

        return from_unit.conversion_to_base / to_unit.conversion_to_base

    def convert(self, quantity: Decimal, from_unit: Unit, to_unit: Unit) -> Decimal:
        """
        Convert a quantity from one unit to another.

        Args:
            quantity: The quantity to convert.
            from_unit: The source unit.
            to_unit: The target unit.

        Returns:
            The converted quantity, unrounded.

        Raises:
            UnitIncompatibleError: If the units cannot be converted.
        """
        if from_unit.pk == to_unit.pk:
            return Decimal(quantity)

        factor = self.conversion_factor(from_unit, to_unit)
        return Decimal(quantity) * factor

    def can_convert(self, from_unit: Unit, to_unit: Unit) -> bool:
        """Check if conversion between two units is possible."""
        try:
            self.conversion_factor(from_unit, to_unit)
        except UnitIncompatibleError:
            return False
        return True

    def convert_from_string(
        self,
        quantity: Decimal,
        from_unit_string: str,
        to_unit: Unit,
    ) -> Decimal:
        """
        Convert a quantity using a free-text unit for the source.

        Raises:
            UnitMappingError: If the unit string cannot be mapped.
            UnitIncompatibleError: If the units cannot be converted.
        """
        from_unit = self.map_string_to_unit(from_unit_string)

        if not from_unit:
            logger.debug(f"Unmapped unit string: {from_unit_string!r}")
            raise UnitMappingError(from_unit_string)

        return self.convert(quantity, from_unit, to_unit)
