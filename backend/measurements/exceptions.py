"""
Custom exceptions for unit handling.
"""


class MeasurementError(Exception):
    """Base exception for measurement-related errors."""
    pass


class UnitIncompatibleError(MeasurementError):
    """
    Raised when a quantity cannot be converted between two units.

    Cross-family conversion (e.g., volume → weight) needs ingredient density
    data that is not modelled, so it is always unsupported.
    """

    def __init__(self, from_unit, to_unit, reason=None, message=None):
        self.from_unit = from_unit
        self.to_unit = to_unit
        self.reason = reason or "cross_family"
        if message is None:
            message = f"Cannot convert from '{from_unit}' to '{to_unit}' ({self.reason})"
        super().__init__(message)


class UnitMappingError(MeasurementError):
    """Raised when a unit string cannot be mapped to a Unit model."""

    def __init__(self, unit_string, message=None):
        self.unit_string = unit_string
        if message is None:
            message = f"Cannot map unit string '{unit_string}' to a known unit"
        super().__init__(message)
