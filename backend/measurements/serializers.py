"""
Unit serializers.
"""
from rest_framework import serializers

from measurements.models import Unit
from measurements.services import UnitConversionTable


class UnitSerializer(serializers.ModelSerializer):
    """
    Serializer for Unit model - read-only.

    Units are GLOBAL reference data seeded on deployment.
    No create/update/delete operations are allowed via the API.
    """

    class Meta:
        model = Unit
        fields = ['id', 'code', 'name', 'family', 'conversion_to_base', 'base_unit_code']
        read_only_fields = fields


class ConversionRequestSerializer(serializers.Serializer):
    """
    Validates a quantity conversion between two units given as free text.

    validated_data carries the resolved Unit instances under ``from_unit``
    and ``to_unit``.
    """
    quantity = serializers.DecimalField(max_digits=16, decimal_places=4)
    from_unit = serializers.CharField(max_length=50)
    to_unit = serializers.CharField(max_length=50)

    def validate_quantity(self, value):
        if value < 0:
            raise serializers.ValidationError("Quantity cannot be negative.")
        return value

    def validate(self, data):
        table = UnitConversionTable()
        units = {}
        for field_name in ('from_unit', 'to_unit'):
            unit = table.map_string_to_unit(data[field_name])
            if unit is None:
                raise serializers.ValidationError({field_name: f"Unknown unit '{data[field_name]}'."})
            units[field_name] = unit

        if not table.can_convert(units['from_unit'], units['to_unit']):
            raise serializers.ValidationError(
                f"Cannot convert {units['from_unit'].code} to {units['to_unit'].code}."
            )

        data.update(units)
        return data
