"""
Tests for unit serializers.
"""
import pytest
from decimal import Decimal

from measurements.serializers import ConversionRequestSerializer, UnitSerializer
from measurements.services import UnitConversionTable


@pytest.mark.django_db
class TestUnitSerializer:

    def test_renders_family_and_factor(self, units):
        data = UnitSerializer(units['lb']).data

        assert data['code'] == 'lb'
        assert data['family'] == 'Weight'
        assert data['base_unit_code'] == 'g'
        assert Decimal(data['conversion_to_base']) == Decimal('453.59237')


@pytest.mark.django_db
class TestConversionRequestSerializer:

    def test_resolves_free_text_units(self, units):
        serializer = ConversionRequestSerializer(
            data={'quantity': '2', 'from_unit': 'Pounds', 'to_unit': 'oz'}
        )

        assert serializer.is_valid(), serializer.errors
        data = serializer.validated_data
        assert data['from_unit'] == units['lb']
        assert data['to_unit'] == units['oz']
        assert UnitConversionTable().convert(
            data['quantity'], data['from_unit'], data['to_unit']
        ) == Decimal('32')

    def test_unknown_unit(self, units):
        serializer = ConversionRequestSerializer(
            data={'quantity': '1', 'from_unit': 'smidgen', 'to_unit': 'g'}
        )

        assert not serializer.is_valid()
        assert 'from_unit' in serializer.errors

    def test_cross_family_rejected(self, units):
        serializer = ConversionRequestSerializer(
            data={'quantity': '1', 'from_unit': 'cup', 'to_unit': 'lb'}
        )

        assert not serializer.is_valid()
        assert 'non_field_errors' in serializer.errors

    def test_negative_quantity_rejected(self, units):
        serializer = ConversionRequestSerializer(
            data={'quantity': '-1', 'from_unit': 'lb', 'to_unit': 'oz'}
        )

        assert not serializer.is_valid()
        assert 'quantity' in serializer.errors
