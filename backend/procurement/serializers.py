"""
Procurement serializers - render resolution results and order guides.
"""
from rest_framework import serializers

from procurement.services.resolution_service import TIER_CHOICES


class ResolutionResultSerializer(serializers.Serializer):
    """
    Serializer for one specification resolution.

    ``tier='none'`` means the ingredient needs a manual specification; it is
    not an error.
    """
    ingredient_id = serializers.IntegerField()
    site_id = serializers.IntegerField()
    as_of = serializers.DateField()
    tier = serializers.ChoiceField(choices=TIER_CHOICES)
    specification_id = serializers.IntegerField(allow_null=True)
    vendor_id = serializers.IntegerField(allow_null=True)
    fallback_vendor_id = serializers.IntegerField(allow_null=True)
    effective_vendor_id = serializers.IntegerField(allow_null=True)
    source_id = serializers.IntegerField(allow_null=True)
    needs_manual_specification = serializers.BooleanField()


class ResolveRequestSerializer(serializers.Serializer):
    """Request serializer for resolving one ingredient at a site."""
    ingredient_id = serializers.IntegerField()
    site_id = serializers.IntegerField()
    as_of = serializers.DateField(required=False, allow_null=True)


class OrderGuideLineSerializer(serializers.Serializer):
    ingredient_id = serializers.IntegerField()
    specification_id = serializers.IntegerField()
    tier = serializers.ChoiceField(choices=TIER_CHOICES)
    source_id = serializers.IntegerField()


class VendorOrderGroupSerializer(serializers.Serializer):
    vendor_id = serializers.IntegerField(allow_null=True)
    lines = OrderGuideLineSerializer(many=True)


class OrderGuideSerializer(serializers.Serializer):
    """Serializer for an order guide, grouped by vendor."""
    site_id = serializers.IntegerField()
    as_of = serializers.DateField()
    groups = VendorOrderGroupSerializer(many=True)
    needs_specification = serializers.ListField(child=serializers.IntegerField())
    line_count = serializers.IntegerField()
