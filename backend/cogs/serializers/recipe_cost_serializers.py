"""
Recipe cost serializers - render costing and scaling results.
"""
from rest_framework import serializers

from cogs.services.costing_service import PRICING_COMPLETE, PRICING_PARTIAL, PRICING_UNPRICED
from recipes.models import MeasureBasis

PRICING_STATUS_CHOICES = [PRICING_COMPLETE, PRICING_PARTIAL, PRICING_UNPRICED]


class LineCostSerializer(serializers.Serializer):
    """Serializer for a single recipe line's cost."""
    recipe_ingredient_id = serializers.IntegerField()
    ingredient_id = serializers.IntegerField()
    ingredient_name = serializers.CharField()
    quantity = serializers.DecimalField(max_digits=16, decimal_places=4)
    unit_code = serializers.CharField()
    measure_basis = serializers.ChoiceField(choices=MeasureBasis.choices)
    ap_quantity = serializers.DecimalField(max_digits=20, decimal_places=4, allow_null=True)
    common_unit_code = serializers.CharField(allow_null=True)
    unit_cost = serializers.DecimalField(max_digits=16, decimal_places=4, allow_null=True)
    cost = serializers.DecimalField(max_digits=14, decimal_places=2, allow_null=True)
    is_priced = serializers.BooleanField()
    error_type = serializers.CharField(allow_null=True)
    error = serializers.CharField(source='error_message', allow_null=True)


class CostResultSerializer(serializers.Serializer):
    """
    Complete cost breakdown for a recipe.

    pricing_status lets screens tell apart a fully priced recipe, a partially
    priced one (priced_line_count of line_count) and an unpriced one.
    """
    recipe_id = serializers.IntegerField()
    recipe_name = serializers.CharField()
    yield_quantity = serializers.DecimalField(max_digits=16, decimal_places=4)
    total_cost = serializers.DecimalField(max_digits=14, decimal_places=2)
    cost_per_portion = serializers.DecimalField(max_digits=14, decimal_places=2, allow_null=True)
    lines = LineCostSerializer(many=True)
    line_count = serializers.IntegerField()
    priced_line_count = serializers.IntegerField()
    pricing_status = serializers.ChoiceField(choices=PRICING_STATUS_CHOICES)


class ScaledLineSerializer(serializers.Serializer):
    """Serializer for one scaled recipe line."""
    recipe_ingredient_id = serializers.IntegerField()
    ingredient_id = serializers.IntegerField()
    ingredient_name = serializers.CharField()
    original_quantity = serializers.DecimalField(max_digits=16, decimal_places=4)
    scaled_quantity = serializers.DecimalField(max_digits=None, decimal_places=None)
    unit_code = serializers.CharField()
    measure_basis = serializers.ChoiceField(choices=MeasureBasis.choices)
    cost = serializers.DecimalField(max_digits=14, decimal_places=2, allow_null=True)
    error_type = serializers.CharField(allow_null=True)
    error = serializers.CharField(source='error_message', allow_null=True)


class ScaledCostResultSerializer(serializers.Serializer):
    """Scaled view of a recipe. Never backed by a stored recipe."""
    recipe_id = serializers.IntegerField()
    recipe_name = serializers.CharField()
    original_yield = serializers.DecimalField(max_digits=16, decimal_places=4)
    target_yield = serializers.DecimalField(max_digits=16, decimal_places=4)
    scale_factor = serializers.DecimalField(max_digits=20, decimal_places=6)
    scaled_lines = ScaledLineSerializer(many=True)
    total_cost = serializers.DecimalField(max_digits=14, decimal_places=2)
    cost_per_portion = serializers.DecimalField(max_digits=14, decimal_places=2, allow_null=True)
    line_count = serializers.IntegerField()
    priced_line_count = serializers.IntegerField()
    pricing_status = serializers.ChoiceField(choices=PRICING_STATUS_CHOICES)


class ScaleRequestSerializer(serializers.Serializer):
    """
    Request serializer for scaling a recipe.
    """
    target_yield = serializers.DecimalField(
        max_digits=12,
        decimal_places=4,
        help_text="Desired yield (portions or yield units). Must be greater than 0."
    )

    def validate_target_yield(self, value):
        if value <= 0:
            raise serializers.ValidationError("Target yield must be greater than 0.")
        return value
