"""
COGS serializers package.
"""
from .recipe_cost_serializers import (
    LineCostSerializer,
    CostResultSerializer,
    ScaledLineSerializer,
    ScaledCostResultSerializer,
    ScaleRequestSerializer,
)

__all__ = [
    'LineCostSerializer',
    'CostResultSerializer',
    'ScaledLineSerializer',
    'ScaledCostResultSerializer',
    'ScaleRequestSerializer',
]
