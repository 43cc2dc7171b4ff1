"""
COGS Services.

- CostingService: recipe cost with unit conversion and yield correction
- ScalingService: factor-method recipe scaling
- CostSnapshotService: explicit write of cached recipe costs
"""
from cogs.services.costing_service import (
    CostComputation,
    CostingLine,
    CostingService,
    CostResult,
    LineCost,
    PRICING_COMPLETE,
    PRICING_PARTIAL,
    PRICING_UNPRICED,
    calculate_cost,
    calculate_line_costs,
)
from cogs.services.scaling_service import (
    ScaledCostResult,
    ScaledLine,
    ScalingService,
    scale_recipe,
)
from cogs.services.snapshot_service import CostSnapshotService

__all__ = [
    'CostComputation',
    'CostingLine',
    'CostingService',
    'CostResult',
    'LineCost',
    'PRICING_COMPLETE',
    'PRICING_PARTIAL',
    'PRICING_UNPRICED',
    'calculate_cost',
    'calculate_line_costs',
    'ScaledCostResult',
    'ScaledLine',
    'ScalingService',
    'scale_recipe',
    'CostSnapshotService',
]
