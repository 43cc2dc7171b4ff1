"""
Recipe scaling service.

Factor method: every line quantity is multiplied by
target_yield / recipe.yield_quantity and the scaled lines are costed through
the same calculator as the stored recipe. Units, AP/EP basis and yield
percent are unchanged, so cost per portion is invariant under scaling up to
rounding.

The result is a frozen value object. Saving a scaled recipe as a new recipe
is a separate caller operation.
"""
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Optional, Tuple

from cogs.exceptions import InvalidRecipeYieldError, InvalidTargetYieldError
from cogs.services.costing_service import (
    CostingService,
    LineCost,
    calculate_line_costs,
    round_currency,
)
from tenant.managers import get_current_tenant

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScaledLine:
    """One scaled recipe line with its cost."""
    recipe_ingredient_id: int
    ingredient_id: int
    ingredient_name: str
    original_quantity: Decimal
    scaled_quantity: Decimal
    unit_code: str
    measure_basis: str
    cost: Optional[Decimal]
    error: Optional[Exception] = None

    @property
    def error_type(self) -> Optional[str]:
        return type(self.error).__name__ if self.error is not None else None

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None


@dataclass(frozen=True)
class ScaledCostResult:
    """Derived, unsaved view of a recipe at a new yield."""
    recipe_id: int
    recipe_name: str
    original_yield: Decimal
    target_yield: Decimal
    scale_factor: Decimal
    scaled_lines: Tuple[ScaledLine, ...]
    total_cost: Decimal
    cost_per_portion: Optional[Decimal]
    line_count: int
    priced_line_count: int
    pricing_status: str


def _to_decimal(value) -> Decimal:
    if isinstance(value, bool):
        raise InvalidTargetYieldError(value)
    if isinstance(value, float):
        # Go through str so 0.1 stays 0.1
        value = str(value)
    try:
        result = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidTargetYieldError(value)
    if not result.is_finite():
        raise InvalidTargetYieldError(value)
    return result


class ScalingService:
    """
    Service for scaling recipes to a target yield.

    Usage:
        result = ScalingService(tenant).scale_recipe(recipe.id, 100)
    """

    def __init__(self, tenant, costing_service: Optional[CostingService] = None):
        self.tenant = tenant
        self.costing_service = costing_service or CostingService(tenant)

    def scale_recipe(self, recipe_id, target_yield) -> ScaledCostResult:
        """
        Scale a recipe and cost the scaled lines.

        Args:
            recipe_id: Recipe primary key.
            target_yield: Desired yield, a number greater than 0.

        Raises:
            InvalidTargetYieldError: target_yield is not a number > 0.
            InvalidRecipeYieldError: the recipe's own yield is not > 0.
            RecipeNotFoundError: The recipe is not visible to this tenant.
        """
        target = _to_decimal(target_yield)
        if target <= 0:
            raise InvalidTargetYieldError(target_yield)

        recipe = self.costing_service.get_recipe(recipe_id)
        original_yield = recipe.yield_quantity
        if original_yield is None or original_yield <= 0:
            raise InvalidRecipeYieldError(recipe)

        scale_factor = target / original_yield
        lines = self.costing_service.get_costing_lines(recipe)
        scaled = [line.scaled(scale_factor) for line in lines]

        computation = calculate_line_costs(
            scaled, target, self.costing_service.conversion_table, self.tenant
        )

        logger.debug(
            f"Scaled recipe {recipe.pk} from {original_yield} to {target} "
            f"(factor {scale_factor})"
        )

        return ScaledCostResult(
            recipe_id=recipe.pk,
            recipe_name=recipe.name,
            original_yield=original_yield,
            target_yield=target,
            scale_factor=scale_factor,
            scaled_lines=tuple(
                self._scaled_line(original, line_cost)
                for original, line_cost in zip(lines, computation.lines)
            ),
            total_cost=round_currency(computation.total_cost),
            cost_per_portion=round_currency(computation.cost_per_portion),
            line_count=computation.line_count,
            priced_line_count=computation.priced_line_count,
            pricing_status=computation.pricing_status,
        )

    def _scaled_line(self, original, line_cost: LineCost) -> ScaledLine:
        return ScaledLine(
            recipe_ingredient_id=line_cost.recipe_ingredient_id,
            ingredient_id=line_cost.ingredient_id,
            ingredient_name=line_cost.ingredient_name,
            original_quantity=original.quantity,
            scaled_quantity=line_cost.quantity,
            unit_code=line_cost.unit_code,
            measure_basis=line_cost.measure_basis,
            cost=line_cost.cost,
            error=line_cost.error,
        )


def scale_recipe(recipe_id, target_yield, tenant=None) -> ScaledCostResult:
    """
    Scale a recipe for ``tenant`` (default: the current tenant).
    """
    if tenant is None:
        tenant = get_current_tenant()
    return ScalingService(tenant).scale_recipe(recipe_id, target_yield)
