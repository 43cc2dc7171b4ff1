"""
Costing service for COGS.

Computes recipe cost from ingredient lines, converting each line to the
ingredient's common unit and correcting edible-portion quantities for yield
loss.

Per-line Cost:
1. Convert the line quantity to the ingredient's common unit
2. AP line → converted quantity as-is
   EP line → converted quantity / yield percent (missing yield = 1.0)
3. Line cost = as-purchased quantity × cost per common unit

A line that fails (cross-family units, bad yield percent, no cost, an
ingredient owned by another tenant) is excluded from the total and reported
with its error; the rest of the recipe is still costed. Arithmetic stays
exact; costs are rounded only when the reported result is built.
"""
import logging
from dataclasses import dataclass, field, replace
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, List, Optional, Tuple

from django.conf import settings

from cogs.exceptions import (
    COGSError,
    IngredientNotVisibleError,
    InvalidYieldPercentError,
    MissingCostError,
    RecipeNotFoundError,
)
from measurements.exceptions import MeasurementError
from measurements.models import Unit
from measurements.services.conversion_service import UnitConversionTable
from recipes.models import Ingredient, MeasureBasis, Recipe
from tenant.managers import get_current_tenant
from tenant.scope import is_visible

logger = logging.getLogger(__name__)


PRICING_COMPLETE = "complete"
PRICING_PARTIAL = "partial"
PRICING_UNPRICED = "unpriced"

DEFAULT_YIELD_PERCENT = Decimal("1")


def _quantum(places: int) -> Decimal:
    return Decimal(1).scaleb(-places)


def round_currency(value: Optional[Decimal]) -> Optional[Decimal]:
    """Round to reporting currency precision (2 dp by default)."""
    if value is None:
        return None
    places = getattr(settings, 'COSTING_CURRENCY_PLACES', 2)
    return value.quantize(_quantum(places), rounding=ROUND_HALF_UP)


def pricing_status_for(line_count: int, priced_line_count: int) -> str:
    if line_count and priced_line_count == line_count:
        return PRICING_COMPLETE
    if priced_line_count:
        return PRICING_PARTIAL
    return PRICING_UNPRICED


@dataclass(frozen=True)
class CostingLine:
    """
    Input to the cost calculator: one recipe line, detached from the ORM row.

    The scaler builds scaled copies with ``scaled()``; the stored
    RecipeIngredient is never touched.
    """
    recipe_ingredient_id: int
    ingredient: Ingredient
    quantity: Decimal
    unit: Unit
    measure_basis: str = MeasureBasis.EDIBLE_PORTION

    @classmethod
    def from_recipe_ingredient(cls, recipe_ingredient) -> "CostingLine":
        return cls(
            recipe_ingredient_id=recipe_ingredient.pk,
            ingredient=recipe_ingredient.ingredient,
            quantity=Decimal(recipe_ingredient.quantity),
            unit=recipe_ingredient.unit,
            measure_basis=recipe_ingredient.measure_basis,
        )

    def scaled(self, factor: Decimal) -> "CostingLine":
        return replace(self, quantity=self.quantity * factor)


@dataclass(frozen=True)
class LineCost:
    """Result of costing a single recipe line."""
    recipe_ingredient_id: int
    ingredient_id: int
    ingredient_name: str
    quantity: Decimal  # Line quantity in the line unit
    unit_code: str
    measure_basis: str
    ap_quantity: Optional[Decimal] = None  # As-purchased quantity in the common unit
    common_unit_code: Optional[str] = None
    unit_cost: Optional[Decimal] = None  # Cost per common unit
    cost: Optional[Decimal] = None  # Reported (rounded) line cost
    error: Optional[Exception] = None
    exact_cost: Optional[Decimal] = field(default=None, repr=False, compare=False)

    @property
    def is_priced(self) -> bool:
        return self.error is None and self.exact_cost is not None

    @property
    def error_type(self) -> Optional[str]:
        return type(self.error).__name__ if self.error is not None else None

    @property
    def error_message(self) -> Optional[str]:
        return str(self.error) if self.error is not None else None


@dataclass(frozen=True)
class CostComputation:
    """Exact, unrounded output of calculate_line_costs()."""
    lines: Tuple[LineCost, ...]
    total_cost: Decimal
    cost_per_portion: Optional[Decimal]

    @property
    def line_count(self) -> int:
        return len(self.lines)

    @property
    def priced_line_count(self) -> int:
        return sum(1 for line in self.lines if line.is_priced)

    @property
    def pricing_status(self) -> str:
        return pricing_status_for(self.line_count, self.priced_line_count)


@dataclass(frozen=True)
class CostResult:
    """Complete cost breakdown for a recipe."""
    recipe_id: int
    recipe_name: str
    yield_quantity: Decimal
    total_cost: Decimal
    cost_per_portion: Optional[Decimal]
    lines: Tuple[LineCost, ...] = ()
    line_count: int = 0
    priced_line_count: int = 0
    pricing_status: str = PRICING_UNPRICED

    @property
    def is_complete(self) -> bool:
        return self.pricing_status == PRICING_COMPLETE

    @property
    def errors(self) -> List[Exception]:
        return [line.error for line in self.lines if line.error is not None]


# =============================================================================
# Pure calculator
# =============================================================================

def as_purchased_quantity(line: CostingLine, conversion_table: UnitConversionTable) -> Decimal:
    """
    Quantity of the ingredient to buy for this line, in its common unit.

    Raises:
        UnitIncompatibleError: the line unit cannot be converted to the
            ingredient's common unit.
        InvalidYieldPercentError: EP line whose yield percent is outside (0, 1].
    """
    ingredient = line.ingredient
    converted = conversion_table.convert(line.quantity, line.unit, ingredient.common_unit)

    if line.measure_basis == MeasureBasis.AS_PURCHASED:
        return converted

    yield_percent = ingredient.yield_percent
    if yield_percent is None:
        yield_percent = DEFAULT_YIELD_PERCENT
    if not (Decimal("0") < yield_percent <= Decimal("1")):
        raise InvalidYieldPercentError(ingredient, yield_percent)

    return converted / yield_percent


def cost_line(line: CostingLine, conversion_table: UnitConversionTable, tenant=None) -> LineCost:
    """
    Cost one line, capturing a per-line failure on the result instead of raising.

    An ingredient ``tenant`` cannot see is never priced; its name and cost
    are left off the line.
    """
    ingredient = line.ingredient
    if not is_visible(ingredient, tenant):
        logger.warning(
            f"Excluding recipe line {line.recipe_ingredient_id} from cost: "
            f"ingredient {ingredient.pk} is not visible to tenant {getattr(tenant, 'pk', tenant)}"
        )
        return LineCost(
            recipe_ingredient_id=line.recipe_ingredient_id,
            ingredient_id=ingredient.pk,
            ingredient_name='',
            quantity=line.quantity,
            unit_code=line.unit.code,
            measure_basis=line.measure_basis,
            error=IngredientNotVisibleError(ingredient),
        )

    line_cost = LineCost(
        recipe_ingredient_id=line.recipe_ingredient_id,
        ingredient_id=ingredient.pk,
        ingredient_name=ingredient.name,
        quantity=line.quantity,
        unit_code=line.unit.code,
        measure_basis=line.measure_basis,
        common_unit_code=ingredient.common_unit.code,
    )

    try:
        ap_quantity = as_purchased_quantity(line, conversion_table)
        unit_cost = ingredient.effective_cost_per_unit
        if unit_cost is None:
            raise MissingCostError(ingredient)
    except (MeasurementError, COGSError) as e:
        logger.warning(
            f"Excluding recipe line {line.recipe_ingredient_id} ({ingredient.name}) "
            f"from cost: {e}"
        )
        return replace(line_cost, error=e)

    exact_cost = ap_quantity * unit_cost
    return replace(
        line_cost,
        ap_quantity=ap_quantity,
        unit_cost=unit_cost,
        cost=round_currency(exact_cost),
        exact_cost=exact_cost,
    )


def calculate_line_costs(
    lines: Iterable[CostingLine],
    yield_quantity: Optional[Decimal],
    conversion_table: UnitConversionTable,
    tenant=None,
) -> CostComputation:
    """
    Cost every line and total the successful ones.

    Shared by the calculator and the scaler. Reads no database state beyond
    what the conversion table and the line objects already carry. Lines are
    priced only when their ingredient is visible to ``tenant`` (None sees
    global ingredients only).
    """
    costed = tuple(cost_line(line, conversion_table, tenant) for line in lines)
    total_cost = sum(
        (line.exact_cost for line in costed if line.is_priced),
        Decimal("0"),
    )

    cost_per_portion = None
    if yield_quantity is not None and yield_quantity > 0:
        cost_per_portion = total_cost / yield_quantity

    return CostComputation(
        lines=costed,
        total_cost=total_cost,
        cost_per_portion=cost_per_portion,
    )


# =============================================================================
# Service
# =============================================================================

class CostingService:
    """
    Service for computing recipe costs.

    Read-only: never writes to Recipe or RecipeIngredient. See
    CostSnapshotService for the explicit cached-cost write.
    """

    def __init__(self, tenant, conversion_table: Optional[UnitConversionTable] = None):
        self.tenant = tenant
        self.conversion_table = conversion_table or UnitConversionTable()

    def get_recipe(self, recipe_id) -> Recipe:
        """
        Load a recipe visible to this tenant.

        Raises:
            RecipeNotFoundError: The recipe does not exist or belongs to
                another tenant.
        """
        recipe = Recipe.all_objects.select_related('yield_unit').filter(pk=recipe_id).first()
        if recipe is None or not is_visible(recipe, self.tenant):
            raise RecipeNotFoundError(recipe_id)
        return recipe

    def get_costing_lines(self, recipe) -> List[CostingLine]:
        """Detached costing lines for a recipe, in sequence order."""
        recipe_ingredients = recipe.lines.select_related(
            'ingredient',
            'ingredient__common_unit',
            'unit',
        ).order_by('sequence_order', 'id')
        return [CostingLine.from_recipe_ingredient(ri) for ri in recipe_ingredients]

    def calculate_cost(self, recipe_id) -> CostResult:
        """
        Compute the cost of a recipe.

        Args:
            recipe_id: Recipe primary key.

        Returns:
            CostResult. Lines that could not be priced carry their error and
            are excluded from total_cost.

        Raises:
            RecipeNotFoundError: The recipe is not visible to this tenant.
        """
        recipe = self.get_recipe(recipe_id)
        lines = self.get_costing_lines(recipe)
        computation = calculate_line_costs(
            lines, recipe.yield_quantity, self.conversion_table, self.tenant
        )

        if recipe.yield_quantity is None or recipe.yield_quantity <= 0:
            logger.warning(
                f"Recipe {recipe.pk} ({recipe.name}) has yield quantity "
                f"{recipe.yield_quantity}; cost per portion not reported"
            )

        return self.build_result(recipe, computation)

    def build_result(self, recipe, computation: CostComputation) -> CostResult:
        """Round a computation into the reported CostResult."""
        return CostResult(
            recipe_id=recipe.pk,
            recipe_name=recipe.name,
            yield_quantity=recipe.yield_quantity,
            total_cost=round_currency(computation.total_cost),
            cost_per_portion=round_currency(computation.cost_per_portion),
            lines=computation.lines,
            line_count=computation.line_count,
            priced_line_count=computation.priced_line_count,
            pricing_status=computation.pricing_status,
        )


def calculate_cost(recipe_id, tenant=None) -> CostResult:
    """
    Compute a recipe's cost for ``tenant`` (default: the current tenant).
    """
    if tenant is None:
        tenant = get_current_tenant()
    return CostingService(tenant).calculate_cost(recipe_id)
