"""
Cost snapshot service.

Writes the cached ``Recipe.food_cost_per_portion`` and each line's
``calculated_cost`` from a fresh cost calculation. This is the only write in
the COGS services and runs only when a caller asks for it.
"""
import logging

from django.db import transaction

from cogs.exceptions import GlobalRecipeWriteError, RecipeNotFoundError
from cogs.services.costing_service import CostingService, CostResult, calculate_line_costs
from recipes.models import Recipe, RecipeIngredient
from tenant.scope import GlobalScope, is_visible, scope_of

logger = logging.getLogger(__name__)


class CostSnapshotService:
    """
    Persists cost snapshots for tenant-owned recipes.

    Usage:
        result = CostSnapshotService(tenant).refresh(recipe.id)
    """

    def __init__(self, tenant, costing_service=None):
        self.tenant = tenant
        self.costing_service = costing_service or CostingService(tenant)

    @transaction.atomic
    def refresh(self, recipe_id) -> CostResult:
        """
        Recalculate a recipe's cost and store it on the recipe and its lines.

        The recipe row is locked before it is read, and the snapshot is built
        from that locked row. Lines that could not be priced get
        ``calculated_cost = NULL``.

        Raises:
            RecipeNotFoundError: The recipe is not visible to this tenant.
            GlobalRecipeWriteError: The recipe is system-wide.
        """
        recipe = (
            Recipe.all_objects.select_for_update()
            .select_related('yield_unit')
            .filter(pk=recipe_id)
            .first()
        )
        if recipe is None or not is_visible(recipe, self.tenant):
            raise RecipeNotFoundError(recipe_id)
        if isinstance(scope_of(recipe), GlobalScope):
            raise GlobalRecipeWriteError(recipe)

        lines = self.costing_service.get_costing_lines(recipe)
        computation = calculate_line_costs(
            lines, recipe.yield_quantity, self.costing_service.conversion_table, self.tenant
        )
        result = self.costing_service.build_result(recipe, computation)

        line_costs = {line.recipe_ingredient_id: line.cost for line in result.lines}
        recipe_ingredients = list(RecipeIngredient.objects.filter(recipe=recipe))
        for recipe_ingredient in recipe_ingredients:
            recipe_ingredient.calculated_cost = line_costs.get(recipe_ingredient.pk)
        RecipeIngredient.objects.bulk_update(recipe_ingredients, ['calculated_cost'])

        recipe.food_cost_per_portion = result.cost_per_portion
        recipe.save(update_fields=['food_cost_per_portion'])

        logger.info(
            f"Stored cost snapshot for recipe {recipe.pk} ({recipe.name}): "
            f"{result.cost_per_portion} per portion, {result.pricing_status}"
        )
        return result
