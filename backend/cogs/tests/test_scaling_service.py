"""
Tests for ScalingService.
"""
import dataclasses

import pytest
from decimal import Decimal

from cogs.exceptions import (
    IngredientNotVisibleError,
    InvalidRecipeYieldError,
    InvalidTargetYieldError,
    RecipeNotFoundError,
)
from cogs.services import CostingService, ScaledCostResult, ScalingService, scale_recipe
from cogs.tests.conftest import AP, EP
from measurements.exceptions import UnitIncompatibleError
from recipes.models import Ingredient, Recipe, RecipeIngredient
from tenant.managers import set_current_tenant


@pytest.mark.django_db
class TestScaleRecipe:
    """Factor-method scaling."""

    def test_scale_25_to_100_portions(self, tenant_a, glazed_carrots):
        """Factor 4: $200.00 total, cost per portion stays $2.00."""
        result = ScalingService(tenant_a).scale_recipe(glazed_carrots.pk, 100)

        assert result.scale_factor == Decimal('4')
        assert result.original_yield == Decimal('25')
        assert result.target_yield == Decimal('100')
        assert result.total_cost == Decimal('200.00')
        assert result.cost_per_portion == Decimal('2.00')
        assert [line.scaled_quantity for line in result.scaled_lines] == [Decimal('200'), Decimal('20')]

    def test_scale_to_own_yield_is_identity(self, tenant_a, carrots, butter, make_recipe):
        """Scaling to the recipe's own yield changes nothing."""
        recipe = make_recipe(
            'Honey Carrots',
            12,
            lines=[(carrots, '10', 'lb', EP), (butter, '0.75', 'lb', AP)],
            tenant=tenant_a,
        )
        original = CostingService(tenant_a).calculate_cost(recipe.pk)

        result = ScalingService(tenant_a).scale_recipe(recipe.pk, recipe.yield_quantity)

        assert result.scale_factor == Decimal('1')
        assert [line.scaled_quantity for line in result.scaled_lines] == [
            line.quantity for line in original.lines
        ]
        assert [line.cost for line in result.scaled_lines] == [line.cost for line in original.lines]
        assert result.total_cost == original.total_cost
        assert result.cost_per_portion == original.cost_per_portion

    @pytest.mark.parametrize('target_yield', [1, 7, '33.3', 250, Decimal('0.5'), 12.5])
    def test_cost_per_portion_invariant(self, tenant_a, carrots, butter, make_recipe, target_yield):
        """Cost per portion matches the unscaled recipe within one cent."""
        recipe = make_recipe(
            'Carrot Soup',
            12,
            lines=[(carrots, '7.5', 'lb', EP), (butter, '0.3', 'lb', AP)],
            tenant=tenant_a,
        )
        original = CostingService(tenant_a).calculate_cost(recipe.pk)

        result = ScalingService(tenant_a).scale_recipe(recipe.pk, target_yield)

        assert abs(result.cost_per_portion - original.cost_per_portion) <= Decimal('0.01')

    def test_scale_down(self, tenant_a, glazed_carrots):
        """25 → 10 portions scales by 0.4."""
        result = ScalingService(tenant_a).scale_recipe(glazed_carrots.pk, 10)

        assert result.scale_factor == Decimal('0.4')
        assert [line.scaled_quantity for line in result.scaled_lines] == [Decimal('20'), Decimal('2')]
        assert result.total_cost == Decimal('20.00')
        assert result.cost_per_portion == Decimal('2.00')

    def test_small_scaled_quantity_is_not_rounded_away(self, tenant_a, units, make_recipe):
        vanilla = Ingredient.all_objects.create(
            tenant=tenant_a,
            name='Vanilla Bean Paste',
            common_unit=units['lb'],
            cost_per_unit=Decimal('9999'),
        )
        recipe = make_recipe('Vanilla Glaze', 10, lines=[(vanilla, '0.0003', 'lb', AP)], tenant=tenant_a)

        result = ScalingService(tenant_a).scale_recipe(recipe.pk, 1)

        line = result.scaled_lines[0]
        # 0.00003 lb at $9999/lb
        assert line.scaled_quantity == Decimal('0.00003')
        assert line.cost == Decimal('0.30')

    def test_other_tenants_ingredient_is_not_priced(self, tenant_a, tenant_b, carrots, units, make_recipe):
        truffle = Ingredient.all_objects.create(
            tenant=tenant_b,
            name='Truffle Butter',
            common_unit=units['lb'],
            cost_per_unit=Decimal('9.87'),
        )
        recipe = make_recipe(
            'Shared Stew',
            4,
            lines=[(carrots, '10', 'lb', EP), (truffle, '1', 'lb', AP)],
        )

        result = ScalingService(tenant_a).scale_recipe(recipe.pk, 8)

        assert isinstance(result.scaled_lines[1].error, IngredientNotVisibleError)
        assert result.scaled_lines[1].cost is None
        assert result.total_cost == Decimal('14.81')

    def test_units_and_basis_unchanged(self, tenant_a, glazed_carrots):
        result = ScalingService(tenant_a).scale_recipe(glazed_carrots.pk, 50)

        assert [line.unit_code for line in result.scaled_lines] == ['lb', 'lb']
        assert [line.measure_basis for line in result.scaled_lines] == [AP, AP]
        assert [line.original_quantity for line in result.scaled_lines] == [Decimal('50'), Decimal('5')]

    def test_line_errors_carried_through(self, tenant_a, carrots, make_recipe):
        recipe = make_recipe(
            'Carrot Slaw',
            4,
            lines=[(carrots, '10', 'lb', EP), (carrots, '2', 'cup', EP)],
            tenant=tenant_a,
        )

        result = ScalingService(tenant_a).scale_recipe(recipe.pk, 8)

        assert isinstance(result.scaled_lines[1].error, UnitIncompatibleError)
        assert result.scaled_lines[1].cost is None
        assert result.scaled_lines[1].scaled_quantity == Decimal('4')
        assert result.total_cost == Decimal('14.81')
        assert result.pricing_status == 'partial'


@pytest.mark.django_db
class TestScaleRecipeValidation:
    """Structurally invalid inputs raise."""

    @pytest.mark.parametrize('target_yield', [0, -5, '0', Decimal('-0.01')])
    def test_non_positive_target(self, tenant_a, glazed_carrots, target_yield):
        with pytest.raises(InvalidTargetYieldError) as exc_info:
            ScalingService(tenant_a).scale_recipe(glazed_carrots.pk, target_yield)

        assert exc_info.value.target_yield == target_yield

    @pytest.mark.parametrize('target_yield', ['lots', None, True, float('nan'), 'Infinity'])
    def test_non_numeric_target(self, tenant_a, glazed_carrots, target_yield):
        with pytest.raises(InvalidTargetYieldError):
            ScalingService(tenant_a).scale_recipe(glazed_carrots.pk, target_yield)

    def test_target_checked_before_recipe_lookup(self, tenant_a):
        """A bad target fails fast even for an unknown recipe."""
        with pytest.raises(InvalidTargetYieldError):
            ScalingService(tenant_a).scale_recipe(999999, 0)

    def test_recipe_with_zero_yield(self, tenant_a, butter, make_recipe):
        recipe = make_recipe('Unfinished', 0, lines=[(butter, '1', 'lb', AP)], tenant=tenant_a)

        with pytest.raises(InvalidRecipeYieldError) as exc_info:
            ScalingService(tenant_a).scale_recipe(recipe.pk, 10)

        assert exc_info.value.recipe.pk == recipe.pk

    def test_other_tenants_recipe(self, tenant_b, glazed_carrots):
        with pytest.raises(RecipeNotFoundError):
            ScalingService(tenant_b).scale_recipe(glazed_carrots.pk, 100)


@pytest.mark.django_db
class TestScaledResultIsDerived:
    """Scaling never touches the stored recipe."""

    def test_stored_recipe_untouched(self, tenant_a, glazed_carrots):
        ScalingService(tenant_a).scale_recipe(glazed_carrots.pk, 100)

        glazed_carrots.refresh_from_db()
        assert glazed_carrots.yield_quantity == Decimal('25')
        assert glazed_carrots.food_cost_per_portion is None
        quantities = list(
            RecipeIngredient.objects.filter(recipe=glazed_carrots)
            .order_by('sequence_order')
            .values_list('quantity', flat=True)
        )
        assert quantities == [Decimal('50'), Decimal('5')]
        assert Recipe.all_objects.count() == 1

    def test_result_is_frozen_value_object(self, tenant_a, glazed_carrots):
        result = ScalingService(tenant_a).scale_recipe(glazed_carrots.pk, 100)

        assert isinstance(result, ScaledCostResult)
        assert not isinstance(result, Recipe)
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.total_cost = Decimal('0')
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.scaled_lines[0].scaled_quantity = Decimal('0')

    def test_module_level_uses_current_tenant(self, tenant_a, glazed_carrots):
        set_current_tenant(tenant_a)

        result = scale_recipe(glazed_carrots.pk, 50)

        assert result.total_cost == Decimal('100.00')
