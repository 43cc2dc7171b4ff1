"""
Pytest fixtures for COGS tests.
"""
import pytest
from decimal import Decimal

from recipes.models import Ingredient, MeasureBasis, Recipe, RecipeIngredient

AP = MeasureBasis.AS_PURCHASED
EP = MeasureBasis.EDIBLE_PORTION


@pytest.fixture
def butter(tenant_a, units):
    """Tenant A ingredient: $4.00/lb, no trim loss"""
    return Ingredient.all_objects.create(
        tenant=tenant_a,
        name='Butter, Unsalted',
        common_unit=units['lb'],
        cost_per_unit=Decimal('4.00'),
    )


@pytest.fixture
def flour(units):
    """System-wide ingredient priced per kilogram: 25 kg bag for $30.00"""
    return Ingredient.all_objects.create(
        tenant=None,
        name='Flour, All Purpose',
        common_unit=units['kg'],
        purchase_unit='bag',
        purchase_unit_cost=Decimal('30.00'),
        units_per_purchase_unit=Decimal('25'),
    )


@pytest.fixture
def saffron(units):
    """System-wide ingredient with no cost data"""
    return Ingredient.all_objects.create(
        tenant=None,
        name='Saffron Threads',
        common_unit=units['g'],
    )


@pytest.fixture
def make_recipe(units):
    """
    Factory for recipes.

    Lines are (ingredient, quantity, unit_code, measure_basis) tuples.
    """
    def _make(name, yield_quantity, lines=(), tenant=None, yield_unit='each'):
        recipe = Recipe.all_objects.create(
            tenant=tenant,
            name=name,
            yield_quantity=Decimal(str(yield_quantity)),
            yield_unit=units[yield_unit],
            status=Recipe.Status.ACTIVE,
        )
        for order, (ingredient, quantity, unit_code, basis) in enumerate(lines, start=1):
            RecipeIngredient.objects.create(
                recipe=recipe,
                ingredient=ingredient,
                quantity=Decimal(str(quantity)),
                unit=units[unit_code],
                measure_basis=basis,
                sequence_order=order,
            )
        return recipe
    return _make


@pytest.fixture
def glazed_carrots(tenant_a, carrots, butter, make_recipe):
    """
    Tenant A recipe: 25 portions costing exactly $50.00.

    50 lb carrots AP @ $0.60 = $30.00
     5 lb butter  AP @ $4.00 = $20.00
    """
    return make_recipe(
        'Glazed Carrots',
        25,
        lines=[
            (carrots, '50', 'lb', AP),
            (butter, '5', 'lb', AP),
        ],
        tenant=tenant_a,
    )
