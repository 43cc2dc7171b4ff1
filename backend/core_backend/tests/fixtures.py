"""
Shared test fixtures for all backend tests.

This module provides reusable pytest fixtures for common test objects
like tenants, sites and the global unit table.
"""
import pytest
from decimal import Decimal

from measurements.services import seed_units
from tenant.models import MarketSegment, Site, Tenant


# ============================================================================
# TENANT FIXTURES
# ============================================================================

@pytest.fixture
def tenant_a(db):
    """Create test tenant A (hospital system)"""
    return Tenant.objects.create(
        name='Mercy Health System',
        slug='mercy-health',
        segment=MarketSegment.HEALTHCARE,
        is_active=True
    )


@pytest.fixture
def tenant_b(db):
    """Create test tenant B (school district)"""
    return Tenant.objects.create(
        name='Lakeside School District',
        slug='lakeside-schools',
        segment=MarketSegment.K12_SCHOOL,
        is_active=True
    )


# ============================================================================
# SITE FIXTURES
# ============================================================================

@pytest.fixture
def site_a(tenant_a):
    """Main kitchen for tenant A"""
    return Site.objects.create(
        tenant=tenant_a,
        name='Mercy Main Kitchen',
        site_type=Site.SiteType.KITCHEN,
        timezone='America/New_York',
    )


@pytest.fixture
def site_a2(tenant_a):
    """Second site for tenant A"""
    return Site.objects.create(
        tenant=tenant_a,
        name='Mercy West Cafeteria',
        site_type=Site.SiteType.CAFETERIA,
        timezone='America/Chicago',
    )


@pytest.fixture
def site_b(tenant_b):
    """Central kitchen for tenant B"""
    return Site.objects.create(
        tenant=tenant_b,
        name='Lakeside Central Kitchen',
        site_type=Site.SiteType.COMMISSARY,
        timezone='America/Los_Angeles',
    )


# ============================================================================
# UNIT FIXTURES
# ============================================================================

@pytest.fixture
def units(db):
    """Seed the global unit table; returns a dict of code → Unit."""
    return seed_units()


# ============================================================================
# INGREDIENT FIXTURES
# ============================================================================

@pytest.fixture
def carrots(units):
    """System-wide ingredient: $0.60/lb, 81% edible yield"""
    from recipes.models import Ingredient
    return Ingredient.all_objects.create(
        tenant=None,
        name='Carrots',
        common_unit=units['lb'],
        cost_per_unit=Decimal('0.60'),
        yield_percent=Decimal('0.81'),
    )


@pytest.fixture
def whole_milk(units):
    """System-wide ingredient priced per purchase unit: $4.20 per gallon case of 1 gal"""
    from recipes.models import Ingredient
    return Ingredient.all_objects.create(
        tenant=None,
        name='Whole Milk',
        common_unit=units['gal'],
        purchase_unit='gallon',
        purchase_unit_cost=Decimal('4.20'),
        units_per_purchase_unit=Decimal('1'),
    )
