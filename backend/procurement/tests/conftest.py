"""
Pytest fixtures for procurement tests.
"""
import datetime

import pytest
from decimal import Decimal

from procurement.models import (
    ProductSpecification,
    SegmentIngredientDefault,
    SiteIngredientPreference,
    Vendor,
)
from recipes.models import Ingredient
from tenant.models import MarketSegment


AS_OF = datetime.date(2024, 6, 1)


@pytest.fixture
def as_of():
    """Reference resolution date used across scenarios."""
    return AS_OF


@pytest.fixture
def vendor_a(tenant_a):
    """Broadline vendor for tenant A"""
    return Vendor.all_objects.create(tenant=tenant_a, name='Sysco Boston')


@pytest.fixture
def produce_vendor_a(tenant_a):
    """Produce vendor for tenant A"""
    return Vendor.all_objects.create(
        tenant=tenant_a,
        name='Boston Produce Co',
        vendor_type=Vendor.VendorType.PRODUCE,
    )


@pytest.fixture
def vendor_b(tenant_b):
    """Broadline vendor for tenant B"""
    return Vendor.all_objects.create(tenant=tenant_b, name='US Foods West')


@pytest.fixture
def make_spec(carrots):
    """Factory for product specifications of the carrots ingredient by default."""
    def _make(name, tenant=None, ingredient=None, is_default=False,
              status=ProductSpecification.Status.ACTIVE, market_form=ProductSpecification.MarketForm.FRESH):
        return ProductSpecification.all_objects.create(
            tenant=tenant,
            ingredient=ingredient or carrots,
            name=name,
            market_form=market_form,
            effective_date=datetime.date(2023, 1, 1),
            is_default=is_default,
            status=status,
        )
    return _make


@pytest.fixture
def default_spec(make_spec):
    """Global default: whole fresh carrots"""
    return make_spec('Carrots, Whole, Fresh, US No. 1', is_default=True)


@pytest.fixture
def diced_spec(make_spec):
    """Global non-default: frozen diced carrots"""
    return make_spec(
        'Carrots, Diced, Frozen IQF',
        market_form=ProductSpecification.MarketForm.FROZEN,
    )


@pytest.fixture
def baby_spec(make_spec):
    """Global non-default: fresh baby carrots"""
    return make_spec('Carrots, Baby, Peeled')


@pytest.fixture
def make_segment_default(carrots):
    """Factory for segment defaults (Healthcare, carrots by default)."""
    def _make(specification, priority=0, effective_date=datetime.date(2024, 1, 1), end_date=None,
              segment=MarketSegment.HEALTHCARE, ingredient=None,
              status=SegmentIngredientDefault.Status.ACTIVE):
        return SegmentIngredientDefault.objects.create(
            segment=segment,
            ingredient=ingredient or carrots,
            specification=specification,
            priority=priority,
            effective_date=effective_date,
            end_date=end_date,
            status=status,
        )
    return _make


@pytest.fixture
def make_site_pref(site_a, carrots):
    """Factory for site preferences (site A, carrots by default)."""
    def _make(specification, priority=0, effective_date=datetime.date(2024, 1, 1), end_date=None,
              site=None, ingredient=None, vendor=None,
              status=SiteIngredientPreference.Status.ACTIVE):
        site = site or site_a
        return SiteIngredientPreference.all_objects.create(
            tenant=site.tenant,
            site=site,
            ingredient=ingredient or carrots,
            specification=specification,
            preferred_vendor=vendor,
            priority=priority,
            effective_date=effective_date,
            end_date=end_date,
            status=status,
        )
    return _make


@pytest.fixture
def celery_root(units):
    """System-wide ingredient with no purchasing data at all"""
    return Ingredient.all_objects.create(
        tenant=None,
        name='Celery Root',
        common_unit=units['lb'],
        cost_per_unit=Decimal('2.15'),
    )
