"""
Tenant manager tests.

TenantScopedManager must return system-wide rows plus the current tenant's
rows and nothing else. TenantManager fails closed without a tenant context.
"""
import pytest
from decimal import Decimal

from procurement.models import Vendor
from recipes.models import Ingredient
from tenant.managers import get_current_tenant, set_current_tenant


pytestmark = pytest.mark.tenant_isolation


@pytest.fixture
def onions_a(tenant_a, units):
    return Ingredient.all_objects.create(
        tenant=tenant_a,
        name='Sweet Onions',
        common_unit=units['lb'],
        cost_per_unit=Decimal('0.95'),
    )


@pytest.fixture
def onions_b(tenant_b, units):
    return Ingredient.all_objects.create(
        tenant=tenant_b,
        name='Red Onions',
        common_unit=units['lb'],
        cost_per_unit=Decimal('1.10'),
    )


@pytest.mark.django_db
class TestTenantScopedManager:
    """Test global + own-tenant filtering for reference data"""

    def test_tenant_sees_global_and_own_rows(self, tenant_a, carrots, onions_a, onions_b):
        """CRITICAL: tenant A sees global carrots and its own onions only"""
        set_current_tenant(tenant_a)

        visible = set(Ingredient.objects.all())

        assert visible == {carrots, onions_a}
        assert onions_b not in visible

    def test_no_tenant_context_sees_global_only(self, carrots, onions_a, onions_b):
        """Without tenant context only system-wide rows are returned"""
        set_current_tenant(None)

        assert list(Ingredient.objects.all()) == [carrots]

    def test_visible_to_queryset(self, tenant_b, carrots, onions_a, onions_b):
        """visible_to() is the SQL counterpart of is_visible()"""
        set_current_tenant(tenant_b)

        scoped = set(Ingredient.objects.visible_to(tenant_b))
        assert scoped == {carrots, onions_b}

    def test_global_only_and_owned_by(self, tenant_a, carrots, onions_a, onions_b):
        """global_only() and owned_by() split the two scopes"""
        set_current_tenant(tenant_a)

        assert list(Ingredient.objects.global_only()) == [carrots]
        assert list(Ingredient.objects.owned_by(tenant_a)) == [onions_a]

    def test_all_objects_bypasses_filter(self, tenant_a, carrots, onions_a, onions_b):
        """all_objects returns every row regardless of context"""
        set_current_tenant(tenant_a)
        assert Ingredient.all_objects.count() == 3


@pytest.mark.django_db
class TestTenantManager:
    """Test fail-closed filtering for always-tenant-owned data"""

    def test_filters_by_current_tenant(self, tenant_a, tenant_b):
        """Vendors are filtered to the current tenant"""
        vendor_a = Vendor.all_objects.create(tenant=tenant_a, name='Sysco')
        Vendor.all_objects.create(tenant=tenant_b, name='US Foods')

        set_current_tenant(tenant_a)

        assert list(Vendor.objects.all()) == [vendor_a]

    def test_fails_closed_without_tenant(self, tenant_a):
        """No tenant context returns an empty queryset"""
        Vendor.all_objects.create(tenant=tenant_a, name='Sysco')

        set_current_tenant(None)

        assert get_current_tenant() is None
        assert Vendor.objects.count() == 0
