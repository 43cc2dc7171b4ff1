from django.db import models
from django.db.models import Q
from threading import local

# Thread-local storage for current tenant
_thread_locals = local()


def set_current_tenant(tenant):
    """
    Set the current tenant for this thread.

    Args:
        tenant: Tenant instance or None to clear

    Called by the surrounding request layer and background jobs to establish
    tenant context for the current unit of work.
    """
    _thread_locals.tenant = tenant


def get_current_tenant():
    """
    Get the current tenant for this thread.

    Returns:
        Tenant instance or None if no tenant context is set
    """
    return getattr(_thread_locals, 'tenant', None)


class TenantManager(models.Manager):
    """
    Automatically filters querysets by current tenant.

    For operational data that is ALWAYS tenant-owned (vendors, site
    preferences). FAILS CLOSED: returns an empty queryset if no tenant
    context is set.

    Usage:
        class Vendor(models.Model):
            tenant = models.ForeignKey('tenant.Tenant', on_delete=models.CASCADE)

            objects = TenantManager()  # Default manager (tenant-filtered)
            all_objects = models.Manager()  # Bypass filter for engine reads
    """

    def get_queryset(self):
        tenant = get_current_tenant()

        if tenant:
            return super().get_queryset().filter(tenant=tenant)

        # FAIL CLOSED: Return empty queryset if no tenant context
        return super().get_queryset().none()


class TenantScopeQuerySet(models.QuerySet):
    """
    QuerySet for reference data with optional tenant ownership
    (NULL tenant = system-wide).

    SQL counterpart of tenant.scope.is_visible().
    """

    def visible_to(self, tenant):
        """System-wide rows plus rows owned by ``tenant``."""
        if tenant is None:
            return self.global_only()
        return self.filter(Q(tenant__isnull=True) | Q(tenant=tenant))

    def global_only(self):
        return self.filter(tenant__isnull=True)

    def owned_by(self, tenant):
        return self.filter(tenant=tenant)


class TenantScopedManager(models.Manager.from_queryset(TenantScopeQuerySet)):
    """
    Default manager for reference data with optional tenant ownership.

    Returns system-wide rows plus the current tenant's rows. Without a tenant
    context only system-wide rows are returned, never another tenant's data.

    Usage:
        class Ingredient(models.Model):
            tenant = models.ForeignKey('tenant.Tenant', null=True, blank=True, ...)

            objects = TenantScopedManager()  # Global + current tenant
            all_objects = models.Manager()  # Bypass all filters
    """

    def get_queryset(self):
        return super().get_queryset().visible_to(get_current_tenant())
