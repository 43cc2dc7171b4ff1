from django.db import models
from django.utils.translation import gettext_lazy as _

from tenant.managers import TenantManager, TenantScopedManager
from tenant.models import MarketSegment


class Vendor(models.Model):
    """
    Supplier of purchasable products. Always tenant-owned.
    """

    class VendorType(models.TextChoices):
        BROADLINE = "Broadline Distributor", _("Broadline Distributor")
        PRODUCE = "Produce", _("Produce")
        DAIRY = "Dairy", _("Dairy")
        MEAT = "Meat", _("Meat")
        BAKERY = "Bakery", _("Bakery")
        SEAFOOD = "Seafood", _("Seafood")
        SPECIALTY = "Specialty", _("Specialty")
        BEVERAGE = "Beverage", _("Beverage")
        PAPER = "Paper/Disposables", _("Paper/Disposables")

    class Status(models.TextChoices):
        ACTIVE = "Active", _("Active")
        INACTIVE = "Inactive", _("Inactive")
        SUSPENDED = "Suspended", _("Suspended")
        PROSPECTIVE = "Prospective", _("Prospective")

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='vendors'
    )
    name = models.CharField(max_length=200)
    vendor_type = models.CharField(
        max_length=30,
        choices=VendorType.choices,
        default=VendorType.BROADLINE
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE
    )

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Vendor")
        verbose_name_plural = _("Vendors")
        ordering = ['name']
        indexes = [
            models.Index(fields=['tenant']),
            models.Index(fields=['status']),
        ]

    def __str__(self):
        return self.name


class ProductSpecification(models.Model):
    """
    A purchasable quality/grade for one ingredient
    (e.g., "Grade A Fresh Chicken Breast" vs "Frozen IQF Chicken").

    System-wide (tenant=NULL) or tenant-specific. ``is_default`` marks the
    global fallback specification for the ingredient. At most one Active
    default per ingredient should exist, but this is not enforced;
    resolution tolerates duplicates.
    """

    class MarketForm(models.TextChoices):
        FRESH = "Fresh", _("Fresh")
        FROZEN = "Frozen", _("Frozen")
        CANNED = "Canned", _("Canned")
        DRIED = "Dried", _("Dried")
        PREPARED = "Prepared", _("Prepared")

    class Status(models.TextChoices):
        ACTIVE = "Active", _("Active")
        INACTIVE = "Inactive", _("Inactive")
        UNDER_REVIEW = "Under Review", _("Under Review")

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='product_specifications',
        help_text=_("NULL = system-wide, value = tenant-specific")
    )
    ingredient = models.ForeignKey(
        'recipes.Ingredient',
        on_delete=models.CASCADE,
        related_name='specifications'
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    market_form = models.CharField(
        max_length=20,
        choices=MarketForm.choices,
        default=MarketForm.FRESH
    )
    pack_size = models.CharField(
        max_length=100,
        blank=True,
        help_text=_("Package size, e.g., '6/#10 cans', '40 lb case'")
    )
    estimated_price = models.DecimalField(
        max_digits=12,
        decimal_places=4,
        null=True,
        blank=True
    )
    effective_date = models.DateField()
    is_default = models.BooleanField(
        default=False,
        help_text=_("Global fallback when no segment or site preference applies")
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE
    )

    objects = TenantScopedManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Product Specification")
        verbose_name_plural = _("Product Specifications")
        ordering = ['ingredient', 'id']
        indexes = [
            models.Index(fields=['ingredient', 'is_default', 'status']),
            models.Index(fields=['tenant']),
        ]

    def __str__(self):
        return self.name


class EffectiveWindowMixin(models.Model):
    """
    Shared fields for override rows that apply over a half-open date window
    [effective_date, end_date) and compete on priority.
    """
    priority = models.IntegerField(
        default=0,
        help_text=_("Higher wins among rows of the same tier")
    )
    effective_date = models.DateField()
    end_date = models.DateField(
        null=True,
        blank=True,
        help_text=_("Exclusive end date; NULL = open-ended")
    )
    rationale = models.TextField(blank=True)

    class Meta:
        abstract = True

    def is_effective_on(self, as_of):
        """Whether ``as_of`` falls inside [effective_date, end_date)."""
        if self.effective_date > as_of:
            return False
        return self.end_date is None or as_of < self.end_date


class SegmentIngredientDefault(EffectiveWindowMixin):
    """
    Default specification for an ingredient within a market segment.

    Universal (no tenant): every tenant of the segment shares these rows.
    Overrides the global default; overridden by site preferences.
    """

    class Status(models.TextChoices):
        ACTIVE = "Active", _("Active")
        INACTIVE = "Inactive", _("Inactive")

    segment = models.CharField(
        max_length=30,
        choices=MarketSegment.choices
    )
    ingredient = models.ForeignKey(
        'recipes.Ingredient',
        on_delete=models.CASCADE,
        related_name='segment_defaults'
    )
    specification = models.ForeignKey(
        ProductSpecification,
        on_delete=models.CASCADE,
        related_name='segment_defaults'
    )
    is_usda_commodity = models.BooleanField(default=False)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE
    )

    class Meta:
        verbose_name = _("Segment Ingredient Default")
        verbose_name_plural = _("Segment Ingredient Defaults")
        indexes = [
            models.Index(fields=['segment', 'ingredient', 'status']),
            models.Index(fields=['effective_date', 'end_date']),
        ]

    def __str__(self):
        return f"{self.segment}: {self.ingredient} → {self.specification}"


class SiteIngredientPreference(EffectiveWindowMixin):
    """
    Site-specific specification (and optional vendor) for an ingredient.

    Highest-precedence tier of specification resolution. Always tenant-owned.
    """

    class Status(models.TextChoices):
        ACTIVE = "Active", _("Active")
        INACTIVE = "Inactive", _("Inactive")
        PENDING_APPROVAL = "Pending Approval", _("Pending Approval")

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        related_name='site_ingredient_preferences'
    )
    site = models.ForeignKey(
        'tenant.Site',
        on_delete=models.CASCADE,
        related_name='ingredient_preferences'
    )
    ingredient = models.ForeignKey(
        'recipes.Ingredient',
        on_delete=models.CASCADE,
        related_name='site_preferences'
    )
    specification = models.ForeignKey(
        ProductSpecification,
        on_delete=models.CASCADE,
        related_name='site_preferences'
    )
    preferred_vendor = models.ForeignKey(
        Vendor,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='site_preferences'
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE
    )

    objects = TenantManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Site Ingredient Preference")
        verbose_name_plural = _("Site Ingredient Preferences")
        indexes = [
            models.Index(fields=['site', 'ingredient', 'status']),
            models.Index(fields=['tenant']),
            models.Index(fields=['effective_date', 'end_date']),
        ]

    def __str__(self):
        return f"{self.site}: {self.ingredient} → {self.specification}"
