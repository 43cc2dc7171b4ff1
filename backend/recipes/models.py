from django.db import models
from django.utils.translation import gettext_lazy as _

from measurements.models import Unit
from tenant.managers import TenantScopedManager


class MeasureBasis(models.TextChoices):
    """How a recipe line quantity is measured."""
    AS_PURCHASED = "AP", _("As Purchased")
    EDIBLE_PORTION = "EP", _("Edible Portion")


class Ingredient(models.Model):
    """
    Master list of generic ingredients used in recipes.

    Ingredients are system-wide (tenant=NULL) or tenant-specific. Recipes
    reference the generic ingredient; the purchasable quality/grade is
    resolved at purchasing time through procurement specifications.

    Yield percent is the edible-portion fraction of the as-purchased quantity,
    e.g., 0.81 for carrots (19% lost to peeling and trimming).
    """

    class Status(models.TextChoices):
        ACTIVE = "Active", _("Active")
        DISCONTINUED = "Discontinued", _("Discontinued")
        SEASONAL = "Seasonal", _("Seasonal")

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='ingredients',
        help_text=_("NULL = system-wide, value = tenant-specific")
    )
    name = models.CharField(max_length=200)
    common_unit = models.ForeignKey(
        Unit,
        on_delete=models.PROTECT,
        related_name='ingredients',
        help_text=_("Standard unit for recipe use; costs are per this unit")
    )
    purchase_unit = models.CharField(
        max_length=50,
        blank=True,
        help_text=_("Unit for purchasing, e.g., 'case', 'bag'")
    )
    purchase_unit_cost = models.DecimalField(
        max_digits=12,
        decimal_places=4,
        null=True,
        blank=True,
        help_text=_("Cost per purchase unit")
    )
    units_per_purchase_unit = models.DecimalField(
        max_digits=12,
        decimal_places=4,
        null=True,
        blank=True,
        help_text=_("How many common units per purchase unit")
    )
    cost_per_unit = models.DecimalField(
        max_digits=12,
        decimal_places=4,
        null=True,
        blank=True,
        help_text=_("Cost per common unit (overrides the purchase-unit derivation)")
    )
    yield_percent = models.DecimalField(
        max_digits=6,
        decimal_places=4,
        null=True,
        blank=True,
        help_text=_("EP yield from AP as a fraction, e.g., 0.81. NULL is treated as 1.0")
    )
    preferred_vendor = models.ForeignKey(
        'procurement.Vendor',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='preferred_ingredients',
        help_text=_("Default vendor when no site preference names one")
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE
    )

    objects = TenantScopedManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Ingredient")
        verbose_name_plural = _("Ingredients")
        ordering = ['name']
        indexes = [
            models.Index(fields=['tenant']),
            models.Index(fields=['preferred_vendor']),
            models.Index(fields=['status']),
        ]

    def __str__(self):
        return self.name

    @property
    def effective_cost_per_unit(self):
        """
        Cost per common unit, or None when it cannot be determined.

        A directly set cost_per_unit wins; otherwise it is derived from
        purchase_unit_cost ÷ units_per_purchase_unit.
        """
        if self.cost_per_unit is not None:
            return self.cost_per_unit
        if (
            self.purchase_unit_cost is not None
            and self.units_per_purchase_unit is not None
            and self.units_per_purchase_unit > 0
        ):
            return self.purchase_unit_cost / self.units_per_purchase_unit
        return None


class Recipe(models.Model):
    """
    A standardized recipe.

    System-wide (tenant=NULL) or tenant-specific. The costing and scaling
    services only read recipes; food_cost_per_portion is a cached snapshot
    written by an explicit caller request.
    """

    class Status(models.TextChoices):
        DRAFT = "Draft", _("Draft")
        ACTIVE = "Active", _("Active")
        ARCHIVED = "Archived", _("Archived")

    tenant = models.ForeignKey(
        'tenant.Tenant',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='recipes',
        help_text=_("NULL = system-wide, value = tenant-specific")
    )
    name = models.CharField(max_length=200)
    yield_quantity = models.DecimalField(
        max_digits=12,
        decimal_places=4,
        help_text=_("Number of portions (or yield units) the recipe produces")
    )
    yield_unit = models.ForeignKey(
        Unit,
        on_delete=models.PROTECT,
        related_name='recipe_yields'
    )
    portion_size = models.CharField(max_length=100, blank=True)
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.DRAFT
    )
    food_cost_per_portion = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Cached cost per portion from the last explicit cost snapshot")
    )

    objects = TenantScopedManager()
    all_objects = models.Manager()

    class Meta:
        verbose_name = _("Recipe")
        verbose_name_plural = _("Recipes")
        ordering = ['name']
        indexes = [
            models.Index(fields=['tenant']),
            models.Index(fields=['status']),
        ]

    def __str__(self):
        return self.name


class RecipeIngredient(models.Model):
    """
    One ingredient line of a recipe.

    The quantity is expressed in ``unit`` and measured either as purchased
    (AP) or as edible portion (EP).
    """
    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        related_name='lines'
    )
    ingredient = models.ForeignKey(
        Ingredient,
        on_delete=models.PROTECT,
        related_name='recipe_lines'
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=4,
        help_text=_("Quantity of the ingredient in the line unit")
    )
    unit = models.ForeignKey(
        Unit,
        on_delete=models.PROTECT,
        related_name='recipe_lines'
    )
    measure_basis = models.CharField(
        max_length=2,
        choices=MeasureBasis.choices,
        default=MeasureBasis.EDIBLE_PORTION,
        help_text=_("AP = as purchased, EP = edible portion (after trim/waste)")
    )
    sequence_order = models.PositiveIntegerField(default=0)
    is_optional = models.BooleanField(default=False)
    ingredient_group = models.CharField(max_length=100, blank=True)
    prep_instruction = models.CharField(max_length=255, blank=True)
    calculated_cost = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
        help_text=_("Cached line cost from the last explicit cost snapshot")
    )

    class Meta:
        verbose_name = _("Recipe Ingredient")
        verbose_name_plural = _("Recipe Ingredients")
        ordering = ['recipe', 'sequence_order', 'id']
        indexes = [
            models.Index(fields=['recipe', 'sequence_order']),
        ]

    def __str__(self):
        return (
            f"{self.quantity} {self.unit.code} {self.measure_basis} of "
            f"{self.ingredient.name} for {self.recipe.name}"
        )

