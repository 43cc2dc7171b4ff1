"""
Measurements app - shared unit definitions.

This app contains global (non-tenant-scoped) measurement units that are
shared across all tenants and apps (recipes, procurement, COGS).

Units are canonical reference data - a pound is a pound everywhere.
Each unit belongs to a family and carries a linear factor to that family's
base unit; conversions never cross families.
"""
from django.db import models
from django.utils.translation import gettext_lazy as _


class UnitFamily(models.TextChoices):
    """Families of measurement units. Conversion is only defined within one family."""
    WEIGHT = "Weight", _("Weight")
    VOLUME = "Volume", _("Volume")
    COUNT = "Count", _("Count")
    EACH = "Each", _("Each")


class Unit(models.Model):
    """
    Measurement unit - GLOBAL reference data.

    Units are NOT tenant-scoped because a gram is a gram everywhere.

    Formula: qty_in_base = qty_in_unit * conversion_to_base

    Example: 1 lb = 453.59237 g → code="lb", base_unit_code="g",
    conversion_to_base=453.59237

    A unit without conversion_to_base (e.g., "case", whose size depends on
    the product) only converts to itself.
    """
    code = models.CharField(
        max_length=20,
        unique=True,
        help_text=_("Short code for the unit, e.g., 'g', 'lb', 'cup', 'each'")
    )
    name = models.CharField(
        max_length=50,
        help_text=_("Full name of the unit, e.g., 'gram', 'pound', 'cup'")
    )
    family = models.CharField(
        max_length=20,
        choices=UnitFamily.choices,
        help_text=_("Family of the unit: Weight, Volume, Count or Each")
    )
    conversion_to_base = models.DecimalField(
        max_digits=24,
        decimal_places=12,
        null=True,
        blank=True,
        help_text=_("Multiply a quantity in this unit by this to get the family base unit")
    )
    base_unit_code = models.CharField(
        max_length=20,
        blank=True,
        help_text=_("Code of the family base unit this factor converts to")
    )

    class Meta:
        verbose_name = _("Unit")
        verbose_name_plural = _("Units")
        ordering = ['family', 'code']
        indexes = [
            models.Index(fields=['code']),
            models.Index(fields=['family']),
        ]

    def __str__(self):
        return f"{self.name} ({self.code})"

    @property
    def is_convertible(self):
        """Whether this unit can convert to other units of its family."""
        return self.conversion_to_base is not None and self.conversion_to_base > 0
