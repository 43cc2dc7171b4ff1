import uuid
from django.db import models
from django.utils.translation import gettext_lazy as _


class MarketSegment(models.TextChoices):
    """
    Institutional market segment of a tenant.

    The segment selects the segment-level default purchasing specifications
    (schools buy differently from hospitals).
    """
    HEALTHCARE = "Healthcare", _("Healthcare")
    K12_SCHOOL = "K-12 School", _("K-12 School")
    COLLEGE_UNIVERSITY = "College/University", _("College/University")
    BUSINESS_INDUSTRIAL = "Business/Industrial", _("Business/Industrial")
    CORRECTIONAL = "Correctional", _("Correctional")
    MILITARY = "Military", _("Military")
    LONG_TERM_CARE = "Long-term Care", _("Long-term Care")
    COMMERCIAL = "Commercial", _("Commercial")
    OTHER = "Other", _("Other")


class Tenant(models.Model):
    """
    Root entity for multi-tenancy.
    Each customer organisation (hospital system, school district) is a tenant.

    Reference data (ingredients, specifications, recipes) with a NULL tenant is
    system-wide; see tenant.scope for the visibility rules.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(
        max_length=255,
        help_text="Display name for the tenant (e.g., Mercy Health System)"
    )
    slug = models.SlugField(
        unique=True,
        help_text="URL-safe short code for the tenant"
    )
    segment = models.CharField(
        max_length=30,
        choices=MarketSegment.choices,
        default=MarketSegment.OTHER,
        help_text="Market segment; determines segment default specifications"
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Inactive tenants cannot access the system"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'tenants'
        ordering = ['name']
        indexes = [
            models.Index(fields=['slug']),
            models.Index(fields=['segment']),
        ]

    def __str__(self):
        return self.name


class Site(models.Model):
    """
    A physical location where food is prepared and/or served.

    Sites are always tenant-owned. Site-level ingredient preferences are the
    highest-precedence tier of specification resolution.
    """

    class SiteType(models.TextChoices):
        KITCHEN = "Kitchen", _("Kitchen")
        DINING_HALL = "Dining Hall", _("Dining Hall")
        SATELLITE = "Satellite", _("Satellite")
        COMMISSARY = "Commissary", _("Commissary")
        CAFETERIA = "Cafeteria", _("Cafeteria")

    class Status(models.TextChoices):
        ACTIVE = "Active", _("Active")
        INACTIVE = "Inactive", _("Inactive")
        SEASONAL = "Seasonal", _("Seasonal")

    tenant = models.ForeignKey(
        Tenant,
        on_delete=models.CASCADE,
        related_name='sites'
    )
    name = models.CharField(max_length=255)
    site_type = models.CharField(
        max_length=20,
        choices=SiteType.choices,
        default=SiteType.KITCHEN
    )
    timezone = models.CharField(
        max_length=50,
        default='UTC',
        help_text=_("IANA timezone name; 'today' for resolution is evaluated here")
    )
    status = models.CharField(
        max_length=20,
        choices=Status.choices,
        default=Status.ACTIVE
    )

    class Meta:
        db_table = 'sites'
        ordering = ['name']
        indexes = [
            models.Index(fields=['tenant']),
        ]

    def __str__(self):
        return f"{self.name} ({self.tenant.name})"

    @property
    def segment(self):
        """A site purchases under its tenant's market segment."""
        return self.tenant.segment
