"""
Specification resolution service.

Decides which purchasing specification (and, when known, which vendor)
applies to an ingredient at a site on a given date.

Resolution Order (each tier short-circuits the next):
1. Site tier    → SiteIngredientPreference for (site, ingredient)
2. Segment tier → SegmentIngredientDefault for (tenant segment, ingredient)
3. Global tier  → Active ProductSpecification with is_default=True
4. None         → normal result; the ingredient needs a manual specification

Within the site and segment tiers only Active rows whose half-open window
[effective_date, end_date) contains the as-of date compete. The winner is the
highest priority, then the most recent effective_date, then the lowest id.
Priorities are never compared across tiers.

Each tier is an independent function returning an optional TierMatch, so a
new tier is added by inserting one function into the chain.
"""
import datetime
import logging
import threading
from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Sequence, Tuple

import pytz
from django.db.models import Q
from django.utils import timezone

from core_backend.utils.transactions import consistent_snapshot
from procurement.exceptions import (
    AmbiguousDefaultSpecificationError,
    IngredientNotFoundError,
    NoSpecificationFoundError,
    ResolutionCancelledError,
    SiteNotFoundError,
)
from procurement.models import (
    ProductSpecification,
    SegmentIngredientDefault,
    SiteIngredientPreference,
)
from recipes.models import Ingredient
from tenant.models import Site
from tenant.scope import is_visible, prefer_tenant_owned

logger = logging.getLogger(__name__)


TIER_SITE = "site"
TIER_SEGMENT = "segment"
TIER_GLOBAL = "global"
TIER_NONE = "none"

TIER_CHOICES = (TIER_SITE, TIER_SEGMENT, TIER_GLOBAL, TIER_NONE)


@dataclass(frozen=True)
class ResolutionContext:
    """Everything a tier needs, loaded once per resolution."""
    ingredient: Ingredient
    site: Site
    as_of: datetime.date

    @property
    def tenant(self):
        return self.site.tenant


@dataclass(frozen=True)
class TierMatch:
    """A tier's answer: the chosen specification and the row that chose it."""
    specification_id: int
    source_id: int
    vendor_id: Optional[int] = None


@dataclass(frozen=True)
class ResolutionResult:
    """
    Outcome of resolving one ingredient at one site.

    ``vendor_id`` is only set by the site tier. ``fallback_vendor_id`` is the
    ingredient's own preferred vendor (when it belongs to the site's tenant),
    which callers use when the tier names no vendor.
    """
    ingredient_id: int
    site_id: int
    as_of: datetime.date
    tier: str
    specification_id: Optional[int] = None
    vendor_id: Optional[int] = None
    source_id: Optional[int] = None
    fallback_vendor_id: Optional[int] = None

    @property
    def is_resolved(self) -> bool:
        return self.tier != TIER_NONE

    @property
    def needs_manual_specification(self) -> bool:
        return not self.is_resolved

    @property
    def effective_vendor_id(self) -> Optional[int]:
        if self.vendor_id is not None:
            return self.vendor_id
        return self.fallback_vendor_id

    def require(self) -> "ResolutionResult":
        """Return self, or raise NoSpecificationFoundError for tier 'none'."""
        if not self.is_resolved:
            raise NoSpecificationFoundError(self.ingredient_id, self.site_id)
        return self


# =============================================================================
# Tiers
# =============================================================================

def _effective_on(as_of):
    """Q for rows whose [effective_date, end_date) window contains as_of."""
    return Q(effective_date__lte=as_of) & (Q(end_date__isnull=True) | Q(end_date__gt=as_of))


def _visible_specification(tenant):
    return Q(specification__tenant__isnull=True) | Q(specification__tenant=tenant)


# Highest priority, then most recent effective date, then lowest id
WINNING_ROW_ORDER = ('-priority', '-effective_date', 'id')


def resolve_site_tier(context: ResolutionContext) -> Optional[TierMatch]:
    """Site-level preference for this ingredient, if one is in effect."""
    preference = (
        SiteIngredientPreference.all_objects
        .filter(
            site=context.site,
            ingredient=context.ingredient,
            status=SiteIngredientPreference.Status.ACTIVE,
        )
        .filter(_effective_on(context.as_of))
        .filter(_visible_specification(context.tenant))
        .order_by(*WINNING_ROW_ORDER)
        .first()
    )
    if preference is None:
        return None

    return TierMatch(
        specification_id=preference.specification_id,
        source_id=preference.pk,
        vendor_id=preference.preferred_vendor_id,
    )


def resolve_segment_tier(context: ResolutionContext) -> Optional[TierMatch]:
    """Default for the site's market segment, if one is in effect."""
    segment_default = (
        SegmentIngredientDefault.objects
        .filter(
            segment=context.site.segment,
            ingredient=context.ingredient,
            status=SegmentIngredientDefault.Status.ACTIVE,
        )
        .filter(_effective_on(context.as_of))
        .filter(_visible_specification(context.tenant))
        .order_by(*WINNING_ROW_ORDER)
        .first()
    )
    if segment_default is None:
        return None

    return TierMatch(
        specification_id=segment_default.specification_id,
        source_id=segment_default.pk,
    )


def resolve_global_tier(context: ResolutionContext) -> Optional[TierMatch]:
    """
    The ingredient's Active default specification.

    A tenant-owned default beats a system-wide one. Several defaults in the
    winning group are a data-quality problem: the lowest id is used and a
    warning is logged.
    """
    candidates = list(
        ProductSpecification.all_objects
        .filter(
            ingredient=context.ingredient,
            is_default=True,
            status=ProductSpecification.Status.ACTIVE,
        )
        .order_by('id')
    )
    candidates = prefer_tenant_owned(
        candidates,
        context.tenant.pk,
        key=lambda spec: spec.ingredient_id,
    )
    if not candidates:
        return None

    chosen = candidates[0]
    if len(candidates) > 1:
        logger.warning(str(AmbiguousDefaultSpecificationError(
            ingredient_id=context.ingredient.pk,
            specification_ids=[spec.pk for spec in candidates],
            chosen_id=chosen.pk,
        )))

    return TierMatch(specification_id=chosen.pk, source_id=chosen.pk)


TierResolver = Callable[[ResolutionContext], Optional[TierMatch]]

DEFAULT_TIERS: Tuple[Tuple[str, TierResolver], ...] = (
    (TIER_SITE, resolve_site_tier),
    (TIER_SEGMENT, resolve_segment_tier),
    (TIER_GLOBAL, resolve_global_tier),
)


# =============================================================================
# Service
# =============================================================================

class SpecificationResolver:
    """
    Service for resolving purchasing specifications.

    Every call reads all tiers inside one consistent snapshot, so a concurrent
    edit of priorities or date windows cannot produce a torn result.
    """

    def __init__(self, tiers: Optional[Sequence[Tuple[str, TierResolver]]] = None):
        self.tiers = tuple(tiers) if tiers is not None else DEFAULT_TIERS

    def resolve_specification(
        self,
        ingredient_id,
        site_id,
        as_of=None,
        cancel_event: Optional[threading.Event] = None,
    ) -> ResolutionResult:
        """
        Resolve the specification for one ingredient at one site.

        Args:
            ingredient_id: Ingredient primary key.
            site_id: Site primary key.
            as_of: date, datetime or ISO date string (default: today at the site).
            cancel_event: Optional event; once set, no further tier is queried.

        Returns:
            ResolutionResult. ``tier='none'`` when nothing applies.

        Raises:
            SiteNotFoundError: The site does not exist.
            IngredientNotFoundError: The ingredient does not exist or is not
                visible to the site's tenant.
            ResolutionCancelledError: cancel_event was set mid-resolution.
        """
        with consistent_snapshot():
            site = self._get_site(site_id)
            as_of_date = self.as_of_for_site(site, as_of)
            return self._resolve_one(ingredient_id, site, as_of_date, cancel_event)

    def resolve_many(
        self,
        ingredient_ids: Iterable,
        site_id,
        as_of=None,
        cancel_event: Optional[threading.Event] = None,
    ) -> Dict[int, ResolutionResult]:
        """
        Resolve several ingredients at one site against a single snapshot.

        Returns:
            Dict of ingredient id → ResolutionResult, in input order.
        """
        results = {}
        with consistent_snapshot():
            site = self._get_site(site_id)
            as_of_date = self.as_of_for_site(site, as_of)
            for ingredient_id in ingredient_ids:
                if ingredient_id in results:
                    continue
                results[ingredient_id] = self._resolve_one(
                    ingredient_id, site, as_of_date, cancel_event
                )
        return results

    def _resolve_one(self, ingredient_id, site, as_of_date, cancel_event) -> ResolutionResult:
        ingredient = self._get_ingredient(ingredient_id, site)
        context = ResolutionContext(ingredient=ingredient, site=site, as_of=as_of_date)
        fallback_vendor_id = self._fallback_vendor_id(ingredient, site)

        for tier_name, resolve_tier in self.tiers:
            if cancel_event is not None and cancel_event.is_set():
                logger.info(
                    f"Resolution cancelled for ingredient {ingredient.pk} at site {site.pk} "
                    f"before {tier_name} tier"
                )
                raise ResolutionCancelledError(ingredient.pk, next_tier=tier_name)

            match = resolve_tier(context)
            if match is not None:
                logger.debug(
                    f"Ingredient {ingredient.pk} at site {site.pk} on {as_of_date}: "
                    f"{tier_name} tier → specification {match.specification_id}"
                )
                return ResolutionResult(
                    ingredient_id=ingredient.pk,
                    site_id=site.pk,
                    as_of=as_of_date,
                    tier=tier_name,
                    specification_id=match.specification_id,
                    vendor_id=match.vendor_id,
                    source_id=match.source_id,
                    fallback_vendor_id=fallback_vendor_id,
                )

        logger.info(
            f"No specification for ingredient {ingredient.pk} ({ingredient.name}) at site "
            f"{site.pk} on {as_of_date}; needs manual specification"
        )
        return ResolutionResult(
            ingredient_id=ingredient.pk,
            site_id=site.pk,
            as_of=as_of_date,
            tier=TIER_NONE,
            fallback_vendor_id=fallback_vendor_id,
        )

    def _get_site(self, site_id) -> Site:
        site = Site.objects.select_related('tenant').filter(pk=site_id).first()
        if site is None:
            raise SiteNotFoundError(site_id)
        return site

    def _get_ingredient(self, ingredient_id, site) -> Ingredient:
        ingredient = (
            Ingredient.all_objects
            .select_related('preferred_vendor')
            .filter(pk=ingredient_id)
            .first()
        )
        if ingredient is None or not is_visible(ingredient, site.tenant_id):
            raise IngredientNotFoundError(ingredient_id)
        return ingredient

    def _fallback_vendor_id(self, ingredient, site) -> Optional[int]:
        vendor = ingredient.preferred_vendor
        if vendor is None or vendor.tenant_id != site.tenant_id:
            return None
        return vendor.pk

    def _get_site_timezone(self, site):
        """Get the timezone for the site."""
        try:
            return pytz.timezone(site.timezone)
        except pytz.UnknownTimeZoneError:
            logger.warning(f"Unknown timezone {site.timezone!r} for site {site.pk}; using UTC")
            return pytz.UTC

    def as_of_for_site(self, site, as_of) -> datetime.date:
        """Normalise as_of to a calendar date at the site."""
        if as_of is None:
            as_of = timezone.now()
        if isinstance(as_of, str):
            return datetime.date.fromisoformat(as_of)
        if isinstance(as_of, datetime.datetime):
            site_tz = self._get_site_timezone(site)
            if timezone.is_naive(as_of):
                as_of = site_tz.localize(as_of)
            return as_of.astimezone(site_tz).date()
        if isinstance(as_of, datetime.date):
            return as_of
        raise TypeError(f"as_of must be a date, datetime or ISO date string, not {type(as_of).__name__}")


_default_resolver = SpecificationResolver()


def resolve_specification(ingredient_id, site_id, as_of=None, cancel_event=None) -> ResolutionResult:
    """Resolve with the default three-tier chain. See SpecificationResolver."""
    return _default_resolver.resolve_specification(
        ingredient_id, site_id, as_of=as_of, cancel_event=cancel_event
    )
