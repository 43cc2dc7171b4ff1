"""
Order guide generation.

Resolves a batch of ingredients for one site and groups the resolved
specifications by the vendor they should be ordered from.
"""
import datetime
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from procurement.services.resolution_service import (
    ResolutionResult,
    SpecificationResolver,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderGuideLine:
    """One ingredient on the order guide."""
    ingredient_id: int
    specification_id: int
    tier: str
    source_id: int


@dataclass
class VendorOrderGroup:
    """Lines to be ordered from one vendor. vendor_id None = unassigned."""
    vendor_id: Optional[int]
    lines: List[OrderGuideLine] = field(default_factory=list)


@dataclass
class OrderGuide:
    """Order guide for a site on a date."""
    site_id: int
    as_of: datetime.date
    groups: List[VendorOrderGroup] = field(default_factory=list)
    needs_specification: List[int] = field(default_factory=list)

    @property
    def line_count(self) -> int:
        return sum(len(group.lines) for group in self.groups)

    def group_for(self, vendor_id) -> Optional[VendorOrderGroup]:
        for group in self.groups:
            if group.vendor_id == vendor_id:
                return group
        return None


class OrderGuideService:
    """
    Builds order guides for a site.

    Usage:
        guide = OrderGuideService(site).build([carrot.id, onion.id])
    """

    def __init__(self, site, resolver: Optional[SpecificationResolver] = None):
        self.site = site
        self.resolver = resolver or SpecificationResolver()

    def build(self, ingredient_ids: Iterable, as_of=None, cancel_event=None) -> OrderGuide:
        """
        Resolve every ingredient in one snapshot and group by vendor.

        The vendor of a line is the site preference's vendor, else the
        ingredient's preferred vendor. Ingredients no tier resolves are listed
        in ``needs_specification`` instead of failing the guide.
        """
        results = self.resolver.resolve_many(
            ingredient_ids, self.site.pk, as_of=as_of, cancel_event=cancel_event
        )

        guide = OrderGuide(site_id=self.site.pk, as_of=self._as_of(results, as_of))
        groups: Dict[Optional[int], VendorOrderGroup] = {}

        for ingredient_id, result in results.items():
            if not result.is_resolved:
                guide.needs_specification.append(result.ingredient_id)
                continue

            vendor_id = result.effective_vendor_id
            if vendor_id not in groups:
                groups[vendor_id] = VendorOrderGroup(vendor_id=vendor_id)
            groups[vendor_id].lines.append(OrderGuideLine(
                ingredient_id=result.ingredient_id,
                specification_id=result.specification_id,
                tier=result.tier,
                source_id=result.source_id,
            ))

        # Assigned vendors first, unassigned last
        guide.groups = sorted(
            groups.values(),
            key=lambda group: (group.vendor_id is None, group.vendor_id or 0)
        )

        if guide.needs_specification:
            logger.info(
                f"Order guide for site {self.site.pk}: "
                f"{len(guide.needs_specification)} ingredient(s) need a specification"
            )
        return guide

    def _as_of(self, results: Dict[int, ResolutionResult], as_of) -> datetime.date:
        for result in results.values():
            return result.as_of
        return self.resolver.as_of_for_site(self.site, as_of)
