"""
Procurement services.
"""
from procurement.services.resolution_service import (
    DEFAULT_TIERS,
    ResolutionResult,
    SpecificationResolver,
    TIER_GLOBAL,
    TIER_NONE,
    TIER_SEGMENT,
    TIER_SITE,
    resolve_specification,
)
from procurement.services.order_guide_service import OrderGuide, OrderGuideService

__all__ = [
    'DEFAULT_TIERS',
    'ResolutionResult',
    'SpecificationResolver',
    'TIER_GLOBAL',
    'TIER_NONE',
    'TIER_SEGMENT',
    'TIER_SITE',
    'resolve_specification',
    'OrderGuide',
    'OrderGuideService',
]
