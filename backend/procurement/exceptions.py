"""
Custom exceptions for specification resolution.
"""


class ProcurementError(Exception):
    """Base exception for procurement-related errors."""
    pass


class NoSpecificationFoundError(ProcurementError):
    """
    No resolution tier produced a specification.

    Resolution itself reports this as ``tier='none'``; callers that cannot
    proceed without a specification raise it via ResolutionResult.require().
    """

    def __init__(self, ingredient_id, site_id, message=None):
        self.ingredient_id = ingredient_id
        self.site_id = site_id
        if message is None:
            message = (
                f"No purchasing specification for ingredient {ingredient_id} "
                f"at site {site_id}; needs manual specification"
            )
        super().__init__(message)


class AmbiguousDefaultSpecificationError(ProcurementError):
    """
    More than one Active default specification exists for an ingredient.

    Never raised by resolution: the lowest id is picked and this error is
    logged as a data-quality warning.
    """

    def __init__(self, ingredient_id, specification_ids, chosen_id=None, message=None):
        self.ingredient_id = ingredient_id
        self.specification_ids = list(specification_ids)
        self.chosen_id = chosen_id
        if message is None:
            message = (
                f"Ingredient {ingredient_id} has {len(self.specification_ids)} active default "
                f"specifications {self.specification_ids}; using {chosen_id}"
            )
        super().__init__(message)


class SiteNotFoundError(ProcurementError):
    """Raised when the site to resolve for does not exist."""

    def __init__(self, site_id, message=None):
        self.site_id = site_id
        if message is None:
            message = f"Site {site_id} not found"
        super().__init__(message)


class IngredientNotFoundError(ProcurementError):
    """Raised when the ingredient does not exist or is not visible to the site's tenant."""

    def __init__(self, ingredient_id, message=None):
        self.ingredient_id = ingredient_id
        if message is None:
            message = f"Ingredient {ingredient_id} not found"
        super().__init__(message)


class ResolutionCancelledError(ProcurementError):
    """Raised when the caller cancelled a resolution before it finished."""

    def __init__(self, ingredient_id, next_tier=None, message=None):
        self.ingredient_id = ingredient_id
        self.next_tier = next_tier
        if message is None:
            tier_info = f" before {next_tier} tier" if next_tier else ""
            message = f"Specification resolution for ingredient {ingredient_id} cancelled{tier_info}"
        super().__init__(message)
