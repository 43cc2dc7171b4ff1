"""
Custom exceptions for the COGS system.
"""


class COGSError(Exception):
    """Base exception for COGS-related errors."""
    pass


class InvalidYieldPercentError(COGSError):
    """Raised when an ingredient's yield percent is outside (0, 1]."""

    def __init__(self, ingredient, yield_percent, message=None):
        self.ingredient = ingredient
        self.yield_percent = yield_percent
        if message is None:
            message = (
                f"Yield percent {yield_percent} for '{ingredient.name}' "
                f"must be greater than 0 and at most 1"
            )
        super().__init__(message)


class MissingCostError(COGSError):
    """Raised when cost data is missing for an ingredient."""

    def __init__(self, ingredient, message=None):
        self.ingredient = ingredient
        if message is None:
            message = f"No cost found for '{ingredient.name}'"
        super().__init__(message)


class InvalidTargetYieldError(COGSError):
    """Raised when a scaling target yield is not a positive number."""

    def __init__(self, target_yield, message=None):
        self.target_yield = target_yield
        if message is None:
            message = f"Target yield must be a number greater than 0, got {target_yield!r}"
        super().__init__(message)


class InvalidRecipeYieldError(COGSError):
    """Raised when a recipe's own yield quantity cannot be scaled from."""

    def __init__(self, recipe, message=None):
        self.recipe = recipe
        if message is None:
            message = (
                f"Recipe '{recipe.name}' has yield quantity {recipe.yield_quantity}; "
                f"it must be greater than 0 to scale"
            )
        super().__init__(message)


class RecipeNotFoundError(COGSError):
    """Raised when a recipe does not exist or is not visible to the tenant."""

    def __init__(self, recipe_id, message=None):
        self.recipe_id = recipe_id
        if message is None:
            message = f"Recipe {recipe_id} not found"
        super().__init__(message)


class GlobalRecipeWriteError(COGSError):
    """Raised when a cost snapshot would write to a system-wide recipe."""

    def __init__(self, recipe, message=None):
        self.recipe = recipe
        if message is None:
            message = f"Recipe '{recipe.name}' is system-wide; cost snapshots require a tenant-owned recipe"
        super().__init__(message)


class IngredientNotVisibleError(COGSError):
    """Raised when a recipe line uses an ingredient owned by another tenant."""

    def __init__(self, ingredient, message=None):
        self.ingredient = ingredient
        if message is None:
            message = f"Ingredient {ingredient.pk} is not visible to this tenant"
        super().__init__(message)
