"""Service layer exception classes for the recipe steps engine.

Validators report expected rejections through ValidationResult and never
raise. The exceptions below are raised by the lifecycle services that act on
those results, and for lookups and storage faults.

Exception Hierarchy:
    ServiceError (base)
    ├── RecipeNotFound
    ├── RecipeStepNotFound
    ├── ValidationError
    ├── StepInUse
    ├── StepMoveBlocked
    └── DatabaseError
"""

from typing import List, Optional


class ServiceError(Exception):
    """Base exception for all service layer errors.

    All service-specific exceptions inherit from this class.
    """

    pass


class RecipeNotFound(ServiceError):
    """Raised when a recipe cannot be found by ID."""

    def __init__(self, recipe_id: int):
        self.recipe_id = recipe_id
        super().__init__(f"Recipe with ID {recipe_id} not found")


class RecipeStepNotFound(ServiceError):
    """Raised when a recipe has no step at the given number.

    Example:
        >>> raise RecipeStepNotFound(4, 7)
        RecipeStepNotFound: Step 7 not found in recipe 4
    """

    def __init__(self, recipe_id: int, step_num: int):
        self.recipe_id = recipe_id
        self.step_num = step_num
        super().__init__(f"Step {step_num} not found in recipe {recipe_id}")


class ValidationError(ServiceError):
    """Raised when input data validation fails."""

    def __init__(self, errors: List[str]):
        self.errors = errors
        super().__init__(f"Validation failed: {'; '.join(errors)}")


class StepInUse(ServiceError):
    """Raised when deleting a step whose output other steps use.

    The message is the deletion validator's explanation, unchanged, e.g.
    "Cannot delete Step 2 because it is used by Steps 3 and 5".
    """

    def __init__(self, recipe_id: int, step_num: int, message: str):
        self.recipe_id = recipe_id
        self.step_num = step_num
        super().__init__(message)


class StepMoveBlocked(ServiceError):
    """Raised when moving a step would break a "uses output of" relationship."""

    def __init__(self, recipe_id: int, step_num: int, new_position: int, message: str):
        self.recipe_id = recipe_id
        self.step_num = step_num
        self.new_position = new_position
        super().__init__(message)


class DatabaseError(ServiceError):
    """Raised when a database operation fails."""

    def __init__(self, message: str, original_error: Optional[Exception] = None):
        self.original_error = original_error
        super().__init__(f"Database error: {message}")
