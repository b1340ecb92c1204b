"""
Input validation functions for recipe steps.

This module provides:
- ValidationResult, the value every validator returns
- Step reference validation ("uses output of" at creation/edit time)
- Step title and description validation
- Recipe title and description validation
- Combination of two validation results into one message

Validators never raise for expected failures; they return
``ValidationResult.fail(message)`` and leave it to the caller to surface the
message verbatim.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .constants import (
    ERROR_FORWARD_REFERENCE,
    ERROR_INVALID_STEP_NUMBER,
    ERROR_RECIPE_DESCRIPTION_TOO_LONG,
    ERROR_RECIPE_TITLE_REQUIRED,
    ERROR_RECIPE_TITLE_TOO_LONG,
    ERROR_SELF_REFERENCE,
    ERROR_STEP_DESCRIPTION_REQUIRED,
    ERROR_STEP_DESCRIPTION_TOO_LONG,
    ERROR_STEP_TITLE_TOO_LONG,
    RECIPE_DESCRIPTION_MAX_LENGTH,
    RECIPE_TITLE_MAX_LENGTH,
    STEP_DESCRIPTION_MAX_LENGTH,
    STEP_TITLE_MAX_LENGTH,
)


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a validation check.

    Attributes:
        valid: True when the checked operation is allowed
        error: Human-readable reason when ``valid`` is False, otherwise None
    """

    valid: bool
    error: Optional[str] = None

    def __post_init__(self) -> None:
        if self.valid and self.error is not None:
            raise ValueError("A valid ValidationResult cannot carry an error")
        if not self.valid and not self.error:
            raise ValueError("An invalid ValidationResult requires an error message")

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls(valid=True)

    @classmethod
    def fail(cls, error: str) -> "ValidationResult":
        return cls(valid=False, error=error)

    def __bool__(self) -> bool:
        return self.valid

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert to the wire shape used by request handlers.

        Returns:
            {"valid": True} or {"valid": False, "error": message}
        """
        if self.valid:
            return {"valid": True}
        return {"valid": False, "error": self.error}


def parse_step_number(value: Any) -> Optional[int]:
    """Return value as an int step number, or None if it is not an integer."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def validate_step_reference(output_step_num: Any, next_step_num: int) -> ValidationResult:
    """
    Validate a single "uses output of" reference for a step.

    A referenced step must be a positive integer strictly less than the
    number of the step declaring the dependency. Form values arrive as
    strings, so integer strings are accepted.

    Args:
        output_step_num: The referenced (producer) step number
        next_step_num: Number of the step that will consume the output

    Returns:
        ValidationResult
    """
    step_num = parse_step_number(output_step_num)

    if step_num is None or step_num < 1:
        return ValidationResult.fail(ERROR_INVALID_STEP_NUMBER)

    if step_num == next_step_num:
        return ValidationResult.fail(ERROR_SELF_REFERENCE)

    if step_num > next_step_num:
        return ValidationResult.fail(ERROR_FORWARD_REFERENCE)

    return ValidationResult.ok()


def validate_step_title(step_title: Optional[str]) -> ValidationResult:
    """
    Validate a step title.

    - Optional (None/empty allowed)
    - Max 200 characters after trimming
    """
    if not step_title:
        return ValidationResult.ok()
    if len(step_title.strip()) > STEP_TITLE_MAX_LENGTH:
        return ValidationResult.fail(ERROR_STEP_TITLE_TOO_LONG)
    return ValidationResult.ok()


def validate_step_description(description: Optional[str]) -> ValidationResult:
    """
    Validate a step description.

    - Required (non-empty after trimming)
    - Max 5000 characters
    """
    trimmed = (description or "").strip()
    if not trimmed:
        return ValidationResult.fail(ERROR_STEP_DESCRIPTION_REQUIRED)
    if len(trimmed) > STEP_DESCRIPTION_MAX_LENGTH:
        return ValidationResult.fail(ERROR_STEP_DESCRIPTION_TOO_LONG)
    return ValidationResult.ok()


def combine_validation_results(
    first: ValidationResult, second: ValidationResult
) -> ValidationResult:
    """
    Merge two results into one.

    When both fail, the second message is appended as
    "{first}. Additionally, {second}" with its first letter lowercased.
    """
    if first.valid and second.valid:
        return ValidationResult.ok()
    if first.valid:
        return second
    if second.valid:
        return first

    follow_up = second.error[0].lower() + second.error[1:]
    return ValidationResult.fail(f"{first.error}. Additionally, {follow_up}")


def validate_recipe_title(title: Optional[str]) -> ValidationResult:
    """
    Validate a recipe title.

    - Required (non-empty after trimming)
    - Max 200 characters
    """
    trimmed = (title or "").strip()
    if not trimmed:
        return ValidationResult.fail(ERROR_RECIPE_TITLE_REQUIRED)
    if len(trimmed) > RECIPE_TITLE_MAX_LENGTH:
        return ValidationResult.fail(ERROR_RECIPE_TITLE_TOO_LONG)
    return ValidationResult.ok()


def validate_recipe_description(description: Optional[str]) -> ValidationResult:
    """Validate an optional recipe description (max 2000 characters)."""
    if not description:
        return ValidationResult.ok()
    if len(description.strip()) > RECIPE_DESCRIPTION_MAX_LENGTH:
        return ValidationResult.fail(ERROR_RECIPE_DESCRIPTION_TOO_LONG)
    return ValidationResult.ok()
