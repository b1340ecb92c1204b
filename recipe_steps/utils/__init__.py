"""Utilities package for the recipe steps engine."""

from .step_messages import format_step_error, format_step_list
from .validators import (
    ValidationResult,
    combine_validation_results,
    parse_step_number,
    validate_recipe_description,
    validate_recipe_title,
    validate_step_description,
    validate_step_reference,
    validate_step_title,
)

__all__ = [
    "format_step_error",
    "format_step_list",
    "ValidationResult",
    "combine_validation_results",
    "parse_step_number",
    "validate_recipe_description",
    "validate_recipe_title",
    "validate_step_description",
    "validate_step_reference",
    "validate_step_title",
]
