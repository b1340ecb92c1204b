"""Tests for input validators.

Tests cover:
- ValidationResult construction and wire shape
- Step reference validation (invalid, self and forward references)
- Step and recipe text fields
- Combining two validation results
"""

import pytest

from recipe_steps.utils.validators import (
    ValidationResult,
    combine_validation_results,
    parse_step_number,
    validate_recipe_description,
    validate_recipe_title,
    validate_step_description,
    validate_step_reference,
    validate_step_title,
)


class TestValidationResult:
    """Tests for the ValidationResult value object."""

    def test_ok_has_no_error(self):
        result = ValidationResult.ok()
        assert result.valid is True
        assert result.error is None
        assert bool(result) is True
        assert result.to_dict() == {"valid": True}

    def test_fail_carries_error(self):
        result = ValidationResult.fail("Nope")
        assert result.valid is False
        assert result.error == "Nope"
        assert bool(result) is False
        assert result.to_dict() == {"valid": False, "error": "Nope"}

    def test_valid_result_with_error_is_rejected(self):
        with pytest.raises(ValueError):
            ValidationResult(valid=True, error="should not be here")

    def test_invalid_result_without_error_is_rejected(self):
        with pytest.raises(ValueError):
            ValidationResult(valid=False)


class TestParseStepNumber:
    """Tests for parse_step_number()."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (3, 3),
            ("3", 3),
            (" 4 ", 4),
            (2.0, 2),
            (2.5, None),
            ("abc", None),
            ("1.5", None),
            ("", None),
            (None, None),
            (True, None),
            ([1], None),
        ],
    )
    def test_parse(self, value, expected):
        assert parse_step_number(value) == expected


class TestValidateStepReference:
    """Tests for validate_step_reference()."""

    def test_earlier_step_is_valid(self):
        assert validate_step_reference(2, 5).valid

    def test_immediately_preceding_step_is_valid(self):
        assert validate_step_reference(4, 5).valid

    def test_string_step_number_is_valid(self):
        assert validate_step_reference("2", 5).valid

    def test_self_reference(self):
        result = validate_step_reference(5, 5)
        assert not result.valid
        assert result.error == "Cannot reference the current step"

    def test_forward_reference(self):
        result = validate_step_reference(6, 5)
        assert not result.valid
        assert result.error == "Can only reference previous steps"

    @pytest.mark.parametrize("value", [0, -1, "abc", "1.5", None, 1.5, True])
    def test_invalid_step_number(self, value):
        result = validate_step_reference(value, 5)
        assert not result.valid
        assert result.error == "Invalid step number"

    def test_first_step_cannot_reference_anything(self):
        assert validate_step_reference(1, 1).error == "Cannot reference the current step"
        assert validate_step_reference(2, 1).error == "Can only reference previous steps"


class TestStepTextValidation:
    """Tests for step title and description validators."""

    def test_title_is_optional(self):
        assert validate_step_title(None).valid
        assert validate_step_title("").valid

    def test_title_at_limit(self):
        assert validate_step_title("x" * 200).valid

    def test_title_too_long(self):
        result = validate_step_title("x" * 201)
        assert result.error == "Step title must be 200 characters or less"

    def test_description_required(self):
        assert validate_step_description(None).error == "Step description is required"
        assert validate_step_description("   ").error == "Step description is required"

    def test_description_at_limit(self):
        assert validate_step_description("x" * 5000).valid

    def test_description_too_long(self):
        result = validate_step_description("x" * 5001)
        assert result.error == "Description must be 5,000 characters or less"


class TestRecipeTextValidation:
    """Tests for recipe title and description validators."""

    def test_title_required(self):
        assert validate_recipe_title("  ").error == "Title is required"

    def test_title_too_long(self):
        assert validate_recipe_title("x" * 201).error == "Title must be 200 characters or less"

    def test_valid_title(self):
        assert validate_recipe_title("Sourdough").valid

    def test_description_optional(self):
        assert validate_recipe_description(None).valid

    def test_description_too_long(self):
        result = validate_recipe_description("x" * 2001)
        assert result.error == "Description must be 2,000 characters or less"


class TestCombineValidationResults:
    """Tests for combine_validation_results()."""

    def test_both_valid(self):
        result = combine_validation_results(ValidationResult.ok(), ValidationResult.ok())
        assert result.valid

    def test_only_first_invalid(self):
        first = ValidationResult.fail("First problem")
        assert combine_validation_results(first, ValidationResult.ok()) == first

    def test_only_second_invalid(self):
        second = ValidationResult.fail("Second problem")
        assert combine_validation_results(ValidationResult.ok(), second) == second

    def test_both_invalid_joins_messages(self):
        first = ValidationResult.fail("Cannot move Step 3 to position 4 because Step 4 uses its output")
        second = ValidationResult.fail(
            "Cannot move Step 3 to position 4 because it uses output from Step 2"
        )

        result = combine_validation_results(first, second)

        assert not result.valid
        assert result.error == (
            "Cannot move Step 3 to position 4 because Step 4 uses its output. "
            "Additionally, cannot move Step 3 to position 4 because it uses output from Step 2"
        )
