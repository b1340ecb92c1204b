"""Tests for step list and error message formatting."""

import pytest

from recipe_steps.utils.step_messages import format_step_error, format_step_list


class TestFormatStepList:
    """Tests for format_step_list()."""

    def test_single_step(self):
        assert format_step_list([3]) == "Step 3"

    def test_two_steps_joined_with_and(self):
        assert format_step_list([3, 4]) == "Steps 3 and 4"

    def test_three_steps_use_oxford_comma(self):
        assert format_step_list([3, 4, 5]) == "Steps 3, 4, and 5"

    def test_many_steps(self):
        assert format_step_list([2, 4, 6, 8]) == "Steps 2, 4, 6, and 8"

    def test_empty_list_raises(self):
        with pytest.raises(ValueError):
            format_step_list([])


class TestFormatStepError:
    """Tests for format_step_error()."""

    def test_prefix_only(self):
        message = format_step_error("Cannot delete Step 2 because it is used by", [3, 5])
        assert message == "Cannot delete Step 2 because it is used by Steps 3 and 5"

    def test_singular_suffix(self):
        message = format_step_error(
            "Cannot move Step 1 to position 3 because",
            [3],
            suffix=" uses its output",
            plural_suffix=" use its output",
        )
        assert message == "Cannot move Step 1 to position 3 because Step 3 uses its output"

    def test_plural_suffix(self):
        message = format_step_error(
            "Cannot move Step 1 to position 4 because",
            [2, 3, 4],
            suffix=" uses its output",
            plural_suffix=" use its output",
        )
        assert message == (
            "Cannot move Step 1 to position 4 because Steps 2, 3, and 4 use its output"
        )

    def test_suffix_used_for_plural_when_no_plural_given(self):
        message = format_step_error("Blocked by", [1, 2], suffix="!")
        assert message == "Blocked by Steps 1 and 2!"
