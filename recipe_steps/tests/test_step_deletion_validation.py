"""Tests for step deletion validation."""

import logging

from recipe_steps.services.database import session_scope
from recipe_steps.services.step_deletion_validation import validate_step_deletion


class TestValidateStepDeletion:
    """Tests for validate_step_deletion()."""

    def test_step_without_dependents_can_be_deleted(self, build_recipe):
        recipe_id = build_recipe(4, {3: [1]})

        result = validate_step_deletion(recipe_id, 4)

        assert result.valid
        assert result.to_dict() == {"valid": True}

    def test_step_with_two_dependents(self, scenario_recipe):
        result = validate_step_deletion(scenario_recipe, 2)

        assert result.to_dict() == {
            "valid": False,
            "error": "Cannot delete Step 2 because it is used by Steps 3 and 5",
        }

    def test_step_with_one_dependent(self, scenario_recipe):
        result = validate_step_deletion(scenario_recipe, 4)
        assert result.error == "Cannot delete Step 4 because it is used by Step 5"

    def test_three_dependents_use_oxford_comma(self, build_recipe):
        recipe_id = build_recipe(5, {3: [1], 4: [1], 5: [1]})

        result = validate_step_deletion(recipe_id, 1)

        assert result.error == "Cannot delete Step 1 because it is used by Steps 3, 4, and 5"

    def test_consumer_step_can_be_deleted(self, scenario_recipe):
        # Steps 3 and 5 use others but nothing uses them
        assert validate_step_deletion(scenario_recipe, 3).valid
        assert validate_step_deletion(scenario_recipe, 5).valid

    def test_nonexistent_step_is_valid(self, scenario_recipe):
        assert validate_step_deletion(scenario_recipe, 42).valid

    def test_accepts_caller_session(self, scenario_recipe):
        with session_scope() as session:
            result = validate_step_deletion(scenario_recipe, 1, session=session)
        assert result.error == "Cannot delete Step 1 because it is used by Step 3"

    def test_blocked_deletion_is_logged(self, scenario_recipe, caplog):
        with caplog.at_level(logging.INFO, logger="recipe_steps.services"):
            validate_step_deletion(scenario_recipe, 2)

        record = next(
            r for r in caplog.records if getattr(r, "operation", None) == "validate_step_deletion"
        )
        assert record.outcome == "blocked"
        assert record.dependent_steps == [3, 5]
