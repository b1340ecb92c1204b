"""Tests for recipe persistence."""

import pytest

from recipe_steps.models import RecipeStep, StepOutputUse
from recipe_steps.services import recipe_service
from recipe_steps.services.exceptions import RecipeNotFound, ValidationError


class TestCreateRecipe:
    """Tests for create_recipe()."""

    def test_create_recipe(self, test_db):
        recipe = recipe_service.create_recipe("  Sourdough ", description="Slow bread")

        assert recipe.id is not None
        assert recipe.uuid is not None
        assert recipe.title == "Sourdough"
        assert recipe.description == "Slow bread"
        assert recipe.steps == []

    def test_title_required(self, test_db):
        with pytest.raises(ValidationError) as exc_info:
            recipe_service.create_recipe("")

        assert exc_info.value.errors == ["Title is required"]

    def test_collects_every_error(self, test_db):
        with pytest.raises(ValidationError) as exc_info:
            recipe_service.create_recipe("x" * 201, description="y" * 2001)

        assert len(exc_info.value.errors) == 2

    def test_to_dict_serializes_columns(self, test_db):
        recipe = recipe_service.create_recipe("Focaccia")

        data = recipe.to_dict()

        assert data["title"] == "Focaccia"
        assert data["description"] is None
        assert isinstance(data["created_at"], str)
        assert "steps" not in data


class TestGetRecipe:
    """Tests for get_recipe() and list_recipes()."""

    def test_get_recipe_loads_steps(self, build_recipe):
        recipe_id = build_recipe(3)

        recipe = recipe_service.get_recipe(recipe_id)

        assert [step.step_num for step in recipe.steps] == [1, 2, 3]

    def test_get_missing_recipe(self, test_db):
        with pytest.raises(RecipeNotFound, match="Recipe with ID 999 not found"):
            recipe_service.get_recipe(999)

    def test_list_recipes_sorted_by_title(self, test_db):
        recipe_service.create_recipe("Scones")
        recipe_service.create_recipe("Bagels")

        assert [r.title for r in recipe_service.list_recipes()] == ["Bagels", "Scones"]


class TestDeleteRecipe:
    """Tests for delete_recipe()."""

    def test_delete_removes_steps_and_edges(self, scenario_recipe, build_recipe, test_db):
        other_id = build_recipe(2, {2: [1]}, title="Other")

        assert recipe_service.delete_recipe(scenario_recipe) is True

        session = test_db()
        assert session.query(RecipeStep).filter_by(recipe_id=scenario_recipe).count() == 0
        assert session.query(StepOutputUse).filter_by(recipe_id=scenario_recipe).count() == 0
        assert session.query(StepOutputUse).filter_by(recipe_id=other_id).count() == 1

    def test_delete_missing_recipe(self, test_db):
        with pytest.raises(RecipeNotFound):
            recipe_service.delete_recipe(999)
