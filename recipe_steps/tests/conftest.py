"""Pytest configuration and fixtures for recipe step tests."""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import scoped_session, sessionmaker

from recipe_steps.models.base import Base
from recipe_steps.services.database import get_session_factory  # noqa: F401 (registers PRAGMA listener)
from recipe_steps.utils.config import reset_config


@pytest.fixture(scope="function")
def test_db():
    """Provide a clean test database for each test function.

    This fixture:
    1. Creates an in-memory SQLite database
    2. Creates all tables
    3. Provides the database to the test
    4. Drops all tables after the test completes
    """
    # Create in-memory SQLite database for testing
    engine = create_engine("sqlite:///:memory:", echo=False)

    # Create all tables
    Base.metadata.create_all(engine)

    # Create session factory
    session_factory = sessionmaker(bind=engine, expire_on_commit=False)
    Session = scoped_session(session_factory)

    # Monkey-patch the global session factory for tests
    import recipe_steps.services.database as db_module

    original_get_session = db_module.get_session_factory
    db_module.get_session_factory = lambda: Session

    # Provide database to test
    yield Session

    # Cleanup
    Session.remove()
    Base.metadata.drop_all(engine)

    # Restore original session factory
    db_module.get_session_factory = original_get_session


@pytest.fixture(autouse=True)
def clean_config(monkeypatch):
    """Keep the config singleton and its env vars from leaking between tests."""
    monkeypatch.delenv("RECIPE_STEPS_ENV", raising=False)
    monkeypatch.delenv("RECIPE_STEPS_DATABASE_URL", raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture(scope="function")
def build_recipe(test_db):
    """Provide a builder for recipes with numbered steps and dependencies.

    Usage:
        recipe_id = build_recipe(5, {3: [1, 2], 5: [2, 4]})

    creates steps 1..5 in order, where step 3 uses the output of steps 1
    and 2, and step 5 uses the output of steps 2 and 4.
    """
    from recipe_steps.services import recipe_service, recipe_step_service

    def _build(step_count, uses=None, title="Test Recipe"):
        uses = uses or {}
        recipe = recipe_service.create_recipe(title)
        for step_num in range(1, step_count + 1):
            recipe_step_service.create_step(
                recipe.id,
                description=f"Instructions for step {step_num}",
                step_title=f"Task {step_num}",
                uses_steps=uses.get(step_num),
            )
        return recipe.id

    return _build


@pytest.fixture(scope="function")
def scenario_recipe(build_recipe):
    """Provide a five-step recipe used by most dependency scenarios.

    Edges:
    - Step 3 uses Steps 1 and 2
    - Step 5 uses Steps 2 and 4
    """
    return build_recipe(5, {3: [1, 2], 5: [2, 4]})


@pytest.fixture(scope="function")
def edge_pairs(test_db):
    """Provide a function returning a recipe's edges as sorted (output, input) pairs."""
    from recipe_steps.services.step_output_use_queries import load_recipe_step_output_uses

    def _pairs(recipe_id):
        return sorted(
            (use["output_step_num"], use["input_step_num"])
            for use in load_recipe_step_output_uses(recipe_id)
        )

    return _pairs


@pytest.fixture(scope="function")
def step_titles(test_db):
    """Provide a function returning a recipe's step titles in step order."""
    from recipe_steps.services.recipe_step_service import list_steps

    def _titles(recipe_id):
        return [step.step_title for step in list_steps(recipe_id)]

    return _titles
