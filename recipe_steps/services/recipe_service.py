"""
Recipe Service - persistence for the recipes that own steps.

This service provides the minimal recipe operations the step engine needs:
- Create, fetch and delete recipes
- Eager loading of steps so callers can use results after the session closes

Deleting a recipe removes its steps and "uses output of" edges.
"""

from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from recipe_steps.models import Recipe
from recipe_steps.services.database import session_scope
from recipe_steps.services.exceptions import DatabaseError, RecipeNotFound, ValidationError
from recipe_steps.services.logging_utils import get_service_logger, log_operation
from recipe_steps.utils.validators import validate_recipe_description, validate_recipe_title

logger = get_service_logger(__name__)


def create_recipe(
    title: str, description: Optional[str] = None, session: Optional[Session] = None
) -> Recipe:
    """
    Create a new recipe without steps.

    Args:
        title: Recipe title (required, max 200 characters)
        description: Optional description
        session: Optional database session

    Returns:
        Created Recipe instance

    Raises:
        ValidationError: If title or description is invalid
        DatabaseError: If database operation fails
    """
    errors = [
        result.error
        for result in (validate_recipe_title(title), validate_recipe_description(description))
        if not result.valid
    ]
    if errors:
        raise ValidationError(errors)

    def _impl(sess: Session) -> Recipe:
        recipe = Recipe(
            title=title.strip(),
            description=description.strip() if description else None,
        )
        sess.add(recipe)
        sess.flush()
        sess.refresh(recipe)
        _ = recipe.steps

        log_operation(logger, operation="create_recipe", outcome="success", recipe_id=recipe.id)
        return recipe

    if session is not None:
        return _impl(session)

    try:
        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to create recipe", e)


def get_recipe(recipe_id: int, session: Optional[Session] = None) -> Recipe:
    """
    Retrieve a recipe by ID with its steps loaded.

    Args:
        recipe_id: Recipe ID
        session: Optional database session

    Returns:
        Recipe instance

    Raises:
        RecipeNotFound: If recipe doesn't exist
    """

    def _impl(sess: Session) -> Recipe:
        recipe = (
            sess.query(Recipe)
            .options(selectinload(Recipe.steps))
            .filter(Recipe.id == recipe_id)
            .first()
        )
        if not recipe:
            raise RecipeNotFound(recipe_id)
        return recipe

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def list_recipes(session: Optional[Session] = None) -> List[Recipe]:
    """List all recipes ordered by title."""

    def _impl(sess: Session) -> List[Recipe]:
        return sess.query(Recipe).order_by(Recipe.title, Recipe.id).all()

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def delete_recipe(recipe_id: int, session: Optional[Session] = None) -> bool:
    """
    Delete a recipe together with its steps and edges.

    Args:
        recipe_id: Recipe ID
        session: Optional database session

    Returns:
        True if deleted

    Raises:
        RecipeNotFound: If recipe doesn't exist
        DatabaseError: If database operation fails
    """

    def _impl(sess: Session) -> bool:
        recipe = sess.query(Recipe).filter(Recipe.id == recipe_id).first()
        if not recipe:
            raise RecipeNotFound(recipe_id)

        sess.delete(recipe)
        sess.flush()

        log_operation(logger, operation="delete_recipe", outcome="success", recipe_id=recipe_id)
        return True

    if session is not None:
        return _impl(session)

    try:
        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to delete recipe", e)
