"""
Recipe Step Service - step lifecycle with dependency protection.

This service creates, edits, deletes and moves recipe steps while keeping
their "uses output of" edges valid:
- References are checked with validate_step_reference() before edges exist
- Deletion is refused while other steps use the step's output
- Moves are refused when they would put a producer at or after a consumer
- Step numbers stay contiguous (1..n); edges follow their steps on renumbering

Validation and the write happen inside the same transaction.

Session Management Pattern:
- All functions accept optional `session` parameter
- If session is provided, use it directly (allows callers to manage transactions)
- If session is None, create a new session_scope for the operation
"""

from typing import Dict, Iterable, List, Optional

from sqlalchemy import case, func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recipe_steps.models import Recipe, RecipeStep, StepOutputUse
from recipe_steps.services.database import session_scope
from recipe_steps.services.exceptions import (
    DatabaseError,
    RecipeNotFound,
    RecipeStepNotFound,
    StepInUse,
    StepMoveBlocked,
    ValidationError,
)
from recipe_steps.services.logging_utils import get_service_logger, log_operation
from recipe_steps.services.step_deletion_validation import validate_step_deletion
from recipe_steps.services.step_output_use_mutations import (
    create_step_output_uses,
    replace_step_output_uses,
)
from recipe_steps.services.step_reorder_validation import validate_step_reorder_complete
from recipe_steps.utils.constants import ERROR_POSITION_OUT_OF_RANGE
from recipe_steps.utils.validators import (
    parse_step_number,
    validate_step_description,
    validate_step_reference,
    validate_step_title,
)

logger = get_service_logger(__name__)


# ============================================================================
# Helpers
# ============================================================================


def _get_recipe_or_raise(sess: Session, recipe_id: int) -> Recipe:
    recipe = sess.query(Recipe).filter(Recipe.id == recipe_id).first()
    if not recipe:
        raise RecipeNotFound(recipe_id)
    return recipe


def _get_step_or_raise(sess: Session, recipe_id: int, step_num: int) -> RecipeStep:
    step = (
        sess.query(RecipeStep)
        .filter(RecipeStep.recipe_id == recipe_id, RecipeStep.step_num == step_num)
        .first()
    )
    if not step:
        raise RecipeStepNotFound(recipe_id, step_num)
    return step


def _max_step_num(sess: Session, recipe_id: int) -> int:
    return (
        sess.query(func.max(RecipeStep.step_num))
        .filter(RecipeStep.recipe_id == recipe_id)
        .scalar()
        or 0
    )


def _validate_step_text(description: Optional[str], step_title: Optional[str]) -> List[str]:
    """Collect title/description errors; None means "not being changed"."""
    errors = []
    if step_title is not None:
        result = validate_step_title(step_title)
        if not result.valid:
            errors.append(result.error)
    if description is not None:
        result = validate_step_description(description)
        if not result.valid:
            errors.append(result.error)
    return errors


def _validate_step_references(uses_steps: Iterable, step_num: int) -> List[int]:
    """
    Validate every referenced step and return them as unique ints.

    Raises:
        ValidationError: With the first failing reference's message
    """
    parsed = []
    for output_step_num in uses_steps:
        result = validate_step_reference(output_step_num, step_num)
        if not result.valid:
            raise ValidationError([result.error])
        value = parse_step_number(output_step_num)
        if value not in parsed:
            parsed.append(value)
    return parsed


def _renumber_steps(sess: Session, recipe_id: int, mapping: Dict[int, int]) -> None:
    """
    Apply an old -> new step number mapping to steps and edge endpoints.

    Runs as a two-phase batch: affected numbers first move above every
    number in use, then drop to their final values. No intermediate state
    ever holds two rows with the same number.
    """
    mapping = {old: new for old, new in mapping.items() if old != new}
    if not mapping:
        return

    highest = max(
        _max_step_num(sess, recipe_id),
        sess.query(func.max(StepOutputUse.output_step_num))
        .filter(StepOutputUse.recipe_id == recipe_id)
        .scalar()
        or 0,
        sess.query(func.max(StepOutputUse.input_step_num))
        .filter(StepOutputUse.recipe_id == recipe_id)
        .scalar()
        or 0,
        max(mapping.values()),
    )
    offset = highest + 1
    old_nums = list(mapping)

    columns = [
        (RecipeStep, RecipeStep.step_num),
        (StepOutputUse, StepOutputUse.output_step_num),
        (StepOutputUse, StepOutputUse.input_step_num),
    ]

    # Phase 1: park affected numbers above everything in use
    for model, column in columns:
        sess.query(model).filter(model.recipe_id == recipe_id, column.in_(old_nums)).update(
            {column: case(mapping, value=column) + offset}, synchronize_session=False
        )

    # Phase 2: drop them to their final values
    for model, column in columns:
        sess.query(model).filter(model.recipe_id == recipe_id, column >= offset).update(
            {column: column - offset}, synchronize_session=False
        )

    sess.flush()
    sess.expire_all()


def _compact_step_numbers(sess: Session, recipe_id: int) -> Dict[int, int]:
    """Close gaps so the recipe's steps are numbered 1..n in their current order."""
    step_nums = [
        row.step_num
        for row in sess.query(RecipeStep.step_num)
        .filter(RecipeStep.recipe_id == recipe_id)
        .order_by(RecipeStep.step_num)
        .all()
    ]
    mapping = {old: position for position, old in enumerate(step_nums, start=1) if old != position}
    _renumber_steps(sess, recipe_id, mapping)
    return mapping


# ============================================================================
# Queries
# ============================================================================


def get_step(recipe_id: int, step_num: int, session: Optional[Session] = None) -> RecipeStep:
    """
    Retrieve a step by its number.

    Raises:
        RecipeStepNotFound: If the recipe has no step with that number
    """

    def _impl(sess: Session) -> RecipeStep:
        return _get_step_or_raise(sess, recipe_id, step_num)

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def list_steps(recipe_id: int, session: Optional[Session] = None) -> List[RecipeStep]:
    """
    List a recipe's steps in order.

    Raises:
        RecipeNotFound: If recipe doesn't exist
    """

    def _impl(sess: Session) -> List[RecipeStep]:
        _get_recipe_or_raise(sess, recipe_id)
        return (
            sess.query(RecipeStep)
            .filter(RecipeStep.recipe_id == recipe_id)
            .order_by(RecipeStep.step_num)
            .all()
        )

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


# ============================================================================
# Mutations
# ============================================================================


def create_step(
    recipe_id: int,
    description: str,
    step_title: Optional[str] = None,
    uses_steps: Optional[Iterable] = None,
    session: Optional[Session] = None,
) -> RecipeStep:
    """
    Append a new step to a recipe.

    The step gets the next free number. Every entry of uses_steps must name
    an earlier step; the first invalid reference is reported.

    Args:
        recipe_id: Recipe ID
        description: Step instructions (required)
        step_title: Optional title
        uses_steps: Step numbers whose output the new step uses
        session: Optional database session

    Returns:
        Created RecipeStep

    Raises:
        RecipeNotFound: If recipe doesn't exist
        ValidationError: If text fields or references are invalid
        DatabaseError: If database operation fails
    """
    errors = _validate_step_text(description or "", step_title)
    if errors:
        raise ValidationError(errors)

    def _impl(sess: Session) -> RecipeStep:
        _get_recipe_or_raise(sess, recipe_id)
        next_step_num = _max_step_num(sess, recipe_id) + 1
        output_step_nums = _validate_step_references(uses_steps or [], next_step_num)

        step = RecipeStep(
            recipe_id=recipe_id,
            step_num=next_step_num,
            step_title=step_title.strip() if step_title and step_title.strip() else None,
            description=description.strip(),
        )
        sess.add(step)
        sess.flush()

        create_step_output_uses(recipe_id, next_step_num, output_step_nums, session=sess)
        sess.refresh(step)

        log_operation(
            logger,
            operation="create_step",
            outcome="success",
            recipe_id=recipe_id,
            step_num=next_step_num,
            uses_steps=output_step_nums,
        )
        return step

    if session is not None:
        return _impl(session)

    try:
        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to create step", e)


def update_step(
    recipe_id: int,
    step_num: int,
    description: Optional[str] = None,
    step_title: Optional[str] = None,
    uses_steps: Optional[Iterable] = None,
    session: Optional[Session] = None,
) -> RecipeStep:
    """
    Edit a step's text and/or its dependency selection.

    Arguments left as None are not changed. An empty step_title clears the
    title. When uses_steps is given it replaces the step's full set of
    dependencies (an empty list removes them all).

    Args:
        recipe_id: Recipe ID
        step_num: Number of the step to edit
        description: New instructions
        step_title: New title
        uses_steps: New dependency selection
        session: Optional database session

    Returns:
        Updated RecipeStep

    Raises:
        RecipeStepNotFound: If the step doesn't exist
        ValidationError: If text fields or references are invalid
        DatabaseError: If database operation fails
    """
    errors = _validate_step_text(description, step_title)
    if errors:
        raise ValidationError(errors)

    output_step_nums = None
    if uses_steps is not None:
        output_step_nums = _validate_step_references(uses_steps, step_num)

    def _impl(sess: Session) -> RecipeStep:
        step = _get_step_or_raise(sess, recipe_id, step_num)

        if description is not None:
            step.description = description.strip()
        if step_title is not None:
            step.step_title = step_title.strip() or None
        sess.flush()

        if output_step_nums is not None:
            replace_step_output_uses(recipe_id, step_num, output_step_nums, session=sess)

        log_operation(
            logger,
            operation="update_step",
            outcome="success",
            recipe_id=recipe_id,
            step_num=step_num,
            uses_steps=output_step_nums,
        )
        return step

    if session is not None:
        return _impl(session)

    try:
        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to update step", e)


def delete_step(recipe_id: int, step_num: int, session: Optional[Session] = None) -> bool:
    """
    Delete a step and renumber the steps after it.

    The step's own dependencies are removed with it, and every later step
    (and every edge endpoint pointing at one) moves down by one.

    Args:
        recipe_id: Recipe ID
        step_num: Number of the step to delete
        session: Optional database session

    Returns:
        True if deleted

    Raises:
        RecipeStepNotFound: If the step doesn't exist
        StepInUse: If other steps use this step's output
        DatabaseError: If database operation fails
    """

    def _impl(sess: Session) -> bool:
        step = _get_step_or_raise(sess, recipe_id, step_num)

        result = validate_step_deletion(recipe_id, step_num, session=sess)
        if not result.valid:
            raise StepInUse(recipe_id, step_num, result.error)

        sess.query(StepOutputUse).filter(
            StepOutputUse.recipe_id == recipe_id,
            or_(
                StepOutputUse.input_step_num == step_num,
                StepOutputUse.output_step_num == step_num,
            ),
        ).delete(synchronize_session="fetch")
        sess.delete(step)
        sess.flush()

        renumbered = _compact_step_numbers(sess, recipe_id)

        log_operation(
            logger,
            operation="delete_step",
            outcome="success",
            recipe_id=recipe_id,
            step_num=step_num,
            renumbered=len(renumbered),
        )
        return True

    if session is not None:
        return _impl(session)

    try:
        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to delete step", e)


def check_move_target(
    recipe_id: int, step_num: int, new_position: int, session: Optional[Session] = None
) -> RecipeStep:
    """
    Check that a step exists and that new_position lies within 1..n.

    Dependency rules are not checked here; see validate_step_reorder_complete().

    Returns:
        The step being moved

    Raises:
        RecipeStepNotFound: If the step doesn't exist
        ValidationError: If new_position is outside 1..n
    """

    def _impl(sess: Session) -> RecipeStep:
        step = _get_step_or_raise(sess, recipe_id, step_num)
        step_count = _max_step_num(sess, recipe_id)
        if not 1 <= new_position <= step_count:
            raise ValidationError([ERROR_POSITION_OUT_OF_RANGE.format(max_position=step_count)])
        return step

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def move_step(
    recipe_id: int, step_num: int, new_position: int, session: Optional[Session] = None
) -> RecipeStep:
    """
    Move a step to a new position.

    The step is taken out of its slot and inserted at new_position; the steps
    in between shift by one toward the vacated slot. Both directions of the
    step's relationships are validated first.

    Args:
        recipe_id: Recipe ID
        step_num: Current number of the step
        new_position: Target position (1..number of steps)
        session: Optional database session

    Returns:
        The moved RecipeStep, now numbered new_position

    Raises:
        RecipeStepNotFound: If the step doesn't exist
        ValidationError: If new_position is outside 1..n
        StepMoveBlocked: If the move would break a dependency
        DatabaseError: If database operation fails
    """

    def _impl(sess: Session) -> RecipeStep:
        step = check_move_target(recipe_id, step_num, new_position, session=sess)

        if new_position == step_num:
            return step

        result = validate_step_reorder_complete(recipe_id, step_num, new_position, session=sess)
        if not result.valid:
            raise StepMoveBlocked(recipe_id, step_num, new_position, result.error)

        if new_position > step_num:
            mapping = {n: n - 1 for n in range(step_num + 1, new_position + 1)}
        else:
            mapping = {n: n + 1 for n in range(new_position, step_num)}
        mapping[step_num] = new_position

        _renumber_steps(sess, recipe_id, mapping)

        log_operation(
            logger,
            operation="move_step",
            outcome="success",
            recipe_id=recipe_id,
            step_num=step_num,
            new_position=new_position,
        )
        return _get_step_or_raise(sess, recipe_id, new_position)

    if session is not None:
        return _impl(session)

    try:
        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to move step", e)


def move_step_up(recipe_id: int, step_num: int, session: Optional[Session] = None) -> RecipeStep:
    """Swap a step with the one before it."""
    return move_step(recipe_id, step_num, step_num - 1, session=session)


def move_step_down(recipe_id: int, step_num: int, session: Optional[Session] = None) -> RecipeStep:
    """Swap a step with the one after it."""
    return move_step(recipe_id, step_num, step_num + 1, session=session)
