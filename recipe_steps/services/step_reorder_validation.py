"""
Step reorder validation.

Moving a step can threaten its relationships in two directions:

- Incoming ("who depends on me"): moving a producer forward to or past one
  of its consumers. Checked by validate_step_reorder().
- Outgoing ("what I depend on"): moving a consumer back to or before one of
  its producers. Checked by validate_step_reorder_outgoing().

Each check only looks at its own direction of movement, so a single move
triggers at most one of them. validate_step_reorder_complete() runs both and
is what callers use for any reorder request.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from recipe_steps.services.logging_utils import get_service_logger, log_operation
from recipe_steps.services.step_output_use_queries import (
    check_step_usage,
    load_step_dependencies,
)
from recipe_steps.utils.step_messages import format_step_error
from recipe_steps.utils.validators import ValidationResult, combine_validation_results

logger = get_service_logger(__name__)


def validate_step_reorder(
    recipe_id: int,
    current_step_num: int,
    new_position: int,
    session: Optional[Session] = None,
) -> ValidationResult:
    """
    Validate a move against the steps that use this step's output.

    Moving backward or staying in place is always valid. Moving forward is
    blocked by every dependent at or before the new position, since it would
    no longer come strictly after its producer.

    Args:
        recipe_id: Recipe containing the step
        current_step_num: Current step number
        new_position: Target position
        session: Optional database session

    Returns:
        ValidationResult, e.g. "Cannot move Step 1 to position 3 because Step 3 uses its output"
    """
    if new_position <= current_step_num:
        return ValidationResult.ok()

    dependent_steps = check_step_usage(recipe_id, current_step_num, session=session)

    blocking_steps = sorted(
        dep.input_step_num for dep in dependent_steps if dep.input_step_num <= new_position
    )

    if not blocking_steps:
        return ValidationResult.ok()

    error = format_step_error(
        f"Cannot move Step {current_step_num} to position {new_position} because",
        blocking_steps,
        suffix=" uses its output",
        plural_suffix=" use its output",
    )

    log_operation(
        logger,
        operation="validate_step_reorder",
        outcome="blocked",
        recipe_id=recipe_id,
        step_num=current_step_num,
        new_position=new_position,
        blocking_steps=blocking_steps,
    )
    return ValidationResult.fail(error)


def validate_step_reorder_outgoing(
    recipe_id: int,
    current_step_num: int,
    new_position: int,
    session: Optional[Session] = None,
) -> ValidationResult:
    """
    Validate a move against the steps whose output this step uses.

    Moving forward or staying in place is always valid. Moving backward is
    blocked by every dependency at or after the new position.

    Args:
        recipe_id: Recipe containing the step
        current_step_num: Current step number
        new_position: Target position
        session: Optional database session

    Returns:
        ValidationResult, e.g. "Cannot move Step 5 to position 3 because it uses output from Step 4"
    """
    if new_position >= current_step_num:
        return ValidationResult.ok()

    dependencies = load_step_dependencies(recipe_id, current_step_num, session=session)

    blocking_steps = sorted(
        dep.output_step_num for dep in dependencies if dep.output_step_num >= new_position
    )

    if not blocking_steps:
        return ValidationResult.ok()

    error = format_step_error(
        f"Cannot move Step {current_step_num} to position {new_position} "
        f"because it uses output from",
        blocking_steps,
    )

    log_operation(
        logger,
        operation="validate_step_reorder_outgoing",
        outcome="blocked",
        recipe_id=recipe_id,
        step_num=current_step_num,
        new_position=new_position,
        blocking_steps=blocking_steps,
    )
    return ValidationResult.fail(error)


def validate_step_reorder_complete(
    recipe_id: int,
    current_step_num: int,
    new_position: int,
    session: Optional[Session] = None,
) -> ValidationResult:
    """
    Validate a move in both directions.

    Both checks always run; if both reject, their messages are joined with
    "Additionally". With consistent data that cannot happen for one move.

    Args:
        recipe_id: Recipe containing the step
        current_step_num: Current step number
        new_position: Target position
        session: Optional database session

    Returns:
        Combined ValidationResult
    """
    incoming = validate_step_reorder(recipe_id, current_step_num, new_position, session=session)
    outgoing = validate_step_reorder_outgoing(
        recipe_id, current_step_num, new_position, session=session
    )
    result = combine_validation_results(incoming, outgoing)

    log_operation(
        logger,
        operation="validate_step_reorder_complete",
        outcome="valid" if result.valid else "blocked",
        level=logging.DEBUG,
        recipe_id=recipe_id,
        step_num=current_step_num,
        new_position=new_position,
    )
    return result
