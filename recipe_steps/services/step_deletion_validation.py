"""
Step deletion validation.

A step can never be deleted while another step uses its output. Unlike a
reorder there is no position that would satisfy the dependents, so the
check does not look at where the step sits.
"""

from typing import Optional

from sqlalchemy.orm import Session

from recipe_steps.services.logging_utils import get_service_logger, log_operation
from recipe_steps.services.step_output_use_queries import check_step_usage
from recipe_steps.utils.step_messages import format_step_error
from recipe_steps.utils.validators import ValidationResult

logger = get_service_logger(__name__)


def validate_step_deletion(
    recipe_id: int, step_num: int, session: Optional[Session] = None
) -> ValidationResult:
    """
    Validate whether a step can be deleted.

    Args:
        recipe_id: Recipe containing the step
        step_num: Step number to delete
        session: Optional database session

    Returns:
        ValidationResult; when invalid, the error names every dependent step,
        e.g. "Cannot delete Step 2 because it is used by Steps 3 and 5"
    """
    dependent_steps = check_step_usage(recipe_id, step_num, session=session)

    if not dependent_steps:
        return ValidationResult.ok()

    dependents = sorted(dep.input_step_num for dep in dependent_steps)
    error = format_step_error(f"Cannot delete Step {step_num} because it is used by", dependents)

    log_operation(
        logger,
        operation="validate_step_deletion",
        outcome="blocked",
        recipe_id=recipe_id,
        step_num=step_num,
        dependent_steps=dependents,
    )
    return ValidationResult.fail(error)
