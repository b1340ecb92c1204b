"""
Step Output Use Mutations - replace the "uses output of" edges of a step.

A step's dependency selection is always saved wholesale: every edge where
the step is the consumer is deleted, then one edge is created per selected
producer. replace_step_output_uses() runs both halves in one transaction.

Callers validate every producer with validate_step_reference() before
calling into this module. Storage faults are not handled here: with a
caller-supplied session the SQLAlchemy error propagates unchanged, otherwise
it is wrapped in DatabaseError.
"""

import logging
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recipe_steps.models import StepOutputUse
from recipe_steps.services.database import session_scope
from recipe_steps.services.exceptions import DatabaseError
from recipe_steps.services.logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)


def _unique_in_order(step_nums: Iterable[int]) -> List[int]:
    seen = set()
    unique = []
    for step_num in step_nums:
        if step_num not in seen:
            seen.add(step_num)
            unique.append(step_num)
    return unique


def delete_existing_step_output_uses(
    recipe_id: int, input_step_num: int, session: Optional[Session] = None
) -> int:
    """
    Delete every edge where a step is the consumer.

    Args:
        recipe_id: Recipe ID
        input_step_num: The step being edited (consumer)
        session: Optional database session

    Returns:
        Number of deleted edges (0 if the step had none)
    """

    def _impl(sess: Session) -> int:
        count = (
            sess.query(StepOutputUse)
            .filter(
                StepOutputUse.recipe_id == recipe_id,
                StepOutputUse.input_step_num == input_step_num,
            )
            .delete(synchronize_session="fetch")
        )
        log_operation(
            logger,
            operation="delete_existing_step_output_uses",
            outcome="success",
            level=logging.DEBUG,
            recipe_id=recipe_id,
            input_step_num=input_step_num,
            count=count,
        )
        return count

    if session is not None:
        return _impl(session)

    try:
        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to delete step output uses", e)


def create_step_output_uses(
    recipe_id: int,
    input_step_num: int,
    output_step_nums: Iterable[int],
    session: Optional[Session] = None,
) -> int:
    """
    Create one edge per unique producer step for a consumer step.

    Duplicates in output_step_nums are collapsed. An empty selection writes
    nothing and returns 0.

    Args:
        recipe_id: Recipe ID
        input_step_num: The consumer step number
        output_step_nums: Producer step numbers, already validated
        session: Optional database session

    Returns:
        Number of created edges

    Example:
        >>> create_step_output_uses(recipe_id, 6, [2, 2, 4])
        2
    """
    unique_outputs = _unique_in_order(output_step_nums)

    if not unique_outputs:
        return 0

    def _impl(sess: Session) -> int:
        sess.add_all(
            [
                StepOutputUse(
                    recipe_id=recipe_id,
                    output_step_num=output_step_num,
                    input_step_num=input_step_num,
                )
                for output_step_num in unique_outputs
            ]
        )
        sess.flush()
        log_operation(
            logger,
            operation="create_step_output_uses",
            outcome="success",
            level=logging.DEBUG,
            recipe_id=recipe_id,
            input_step_num=input_step_num,
            output_step_nums=unique_outputs,
            count=len(unique_outputs),
        )
        return len(unique_outputs)

    if session is not None:
        return _impl(session)

    try:
        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to create step output uses", e)


def replace_step_output_uses(
    recipe_id: int,
    input_step_num: int,
    output_step_nums: Iterable[int],
    session: Optional[Session] = None,
) -> int:
    """
    Replace a step's full set of dependencies in a single transaction.

    Args:
        recipe_id: Recipe ID
        input_step_num: The consumer step number
        output_step_nums: New producer step numbers, already validated
        session: Optional database session

    Returns:
        Number of edges the step has afterwards
    """

    def _impl(sess: Session) -> int:
        deleted = delete_existing_step_output_uses(recipe_id, input_step_num, session=sess)
        created = create_step_output_uses(
            recipe_id, input_step_num, output_step_nums, session=sess
        )
        log_operation(
            logger,
            operation="replace_step_output_uses",
            outcome="success",
            recipe_id=recipe_id,
            input_step_num=input_step_num,
            deleted=deleted,
            created=created,
        )
        return created

    if session is not None:
        return _impl(session)

    try:
        with session_scope() as sess:
            return _impl(sess)
    except SQLAlchemyError as e:
        raise DatabaseError("Failed to replace step output uses", e)
