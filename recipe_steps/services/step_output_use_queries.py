"""
Step Output Use Queries - read access to "uses output of" edges.

Session Management Pattern:
- All functions accept optional `session` parameter
- If session is provided, use it directly (allows callers to manage transactions)
- If session is None, create a new session_scope for the operation

Results are returned as plain dataclasses/dicts so callers never hold ORM
objects after the session closes.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from recipe_steps.models import RecipeStep, StepOutputUse
from recipe_steps.services.database import session_scope


@dataclass(frozen=True)
class StepUsage:
    """A step that consumes the output of the queried step (a dependent)."""

    input_step_num: int


@dataclass(frozen=True)
class StepDependency:
    """A step whose output the queried step consumes."""

    output_step_num: int


def check_step_usage(
    recipe_id: int, step_num: int, session: Optional[Session] = None
) -> List[StepUsage]:
    """
    Find every step that uses the output of a step.

    Args:
        recipe_id: Recipe ID
        step_num: Producer step number
        session: Optional database session

    Returns:
        One StepUsage per edge where output_step_num == step_num
    """

    def _impl(sess: Session) -> List[StepUsage]:
        rows = (
            sess.query(StepOutputUse.input_step_num)
            .filter(
                StepOutputUse.recipe_id == recipe_id,
                StepOutputUse.output_step_num == step_num,
            )
            .all()
        )
        return [StepUsage(input_step_num=row.input_step_num) for row in rows]

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def load_step_dependencies(
    recipe_id: int, step_num: int, session: Optional[Session] = None
) -> List[StepDependency]:
    """
    Find every step whose output a step uses.

    Args:
        recipe_id: Recipe ID
        step_num: Consumer step number
        session: Optional database session

    Returns:
        One StepDependency per edge where input_step_num == step_num
    """

    def _impl(sess: Session) -> List[StepDependency]:
        rows = (
            sess.query(StepOutputUse.output_step_num)
            .filter(
                StepOutputUse.recipe_id == recipe_id,
                StepOutputUse.input_step_num == step_num,
            )
            .all()
        )
        return [StepDependency(output_step_num=row.output_step_num) for row in rows]

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def load_recipe_step_output_uses(
    recipe_id: int, session: Optional[Session] = None
) -> List[Dict[str, Any]]:
    """
    Load every edge of a recipe with the producer step's details for display.

    Args:
        recipe_id: Recipe ID
        session: Optional database session

    Returns:
        List of dicts ordered by (input_step_num, output_step_num):
            {
                "input_step_num": int,
                "output_step_num": int,
                "output_of_step": {"step_num": int, "step_title": str | None},
            }
        "output_of_step" is None if the producer step does not exist.
    """

    def _impl(sess: Session) -> List[Dict[str, Any]]:
        rows = (
            sess.query(StepOutputUse, RecipeStep)
            .outerjoin(
                RecipeStep,
                (RecipeStep.recipe_id == StepOutputUse.recipe_id)
                & (RecipeStep.step_num == StepOutputUse.output_step_num),
            )
            .filter(StepOutputUse.recipe_id == recipe_id)
            .order_by(StepOutputUse.input_step_num, StepOutputUse.output_step_num)
            .all()
        )

        result = []
        for use, step in rows:
            output_of_step = None
            if step is not None:
                output_of_step = {"step_num": step.step_num, "step_title": step.step_title}
            result.append(
                {
                    "input_step_num": use.input_step_num,
                    "output_step_num": use.output_step_num,
                    "output_of_step": output_of_step,
                }
            )
        return result

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)


def get_available_steps(
    recipe_id: int, step_num: int, session: Optional[Session] = None
) -> List[Dict[str, Any]]:
    """
    List the steps a step may declare as dependencies.

    Only strictly earlier steps qualify, so step 1 always gets an empty list.

    Args:
        recipe_id: Recipe ID
        step_num: Number of the step being created or edited
        session: Optional database session

    Returns:
        List of {"step_num", "step_title"} dicts in ascending step order
    """

    def _impl(sess: Session) -> List[Dict[str, Any]]:
        steps = (
            sess.query(RecipeStep.step_num, RecipeStep.step_title)
            .filter(RecipeStep.recipe_id == recipe_id, RecipeStep.step_num < step_num)
            .order_by(RecipeStep.step_num)
            .all()
        )
        return [{"step_num": s.step_num, "step_title": s.step_title} for s in steps]

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)
