"""
Step graph audit - read-only consistency report for a recipe.

Checks the invariants the step service maintains:
- Step numbers run 1..n with no gaps or duplicates
- Every edge points at steps that exist
- Every edge satisfies output_step_num < input_step_num

Edges can only point backward, so checking that ordering is sufficient;
no cycle detection is needed.
"""

from collections import Counter
from dataclasses import dataclass, field
import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from recipe_steps.models import RecipeStep, StepOutputUse
from recipe_steps.services.database import session_scope
from recipe_steps.services.logging_utils import get_service_logger, log_operation

logger = get_service_logger(__name__)


@dataclass
class StepGraphIssue:
    """One inconsistency found by the audit.

    Attributes:
        kind: "numbering", "missing_step" or "ordering"
        message: Human-readable description
        output_step_num: Producer number for edge issues
        input_step_num: Consumer number for edge issues
    """

    kind: str
    message: str
    output_step_num: Optional[int] = None
    input_step_num: Optional[int] = None


@dataclass
class StepGraphAuditResult:
    """Audit report for one recipe."""

    recipe_id: int
    step_count: int = 0
    edge_count: int = 0
    issues: List[StepGraphIssue] = field(default_factory=list)

    @property
    def is_consistent(self) -> bool:
        return not self.issues

    def get_summary(self) -> str:
        """Multi-line text summary for the CLI."""
        lines = [
            f"Recipe {self.recipe_id}: {self.step_count} step(s), {self.edge_count} edge(s)",
        ]
        if self.is_consistent:
            lines.append("No issues found")
        else:
            lines.append(f"{len(self.issues)} issue(s):")
            lines.extend(f"  - [{issue.kind}] {issue.message}" for issue in self.issues)
        return "\n".join(lines)


def audit_recipe_steps(recipe_id: int, session: Optional[Session] = None) -> StepGraphAuditResult:
    """
    Audit a recipe's step numbering and "uses output of" edges.

    Args:
        recipe_id: Recipe ID
        session: Optional database session

    Returns:
        StepGraphAuditResult (no changes are made)
    """

    def _impl(sess: Session) -> StepGraphAuditResult:
        step_nums = [
            row.step_num
            for row in sess.query(RecipeStep.step_num)
            .filter(RecipeStep.recipe_id == recipe_id)
            .order_by(RecipeStep.step_num)
            .all()
        ]
        edges = (
            sess.query(StepOutputUse.output_step_num, StepOutputUse.input_step_num)
            .filter(StepOutputUse.recipe_id == recipe_id)
            .order_by(StepOutputUse.input_step_num, StepOutputUse.output_step_num)
            .all()
        )

        result = StepGraphAuditResult(
            recipe_id=recipe_id, step_count=len(step_nums), edge_count=len(edges)
        )

        duplicates = sorted(n for n, count in Counter(step_nums).items() if count > 1)
        for step_num in duplicates:
            result.issues.append(
                StepGraphIssue(kind="numbering", message=f"Step number {step_num} is used twice")
            )

        existing = set(step_nums)
        expected = set(range(1, len(existing) + 1))
        for step_num in sorted(expected - existing):
            result.issues.append(
                StepGraphIssue(kind="numbering", message=f"Step {step_num} is missing")
            )
        for step_num in sorted(existing - expected):
            result.issues.append(
                StepGraphIssue(
                    kind="numbering",
                    message=f"Step {step_num} is outside 1..{len(existing)}",
                )
            )

        for output_step_num, input_step_num in edges:
            for endpoint in sorted({output_step_num, input_step_num}):
                if endpoint not in existing:
                    result.issues.append(
                        StepGraphIssue(
                            kind="missing_step",
                            message=(
                                f"Step {input_step_num} uses output from Step "
                                f"{output_step_num}, but Step {endpoint} does not exist"
                            ),
                            output_step_num=output_step_num,
                            input_step_num=input_step_num,
                        )
                    )
            if output_step_num >= input_step_num:
                result.issues.append(
                    StepGraphIssue(
                        kind="ordering",
                        message=(
                            f"Step {input_step_num} uses output from Step {output_step_num}, "
                            f"which does not come before it"
                        ),
                        output_step_num=output_step_num,
                        input_step_num=input_step_num,
                    )
                )

        log_operation(
            logger,
            operation="audit_recipe_steps",
            outcome="consistent" if result.is_consistent else "issues_found",
            level=logging.DEBUG if result.is_consistent else logging.WARNING,
            recipe_id=recipe_id,
            issue_count=len(result.issues),
        )
        return result

    if session is not None:
        return _impl(session)

    with session_scope() as sess:
        return _impl(sess)
