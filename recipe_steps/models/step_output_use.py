"""
StepOutputUse model: the "uses output of" edge between two recipe steps.

A row (recipe_id, output_step_num, input_step_num) means the step at
input_step_num consumes output produced by the step at output_step_num.
Live edges always satisfy output_step_num < input_step_num; the validators
in the service layer reject every mutation that would break that ordering.
"""

from sqlalchemy import Column, ForeignKey, Index, Integer, UniqueConstraint
from sqlalchemy.orm import relationship

from .base import BaseModel


class StepOutputUse(BaseModel):
    """
    Dependency edge between two steps of the same recipe.

    Edges reference steps by number rather than by id so that they describe
    positions. When steps are renumbered the step service rewrites both
    endpoint columns in the same batch.

    Attributes:
        recipe_id: Foreign key to Recipe
        output_step_num: Producer step number
        input_step_num: Consumer step number
    """

    __tablename__ = "step_output_uses"

    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False)
    output_step_num = Column(Integer, nullable=False)
    input_step_num = Column(Integer, nullable=False)

    recipe = relationship("Recipe", back_populates="step_output_uses")

    __table_args__ = (
        UniqueConstraint(
            "recipe_id",
            "output_step_num",
            "input_step_num",
            name="uq_step_output_use_recipe_output_input",
        ),
        Index("idx_step_output_use_output", "recipe_id", "output_step_num"),
        Index("idx_step_output_use_input", "recipe_id", "input_step_num"),
    )

    def __repr__(self) -> str:
        return (
            f"StepOutputUse(recipe_id={self.recipe_id}, "
            f"output_step_num={self.output_step_num}, "
            f"input_step_num={self.input_step_num})"
        )
