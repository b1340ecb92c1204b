"""
Recipe models.

This module contains:
- Recipe: A recipe owning an ordered list of steps
- RecipeStep: A numbered step within a recipe
"""

from sqlalchemy import (
    CheckConstraint,
    Column,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel


class Recipe(BaseModel):
    """
    Recipe model.

    Attributes:
        title: Recipe title (required)
        description: Optional free-text description
        steps: Steps ordered by step_num
        step_output_uses: Every "uses output of" edge between this recipe's steps
    """

    __tablename__ = "recipes"

    title = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=True)

    steps = relationship(
        "RecipeStep",
        back_populates="recipe",
        cascade="all, delete-orphan",
        order_by="RecipeStep.step_num",
        passive_deletes=True,
    )
    step_output_uses = relationship(
        "StepOutputUse",
        back_populates="recipe",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"Recipe(id={self.id}, title='{self.title}')"


class RecipeStep(BaseModel):
    """
    A numbered step within a recipe.

    Step numbers are positions: within a recipe they run 1..n without gaps.
    The step service is the only writer of step_num and keeps "uses output
    of" edges in sync whenever it renumbers.

    Attributes:
        recipe_id: Foreign key to Recipe
        step_num: 1-based position within the recipe
        step_title: Optional short title
        description: Step instructions (required)
    """

    __tablename__ = "recipe_steps"

    recipe_id = Column(Integer, ForeignKey("recipes.id", ondelete="CASCADE"), nullable=False)
    step_num = Column(Integer, nullable=False)
    step_title = Column(String(200), nullable=True)
    description = Column(Text, nullable=False)

    recipe = relationship("Recipe", back_populates="steps")

    __table_args__ = (
        CheckConstraint("step_num > 0", name="ck_recipe_step_num_positive"),
        UniqueConstraint("recipe_id", "step_num", name="uq_recipe_step_recipe_step_num"),
        Index("idx_recipe_step_recipe", "recipe_id"),
    )

    def __repr__(self) -> str:
        return f"RecipeStep(recipe_id={self.recipe_id}, step_num={self.step_num})"

    @property
    def label(self) -> str:
        """Display label such as "Step 2: Make the dough"."""
        if self.step_title:
            return f"Step {self.step_num}: {self.step_title}"
        return f"Step {self.step_num}"
