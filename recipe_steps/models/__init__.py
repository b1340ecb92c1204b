"""
Database models package.

This package contains all SQLAlchemy ORM models for the application.
"""

from .base import Base, BaseModel
from .recipe import Recipe, RecipeStep
from .step_output_use import StepOutputUse

__all__ = [
    "Base",
    "BaseModel",
    "Recipe",
    "RecipeStep",
    "StepOutputUse",
]
