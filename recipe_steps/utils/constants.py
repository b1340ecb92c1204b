"""
Constants for the recipe steps engine.

This module defines all system-wide constants including:
- Database file and environment variable names
- Field length limits for recipes and steps
- Validation error messages
"""

# ============================================================================
# Storage
# ============================================================================

DATABASE_FILENAME = "recipe_steps.db"

# Environment variables read by utils.config
ENV_VAR_ENVIRONMENT = "RECIPE_STEPS_ENV"
ENV_VAR_DATABASE_URL = "RECIPE_STEPS_DATABASE_URL"

# ============================================================================
# Field Length Limits
# ============================================================================

RECIPE_TITLE_MAX_LENGTH = 200
RECIPE_DESCRIPTION_MAX_LENGTH = 2000
STEP_TITLE_MAX_LENGTH = 200
STEP_DESCRIPTION_MAX_LENGTH = 5000

# ============================================================================
# Error Messages
# ============================================================================

# Step references ("uses output of")
ERROR_INVALID_STEP_NUMBER = "Invalid step number"
ERROR_SELF_REFERENCE = "Cannot reference the current step"
ERROR_FORWARD_REFERENCE = "Can only reference previous steps"

# Step text fields
ERROR_STEP_TITLE_TOO_LONG = f"Step title must be {STEP_TITLE_MAX_LENGTH} characters or less"
ERROR_STEP_DESCRIPTION_REQUIRED = "Step description is required"
ERROR_STEP_DESCRIPTION_TOO_LONG = (
    f"Description must be {STEP_DESCRIPTION_MAX_LENGTH:,} characters or less"
)

# Recipe text fields
ERROR_RECIPE_TITLE_REQUIRED = "Title is required"
ERROR_RECIPE_TITLE_TOO_LONG = f"Title must be {RECIPE_TITLE_MAX_LENGTH} characters or less"
ERROR_RECIPE_DESCRIPTION_TOO_LONG = (
    f"Description must be {RECIPE_DESCRIPTION_MAX_LENGTH:,} characters or less"
)

# Reorder
ERROR_POSITION_OUT_OF_RANGE = "Position must be between 1 and {max_position}"
