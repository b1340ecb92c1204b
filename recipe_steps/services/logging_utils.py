"""Service layer logging utilities.

Provides structured logging for step operations so that every validation
decision and mutation is logged with the same shape.

Usage:
    from recipe_steps.services.logging_utils import get_service_logger, log_operation

    logger = get_service_logger(__name__)

    log_operation(
        logger,
        operation="validate_step_deletion",
        outcome="blocked",
        recipe_id=12,
        step_num=2,
        dependent_steps=[3, 5],
    )
"""

import logging
from typing import Any

LOGGER_PREFIX = "recipe_steps.services"


def get_service_logger(name: str) -> logging.Logger:
    """
    Get a logger for a service module.

    Args:
        name: Logger name (typically __name__ of the calling module)

    Returns:
        Logger named 'recipe_steps.services.<module>'

    Example:
        >>> get_service_logger("recipe_steps.services.recipe_step_service").name
        'recipe_steps.services.recipe_step_service'
    """
    if "." in name:
        name = name.split(".")[-1]
    return logging.getLogger(f"{LOGGER_PREFIX}.{name}")


def log_operation(
    logger: logging.Logger,
    operation: str,
    outcome: str,
    level: int = logging.INFO,
    **context: Any,
) -> None:
    """
    Log a service operation with structured context.

    The message is "{operation}: {outcome}"; operation, outcome and every
    context field are attached to the record via ``extra``.

    Args:
        logger: Logger instance to use
        operation: Operation name (e.g. "delete_step", "validate_step_reorder")
        outcome: Outcome description (e.g. "success", "blocked", "valid")
        level: Log level (default: INFO). Use DEBUG for frequent checks.
        **context: Additional context fields (recipe_id, step_num, blocking_steps...)
    """
    extra = {
        "operation": operation,
        "outcome": outcome,
        **context,
    }
    logger.log(level, f"{operation}: {outcome}", extra=extra)
