"""Services package - business logic layer for recipe steps.

Architecture:
- Services: Stateless functions organized by concern
- Transactions: Managed via session_scope() or a caller-supplied session
- Validators: Return ValidationResult; never raise for expected rejections
- Exceptions: Consistent error handling via the ServiceError hierarchy

Service Modules:
- step_output_use_queries: Read access to "uses output of" edges
- step_output_use_mutations: Replace a step's edges (delete-then-create)
- step_deletion_validation: May a step be deleted?
- step_reorder_validation: May a step move to a new position?
- recipe_step_service: Step create/edit/delete/move with renumbering
- recipe_service: Recipe persistence
- step_graph_audit: Read-only consistency report

Infrastructure:
- database: Session management and database utilities
- exceptions: Service layer exception classes
- logging_utils: Structured operation logging
"""

from . import (
    database,
    recipe_service,
    recipe_step_service,
    step_deletion_validation,
    step_graph_audit,
    step_output_use_mutations,
    step_output_use_queries,
    step_reorder_validation,
)
from .exceptions import (
    DatabaseError,
    RecipeNotFound,
    RecipeStepNotFound,
    ServiceError,
    StepInUse,
    StepMoveBlocked,
    ValidationError,
)
from .step_deletion_validation import validate_step_deletion
from .step_output_use_mutations import (
    create_step_output_uses,
    delete_existing_step_output_uses,
    replace_step_output_uses,
)
from .step_output_use_queries import (
    check_step_usage,
    get_available_steps,
    load_recipe_step_output_uses,
    load_step_dependencies,
)
from .step_reorder_validation import (
    validate_step_reorder,
    validate_step_reorder_complete,
    validate_step_reorder_outgoing,
)

__all__ = [
    "database",
    "recipe_service",
    "recipe_step_service",
    "step_deletion_validation",
    "step_graph_audit",
    "step_output_use_mutations",
    "step_output_use_queries",
    "step_reorder_validation",
    "DatabaseError",
    "RecipeNotFound",
    "RecipeStepNotFound",
    "ServiceError",
    "StepInUse",
    "StepMoveBlocked",
    "ValidationError",
    "validate_step_deletion",
    "create_step_output_uses",
    "delete_existing_step_output_uses",
    "replace_step_output_uses",
    "check_step_usage",
    "get_available_steps",
    "load_recipe_step_output_uses",
    "load_step_dependencies",
    "validate_step_reorder",
    "validate_step_reorder_complete",
    "validate_step_reorder_outgoing",
]
