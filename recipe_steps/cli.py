"""
Recipe steps CLI

Command-line interface for inspecting step dependencies and dry-running
deletes and moves. Nothing here modifies data except init-db.

Usage Examples:
    # Create the database tables
    python -m recipe_steps.cli init-db

    # Show a recipe's steps and what each one uses
    python -m recipe_steps.cli show 12

    # Check numbering and edge ordering of a recipe
    python -m recipe_steps.cli audit 12

    # Would deleting step 2 be allowed?
    python -m recipe_steps.cli check-delete 12 2

    # Would moving step 1 to position 3 be allowed?
    python -m recipe_steps.cli check-move 12 1 3
"""

import argparse
import logging
import sys

from recipe_steps.services.database import initialize_app_database, session_scope
from recipe_steps.services.exceptions import ServiceError
from recipe_steps.services.recipe_service import get_recipe
from recipe_steps.services.recipe_step_service import check_move_target, get_step
from recipe_steps.services.step_deletion_validation import validate_step_deletion
from recipe_steps.services.step_graph_audit import audit_recipe_steps
from recipe_steps.services.step_output_use_queries import load_recipe_step_output_uses
from recipe_steps.services.step_reorder_validation import validate_step_reorder_complete
from recipe_steps.utils.step_messages import format_step_list


def init_db() -> int:
    """Create database tables."""
    initialize_app_database()
    print("Database initialized")
    return 0


def show_recipe(recipe_id: int) -> int:
    """Print a recipe's steps with their dependencies."""
    recipe = get_recipe(recipe_id)
    uses = load_recipe_step_output_uses(recipe_id)

    uses_by_step = {}
    for use in uses:
        uses_by_step.setdefault(use["input_step_num"], []).append(use["output_step_num"])

    print(f"{recipe.title} (recipe {recipe.id})")
    if not recipe.steps:
        print("  No steps")
        return 0

    for step in recipe.steps:
        line = f"  {step.label}"
        if step.step_num in uses_by_step:
            line += f"  [uses output from {format_step_list(sorted(uses_by_step[step.step_num]))}]"
        print(line)
    return 0


def audit(recipe_id: int) -> int:
    """Audit step numbering and edge ordering."""
    result = audit_recipe_steps(recipe_id)
    print(result.get_summary())
    return 0 if result.is_consistent else 1


def check_delete(recipe_id: int, step_num: int) -> int:
    """Report whether a step could be deleted."""
    with session_scope() as session:
        get_step(recipe_id, step_num, session=session)
        result = validate_step_deletion(recipe_id, step_num, session=session)
    if result.valid:
        print(f"Step {step_num} can be deleted")
        return 0
    print(f"ERROR: {result.error}")
    return 1


def check_move(recipe_id: int, step_num: int, new_position: int) -> int:
    """Report whether a step could move to a new position."""
    with session_scope() as session:
        check_move_target(recipe_id, step_num, new_position, session=session)
        result = validate_step_reorder_complete(
            recipe_id, step_num, new_position, session=session
        )
    if result.valid:
        print(f"Step {step_num} can move to position {new_position}")
        return 0
    print(f"ERROR: {result.error}")
    return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="recipe-steps",
        description="Inspect and check recipe step dependencies",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m recipe_steps.cli show 12
  python -m recipe_steps.cli check-move 12 1 3

Set RECIPE_STEPS_ENV=development to use the project-local database, or
RECIPE_STEPS_DATABASE_URL to point at any SQLAlchemy URL.
""",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    subparsers.add_parser("init-db", help="Create database tables")

    show_parser = subparsers.add_parser("show", help="Show steps and their dependencies")
    show_parser.add_argument("recipe_id", type=int, help="Recipe ID")

    audit_parser = subparsers.add_parser("audit", help="Check numbering and edge ordering")
    audit_parser.add_argument("recipe_id", type=int, help="Recipe ID")

    delete_parser = subparsers.add_parser("check-delete", help="Dry-run a step deletion")
    delete_parser.add_argument("recipe_id", type=int, help="Recipe ID")
    delete_parser.add_argument("step_num", type=int, help="Step number")

    move_parser = subparsers.add_parser("check-move", help="Dry-run a step move")
    move_parser.add_argument("recipe_id", type=int, help="Recipe ID")
    move_parser.add_argument("step_num", type=int, help="Current step number")
    move_parser.add_argument("new_position", type=int, help="Target position")

    return parser


def main(argv=None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        if args.command == "init-db":
            return init_db()
        if args.command == "show":
            return show_recipe(args.recipe_id)
        if args.command == "audit":
            return audit(args.recipe_id)
        if args.command == "check-delete":
            return check_delete(args.recipe_id, args.step_num)
        if args.command == "check-move":
            return check_move(args.recipe_id, args.step_num, args.new_position)
    except ServiceError as e:
        print(f"ERROR: {e}")
        return 1

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
