"""
Message formatting for step dependency errors.

Every rejection names the blocking steps in plain English:

    [3]        -> "Step 3"
    [3, 4]     -> "Steps 3 and 4"
    [3, 4, 5]  -> "Steps 3, 4, and 5"
"""

from typing import Optional, Sequence


def format_step_list(step_nums: Sequence[int]) -> str:
    """
    Join step numbers into a "Step"/"Steps" phrase with an Oxford comma.

    Args:
        step_nums: Step numbers, already sorted ascending

    Returns:
        Phrase such as "Step 3", "Steps 3 and 4" or "Steps 3, 4, and 5"

    Raises:
        ValueError: If step_nums is empty
    """
    if not step_nums:
        raise ValueError("format_step_list() requires at least one step number")

    if len(step_nums) == 1:
        return f"Step {step_nums[0]}"

    if len(step_nums) == 2:
        return f"Steps {step_nums[0]} and {step_nums[1]}"

    all_but_last = ", ".join(str(n) for n in step_nums[:-1])
    return f"Steps {all_but_last}, and {step_nums[-1]}"


def format_step_error(
    prefix: str,
    step_nums: Sequence[int],
    suffix: str = "",
    plural_suffix: Optional[str] = None,
) -> str:
    """
    Build a full error sentence around a list of step numbers.

    Args:
        prefix: Text before the step list (e.g. "Cannot delete Step 2 because it is used by")
        step_nums: Step numbers, already sorted ascending
        suffix: Text after a single step (e.g. " uses its output")
        plural_suffix: Text after two or more steps; defaults to ``suffix``

    Returns:
        "{prefix} {steps}{suffix}"

    Example:
        >>> format_step_error("Cannot move Step 1 to position 4 because", [2, 3],
        ...                   " uses its output", " use its output")
        'Cannot move Step 1 to position 4 because Steps 2 and 3 use its output'
    """
    if len(step_nums) > 1 and plural_suffix is not None:
        suffix = plural_suffix
    return f"{prefix} {format_step_list(step_nums)}{suffix}"
