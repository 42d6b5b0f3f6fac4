"""
Heuristic Factory - Select an evaluator by mode.
"""

import logging
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from .expression import get_custom
from .presets import DEFAULT_PRESET, get_preset
from .table import get_table

logger = logging.getLogger(__name__)

HEURISTIC_MODES = ("preset", "custom", "table")

# Formula shown in the editor before the user types anything
DEFAULT_FORMULA = "abs(x-goal_x)+abs(y-goal_y)"


def get_heuristic(goal_row: int, goal_col: int, mode: str = "preset",
                  preset: str = DEFAULT_PRESET,
                  formula: str = DEFAULT_FORMULA,
                  table: Optional[Mapping[str, float]] = None,
                  **_unused: Any) -> Callable[[int, int], float]:
    """
    Create a heuristic evaluator for a fixed goal.

    Args:
        goal_row: Goal row
        goal_col: Goal column
        mode: "preset", "custom" or "table" (others use the preset)
        preset: Preset metric name (mode "preset")
        formula: Arithmetic formula (mode "custom")
        table: Sparse "row,col" -> value overrides (mode "table")

    Returns:
        Evaluator (row, col) -> estimate >= 0

    Example:
        h = get_heuristic(17, 17, mode="custom", formula="abs(x-goal_x)")
        h(2, 2)  # 15
    """
    if mode == "custom":
        return get_custom(formula, goal_row, goal_col)
    if mode == "table":
        return get_table(table or {}, goal_row, goal_col)
    if mode != "preset":
        logger.warning(f"Unknown heuristic mode: {mode}, using preset {preset}")
    return get_preset(preset, goal_row, goal_col)


def heuristic_params(config: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Pick heuristic keyword arguments out of a panel or settings dict.

    Args:
        config: Dict possibly holding heuristic_mode, heuristic_preset,
            custom_heuristic and heuristic_table

    Returns:
        Keyword arguments for get_heuristic()
    """
    return {
        "mode": config.get("heuristic_mode", "preset"),
        "preset": config.get("heuristic_preset", DEFAULT_PRESET),
        "formula": config.get("custom_heuristic", DEFAULT_FORMULA),
        "table": config.get("heuristic_table") or {},
    }


def preview_heuristic(formula: str, goal: Tuple[int, int] = (5, 5),
                      query: Tuple[int, int] = (0, 0)) -> float:
    """
    Evaluate a custom formula at a single cell.

    Backs the editor's "test formula" action.

    Args:
        formula: Arithmetic formula
        goal: (row, col) goal
        query: (row, col) cell to evaluate

    Returns:
        Heuristic value (0 for malformed formulas)
    """
    value = get_custom(formula, goal[0], goal[1])(query[0], query[1])
    logger.info(f"h{query} = {value:.2f} for {formula!r}")
    return value
