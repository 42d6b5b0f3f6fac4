"""
Preset Heuristics - Closed-form distance metrics to the goal.
"""

import math
from typing import Callable, Dict

# Metric used for unknown preset names and lookup-table misses
DEFAULT_PRESET = "manhattan"


def manhattan(dr: int, dc: int) -> float:
    return abs(dr) + abs(dc)


def euclidean(dr: int, dc: int) -> float:
    return math.hypot(dr, dc)


def chebyshev(dr: int, dc: int) -> float:
    return max(abs(dr), abs(dc))


def zero(dr: int, dc: int) -> float:
    return 0


PRESETS: Dict[str, Callable[[int, int], float]] = {
    "manhattan": manhattan,
    "euclidean": euclidean,
    "chebyshev": chebyshev,
    "zero": zero,
}


def get_preset(name: str, goal_row: int, goal_col: int) -> Callable[[int, int], float]:
    """
    Build a preset distance heuristic.

    Args:
        name: manhattan, euclidean, chebyshev or zero (others use manhattan)
        goal_row: Goal row
        goal_col: Goal column

    Returns:
        Evaluator (row, col) -> distance estimate
    """
    metric = PRESETS.get(name, PRESETS[DEFAULT_PRESET])

    def evaluate(row: int, col: int) -> float:
        return metric(row - goal_row, col - goal_col)

    return evaluate
