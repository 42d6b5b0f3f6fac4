"""
Heuristics Package - Pluggable goal-distance estimates for informed search.

Three evaluator kinds are available, all returning a pure function
(row, col) -> estimate for a fixed goal:

    - preset: manhattan, euclidean, chebyshev, zero
    - custom: sandboxed arithmetic formula over x, y, goal_x, goal_y
    - table: sparse per-cell overrides with Manhattan fallback

Usage:
    from src.heuristics import get_heuristic

    h = get_heuristic(17, 17, mode="preset", preset="euclidean")
    h(2, 2)
"""

from .factory import (
    HEURISTIC_MODES,
    DEFAULT_FORMULA,
    get_heuristic,
    heuristic_params,
    preview_heuristic,
)
from .presets import PRESETS, DEFAULT_PRESET, get_preset
from .expression import ExpressionError, compile_expression, get_custom
from .table import get_table, parse_heuristic_table, table_key

__all__ = [
    # Factory
    "HEURISTIC_MODES",
    "DEFAULT_FORMULA",
    "get_heuristic",
    "heuristic_params",
    "preview_heuristic",
    # Presets
    "PRESETS",
    "DEFAULT_PRESET",
    "get_preset",
    # Custom formulas
    "ExpressionError",
    "compile_expression",
    "get_custom",
    # Lookup tables
    "get_table",
    "parse_heuristic_table",
    "table_key",
]
