"""
Lookup Table Heuristics - Sparse per-cell overrides.
"""

import logging
import re
from typing import Callable, Dict, Mapping

from .presets import DEFAULT_PRESET, get_preset

logger = logging.getLogger(__name__)

# One "row,col=value" entry per line
_LINE_RE = re.compile(r"^(\d+)\s*,\s*(\d+)\s*=\s*(\d+(?:\.\d*)?)$")


def table_key(row: int, col: int) -> str:
    """Key format used by lookup tables ("row,col")."""
    return f"{row},{col}"


def get_table(table: Mapping[str, float], goal_row: int,
              goal_col: int) -> Callable[[int, int], float]:
    """
    Build a heuristic from a sparse override table.

    Cells missing from the table fall back to Manhattan distance.

    Args:
        table: Mapping "row,col" -> estimate
        goal_row: Goal row
        goal_col: Goal column

    Returns:
        Evaluator (row, col) -> estimate
    """
    overrides = dict(table)
    fallback = get_preset(DEFAULT_PRESET, goal_row, goal_col)

    def evaluate(row: int, col: int) -> float:
        value = overrides.get(table_key(row, col))
        if value is not None:
            return value
        return fallback(row, col)

    return evaluate


def parse_heuristic_table(text: str) -> Dict[str, float]:
    """
    Parse editor text into a lookup table.

    Each line holds "row,col=value". Blank or malformed lines are skipped.

    Args:
        text: Multi-line table text

    Returns:
        Mapping "row,col" -> value
    """
    table: Dict[str, float] = {}
    skipped = 0
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        match = _LINE_RE.match(line)
        if match is None:
            skipped += 1
            continue
        table[table_key(int(match.group(1)), int(match.group(2)))] = float(match.group(3))

    logger.info(f"Loaded {len(table)} heuristic values ({skipped} lines skipped)")
    return table
