"""
Search Package - Incremental grid search framework.

This package provides a step-wise search engine whose frontier ordering
is chosen by a pluggable strategy. Runs can be advanced one expansion
at a time (for animation) or run to completion.

Public API:
    - Grid: Weighted terrain with start/goal cells
    - init_grid(): Empty grid with default start/goal placement
    - SearchNode: Discovered cell with g/h/f costs
    - RunState: Bookkeeping for one run
    - init_run(): Create a run
    - step(): Perform one expansion
    - run_to_completion(): Step until terminal
    - create_strategy(): Factory function
    - get_strategy_names(): List available strategies
    - get_strategy_info(): Get strategy metadata

Usage:
    from src.search import init_grid, init_run, step
    from src.heuristics import get_heuristic

    grid = init_grid(20)
    heuristic = get_heuristic(*grid.goal, mode="preset", preset="manhattan")
    state = init_run("astar", grid, grid.start, grid.goal, heuristic)

    while not state.terminal:
        node = step(state)

    if state.succeeded:
        print(f"Cost {state.result_cost}, {state.expanded_count} nodes expanded")
"""

# Core data structures
from .errors import ConfigurationError, SessionLockedError
from .grid import Grid, Coord, init_grid, EDIT_MODES
from .node import SearchNode
from .state import Frontier, RunState, HeuristicFn

# Strategy framework
from .base import SearchStrategy
from .factory import (
    create_strategy,
    get_strategy_names,
    get_strategy_info,
    is_optimal,
    register_strategy,
)

# Import strategies to register them
from . import strategies

# Engine
from .engine import init_run, step, run_to_completion

__all__ = [
    # Errors
    "ConfigurationError",
    "SessionLockedError",
    # Data structures
    "Grid",
    "Coord",
    "init_grid",
    "EDIT_MODES",
    "SearchNode",
    "Frontier",
    "RunState",
    "HeuristicFn",
    # Strategy framework
    "SearchStrategy",
    "create_strategy",
    "get_strategy_names",
    "get_strategy_info",
    "is_optimal",
    "register_strategy",
    # Engine
    "init_run",
    "step",
    "run_to_completion",
]
