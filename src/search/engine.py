"""
Search Engine Module - Incremental frontier expansion.

A run is created with init_run() and advanced one expansion at a time
with step(), so callers can animate every expansion or drive the run
to completion with run_to_completion().

Closed cells are never re-opened, even if a cheaper path to them is
found later. UCS and A* are therefore exact only when the first
expansion of a cell already carries its final cost (admissible,
consistent heuristics on this grid).
"""

import logging
from typing import Optional

from .errors import ConfigurationError
from .factory import create_strategy
from .grid import Coord, Grid
from .node import SearchNode
from .state import HeuristicFn, RunState

logger = logging.getLogger(__name__)


def init_run(strategy: str, grid: Grid, start: Coord, goal: Coord,
             heuristic: HeuristicFn) -> RunState:
    """
    Create a fresh run with only the start node queued.

    Args:
        strategy: Strategy tag (bfs, dfs, ucs, gbfs, astar; others act as astar)
        grid: Terrain to search (must not change while the run is active)
        start: (row, col) start cell
        goal: (row, col) goal cell
        heuristic: Evaluator (row, col) -> estimate to goal

    Returns:
        New RunState

    Raises:
        ConfigurationError: If start or goal is outside the grid or they coincide
    """
    start = tuple(start)
    goal = tuple(goal)
    if not grid.in_bounds(*start):
        raise ConfigurationError(f"Start {start} outside {grid.size}x{grid.size} grid")
    if not grid.in_bounds(*goal):
        raise ConfigurationError(f"Goal {goal} outside {grid.size}x{grid.size} grid")
    if start == goal:
        raise ConfigurationError(f"Start and goal coincide at {start}")

    state = RunState(
        strategy=strategy,
        grid=grid,
        start=start,
        goal=goal,
        heuristic=heuristic,
        selector=create_strategy(strategy),
    )

    start_node = SearchNode(start[0], start[1], g=0, h=heuristic(*start))
    state.frontier.push(start_node)
    state.best_cost[start] = 0
    state.parent_of[start] = None

    logger.debug(f"Run initialised: {strategy} from {start} to {goal}")
    return state


def step(state: RunState) -> Optional[SearchNode]:
    """
    Perform a single expansion.

    Calling step() on a terminal run is a no-op that returns None.

    Args:
        state: Run to advance

    Returns:
        The expanded node, or None if the run is (now) terminal without expanding
    """
    if state.terminal or len(state.frontier) == 0:
        if not state.terminal:
            logger.info(f"Run {state.strategy}: frontier exhausted after "
                        f"{state.expanded_count} expansions, no path")
        state.terminal = True
        return None

    node = state.frontier.pop_at(state.selector.select(state.frontier))
    state.current = node
    state.closed.add(node.key)
    state.expanded_count += 1

    if node.key == state.goal:
        state.succeeded = True
        state.terminal = True
        state.result_path = _reconstruct_path(state, node)
        state.result_cost = node.g
        logger.info(f"Run {state.strategy}: goal reached, cost={node.g}, "
                    f"expanded={state.expanded_count}, path={len(state.result_path)} cells")
        return node

    grid = state.grid
    for key in grid.neighbors(node.row, node.col):
        if key in state.closed:
            continue

        new_g = node.g + grid.move_cost(*key)
        known = state.best_cost.get(key)
        if known is not None and new_g >= known:
            continue

        h = state.heuristic(*key)
        state.best_cost[key] = new_g
        state.parent_of[key] = node

        queued = state.frontier.get(key)
        if queued is not None:
            queued.update(new_g, h, node)
        else:
            state.frontier.push(SearchNode(key[0], key[1], g=new_g, h=h, parent=node))

    return node


def run_to_completion(state: RunState, max_steps: Optional[int] = None) -> RunState:
    """
    Step until the run is terminal.

    Args:
        state: Run to advance
        max_steps: Optional cap on expansions performed by this call

    Returns:
        The same RunState
    """
    steps = 0
    while not state.terminal:
        if max_steps is not None and steps >= max_steps:
            break
        step(state)
        steps += 1
    return state


def _reconstruct_path(state: RunState, goal_node: SearchNode):
    """Follow parent_of from the goal back to the start."""
    path = []
    key: Optional[Coord] = goal_node.key
    while key is not None and key in state.parent_of:
        path.append(key)
        parent = state.parent_of[key]
        key = parent.key if parent is not None else None
    path.reverse()
    return path
