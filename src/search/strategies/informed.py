"""
Informed Strategies - Order the frontier using the heuristic estimate.
"""

from ..base import SearchStrategy
from ..state import Frontier
from ..factory import register_strategy


@register_strategy
class GreedyBestFirstStrategy(SearchStrategy):
    """
    Expands the node with the lowest heuristic h.

    Fast toward the goal but ignores path cost, so paths are approximate.
    """
    name = "gbfs"
    description = "Greedy Best-First - lowest h(n) first"

    def select(self, frontier: Frontier) -> int:
        return self._argmin(frontier, lambda node: node.h)


@register_strategy
class AStarStrategy(SearchStrategy):
    """
    Expands the node with the lowest f = g + h.

    Optimal with an admissible heuristic, within the engine's
    no-reopening rule for closed cells.
    """
    name = "astar"
    description = "A* - lowest f(n) = g(n) + h(n) first"
    optimal = True

    def select(self, frontier: Frontier) -> int:
        return self._argmin(frontier, lambda node: node.f)
