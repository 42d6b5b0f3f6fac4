"""
Uninformed Strategies - Order the frontier without consulting the heuristic.
"""

from ..base import SearchStrategy
from ..state import Frontier
from ..factory import register_strategy


@register_strategy
class BreadthFirstStrategy(SearchStrategy):
    """
    Expands the earliest inserted node (FIFO).

    Finds the fewest-step path; only cost-optimal on unweighted grids.
    """
    name = "bfs"
    description = "Breadth-First Search - FIFO frontier"
    optimal = True

    def select(self, frontier: Frontier) -> int:
        return 0


@register_strategy
class DepthFirstStrategy(SearchStrategy):
    """Expands the most recently inserted node (LIFO)."""
    name = "dfs"
    description = "Depth-First Search - LIFO frontier"

    def select(self, frontier: Frontier) -> int:
        return len(frontier) - 1


@register_strategy
class UniformCostStrategy(SearchStrategy):
    """
    Expands the node with the lowest path cost g.

    Ties resolve to the earliest inserted node.
    """
    name = "ucs"
    description = "Uniform-Cost Search - lowest g(n) first"
    optimal = True

    def select(self, frontier: Frontier) -> int:
        return self._argmin(frontier, lambda node: node.g)
