"""
Run State Module - Mutable bookkeeping for a single search run.
"""

from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Set, TYPE_CHECKING

from .grid import Coord, Grid
from .node import SearchNode

if TYPE_CHECKING:
    from .base import SearchStrategy


HeuristicFn = Callable[[int, int], float]


class Frontier:
    """
    Insertion-ordered collection of discovered, unexpanded nodes.

    Keeps a key -> node index alongside the list so membership tests and
    in-place cost updates do not need a scan. Strategies decide which
    position to remove; the frontier only guarantees insertion order.
    """

    def __init__(self):
        self._nodes: List[SearchNode] = []
        self._index: Dict[Coord, SearchNode] = {}

    def push(self, node: SearchNode) -> None:
        """Append a node that is not yet queued."""
        self._nodes.append(node)
        self._index[node.key] = node

    def pop_at(self, position: int) -> SearchNode:
        """
        Remove and return the node at a list position.

        Args:
            position: Index into insertion order (negative allowed)

        Returns:
            The removed node
        """
        node = self._nodes.pop(position)
        del self._index[node.key]
        return node

    def get(self, key: Coord) -> Optional[SearchNode]:
        """Get the queued node owning a coordinate, if any."""
        return self._index.get(key)

    def keys(self) -> Set[Coord]:
        """Snapshot of queued coordinate keys."""
        return set(self._index)

    @property
    def nodes(self) -> List[SearchNode]:
        """Queued nodes in insertion order (read-only view by convention)."""
        return self._nodes

    def __contains__(self, key: Coord) -> bool:
        return key in self._index

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[SearchNode]:
        return iter(self._nodes)


@dataclass
class RunState:
    """
    State of one search run, created by init_run() and advanced by step().

    Once terminal is set the state no longer changes.

    Attributes:
        strategy: Strategy tag (bfs, dfs, ucs, gbfs, astar)
        grid: Terrain being searched (read-only)
        start: Start coordinate
        goal: Goal coordinate
        heuristic: Evaluator (row, col) -> estimate
        frontier: Discovered but unexpanded nodes
        closed: Keys already expanded
        best_cost: Key -> best known g
        parent_of: Key -> predecessor node (None for the start)
        expanded_count: Number of expansions so far
        current: Last expanded node
        terminal: True once the goal was found or the frontier emptied
        succeeded: True if the goal was reached
        result_path: Coordinates from start to goal inclusive
        result_cost: g of the goal node, None until success
        selector: Strategy object resolved from the tag
    """
    strategy: str
    grid: Grid
    start: Coord
    goal: Coord
    heuristic: HeuristicFn
    selector: Optional['SearchStrategy'] = None
    frontier: Frontier = field(default_factory=Frontier)
    closed: Set[Coord] = field(default_factory=set)
    best_cost: Dict[Coord, float] = field(default_factory=dict)
    parent_of: Dict[Coord, Optional[SearchNode]] = field(default_factory=dict)
    expanded_count: int = 0
    current: Optional[SearchNode] = None
    terminal: bool = False
    succeeded: bool = False
    result_path: List[Coord] = field(default_factory=list)
    result_cost: Optional[float] = None

    @property
    def frontier_index(self) -> Set[Coord]:
        """Keys currently queued in the frontier."""
        return self.frontier.keys()

    @property
    def frontier_size(self) -> int:
        """Number of queued nodes."""
        return len(self.frontier)

    @property
    def path_length(self) -> int:
        """Number of cells on the result path (0 until success)."""
        return len(self.result_path)
