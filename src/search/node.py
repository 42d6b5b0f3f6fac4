"""
Search Node Module - One discovered cell with its path cost.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple


@dataclass(eq=False)
class SearchNode:
    """
    A discovered grid cell.

    Nodes are mutable: when a cheaper path to a queued cell is found the
    engine rewrites g/h/f and parent on the queued node itself. Several
    nodes may share the same parent.

    Attributes:
        row: Row index
        col: Column index
        g: Accumulated path cost from the start
        h: Heuristic estimate to the goal
        parent: Predecessor on the best known path (None for the start)
        f: g + h, kept in sync by update()
    """
    row: int
    col: int
    g: float = 0
    h: float = 0
    parent: Optional['SearchNode'] = None
    f: float = field(init=False)

    def __post_init__(self):
        self.f = self.g + self.h

    @property
    def key(self) -> Tuple[int, int]:
        """Coordinate key used by frontier, closed set and cost maps."""
        return (self.row, self.col)

    def update(self, g: float, h: float, parent: Optional['SearchNode']) -> None:
        """
        Rewrite cost fields in place.

        Args:
            g: New path cost
            h: Heuristic estimate
            parent: New predecessor
        """
        self.g = g
        self.h = h
        self.f = g + h
        self.parent = parent

    def path(self) -> List[Tuple[int, int]]:
        """Follow parent links back to the start, returned start-first."""
        coords = []
        node: Optional[SearchNode] = self
        while node is not None:
            coords.append(node.key)
            node = node.parent
        coords.reverse()
        return coords

    def __repr__(self):
        return f"SearchNode(({self.row},{self.col}) g={self.g} h={self.h:.2f} f={self.f:.2f})"
