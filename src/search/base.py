"""
Base Strategy Module - Abstract base class for frontier selection strategies.
"""

from abc import ABC, abstractmethod
from typing import Callable

from .node import SearchNode
from .state import Frontier


class SearchStrategy(ABC):
    """
    Abstract base class for all frontier selection strategies.

    A strategy only decides which frontier position is expanded next;
    the engine owns everything else about the expansion.

    Attributes:
        name: Short identifier used as the strategy tag
        description: Human-readable description for UI
        optimal: Whether a found path is reported as optimal
    """
    name: str = "base"
    description: str = "Base strategy"
    optimal: bool = False

    @abstractmethod
    def select(self, frontier: Frontier) -> int:
        """
        Choose the frontier position to expand next.

        Args:
            frontier: Non-empty frontier

        Returns:
            Index into frontier insertion order
        """
        pass

    def _argmin(self, frontier: Frontier, key: Callable[[SearchNode], float]) -> int:
        """
        Position of the lowest-keyed node.

        Uses strict comparison, so the earliest inserted node wins ties.

        Args:
            frontier: Non-empty frontier
            key: Priority extractor

        Returns:
            Index of the first minimum
        """
        nodes = frontier.nodes
        best = 0
        best_value = key(nodes[0])
        for i in range(1, len(nodes)):
            value = key(nodes[i])
            if value < best_value:
                best = i
                best_value = value
        return best
