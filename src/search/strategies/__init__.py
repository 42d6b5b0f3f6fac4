"""
Strategies Package - Concrete frontier selection strategies.

Import this module to register all built-in strategies.
"""

from .uninformed import BreadthFirstStrategy, DepthFirstStrategy, UniformCostStrategy
from .informed import GreedyBestFirstStrategy, AStarStrategy

__all__ = [
    "BreadthFirstStrategy",
    "DepthFirstStrategy",
    "UniformCostStrategy",
    "GreedyBestFirstStrategy",
    "AStarStrategy",
]
