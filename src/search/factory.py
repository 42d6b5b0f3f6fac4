"""
Strategy Factory Module - Registry and factory for strategy instantiation.
"""

import logging
from typing import Dict, List, Type, Any

from .base import SearchStrategy

logger = logging.getLogger(__name__)

# Strategy used for unrecognised tags
DEFAULT_STRATEGY = "astar"

# Global registry of strategies
_STRATEGIES: Dict[str, Type[SearchStrategy]] = {}


def register_strategy(cls: Type[SearchStrategy]) -> Type[SearchStrategy]:
    """
    Decorator to register a strategy class.

    Usage:
        @register_strategy
        class MyStrategy(SearchStrategy):
            name = "my_strategy"
            ...

    Args:
        cls: Strategy class to register

    Returns:
        The same class (for decorator chaining)
    """
    _STRATEGIES[cls.name] = cls
    return cls


def create_strategy(name: str, **kwargs: Any) -> SearchStrategy:
    """
    Create a strategy instance by name.

    Unknown names fall back to A* rather than failing, so a stale
    setting never stops a run from starting.

    Args:
        name: Strategy tag (e.g., "bfs", "astar")
        **kwargs: Additional arguments passed to strategy constructor

    Returns:
        Strategy instance
    """
    if name not in _STRATEGIES:
        logger.warning(f"Unknown strategy: {name}, falling back to {DEFAULT_STRATEGY}")
        name = DEFAULT_STRATEGY
    return _STRATEGIES[name](**kwargs)


def get_strategy_names() -> List[str]:
    """
    Get list of available strategy names.

    Returns:
        List of registered strategy names
    """
    return list(_STRATEGIES.keys())


def get_strategy_info() -> List[Dict[str, str]]:
    """
    Get name and description for all registered strategies.

    Returns:
        List of dicts with 'name' and 'description' keys
    """
    return [
        {"name": cls.name, "description": cls.description}
        for cls in _STRATEGIES.values()
    ]


def is_optimal(name: str) -> bool:
    """Check if a strategy tag reports its paths as optimal."""
    cls = _STRATEGIES.get(name, _STRATEGIES.get(DEFAULT_STRATEGY))
    return bool(cls and cls.optimal)
