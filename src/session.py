"""
Session Module - Owns the grid and run configuration for one workspace.

A Session replaces process-wide state: the editor, the run coordinator
and the exporter all receive the same Session by reference.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from src.heuristics import (
    DEFAULT_FORMULA,
    DEFAULT_PRESET,
    get_heuristic,
    heuristic_params,
    parse_heuristic_table,
)
from src.search import ConfigurationError, Grid, SessionLockedError, init_grid

logger = logging.getLogger(__name__)

__all__ = [
    "LAYOUT_MODES",
    "MAX_PANELS",
    "Session",
]

# Layout mode -> number of comparison panels
LAYOUT_MODES: Dict[str, int] = {
    "single": 1,
    "compare": 2,
    "triple": 3,
}

MAX_PANELS = 3


@dataclass
class Session:
    """
    Grid plus every user choice that shapes a run.

    Attributes:
        grid: Shared terrain
        mode: Layout mode (single, compare, triple)
        strategies: Strategy tag per panel slot
        speed: Animation speed factor (higher is faster)
        heuristic_mode: preset, custom or table
        heuristic_preset: Preset metric name
        custom_heuristic: Formula for custom mode
        heuristic_table: Sparse overrides for table mode
        locked: True while a run is active; grid edits are refused
    """
    grid: Grid
    mode: str = "compare"
    strategies: List[str] = field(default_factory=lambda: ["astar", "bfs", "ucs"])
    speed: float = 5
    heuristic_mode: str = "preset"
    heuristic_preset: str = DEFAULT_PRESET
    custom_heuristic: str = DEFAULT_FORMULA
    heuristic_table: Dict[str, float] = field(default_factory=dict)
    locked: bool = False

    @classmethod
    def from_settings(cls, settings: Dict[str, Any]) -> 'Session':
        """
        Create a session from a settings dictionary.

        Args:
            settings: Dictionary as returned by load_settings()

        Returns:
            Session with an empty grid of the configured size
        """
        session = cls(
            grid=init_grid(int(settings.get("grid_size", 20))),
            strategies=list(settings.get("strategies", ["astar", "bfs", "ucs"])),
            speed=settings.get("speed", 5),
            heuristic_mode=settings.get("heuristic_mode", "preset"),
            heuristic_preset=settings.get("heuristic_preset", DEFAULT_PRESET),
            custom_heuristic=settings.get("custom_heuristic", DEFAULT_FORMULA),
            heuristic_table=dict(settings.get("heuristic_table") or {}),
        )
        session.set_mode(settings.get("mode", "compare"))
        return session

    def to_settings(self) -> Dict[str, Any]:
        """Dump persistable choices (the grid itself is not persisted)."""
        return {
            "grid_size": self.grid.size,
            "speed": self.speed,
            "mode": self.mode,
            "strategies": list(self.strategies),
            "heuristic_mode": self.heuristic_mode,
            "heuristic_preset": self.heuristic_preset,
            "custom_heuristic": self.custom_heuristic,
            "heuristic_table": dict(self.heuristic_table),
        }

    @property
    def panel_count(self) -> int:
        """Number of panels for the current layout mode."""
        return LAYOUT_MODES[self.mode]

    def set_mode(self, mode: str) -> None:
        """
        Switch layout mode.

        Raises:
            ConfigurationError: If mode is unknown
        """
        if mode not in LAYOUT_MODES:
            raise ConfigurationError(f"Unknown layout mode: {mode}. Available: {', '.join(LAYOUT_MODES)}")
        self.mode = mode
        logger.info(f"Layout mode: {mode} ({self.panel_count} panels)")

    def set_strategy(self, panel: int, strategy: str) -> None:
        """Choose the strategy for one panel slot."""
        if not 0 <= panel < MAX_PANELS:
            raise ConfigurationError(f"Panel index {panel} out of range")
        while len(self.strategies) <= panel:
            self.strategies.append("astar")
        self.strategies[panel] = strategy

    def panel_configs(self) -> List[Dict[str, Any]]:
        """
        Build one run config per active panel.

        Returns:
            List of dicts with strategy and heuristic settings
        """
        configs = []
        for i in range(self.panel_count):
            config = self.heuristic_config()
            config["strategy"] = self.strategies[i] if i < len(self.strategies) else "astar"
            configs.append(config)
        return configs

    def heuristic_config(self) -> Dict[str, Any]:
        """Current heuristic settings as a dict."""
        return {
            "heuristic_mode": self.heuristic_mode,
            "heuristic_preset": self.heuristic_preset,
            "custom_heuristic": self.custom_heuristic,
            "heuristic_table": dict(self.heuristic_table),
        }

    def build_heuristic(self, config: Optional[Dict[str, Any]] = None) -> Callable[[int, int], float]:
        """
        Build an evaluator for the current goal.

        Args:
            config: Optional panel config overriding the session heuristic

        Returns:
            Evaluator (row, col) -> estimate
        """
        params = heuristic_params(config if config is not None else self.heuristic_config())
        return get_heuristic(self.grid.goal[0], self.grid.goal[1], **params)

    def load_heuristic_table(self, text: str) -> int:
        """
        Replace the lookup table from editor text.

        Returns:
            Number of entries loaded
        """
        self.heuristic_table = parse_heuristic_table(text)
        return len(self.heuristic_table)

    # --------------------------------------------------
    # Grid editing (refused while locked)
    # --------------------------------------------------

    def _check_unlocked(self) -> None:
        if self.locked:
            raise SessionLockedError("Grid cannot be edited while a run is active")

    def edit_cell(self, row: int, col: int, mode: str) -> bool:
        """Apply one editor action (see Grid.edit_cell)."""
        self._check_unlocked()
        return self.grid.edit_cell(row, col, mode)

    def set_cell(self, row: int, col: int, value: int) -> None:
        """Write a raw cell value."""
        self._check_unlocked()
        self.grid.set_cell(row, col, value)

    def resize(self, size: int) -> None:
        """Replace the grid with an empty one of a new size."""
        self._check_unlocked()
        self.grid = init_grid(size)
        logger.info(f"Grid resized to {size}x{size}")

    def clear_walls(self) -> None:
        """Clear all walls and weights."""
        self._check_unlocked()
        self.grid.clear_walls()

    def random_maze(self, seed: Optional[int] = None) -> int:
        """Scatter random walls, returning how many were placed."""
        self._check_unlocked()
        return self.grid.random_maze(seed=seed)
