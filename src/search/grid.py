"""
Grid Module - Weighted terrain shared read-only by search runs.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Tuple

import numpy as np

from .errors import ConfigurationError

logger = logging.getLogger(__name__)

Coord = Tuple[int, int]

FREE = 0
WALL = 1
MAX_WEIGHT = 5

# Fraction of cells turned into walls by random_maze()
MAZE_DENSITY = 0.3

# Neighbour order: up, down, left, right
DIRECTIONS: Tuple[Coord, ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))

EDIT_MODES = ("start", "goal", "wall", "erase", "weight")


@dataclass
class Grid:
    """
    Square terrain grid with start and goal cells.

    Cell values: 0 = free, 1 = wall, n > 1 = passable with traversal cost n.
    The editor mutates the grid between runs; search runs only read it.

    Attributes:
        size: Number of rows (and columns)
        cells: 2D list [row][col] of cell values
        start: (row, col) of the start cell
        goal: (row, col) of the goal cell
    """
    size: int
    cells: List[List[int]] = field(default_factory=list)
    start: Coord = (0, 0)
    goal: Coord = (0, 0)

    @classmethod
    def from_rows(cls, rows: List[List[int]], start: Coord, goal: Coord) -> 'Grid':
        """
        Create a Grid from an existing square 2D list.

        Args:
            rows: 2D list of cell values
            start: (row, col) start cell
            goal: (row, col) goal cell

        Returns:
            Grid instance owning a copy of the rows

        Raises:
            ConfigurationError: If rows are not square or start/goal invalid
        """
        size = len(rows)
        if size <= 0 or any(len(row) != size for row in rows):
            raise ConfigurationError(f"Grid rows must form a non-empty square, got {size} rows")
        grid = cls(size=size, cells=[list(row) for row in rows],
                   start=tuple(start), goal=tuple(goal))
        grid.validate()
        return grid

    def validate(self) -> None:
        """
        Check start/goal placement.

        Raises:
            ConfigurationError: If start or goal is out of bounds or they coincide
        """
        if self.size <= 0:
            raise ConfigurationError(f"Grid size must be positive, got {self.size}")
        if not self.in_bounds(*self.start):
            raise ConfigurationError(f"Start {self.start} outside {self.size}x{self.size} grid")
        if not self.in_bounds(*self.goal):
            raise ConfigurationError(f"Goal {self.goal} outside {self.size}x{self.size} grid")
        if self.start == self.goal:
            raise ConfigurationError(f"Start and goal coincide at {self.start}")

    def in_bounds(self, row: int, col: int) -> bool:
        """Check if (row, col) lies on the grid."""
        return 0 <= row < self.size and 0 <= col < self.size

    def get_cell(self, row: int, col: int) -> int:
        """Get raw cell value."""
        return self.cells[row][col]

    def set_cell(self, row: int, col: int, value: int) -> None:
        """
        Set a raw cell value.

        Args:
            row: Row index
            col: Column index
            value: 0 (free), 1 (wall) or weight > 1

        Raises:
            ConfigurationError: If out of bounds or value negative
        """
        if not self.in_bounds(row, col):
            raise ConfigurationError(f"Cell ({row},{col}) outside {self.size}x{self.size} grid")
        if value < 0:
            raise ConfigurationError(f"Cell value must be non-negative, got {value}")
        self.cells[row][col] = value

    def is_wall(self, row: int, col: int) -> bool:
        """Check if cell is impassable."""
        return self.cells[row][col] == WALL

    def move_cost(self, row: int, col: int) -> int:
        """
        Cost of entering a cell.

        Returns:
            The cell's weight when greater than 1, else 1
        """
        weight = self.cells[row][col]
        return weight if weight > 1 else 1

    def neighbors(self, row: int, col: int) -> Iterator[Coord]:
        """
        Yield passable 4-connected neighbours in up/down/left/right order.
        """
        for dr, dc in DIRECTIONS:
            r, c = row + dr, col + dc
            if not self.in_bounds(r, c):
                continue
            if self.is_wall(r, c):
                continue
            yield (r, c)

    def edit_cell(self, row: int, col: int, mode: str) -> bool:
        """
        Apply one editor action to a cell.

        Modes:
            start: move the start cell here
            goal: move the goal cell here
            wall: paint a wall (never over start or goal)
            erase: clear the cell
            weight: cycle weight 0 -> 2 -> ... -> 5 -> 0 (not on walls, start or goal)

        Args:
            row: Row index
            col: Column index
            mode: One of EDIT_MODES

        Returns:
            True if the grid changed, False if the edit was ignored
        """
        if not self.in_bounds(row, col):
            return False
        pos = (row, col)
        protected = pos == self.start or pos == self.goal

        if mode == "start":
            if pos == self.goal:
                return False
            self.start = pos
        elif mode == "goal":
            if pos == self.start:
                return False
            self.goal = pos
        elif mode == "wall":
            if protected:
                return False
            self.cells[row][col] = WALL
        elif mode == "erase":
            self.cells[row][col] = FREE
        elif mode == "weight":
            value = self.cells[row][col]
            if protected or value == WALL:
                return False
            # 0 and 1 share the same traversal cost, so skip straight to 2
            self.cells[row][col] = FREE if value >= MAX_WEIGHT else max(value + 1, 2)
        else:
            logger.warning(f"Unknown edit mode: {mode}")
            return False
        return True

    def clear_walls(self) -> None:
        """Reset every cell (walls and weights) to free."""
        for row in self.cells:
            for c in range(len(row)):
                row[c] = FREE

    def random_maze(self, density: float = MAZE_DENSITY, seed: Optional[int] = None) -> int:
        """
        Clear the grid and scatter random walls.

        Start and goal cells are never walled.

        Args:
            density: Probability that any cell becomes a wall
            seed: Optional RNG seed for reproducible mazes

        Returns:
            Number of walls placed
        """
        self.clear_walls()
        rng = np.random.default_rng(seed)
        mask = rng.random((self.size, self.size)) < density
        mask[self.start] = False
        mask[self.goal] = False
        for r, c in zip(*np.nonzero(mask)):
            self.cells[int(r)][int(c)] = WALL
        walls = int(mask.sum())
        logger.debug(f"Random maze: {walls} walls on {self.size}x{self.size} grid")
        return walls

    def count_walls(self) -> int:
        """Count impassable cells."""
        return sum(1 for row in self.cells for cell in row if cell == WALL)

    def to_list(self) -> List[List[int]]:
        """
        Copy cells to a plain 2D list.

        Returns:
            2D list representation of the terrain
        """
        return [list(row) for row in self.cells]


def init_grid(size: int) -> Grid:
    """
    Create an empty grid with default start and goal placement.

    Start sits at 10% and goal at 85% of the size along both axes.

    Args:
        size: Grid side length

    Returns:
        New Grid

    Raises:
        ConfigurationError: If size is not positive or too small to separate start/goal
    """
    if size <= 0:
        raise ConfigurationError(f"Grid size must be positive, got {size}")
    start = (int(size * 0.1), int(size * 0.1))
    goal = (int(size * 0.85), int(size * 0.85))
    grid = Grid(size=size, cells=[[FREE] * size for _ in range(size)],
                start=start, goal=goal)
    grid.validate()
    return grid
