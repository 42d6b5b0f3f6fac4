"""
Snapshot Utilities

Functions for saving a PNG of a run's grid (walls, weights, closed set,
frontier, path) and managing snapshot output.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
from PIL import Image, ImageDraw, ImageFont

from src.search import Grid, RunState

logger = logging.getLogger(__name__)

# Snapshot settings
SNAPSHOT_DIR = Path("./debug")
MAX_SNAPSHOTS = 10
CELL_PX = 24
HEADER_PX = 20

RGB = Tuple[int, int, int]

# Cell colors
START_COLOR: RGB = (34, 197, 94)
GOAL_COLOR: RGB = (239, 68, 68)
WALL_COLOR: RGB = (30, 41, 59)
EMPTY_COLOR: RGB = (15, 23, 42)
WEIGHT_COLOR: RGB = (249, 115, 22)
PATH_COLOR: RGB = (168, 85, 247)
CURRENT_COLOR: RGB = (96, 165, 250)
CLOSED_COLOR: RGB = (202, 138, 4)
FRONTIER_COLOR: RGB = (59, 130, 246)


def cell_color(grid: Grid, state: Optional[RunState], row: int, col: int) -> RGB:
    """
    Color of a cell, by precedence: start, goal, wall, weight, path,
    current node, closed, frontier, empty.

    Args:
        grid: Terrain
        state: Run being drawn (None for the bare grid)
        row: Row index
        col: Column index

    Returns:
        (r, g, b) tuple
    """
    key = (row, col)
    if key == grid.start:
        return START_COLOR
    if key == grid.goal:
        return GOAL_COLOR
    value = grid.get_cell(row, col)
    if value == 1:
        return WALL_COLOR
    if value > 1:
        # Orange tint over the background, stronger for heavier cells
        alpha = min(0.8, value * 0.15)
        return tuple(int(round(w * alpha + b * (1 - alpha)))
                     for w, b in zip(WEIGHT_COLOR, EMPTY_COLOR))
    if state is None:
        return EMPTY_COLOR
    if state.succeeded and key in state.result_path:
        return PATH_COLOR
    if state.current is not None and state.current.key == key:
        return CURRENT_COLOR
    if key in state.closed:
        return CLOSED_COLOR
    if key in state.frontier:
        return FRONTIER_COLOR
    return EMPTY_COLOR


def render_run(grid: Grid, state: Optional[RunState], cell_px: int = CELL_PX) -> Image.Image:
    """
    Render a grid (and optionally a run over it) to an image.

    Args:
        grid: Terrain
        state: Run to overlay, or None
        cell_px: Pixel size of each cell

    Returns:
        RGB PIL Image with a one-line summary header
    """
    pixels = np.zeros((grid.size, grid.size, 3), dtype=np.uint8)
    for r in range(grid.size):
        for c in range(grid.size):
            pixels[r, c] = cell_color(grid, state, r, c)

    side = grid.size * cell_px
    cells_img = Image.fromarray(pixels, "RGB").resize((side, side), Image.Resampling.NEAREST)

    image = Image.new("RGB", (side, side + HEADER_PX), EMPTY_COLOR)
    image.paste(cells_img, (0, HEADER_PX))
    draw = ImageDraw.Draw(image)
    font = ImageFont.load_default()

    # Weight labels
    if cell_px >= 14:
        for r in range(grid.size):
            for c in range(grid.size):
                value = grid.get_cell(r, c)
                if value > 1:
                    draw.text((c * cell_px + cell_px // 3, HEADER_PX + r * cell_px + cell_px // 4),
                              str(value), fill="white", font=font)

    if state is None:
        summary = f"Grid {grid.size}x{grid.size}, walls: {grid.count_walls()}"
    elif state.succeeded:
        summary = (f"{state.strategy.upper()}: cost {state.result_cost:g}, "
                   f"expanded {state.expanded_count}, path {state.path_length}")
    elif state.terminal:
        summary = f"{state.strategy.upper()}: no path, expanded {state.expanded_count}"
    else:
        summary = (f"{state.strategy.upper()}: running, expanded {state.expanded_count}, "
                   f"frontier {state.frontier_size}")
    draw.text((4, 4), summary, fill="white", font=font)
    return image


def save_run_snapshot(grid: Grid, state: Optional[RunState], path: Optional[Path] = None) -> Path:
    """
    Save a PNG snapshot of a run.

    Args:
        grid: Terrain
        state: Run to overlay, or None
        path: Output file; defaults to SNAPSHOT_DIR/snapshot_<strategy>_<timestamp>.png

    Returns:
        Path written
    """
    SNAPSHOT_DIR.mkdir(parents=True, exist_ok=True)
    if path is None:
        name = state.strategy if state else "grid"
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")[:-3]
        path = SNAPSHOT_DIR / f"snapshot_{name}_{stamp}.png"

    render_run(grid, state).save(path, "PNG")
    logger.info(f"Snapshot saved: {path}")

    # Cleanup old snapshots
    _cleanup_snapshots()
    return Path(path)


def _cleanup_snapshots() -> None:
    """Remove old snapshots, keeping only the most recent MAX_SNAPSHOTS."""
    if not SNAPSHOT_DIR.exists():
        return

    # Get all snapshots sorted by modification time
    snapshot_files = sorted(
        SNAPSHOT_DIR.glob("snapshot_*.png"),
        key=lambda p: p.stat().st_mtime,
        reverse=True
    )

    # Remove old files
    for old_file in snapshot_files[MAX_SNAPSHOTS:]:
        try:
            old_file.unlink()
        except OSError as e:
            logger.warning(f"Failed to remove old snapshot {old_file}: {e}")
