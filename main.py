"""
Search Comparison Lab - Entry Point

Runs the configured comparison panels on the Qt event loop, animating
each expansion at the configured speed, then prints the verdict and
exports the results.

Example:
    python main.py
    python main.py --maze 42 --speed 50 --export results.json
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import Optional

from PyQt5.QtCore import QCoreApplication

from src.export import EXPORT_FILE, build_export, comparison_summary, save_export
from src.run_coordinator import RunCoordinator, Verdict
from src.search import ConfigurationError
from src.session import Session
from src.settings import load_settings, save_settings
from src.snapshot import save_run_snapshot


# Configure logging - output to both console and file
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%H:%M:%S",
    handlers=[
        logging.StreamHandler(),  # Console output
        logging.FileHandler("search.log", mode='w', encoding='utf-8')  # File output
    ]
)
logger = logging.getLogger(__name__)


class Application:
    """
    Main application controller.

    Owns the session and the run coordinator and reacts to the
    coordinator's signals.
    """

    def __init__(self, debug_mode: bool = False, export_path: Path = EXPORT_FILE):
        """
        Initialize the application.

        Args:
            debug_mode: Enable debug mode via CLI (overrides saved setting)
            export_path: Where to write the results document
        """
        self.cli_debug_override = debug_mode
        self.export_path = export_path
        self.coordinator: Optional[RunCoordinator] = None

        # Load persistent settings
        self.settings = load_settings()
        self.session = Session.from_settings(self.settings)

        # Effective debug mode: CLI flag overrides saved setting
        if self.cli_debug_override:
            self.debug_mode = True
        else:
            self.debug_mode = self.settings.get("debug_enabled", False)

        if self.debug_mode:
            logging.getLogger().setLevel(logging.DEBUG)

    def setup(self, maze_seed: Optional[int] = None, speed: Optional[float] = None):
        """Prepare the grid and connect coordinator signals."""
        if maze_seed is not None:
            walls = self.session.random_maze(seed=maze_seed)
            logger.info(f"Random maze generated: {walls} walls (seed {maze_seed})")

        self.coordinator = RunCoordinator(self.session)
        if speed is not None:
            self.coordinator.set_speed(speed)

        self.coordinator.panel_stepped.connect(self._on_panel_stepped)
        self.coordinator.finished.connect(self._on_finished)
        self.coordinator.status_changed.connect(self._on_status_changed)

        logger.info(
            f"Application initialized: {self.session.grid.size}x{self.session.grid.size} grid, "
            f"{self.session.panel_count} panel(s), heuristic {self.session.heuristic_mode}"
        )

    def _on_panel_stepped(self, index: int):
        """Handle one expansion of a panel."""
        if self.debug_mode:
            stats = self.coordinator.panel_stats(index)
            logger.debug(f"Panel {index} [{stats.strategy}]: expanded={stats.expanded_count}, "
                         f"frontier={stats.frontier_size}, status={stats.status}")

    def _on_status_changed(self, status: str):
        """Handle coordinator state change."""
        logger.info(f"Status: {status}")

    def _on_finished(self, verdict: Optional[Verdict]):
        """Report results, export them and quit the event loop."""
        for stats in self.coordinator.all_stats():
            cost = f"{stats.result_cost:g}" if stats.succeeded else "-"
            logger.info(f"  Panel {stats.index} {stats.strategy.upper()}: {stats.status}, "
                        f"cost={cost}, expanded={stats.expanded_count}, "
                        f"time={stats.elapsed_sec:.2f}s")

        if verdict is not None:
            logger.info(f"Winner: {verdict.message}")
        logger.info(f"Expanded nodes: {comparison_summary(self.coordinator.run_states)}")

        document = build_export(self.coordinator.run_states, self.session,
                                panel_configs=self.coordinator.panel_configs)
        save_export(document, self.export_path)

        if self.debug_mode:
            for state in self.coordinator.run_states:
                save_run_snapshot(self.session.grid, state)

        # Save to persistent settings
        self.settings.update(self.session.to_settings())
        save_settings(self.settings)

        QCoreApplication.quit()

    def run(self) -> int:
        """
        Start the comparison.

        Returns:
            Exit code (non-zero if the configuration is invalid)
        """
        try:
            self.coordinator.start()
        except ConfigurationError as e:
            logger.error(f"Invalid configuration: {e}")
            return 1
        return 0


def parse_args():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Search Comparison Lab - Compare grid search strategies step by step"
    )
    parser.add_argument(
        "--debug", "-d",
        action="store_true",
        help="Enable debug logging and save PNG snapshots of each run"
    )
    parser.add_argument(
        "--export", "-o",
        type=Path,
        default=EXPORT_FILE,
        help=f"Results file (default: {EXPORT_FILE})"
    )
    parser.add_argument(
        "--maze", "-m",
        type=int,
        default=None,
        metavar="SEED",
        help="Scatter random walls using the given seed"
    )
    parser.add_argument(
        "--speed", "-s",
        type=float,
        default=None,
        help="Animation speed factor (delay = max(10, 300 / speed) ms)"
    )
    return parser.parse_args()


def main():
    """Application entry point."""
    args = parse_args()

    qt_app = QCoreApplication(sys.argv)

    app = Application(debug_mode=args.debug, export_path=args.export)
    app.setup(maze_seed=args.maze, speed=args.speed)

    exit_code = app.run()
    if exit_code != 0:
        return exit_code

    return qt_app.exec_()


if __name__ == "__main__":
    sys.exit(main())
