"""
Run Coordinator Module - Drives up to three search runs side by side.

This module provides the RunCoordinator which owns the per-panel
RunStates of a comparison, schedules their expansions on the Qt event
loop and decides the winner once every panel is done.

Scheduling:
  - Each panel has its own single-shot timer, re-armed only after the
    panel's expansion and all panel_stepped listeners have returned
  - Panels are not lock-stepped; they share only the nominal delay
  - pause() and reset() stop every pending timer; callbacks carry the
    run generation so a timer that fires after reset() does nothing

State Flow:
    READY --start()--> RUNNING --pause()--> PAUSED
      ^                  |   ^                 |
      |                  |   +----resume()-----+
      |        all panels terminal
      |                  |
      +----reset()--- FINISHED

For the expansion logic itself, see the src.search package.
"""

import logging
import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional

from PyQt5.QtCore import QObject, QTimer, pyqtSignal

from src.search import ConfigurationError, RunState, Coord, init_run, is_optimal, step
from src.session import MAX_PANELS, Session

logger = logging.getLogger(__name__)


__all__ = [
    "CoordinatorState",
    "QtPanelTimer",
    "PanelStats",
    "Verdict",
    "RunCoordinator",
    "step_delay_ms",
    "determine_winner",
]

# Cadence: delay = max(MIN_DELAY_MS, BASE_DELAY_MS / speed)
BASE_DELAY_MS = 300
MIN_DELAY_MS = 10


class CoordinatorState(Enum):
    """
    Coordinator lifecycle states.

    States:
        READY: No runs exist
        RUNNING: Panels are being stepped on their timers
        PAUSED: Runs exist but no timer is armed
        FINISHED: Every panel is terminal and the verdict is available
    """
    READY = auto()
    RUNNING = auto()
    PAUSED = auto()
    FINISHED = auto()


class QtPanelTimer:
    """
    Cancellable single-shot timer for one panel.

    Wraps a QTimer so it fires on the Qt event loop of the owning thread.
    """

    def __init__(self, callback: Callable[[], None]):
        self._timer = QTimer()
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(callback)

    def arm(self, delay_ms: float) -> None:
        """Schedule the callback once after delay_ms (restarts if pending)."""
        self._timer.start(int(delay_ms))

    def cancel(self) -> None:
        """Revoke a pending callback."""
        self._timer.stop()

    @property
    def active(self) -> bool:
        """True while a callback is pending."""
        return self._timer.isActive()


@dataclass
class PanelStats:
    """Display snapshot of one panel."""
    index: int
    strategy: str
    expanded_count: int = 0
    result_cost: Optional[float] = None
    succeeded: bool = False
    terminal: bool = False
    result_path: List[Coord] = field(default_factory=list)
    frontier_size: int = 0
    status: str = "READY"
    elapsed_sec: float = 0.0
    optimal: Optional[bool] = None


@dataclass
class Verdict:
    """
    Comparison outcome of the first two panels.

    Attributes:
        winner: Winning panel index, or None if no panel found a path
        reason: "cost", "efficiency", "found path" or "no path"
        message: Display text, e.g. "ASTAR wins (cost)"
    """
    winner: Optional[int]
    reason: str
    message: str


@dataclass
class _Panel:
    """Per-panel bookkeeping owned by the coordinator."""
    index: int
    config: Dict[str, Any]
    state: RunState
    timer: Any
    started_at: float = field(default_factory=time.perf_counter)
    finished_at: Optional[float] = None


def step_delay_ms(speed: float) -> float:
    """
    Delay between expansions for a speed factor.

    Args:
        speed: Positive speed factor (higher is faster)

    Returns:
        max(10, 300 / speed) milliseconds
    """
    if speed <= 0:
        raise ConfigurationError(f"Speed must be positive, got {speed}")
    return max(MIN_DELAY_MS, BASE_DELAY_MS / speed)


def determine_winner(states: List[RunState]) -> Optional[Verdict]:
    """
    Compare the first two finished runs.

    Lower path cost wins; on equal cost the run with fewer (or equal)
    expansions wins, favouring the first panel. A run that found a path
    beats one that did not.

    Args:
        states: Terminal RunStates in panel order

    Returns:
        Verdict, or None with fewer than two runs
    """
    if len(states) < 2:
        return None
    s0, s1 = states[0], states[1]
    names = [s0.strategy.upper(), s1.strategy.upper()]

    if s0.succeeded and s1.succeeded:
        if s0.result_cost < s1.result_cost:
            return Verdict(0, "cost", f"{names[0]} wins (cost)")
        if s1.result_cost < s0.result_cost:
            return Verdict(1, "cost", f"{names[1]} wins (cost)")
        if s0.expanded_count <= s1.expanded_count:
            return Verdict(0, "efficiency", f"{names[0]} wins (efficiency)")
        return Verdict(1, "efficiency", f"{names[1]} wins (efficiency)")
    if s0.succeeded:
        return Verdict(0, "found path", f"{names[0]} found path")
    if s1.succeeded:
        return Verdict(1, "found path", f"{names[1]} found path")
    return Verdict(None, "no path", "No path found")


class RunCoordinator(QObject):
    """
    Schedules and compares concurrent search runs.

    All panels share the session's grid, start and goal; each panel has
    its own strategy and heuristic configuration.

    Signals:
        panel_stepped(int): A panel performed an expansion
        finished(object): Every panel is terminal; carries Verdict or None
        status_changed(str): Coordinator state changed

    Example:
        coordinator = RunCoordinator(session)
        coordinator.panel_stepped.connect(view.redraw_panel)
        coordinator.finished.connect(view.show_verdict)
        coordinator.start()
    """

    panel_stepped = pyqtSignal(int)
    finished = pyqtSignal(object)
    status_changed = pyqtSignal(str)

    def __init__(self, session: Session,
                 timer_factory: Callable[[Callable[[], None]], Any] = QtPanelTimer,
                 parent: Optional[QObject] = None):
        """
        Initialize the coordinator.

        Args:
            session: Session owning the grid and run configuration
            timer_factory: Builds a panel timer from its callback
            parent: Optional Qt parent
        """
        super().__init__(parent)
        self.session = session
        self._timer_factory = timer_factory
        self._panels: List[_Panel] = []
        self._state = CoordinatorState.READY
        self._generation = 0
        self._verdict: Optional[Verdict] = None

    @property
    def state(self) -> CoordinatorState:
        """Get current coordinator state."""
        return self._state

    @property
    def verdict(self) -> Optional[Verdict]:
        """Winner verdict once FINISHED (None for single-panel runs)."""
        return self._verdict

    @property
    def delay_ms(self) -> float:
        """Current delay between expansions of one panel."""
        return step_delay_ms(self.session.speed)

    @property
    def panel_count(self) -> int:
        """Number of active panels."""
        return len(self._panels)

    @property
    def run_states(self) -> List[RunState]:
        """RunStates in panel order."""
        return [panel.state for panel in self._panels]

    @property
    def panel_configs(self) -> List[Dict[str, Any]]:
        """Configs the active panels were started with."""
        return [dict(panel.config) for panel in self._panels]

    def set_speed(self, speed: float) -> None:
        """
        Change the speed factor; applies from the next re-arm.

        Raises:
            ConfigurationError: If speed is not positive
        """
        step_delay_ms(speed)
        self.session.speed = speed

    # --------------------------------------------------
    # Controls
    # --------------------------------------------------

    def start(self, panel_configs: Optional[List[Dict[str, Any]]] = None) -> None:
        """
        Start fresh runs and schedule every panel.

        Any existing runs are reset first.

        Args:
            panel_configs: 1-3 dicts with "strategy" and optional heuristic
                keys; defaults to the session's panel configs

        Raises:
            ConfigurationError: On invalid panel count, grid or start/goal
        """
        self.reset()
        self._build_panels(panel_configs)
        self._set_state(CoordinatorState.RUNNING)
        for panel in self._panels:
            self._schedule(panel)

    def pause(self) -> None:
        """Stop scheduling expansions, keeping all run state."""
        if self._state != CoordinatorState.RUNNING:
            return
        for panel in self._panels:
            panel.timer.cancel()
        self._set_state(CoordinatorState.PAUSED)

    def resume(self) -> None:
        """Re-arm every non-terminal panel."""
        if self._state != CoordinatorState.PAUSED:
            return
        self._set_state(CoordinatorState.RUNNING)
        for panel in self._panels:
            if not panel.state.terminal:
                self._schedule(panel)
        self._check_all_done()

    def step(self) -> None:
        """
        Advance every non-terminal panel by exactly one expansion.

        Creates the runs (paused) if none exist yet.
        """
        if self._state in (CoordinatorState.READY, CoordinatorState.FINISHED) and not self._panels:
            self._build_panels(None)
            self._set_state(CoordinatorState.PAUSED)

        for panel in self._panels:
            if not panel.state.terminal:
                self._expand(panel)
        self._check_all_done()

    def reset(self) -> None:
        """Revoke all pending expansions and discard every run."""
        for panel in self._panels:
            panel.timer.cancel()
        self._generation += 1
        had_runs = bool(self._panels)
        self._panels = []
        self._verdict = None
        self.session.locked = False
        if had_runs or self._state != CoordinatorState.READY:
            logger.info("Runs reset")
        self._set_state(CoordinatorState.READY)

    # --------------------------------------------------
    # Queries
    # --------------------------------------------------

    def panel_stats(self, index: int) -> PanelStats:
        """
        Display snapshot of one panel.

        Args:
            index: Panel index

        Returns:
            PanelStats (status READY if the panel has no run)
        """
        if index >= len(self._panels):
            strategies = self.session.strategies
            strategy = strategies[index] if index < len(strategies) else "astar"
            return PanelStats(index=index, strategy=strategy)

        panel = self._panels[index]
        s = panel.state
        end = panel.finished_at if panel.finished_at is not None else time.perf_counter()

        if s.terminal and s.succeeded:
            status = "FOUND"
        elif s.terminal:
            status = "NO PATH"
        else:
            status = "RUNNING"

        return PanelStats(
            index=index,
            strategy=s.strategy,
            expanded_count=s.expanded_count,
            result_cost=s.result_cost,
            succeeded=s.succeeded,
            terminal=s.terminal,
            result_path=list(s.result_path),
            frontier_size=s.frontier_size,
            status=status,
            elapsed_sec=end - panel.started_at,
            optimal=is_optimal(s.strategy) if s.succeeded else None,
        )

    def all_stats(self) -> List[PanelStats]:
        """PanelStats for every active panel."""
        return [self.panel_stats(i) for i in range(len(self._panels))]

    # --------------------------------------------------
    # Internals
    # --------------------------------------------------

    def _build_panels(self, panel_configs: Optional[List[Dict[str, Any]]]) -> None:
        """Create one fresh RunState (and timer) per config."""
        if panel_configs is None:
            panel_configs = self.session.panel_configs()
        if not 1 <= len(panel_configs) <= MAX_PANELS:
            raise ConfigurationError(f"Expected 1-{MAX_PANELS} panels, got {len(panel_configs)}")

        grid = self.session.grid
        grid.validate()

        panels = []
        generation = self._generation
        for index, config in enumerate(panel_configs):
            strategy = config.get("strategy", "astar")
            heuristic_config = {**self.session.heuristic_config(), **config}
            state = init_run(strategy, grid, grid.start, grid.goal,
                             self.session.build_heuristic(heuristic_config))
            timer = self._timer_factory(
                lambda i=index, g=generation: self._on_timer(i, g)
            )
            panels.append(_Panel(index=index, config=heuristic_config, state=state, timer=timer))

        self._panels = panels
        self.session.locked = True
        logger.info(
            f"Started {len(panels)} panel(s): "
            f"{', '.join(p.state.strategy for p in panels)} "
            f"from {grid.start} to {grid.goal}"
        )

    def _schedule(self, panel: _Panel) -> None:
        """Arm a panel's timer if it still has work to do."""
        if self._state != CoordinatorState.RUNNING:
            return
        if panel.state.terminal:
            self._check_all_done()
            return
        panel.timer.arm(self.delay_ms)

    def _on_timer(self, index: int, generation: int) -> None:
        """Timer callback: one expansion, then re-arm."""
        if generation != self._generation or self._state != CoordinatorState.RUNNING:
            logger.debug(f"Panel {index}: stale timer ignored")
            return
        panel = self._panels[index]
        self._expand(panel)

        # Listeners may have paused or reset during panel_stepped
        if generation != self._generation:
            return
        self._schedule(panel)

    def _expand(self, panel: _Panel) -> None:
        """Step one panel and notify listeners."""
        step(panel.state)
        if panel.state.terminal and panel.finished_at is None:
            panel.finished_at = time.perf_counter()
        self.panel_stepped.emit(panel.index)

    def _check_all_done(self) -> None:
        """Finish the comparison once every panel is terminal."""
        if not self._panels or self._state not in (CoordinatorState.RUNNING, CoordinatorState.PAUSED):
            return
        if not all(panel.state.terminal for panel in self._panels):
            return

        self._verdict = determine_winner(self.run_states)
        self.session.locked = False
        if self._verdict is not None:
            logger.info(f"All panels finished: {self._verdict.message}")
        else:
            logger.info("All panels finished")
        self._set_state(CoordinatorState.FINISHED)
        self.finished.emit(self._verdict)

    def _set_state(self, state: CoordinatorState) -> None:
        if state == self._state:
            return
        logger.debug(f"Coordinator: {self._state.name} -> {state.name}")
        self._state = state
        self.status_changed.emit(state.name.capitalize())
