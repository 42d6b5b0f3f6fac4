"""
Export Module - Shape finished runs into a JSON document.

Building the document never mutates the runs or the session.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from src.search import RunState
from src.session import Session

logger = logging.getLogger(__name__)

# Default download name
EXPORT_FILE = Path("search-results.json")


def _timestamp() -> str:
    """UTC ISO-8601 timestamp with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def run_record(state: Optional[RunState], algorithm: str, heuristic_mode: str,
               grid_size: int, timestamp: str) -> Dict[str, Any]:
    """
    Serializable record for one panel.

    Args:
        state: Panel run, or None if the panel never started
        algorithm: Strategy tag shown for the panel
        heuristic_mode: Heuristic mode in effect
        grid_size: Grid side length
        timestamp: Export timestamp

    Returns:
        Dict with algorithm, expandedNodes, pathCost, pathFound,
        pathLength, path, heuristicMode, gridSize and timestamp
    """
    path = [{"row": r, "col": c} for r, c in state.result_path] if state else []
    return {
        "algorithm": algorithm,
        "expandedNodes": state.expanded_count if state else 0,
        "pathCost": state.result_cost if state else None,
        "pathFound": state.succeeded if state else False,
        "pathLength": len(path),
        "path": path,
        "heuristicMode": heuristic_mode,
        "gridSize": grid_size,
        "timestamp": timestamp,
    }


def build_export(states: Sequence[Optional[RunState]], session: Session,
                 timestamp: Optional[str] = None,
                 panel_configs: Optional[Sequence[Dict[str, Any]]] = None) -> Dict[str, Any]:
    """
    Build the export document for a comparison.

    One record is produced per run. With no runs at all, each panel of
    the session's layout exports zero/empty values.

    Args:
        states: RunStates in panel order
        session: Session providing grid and default heuristic mode
        timestamp: Optional fixed timestamp (defaults to now)
        panel_configs: Configs the panels were started with; their
            heuristic_mode overrides the session's

    Returns:
        {"results": [...], "grid": [[cell, ...], ...]}
    """
    timestamp = timestamp or _timestamp()
    panel_configs = panel_configs or []
    results: List[Dict[str, Any]] = []
    count = len(states) if states else session.panel_count
    for i in range(count):
        state = states[i] if i < len(states) else None
        if state is not None:
            algorithm = state.strategy
        elif i < len(session.strategies):
            algorithm = session.strategies[i]
        else:
            algorithm = f"algo{i + 1}"
        config = panel_configs[i] if i < len(panel_configs) else {}
        heuristic_mode = config.get("heuristic_mode", session.heuristic_mode)
        results.append(run_record(state, algorithm, heuristic_mode,
                                  session.grid.size, timestamp))

    return {"results": results, "grid": session.grid.to_list()}


def save_export(document: Dict[str, Any], path: Path = EXPORT_FILE) -> Path:
    """
    Write an export document as indented JSON.

    Args:
        document: Output of build_export()
        path: Destination file

    Returns:
        Path written
    """
    path = Path(path)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(document, f, indent=2)
    logger.info(f"Results exported to {path} ({len(document.get('results', []))} runs)")
    return path


def comparison_summary(states: Sequence[Optional[RunState]]) -> Dict[str, int]:
    """
    Expanded-node counts per panel, as plotted by the comparison chart.

    Labels are upper-cased strategy tags, suffixed with the panel number
    when two panels share a strategy.

    Args:
        states: RunStates in panel order

    Returns:
        Ordered mapping label -> expanded nodes
    """
    summary: Dict[str, int] = {}
    for i, state in enumerate(states):
        label = state.strategy.upper() if state else f"ALGO {i + 1}"
        if label in summary:
            label = f"{label} #{i + 1}"
        summary[label] = state.expanded_count if state else 0
    return summary
