"""
Settings Module - Lab preferences persisted between sessions.

The grid itself is never stored, only the choices that rebuild a
Session: grid size, speed, layout mode, panel strategies and the
heuristic configuration. Stored values that no longer make sense
(wrong type, unknown layout mode, non-positive size or speed) are
replaced by their defaults when loading.
"""

import json
import logging
from pathlib import Path
from typing import Any, Callable, Dict

logger = logging.getLogger(__name__)

SETTINGS_FILE = Path("config.json")

DEFAULT_SETTINGS: Dict[str, Any] = {
    "debug_enabled": False,
    "grid_size": 20,
    "speed": 5,
    "mode": "compare",
    "strategies": ["astar", "bfs", "ucs"],
    "heuristic_mode": "preset",
    "heuristic_preset": "manhattan",
    "custom_heuristic": "Math.abs(x-goal_x)+Math.abs(y-goal_y)",
    "heuristic_table": {},
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


# Acceptance check per known key
_VALIDATORS: Dict[str, Callable[[Any], bool]] = {
    "debug_enabled": lambda v: isinstance(v, bool),
    "grid_size": lambda v: isinstance(v, int) and not isinstance(v, bool) and v > 0,
    "speed": lambda v: _is_number(v) and v > 0,
    "mode": lambda v: v in ("single", "compare", "triple"),
    "strategies": lambda v: isinstance(v, list) and all(isinstance(s, str) for s in v),
    "heuristic_mode": lambda v: isinstance(v, str),
    "heuristic_preset": lambda v: isinstance(v, str),
    "custom_heuristic": lambda v: isinstance(v, str),
    "heuristic_table": lambda v: isinstance(v, dict) and all(_is_number(x) for x in v.values()),
}


def load_settings(path: Path = SETTINGS_FILE) -> Dict[str, Any]:
    """
    Read saved preferences.

    Args:
        path: JSON file to read

    Returns:
        Defaults overlaid with every valid stored value. Unknown keys are
        kept as-is; a missing or unreadable file gives plain defaults.
    """
    if not path.exists():
        logger.debug(f"No settings at {path}, using defaults")
        return _defaults()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            stored = json.load(f)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return _defaults()

    if not isinstance(stored, dict):
        logger.warning(f"Settings in {path} are not an object, using defaults")
        return _defaults()

    result = _defaults()
    for key, value in stored.items():
        check = _VALIDATORS.get(key)
        if check is not None and not check(value):
            logger.warning(f"Ignoring invalid setting {key}={value!r}")
            continue
        result[key] = value
    logger.debug(f"Settings loaded: {result}")
    return result


def save_settings(settings: Dict[str, Any], path: Path = SETTINGS_FILE) -> None:
    """Write preferences as indented JSON; IO failures are logged, not raised."""
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2)
        logger.debug(f"Settings saved to {path}")
    except IOError as e:
        logger.error(f"Failed to save settings: {e}")


def _defaults() -> Dict[str, Any]:
    """Fresh copy of the defaults (nested containers included)."""
    return json.loads(json.dumps(DEFAULT_SETTINGS))
