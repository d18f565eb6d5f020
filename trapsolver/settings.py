"""
Settings Module for the Circuit Trap Solver

Provides persistent storage for solver preferences using JSON.
Settings are stored in config.json in the working directory.
"""

import copy
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# Settings file location (working directory)
SETTINGS_FILE = Path("config.json")

# Default settings
DEFAULT_SETTINGS: Dict[str, Any] = {
    "debug_enabled": False,
    "strategy_name": "library",
    "oracle_type": "simulated",
    "skill": 85.0,
    "exploration_order": ["right", "down", "left", "up"],
    "min_grid_size": 3,
    "max_grid_size": 5,
    "replay_confirmed": True,
    "keep_branch_history": False,
    # Per-strategy policy overrides, applied over the keys above
    "strategy_policies": {
        "coordinate": {"keep_branch_history": True},
    },
    "timing": {
        "cooldown_ms": 250,
        "fail_wait_ms": 3500,
        "success_wait_ms": 8500,
        "unavailable_retry_ms": 3000,
        "open_timeout_ms": 5000,
        "submit_timeout_ms": 1000,
    },
}


def default_settings() -> Dict[str, Any]:
    """Deep copy of the default settings."""
    return copy.deepcopy(DEFAULT_SETTINGS)


def policy_settings(settings: Dict[str, Any], strategy_name: str) -> Dict[str, Any]:
    """
    Settings for one strategy's search policy.

    Args:
        settings: Full settings dictionary
        strategy_name: Strategy the policy is built for

    Returns:
        Copy of settings with that strategy's "strategy_policies" entry
        applied on top
    """
    result = copy.deepcopy(settings)
    overrides = settings.get("strategy_policies", {}).get(strategy_name, {})
    result.update(overrides)
    if overrides:
        logger.debug(f"Policy overrides for {strategy_name}: {overrides}")
    return result


def load_settings(path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load settings from config.json.

    Args:
        path: Settings file (default: SETTINGS_FILE)

    Returns:
        Settings dictionary. Returns defaults if file missing or invalid.
    """
    path = Path(path) if path is not None else SETTINGS_FILE
    if not path.exists():
        logger.debug("Settings file not found, using defaults")
        return default_settings()

    try:
        with open(path, 'r', encoding='utf-8') as f:
            settings = json.load(f)

        # Merge with defaults to handle missing keys
        result = default_settings()
        timing = settings.pop("timing", None)
        result.update(settings)
        if isinstance(timing, dict):
            result["timing"].update(timing)
        logger.debug(f"Settings loaded: {result}")
        return result

    except (json.JSONDecodeError, IOError, AttributeError) as e:
        logger.warning(f"Failed to load settings: {e}, using defaults")
        return default_settings()


def save_settings(settings: Dict[str, Any], path: Optional[Path] = None) -> None:
    """
    Save settings to config.json.

    Args:
        settings: Settings dictionary to save
        path: Settings file (default: SETTINGS_FILE)
    """
    path = Path(path) if path is not None else SETTINGS_FILE
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(settings, f, indent=2)
        logger.debug(f"Settings saved: {settings}")
    except IOError as e:
        logger.error(f"Failed to save settings: {e}")
