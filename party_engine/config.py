"""
Engine configuration persistence.

Stores tunables like dwell time and penalties in a JSON file. Missing keys
fall back to DEFAULT_CONFIG; a missing or unreadable file means defaults.
"""

import json
import logging
from pathlib import Path
from typing import TypedDict

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".party_engine.json"


class EngineConfig(TypedDict, total=False):
    """Engine configuration."""
    dwell_seconds: float  # Minimum ACTION_IN_PROGRESS wait, clamped to 3-5
    complete_reward: int  # Awarded on a passed validation
    punishment_penalty: int  # Applied on a failed validation (0 = none)
    skip_penalty: int  # Applied when the victim skips the task
    min_players: int | None  # Overrides the mode's minimum when set
    max_players: int | None  # Overrides the mode's maximum when set
    content_path: str | None  # Custom YAML bank instead of the packaged one


DEFAULT_CONFIG: EngineConfig = {
    "dwell_seconds": 3.0,
    "complete_reward": 1,
    "punishment_penalty": 0,
    "skip_penalty": -1,
    "min_players": None,
    "max_players": None,
    "content_path": None,
}


def merge_config(overrides: EngineConfig | dict | None = None) -> EngineConfig:
    """Defaults with `overrides` applied on top."""
    config = DEFAULT_CONFIG.copy()
    if overrides:
        config.update(overrides)
    return config


def get_config_path(config_dir: Path | str = ".") -> Path:
    """Get path to config file."""
    return Path(config_dir) / CONFIG_FILENAME


def load_config(config_dir: Path | str = ".") -> EngineConfig:
    """Load config from file, or return defaults if not found."""
    path = get_config_path(config_dir)

    if not path.exists():
        return DEFAULT_CONFIG.copy()

    try:
        with open(path, "r", encoding="utf-8") as f:
            saved = json.load(f)
        return merge_config(saved)
    except (json.JSONDecodeError, IOError) as e:
        logger.warning("Ignoring unreadable config %s: %s", path, e)
        return DEFAULT_CONFIG.copy()


def save_config(config: EngineConfig, config_dir: Path | str = ".") -> bool:
    """Save config to file. Returns True on success."""
    path = get_config_path(config_dir)
    path.parent.mkdir(parents=True, exist_ok=True)

    try:
        with open(path, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        return True
    except IOError as e:
        logger.warning("Could not save config %s: %s", path, e)
        return False


def set_dwell_seconds(seconds: float, config_dir: Path | str = ".") -> None:
    """Save dwell time preference."""
    config = load_config(config_dir)
    config["dwell_seconds"] = seconds
    save_config(config, config_dir)
