# Area: Shared
"""
periselene.config — Configuration
=================================

Configuration is a plain dict. ``load_config`` layers, lowest first:

1. ``DEFAULT_CONFIG``
2. an optional JSON file
3. ``PERISELENE_*`` environment variables (a ``.env`` file is loaded
   first, without overriding variables already set)

``validate_config`` checks the result for a given role.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv

from ._shared.protocol import SYNC_TOPIC
from ._store.adapters import RecordKey
from .errors import ConfigError

logger = logging.getLogger("periselene.config")

ROLES = ("director", "participant", "judge", "spectator")

DEFAULT_CONFIG: Dict[str, Any] = {
    "build_duration_seconds": 1800,
    "alert_threshold_seconds": 300,
    "launch_countdown_ms": 3000,
    "probe_interval_ms": 1000,
    "poll_interval_seconds": 1,
    "tick_interval_seconds": 1,
    "max_offset_ms": 60000,
    "active_sync_trust_ms": 120000,
    "reveal_delay_ms": 5000,
    "crunch_penalty_seconds": 20,
    "mission_table": "mission_state",
    "mission_record_id": "current",
    "participants_table": "participants",
    "sync_topic": SYNC_TOPIC,
    "log_file": "periselene.log",
}

# Keys that must be positive numbers
POSITIVE_KEYS = [
    "build_duration_seconds",
    "launch_countdown_ms",
    "probe_interval_ms",
    "poll_interval_seconds",
    "tick_interval_seconds",
    "max_offset_ms",
]

# Keys that must be numbers >= 0
NON_NEGATIVE_KEYS = [
    "alert_threshold_seconds",
    "active_sync_trust_ms",
    "reveal_delay_ms",
    "crunch_penalty_seconds",
]

STRING_KEYS = [
    "mission_table",
    "mission_record_id",
    "participants_table",
    "sync_topic",
]

# Environment variable → (config key, type)
ENV_MAPPINGS = {
    "PERISELENE_BUILD_DURATION_SECONDS": ("build_duration_seconds", int),
    "PERISELENE_ALERT_THRESHOLD_SECONDS": ("alert_threshold_seconds", int),
    "PERISELENE_LAUNCH_COUNTDOWN_MS": ("launch_countdown_ms", int),
    "PERISELENE_PROBE_INTERVAL_MS": ("probe_interval_ms", int),
    "PERISELENE_POLL_INTERVAL_SECONDS": ("poll_interval_seconds", float),
    "PERISELENE_TICK_INTERVAL_SECONDS": ("tick_interval_seconds", float),
    "PERISELENE_MAX_OFFSET_MS": ("max_offset_ms", int),
    "PERISELENE_ACTIVE_SYNC_TRUST_MS": ("active_sync_trust_ms", int),
    "PERISELENE_REVEAL_DELAY_MS": ("reveal_delay_ms", int),
    "PERISELENE_CRUNCH_PENALTY_SECONDS": ("crunch_penalty_seconds", int),
    "PERISELENE_MISSION_TABLE": ("mission_table", str),
    "PERISELENE_MISSION_RECORD_ID": ("mission_record_id", str),
    "PERISELENE_PARTICIPANTS_TABLE": ("participants_table", str),
    "PERISELENE_SYNC_TOPIC": ("sync_topic", str),
    "PERISELENE_LOG_FILE": ("log_file", str),
    "PERISELENE_PARTICIPANT_ID": ("participant_id", str),
    "PERISELENE_DISPLAY_NAME": ("display_name", str),
}


def load_config(
    config_path: Optional[str] = None,
    env_file: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Load config from defaults, a JSON file and the environment.

    Args:
        config_path: Optional JSON file
        env_file: Optional .env path (default: search from cwd)

    Returns:
        Merged config dict

    Raises:
        ConfigError: If the file or an environment value cannot be read
    """
    config: Dict[str, Any] = dict(DEFAULT_CONFIG)

    if config_path:
        path = Path(config_path)
        if path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    config.update(json.load(f))
            except (OSError, ValueError) as e:
                raise ConfigError([f"{config_path}: {e}"]) from e
        else:
            logger.warning(f"Config file not found: {config_path}")

    load_dotenv(env_file, override=False)

    problems: List[str] = []
    for env_key, (config_key, cast) in ENV_MAPPINGS.items():
        if env_key not in os.environ:
            continue
        try:
            config[config_key] = cast(os.environ[env_key])
        except ValueError:
            problems.append(f"{env_key} is not a valid {cast.__name__}")
    if problems:
        raise ConfigError(problems)

    return config


def validate_config(config: Dict[str, Any], role: str = "spectator") -> None:
    """
    Validate a config for *role*.

    Args:
        config: Configuration dict
        role: director, participant, judge or spectator

    Raises:
        ConfigError: If keys are missing or values are out of range
    """
    problems: List[str] = []

    if role not in ROLES:
        problems.append(f"unknown role: {role}")

    for key in POSITIVE_KEYS:
        value = config.get(key)
        if not _is_number(value) or value <= 0:
            problems.append(f"{key} must be a positive number")

    for key in NON_NEGATIVE_KEYS:
        value = config.get(key)
        if not _is_number(value) or value < 0:
            problems.append(f"{key} must be a number >= 0")

    for key in STRING_KEYS:
        value = config.get(key)
        if not isinstance(value, str) or not value:
            problems.append(f"{key} must be a non-empty string")

    if role == "participant" and not config.get("participant_id"):
        problems.append("participant_id is required for a participant client")

    if problems:
        raise ConfigError(problems)


def with_defaults(config: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """DEFAULT_CONFIG overlaid with *config*."""
    merged = dict(DEFAULT_CONFIG)
    merged.update(config or {})
    return merged


def mission_key(config: Dict[str, Any]) -> RecordKey:
    """The named singleton key of the mission record."""
    return RecordKey(config["mission_table"], config["mission_record_id"])


def participant_key(config: Dict[str, Any], participant_id: str) -> RecordKey:
    return RecordKey(config["participants_table"], participant_id)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
