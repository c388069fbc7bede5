import json
import os
from pathlib import Path
from typing import Dict, Any, Optional

from Dir_Digest.core.errors import ConfigError
from Dir_Digest.core.hasher import DEFAULT_ALGORITHM, DEFAULT_CHUNK_SIZE


# ----------------------------
# Settings
# ----------------------------

DEFAULT_SETTINGS = {
    "hashing": {
        "algorithm": DEFAULT_ALGORITHM,
        "chunk_size": DEFAULT_CHUNK_SIZE,
        "workers": None,  # None → cpu count
    },
    "scan": {
        "follow_symlinks": False,
        "ignore": [],
    },
    "output": {
        "quiet": False,
        "progress": True,
    },
}

SETTINGS_ENV = "DIR_DIGEST_SETTINGS"
USER_SETTINGS_PATH = Path.home() / ".config" / "dir_digest" / "settings.json"


def settings_path(config_path: Optional[Path] = None) -> Optional[Path]:
    if config_path is not None:
        return Path(config_path)

    env_path = os.getenv(SETTINGS_ENV)
    if env_path:
        return Path(env_path)

    if USER_SETTINGS_PATH.exists():
        return USER_SETTINGS_PATH

    return None


def load_settings(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    DEFAULT_SETTINGS merged with the user's JSON settings file, if any.

    Nested sections are merged key by key; anything else replaces
    the default outright.
    """
    merged = json.loads(json.dumps(DEFAULT_SETTINGS))

    path = settings_path(config_path)
    if path is None:
        return merged

    try:
        with open(path, "r", encoding="utf-8") as f:
            user_settings = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Cannot load settings from {path}: {e}") from e

    if not isinstance(user_settings, dict):
        raise ConfigError(f"Settings file {path} must contain a JSON object")

    for k, v in user_settings.items():
        if k in merged and not isinstance(v, dict):
            raise ConfigError(f"Settings section {k!r} must be an object")
        if isinstance(v, dict) and k in merged:
            merged[k].update(v)
        else:
            merged[k] = v

    return merged


def apply_overrides(
    settings: Dict[str, Any],
    *,
    algorithm: Optional[str] = None,
    chunk_size: Optional[int] = None,
    workers: Optional[int] = None,
    follow_symlinks: Optional[bool] = None,
    ignore=(),
    quiet: bool = False,
) -> Dict[str, Any]:
    """Command-line values win over the settings file."""
    settings.setdefault("hashing", {})
    settings.setdefault("scan", {})
    settings.setdefault("output", {})

    if algorithm is not None:
        settings["hashing"]["algorithm"] = algorithm
    if chunk_size is not None:
        settings["hashing"]["chunk_size"] = chunk_size
    if workers is not None:
        settings["hashing"]["workers"] = workers
    if follow_symlinks is not None:
        settings["scan"]["follow_symlinks"] = follow_symlinks
    if ignore:
        existing = settings["scan"].get("ignore") or []
        if not isinstance(existing, list):
            raise ConfigError(f"Settings scan.ignore must be a list of strings, got {existing!r}")
        settings["scan"]["ignore"] = existing + list(ignore)
    if quiet:
        settings["output"]["quiet"] = True

    return settings
