"""Pre-DB bootstrap configuration. Zero imports from the rest of the app.

Stores what must be known before the database opens: the folder holding it
and the log level. Lives in ~/.corre/config.json.
"""
import json
import logging
import os
from pathlib import Path

CONFIG_DIR = Path.home() / ".corre"
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_LOG_LEVEL = "INFO"


def load_config() -> dict:
    """Returns {} on missing or corrupt file; never raises."""
    try:
        with open(CONFIG_FILE, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(config: dict) -> None:
    """Creates ~/.corre/ if needed; atomic write via .tmp + os.replace()."""
    CONFIG_DIR.mkdir(parents=True, exist_ok=True)
    tmp = CONFIG_FILE.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
        os.replace(tmp, CONFIG_FILE)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def get_db_folder() -> str | None:
    """Return config["db_folder"] or None if not set."""
    return load_config().get("db_folder")


def set_db_folder(path: str | None) -> None:
    """Update db_folder in config and save."""
    config = load_config()
    if path is None:
        config.pop("db_folder", None)
    else:
        config["db_folder"] = path
    save_config(config)


def get_log_level() -> int:
    """Numeric logging level from config["log_level"], INFO when unset or unknown."""
    name = str(load_config().get("log_level") or DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    return level if isinstance(level, int) else logging.INFO
