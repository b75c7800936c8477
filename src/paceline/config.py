"""Configuration management for paceline."""

import logging
import tomllib
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_DIR = Path.home() / ".config" / "paceline"
CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_CONFIG = {
    "bar_width": 8,
    "dir_max_length": 30,
    "context_warn_tokens": 125_000,
    "context_critical_tokens": 170_000,
    "cache_file": "~/.claude_usage_cache",
    "show_git": True,
}


def load_config(path: Path | None = None) -> dict:
    config_file = path or CONFIG_FILE
    if not config_file.exists():
        return dict(DEFAULT_CONFIG)
    try:
        with open(config_file, "rb") as f:
            config = tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as e:
        logger.debug("Ignoring unreadable config %s: %s", config_file, e)
        return dict(DEFAULT_CONFIG)
    merged = dict(DEFAULT_CONFIG)
    merged.update(config)
    return merged


def cache_path(config: dict) -> Path:
    return Path(config.get("cache_file", DEFAULT_CONFIG["cache_file"])).expanduser()
