"""Session fields read from the JSON document Claude Code pipes to stdin."""

import json
import logging
import re
from dataclasses import dataclass
from pathlib import Path

from .models import finite_number

logger = logging.getLogger(__name__)


@dataclass
class SessionInfo:
    model_name: str = ""
    current_dir: str = ""
    project_dir: str = ""
    total_cost_usd: float | None = None
    context_tokens: int = 0
    context_window_size: int | None = None

    @classmethod
    def from_input(cls, data: dict) -> "SessionInfo":
        model = _section(data, "model")
        workspace = _section(data, "workspace")
        cost = _section(data, "cost")
        context = _section(data, "context_window")

        usage = context.get("current_usage")
        tokens = 0
        if isinstance(usage, dict):
            tokens = sum(
                _as_int(usage.get(key))
                for key in (
                    "input_tokens",
                    "cache_creation_input_tokens",
                    "cache_read_input_tokens",
                )
            )

        total_cost = cost.get("total_cost_usd")
        window = finite_number(context.get("context_window_size"))

        return cls(
            model_name=str(model.get("display_name") or ""),
            current_dir=str(workspace.get("current_dir") or ""),
            project_dir=str(workspace.get("project_dir") or ""),
            total_cost_usd=finite_number(total_cost),
            context_tokens=tokens,
            context_window_size=None if window is None else int(window),
        )

    @property
    def context_pct(self) -> int:
        if not self.context_window_size or self.context_window_size <= 0:
            return 0
        return self.context_tokens * 100 // self.context_window_size


def parse_input(raw: str) -> SessionInfo:
    """Parse stdin. Anything unparseable yields an empty SessionInfo."""
    try:
        data = json.loads(raw) if raw.strip() else {}
    except json.JSONDecodeError as e:
        logger.debug("Ignoring malformed session input: %s", e)
        data = {}
    if not isinstance(data, dict):
        data = {}
    return SessionInfo.from_input(data)


def abbreviate_model(name: str) -> str:
    """Shorten a display name, e.g. "Opus 4.5" -> "O4.5".

    Names without a version number are returned as-is.
    """
    letters = re.sub(r"[^a-zA-Z]", "", name)
    version = re.search(r"\d+(?:\.\d+)?", name)
    if letters and version:
        return letters[0].upper() + version.group()
    return name


def display_dir(path: str, max_length: int = 30) -> str:
    home = str(Path.home())
    if path == home or path.startswith(home + "/"):
        path = "~" + path[len(home):]
    if len(path) > max_length:
        keep = max(0, max_length - 3)
        path = "..." + (path[-keep:] if keep else "")
    return path


def _section(data: dict, key: str) -> dict:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _as_int(value) -> int:
    number = finite_number(value)
    return 0 if number is None else int(number)
