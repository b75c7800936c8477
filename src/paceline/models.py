"""Data models for paceline."""

import json
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class WindowKind(Enum):
    FIVE_HOUR = 18000
    SEVEN_DAY = 604800

    @property
    def total_seconds(self) -> int:
        return self.value


class PaceLevel(Enum):
    OK = "ok"
    WARN = "warn"
    CRITICAL = "critical"


@dataclass(frozen=True)
class WindowUsage:
    utilization: float = 0.0
    resets_at: datetime | None = None

    def seconds_remaining(self, now: int) -> int | None:
        if self.resets_at is None:
            return None
        return int(self.resets_at.timestamp()) - now


@dataclass(frozen=True)
class UsageSnapshot:
    """One usage-limit payload, as fetched from the API or read from cache."""

    five_hour: WindowUsage = field(default_factory=WindowUsage)
    seven_day: WindowUsage = field(default_factory=WindowUsage)

    @classmethod
    def from_payload(cls, payload: str) -> "UsageSnapshot":
        """Parse a raw usage response body.

        Raises ValueError if the body is not a JSON object carrying a
        ``five_hour`` window.
        """
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            raise ValueError(f"Usage payload is not JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValueError("Usage payload is not a JSON object")
        five_hour = data.get("five_hour")
        if five_hour is None or five_hour is False:
            raise ValueError("Usage payload has no five_hour window")
        return cls(
            five_hour=_parse_window(five_hour),
            seven_day=_parse_window(data.get("seven_day")),
        )

    def window(self, kind: WindowKind) -> WindowUsage:
        if kind is WindowKind.FIVE_HOUR:
            return self.five_hour
        return self.seven_day


@dataclass(frozen=True)
class CacheRecord:
    captured_at: int
    payload: str


@dataclass(frozen=True)
class WindowState:
    current_utilization: int
    seconds_remaining: int | None
    total_window_seconds: int
    projected_utilization: int
    pace: PaceLevel


def _parse_window(data) -> WindowUsage:
    if not isinstance(data, dict):
        return WindowUsage()
    return WindowUsage(
        utilization=finite_number(data.get("utilization")) or 0.0,
        resets_at=parse_reset_time(data.get("resets_at")),
    )


def finite_number(value) -> float | None:
    """Return value as a float, or None for non-numbers, NaN and infinities."""
    if not isinstance(value, (int, float)) or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def parse_reset_time(value) -> datetime | None:
    """Parse a ``resets_at`` timestamp as UTC, ignoring fractional seconds."""
    if not value or not isinstance(value, str):
        return None
    # "2025-01-01T12:00:00.123456+00:00" -> "2025-01-01T12:00:00"
    trimmed = value.split(".", 1)[0][:19]
    try:
        parsed = datetime.strptime(trimmed, "%Y-%m-%dT%H:%M:%S")
    except ValueError:
        return None
    return parsed.replace(tzinfo=timezone.utc)


def format_remaining(seconds: int) -> str:
    if seconds < 0:
        return "0m"
    days = seconds // 86400
    hours = (seconds % 86400) // 3600
    minutes = (seconds % 3600) // 60
    if days > 0:
        return f"{days}d{hours}h"
    if hours > 0:
        return f"{hours}h{minutes}m"
    return f"{minutes}m"
