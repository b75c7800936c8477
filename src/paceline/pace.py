"""End-of-window projection and pace classification."""

from .models import PaceLevel, UsageSnapshot, WindowKind, WindowState


def project(
    utilization_pct: int, seconds_remaining: int | None, total_window_seconds: int
) -> int:
    """Project utilization at window reset, assuming a constant rate since the
    window opened. Integer floor, capped at 100."""
    if seconds_remaining is None or seconds_remaining <= 0:
        return utilization_pct

    elapsed = total_window_seconds - seconds_remaining
    if elapsed <= 0:
        return utilization_pct

    return min(100, utilization_pct * total_window_seconds // elapsed)


def classify(utilization_pct: int, projected_pct: int) -> PaceLevel:
    if utilization_pct >= 100:
        return PaceLevel.CRITICAL
    if projected_pct >= 100:
        return PaceLevel.WARN
    return PaceLevel.OK


def window_state(snapshot: UsageSnapshot, kind: WindowKind, now: int) -> WindowState:
    window = snapshot.window(kind)
    current = int(window.utilization)
    remaining = window.seconds_remaining(now)
    projected = project(current, remaining, kind.total_seconds)
    return WindowState(
        current_utilization=current,
        seconds_remaining=remaining,
        total_window_seconds=kind.total_seconds,
        projected_utilization=projected,
        pace=classify(current, projected),
    )
