"""Assembles the status line from session, usage and git state."""

import io

from rich.console import Console
from rich.text import Text

from .bar import render, render_simple
from .config import DEFAULT_CONFIG
from .git import GitStatus
from .models import PaceLevel, UsageSnapshot, WindowKind, format_remaining
from .pace import window_state
from .session import SessionInfo, abbreviate_model, display_dir

PACE_STYLES = {
    PaceLevel.OK: "dim green",
    PaceLevel.WARN: "dim yellow",
    PaceLevel.CRITICAL: "dim red",
}


def context_style(tokens: int, config: dict) -> str:
    if tokens > config["context_critical_tokens"]:
        return "dim red"
    if tokens > config["context_warn_tokens"]:
        return "dim yellow"
    return "dim green"


def _append_usage(text: Text, usage: UsageSnapshot, now: int, width: int) -> None:
    text.append(" ⚡️")
    for kind in (WindowKind.FIVE_HOUR, WindowKind.SEVEN_DAY):
        state = window_state(usage, kind, now)
        text.append(" ")
        text.append(
            render(state.current_utilization, state.projected_utilization, width),
            style=PACE_STYLES[state.pace],
        )
        if state.seconds_remaining is not None:
            text.append(format_remaining(state.seconds_remaining))


def _append_git(text: Text, git: GitStatus) -> None:
    remote = ""
    if git.ahead > 0:
        remote += f"↑{git.ahead}"
    if git.behind > 0:
        remote += f"↓{git.behind}"
    text.append(" 🌿 ")
    text.append(f"{git.branch}{remote}", style="dim green")

    if git.lines_added > 0 or git.lines_removed > 0:
        text.append(" ✏️ ")
        text.append(f"+{git.lines_added}", style="dim green")
        text.append("/")
        text.append(f"-{git.lines_removed}", style="dim red")


def build_status_line(
    session: SessionInfo,
    usage: UsageSnapshot | None,
    git: GitStatus | None,
    now: int,
    config: dict | None = None,
) -> Text:
    config = {**DEFAULT_CONFIG, **(config or {})}
    width = int(config["bar_width"])

    text = Text()
    text.append("🧠 ")
    text.append(abbreviate_model(session.model_name), style="dim cyan")

    text.append(" 📈 ")
    text.append(
        render_simple(session.context_pct, width),
        style=context_style(session.context_tokens, config),
    )
    text.append(f"{session.context_tokens // 1000}k")

    if usage is not None:
        _append_usage(text, usage, now, width)

    if session.total_cost_usd:
        text.append(" 💰 ")
        text.append(f"${session.total_cost_usd:.2f}", style="dim green")

    text.append("\n📁 ")
    text.append(
        display_dir(session.current_dir, int(config["dir_max_length"])),
        style="dim blue",
    )

    if git is not None:
        _append_git(text, git)

    return text


def render_ansi(text: Text, color: bool = True) -> str:
    """Render to a string with standard ANSI SGR codes (or none)."""
    buffer = io.StringIO()
    console = Console(
        file=buffer,
        force_terminal=color,
        no_color=not color,
        color_system="standard" if color else None,
        soft_wrap=True,
        highlight=False,
        emoji=False,
        markup=False,
        width=10_000,
    )
    console.print(text, end="")
    return buffer.getvalue()
