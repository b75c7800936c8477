"""Block-glyph progress bars."""

from enum import Enum


class Glyph(str, Enum):
    FILLED = "█"
    DITHERED = "▒"
    EMPTY = "░"


def render(current_pct: int, projected_pct: int, width: int) -> str:
    """Bar with solid current usage, dithered projected usage, then empty.

    render(30, 60, 10) -> "███▒▒▒░░░░"
    """
    width = max(0, width)
    current = max(0, min(100, current_pct))
    projected = max(current, min(100, projected_pct))

    filled = max(0, current * width // 100)
    projected_filled = projected * width // 100
    dithered = max(0, projected_filled - filled)
    # EMPTY absorbs any rounding slack so the total is always `width`
    empty = max(0, width - filled - dithered)

    return (
        Glyph.FILLED.value * filled
        + Glyph.DITHERED.value * dithered
        + Glyph.EMPTY.value * empty
    )


def render_simple(pct: int, width: int) -> str:
    return render(pct, pct, width)
