"""paceline — Claude Code status line with usage-limit pace projection."""

__version__ = "0.1.0"
