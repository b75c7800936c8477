"""CLI entry point for paceline."""

import logging
import os
import sys
import time


def main() -> int:
    args = sys.argv[1:]

    if "--help" in args or "-h" in args:
        _print_help()
        return 0

    if "--version" in args:
        from . import __version__

        print(f"paceline {__version__}")
        return 0

    _setup_logging("--debug" in args or bool(os.environ.get("PACELINE_DEBUG")))

    if args and args[0] == "install":
        from .install import run_install

        return run_install()

    color = "--no-color" not in args and not os.environ.get("NO_COLOR")
    try:
        sys.stdout.write(render_from_stdin(sys.stdin.read(), color=color))
        sys.stdout.flush()
    except KeyboardInterrupt:
        return 130
    return 0


def render_from_stdin(raw: str, color: bool = True) -> str:
    from .api import UsageFetcher
    from .cache import FileCacheStore
    from .config import cache_path, load_config
    from .git import read_git_status
    from .session import parse_input
    from .statusline import build_status_line, render_ansi

    config = load_config()
    session = parse_input(raw)
    usage = UsageFetcher(FileCacheStore(cache_path(config))).get_usage()
    git = read_git_status(session.current_dir) if config.get("show_git", True) else None

    line = build_status_line(session, usage, git, int(time.time()), config)
    return render_ansi(line, color=color)


def _setup_logging(debug: bool) -> None:
    if debug:
        logging.basicConfig(
            level=logging.DEBUG,
            stream=sys.stderr,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def _print_help() -> None:
    print(
        """paceline — Claude Code status line with usage pace

Usage:
  paceline               Read session JSON on stdin, print the status line
  paceline install       Register paceline in ~/.claude/settings.json

Options:
  --no-color       Plain text output (also honours NO_COLOR)
  --debug          Log fetch/cache/git details to stderr
  --help, -h       Show this help message
  --version        Show version

Output:
  🧠 O4.5 📈 ██░░░░░░42k ⚡️ ███▒░░░░2h30m ██▒░░░░░4d5h 💰 $1.23
  📁 ~/project 🌿 main↑2 ✏️ +15/-3

  ███ used  ▒▒▒ projected by window reset  ░░░ headroom
  green = sustainable, yellow = on pace to hit the limit, red = at the limit"""
    )


if __name__ == "__main__":
    sys.exit(main())
