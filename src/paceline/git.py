"""Git branch, upstream distance and uncommitted line counts."""

import logging
import subprocess
from dataclasses import dataclass

logger = logging.getLogger(__name__)

GIT_TIMEOUT = 2


@dataclass
class GitStatus:
    branch: str
    ahead: int = 0
    behind: int = 0
    lines_added: int = 0
    lines_removed: int = 0


def run_git(args: list[str], cwd: str) -> str:
    """Run a git command and return its stdout, or "" on any failure."""
    try:
        result = subprocess.run(
            ["git", "-C", cwd, *args],
            capture_output=True,
            text=True,
            timeout=GIT_TIMEOUT,
        )
    except (subprocess.TimeoutExpired, OSError) as e:
        logger.debug("git %s failed: %s", " ".join(args), e)
        return ""
    return result.stdout.strip() if result.returncode == 0 else ""


def read_git_status(cwd: str) -> GitStatus | None:
    if not cwd or not run_git(["rev-parse", "--git-dir"], cwd):
        return None

    branch = run_git(["symbolic-ref", "--short", "HEAD"], cwd) or run_git(
        ["rev-parse", "--short", "HEAD"], cwd
    )
    if not branch:
        return None

    added, removed = _numstat(run_git(["diff", "--numstat"], cwd))
    staged_added, staged_removed = _numstat(run_git(["diff", "--cached", "--numstat"], cwd))

    return GitStatus(
        branch=branch,
        ahead=_count(run_git(["rev-list", "--count", "@{upstream}..HEAD"], cwd)),
        behind=_count(run_git(["rev-list", "--count", "HEAD..@{upstream}"], cwd)),
        lines_added=added + staged_added,
        lines_removed=removed + staged_removed,
    )


def _numstat(output: str) -> tuple[int, int]:
    added = removed = 0
    for line in output.splitlines():
        parts = line.split("\t")
        if len(parts) < 3:
            continue
        # binary files report "-" for both counts
        added += _count(parts[0])
        removed += _count(parts[1])
    return added, removed


def _count(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        return 0
