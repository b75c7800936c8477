"""OAuth token lookup for the usage API.

Reads Claude Code's OAuth credentials from:
  1. macOS Keychain ("Claude Code-credentials")
  2. ~/.claude/.credentials.json (Linux / older versions)

The credentials format (from Claude Code):
{
  "claudeAiOauth": {
    "accessToken": "sk-ant-oat01-...",
    "refreshToken": "...",
    "expiresAt": 1800000000000
  }
}

Some stores put the token at the top level instead, so a few field paths are
tried in order.
"""

import json
import logging
import platform
import subprocess
from pathlib import Path

logger = logging.getLogger(__name__)

KEYCHAIN_SERVICE = "Claude Code-credentials"
CLAUDE_CREDENTIALS_FILE = Path.home() / ".claude" / ".credentials.json"

TOKEN_FIELD_PATHS = (
    ("claudeAiOauth", "accessToken"),
    ("accessToken",),
    ("access_token",),
)


def _read_keychain_credentials() -> dict | None:
    """Read credentials from macOS Keychain (Claude Code 2.x+)."""
    if platform.system() != "Darwin":
        return None
    try:
        raw = subprocess.run(
            ["/usr/bin/security", "find-generic-password", "-s", KEYCHAIN_SERVICE, "-w"],
            capture_output=True, text=True, timeout=5,
        )
        if raw.returncode != 0 or not raw.stdout.strip():
            return None
        return json.loads(raw.stdout.strip())
    except (subprocess.TimeoutExpired, json.JSONDecodeError, OSError) as e:
        logger.debug("Keychain lookup failed: %s", e)
        return None


def _read_file_credentials() -> dict | None:
    """Read credentials from ~/.claude/.credentials.json (Linux / legacy)."""
    if not CLAUDE_CREDENTIALS_FILE.exists():
        return None
    try:
        return json.loads(CLAUDE_CREDENTIALS_FILE.read_text())
    except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
        logger.debug("Credentials file unreadable: %s", e)
        return None


def extract_token(blob) -> str | None:
    """Return the first non-empty token found along TOKEN_FIELD_PATHS."""
    for path in TOKEN_FIELD_PATHS:
        value = blob
        for key in path:
            if not isinstance(value, dict):
                value = None
                break
            value = value.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def resolve_token() -> str | None:
    """Get an OAuth token, trying Keychain first then the credentials file."""
    for reader in (_read_keychain_credentials, _read_file_credentials):
        token = extract_token(reader())
        if token:
            return token
    logger.debug("No OAuth token available")
    return None
