"""Register paceline as Claude Code's status line command."""

import json
import shutil
from pathlib import Path

CLAUDE_DIR = Path.home() / ".claude"
SETTINGS_FILE = CLAUDE_DIR / "settings.json"

STATUS_LINE_SETTING = {"type": "command", "command": "paceline", "padding": 0}


class InstallError(Exception):
    pass


def install(settings_file: Path = SETTINGS_FILE) -> list[str]:
    """Point settings.json's statusLine at paceline.

    Returns the progress messages. Raises InstallError, leaving the file
    untouched, if the existing settings are not a JSON object.
    """
    messages: list[str] = []

    if not settings_file.parent.exists():
        settings_file.parent.mkdir(parents=True)
        messages.append(f"Created {settings_file.parent}")

    if settings_file.exists():
        try:
            settings = json.loads(settings_file.read_text())
        except json.JSONDecodeError as e:
            raise InstallError(f"{settings_file} is not valid JSON: {e}") from e
        if not isinstance(settings, dict):
            raise InstallError(f"{settings_file} does not contain a JSON object")

        backup = settings_file.with_name(settings_file.name + ".backup")
        shutil.copy2(settings_file, backup)
        settings["statusLine"] = dict(STATUS_LINE_SETTING)
        settings_file.write_text(json.dumps(settings, indent=2) + "\n")
        messages.append(f"Updated {settings_file} (backup at {backup})")
    else:
        settings_file.write_text(
            json.dumps({"statusLine": STATUS_LINE_SETTING}, indent=2) + "\n"
        )
        messages.append(f"Created {settings_file}")

    return messages


def run_install() -> int:
    print("paceline installer")
    print("=" * 18)
    print()
    try:
        for message in install():
            print(f"  ✓ {message}")
    except (InstallError, OSError) as e:
        print(f"  ✗ {e}")
        return 1
    print()
    print("The status line will appear next time you start Claude Code.")
    return 0
