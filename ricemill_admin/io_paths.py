from __future__ import annotations

"""Filesystem locations used by the console and the CLI.

Everything is resolved from the repository root, so the settings file and
the log directory are found regardless of the working directory.
"""

from pathlib import Path


# The package directory is one level below the project root
PROJECT_ROOT = Path(__file__).resolve().parents[1]

CONFIG_DIR = PROJECT_ROOT / "config"
LOGS_DIR = PROJECT_ROOT / "logs"

DEFAULT_SETTINGS_FILE = CONFIG_DIR / "settings.yaml"
