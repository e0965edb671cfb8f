import os
from pathlib import Path

"""Global constants and path definitions for Git Curator.

This module defines the filesystem layout (adhering to XDG standards where applicable),
application identifiers, and the fixed strings of the rolling pull report.
"""

# --- Identity ---
APP_NAME = "git-curator"
"""str: The human-readable application name."""

PROJECT_URL = "https://github.com/yhyj/curator"
"""str: Where the project lives."""

DIST_NAME = "git-curator"
"""str: The distribution name used to look up installed package metadata."""

# --- Paths ---
_XDG_STATE = os.environ.get("XDG_STATE_HOME")
_BASE_STATE = Path(_XDG_STATE) if _XDG_STATE else Path.home() / ".local/state"

STATE_DIR = _BASE_STATE / "git-curator"
"""Path: The directory for runtime state data (logs)."""

LOG_FILE = STATE_DIR / "curator.log"
"""Path: The file path for the rotating log."""

MAX_LOG_SIZE = 1024 * 1024
"""int: Max bytes for the log file before rotation."""

# --- Configuration Paths ---
_XDG_CONFIG = os.environ.get("XDG_CONFIG_HOME")
_BASE_CONFIG = Path(_XDG_CONFIG) if _XDG_CONFIG else Path.home() / ".config"

CONFIG_DIR: Path = _BASE_CONFIG / "git-curator"
"""Path: The directory for user configuration files."""

CONFIG_FILE: Path = CONFIG_DIR / "config.toml"
"""Path: The main configuration file path."""

# --- Pull Report ---
PULL_DELAY = 0.1
"""float: Seconds to pause after each report line so the output scrolls evenly."""

RUN_MARKER = "[green]➜[/green]"
"""str: Line marker for repositories a pull was attempted on."""

NO_MARKER = "[red]✘[/red]"
"""str: Line marker for repositories that were skipped."""

SOURCES = ("github", "gitea")
"""tuple[str, ...]: Remote source labels accepted by the pull command."""

DEFAULT_REMOTE = "origin"
"""str: The remote used when the current branch has no upstream configured."""

SHORT_HASH_LEN = 6
"""int: Number of commit id characters shown in report lines."""
