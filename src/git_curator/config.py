import logging
import os
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .constants import APP_NAME, SOURCES

logger = logging.getLogger(APP_NAME)

DEFAULT_CONFIG = """\
# Git Curator Configuration

[ssh]
# Private key used to authenticate against the remote repositories
rsa_file = "~/.ssh/id_rsa"

[storage]
# Directory holding the local copies, one sub-directory per repository
path = "~/Documents/Repos"

[git]
# Repositories to keep in sync, pulled in this order
repos = []
"""
"""str: The template written by `git-curator config --create`."""


class ConfigError(Exception):
    """Raised when the configuration file is missing, malformed, or incomplete."""


def expand_path(value: str) -> Path:
    """Expands `~` and environment variables in a configured path."""
    return Path(os.path.expandvars(value)).expanduser()


def _lookup(data: dict[str, Any], dotted_key: str) -> Any:
    """Walks a dot-separated key (e.g. 'ssh.rsa_file') through parsed TOML data.

    Raises:
        ConfigError: If any part of the key is missing.
    """
    node: Any = data
    for part in dotted_key.split("."):
        if not isinstance(node, dict) or part not in node:
            raise ConfigError(f"Missing required key '{dotted_key}'")
        node = node[part]
    return node


@dataclass(frozen=True)
class SyncConfig:
    """Settings for a single rolling pull run.

    Attributes:
        ssh_key_path (Path): Private key used for remote authentication.
        storage_root (Path): Directory holding one local clone per repository.
        repository_names (tuple[str, ...]): Repositories to pull, in order.
        source (str): Remote source label, only used for display.
    """

    ssh_key_path: Path
    storage_root: Path
    repository_names: tuple[str, ...]
    source: str = SOURCES[0]

    @classmethod
    def load(cls, path: Path, source: str = SOURCES[0]) -> "SyncConfig":
        """Reads and validates the configuration file.

        Args:
            path (Path): Path to the TOML configuration file.
            source (str): The remote source label for this run.

        Returns:
            SyncConfig: The validated settings.

        Raises:
            ConfigError: If the file cannot be read or required keys are invalid.
        """
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except FileNotFoundError as e:
            raise ConfigError(f"Configuration file not found: {path}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Config syntax error in {path}: {e}") from e
        except OSError as e:
            raise ConfigError(f"Unable to read {path}: {e}") from e

        key_file = _lookup(data, "ssh.rsa_file")
        if not isinstance(key_file, str) or not key_file.strip():
            raise ConfigError("'ssh.rsa_file' must be a non-empty string")

        storage = _lookup(data, "storage.path")
        if not isinstance(storage, str) or not storage.strip():
            raise ConfigError("'storage.path' must be a non-empty string")

        repos = _lookup(data, "git.repos")
        if not isinstance(repos, list) or not all(isinstance(r, str) for r in repos):
            raise ConfigError("'git.repos' must be a list of repository names")

        logger.debug(f"Loaded {len(repos)} repositories from {path}")
        return cls(
            ssh_key_path=expand_path(key_file),
            storage_root=expand_path(storage),
            repository_names=tuple(repos),
            source=source,
        )


def write_default_config(path: Path) -> None:
    """Writes the default configuration template, creating parent directories.

    Args:
        path (Path): Destination of the configuration file.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(DEFAULT_CONFIG)
