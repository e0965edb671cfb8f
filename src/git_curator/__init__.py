"""Git Curator: keep a local mirror of a curated set of git repositories in sync.

This package provides the command-line interface and the rolling pull that
walks the configured repositories one at a time, fast-forwarding each local
copy from its remote and reporting one line per repository.
"""

from . import (
    cli,
    config,
    constants,
    credentials,
    git_wrapper,
    locator,
    ops,
    sync,
    version,
)

__all__ = [
    "cli",
    "config",
    "constants",
    "credentials",
    "git_wrapper",
    "locator",
    "ops",
    "sync",
    "version",
]
