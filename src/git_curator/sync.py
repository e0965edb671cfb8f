"""Rolling pull: bring every configured repository up to date, one at a time.

Each repository gets exactly one report line, in configured order. Problems with
one repository are reported on its line and never stop the run; only an
unusable configuration or SSH key aborts before anything is pulled.
"""

import logging
import time
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from .config import ConfigError, SyncConfig
from .constants import APP_NAME, NO_MARKER, PULL_DELAY, RUN_MARKER, SOURCES
from .credentials import Credential, CredentialError, resolve_credential
from .locator import Absent, NotARepo, locate
from .ops import Advanced, Failed, PullOutcome, UpToDate, pull_repo

logger = logging.getLogger(APP_NAME)
console = Console(soft_wrap=True, emoji=False)

MSG_UP_TO_DATE = "Already up-to-date"
MSG_NOT_A_REPO = "Folder is not a local repository"
MSG_ABSENT = "The local repository does not exist"


def format_header(source: str) -> str:
    return f"Pull changes from [cyan]{escape(source)}[/cyan] remote repository"


def format_line(marker: str, name: str, message: str) -> str:
    """Builds a '<marker> Pulling <name>: <message>' report line (rich markup).

    Whitespace runs, newlines included, collapse to single spaces so that
    multi-line git errors still fit on the repository's one line.
    """
    line = f"{marker} Pulling [bold]{escape(name)}[/bold]: {message}"
    return " ".join(line.split())


def describe_outcome(outcome: PullOutcome) -> str:
    """Turns a pull outcome into the message part of its report line."""
    if isinstance(outcome, UpToDate):
        return MSG_UP_TO_DATE
    if isinstance(outcome, Advanced):
        return f"[green]{outcome.summary()}[/green]"
    return f"[red]{escape(outcome.detail)}[/red]"


def sync_one(storage_root: Path, name: str, credential: Credential) -> str:
    """Locates and, if possible, pulls a single repository.

    Args:
        storage_root (Path): The directory holding the local copies.
        name (str): The configured repository name.
        credential (Credential): The shared SSH identity.

    Returns:
        str: The report line for this repository.
    """
    state = locate(storage_root, name)

    if isinstance(state, Absent):
        logger.info(f"SKIPPED {name}: {state.path} does not exist")
        return format_line(NO_MARKER, name, MSG_ABSENT)
    if isinstance(state, NotARepo):
        logger.info(f"SKIPPED {name}: {state.path} is not a repository")
        return format_line(NO_MARKER, name, MSG_NOT_A_REPO)

    outcome = pull_repo(state.repo, credential)
    if isinstance(outcome, Advanced):
        logger.info(f"PULLED {name}: {outcome.from_commit} -> {outcome.to_commit}")
    elif isinstance(outcome, UpToDate):
        logger.info(f"UP-TO-DATE {name}")
    elif isinstance(outcome, Failed):
        logger.error(f"PULL ERROR {name}: {outcome.detail}")
    return format_line(RUN_MARKER, name, describe_outcome(outcome))


def rolling_pull(
    config_path: Path, source: str = SOURCES[0], delay: float = PULL_DELAY
) -> None:
    """Pulls every configured repository in order, printing one line for each.

    Args:
        config_path (Path): The TOML configuration file.
        source (str, optional): Remote source label shown in the header.
                                Defaults to 'github'.
        delay (float, optional): Seconds to pause after each report line.
                                 Defaults to PULL_DELAY.
    """
    try:
        conf = SyncConfig.load(config_path, source=source)
        credential = resolve_credential(conf.ssh_key_path)
    except (ConfigError, CredentialError) as e:
        logger.error(f"Rolling pull aborted: {e}")
        console.print(f"[bold red]Error:[/bold red] {escape(str(e))}")
        return

    console.print(format_header(conf.source))
    console.print()

    for name in conf.repository_names:
        try:
            line = sync_one(conf.storage_root, name, credential)
        except Exception as e:
            logger.exception(f"LOOP ERROR {name}")
            line = format_line(RUN_MARKER, name, f"[red]{escape(str(e))}[/red]")
        console.print(line, highlight=False)
        time.sleep(delay)
