import argparse
import logging
import os
import subprocess
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm
from rich.syntax import Syntax

from .config import write_default_config
from .constants import (
    APP_NAME,
    CONFIG_FILE,
    LOG_FILE,
    MAX_LOG_SIZE,
    SOURCES,
)
from .sync import rolling_pull
from .version import BuildInfo, program_info

logger = logging.getLogger(APP_NAME)
console = Console(soft_wrap=True, emoji=False)

CONFIG_NOT_FOUND = (
    "Configuration file not found (use --create to create a configuration file)"
)
FALLBACK_EDITORS = ("vim", "vi")


def setup_logging(verbose: bool = False, log_file: Path = LOG_FILE) -> None:
    """Configures the application logger.

    Records always go to a rotating log file; with `verbose` they are mirrored
    to stderr as well.

    Args:
        verbose (bool, optional): Also print debug records to stderr.
        log_file (Path, optional): Destination of the rotating log.
    """
    if logger.handlers:
        return

    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    formatter = logging.Formatter(
        "[%(asctime)s] %(levelname)s: %(message)s", "%Y-%m-%d %H:%M:%S"
    )

    if verbose:
        stream_handler = logging.StreamHandler(sys.stderr)
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=MAX_LOG_SIZE,
            backupCount=3,
        )
    except OSError as e:
        console.print(f"[yellow]Logging to file disabled: {escape(str(e))}[/yellow]")
        return
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)


def confirm(question: str) -> bool:
    """Asks a yes/no question, defaulting to no."""
    return Confirm.ask(question, default=False, console=console)


def launch_editor(path: Path) -> bool:
    """Opens a file in the user's editor and waits for it to exit.

    Uses $EDITOR when set, otherwise tries vim and then vi.

    Args:
        path (Path): The file to edit.

    Returns:
        bool: True if an editor ran and exited cleanly, False otherwise.
    """
    editor = os.environ.get("EDITOR")
    candidates = [editor] if editor else list(FALLBACK_EDITORS)
    last_error: Exception | None = None

    for candidate in candidates:
        try:
            subprocess.run([candidate, str(path)], check=True)
            return True
        except (OSError, subprocess.CalledProcessError) as e:
            logger.debug(f"Editor '{candidate}' failed: {e}")
            last_error = e

    console.print(
        f"[bold red]Open config file error:[/bold red] {escape(str(last_error))}"
    )
    return False


def create_config(path: Path) -> None:
    """Writes the default configuration, asking before replacing an existing file."""
    if path.exists():
        question = (
            f"Configuration file [cyan]{escape(str(path))}[/cyan] already exists, "
            "overwrite?"
        )
        if not confirm(question):
            return
        status = "file overwritten"
    else:
        status = "file created"

    try:
        write_default_config(path)
    except OSError as e:
        logger.error(f"Failed to write config {path}: {e}")
        console.print(f"[bold red]Write config error:[/bold red] {escape(str(e))}")
        sys.exit(1)

    console.print(f"Create [cyan]{escape(str(path))}[/cyan]: [green]{status}[/green]")


def open_config(path: Path) -> None:
    """Opens the configuration file in an editor."""
    if not path.exists():
        console.print(f"[red]{CONFIG_NOT_FOUND}[/red]")
        sys.exit(1)

    if not launch_editor(path):
        sys.exit(1)


def print_config(path: Path) -> None:
    """Prints the configuration file with TOML highlighting."""
    if not path.exists():
        console.print(f"[red]{CONFIG_NOT_FOUND}[/red]")
        sys.exit(1)

    try:
        text = path.read_text()
    except OSError as e:
        console.print(f"[bold red]Get config error:[/bold red] {escape(str(e))}")
        sys.exit(1)

    console.print(Syntax(text, "toml", background_color="default"))


class CuratorHelpFormatter(argparse.HelpFormatter):
    """Groups the subcommands under short headers in the help output."""

    def _format_action(self, action: argparse.Action) -> str:
        if isinstance(action, argparse._SubParsersAction):
            parts = []

            groups = {
                "Synchronization": ["pull"],
                "Configuration": ["config"],
                "General": ["version", "help"],
            }

            subactions = list(self._iter_indented_subactions(action))

            for group_name, commands in groups.items():
                group_actions = [a for a in subactions if a.dest in commands]
                if not group_actions:
                    continue

                parts.append(f"\n  {group_name}:\n")

                self._indent()
                for subaction in group_actions:
                    parts.append(self._format_action(subaction))
                self._dedent()

            return self._join_parts(parts)

        return super()._format_action(action)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description="Keep local copies of a curated set of git repositories in sync.",
        formatter_class=CuratorHelpFormatter,
    )

    # Global flags
    parser.add_argument(
        "--config",
        type=Path,
        default=CONFIG_FILE,
        help=f"Configuration file (default: {CONFIG_FILE})",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Print log records to stderr"
    )

    subparsers = parser.add_subparsers(dest="command")

    pull_parser = subparsers.add_parser(
        "pull", help="Pull changes for every configured repository"
    )
    pull_parser.add_argument(
        "--source",
        "-s",
        choices=SOURCES,
        default=SOURCES[0],
        help="Remote repository source (default: github)",
    )

    config_parser = subparsers.add_parser(
        "config", help="Create, edit, or print the configuration file"
    )
    config_group = config_parser.add_mutually_exclusive_group()
    config_group.add_argument(
        "--create", action="store_true", help="Write the default configuration"
    )
    config_group.add_argument(
        "--edit", action="store_true", help="Open the configuration in $EDITOR"
    )
    config_group.add_argument(
        "--print", action="store_true", help="Print the configuration"
    )

    version_parser = subparsers.add_parser("version", help="Show version information")
    version_parser.add_argument(
        "--only", action="store_true", help="Print only the version number"
    )

    subparsers.add_parser("help", help="Show this help message")
    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the Git Curator CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    config_path = args.config.expanduser()

    if args.command == "pull":
        rolling_pull(config_path, args.source)
        return
    elif args.command == "config":
        if args.create:
            create_config(config_path)
        elif args.edit:
            open_config(config_path)
        else:
            print_config(config_path)
        return
    elif args.command == "version":
        console.print(program_info(BuildInfo.load(), only=args.only), highlight=False)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
