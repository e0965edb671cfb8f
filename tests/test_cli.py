"""Tests for the Command Line Interface (CLI) module."""

import logging
import subprocess
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from git_curator import cli
from git_curator.config import DEFAULT_CONFIG

REAL_SETUP_LOGGING = cli.setup_logging


@pytest.fixture(autouse=True)
def no_log_setup(mocker: MagicMock) -> MagicMock:
    """Keeps CLI tests from attaching handlers that write to the real state dir."""
    return mocker.patch("git_curator.cli.setup_logging")


def test_pull_command_runs_rolling_pull(tmp_path: Path, mocker: MagicMock) -> None:
    mock_pull = mocker.patch("git_curator.cli.rolling_pull")
    config = tmp_path / "config.toml"

    cli.main(["--config", str(config), "pull", "--source", "gitea"])

    mock_pull.assert_called_once_with(config, "gitea")


def test_pull_defaults_to_github(tmp_path: Path, mocker: MagicMock) -> None:
    mock_pull = mocker.patch("git_curator.cli.rolling_pull")

    cli.main(["--config", str(tmp_path / "c.toml"), "pull"])

    assert mock_pull.call_args.args[1] == "github"


def test_pull_rejects_unknown_source(mocker: MagicMock) -> None:
    mocker.patch("git_curator.cli.rolling_pull")

    with pytest.raises(SystemExit):
        cli.main(["pull", "--source", "gitlab"])


def test_verbose_flag_reaches_logging(
    tmp_path: Path, mocker: MagicMock, no_log_setup: MagicMock
) -> None:
    mocker.patch("git_curator.cli.rolling_pull")

    cli.main(["--verbose", "--config", str(tmp_path / "c.toml"), "pull"])

    no_log_setup.assert_called_once_with(True)


def test_create_config_new_file(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    path = tmp_path / "conf" / "config.toml"

    cli.main(["--config", str(path), "config", "--create"])

    assert path.read_text() == DEFAULT_CONFIG
    assert "file created" in capsys.readouterr().out


def test_create_config_overwrite_confirmed(
    tmp_path: Path, capsys: pytest.CaptureFixture, mocker: MagicMock
) -> None:
    path = tmp_path / "config.toml"
    path.write_text("old = true\n")
    mock_confirm = mocker.patch("git_curator.cli.confirm", return_value=True)

    cli.create_config(path)

    mock_confirm.assert_called_once()
    assert path.read_text() == DEFAULT_CONFIG
    assert "file overwritten" in capsys.readouterr().out


def test_create_config_overwrite_declined(tmp_path: Path, mocker: MagicMock) -> None:
    """Verifies that declining the prompt leaves the existing file untouched."""
    path = tmp_path / "config.toml"
    path.write_text("old = true\n")
    mocker.patch("git_curator.cli.confirm", return_value=False)

    cli.create_config(path)

    assert path.read_text() == "old = true\n"


def test_confirm_defaults_to_no(mocker: MagicMock) -> None:
    mock_ask = mocker.patch("git_curator.cli.Confirm.ask", return_value=False)

    assert cli.confirm("Overwrite?") is False
    assert mock_ask.call_args.kwargs["default"] is False


def test_print_config(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    path = tmp_path / "config.toml"
    path.write_text('[storage]\npath = "/data/repos"\n')

    cli.main(["--config", str(path), "config", "--print"])

    out = capsys.readouterr().out
    assert "[storage]" in out
    assert "/data/repos" in out


def test_print_config_missing(tmp_path: Path, capsys: pytest.CaptureFixture) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.print_config(tmp_path / "config.toml")

    assert exc.value.code == 1
    assert "use --create to create a configuration file" in capsys.readouterr().out


def test_edit_config_uses_editor_env(
    tmp_path: Path, mocker: MagicMock, monkeypatch: pytest.MonkeyPatch
) -> None:
    path = tmp_path / "config.toml"
    path.write_text(DEFAULT_CONFIG)
    monkeypatch.setenv("EDITOR", "nano")
    mock_run = mocker.patch("git_curator.cli.subprocess.run")

    cli.main(["--config", str(path), "config", "--edit"])

    mock_run.assert_called_once_with(["nano", str(path)], check=True)


def test_launch_editor_falls_back_to_vi(
    tmp_path: Path, mocker: MagicMock, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Verifies the vim -> vi fallback when $EDITOR is unset."""
    monkeypatch.delenv("EDITOR", raising=False)
    mock_run = mocker.patch(
        "git_curator.cli.subprocess.run", side_effect=[FileNotFoundError("vim"), None]
    )

    assert cli.launch_editor(tmp_path / "config.toml") is True
    assert [c.args[0][0] for c in mock_run.call_args_list] == ["vim", "vi"]


def test_launch_editor_reports_failure(
    tmp_path: Path,
    capsys: pytest.CaptureFixture,
    mocker: MagicMock,
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    monkeypatch.setenv("EDITOR", "my-editor")
    mocker.patch(
        "git_curator.cli.subprocess.run",
        side_effect=subprocess.CalledProcessError(1, ["my-editor"]),
    )

    assert cli.launch_editor(tmp_path / "config.toml") is False
    assert "Open config file error" in capsys.readouterr().out


def test_version_command(
    capsys: pytest.CaptureFixture, mocker: MagicMock
) -> None:
    mocker.patch("git_curator.version.metadata.version", return_value="1.2.3")

    cli.main(["version", "--only"])

    assert capsys.readouterr().out.strip() == "1.2.3"


def test_no_command_prints_help(capsys: pytest.CaptureFixture) -> None:
    cli.main([])

    out = capsys.readouterr().out
    assert "Synchronization:" in out
    assert "pull" in out


def test_setup_logging_writes_rotating_file(tmp_path: Path) -> None:
    """Verifies that records land in the log file with the expected format."""
    logger = logging.getLogger("git-curator")
    saved_handlers, saved_level = list(logger.handlers), logger.level
    logger.handlers.clear()
    log_file = tmp_path / "state" / "curator.log"

    try:
        REAL_SETUP_LOGGING(verbose=False, log_file=log_file)
        logger.info("PULLED proj: abc -> def")
        for handler in logger.handlers:
            handler.flush()

        assert log_file.exists()
        assert "INFO: PULLED proj: abc -> def" in log_file.read_text()
        assert not any(
            type(h) is logging.StreamHandler for h in logger.handlers
        )
    finally:
        for handler in logger.handlers:
            handler.close()
        logger.handlers[:] = saved_handlers
        logger.setLevel(saved_level)
