"""Tests for the Command Line Interface (CLI) module."""

import tomllib
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from cfgonce import cli
from cfgonce.project import ConfigType

BASE_ARGS = [
    "--qualifier",
    "org",
    "--organization",
    "cfgonce",
    "--application",
    "demo",
]


def test_find_prints_resolved_path(dirs, capsys: pytest.CaptureFixture) -> None:
    """Verifies that `find` prints the path of the selected file.

    Args:
        dirs: Isolated local and system directories.
        capsys (pytest.CaptureFixture): Pytest fixture for capturing stdout.
    """
    (dirs.system / "demo.yaml").write_text("id: 1\n")

    cli.main([*BASE_ARGS, "find"])

    captured = capsys.readouterr()
    assert captured.out.strip() == str(dirs.system / "demo.yaml")


def test_find_without_file_exits(dirs, capsys: pytest.CaptureFixture) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([*BASE_ARGS, "find"])

    assert excinfo.value.code == 1
    assert "No configuration file found" in capsys.readouterr().err


def test_paths_marks_selected_and_shadowed(
    dirs, capsys: pytest.CaptureFixture
) -> None:
    """Verifies that `paths` shows the winning candidate and shadowed ones."""
    (dirs.local / "demo.toml").write_text("")
    (dirs.system / "demo.toml").write_text("")

    cli.main([*BASE_ARGS, "paths"])

    out = capsys.readouterr().out
    assert "selected" in out
    assert "shadowed" in out
    assert "Search order for demo" in out


def test_init_creates_default_file(dirs, capsys: pytest.CaptureFixture) -> None:
    """Verifies that `init` writes an empty document in the default format."""
    cli.main([*BASE_ARGS, "--name", "settings", "init"])

    target = dirs.local / "settings.toml"
    assert target.exists()
    assert tomllib.loads(target.read_text()) == {}
    assert "Created" in capsys.readouterr().out

    cli.main([*BASE_ARGS, "--name", "settings", "init"])
    assert "already exists" in capsys.readouterr().out


def test_show_prints_content(dirs, capsys: pytest.CaptureFixture) -> None:
    (dirs.local / ".demo.json").write_text('{"answer": 42}')

    cli.main([*BASE_ARGS, "--format", "json", "show"])

    assert "answer" in capsys.readouterr().out


def test_show_without_file_reports_error(dirs, capsys: pytest.CaptureFixture) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.main([*BASE_ARGS, "show"])

    assert excinfo.value.code == 1
    assert "No configuration file found" in capsys.readouterr().err


def test_unsupported_default_format_reports_error(
    dirs, capsys: pytest.CaptureFixture
) -> None:
    with pytest.raises(SystemExit):
        cli.main([*BASE_ARGS, "--format", "ron", "paths"])

    assert "No codec registered for format 'ron'" in capsys.readouterr().err


def test_build_metadata_from_flags(dirs, mocker: MagicMock) -> None:
    """Verifies that every flag reaches the search policy.

    Args:
        mocker (MagicMock): Pytest fixture for mocking.
    """
    find = mocker.patch("cfgonce.cli.find_config", return_value=True)

    cli.main(
        [
            *BASE_ARGS,
            "--name",
            "a",
            "--name",
            "b",
            "--no-dot-prefix",
            "--sys-first",
            "--preference",
            "--extra-folder",
            "extra",
            "--extra-file",
            "demo.yml",
            "find",
        ]
    )

    metadata = find.call_args.args[0]
    assert metadata.config_name == ("a", "b")
    assert not metadata.config_option.allow_dot_prefix
    assert metadata.config_option.sys_override_local
    assert metadata.config_option.config_sys_type is ConfigType.PREFERENCE
    assert metadata.extra_folders == (Path("extra"),)
    assert metadata.extra_files == (Path("demo.yml"),)


def test_paths_reports_file_system_errors(
    dirs, mocker: MagicMock, capsys: pytest.CaptureFixture
) -> None:
    """Verifies that `paths` exits cleanly when an existence check is refused.

    Args:
        dirs: Isolated local and system directories.
        mocker (MagicMock): Pytest fixture for mocking.
        capsys (pytest.CaptureFixture): Pytest fixture for capturing output.
    """
    mocker.patch.object(Path, "is_file", side_effect=PermissionError("denied"))

    with pytest.raises(SystemExit) as excinfo:
        cli.main([*BASE_ARGS, "paths"])

    assert excinfo.value.code == 1
    assert "File system error (open)" in capsys.readouterr().err


def test_paths_selects_the_same_file_as_search(
    dirs, capsys: pytest.CaptureFixture
) -> None:
    """Verifies that `paths` marks the candidate `find` would return."""
    (dirs.system / ".demo.toml").write_text("")
    (dirs.system / "demo.toml").write_text("")

    cli.main([*BASE_ARGS, "paths"])

    out = capsys.readouterr().out
    assert out.count("selected") == 1
    assert out.count("shadowed") == 1
