"""Shared fixtures: an isolated working directory and system directory."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest

from cfgonce.constants import APP_NAME, LOCAL_DIR_ENV


@dataclass
class Dirs:
    local: Path
    system: Path


@pytest.fixture
def dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch, mocker: MagicMock) -> Dirs:
    """Points the local search at a temporary cwd and the system one at a sibling.

    Args:
        tmp_path (Path): Pytest fixture for a temporary directory.
        monkeypatch (pytest.MonkeyPatch): Pytest fixture for patching the environment.
        mocker (MagicMock): Pytest fixture for mocking.
    """
    local = tmp_path / "local"
    system = tmp_path / "system"
    local.mkdir()
    system.mkdir()

    monkeypatch.delenv(LOCAL_DIR_ENV, raising=False)
    monkeypatch.chdir(local)
    mocker.patch("cfgonce.path.system_dir", return_value=system)

    return Dirs(local=Path.cwd(), system=system)


@pytest.fixture(autouse=True)
def reset_logger() -> Any:
    """Ensures handlers installed by the CLI do not leak between tests."""
    logger = logging.getLogger(APP_NAME)
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
