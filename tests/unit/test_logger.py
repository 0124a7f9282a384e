import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from iron_bin.services import logger as logger_service


@pytest.fixture(name="state_home")
def fixture_state_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path))
    yield tmp_path
    root = logging.getLogger()
    for handler in logger_service._installed:
        root.removeHandler(handler)
        handler.close()
    logger_service._installed.clear()


def test_configure_installs_file_and_console_handlers(state_home: Path) -> None:
    logger_service.configure(log_level="info")

    handlers = logging.getLogger().handlers
    assert len(handlers) == 2
    file_handler, console_handler = handlers
    assert Path(getattr(file_handler, "baseFilename")).name == "trash.log"
    assert Path(getattr(file_handler, "baseFilename")).is_relative_to(state_home)
    assert console_handler.level == logging.INFO


def test_reconfigure_replaces_handlers(state_home: Path) -> None:
    logger_service.configure()
    logger_service.configure(log_file=False)

    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert handlers[0].level == logging.WARNING
