from __future__ import annotations

import logging
from pathlib import Path

import pytest

from headsetkit.utils.logging_utils import setup_logging


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers[:]:
        if h not in handlers:
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


def test_setup_logging_console_only() -> None:
    setup_logging()
    root = logging.getLogger()
    assert root.level == logging.INFO
    assert len(root.handlers) == 1
    assert not any(isinstance(h, logging.FileHandler) for h in root.handlers)


def test_setup_logging_debug_with_file(tmp_path: Path) -> None:
    log_dir = tmp_path / "new" / "logs"
    setup_logging(debug_mode=True, output_dir=log_dir)

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    file_handlers = [h for h in root.handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 1
    assert Path(file_handlers[0].baseFilename) == (log_dir / "headsetkit.log").resolve()

    logging.getLogger("headsetkit.test").debug("hello")
    file_handlers[0].flush()
    assert "hello" in (log_dir / "headsetkit.log").read_text(encoding="utf-8")


def test_setup_logging_replaces_existing_handlers() -> None:
    setup_logging()
    setup_logging()
    assert len(logging.getLogger().handlers) == 1


def test_setup_logging_console_writes_to_stderr(capsys) -> None:
    setup_logging()
    logging.getLogger("headsetkit.test").info("to stderr")
    captured = capsys.readouterr()
    assert "to stderr" in captured.err
    assert captured.out == ""
