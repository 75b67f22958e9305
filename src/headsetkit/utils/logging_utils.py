from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(debug_mode: bool = False, output_dir: str | Path | None = None) -> None:
    """
    Configure the root logger: stderr always, plus `headsetkit.log` in `output_dir` if given.

    Existing root handlers are removed first so repeated calls do not duplicate output.
    """
    log_level = logging.DEBUG if debug_mode else logging.INFO

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root_logger.addHandler(console_handler)

    if output_dir is not None:
        log_dir = Path(output_dir)
        log_dir.mkdir(exist_ok=True, parents=True)
        file_handler = logging.FileHandler(log_dir / "headsetkit.log", encoding="utf-8")
        file_handler.setLevel(log_level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root_logger.addHandler(file_handler)

    root_logger.setLevel(log_level)
