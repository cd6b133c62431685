from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Optional


def default_log_path(log_dir: Optional[Path] = None, started_at: Optional[datetime] = None) -> str:
    """~/setup-YYYY-MM-DD-HHMMSS.log, one file per run."""

    directory = log_dir or Path.home()
    stamp = (started_at or datetime.now()).strftime("%Y-%m-%d-%H%M%S")
    return str(directory / f"setup-{stamp}.log")


def configure_logging(
    log_path: str,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure logging.

    Every stage decision and external command is recorded to the run log.

    Notes:
    - If the requested path cannot be opened we fall back to a file in the
      current working directory and report the path actually used.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(min(level, logging.DEBUG))

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_distro_setup_configured", False):
        return getattr(logger, "_distro_setup_log_path", log_path)

    chosen_path = log_path
    handlers: list[logging.Handler] = []

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path)
    except OSError:
        fallback = str(Path.cwd() / Path(log_path).name)
        file_handler = logging.FileHandler(fallback)
        chosen_path = fallback
    # Command output is kept in the file only.
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(fmt)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setLevel(level)
        console.setFormatter(fmt)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_distro_setup_configured", True)
    setattr(logger, "_distro_setup_log_path", chosen_path)

    logging.getLogger(__name__).info(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
