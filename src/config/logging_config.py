# src/config/logging_config.py

"""Per-run timestamped logging configuration for vendor_market.

Each application launch creates a dedicated log file inside ``logs/``,
named with the launch timestamp (e.g. ``logs/run_20261019_153045.log``).
All ``vendor_market.*`` loggers route through this file handler so that
the session, catalog and form modules write into the same per-run log.

The console only receives ``Settings.CONSOLE_LOG_LEVEL`` and above so the
Textual screen is not scribbled over. The HTTP client underneath the
backend SDK logs every request at INFO; it is capped at WARNING.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path

from src.config.settings import Settings

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | "
    "%(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that would otherwise flood the run log
_NOISY_LOGGERS = ("httpx", "httpcore", "hpack")


def _file_handler(log_file: Path) -> logging.Handler:
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(
        logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT)
    )
    return handler


def _console_handler() -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    level = logging.getLevelName(Settings.CONSOLE_LOG_LEVEL.upper())
    handler.setLevel(level if isinstance(level, int) else logging.WARNING)
    handler.setFormatter(
        logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT)
    )
    return handler


def setup_logging() -> Path:
    """Initialise the root ``vendor_market`` logger for the current run.

    Returns:
        The :class:`~pathlib.Path` to the log file created for this run.
    """
    logs_dir: Path = Settings.LOGS_DIR
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{timestamp}.log"

    project_logger = logging.getLogger("vendor_market")
    project_logger.setLevel(logging.DEBUG)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    # Repeated calls (tests, --list after TUI) keep the first handlers
    if project_logger.handlers:
        return log_file

    project_logger.addHandler(_file_handler(log_file))
    project_logger.addHandler(_console_handler())
    project_logger.info("Logging initialised, log file: %s", log_file)

    return log_file
