"""Per-run timestamped logging configuration for craft_pricing.

Each process launch creates a dedicated log file inside ``LOGS_DIR``,
named with the launch timestamp (e.g. ``logs/run_20261019_053000.log``).
All ``craft_pricing.*`` loggers route through this file handler so the
scraper, ledger, scheduler and HTTP layer land in the same per-run log.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from craft_pricing.core.config import settings

_DETAILED_FORMAT = (
    "%(asctime)s | %(levelname)-8s | %(name)s | %(module)s:%(funcName)s:%(lineno)d | "
    "%(message)s"
)

_CONSOLE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

ROOT_LOGGER_NAME = "craft_pricing"


def setup_logging(logs_dir: Optional[Path] = None, level: Optional[str] = None) -> Path:
    """Initialise the root ``craft_pricing`` logger for the current run.

    Returns:
        The :class:`~pathlib.Path` to the log file created for this run.
    """
    logs_dir = Path(logs_dir or settings.LOGS_DIR)
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_file = logs_dir / f"run_{timestamp}.log"

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(logging.DEBUG)

    # Repeated calls (reloads, tests) must not stack handlers
    if root_logger.handlers:
        return log_file

    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(_DETAILED_FORMAT, datefmt=_DATE_FORMAT))

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO))
    console_handler.setFormatter(logging.Formatter(_CONSOLE_FORMAT, datefmt=_DATE_FORMAT))

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    root_logger.info("Logging initialised - log file: %s", log_file)
    return log_file
