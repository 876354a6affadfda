## storyboarder/logging_config.py

"""
Logging setup for the storyboarder package.

Modules log through ``logging.getLogger(__name__)``; this only attaches
handlers to the ``storyboarder`` namespace logger.
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Union

DEFAULT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
VERBOSE_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(funcName)s | %(message)s"

ROOT_LOGGER_NAME = "storyboarder"


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(str(level).upper())
    return value if isinstance(value, int) else logging.INFO


def setup_logging(
    level: Union[int, str] = logging.INFO,
    log_file: Optional[Path] = None,
    verbose: bool = False,
    console_output: bool = True,
) -> logging.Logger:
    """
    Configure handlers for the storyboarder logger hierarchy.

    Args:
        level: Minimum level, as a logging constant or a name like "DEBUG"
        log_file: Optional path to a log file
        verbose: Use the verbose format with line numbers
        console_output: Also log to stdout
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    numeric_level = _coerce_level(level)
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    formatter = logging.Formatter(VERBOSE_FORMAT if verbose else DEFAULT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    if console_output:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    root_logger.debug("Logging initialized - level %s", logging.getLevelName(numeric_level))
    return root_logger
