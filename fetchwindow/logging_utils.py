# ==============================================
# Logging Setup
# ==============================================
#
# PURPOSE:
#   Route every `fetchwindow.*` logger to a rotating file under the
#   configured log directory, at the configured level.
#
#   - setup_logging(log_dir, level="INFO", verbose=False) -> Path
#       level accepts a name ("DEBUG", "warning") or a logging constant.
#       verbose also echoes WARNING and above to stderr.
#       Calling it again replaces the handlers it installed earlier,
#       so the CLI can be re-run in one process (tests) without
#       duplicate lines.
#
# Library modules only ever call logging.getLogger(__name__).
#
# ==============================================

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Union

LOGGER_NAME = "fetchwindow"
LOG_FILE = "fetchwindow.log"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

_HANDLER_TAG = "_fetchwindow_handler"


def resolve_level(level: Union[str, int]) -> int:
    """
    Turn a level name or number into a logging constant.

    Raises:
        ValueError: for an unknown level name
    """
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(level.strip().upper())
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def setup_logging(
    log_dir: Union[str, Path] = "logs",
    level: Union[str, int] = "INFO",
    verbose: bool = False,
) -> Path:
    """
    Configure the package logger.

    Returns:
        Path of the active log file
    """
    log_path = Path(log_dir) / LOG_FILE
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(resolve_level(level))

    for handler in [h for h in logger.handlers if getattr(h, _HANDLER_TAG, False)]:
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)
    handlers = [RotatingFileHandler(log_path, maxBytes=1_000_000, backupCount=5, encoding="utf-8")]
    if verbose:
        stderr = logging.StreamHandler()
        stderr.setLevel(logging.WARNING)
        handlers.append(stderr)

    for handler in handlers:
        handler.setFormatter(formatter)
        setattr(handler, _HANDLER_TAG, True)
        logger.addHandler(handler)

    return log_path
