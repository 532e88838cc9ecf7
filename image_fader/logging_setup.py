"""Logging configuration for the image fader CLI."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

DEFAULT_LOGGER_NAME = "image_fader"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Union[str, Path, None] = None,
    include_stream: bool = True,
) -> logging.Logger:
    """Route fader logs to stderr and, when given, ``log_file``.

    An unusable ``log_file`` does not stop the run; the problem is logged as a
    warning and only the stream handler is kept.
    """
    level = logging.DEBUG if verbose else logging.INFO
    formatter = logging.Formatter(LOG_FORMAT)
    handlers: list[logging.Handler] = []

    file_error: Optional[OSError] = None
    if log_file:
        log_path = Path(log_file)
        try:
            log_path.parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_path, encoding="utf-8"))
        except OSError as exc:
            file_error = exc

    if include_stream:
        handlers.append(logging.StreamHandler())
    if not handlers:
        handlers.append(logging.NullHandler())

    for handler in handlers:
        handler.setFormatter(formatter)
    logging.basicConfig(level=level, handlers=handlers, force=True)

    logger = logging.getLogger(DEFAULT_LOGGER_NAME)
    logger.setLevel(level)
    if file_error is not None:
        logger.warning("Logging to stderr only; cannot open log file %s: %s", log_file, file_error)
    return logger


__all__ = ["DEFAULT_LOGGER_NAME", "configure_logging"]
