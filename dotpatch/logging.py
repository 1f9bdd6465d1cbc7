"""Console and file logging for dotpatch.

Console records use the ``[OK]``/``[WARN]``/``[ERR]`` tags the bootstrap
scripts print, so patch output blends in with the surrounding brew and stow
steps.
"""

from __future__ import annotations

import logging
import os
import sys
from pathlib import Path
from typing import IO, Dict, Optional

_LOGGER_NAME = "dotpatch"

_TAGS: Dict[int, str] = {
    logging.DEBUG: "DEBUG",
    logging.INFO: "OK",
    logging.WARNING: "WARN",
    logging.ERROR: "ERR",
    logging.CRITICAL: "ERR",
}

_COLOURS: Dict[str, str] = {
    "DEBUG": "1;34",
    "OK": "1;32",
    "WARN": "1;33",
    "ERR": "1;31",
}


class BootstrapFormatter(logging.Formatter):
    """Render ``[TAG] message`` with an optional ANSI colour on the tag."""

    def __init__(self, *, colour: bool = False) -> None:
        super().__init__("%(message)s")
        self.colour = colour

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        tag = _TAGS.get(record.levelno, record.levelname)
        if self.colour:
            return f"\033[{_COLOURS.get(tag, '1')}m[{tag}]\033[0m {message}"
        return f"[{tag}] {message}"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a module-scoped logger under the dotpatch hierarchy."""
    full_name = f"{_LOGGER_NAME}.{name}" if name else _LOGGER_NAME
    return logging.getLogger(full_name)


def use_colour(stream: IO[str], env: Optional[Dict[str, str]] = None) -> bool:
    """Colour only interactive terminals, and never when ``NO_COLOR`` is set."""
    environ = os.environ if env is None else env
    if environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def configure_logging(
    *,
    verbose: bool = False,
    log_file: Path | None = None,
    stream: IO[str] | None = None,
) -> logging.Logger:
    """Attach the console handler (and optionally a file sink) to the dotpatch logger."""
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Repeated main() calls in one process must not stack handlers.
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = stream if stream is not None else sys.stderr
    stream_handler = logging.StreamHandler(console)
    stream_handler.setLevel(level)
    stream_handler.setFormatter(BootstrapFormatter(colour=use_colour(console)))
    logger.addHandler(stream_handler)

    if log_file is not None:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        logger.addHandler(file_handler)

    return logger


__all__ = ["BootstrapFormatter", "configure_logging", "get_logger", "use_colour"]
