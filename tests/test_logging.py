"""Tests for the bootstrap-style console logging."""

from __future__ import annotations

import io
import logging
from pathlib import Path

from dotpatch.logging import BootstrapFormatter, configure_logging, get_logger, use_colour


class _Terminal(io.StringIO):
    def isatty(self) -> bool:
        return True


def _record(level: int, message: str) -> logging.LogRecord:
    return logging.LogRecord("dotpatch.test", level, __file__, 1, message, None, None)


def test_formatter_uses_bootstrap_tags() -> None:
    formatter = BootstrapFormatter()

    assert formatter.format(_record(logging.INFO, "eza-aliases created")) == "[OK] eza-aliases created"
    assert formatter.format(_record(logging.WARNING, "skipped")) == "[WARN] skipped"
    assert formatter.format(_record(logging.ERROR, "boom")) == "[ERR] boom"


def test_formatter_colours_the_tag_only() -> None:
    formatter = BootstrapFormatter(colour=True)

    assert formatter.format(_record(logging.INFO, "done")) == "\033[1;32m[OK]\033[0m done"


def test_use_colour_respects_tty_and_no_color() -> None:
    assert use_colour(_Terminal(), env={}) is True
    assert use_colour(_Terminal(), env={"NO_COLOR": "1"}) is False
    assert use_colour(io.StringIO(), env={}) is False


def test_configure_logging_writes_tagged_lines(tmp_path: Path) -> None:
    stream = io.StringIO()
    log_file = tmp_path / "dotpatch.log"

    configure_logging(log_file=log_file, stream=stream)
    get_logger("orchestrator").info("3 step(s) run")
    get_logger("orchestrator").debug("hidden without -v")

    assert stream.getvalue() == "[OK] 3 step(s) run\n"
    assert "INFO dotpatch.orchestrator: 3 step(s) run" in log_file.read_text(encoding="utf-8")


def test_configure_logging_does_not_stack_handlers() -> None:
    stream = io.StringIO()

    configure_logging(stream=stream)
    logger = configure_logging(verbose=True, stream=stream)
    get_logger("editor").debug("visible with -v")

    assert len(logger.handlers) == 1
    assert stream.getvalue() == "[DEBUG] visible with -v\n"
