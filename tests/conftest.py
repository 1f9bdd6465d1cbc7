from __future__ import annotations

import logging
import textwrap
from pathlib import Path
from typing import Iterator, Mapping

import pytest


class DotfilesBuilder:
    """Utility for writing a throwaway dotfiles home tree."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "dotfiles" / "home"
        self.root.mkdir(parents=True)

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries under the home directory."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(textwrap.dedent(content).lstrip("\n"), encoding="utf-8")

    def read(self, relative: str) -> str:
        return (self.root / relative).read_text(encoding="utf-8")


@pytest.fixture
def dotfiles(tmp_path: Path) -> DotfilesBuilder:
    """Provide a dotfiles home rooted at the pytest tmp_path."""
    return DotfilesBuilder(tmp_path)


@pytest.fixture(autouse=True)
def _clear_dotfiles_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for variable in (
        "DOTFILES_DIR",
        "DOTFILES_HOME_DIR",
        "WEZTERM_FONT_SIZE",
        "WEZTERM_WIDTH_RATIO",
        "WEZTERM_HEIGHT_RATIO",
        "WEZTERM_Y_OFFSET_RATIO",
    ):
        monkeypatch.delenv(variable, raising=False)


@pytest.fixture(autouse=True)
def _reset_dotpatch_logger() -> Iterator[None]:
    """Undo CLI logging setup so caplog sees records in every test."""
    logger = logging.getLogger("dotpatch")
    yield
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
