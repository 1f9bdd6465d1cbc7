"""Neovim recipe: keep nvim-treesitter on its master branch."""

from __future__ import annotations

import re

from ..config import DotpatchConfig
from ..errors import PatchError
from ..logging import get_logger
from ..models import PatchStatus, TextEdit
from ..patching.editor import Transform
from .base import Recipe

TREESITTER_SPEC = "nvim-treesitter/nvim-treesitter"

_BRANCH_RE = re.compile(r"""branch\s*=\s*['"]master['"]""")
_SPEC_RE = re.compile(r"""(['"])nvim-treesitter/nvim-treesitter\1\s*,""")

_LOGGER = get_logger("recipes.nvim")


def pin_treesitter_master(text: str) -> TextEdit:
    if TREESITTER_SPEC not in text:
        _LOGGER.info("No %s spec found; nothing to pin", TREESITTER_SPEC)
        return TextEdit(text=text, status=PatchStatus.UNCHANGED)
    if _BRANCH_RE.search(text):
        return TextEdit(text=text, status=PatchStatus.UNCHANGED)
    match = _SPEC_RE.search(text)
    if match is None:
        raise PatchError(f"Found {TREESITTER_SPEC} but not as a plugin spec entry followed by a comma")
    updated = text[: match.end()] + "\n      branch = 'master'," + text[match.end():]
    return TextEdit(text=updated, status=PatchStatus.UPDATED)


class TreesitterMasterRecipe(Recipe):
    name = "treesitter-master"
    target = ".config/nvim/init.lua"
    description = "Pin nvim-treesitter to branch = 'master' in the lazy.nvim spec."
    optional = True

    def transform(self, config: DotpatchConfig) -> Transform:
        return pin_treesitter_master


__all__ = ["TreesitterMasterRecipe", "pin_treesitter_master"]
