"""Base classes for recipe plugins."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Sequence

from ..config import DotpatchConfig
from ..patching.blocks import apply_managed_block, insert_managed_block, validate_block
from ..patching.editor import Transform


class Recipe(ABC):
    """A named patch against one file under the dotfiles home directory."""

    name: str = ""
    target: str = ""
    description: str = ""
    optional: bool = False

    def target_path(self, config: DotpatchConfig) -> Path:
        return config.dotfiles_home / self.target

    @abstractmethod
    def transform(self, config: DotpatchConfig) -> Transform:
        """Return the text transform applied to the target file."""


class ManagedBlockRecipe(Recipe):
    """Recipe backed by a single blank-line-terminated managed block."""

    marker: str = ""
    lines: Sequence[str] = ()
    # Seed the block once and leave later hand edits alone.
    insert_only: bool = False

    def block_lines(self) -> List[str]:
        return validate_block(self.marker, [self.marker, *self.lines])

    def transform(self, config: DotpatchConfig) -> Transform:
        block = self.block_lines()
        apply = insert_managed_block if self.insert_only else apply_managed_block
        return lambda text: apply(text, self.marker, block)


__all__ = ["ManagedBlockRecipe", "Recipe"]
