"""zsh rc and plugin-list recipes."""

from __future__ import annotations

from ..config import DotpatchConfig
from ..patching.editor import Transform
from ..patching.lines import ensure_line, ensure_line_last
from .base import ManagedBlockRecipe, Recipe

ZSHRC = ".zshrc"
ZSH_PLUGINS = ".zsh_plugins.txt"


class LocalBinPathRecipe(Recipe):
    name = "local-bin-path"
    target = ZSHRC
    description = "Put ~/.local/bin on PATH unless the rc file already mentions it."

    line = 'export PATH="$HOME/.local/bin:$PATH"'

    def transform(self, config: DotpatchConfig) -> Transform:
        return lambda text: ensure_line(text, self.line, present_if="HOME/.local/bin")


class EzaAliasesRecipe(ManagedBlockRecipe):
    name = "eza-aliases"
    target = ZSHRC
    description = "eza listing aliases with --classify."

    marker = "# --- eza aliases (managed) ---"
    lines = (
        "alias z1='eza --classify'",
        "alias zz='eza -lah --classify'",
        "alias z2='eza --tree --level=2 --classify'",
    )


class ICloudAliasesRecipe(ManagedBlockRecipe):
    name = "icloud-aliases"
    target = ZSHRC
    description = "cd shortcuts into iCloud Drive; added once, then left to the user."

    insert_only = True
    marker = "# --- iCloud cd aliases (managed) ---"
    lines = (
        "alias icloud='cd ~/Library/Mobile\\ Documents/com~apple~CloudDocs'",
        "alias desktop='cd ~/Library/Mobile\\ Documents/com~apple~CloudDocs/Desktop'",
    )


class DirenvHookRecipe(ManagedBlockRecipe):
    name = "direnv-hook"
    target = ZSHRC
    description = "Load the direnv hook when direnv is installed."

    marker = "# --- direnv hook (managed) ---"
    lines = (
        "if command -v direnv >/dev/null 2>&1; then",
        '  eval "$(direnv hook zsh)"',
        "fi",
    )


class SyntaxHighlightingLastRecipe(Recipe):
    name = "syntax-highlighting-last"
    target = ZSH_PLUGINS
    description = "zsh-syntax-highlighting must load after every other antidote plugin."

    plugin = "zsh-users/zsh-syntax-highlighting"

    def transform(self, config: DotpatchConfig) -> Transform:
        return lambda text: ensure_line_last(text, self.plugin)


__all__ = [
    "DirenvHookRecipe",
    "EzaAliasesRecipe",
    "ICloudAliasesRecipe",
    "LocalBinPathRecipe",
    "SyntaxHighlightingLastRecipe",
]
