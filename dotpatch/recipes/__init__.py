"""Recipe implementations and discovery utilities."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Iterable, List, Sequence, Set

from .base import ManagedBlockRecipe, Recipe
from .nvim import TreesitterMasterRecipe
from .wezterm import WeztermLayoutRecipe
from .zsh import (
    DirenvHookRecipe,
    EzaAliasesRecipe,
    ICloudAliasesRecipe,
    LocalBinPathRecipe,
    SyntaxHighlightingLastRecipe,
)

_ENTRY_POINT_GROUP = "dotpatch.recipes"

# Order matters: recipes run in this sequence, same as the bootstrap scripts.
_BUILTIN_FACTORIES: dict[str, Callable[[], Recipe]] = {
    "local-bin-path": LocalBinPathRecipe,
    "eza-aliases": EzaAliasesRecipe,
    "icloud-aliases": ICloudAliasesRecipe,
    "direnv-hook": DirenvHookRecipe,
    "syntax-highlighting-last": SyntaxHighlightingLastRecipe,
    "wezterm-layout": WeztermLayoutRecipe,
    "treesitter-master": TreesitterMasterRecipe,
}


def discover_recipes(enabled: Sequence[str] | None = None) -> List[Recipe]:
    """Return instantiated recipes, honoring optional enabled names."""

    enabled_set: Set[str] | None = None
    if enabled is not None:
        enabled_set = {name.lower() for name in enabled}

    recipes: List[Recipe] = []
    seen: Set[str] = set()

    def _add(name: str, factory: Callable[[], Recipe]) -> None:
        key = name.lower()
        if enabled_set is not None and key not in enabled_set:
            return
        if key in seen:
            return
        instance = factory()
        if not isinstance(instance, Recipe):
            raise TypeError(f"Recipe factory for '{name}' did not return a Recipe instance")
        recipes.append(instance)
        seen.add(key)

    for name, factory in _BUILTIN_FACTORIES.items():
        _add(name, factory)

    for entry in _iter_entry_points():
        name = entry.name
        try:
            loaded = entry.load()
        except Exception as exc:  # pragma: no cover - defensive guard
            raise RuntimeError(f"Failed to load recipe entry point '{name}': {exc}") from exc

        def _factory(obj: object = loaded) -> Recipe:
            return _coerce_recipe(obj)

        _add(name, _factory)

    if enabled_set is not None:
        missing = enabled_set - seen
        if missing:
            raise ValueError(f"Unknown recipes requested: {', '.join(sorted(missing))}")

    return recipes


def builtin_recipe_names() -> List[str]:
    return list(_BUILTIN_FACTORIES)


def _coerce_recipe(obj: object) -> Recipe:
    if isinstance(obj, Recipe):
        return obj
    if isinstance(obj, type) and issubclass(obj, Recipe):
        return obj()
    if callable(obj):
        instance = obj()
        if isinstance(instance, Recipe):
            return instance
    raise TypeError("Recipe entry point must be a Recipe subclass or factory")


def _iter_entry_points() -> Iterable[metadata.EntryPoint]:
    try:
        entry_points = metadata.entry_points()
    except Exception:  # pragma: no cover - defensive guard
        return []
    return entry_points.select(group=_ENTRY_POINT_GROUP)


__all__ = [
    "ManagedBlockRecipe",
    "Recipe",
    "builtin_recipe_names",
    "discover_recipes",
]
