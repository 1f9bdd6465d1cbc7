"""WezTerm config recipe: window layout region, font fallback and size."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List

from jinja2 import Environment, FileSystemLoader

from ..config import DotpatchConfig, WeztermConfig
from ..models import PatchStatus, TextEdit
from ..patching.editor import Transform, chain
from ..patching.markers import RegionMarkers, apply_region
from .base import Recipe

REQUIRE_LINE = 'local wezterm = require("wezterm")'
LAYOUT_MARKERS = RegionMarkers.for_key("wezterm-layout", prefix="--")
FALLBACK_FONTS = ("MesloLGS Nerd Font Mono", "MesloLGS Nerd Font", "MesloLGS NF", "Menlo")

_REQUIRE_RE = re.compile(r"""^local wezterm\s*=\s*require\(["']wezterm["']\)[ \t]*$""", re.M)
_FALLBACK_CALL_RE = re.compile(r"font\s*=\s*wezterm\.font_with_fallback\(")
_FALLBACK_BLOCK_RE = re.compile(r"font\s*=\s*wezterm\.font_with_fallback\(\{.*?\}\)\s*,", re.S)
_SINGLE_FONT_RE = re.compile(r"font\s*=\s*wezterm\.font\([^)]*\)\s*,")
_FONT_SIZE_RE = re.compile(r"\bfont_size\s*=\s*[^,\n]+\s*,")
_FONT_SIZE_VALUE = "font_size = FONT_SIZE,"


def build_environment() -> Environment:
    loader = FileSystemLoader([str(Path(__file__).with_name("templates"))])
    return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


def render_layout(settings: WeztermConfig, env: Environment | None = None) -> List[str]:
    """Render the gui-startup layout handler as region body lines."""
    template = (env or build_environment()).get_template("wezterm_layout.lua.j2")
    rendered = template.render(
        font_size=settings.font_size,
        width_ratio=settings.width_ratio,
        height_ratio=settings.height_ratio,
        y_offset_ratio=settings.y_offset_ratio,
    )
    return rendered.strip("\n").split("\n")


def render_font_fallback(primary: str) -> str:
    fonts: List[str] = []
    for name in (primary, *FALLBACK_FONTS):
        if name and name not in fonts:
            fonts.append(name)
    entries = "".join(f'    "{name}",\n' for name in fonts)
    return "font = wezterm.font_with_fallback({\n" + entries + "  }),"


def ensure_require(text: str) -> TextEdit:
    if _REQUIRE_RE.search(text):
        return TextEdit(text=text, status=PatchStatus.UNCHANGED)
    return TextEdit(text=f"{REQUIRE_LINE}\n\n{text}", status=PatchStatus.UPDATED)


def layout_transform(settings: WeztermConfig, env: Environment | None = None) -> Transform:
    body = render_layout(settings, env)

    def _run(text: str) -> TextEdit:
        match = _REQUIRE_RE.search(text)
        anchor = match.group(0) if match else None
        return apply_region(text, LAYOUT_MARKERS, body, anchor=anchor)

    return _run


def font_transform(primary: str) -> Transform:
    replacement = render_font_fallback(primary)

    def _run(text: str) -> TextEdit:
        if _FALLBACK_CALL_RE.search(text):
            updated = _FALLBACK_BLOCK_RE.sub(lambda _: replacement, text, count=1)
        else:
            updated = _SINGLE_FONT_RE.sub(lambda _: replacement, text, count=1)
        status = PatchStatus.UPDATED if updated != text else PatchStatus.UNCHANGED
        return TextEdit(text=updated, status=status)

    return _run


def font_size_transform(text: str) -> TextEdit:
    if _FONT_SIZE_RE.search(text):
        updated = _FONT_SIZE_RE.sub(_FONT_SIZE_VALUE, text)
    else:
        updated = _FALLBACK_BLOCK_RE.sub(
            lambda match: f"{match.group(0)}\n  {_FONT_SIZE_VALUE}", text, count=1
        )
    status = PatchStatus.UPDATED if updated != text else PatchStatus.UNCHANGED
    return TextEdit(text=updated, status=status)


class WeztermLayoutRecipe(Recipe):
    name = "wezterm-layout"
    target = ".config/wezterm/wezterm.lua"
    description = "Right-aligned startup window, Meslo font fallback and managed font size."
    optional = True

    def transform(self, config: DotpatchConfig) -> Transform:
        settings = config.wezterm
        return chain(
            ensure_require,
            layout_transform(settings),
            font_transform(settings.primary_font),
            font_size_transform,
        )


__all__ = [
    "LAYOUT_MARKERS",
    "WeztermLayoutRecipe",
    "font_size_transform",
    "font_transform",
    "layout_transform",
    "render_font_fallback",
    "render_layout",
]
