"""Idempotent text patching primitives."""

from .blocks import (
    apply_managed_block,
    ensure_managed_block,
    find_blocks,
    insert_managed_block,
    validate_block,
)
from .editor import Transform, chain, edit_file
from .lines import ensure_line, ensure_line_last
from .markers import RegionMarkers, apply_region, extract_regions

__all__ = [
    "RegionMarkers",
    "Transform",
    "apply_managed_block",
    "apply_region",
    "chain",
    "edit_file",
    "ensure_line",
    "ensure_line_last",
    "ensure_managed_block",
    "extract_regions",
    "find_blocks",
    "insert_managed_block",
    "validate_block",
]
