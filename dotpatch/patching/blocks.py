"""Idempotent managed blocks terminated by the next blank line.

A managed block starts at a line equal to its marker and runs up to (not
including) the first following blank line, or to the end of the file. The
patcher owns that region and rewrites it freely; everything else in the file
is left byte-identical.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Sequence, Tuple

from ..errors import AmbiguousMarkerError, InvalidBlockError
from ..models import PatchResult, PatchStatus, TextEdit
from .editor import edit_file
from .text import append_lines, is_blank, join_lines, split_lines


def validate_marker(marker: str) -> str:
    """Return ``marker`` when it can identify a block start unambiguously."""
    if not isinstance(marker, str) or not marker.strip():
        raise AmbiguousMarkerError("Marker must be a non-empty line")
    if "\n" in marker or "\r" in marker:
        raise AmbiguousMarkerError(f"Marker must be a single line: {marker!r}")
    return marker


def validate_block(marker: str, desired_lines: Iterable[str]) -> List[str]:
    """Check that ``desired_lines`` can be re-found verbatim on the next run."""
    validate_marker(marker)
    block = list(desired_lines)
    if not block or block[0] != marker:
        raise InvalidBlockError(f"Block must start with its marker line {marker!r}")
    for index, line in enumerate(block[1:], start=1):
        if "\n" in line or "\r" in line:
            raise InvalidBlockError(f"Block line {index} contains a line break: {line!r}")
        if is_blank(line):
            raise InvalidBlockError(
                f"Block for {marker!r} contains a blank line at {index}; "
                "blank lines terminate managed blocks"
            )
        if line == marker:
            raise InvalidBlockError(f"Block for {marker!r} repeats its marker line")
    return block


def find_blocks(lines: Sequence[str], marker: str) -> List[Tuple[int, int]]:
    """Return ``(start, end)`` spans for every block introduced by ``marker``."""
    spans: List[Tuple[int, int]] = []
    index = 0
    while index < len(lines):
        if lines[index] != marker:
            index += 1
            continue
        end = index + 1
        while end < len(lines) and not is_blank(lines[end]):
            end += 1
        spans.append((index, end))
        index = end
    return spans


def apply_managed_block(text: str, marker: str, desired_lines: Iterable[str]) -> TextEdit:
    """Ensure ``text`` contains ``desired_lines`` at the first ``marker`` line."""
    block = validate_block(marker, desired_lines)
    lines, trailing = split_lines(text)
    spans = find_blocks(lines, marker)
    if not spans:
        return TextEdit(text=append_lines(text, block), status=PatchStatus.CREATED)

    start, end = spans[0]
    duplicates = len(spans) - 1
    if list(lines[start:end]) == block:
        return TextEdit(text=text, status=PatchStatus.UNCHANGED, duplicates=duplicates)

    updated = list(lines[:start]) + block + list(lines[end:])
    return TextEdit(
        text=join_lines(updated, trailing),
        status=PatchStatus.UPDATED,
        duplicates=duplicates,
    )


def insert_managed_block(text: str, marker: str, desired_lines: Iterable[str]) -> TextEdit:
    """Append the block only when no ``marker`` line exists yet.

    An existing block belongs to the user from then on and is never rewritten.
    """
    block = validate_block(marker, desired_lines)
    lines, _ = split_lines(text)
    spans = find_blocks(lines, marker)
    if spans:
        return TextEdit(text=text, status=PatchStatus.UNCHANGED, duplicates=len(spans) - 1)
    return TextEdit(text=append_lines(text, block), status=PatchStatus.CREATED)


def ensure_managed_block(
    file_path: Path | str,
    marker: str,
    desired_block_lines: Iterable[str],
    *,
    dry_run: bool = False,
) -> PatchResult:
    """Patch ``file_path`` so it holds exactly one up-to-date copy of the block."""
    block = validate_block(marker, desired_block_lines)
    return edit_file(
        Path(file_path),
        lambda text: apply_managed_block(text, marker, block),
        dry_run=dry_run,
        label=marker,
    )


__all__ = [
    "apply_managed_block",
    "ensure_managed_block",
    "find_blocks",
    "insert_managed_block",
    "validate_block",
    "validate_marker",
]
