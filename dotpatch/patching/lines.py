"""Single-line patches: presence checks and ordering."""

from __future__ import annotations

from ..models import PatchStatus, TextEdit
from .text import append_lines, split_lines


def ensure_line(text: str, line: str, *, present_if: str | None = None) -> TextEdit:
    """Append ``line`` unless it, or any line containing ``present_if``, already exists."""
    lines, _ = split_lines(text)
    if line in lines:
        return TextEdit(text=text, status=PatchStatus.UNCHANGED)
    if present_if and any(present_if in existing for existing in lines):
        return TextEdit(text=text, status=PatchStatus.UNCHANGED)
    return TextEdit(text=append_lines(text, [line]), status=PatchStatus.CREATED)


def ensure_line_last(text: str, line: str) -> TextEdit:
    """Move ``line`` to the end of a list file, dropping blank lines and repeats."""
    target = line.strip()
    lines, _ = split_lines(text)
    present = any(existing.strip() == target for existing in lines)
    kept = [existing for existing in lines if existing.strip() and existing.strip() != target]
    updated = "\n".join(kept + [target]) + "\n"
    if updated == text:
        return TextEdit(text=text, status=PatchStatus.UNCHANGED)
    status = PatchStatus.UPDATED if present else PatchStatus.CREATED
    return TextEdit(text=updated, status=status)


__all__ = ["ensure_line", "ensure_line_last"]
