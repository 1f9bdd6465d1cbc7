"""Apply in-memory text transforms to files on disk."""

from __future__ import annotations

import difflib
from pathlib import Path
from typing import Callable

from ..fileio import read_document, render_document, write_atomic
from ..logging import get_logger
from ..models import PatchResult, PatchStatus, TextEdit

Transform = Callable[[str], TextEdit]

_LOGGER = get_logger("editor")


def edit_file(
    path: Path,
    transform: Transform,
    *,
    dry_run: bool = False,
    label: str | None = None,
) -> PatchResult:
    """Run ``transform`` over the file and persist the result when it changed."""
    target = Path(path).expanduser()
    name = label or target.name
    document = read_document(target)
    edit = transform(document.text)

    if edit.duplicates:
        _LOGGER.warning(
            "%s appears %d more time(s) in %s; only the first occurrence is managed",
            name,
            edit.duplicates,
            target,
        )

    if not edit.status.changed:
        _LOGGER.info("%s already up to date in %s", name, target)
        return PatchResult(
            path=target,
            status=edit.status,
            label=name,
            duplicates=edit.duplicates,
            dry_run=dry_run,
        )

    diff = render_diff(document.text, edit.text, target)
    if dry_run:
        _LOGGER.info("Dry-run: %s would be %s in %s", name, edit.status.value, target)
    else:
        write_atomic(target, render_document(document, edit.text))
        _LOGGER.info("%s %s in %s", name, edit.status.value, target)
    return PatchResult(
        path=target,
        status=edit.status,
        label=name,
        duplicates=edit.duplicates,
        diff=diff,
        dry_run=dry_run,
    )


def chain(*transforms: Transform) -> Transform:
    """Compose transforms left to right into one.

    The combined status is ``CREATED`` when every effective step created
    content, ``UPDATED`` when any step rewrote existing content.
    """

    def _run(text: str) -> TextEdit:
        current = text
        statuses = []
        duplicates = 0
        for transform in transforms:
            edit = transform(current)
            duplicates += edit.duplicates
            if edit.status.changed and edit.text != current:
                statuses.append(edit.status)
            current = edit.text
        if current == text or not statuses:
            return TextEdit(text=text, status=PatchStatus.UNCHANGED, duplicates=duplicates)
        if all(status is PatchStatus.CREATED for status in statuses):
            return TextEdit(text=current, status=PatchStatus.CREATED, duplicates=duplicates)
        return TextEdit(text=current, status=PatchStatus.UPDATED, duplicates=duplicates)

    return _run


def render_diff(original: str, updated: str, path: Path) -> str:
    diff = difflib.unified_diff(
        original.splitlines(keepends=True),
        updated.splitlines(keepends=True),
        fromfile=f"{path} (original)",
        tofile=f"{path} (updated)",
    )
    return "".join(diff)


__all__ = ["Transform", "chain", "edit_file", "render_diff"]
