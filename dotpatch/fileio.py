"""File access for patch targets: line-ending-preserving reads and atomic writes."""

from __future__ import annotations

import difflib
import os
import stat
import tempfile
from pathlib import Path
from typing import List

from .errors import (
    TargetDecodeError,
    TargetNotFoundError,
    TargetPermissionError,
    WriteFailureError,
)
from .logging import get_logger
from .models import TextDocument

_LOGGER = get_logger("fileio")


def detect_newline(raw: str) -> str:
    """Return the dominant line ending: ``\\r\\n`` only when CRLF lines outnumber bare LF ones."""
    crlf = raw.count("\r\n")
    bare = raw.count("\n") - crlf
    return "\r\n" if crlf > bare else "\n"


def read_document(path: Path) -> TextDocument:
    """Read a UTF-8 text file, normalising its line endings to ``\\n``."""
    try:
        with open(path, "r", encoding="utf-8", newline="") as handle:
            raw = handle.read()
    except FileNotFoundError as exc:
        raise TargetNotFoundError(f"File not found: {path}", path=path) from exc
    except IsADirectoryError as exc:
        raise TargetNotFoundError(f"Expected a file but found a directory: {path}", path=path) from exc
    except PermissionError as exc:
        raise TargetPermissionError(f"Permission denied reading {path}", path=path) from exc
    except UnicodeDecodeError as exc:
        raise TargetDecodeError(f"{path} is not valid UTF-8: {exc}", path=path) from exc

    return TextDocument(text=raw.replace("\r\n", "\n"), newline=detect_newline(raw), raw=raw)


def render_document(document: TextDocument, text: str) -> str:
    """Return ``text`` with the original ending restored on every unchanged line.

    Lines the edit introduced get the document's dominant newline.
    """
    if text == document.text:
        return document.raw
    original = _split_keepends(document.raw)
    updated = _split_keepends(text)
    matcher = difflib.SequenceMatcher(
        None,
        [_content(line) for line in original],
        [_content(line) for line in updated],
        autojunk=False,
    )
    rendered: List[str] = []
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag != "equal":
            rendered.extend(_with_newline(line, document.newline) for line in updated[j1:j2])
            continue
        for old_line, new_line in zip(original[i1:i2], updated[j1:j2]):
            if old_line.endswith("\n") == new_line.endswith("\n"):
                rendered.append(old_line)
            else:
                rendered.append(_with_newline(new_line, document.newline))
    return "".join(rendered)


def write_atomic(path: Path, data: str) -> None:
    """Replace the file behind ``path`` with ``data`` via a sibling temp file.

    Symlinks are followed so the link itself survives and the rename lands on
    the real file. Either the old or the complete new content survives a
    failure; the temp file never outlives this call.
    """
    real = Path(os.path.realpath(path))
    directory = real.parent
    try:
        mode = stat.S_IMODE(os.stat(real).st_mode)
    except FileNotFoundError:
        mode = None
    except PermissionError as exc:
        raise TargetPermissionError(f"Permission denied inspecting {path}", path=path) from exc
    if mode is not None and not os.access(real, os.W_OK):
        raise TargetPermissionError(f"Permission denied: {path} is not writable", path=path)

    try:
        fd, tmp_name = tempfile.mkstemp(dir=directory, prefix=f".{real.name}.", suffix=".tmp")
    except PermissionError as exc:
        raise TargetPermissionError(f"Permission denied writing into {directory}", path=path) from exc
    except OSError as exc:
        raise WriteFailureError(f"Unable to create temp file next to {path}: {exc}", path=path) from exc

    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as handle:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        if mode is not None:
            os.chmod(tmp_path, mode)
        os.replace(tmp_path, real)
    except OSError as exc:
        _discard(tmp_path)
        raise WriteFailureError(f"Failed to write {path}: {exc}", path=path) from exc
    _sync_directory(directory)
    _LOGGER.debug("Wrote %d bytes to %s", len(data.encode("utf-8")), real)


def _split_keepends(text: str) -> List[str]:
    # str.splitlines would also break on \x0c, \x1c and friends.
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _content(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n"):
        return line[:-1]
    return line


def _with_newline(line: str, newline: str) -> str:
    return line[:-1] + newline if line.endswith("\n") else line


def _sync_directory(directory: Path) -> None:
    """Flush the rename to disk; platforms without directory fds only get a debug note."""
    flags = os.O_RDONLY | getattr(os, "O_DIRECTORY", 0)
    try:
        fd = os.open(directory, flags)
    except OSError as exc:
        _LOGGER.debug("Cannot open %s to sync the rename: %s", directory, exc)
        return
    try:
        os.fsync(fd)
    except OSError as exc:
        _LOGGER.debug("Directory fsync unsupported for %s: %s", directory, exc)
    finally:
        os.close(fd)


def _discard(tmp_path: Path) -> None:
    try:
        tmp_path.unlink()
    except FileNotFoundError:
        pass
    except OSError as exc:
        _LOGGER.warning("Unable to remove temp file %s: %s", tmp_path, exc)


__all__ = ["detect_newline", "read_document", "render_document", "write_atomic"]
