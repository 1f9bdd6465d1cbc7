"""Line splitting helpers shared by the text transforms."""

from __future__ import annotations

from typing import List, Sequence, Tuple


def split_lines(text: str) -> Tuple[List[str], bool]:
    """Return the lines of ``text`` and whether it ended with a newline."""
    if not text:
        return [], False
    trailing = text.endswith("\n")
    body = text[:-1] if trailing else text
    return body.split("\n"), trailing


def join_lines(lines: Sequence[str], trailing: bool) -> str:
    if not lines:
        return ""
    return "\n".join(lines) + ("\n" if trailing else "")


def is_blank(line: str) -> bool:
    return not line.strip()


def append_lines(text: str, new_lines: Sequence[str]) -> str:
    """Append ``new_lines`` after exactly one blank separator line.

    An empty document receives the lines without a separator. A missing
    trailing newline is added first. A trailing whitespace-only line already
    counts as the separator.
    """
    block = "\n".join(new_lines) + "\n"
    if not text:
        return block
    if not text.endswith("\n"):
        text += "\n"
    lines, _ = split_lines(text)
    if not is_blank(lines[-1]):
        text += "\n"
    return text + block


__all__ = ["append_lines", "is_blank", "join_lines", "split_lines"]
