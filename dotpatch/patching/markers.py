"""Managed regions delimited by explicit begin/end marker lines."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ..errors import AmbiguousMarkerError, InvalidBlockError
from ..models import PatchStatus, TextEdit
from .blocks import validate_marker
from .text import append_lines, is_blank, join_lines, split_lines


@dataclass(frozen=True)
class RegionMarkers:
    """Begin/end lines that delimit a managed region, blank lines allowed inside."""

    begin: str
    end: str

    BEGIN_FMT = "{prefix} BEGIN MANAGED: {key}"
    END_FMT = "{prefix} END MANAGED: {key}"

    @classmethod
    def for_key(cls, key: str, *, prefix: str = "#") -> "RegionMarkers":
        return cls(
            begin=cls.BEGIN_FMT.format(prefix=prefix, key=key),
            end=cls.END_FMT.format(prefix=prefix, key=key),
        )

    def validate(self) -> None:
        validate_marker(self.begin)
        validate_marker(self.end)
        if self.begin == self.end:
            raise AmbiguousMarkerError(f"Begin and end markers must differ: {self.begin!r}")

    def wrap(self, body_lines: Iterable[str]) -> List[str]:
        """Return the full region, markers included."""
        body = list(body_lines)
        for line in body:
            if line in (self.begin, self.end):
                raise InvalidBlockError(f"Region body repeats a marker line: {line!r}")
            if "\n" in line or "\r" in line:
                raise InvalidBlockError(f"Region line contains a line break: {line!r}")
        return [self.begin, *body, self.end]


def find_region(lines: Sequence[str], markers: RegionMarkers) -> Optional[Tuple[int, int]]:
    """Return the ``(start, end)`` span of the first region, end exclusive."""
    try:
        start = list(lines).index(markers.begin)
    except ValueError:
        return None
    for index in range(start + 1, len(lines)):
        if lines[index] == markers.end:
            return start, index + 1
    raise AmbiguousMarkerError(f"{markers.begin!r} has no matching {markers.end!r}")


def apply_region(
    text: str,
    markers: RegionMarkers,
    body_lines: Iterable[str],
    *,
    anchor: str | None = None,
) -> TextEdit:
    """Ensure ``text`` holds the region once, inserting after ``anchor`` when new."""
    markers.validate()
    block = markers.wrap(body_lines)
    lines, trailing = split_lines(text)
    span = find_region(lines, markers)

    if span is not None:
        start, end = span
        if list(lines[start:end]) == block:
            return TextEdit(text=text, status=PatchStatus.UNCHANGED)
        updated = list(lines[:start]) + block + list(lines[end:])
        return TextEdit(text=join_lines(updated, trailing), status=PatchStatus.UPDATED)

    if anchor is not None and anchor in lines:
        anchor_at = lines.index(anchor)
        position = anchor_at + 1
        while position < len(lines) and is_blank(lines[position]):
            position += 1
        leading = [] if position > anchor_at + 1 else [""]
        following = [""] if position < len(lines) else []
        updated = list(lines[:position]) + leading + block + following + list(lines[position:])
        at_end = position == len(lines)
        return TextEdit(
            text=join_lines(updated, trailing or at_end),
            status=PatchStatus.CREATED,
        )

    return TextEdit(text=append_lines(text, block), status=PatchStatus.CREATED)


def extract_regions(text: str, *, prefix: str = "#") -> Dict[str, str]:
    """Return a mapping of region key to current body (without markers)."""
    begin_token = RegionMarkers.BEGIN_FMT.format(prefix=prefix, key="")
    regions: Dict[str, str] = {}
    lines, _ = split_lines(text)
    index = 0
    while index < len(lines):
        line = lines[index]
        if not line.startswith(begin_token):
            index += 1
            continue
        key = line[len(begin_token):].strip()
        end_line = RegionMarkers.END_FMT.format(prefix=prefix, key=key)
        try:
            end_index = lines.index(end_line, index + 1)
        except ValueError:
            break
        regions[key] = "\n".join(lines[index + 1:end_index]).strip("\n")
        index = end_index + 1
    return regions


__all__ = ["RegionMarkers", "apply_region", "extract_regions", "find_region"]
