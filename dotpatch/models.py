"""Core data models shared across dotpatch components."""

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class PatchStatus(str, Enum):
    """Outcome of a single patch operation."""

    UNCHANGED = "unchanged"
    CREATED = "created"
    UPDATED = "updated"

    @property
    def changed(self) -> bool:
        return self is not PatchStatus.UNCHANGED


@dataclass
class TextEdit:
    """Result of an in-memory text transform."""

    text: str
    status: PatchStatus
    duplicates: int = 0


@dataclass
class TextDocument:
    """File content normalised to ``\\n`` line endings.

    ``raw`` keeps the bytes-as-read text so untouched lines can be written back
    with their own endings; ``newline`` is the dominant convention used for
    lines the patcher adds.
    """

    text: str
    newline: str = "\n"
    raw: str = ""


@dataclass
class PatchResult:
    """Outcome of patching one file."""

    path: Path
    status: PatchStatus
    label: str = ""
    duplicates: int = 0
    diff: str = ""
    dry_run: bool = False
