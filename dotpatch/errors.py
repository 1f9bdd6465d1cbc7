"""Exception hierarchy for patch operations."""

from __future__ import annotations

from pathlib import Path


class PatchError(RuntimeError):
    """Base class for failures that abort a single patch operation."""

    def __init__(self, message: str, *, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class TargetNotFoundError(PatchError):
    """Raised when the file to patch does not exist."""


class TargetPermissionError(PatchError):
    """Raised when the file to patch cannot be read or replaced."""


class TargetDecodeError(PatchError):
    """Raised when the file to patch is not valid UTF-8 text."""


class WriteFailureError(PatchError):
    """Raised when the patched content could not be persisted (disk full, rename failure)."""


class AmbiguousMarkerError(PatchError):
    """Raised when a marker cannot delimit a region unambiguously."""


class InvalidBlockError(PatchError):
    """Raised when the desired block content would break idempotence."""


__all__ = [
    "AmbiguousMarkerError",
    "InvalidBlockError",
    "PatchError",
    "TargetDecodeError",
    "TargetNotFoundError",
    "TargetPermissionError",
    "WriteFailureError",
]
