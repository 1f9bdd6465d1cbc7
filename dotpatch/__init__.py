"""Idempotent managed-block patching for dotfiles."""

from .errors import (
    AmbiguousMarkerError,
    InvalidBlockError,
    PatchError,
    TargetDecodeError,
    TargetNotFoundError,
    TargetPermissionError,
    WriteFailureError,
)
from .models import PatchResult, PatchStatus
from .patching.blocks import apply_managed_block, ensure_managed_block

__all__ = [
    "AmbiguousMarkerError",
    "InvalidBlockError",
    "PatchError",
    "PatchResult",
    "PatchStatus",
    "TargetDecodeError",
    "TargetNotFoundError",
    "TargetPermissionError",
    "WriteFailureError",
    "apply_managed_block",
    "ensure_managed_block",
]
