"""Tests for file editing and transform composition."""

from __future__ import annotations

from pathlib import Path

from dotpatch.models import PatchStatus, TextEdit
from dotpatch.patching.editor import chain, edit_file
from dotpatch.patching.lines import ensure_line


def _upper(text: str) -> TextEdit:
    updated = text.upper()
    return TextEdit(text=updated, status=PatchStatus.UPDATED if updated != text else PatchStatus.UNCHANGED)


def test_chain_reports_created_when_only_additions_happen() -> None:
    combined = chain(lambda text: ensure_line(text, "a"), lambda text: ensure_line(text, "b"))

    edit = combined("")

    assert edit.status is PatchStatus.CREATED
    assert edit.text == "a\n\nb\n"


def test_chain_reports_updated_when_any_step_rewrites() -> None:
    edit = chain(lambda text: ensure_line(text, "a"), _upper)("x\n")

    assert edit.status is PatchStatus.UPDATED
    assert edit.text == "X\n\nA\n"


def test_chain_is_unchanged_when_steps_cancel_out() -> None:
    assert chain(_upper)("ABC\n").status is PatchStatus.UNCHANGED


def test_edit_file_labels_result_and_expands_user(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    (tmp_path / ".zshrc").write_text("", encoding="utf-8")

    result = edit_file(Path("~/.zshrc"), lambda text: ensure_line(text, "x"), label="demo")

    assert result.path == tmp_path / ".zshrc"
    assert result.label == "demo"
    assert result.status is PatchStatus.CREATED
    assert "+x" in result.diff
    assert (tmp_path / ".zshrc").read_text(encoding="utf-8") == "x\n"
