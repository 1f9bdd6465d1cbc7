"""Tests for BEGIN/END delimited regions."""

from __future__ import annotations

import pytest

from dotpatch.errors import AmbiguousMarkerError, InvalidBlockError
from dotpatch.models import PatchStatus
from dotpatch.patching.markers import RegionMarkers, apply_region, extract_regions

MARKERS = RegionMarkers.for_key("layout", prefix="--")


def test_for_key_formats_markers() -> None:
    assert MARKERS.begin == "-- BEGIN MANAGED: layout"
    assert MARKERS.end == "-- END MANAGED: layout"


def test_region_keeps_blank_lines_inside_and_is_idempotent() -> None:
    body = ["local a = 1", "", "local b = 2"]

    first = apply_region("return {}\n", MARKERS, body)
    second = apply_region(first.text, MARKERS, body)

    assert first.status is PatchStatus.CREATED
    assert first.text == (
        "return {}\n\n-- BEGIN MANAGED: layout\nlocal a = 1\n\nlocal b = 2\n-- END MANAGED: layout\n"
    )
    assert second.status is PatchStatus.UNCHANGED
    assert second.text == first.text


def test_region_replaced_in_place() -> None:
    text = "head\n-- BEGIN MANAGED: layout\nold\n\nold\n-- END MANAGED: layout\ntail\n"

    edit = apply_region(text, MARKERS, ["new"])

    assert edit.status is PatchStatus.UPDATED
    assert edit.text == "head\n-- BEGIN MANAGED: layout\nnew\n-- END MANAGED: layout\ntail\n"


def test_region_inserted_after_anchor_and_its_blank_lines() -> None:
    text = 'local wezterm = require("wezterm")\n\nreturn {}\n'

    edit = apply_region(text, MARKERS, ["x"], anchor='local wezterm = require("wezterm")')

    assert edit.text == (
        'local wezterm = require("wezterm")\n\n'
        "-- BEGIN MANAGED: layout\nx\n-- END MANAGED: layout\n\nreturn {}\n"
    )


def test_region_inserted_after_anchor_without_blank_line() -> None:
    edit = apply_region("anchor\nbody\n", MARKERS, ["x"], anchor="anchor")

    assert edit.text == "anchor\n\n-- BEGIN MANAGED: layout\nx\n-- END MANAGED: layout\n\nbody\n"


def test_missing_anchor_falls_back_to_append() -> None:
    edit = apply_region("body", MARKERS, ["x"], anchor="absent")

    assert edit.text == "body\n\n-- BEGIN MANAGED: layout\nx\n-- END MANAGED: layout\n"


def test_unterminated_region_is_ambiguous() -> None:
    with pytest.raises(AmbiguousMarkerError):
        apply_region("-- BEGIN MANAGED: layout\nx\n", MARKERS, ["y"])


def test_identical_begin_and_end_markers_are_rejected() -> None:
    with pytest.raises(AmbiguousMarkerError):
        apply_region("", RegionMarkers(begin="# x", end="# x"), ["y"])


def test_body_may_not_contain_markers() -> None:
    with pytest.raises(InvalidBlockError):
        apply_region("", MARKERS, ["-- END MANAGED: layout"])


def test_extract_regions_returns_bodies_by_key() -> None:
    text = (
        "# BEGIN MANAGED: one\na\n# END MANAGED: one\n"
        "other\n"
        "# BEGIN MANAGED: two\nb\n\nc\n# END MANAGED: two\n"
    )

    assert extract_regions(text) == {"one": "a", "two": "b\n\nc"}
