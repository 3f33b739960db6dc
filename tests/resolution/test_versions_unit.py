#!/usr/bin/env python3

from __future__ import annotations

import pytest

from src.resolution.versions import (
    compare_versions,
    is_stable,
    major_version,
    sort_versions_desc,
    stable_versions_desc,
)


def test_numeric_segments_compare_numerically() -> None:
    assert compare_versions("2.10", "2.9") > 0
    assert compare_versions("2.9", "2.10") < 0


def test_missing_segments_are_zero() -> None:
    assert compare_versions("1.0", "1.0.0") == 0
    assert compare_versions("1.0.1", "1.0") > 0


def test_non_numeric_suffix_is_ignored() -> None:
    # Chosen, imperfect semantics: only the leading digits of a segment count
    assert compare_versions("1.0-SNAPSHOT", "1.0") == 0


def test_segments_without_digits_fall_back_to_text() -> None:
    assert compare_versions("1.x", "1.y") < 0
    assert compare_versions("1.final", "1.final") == 0


@pytest.mark.parametrize(
    "version, expected",
    [
        ("2.0", True),
        ("5.11.4", True),
        ("2.0-RC1", False),
        ("2.0-SNAPSHOT", False),
        ("3.0.0-M2", False),
        ("1.0-beta-3", False),
        ("7", False),
        ("", False),
    ],
)
def test_is_stable(version: str, expected: bool) -> None:
    assert is_stable(version) is expected


def test_sorting_and_stable_filter() -> None:
    versions = ["1.9", "1.10", "2.0-SNAPSHOT", "1.2"]
    assert sort_versions_desc(versions)[:2] == ["2.0-SNAPSHOT", "1.10"]
    assert stable_versions_desc(versions) == ["1.10", "1.9", "1.2"]
    assert stable_versions_desc(["2.0-RC1"]) == []


def test_major_version() -> None:
    assert major_version("4.13.2") == "4"
    assert major_version("x.y") is None
