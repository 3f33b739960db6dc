#!/usr/bin/env python3
"""
Version comparison and stability filtering for on-disk version directories.

These are heuristics rather than a Maven version-range implementation:

- ``compare_versions`` compares dot-separated segments by their leading digit
  run, so ``"1.0-SNAPSHOT"`` and ``"1.0"`` compare equal.
- ``is_stable`` rejects anything that looks like a pre-release, which also
  rejects a few legitimate releases (e.g. versions containing "cr" inside a
  qualifier). Callers treat a rejected version as "try the next one".
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import cmp_to_key

from src.constants import UNSTABLE_VERSION_MARKERS

_LEADING_DIGITS = re.compile(r"^(\d+)")
_STABLE_PREFIX = re.compile(r"^\d+\.\d+")


def _leading_number(segment: str) -> int | None:
    match = _LEADING_DIGITS.match(segment)
    return int(match.group(1)) if match else None


def compare_versions(a: str, b: str) -> int:
    """Return a negative, zero or positive number as ``a`` is lower, equal or higher."""
    left = a.split(".")
    right = b.split(".")
    width = max(len(left), len(right))
    left += ["0"] * (width - len(left))
    right += ["0"] * (width - len(right))

    for seg_a, seg_b in zip(left, right):
        num_a = _leading_number(seg_a)
        num_b = _leading_number(seg_b)
        if num_a is None or num_b is None:
            if seg_a != seg_b:
                return -1 if seg_a < seg_b else 1
            continue
        if num_a != num_b:
            return -1 if num_a < num_b else 1
    return 0


def is_stable(version: str) -> bool:
    """True iff ``version`` starts with ``major.minor`` and has no pre-release marker."""
    if not version or not _STABLE_PREFIX.match(version):
        return False
    lowered = version.lower()
    return not any(marker in lowered for marker in UNSTABLE_VERSION_MARKERS)


def sort_versions_desc(versions: Iterable[str]) -> list[str]:
    return sorted(versions, key=cmp_to_key(compare_versions), reverse=True)


def stable_versions_desc(versions: Iterable[str]) -> list[str]:
    """Stable versions only, newest first."""
    return sort_versions_desc(v for v in versions if is_stable(v))


def major_version(version: str) -> str | None:
    num = _leading_number(version.split(".")[0]) if version else None
    return str(num) if num is not None else None
