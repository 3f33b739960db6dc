"""
Value types produced by test discovery.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypedDict


class TestRecordInfo(TypedDict):
    class_name: str
    method_name: str
    absolute_path: str


@dataclass(frozen=True)
class TestRecord:
    """One public test method of a qualifying (public, reachable) type."""

    __test__ = False  # not a pytest test class

    class_name: str
    method_name: str
    absolute_path: str

    def to_dict(self) -> TestRecordInfo:
        return {
            "class_name": self.class_name,
            "method_name": self.method_name,
            "absolute_path": self.absolute_path,
        }
