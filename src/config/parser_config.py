#!/usr/bin/env python3
"""
Parser configuration produced by project detection.

``ParserConfig`` is an immutable snapshot handed to the Java parser:
classpath, sourcepath, per-source-root encodings and a compliance level.
``ParserConfigBuilder`` accumulates entries while a detector runs,
de-duplicating by absolute path and remembering every degraded step as a
``SkippedItem``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from src.constants import DEFAULT_COMPLIANCE_LEVEL, DEFAULT_ENCODING

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SkippedItem:
    """A step that was skipped or degraded, with the reason."""

    kind: str
    item: str
    reason: str

    def __str__(self) -> str:
        return f"{self.kind}: {self.item} ({self.reason})"


def _absolute(path: str | Path) -> str:
    return os.path.abspath(os.fspath(path))


@dataclass(frozen=True)
class ParserConfig:
    classpath: tuple[str, ...] = ()
    sourcepath: tuple[str, ...] = ()
    encodings: tuple[str, ...] = (DEFAULT_ENCODING,)
    compliance_level: str = DEFAULT_COMPLIANCE_LEVEL
    skipped: tuple[SkippedItem, ...] = field(default=(), compare=False)

    def effective_encodings(self) -> list[str]:
        """One encoding per sourcepath entry.

        Per-entry encodings are used only when their count matches the
        sourcepath; otherwise the first encoding applies to every entry.
        """
        if self.encodings and len(self.encodings) == len(self.sourcepath):
            return list(self.encodings)
        default = self.encodings[0] if self.encodings else DEFAULT_ENCODING
        return [default] * len(self.sourcepath)

    def encoding_for(self, path: str | Path) -> str:
        """Encoding of the sourcepath entry that contains ``path``."""
        target = Path(_absolute(path))
        best: tuple[int, str] | None = None
        for entry, encoding in zip(self.sourcepath, self.effective_encodings()):
            root = Path(entry)
            if target == root or root in target.parents:
                depth = len(root.parts)
                if best is None or depth > best[0]:
                    best = (depth, encoding)
        if best is not None:
            return best[1]
        return self.encodings[0] if self.encodings else DEFAULT_ENCODING

    def describe(self) -> str:
        lines = [
            f"Compliance level: {self.compliance_level}",
            f"Classpath ({len(self.classpath)} entries):",
        ]
        lines.extend(f"  {entry}" for entry in self.classpath)
        lines.append(f"Sourcepath ({len(self.sourcepath)} entries):")
        lines.extend(f"  {entry}" for entry in self.sourcepath)
        lines.append(f"Encodings: {', '.join(self.encodings)}")
        if self.skipped:
            lines.append(f"Skipped ({len(self.skipped)}):")
            lines.extend(f"  {item}" for item in self.skipped)
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "classpath": list(self.classpath),
            "sourcepath": list(self.sourcepath),
            "encodings": list(self.encodings),
            "compliance_level": self.compliance_level,
            "skipped": [
                {"kind": s.kind, "item": s.item, "reason": s.reason} for s in self.skipped
            ],
        }


class ParserConfigBuilder:
    """Accumulates configuration entries in discovery order."""

    def __init__(
        self,
        encoding: str = DEFAULT_ENCODING,
        compliance_level: str = DEFAULT_COMPLIANCE_LEVEL,
    ):
        self.encoding = encoding
        self.compliance_level = compliance_level
        self._classpath: dict[str, None] = {}
        self._sourcepath: dict[str, str | None] = {}
        self._skipped: list[SkippedItem] = []

    @property
    def classpath(self) -> list[str]:
        return list(self._classpath)

    @property
    def sourcepath(self) -> list[str]:
        return list(self._sourcepath)

    @property
    def skipped(self) -> list[SkippedItem]:
        return list(self._skipped)

    def add_classpath(self, path: str | Path) -> bool:
        key = _absolute(path)
        if key in self._classpath:
            return False
        self._classpath[key] = None
        return True

    def add_sourcepath(self, path: str | Path, encoding: str | None = None) -> bool:
        key = _absolute(path)
        if key in self._sourcepath:
            return False
        self._sourcepath[key] = encoding
        return True

    def add_existing(self, base: Path, parts_list, sourcepath: bool = False) -> None:
        """Add each ``base/<parts>`` directory that exists."""
        for parts in parts_list:
            candidate = base.joinpath(*parts)
            if candidate.is_dir():
                if sourcepath:
                    self.add_sourcepath(candidate)
                else:
                    self.add_classpath(candidate)

    def skip(self, kind: str, item: str, reason: str) -> None:
        logger.debug(f"Skipped {kind} {item}: {reason}")
        self._skipped.append(SkippedItem(kind, item, reason))

    def extend_skipped(self, items) -> None:
        self._skipped.extend(items)

    def build(self) -> ParserConfig:
        per_entry = list(self._sourcepath.values())
        if any(enc is not None and enc != self.encoding for enc in per_entry):
            encodings = tuple(enc or self.encoding for enc in per_entry)
        else:
            encodings = (self.encoding,)
        return ParserConfig(
            classpath=tuple(self._classpath),
            sourcepath=tuple(self._sourcepath),
            encodings=encodings,
            compliance_level=self.compliance_level,
            skipped=tuple(self._skipped),
        )
