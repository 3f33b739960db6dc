#!/usr/bin/env python3
"""
Dependency coordinates (group, artifact, version, scope).
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from src.constants import DEFAULT_SCOPE


@dataclass(frozen=True)
class Coordinate:
    """Maven-style dependency coordinate.

    ``version`` may be a literal, ``None`` (omitted) or an unresolved
    ``${...}`` placeholder.
    """

    group_id: str
    artifact_id: str
    version: str | None = None
    scope: str = DEFAULT_SCOPE
    type: str = "jar"

    @property
    def package_key(self) -> str:
        """Return the version-independent identity (group:artifact)."""
        return f"{self.group_id}:{self.artifact_id}"

    @property
    def full_coordinate(self) -> str:
        """Return full GAV coordinate string."""
        return f"{self.group_id}:{self.artifact_id}:{self.version or '?'}"

    @property
    def has_literal_version(self) -> bool:
        return bool(self.version) and "${" not in str(self.version)

    def with_version(self, version: str | None) -> Coordinate:
        return replace(self, version=version)

    @classmethod
    def parse(cls, notation: str, scope: str = DEFAULT_SCOPE) -> Coordinate | None:
        """Parse ``group:artifact[:version]`` notation; returns None when malformed."""
        parts = [p.strip() for p in notation.strip().split(":")]
        if len(parts) < 2 or not parts[0] or not parts[1]:
            return None
        version = parts[2] if len(parts) > 2 and parts[2] else None
        return cls(parts[0], parts[1], version, scope)

    def __str__(self) -> str:
        return self.full_coordinate
