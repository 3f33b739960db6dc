#!/usr/bin/env python3
"""
Repository layout resolvers.

Map a coordinate and version to the expected artifact path inside a local
package cache. Both layouts are pure path arithmetic built with ``pathlib``
(so the platform separator is always used); callers check existence.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from src.resolution.coordinates import Coordinate

logger = logging.getLogger(__name__)


def _list_dirs(path: Path) -> list[str]:
    try:
        return sorted(p.name for p in path.iterdir() if p.is_dir())
    except OSError:
        return []


@dataclass(frozen=True)
class MavenRepositoryLayout:
    """``root/<group as dirs>/<artifact>/<version>/<artifact>-<version>.<ext>``."""

    root: Path

    def artifact_dir(self, group_id: str, artifact_id: str) -> Path:
        return self.root.joinpath(*group_id.split("."), artifact_id)

    def artifact_path(self, coordinate: Coordinate, version: str, ext: str = "jar") -> Path:
        return self.version_dir(coordinate.group_id, coordinate.artifact_id, version) / (
            f"{coordinate.artifact_id}-{version}.{ext}"
        )

    def version_dir(self, group_id: str, artifact_id: str, version: str) -> Path:
        return self.artifact_dir(group_id, artifact_id) / version

    def descriptor_path(self, group_id: str, artifact_id: str, version: str) -> Path:
        return self.artifact_path(Coordinate(group_id, artifact_id), version, ext="pom")

    def version_dirs(self, group_id: str, artifact_id: str) -> list[str]:
        return _list_dirs(self.artifact_dir(group_id, artifact_id))


@dataclass(frozen=True)
class GradleCacheLayout:
    """Gradle ``files-2.1`` cache: ``root/<group>/<artifact>/<version>/<sha1>/<file>``.

    The group is kept as a single dotted directory and every file sits under a
    content-hash directory, so ``artifact_path`` has to look at the disk to pick
    the hash directory holding the jar.
    """

    root: Path

    def artifact_dir(self, group_id: str, artifact_id: str) -> Path:
        return self.root / group_id / artifact_id

    def version_dir(self, group_id: str, artifact_id: str, version: str) -> Path:
        return self.artifact_dir(group_id, artifact_id) / version

    def artifact_path(self, coordinate: Coordinate, version: str, ext: str = "jar") -> Path:
        file_name = f"{coordinate.artifact_id}-{version}.{ext}"
        version_dir = self.version_dir(coordinate.group_id, coordinate.artifact_id, version)
        for hash_dir in _list_dirs(version_dir):
            candidate = version_dir / hash_dir / file_name
            if candidate.is_file():
                return candidate
        # Nothing cached: return the shape of the path without a hash directory
        return version_dir / file_name

    def descriptor_path(self, group_id: str, artifact_id: str, version: str) -> Path:
        return self.artifact_path(Coordinate(group_id, artifact_id), version, ext="pom")

    def version_dirs(self, group_id: str, artifact_id: str) -> list[str]:
        return _list_dirs(self.artifact_dir(group_id, artifact_id))


RepositoryLayout = MavenRepositoryLayout | GradleCacheLayout
