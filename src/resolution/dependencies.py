#!/usr/bin/env python3
"""
Per-dependency classpath resolution.

Maps declared coordinates to jars in a local repository, falling back from the
literal version to the resolution context and finally to the newest stable
version on disk.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from src.config.parser_config import ParserConfigBuilder
from src.constants import CLASSPATH_SCOPES, COMMON_TEST_DEPENDENCIES, DEFAULT_SCOPE
from src.resolution.context import VersionResolver, latest_stable_jar
from src.resolution.coordinates import Coordinate
from src.resolution.layout import RepositoryLayout
from src.resolution.properties import PropertyResolver

logger = logging.getLogger(__name__)


class ClasspathResolver:
    """Resolves coordinates to jar paths and records what could not be found."""

    def __init__(
        self,
        layout: RepositoryLayout,
        version_resolver: VersionResolver,
        builder: ParserConfigBuilder | None = None,
    ):
        self.layout = layout
        self.version_resolver = version_resolver
        self.builder = builder

    def resolve(self, coordinate: Coordinate) -> Path | None:
        """Return the jar for ``coordinate``, or None when it is out of scope or absent."""
        scope = coordinate.scope or DEFAULT_SCOPE
        if scope not in CLASSPATH_SCOPES:
            self._skip(coordinate, f"scope '{scope}' not on the analysis classpath")
            return None

        version = PropertyResolver.resolve(
            coordinate.version,
            self.version_resolver.context.properties,
            self.version_resolver.context.project_version,
        )
        if not PropertyResolver.is_unresolved(version):
            literal = self.layout.artifact_path(coordinate, version)
            if literal.is_file():
                return literal
            logger.debug(f"{coordinate.package_key}:{version} not in repository; trying newer")
            path = latest_stable_jar(self.layout, coordinate)
        else:
            path = self.version_resolver.resolve_jar(coordinate)

        if path is None:
            self._skip(coordinate, "no jar found in local repository")
        return path

    def resolve_all(self, coordinates: Iterable[Coordinate]) -> list[Path]:
        """Resolve several coordinates, preserving order and dropping duplicates."""
        resolved: list[Path] = []
        seen: set[Path] = set()
        for coordinate in coordinates:
            path = self.resolve(coordinate)
            if path is not None and path not in seen:
                seen.add(path)
                resolved.append(path)
        return resolved

    def resolve_common_test_dependencies(self) -> list[Path]:
        """Resolve the well-known test libraries through the full version chain.

        Projects often inherit these from a parent without declaring them, and
        the parser still needs their annotations on the classpath.
        """
        resolved: list[Path] = []
        for group_id, artifact_id, _default in COMMON_TEST_DEPENDENCIES:
            coordinate = Coordinate(group_id, artifact_id, scope="test")
            path = self.version_resolver.resolve_jar(coordinate)
            if path is None:
                logger.debug(f"Common test dependency {coordinate.package_key} not available")
                continue
            resolved.append(path)
        return resolved

    def _skip(self, coordinate: Coordinate, reason: str) -> None:
        logger.debug(f"Skipping {coordinate}: {reason}")
        if self.builder is not None:
            self.builder.skip("dependency", coordinate.full_coordinate, reason)
