#!/usr/bin/env python3
"""
Dependency version resolution context.

A ``VersionResolutionContext`` collects every version a project tells us about,
split by where it was declared:

- ``explicit``: direct ``<dependencies>`` of the project and its submodules
- ``managed``: ``<dependencyManagement>`` of the project and its submodules,
  including imported BOMs
- ``inherited_explicit`` / ``inherited_managed``: the same sections of the
  parent chain, nearest ancestor first

The maps are first-writer-wins. ``VersionResolver`` walks them in that order
and then falls back to inference, pattern suggestions and the newest stable
version present on disk.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from src.config.parser_config import SkippedItem
from src.constants import COMMON_TEST_DEPENDENCIES, COMPATIBILITY_TABLE, POM_FILE
from src.resolution.coordinates import Coordinate
from src.resolution.descriptor import DescriptorError, PomDescriptor, load_descriptor
from src.resolution.layout import RepositoryLayout
from src.resolution.properties import PropertyResolver, effective_properties
from src.resolution.versions import major_version, stable_versions_desc

logger = logging.getLogger(__name__)

TIER_EXPLICIT = "explicit"
TIER_MANAGED = "managed"
TIER_INHERITED_EXPLICIT = "inherited_explicit"
TIER_INHERITED_MANAGED = "inherited_managed"
TIER_INFERRED = "inferred"
TIER_PATTERN = "pattern"
TIER_LATEST = "latest_stable"

_DEFAULT_TEST_VERSIONS = {f"{g}:{a}": v for g, a, v in COMMON_TEST_DEPENDENCIES}


@dataclass
class VersionResolutionContext:
    explicit: dict[str, str] = field(default_factory=dict)
    managed: dict[str, str] = field(default_factory=dict)
    inherited_explicit: dict[str, str] = field(default_factory=dict)
    inherited_managed: dict[str, str] = field(default_factory=dict)
    properties: dict[str, str] = field(default_factory=dict)
    project_version: str | None = None
    skipped: list[SkippedItem] = field(default_factory=list)

    def tiers(self) -> list[tuple[str, dict[str, str]]]:
        """Version maps in precedence order."""
        return [
            (TIER_EXPLICIT, self.explicit),
            (TIER_MANAGED, self.managed),
            (TIER_INHERITED_EXPLICIT, self.inherited_explicit),
            (TIER_INHERITED_MANAGED, self.inherited_managed),
        ]

    def known_versions(self) -> dict[str, str]:
        """Every known package key with its highest-precedence version."""
        known: dict[str, str] = {}
        for _tier, versions in self.tiers():
            for key, version in versions.items():
                known.setdefault(key, version)
        return known

    @staticmethod
    def record(versions: dict[str, str], package_key: str, version: str) -> bool:
        """Store ``version`` unless the key is already present."""
        if package_key in versions:
            if versions[package_key] != version:
                logger.debug(
                    f"Keeping {package_key}:{versions[package_key]} over later {version}"
                )
            return False
        versions[package_key] = version
        return True


class ResolutionContextBuilder:
    """Builds a ``VersionResolutionContext`` from a root descriptor and its ancestors."""

    def __init__(self, layout: RepositoryLayout):
        self.layout = layout

    def build(
        self, descriptor: PomDescriptor, project_root: Path | None = None
    ) -> VersionResolutionContext:
        ancestors = self.ancestors(descriptor, project_root)
        context = VersionResolutionContext(
            properties=effective_properties(
                descriptor.properties,
                [a.properties for a in ancestors],
                descriptor.builtin_properties(),
            ),
            project_version=descriptor.effective_version,
        )

        self.scan_descriptor(descriptor, context, context.explicit, context.managed)
        for ancestor in ancestors:
            logger.debug(f"Scanning inherited declarations from {ancestor.package_key}")
            self.scan_descriptor(
                ancestor, context, context.inherited_explicit, context.inherited_managed
            )

        logger.debug(
            f"Resolution context: {len(context.explicit)} explicit, "
            f"{len(context.managed)} managed, {len(context.inherited_explicit)} inherited "
            f"explicit, {len(context.inherited_managed)} inherited managed"
        )
        return context

    def ancestors(
        self, descriptor: PomDescriptor, project_root: Path | None = None
    ) -> list[PomDescriptor]:
        """Walk the parent chain, nearest first.

        The walk stops at the first parent that cannot be located; that is
        logged and leaves inheritance truncated rather than failing.
        """
        chain: list[PomDescriptor] = []
        seen = {self._identity(descriptor)}
        current = descriptor
        while current.parent is not None:
            parent = self.locate_parent(current)
            if parent is None:
                logger.info(
                    f"Parent {current.parent.package_key}:{current.parent.version} of "
                    f"{current.package_key} not found; inheritance stops here"
                )
                break
            identity = self._identity(parent)
            if identity in seen:
                logger.warning(f"Parent cycle detected at {identity}; inheritance stops here")
                break
            seen.add(identity)
            chain.append(parent)
            current = parent
        return chain

    def locate_parent(self, descriptor: PomDescriptor) -> PomDescriptor | None:
        """Find the parent via ``relativePath`` first, then the local repository."""
        ref = descriptor.parent
        if ref is None:
            return None

        if ref.relative_path:
            candidate = descriptor.directory / ref.relative_path
            if candidate.is_dir():
                candidate = candidate / POM_FILE
            if candidate.is_file():
                try:
                    parent = load_descriptor(candidate)
                except DescriptorError as e:
                    logger.debug(f"Ignoring unreadable parent candidate: {e}")
                else:
                    if (
                        parent.effective_group_id == ref.group_id
                        and parent.artifact_id == ref.artifact_id
                    ):
                        return parent
                    logger.debug(f"{candidate} is not {ref.package_key}; trying repository")

        if PropertyResolver.is_unresolved(ref.version):
            return None
        path = self.layout.descriptor_path(ref.group_id, ref.artifact_id, ref.version)
        if not path.is_file():
            return None
        try:
            return load_descriptor(path)
        except DescriptorError as e:
            logger.warning(f"Parent descriptor unusable: {e}")
            return None

    def scan_descriptor(
        self,
        descriptor: PomDescriptor,
        context: VersionResolutionContext,
        explicit: dict[str, str],
        managed: dict[str, str],
        properties: dict[str, str] | None = None,
    ) -> None:
        """Record ``descriptor``'s dependencies and managed versions."""
        props = context.properties if properties is None else properties
        for dep in descriptor.dependencies:
            version = self._resolve(dep.version, props, context)
            if version is not None:
                context.record(explicit, dep.package_key, version)

        for dep in descriptor.managed_dependencies:
            version = self._resolve(dep.version, props, context)
            if version is None:
                continue
            if dep.scope == "import" and dep.type == "pom":
                self._import_bom(dep.with_version(version), context, managed, set())
            else:
                context.record(managed, dep.package_key, version)

    def _import_bom(
        self,
        bom: Coordinate,
        context: VersionResolutionContext,
        managed: dict[str, str],
        seen: set[str],
    ) -> None:
        if bom.full_coordinate in seen:
            return
        seen.add(bom.full_coordinate)

        path = self.layout.descriptor_path(bom.group_id, bom.artifact_id, bom.version)
        if not path.is_file():
            logger.debug(f"BOM {bom} not in local repository")
            context.skipped.append(SkippedItem("bom", bom.full_coordinate, "not found"))
            return
        try:
            descriptor = load_descriptor(path)
        except DescriptorError as e:
            logger.warning(f"BOM {bom} unusable: {e}")
            context.skipped.append(SkippedItem("bom", bom.full_coordinate, str(e)))
            return

        logger.debug(f"Importing BOM {bom}")
        props = effective_properties(
            descriptor.properties,
            [a.properties for a in self.ancestors(descriptor)],
            descriptor.builtin_properties(),
        )
        for dep in descriptor.managed_dependencies:
            version = PropertyResolver.resolve(dep.version, props, descriptor.effective_version)
            if PropertyResolver.is_unresolved(version):
                continue
            if dep.scope == "import" and dep.type == "pom":
                self._import_bom(dep.with_version(version), context, managed, seen)
            else:
                context.record(managed, dep.package_key, version)

    @staticmethod
    def _resolve(
        version: str | None, properties: dict[str, str], context: VersionResolutionContext
    ) -> str | None:
        resolved = PropertyResolver.resolve(version, properties, context.project_version)
        if PropertyResolver.is_unresolved(resolved):
            return None
        return resolved

    @staticmethod
    def _identity(descriptor: PomDescriptor) -> str:
        return f"{descriptor.effective_group_id}:{descriptor.artifact_id}:{descriptor.effective_version}"


def latest_stable_jar(layout: RepositoryLayout, coordinate: Coordinate) -> Path | None:
    """Newest stable version of ``coordinate`` whose jar exists on disk."""
    for version in stable_versions_desc(
        layout.version_dirs(coordinate.group_id, coordinate.artifact_id)
    ):
        path = layout.artifact_path(coordinate, version)
        if path.is_file():
            return path
    return None


def _apply_compatibility_rule(rule: object, known: str) -> str | None:
    if rule == "same":
        return known
    head, _, rest = known.partition(".")
    if rule == "platform" and head == "5" and rest:
        return f"1.{rest}"
    if rule == "jupiter" and head == "1" and rest:
        return f"5.{rest}"
    if isinstance(rule, dict):
        return rule.get(major_version(known))
    return None


class VersionResolver:
    """Turns a coordinate without a usable version into a jar on disk."""

    def __init__(self, context: VersionResolutionContext, layout: RepositoryLayout):
        self.context = context
        self.layout = layout

    def candidates(self, coordinate: Coordinate) -> Iterator[tuple[str, str]]:
        """Yield ``(tier, version)`` pairs in precedence order."""
        key = coordinate.package_key
        for tier, versions in self.context.tiers():
            if key in versions:
                yield tier, versions[key]

        known = self.context.known_versions()
        for source_key, rule in COMPATIBILITY_TABLE.get(key, []):
            if source_key in known:
                inferred = _apply_compatibility_rule(rule, known[source_key])
                if inferred:
                    yield TIER_INFERRED, inferred

        group_prefix = f"{coordinate.group_id}:"
        for other_key, version in known.items():
            if other_key != key and other_key.startswith(group_prefix):
                yield TIER_PATTERN, version
        if key in _DEFAULT_TEST_VERSIONS:
            yield TIER_PATTERN, _DEFAULT_TEST_VERSIONS[key]

    def resolve(self, coordinate: Coordinate) -> tuple[str, Path] | None:
        """Return ``(tier, jar path)`` for the first candidate whose jar exists."""
        tried: set[str] = set()
        for tier, version in self.candidates(coordinate):
            if version in tried:
                continue
            tried.add(version)
            path = self.layout.artifact_path(coordinate, version)
            if path.is_file():
                logger.debug(f"Resolved {coordinate.package_key}:{version} via {tier}")
                return tier, path
        path = latest_stable_jar(self.layout, coordinate)
        if path is not None:
            logger.debug(f"Resolved {coordinate.package_key} via latest stable: {path}")
            return TIER_LATEST, path
        return None

    def resolve_jar(self, coordinate: Coordinate) -> Path | None:
        resolved = self.resolve(coordinate)
        return resolved[1] if resolved else None
