#!/usr/bin/env python3
"""
Maven POM descriptor reading.

Only the element and property lookups the resolver needs are exposed; XML
tokenization is left to ``xml.etree.ElementTree``.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass, field
from pathlib import Path

from src.constants import DEFAULT_PARENT_RELATIVE_PATH, DEFAULT_SCOPE
from src.resolution.coordinates import Coordinate

logger = logging.getLogger(__name__)


class DescriptorError(ValueError):
    pass


@dataclass(frozen=True)
class ParentRef:
    group_id: str
    artifact_id: str
    version: str | None
    relative_path: str = DEFAULT_PARENT_RELATIVE_PATH

    @property
    def package_key(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"


@dataclass
class PomDescriptor:
    """The parts of a ``pom.xml`` relevant to classpath resolution."""

    path: Path
    group_id: str | None
    artifact_id: str | None
    version: str | None
    packaging: str = "jar"
    parent: ParentRef | None = None
    properties: dict[str, str] = field(default_factory=dict)
    modules: list[str] = field(default_factory=list)
    dependencies: list[Coordinate] = field(default_factory=list)
    managed_dependencies: list[Coordinate] = field(default_factory=list)
    source_directory: str | None = None
    test_source_directory: str | None = None
    compiler_release: str | None = None
    compiler_source: str | None = None

    @property
    def directory(self) -> Path:
        return self.path.parent

    @property
    def package_key(self) -> str:
        return f"{self.group_id}:{self.artifact_id}"

    @property
    def effective_group_id(self) -> str | None:
        return self.group_id or (self.parent.group_id if self.parent else None)

    @property
    def effective_version(self) -> str | None:
        return self.version or (self.parent.version if self.parent else None)

    def builtin_properties(self) -> dict[str, str | None]:
        return {
            "project.version": self.effective_version,
            "version": self.effective_version,
            "project.groupId": self.effective_group_id,
            "project.artifactId": self.artifact_id,
            "project.parent.version": self.parent.version if self.parent else None,
            "project.parent.groupId": self.parent.group_id if self.parent else None,
        }


def _namespace(root: ET.Element) -> str:
    if root.tag.startswith("{"):
        return root.tag.split("}")[0][1:]
    return ""


class _PomReader:
    def __init__(self, root: ET.Element):
        self.root = root
        self.ns = _namespace(root)

    def q(self, path: str) -> str:
        if not self.ns:
            return path
        return "/".join(f"{{{self.ns}}}{part}" for part in path.split("/"))

    def text(self, element: ET.Element | None, path: str) -> str | None:
        if element is None:
            return None
        found = element.find(self.q(path))
        if found is None or found.text is None:
            return None
        value = found.text.strip()
        return value or None

    def local_name(self, element: ET.Element) -> str:
        return element.tag.split("}")[-1] if "}" in element.tag else element.tag

    def dependency(self, element: ET.Element) -> Coordinate | None:
        group_id = self.text(element, "groupId")
        artifact_id = self.text(element, "artifactId")
        if not group_id or not artifact_id:
            return None
        return Coordinate(
            group_id=group_id,
            artifact_id=artifact_id,
            version=self.text(element, "version"),
            scope=self.text(element, "scope") or DEFAULT_SCOPE,
            type=self.text(element, "type") or "jar",
        )

    def dependencies(self, path: str) -> list[Coordinate]:
        parsed = []
        for element in self.root.findall(self.q(path)):
            dep = self.dependency(element)
            if dep is not None:
                parsed.append(dep)
        return parsed


def parse_descriptor(content: str | bytes, path: Path) -> PomDescriptor:
    """Parse POM ``content``; ``path`` locates the descriptor on disk."""
    try:
        root = ET.fromstring(content)
    except ET.ParseError as e:
        raise DescriptorError(f"Malformed descriptor {path}: {e}") from e

    reader = _PomReader(root)
    if reader.local_name(root) != "project":
        raise DescriptorError(f"Not a POM (root element <{reader.local_name(root)}>): {path}")

    parent = None
    parent_el = root.find(reader.q("parent"))
    if parent_el is not None:
        p_group = reader.text(parent_el, "groupId")
        p_artifact = reader.text(parent_el, "artifactId")
        if p_group and p_artifact:
            rel = parent_el.find(reader.q("relativePath"))
            relative_path = DEFAULT_PARENT_RELATIVE_PATH
            if rel is not None:
                # An explicit empty <relativePath/> disables the filesystem lookup
                relative_path = (rel.text or "").strip()
            parent = ParentRef(p_group, p_artifact, reader.text(parent_el, "version"), relative_path)

    properties: dict[str, str] = {}
    props_el = root.find(reader.q("properties"))
    if props_el is not None:
        for prop in props_el:
            if not isinstance(prop.tag, str) or prop.text is None:
                continue
            properties[reader.local_name(prop)] = prop.text.strip()

    modules = [
        m.text.strip() for m in root.findall(reader.q("modules/module")) if m.text and m.text.strip()
    ]

    compiler_release = compiler_source = None
    for plugin in root.findall(reader.q("build/plugins/plugin")):
        if reader.text(plugin, "artifactId") == "maven-compiler-plugin":
            config = plugin.find(reader.q("configuration"))
            compiler_release = reader.text(config, "release")
            compiler_source = reader.text(config, "source")
            break

    build_el = root.find(reader.q("build"))
    return PomDescriptor(
        path=path,
        group_id=reader.text(root, "groupId"),
        artifact_id=reader.text(root, "artifactId"),
        version=reader.text(root, "version"),
        packaging=reader.text(root, "packaging") or "jar",
        parent=parent,
        properties=properties,
        modules=modules,
        dependencies=reader.dependencies("dependencies/dependency"),
        managed_dependencies=reader.dependencies("dependencyManagement/dependencies/dependency"),
        source_directory=reader.text(build_el, "sourceDirectory"),
        test_source_directory=reader.text(build_el, "testSourceDirectory"),
        compiler_release=compiler_release,
        compiler_source=compiler_source,
    )


def load_descriptor(path: Path) -> PomDescriptor:
    """Read and parse ``path``; raises DescriptorError when unreadable or malformed."""
    try:
        content = path.read_bytes()
    except OSError as e:
        raise DescriptorError(f"Cannot read descriptor {path}: {e}") from e
    logger.debug(f"Parsing descriptor: {path}")
    return parse_descriptor(content, path)


def read_local_repository(settings_file: Path, user_home: Path) -> Path | None:
    """Return ``<localRepository>`` from a Maven ``settings.xml``, if declared."""
    try:
        root = ET.parse(settings_file).getroot()
    except (OSError, ET.ParseError) as e:
        logger.debug(f"Could not read {settings_file}: {e}")
        return None
    reader = _PomReader(root)
    value = reader.text(root, "localRepository")
    if not value:
        return None
    value = value.replace("${user.home}", str(user_home))
    return Path(value).expanduser()
