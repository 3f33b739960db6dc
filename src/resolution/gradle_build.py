#!/usr/bin/env python3
"""
Readers for Gradle build metadata.

Build scripts are not evaluated; dependency declarations are recovered with
regular expressions covering the common Groovy and Kotlin DSL notations:

- string notation: ``implementation 'g:a:v'`` / ``implementation("g:a:v")``
- map notation: ``group: 'g', name: 'a', version: 'v'``
- version catalog aliases: ``implementation(libs.some.alias)``
- ``ext`` variables, including chains such as ``apiVersion = "$coreVersion"``
"""

from __future__ import annotations

import logging
import re
import tomllib
from pathlib import Path

from src.constants import GRADLE_DEPENDENCY_DEFINITIONS, GRADLE_WRAPPER_PROPERTIES
from src.resolution.coordinates import Coordinate

logger = logging.getLogger(__name__)

_GROOVY_CONFIGS = (
    r"(?:implementation|api|compile|compileOnly|runtimeOnly|runtime|testImplementation"
    r"|testCompile|testCompileOnly|testRuntimeOnly)"
)

STANDARD_PATTERN = re.compile(
    _GROOVY_CONFIGS + r"\s*\(?\s*"
    r"['\"]([a-zA-Z0-9._-]+):([a-zA-Z0-9._-]+):([a-zA-Z0-9._\-${}]+)['\"]"
)
MAP_PATTERN = re.compile(
    _GROOVY_CONFIGS + r"\s*\(?\s*"
    r"group\s*[:=]\s*['\"]([^'\"]+)['\"]\s*,\s*"
    r"name\s*[:=]\s*['\"]([^'\"]+)['\"]\s*,\s*"
    r"version\s*[:=]\s*['\"]([^'\"]+)['\"]"
)
ALIAS_PATTERN = re.compile(_GROOVY_CONFIGS + r"\s*\(?\s*libs\.([A-Za-z0-9_.-]+)")
VARIABLE_PATTERN = re.compile(r"(?:val\s+|def\s+)?([\w.]+)\s*=\s*['\"]([^'\"]+)['\"]")
WRAPPER_VERSION_PATTERN = re.compile(r"gradle-(\d+\.\d+(?:\.\d+)?)-")
DEFINITION_PATTERN = re.compile(r"['\"]([^'\"]+)['\"]\s*:\s*['\"]([^'\"]+)['\"]")

_COMPLIANCE_PATTERNS = [
    re.compile(r"languageVersion(?:\.set\()?\s*=?\s*\(?\s*JavaLanguageVersion\.of\(\s*(\d+)\s*\)"),
    re.compile(r"sourceCompatibility\s*=\s*JavaVersion\.VERSION_(\d+(?:_\d+)?)"),
    re.compile(r"sourceCompatibility\s*=\s*['\"]?(\d+(?:\.\d+)?)['\"]?"),
    re.compile(r"release\.set\(\s*(\d+)\s*\)|options\.release\s*=\s*(\d+)"),
]


def gradle_scope(declaration: str) -> str:
    """Map a Gradle configuration name to a Maven-style scope."""
    if declaration.startswith("test"):
        return "test"
    if declaration.startswith("compileOnly"):
        return "provided"
    if declaration.startswith("runtime"):
        return "runtime"
    return "compile"


def read_wrapper_version(project_root: Path) -> str | None:
    """Gradle version from the wrapper's ``distributionUrl``, if present."""
    props = project_root.joinpath(*GRADLE_WRAPPER_PROPERTIES)
    if not props.is_file():
        return None
    try:
        content = props.read_text(encoding="utf-8")
    except OSError as e:
        logger.debug(f"Could not read {props}: {e}")
        return None
    for line in content.splitlines():
        if line.strip().startswith("distributionUrl"):
            match = WRAPPER_VERSION_PATTERN.search(line)
            if match:
                return match.group(1)
    return None


def _resolve_chain(value: str, variables: dict[str, str]) -> str:
    """Follow ``$var`` / ``${var}`` references; stops on cycles or unknown names."""
    seen: set[str] = set()
    current = value
    while current.startswith("$"):
        name = current[1:]
        if name.startswith("{") and name.endswith("}"):
            name = name[1:-1]
        for prefix in ("project.", "rootProject.", "ext."):
            if name.startswith(prefix):
                name = name[len(prefix) :]
        if name in seen or name not in variables:
            return current
        seen.add(name)
        current = variables[name]
    return current


class GradleBuildReader:
    """Collects declared dependencies and settings from a Gradle project tree."""

    def __init__(self, project_root: Path):
        self.project_root = project_root
        self.catalog_aliases: dict[str, Coordinate] = {}
        self.definitions: dict[str, Coordinate] = {}

    def load_version_catalogs(self) -> list[Coordinate]:
        """Parse ``gradle/*.toml`` version catalogs."""
        catalogs = sorted(self.project_root.glob("gradle/*.toml"))
        entries: list[Coordinate] = []
        for catalog in catalogs:
            try:
                data = tomllib.loads(catalog.read_text(encoding="utf-8"))
            except (OSError, tomllib.TOMLDecodeError) as e:
                logger.warning(f"Skipping version catalog {catalog}: {e}")
                continue
            versions = dict(data.get("versions") or {})
            for alias, lib in (data.get("libraries") or {}).items():
                coordinate = self._catalog_entry(lib, versions)
                if coordinate is None:
                    continue
                self.catalog_aliases[alias.replace("-", ".").replace("_", ".")] = coordinate
                entries.append(coordinate)
        logger.debug(f"Loaded {len(entries)} version catalog entries")
        return entries

    @staticmethod
    def _catalog_entry(lib, versions: dict) -> Coordinate | None:
        if isinstance(lib, str):
            return Coordinate.parse(lib)
        if not isinstance(lib, dict):
            return None
        group = lib.get("group")
        name = lib.get("name")
        if lib.get("module") and ":" in lib["module"]:
            group, name = lib["module"].split(":", 1)
        version = lib.get("version")
        if isinstance(version, dict) and "ref" in version:
            version = versions.get(str(version["ref"]))
        # Rich versions: { strictly = "..." } and friends
        if isinstance(version, dict):
            version = version.get("strictly") or version.get("require") or version.get("prefer")
        if not group or not name:
            return None
        return Coordinate(str(group), str(name), str(version) if version else None)

    def read_dependency_definitions(self) -> list[Coordinate]:
        """Parse ``ext.externalDependency = [...]`` in ``gradle/scripts/dependencyDefinitions.gradle``."""
        path = self.project_root.joinpath(*GRADLE_DEPENDENCY_DEFINITIONS)
        if not path.is_file():
            return []
        try:
            lines = path.read_text(encoding="utf-8").splitlines()
        except OSError as e:
            logger.warning(f"Could not read {path}: {e}")
            return []

        entries: list[Coordinate] = []
        inside = False
        for line in lines:
            line = line.strip()
            if "ext.externalDependency" in line and "[" in line:
                inside = True
                continue
            if not inside:
                continue
            if line.startswith("]"):
                break
            match = DEFINITION_PATTERN.search(line)
            if not match:
                continue
            coordinate = Coordinate.parse(match.group(2))
            if coordinate is not None:
                self.definitions[match.group(1)] = coordinate
                entries.append(coordinate)
        logger.debug(f"Parsed {len(entries)} dependency definitions from {path}")
        return entries

    @staticmethod
    def read_variables(content: str) -> dict[str, str]:
        variables: dict[str, str] = {}
        for match in VARIABLE_PATTERN.finditer(content):
            name, value = match.groups()
            variables.setdefault(name.split(".")[-1], value)
        for name, value in list(variables.items()):
            variables[name] = _resolve_chain(value, variables)
        return variables

    def read_build_script(self, path: Path, variables: dict[str, str] | None = None) -> list[Coordinate]:
        """Dependencies declared in one ``build.gradle`` / ``build.gradle.kts``.

        ``variables`` carries ``ext`` values from enclosing scripts; the
        script's own assignments take precedence.
        """
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Could not read {path}: {e}")
            return []

        scope_vars = dict(variables or {})
        scope_vars.update(self.read_variables(content))

        dependencies: list[Coordinate] = []
        for pattern in (STANDARD_PATTERN, MAP_PATTERN):
            for match in pattern.finditer(content):
                group_id, artifact_id, version = match.groups()
                version = _resolve_chain(version, scope_vars)
                if version.startswith("$"):
                    # Unresolved variable: leave the version to the resolution chain
                    version = None
                dependencies.append(
                    Coordinate(group_id, artifact_id, version, gradle_scope(match.group(0)))
                )

        for match in ALIAS_PATTERN.finditer(content):
            alias = match.group(1).rstrip(".")
            coordinate = self.catalog_aliases.get(alias) or self.catalog_aliases.get(
                alias.replace("_", ".")
            )
            if coordinate is None:
                logger.debug(f"Unknown catalog alias libs.{alias} in {path}")
                continue
            dependencies.append(
                Coordinate(
                    coordinate.group_id,
                    coordinate.artifact_id,
                    coordinate.version,
                    gradle_scope(match.group(0)),
                )
            )
        return dependencies

    @staticmethod
    def compliance_level(paths: list[Path]) -> str | None:
        """Java language level declared in any of ``paths``."""
        for path in paths:
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError):
                continue
            for pattern in _COMPLIANCE_PATTERNS:
                match = pattern.search(content)
                if not match:
                    continue
                value = next(g for g in match.groups() if g)
                value = value.replace("_", ".")
                # 1.8 -> 8
                if value.startswith("1.") and len(value) > 2:
                    value = value[2:]
                return value
        return None
