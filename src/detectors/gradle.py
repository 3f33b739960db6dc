#!/usr/bin/env python3
"""
Gradle project detection.

Two strategies feed one configuration:

1. Introspection: ask Gradle itself for its project models. Only attempted
   when the wrapper's Gradle version is at least ``MIN_TOOLING_GRADLE_VERSION``
   and tooling is enabled; any failure is logged and ignored.
2. Filesystem conventions: always run, even after a successful
   introspection, so that unbuilt modules and declared-but-unresolved
   dependencies still contribute.

Entries are de-duplicated by absolute path.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path

from packaging.version import InvalidVersion, Version

from src.config.parser_config import ParserConfig, ParserConfigBuilder
from src.constants import (
    COMMON_TEST_DEPENDENCIES,
    DEFAULT_GRADLE_VERSION,
    GRADLE_BUILD_FILES,
    GRADLE_CACHE_PARTS,
    GRADLE_OUTPUT_DIRS,
    GRADLE_RESOURCE_DIRS,
    GRADLE_SETTINGS_FILES,
    GRADLE_SKIP_DIRS,
    GRADLE_SOURCE_DIRS,
    MIN_TOOLING_GRADLE_VERSION,
)
from src.detectors.base import AbstractBuildToolDetector, normalize_compliance_level
from src.detectors.gradle_tooling import GradleToolingConnection, ToolingUnavailableError
from src.resolution.context import VersionResolutionContext, VersionResolver
from src.resolution.coordinates import Coordinate
from src.resolution.dependencies import ClasspathResolver
from src.resolution.gradle_build import GradleBuildReader, read_wrapper_version
from src.resolution.layout import GradleCacheLayout
from src.utils.progress import progress_iter
from src.utils.settings import ResolverSettings

logger = logging.getLogger(__name__)

ConnectionFactory = Callable[[Path, ResolverSettings], GradleToolingConnection]


def default_connection_factory(
    project_root: Path, settings: ResolverSettings
) -> GradleToolingConnection:
    return GradleToolingConnection(project_root, timeout=settings.tooling_timeout)


def is_tooling_compatible(gradle_version: str) -> bool:
    """True when ``gradle_version`` is at or above the introspection threshold."""
    try:
        return Version(gradle_version) >= Version(MIN_TOOLING_GRADLE_VERSION)
    except InvalidVersion:
        logger.debug(f"Unparsable Gradle version '{gradle_version}'; skipping introspection")
        return False


class GradleDetector(AbstractBuildToolDetector):
    name = "Gradle"

    def __init__(
        self,
        settings: ResolverSettings | None = None,
        connection_factory: ConnectionFactory | None = None,
    ):
        super().__init__(settings)
        self.connection_factory = connection_factory or default_connection_factory

    def supports(self, project_root: Path) -> bool:
        root = Path(project_root)
        return any((root / name).is_file() for name in GRADLE_BUILD_FILES + GRADLE_SETTINGS_FILES)

    def gradle_version(self, project_root: Path) -> str:
        version = read_wrapper_version(project_root)
        if version is None:
            logger.debug(f"No Gradle wrapper version found; assuming {DEFAULT_GRADLE_VERSION}")
            return DEFAULT_GRADLE_VERSION
        return version

    def cache_layouts(self, project_root: Path) -> list[GradleCacheLayout]:
        """Project-local cache first, then the user's Gradle home."""
        gradle_home = self.settings.gradle_user_home or self.settings.user_home / ".gradle"
        roots = [
            project_root.joinpath(*GRADLE_CACHE_PARTS),
            gradle_home.joinpath(*GRADLE_CACHE_PARTS[1:]),
        ]
        return [GradleCacheLayout(root) for root in roots if root.is_dir()]

    @staticmethod
    def discover_modules(project_root: Path) -> list[Path]:
        """Every directory holding a build script; the root is always included."""
        modules = [project_root]
        for dirpath, dirnames, filenames in os.walk(project_root):
            dirnames[:] = sorted(d for d in dirnames if d not in GRADLE_SKIP_DIRS)
            current = Path(dirpath)
            if current != project_root and any(name in filenames for name in GRADLE_BUILD_FILES):
                modules.append(current)
        return modules

    def _detect(self, project_root: Path) -> ParserConfig:
        module_dirs = self.discover_modules(project_root)
        build_files = [
            module_dir / name
            for module_dir in module_dirs
            for name in GRADLE_BUILD_FILES
            if (module_dir / name).is_file()
        ]
        builder = self.new_builder(
            compliance_level=normalize_compliance_level(
                GradleBuildReader.compliance_level(build_files)
            )
        )

        gradle_version = self.gradle_version(project_root)
        if not self.settings.gradle_tooling:
            logger.info("Gradle introspection disabled by settings")
        elif is_tooling_compatible(gradle_version):
            logger.info(f"Using Gradle introspection for version {gradle_version}")
            self.add_tooling_details(project_root, builder)
        else:
            logger.info(
                f"Gradle version {gradle_version} not compatible with introspection, "
                "using filesystem detection"
            )
            builder.skip("tooling", gradle_version, f"below {MIN_TOOLING_GRADLE_VERSION}")

        for module_dir in module_dirs:
            self.add_filesystem_details(module_dir, builder)
        self.add_declared_dependencies(project_root, build_files, builder)
        self.add_jdk_libraries(builder)
        return builder.build()

    def add_tooling_details(self, project_root: Path, builder: ParserConfigBuilder) -> None:
        try:
            with self.connection_factory(project_root, self.settings) as connection:
                models = connection.models()
        except (ToolingUnavailableError, OSError) as e:
            logger.warning(f"⚠️ Gradle introspection failed: {e}; falling back to filesystem")
            builder.skip("tooling", str(project_root), str(e))
            return

        logger.debug(f"Gradle reported {len(models)} projects")
        for model in models:
            for source_dir in model.source_dirs + model.test_source_dirs:
                if source_dir.is_dir():
                    builder.add_sourcepath(source_dir)
            for directory in model.output_dirs + model.resource_dirs:
                if directory.is_dir():
                    builder.add_classpath(directory)
            for jar in model.classpath:
                if jar.is_file():
                    builder.add_classpath(jar)
                else:
                    builder.skip("dependency", str(jar), "reported by Gradle but missing")

    @staticmethod
    def add_filesystem_details(module_dir: Path, builder: ParserConfigBuilder) -> None:
        builder.add_existing(module_dir, GRADLE_SOURCE_DIRS, sourcepath=True)
        builder.add_existing(module_dir, GRADLE_RESOURCE_DIRS)
        builder.add_existing(module_dir, GRADLE_OUTPUT_DIRS)
        libs = module_dir / "build" / "libs"
        if libs.is_dir():
            for jar in sorted(libs.glob("*.jar")):
                builder.add_classpath(jar)

    def add_declared_dependencies(
        self, project_root: Path, build_files: list[Path], builder: ParserConfigBuilder
    ) -> None:
        """Resolve build-script dependencies against the Gradle caches."""
        reader = GradleBuildReader(project_root)
        context = VersionResolutionContext()
        for coordinate in reader.load_version_catalogs() + reader.read_dependency_definitions():
            if coordinate.has_literal_version:
                context.record(context.managed, coordinate.package_key, coordinate.version)

        root_variables: dict[str, str] = {}
        declared: list[Coordinate] = []
        for build_file in build_files:
            if build_file.parent == project_root:
                try:
                    root_variables.update(
                        reader.read_variables(build_file.read_text(encoding="utf-8"))
                    )
                except (OSError, UnicodeDecodeError) as e:
                    logger.debug(f"Could not read {build_file}: {e}")
        for build_file in build_files:
            declared.extend(reader.read_build_script(build_file, root_variables))
        for coordinate in declared:
            if coordinate.has_literal_version:
                context.record(context.explicit, coordinate.package_key, coordinate.version)
        logger.debug(f"Found {len(declared)} declared Gradle dependencies")

        layouts = self.cache_layouts(project_root)
        if not layouts:
            builder.skip("repository", "gradle cache", "no Gradle cache directory found")
            return
        resolvers = [
            ClasspathResolver(layout, VersionResolver(context, layout)) for layout in layouts
        ]

        for coordinate in progress_iter(
            declared, desc="Resolving dependencies", unit="dep", disable=not self.settings.progress
        ):
            path = next(
                (p for p in (r.resolve(coordinate) for r in resolvers) if p is not None), None
            )
            if path is None:
                builder.skip("dependency", coordinate.full_coordinate, "not in Gradle caches")
            else:
                builder.add_classpath(path)

        for group_id, artifact_id, _default in COMMON_TEST_DEPENDENCIES:
            coordinate = Coordinate(group_id, artifact_id, scope="test")
            for resolver in resolvers:
                path = resolver.version_resolver.resolve_jar(coordinate)
                if path is not None:
                    builder.add_classpath(path)
                    break
