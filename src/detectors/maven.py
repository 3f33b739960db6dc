#!/usr/bin/env python3
"""
Maven project detection.
"""

from __future__ import annotations

import codecs
import logging
from pathlib import Path

from src.config.parser_config import ParserConfig
from src.constants import DEFAULT_M2_DIR, DEFAULT_M2_REPOSITORY, POM_FILE, SETTINGS_FILE
from src.detectors.base import AbstractBuildToolDetector, normalize_compliance_level
from src.resolution.context import (
    ResolutionContextBuilder,
    VersionResolutionContext,
    VersionResolver,
)
from src.resolution.dependencies import ClasspathResolver
from src.resolution.descriptor import (
    DescriptorError,
    PomDescriptor,
    load_descriptor,
    read_local_repository,
)
from src.resolution.layout import MavenRepositoryLayout
from src.resolution.modules import MultiModuleAggregator, contribute_module_dirs
from src.resolution.properties import PropertyResolver
from src.utils.progress import progress_iter

logger = logging.getLogger(__name__)


class MavenDetector(AbstractBuildToolDetector):
    name = "Maven"

    def supports(self, project_root: Path) -> bool:
        return (Path(project_root) / POM_FILE).is_file()

    def local_repository(self) -> Path:
        """Local repository root.

        Order: explicit setting, ``$M2_HOME/conf/settings.xml``,
        ``~/.m2/settings.xml``, then ``~/.m2/repository``.
        """
        if self.settings.maven_repo_local is not None:
            return self.settings.maven_repo_local

        user_home = self.settings.user_home
        candidates = []
        if self.settings.m2_home is not None:
            candidates.append(self.settings.m2_home / "conf" / SETTINGS_FILE)
        candidates.append(user_home / DEFAULT_M2_DIR / SETTINGS_FILE)
        for settings_file in candidates:
            if settings_file.is_file():
                repository = read_local_repository(settings_file, user_home)
                if repository is not None:
                    logger.debug(f"Local repository from {settings_file}: {repository}")
                    return repository
        return user_home / DEFAULT_M2_DIR / DEFAULT_M2_REPOSITORY

    @staticmethod
    def source_encoding(context: VersionResolutionContext) -> str | None:
        """``project.build.sourceEncoding`` when it resolves to a known codec."""
        raw = context.properties.get("project.build.sourceEncoding")
        value = PropertyResolver.resolve(raw, context.properties, context.project_version)
        if PropertyResolver.is_unresolved(value):
            return None
        value = value.strip()
        try:
            codecs.lookup(value)
        except LookupError:
            logger.warning(f"⚠️ Unknown source encoding '{value}'; using the default")
            return None
        return value

    @staticmethod
    def compliance_level(
        descriptor: PomDescriptor, context: VersionResolutionContext
    ) -> str | None:
        props = context.properties
        for raw in (
            props.get("maven.compiler.release"),
            props.get("maven.compiler.source"),
            descriptor.compiler_release,
            descriptor.compiler_source,
        ):
            value = PropertyResolver.resolve(raw, props, context.project_version)
            if not PropertyResolver.is_unresolved(value):
                return normalize_compliance_level(value)
        return None

    def _detect(self, project_root: Path) -> ParserConfig:
        layout = MavenRepositoryLayout(self.local_repository())
        pom = project_root / POM_FILE
        try:
            descriptor = load_descriptor(pom)
        except DescriptorError as e:
            logger.warning(f"⚠️ {e}; falling back to directory conventions")
            builder = self.new_builder()
            builder.skip("descriptor", str(pom), str(e))
            contribute_module_dirs(project_root, None, builder)
            self.add_jdk_libraries(builder)
            return builder.build()

        context_builder = ResolutionContextBuilder(layout)
        context = context_builder.build(descriptor, project_root)
        builder = self.new_builder(
            encoding=self.source_encoding(context),
            compliance_level=self.compliance_level(descriptor, context),
        )

        contribute_module_dirs(project_root, descriptor, builder)
        module_dependencies = MultiModuleAggregator(builder, context_builder).aggregate(
            project_root, descriptor, context
        )

        resolver = ClasspathResolver(layout, VersionResolver(context, layout), builder)
        declared = descriptor.dependencies + module_dependencies
        for path in resolver.resolve_all(
            progress_iter(
                declared,
                desc="Resolving dependencies",
                unit="dep",
                disable=not self.settings.progress,
            )
        ):
            builder.add_classpath(path)
        for path in resolver.resolve_common_test_dependencies():
            builder.add_classpath(path)

        self.add_jdk_libraries(builder)
        builder.extend_skipped(context.skipped)
        return builder.build()
