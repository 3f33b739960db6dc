#!/usr/bin/env python3
"""
Detector protocol and helpers shared by the build tool detectors.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol, runtime_checkable

from src.config.parser_config import ParserConfig, ParserConfigBuilder
from src.constants import JDK_LIBRARY_CANDIDATES
from src.utils.settings import ResolverSettings

logger = logging.getLogger(__name__)


class ProjectDetectionError(RuntimeError):
    """No detector applies to a project root."""

    def __init__(self, project_root: Path | str, message: str | None = None):
        self.project_root = str(project_root)
        super().__init__(message or f"No supported build tool found for project: {project_root}")


def normalize_compliance_level(value: str | None) -> str | None:
    """``"1.8"`` -> ``"8"``; later releases are already plain numbers."""
    if not value:
        return None
    value = value.strip()
    if value.startswith("1.") and len(value) > 2:
        return value[2:]
    return value


@runtime_checkable
class ProjectDetector(Protocol):
    name: str

    def supports(self, project_root: Path) -> bool: ...

    def detect(self, project_root: Path) -> ParserConfig: ...


class AbstractBuildToolDetector:
    """Common plumbing: settings, guard against unsupported roots, JDK libraries."""

    name = "abstract"

    def __init__(self, settings: ResolverSettings | None = None):
        self.settings = settings or ResolverSettings()

    def supports(self, project_root: Path) -> bool:
        raise NotImplementedError

    def detect(self, project_root: Path) -> ParserConfig:
        project_root = Path(os.path.abspath(project_root))
        if not self.supports(project_root):
            raise ProjectDetectionError(
                project_root, f"{self.name} detector does not support project: {project_root}"
            )
        logger.info(f"🔍 Detecting {self.name} project configuration: {project_root}")
        config = self._detect(project_root)
        logger.info(
            f"✅ {self.name}: {len(config.classpath)} classpath entries, "
            f"{len(config.sourcepath)} source roots, compliance {config.compliance_level}"
        )
        if config.skipped:
            logger.info(f"⏭️ {len(config.skipped)} items skipped during detection")
        return config

    def _detect(self, project_root: Path) -> ParserConfig:
        raise NotImplementedError

    def new_builder(
        self, encoding: str | None = None, compliance_level: str | None = None
    ) -> ParserConfigBuilder:
        """Builder seeded with descriptor values, overridden by settings."""
        builder = ParserConfigBuilder()
        if self.settings.encoding or encoding:
            builder.encoding = self.settings.encoding or encoding
        if self.settings.compliance_level or compliance_level:
            builder.compliance_level = self.settings.compliance_level or compliance_level
        return builder

    def add_jdk_libraries(self, builder: ParserConfigBuilder) -> None:
        """Add the JDK's own library jar (``rt.jar`` or ``jrt-fs.jar``) when a Java home is known."""
        java_home = self.settings.java_home
        if java_home is None:
            builder.skip("jdk", "JAVA_HOME", "not set")
            return
        for parts in JDK_LIBRARY_CANDIDATES:
            candidate = java_home.joinpath(*parts)
            if candidate.is_file():
                builder.add_classpath(candidate)
                return
        builder.skip("jdk", str(java_home), "no rt.jar or jrt-fs.jar")
