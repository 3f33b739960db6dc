#!/usr/bin/env python3
"""
Build tool detector registry.

Detectors are asked in registration order and the first one that supports a
project root wins. When a root carries marker files for more than one
ecosystem (say ``pom.xml`` next to ``build.gradle``), that order is the whole
tie-break: no attempt is made to guess which build is authoritative.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from src.config.parser_config import ParserConfig
from src.detectors.base import ProjectDetectionError, ProjectDetector
from src.detectors.gradle import GradleDetector
from src.detectors.maven import MavenDetector
from src.utils.settings import ResolverSettings

logger = logging.getLogger(__name__)


class BuildToolDetectorFactory:
    """Ordered, append-only detector registry."""

    def __init__(self, detectors: Iterable[ProjectDetector] = ()):
        self._detectors: list[ProjectDetector] = list(detectors)

    @property
    def detectors(self) -> tuple[ProjectDetector, ...]:
        return tuple(self._detectors)

    def register(self, detector: ProjectDetector) -> BuildToolDetectorFactory:
        self._detectors.append(detector)
        return self

    def find_detector(self, project_root: Path) -> ProjectDetector | None:
        for detector in self._detectors:
            if detector.supports(project_root):
                logger.debug(f"{getattr(detector, 'name', detector)} detector selected")
                return detector
        return None

    def detect(self, project_root: Path | str) -> ParserConfig:
        """Configuration from the first applicable detector.

        Raises ProjectDetectionError naming the root when none applies.
        """
        root = Path(os.path.abspath(project_root))
        detector = self.find_detector(root)
        if detector is None:
            raise ProjectDetectionError(root)
        return detector.detect(root)


def default_factory(settings: ResolverSettings | None = None) -> BuildToolDetectorFactory:
    """Maven first, then Gradle."""
    return BuildToolDetectorFactory([MavenDetector(settings), GradleDetector(settings)])
