#!/usr/bin/env python3
"""
Project introspection facade: configuration detection, parser creation and
test discovery for a project root.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from src.analysis.java_parser import JavaSourceParser
from src.analysis.test_visitor import TestDeclarationVisitor
from src.analysis.types import TestRecord
from src.config.parser_config import ParserConfig, SkippedItem
from src.constants import SUPPORTED_JAVA_EXTENSIONS, TEST_SEGMENTS
from src.detectors.factory import BuildToolDetectorFactory, default_factory
from src.utils.progress import progress_iter

logger = logging.getLogger(__name__)


@dataclass
class DiscoveryResult:
    records: list[TestRecord] = field(default_factory=list)
    skipped: list[SkippedItem] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "tests": [r.to_dict() for r in self.records],
            "skipped": [
                {"kind": s.kind, "item": s.item, "reason": s.reason} for s in self.skipped
            ],
        }


def _is_test_root(source_root: Path, project_root: Path) -> bool:
    """A ``test``/``tests`` segment, or a ``src/<name>Test`` source set (e.g. ``integrationTest``)."""
    try:
        parts = source_root.relative_to(project_root).parts
    except ValueError:
        return False
    for i, part in enumerate(parts):
        lowered = part.lower()
        if lowered in TEST_SEGMENTS:
            return True
        if i > 0 and parts[i - 1] == "src" and lowered.endswith("test"):
            return True
    return False


def _java_files(directory: Path) -> list[Path]:
    return sorted(
        p for p in directory.rglob("*") if p.suffix in SUPPORTED_JAVA_EXTENSIONS and p.is_file()
    )


class ProjectIntrospector:
    def __init__(self, factory: BuildToolDetectorFactory | None = None, progress: bool = True):
        self.factory = factory or default_factory()
        self.progress = progress

    def get_detected_config(self, project_root: Path | str) -> ParserConfig:
        return self.factory.detect(Path(project_root))

    def describe_config(self, project_root: Path | str) -> str:
        return self.get_detected_config(project_root).describe()

    def get_parser(
        self, project_root: Path | str, config: ParserConfig | None = None
    ) -> JavaSourceParser:
        return JavaSourceParser(config or self.get_detected_config(project_root))

    def test_files(self, project_root: Path, config: ParserConfig) -> list[Path]:
        """Java files under test source roots, falling back to ``src/test/java``."""
        files: list[Path] = []
        for entry in config.sourcepath:
            source_root = Path(entry)
            if source_root.is_dir() and _is_test_root(source_root, project_root):
                files.extend(_java_files(source_root))
        if not files:
            fallback = project_root / "src" / "test" / "java"
            if fallback.is_dir():
                logger.info(f"No test files under detected source roots; using {fallback}")
                files = _java_files(fallback)
        return list(dict.fromkeys(files))

    def get_test_cases(
        self, project_root: Path | str, config: ParserConfig | None = None
    ) -> DiscoveryResult:
        """Parse every test source file and collect public test methods.

        Files that cannot be read, decoded or parsed are skipped and recorded.
        """
        root = Path(os.path.abspath(project_root))
        config = config or self.get_detected_config(root)
        parser = self.get_parser(root, config)
        result = DiscoveryResult()

        files = self.test_files(root, config)
        logger.info(f"🔍 Scanning {len(files)} test source files")
        for java_file in progress_iter(
            files, desc="Discovering tests", unit="file", disable=not self.progress
        ):
            try:
                tree, source = parser.parse_file(java_file)
            except (OSError, UnicodeDecodeError, LookupError) as e:
                logger.warning(f"⚠️ Skipping {java_file}: {e}")
                result.skipped.append(SkippedItem("source", str(java_file), str(e)))
                continue
            visitor = TestDeclarationVisitor(java_file, source)
            result.records.extend(visitor.visit(tree.root_node))

        logger.info(f"✅ Found {len(result.records)} test methods")
        return result
