#!/usr/bin/env python3
"""
Multi-module aggregation for Maven reactor projects.
"""

from __future__ import annotations

import logging
import os
from collections import deque
from pathlib import Path

from src.config.parser_config import ParserConfigBuilder
from src.constants import MAVEN_CLASSPATH_DIRS, MAVEN_SOURCE_DIRS, POM_FILE
from src.resolution.context import ResolutionContextBuilder, VersionResolutionContext
from src.resolution.coordinates import Coordinate
from src.resolution.descriptor import DescriptorError, PomDescriptor, load_descriptor
from src.resolution.properties import PropertyResolver, effective_properties

logger = logging.getLogger(__name__)


def contribute_module_dirs(
    module_dir: Path, descriptor: PomDescriptor | None, builder: ParserConfigBuilder
) -> None:
    """Add a module's conventional build outputs, resources and source roots."""
    builder.add_existing(module_dir, MAVEN_CLASSPATH_DIRS)

    source_dirs = [module_dir.joinpath(*parts) for parts in MAVEN_SOURCE_DIRS]
    if descriptor is not None:
        if descriptor.source_directory:
            source_dirs[0] = module_dir / descriptor.source_directory
        if descriptor.test_source_directory:
            source_dirs[1] = module_dir / descriptor.test_source_directory
    for source_dir in source_dirs:
        if source_dir.is_dir():
            builder.add_sourcepath(source_dir)


class MultiModuleAggregator:
    """Folds declared submodules into one configuration and resolution context.

    Module names are resolved against the directory of the descriptor that
    declares them, starting from the project root passed in, so the process
    working directory never matters.
    """

    def __init__(self, builder: ParserConfigBuilder, context_builder: ResolutionContextBuilder):
        self.builder = builder
        self.context_builder = context_builder

    def aggregate(
        self,
        project_root: Path,
        descriptor: PomDescriptor,
        context: VersionResolutionContext,
    ) -> list[Coordinate]:
        """Process every (transitively) declared module.

        Returns the dependencies the modules declare, for classpath resolution.
        """
        project_root = Path(os.path.abspath(project_root))
        declared: list[Coordinate] = []
        visited = {project_root.resolve()}
        worklist = deque((project_root, name) for name in descriptor.modules)

        while worklist:
            base, name = worklist.popleft()
            module_dir = base / name
            if module_dir.is_file():
                # <module> may point at a descriptor file instead of a directory
                descriptor_path = module_dir
                module_dir = module_dir.parent
            else:
                descriptor_path = module_dir / POM_FILE

            key = module_dir.resolve()
            if key in visited:
                continue
            visited.add(key)

            if not descriptor_path.is_file():
                logger.warning(f"Module '{name}' has no {POM_FILE} at {module_dir}")
                self.builder.skip("module", str(module_dir), f"no {POM_FILE}")
                continue
            try:
                module = load_descriptor(descriptor_path)
            except DescriptorError as e:
                logger.warning(f"Skipping module '{name}': {e}")
                self.builder.skip("module", str(module_dir), str(e))
                continue

            logger.debug(f"Aggregating module {module.package_key} at {module_dir}")
            contribute_module_dirs(module_dir, module, self.builder)
            props = effective_properties(
                module.properties, [context.properties], module.builtin_properties()
            )
            self.context_builder.scan_descriptor(
                module, context, context.explicit, context.managed, properties=props
            )
            declared.extend(
                dep.with_version(
                    PropertyResolver.resolve(dep.version, props, module.effective_version)
                )
                for dep in module.dependencies
            )
            worklist.extend((module_dir, child) for child in module.modules)

        return declared
