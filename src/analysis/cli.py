#!/usr/bin/env python3

import argparse
import json
import logging
import sys
from pathlib import Path

from src.analysis.test_discovery import ProjectIntrospector
from src.detectors.base import ProjectDetectionError
from src.detectors.factory import default_factory
from src.utils.common import add_common_args, setup_logging
from src.utils.settings import load_settings

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Resolve classpath, sourcepath and test methods of a Java project"
    )
    add_common_args(parser)
    parser.add_argument("project_root", help="Root directory of the Maven or Gradle project")
    parser.add_argument(
        "--tests",
        action="store_true",
        help="Also discover public test methods in test source roots",
    )
    parser.add_argument("--json", action="store_true", help="Print results as JSON")
    parser.add_argument("--maven-repo", help="Override the local Maven repository location")
    parser.add_argument(
        "--compliance-level", help="Override the detected Java compliance level (e.g. 17)"
    )
    parser.add_argument(
        "--no-gradle-tooling",
        action="store_true",
        help="Skip Gradle introspection and use filesystem conventions only",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    settings = load_settings().with_overrides(
        maven_repo_local=Path(args.maven_repo).expanduser() if args.maven_repo else None,
        compliance_level=args.compliance_level,
        gradle_tooling=False if args.no_gradle_tooling else None,
    )
    introspector = ProjectIntrospector(default_factory(settings), progress=settings.progress)
    project_root = Path(args.project_root)

    try:
        config = introspector.get_detected_config(project_root)
        discovery = introspector.get_test_cases(project_root, config) if args.tests else None
    except ProjectDetectionError as e:
        logger.error(f"❌ {e}")
        return 1

    if args.json:
        payload = {"config": config.to_dict()}
        if discovery is not None:
            payload.update(discovery.to_dict())
        print(json.dumps(payload, indent=2))
        return 0

    print(config.describe())
    if discovery is not None:
        print(f"\nTest methods ({len(discovery.records)}):")
        for record in discovery.records:
            print(f"  {record.class_name}#{record.method_name}  {record.absolute_path}")
        for item in discovery.skipped:
            print(f"  skipped {item}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
