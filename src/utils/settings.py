#!/usr/bin/env python3
"""
Environment-driven settings for project detection.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path

from src.constants import DEFAULT_TOOLING_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)

_FALSE_VALUES = {"0", "false", "off", "no"}


@dataclass(frozen=True)
class ResolverSettings:
    """Locations and overrides used by the detectors.

    Every field is optional; detectors fall back to conventional locations
    under the user's home directory.
    """

    maven_repo_local: Path | None = None
    m2_home: Path | None = None
    gradle_user_home: Path | None = None
    java_home: Path | None = None
    compliance_level: str | None = None
    encoding: str | None = None
    gradle_tooling: bool = True
    tooling_timeout: int = DEFAULT_TOOLING_TIMEOUT_SECONDS
    progress: bool = True
    user_home: Path = Path.home()

    def with_overrides(self, **changes) -> ResolverSettings:
        """Copy with the non-None ``changes`` applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _path_env(name: str) -> Path | None:
    value = os.getenv(name, "").strip()
    return Path(value).expanduser() if value else None


def _flag_env(name: str, default: bool) -> bool:
    value = os.getenv(name, "").strip().lower()
    if not value:
        return default
    return value not in _FALSE_VALUES


def load_settings() -> ResolverSettings:
    """Build settings after loading ``.env``.

    Real environment variables take precedence over values from the file.
    """
    from dotenv import find_dotenv, load_dotenv

    # find_dotenv so execution from a non-project CWD still picks up the repo .env
    env_path = find_dotenv(usecwd=True)
    load_dotenv(dotenv_path=env_path or None, override=False)

    timeout_raw = os.getenv("SCOUT_TOOLING_TIMEOUT", "").strip()
    try:
        timeout = int(timeout_raw) if timeout_raw else DEFAULT_TOOLING_TIMEOUT_SECONDS
    except ValueError:
        logger.warning(f"Invalid SCOUT_TOOLING_TIMEOUT '{timeout_raw}'; using default")
        timeout = DEFAULT_TOOLING_TIMEOUT_SECONDS

    return ResolverSettings(
        maven_repo_local=_path_env("MAVEN_REPO_LOCAL"),
        m2_home=_path_env("M2_HOME"),
        gradle_user_home=_path_env("GRADLE_USER_HOME"),
        java_home=_path_env("JAVA_HOME"),
        compliance_level=os.getenv("SCOUT_COMPLIANCE_LEVEL") or None,
        encoding=os.getenv("SCOUT_ENCODING") or None,
        gradle_tooling=_flag_env("SCOUT_GRADLE_TOOLING", True),
        tooling_timeout=timeout,
        progress=_flag_env("SCOUT_PROGRESS", True),
    )
