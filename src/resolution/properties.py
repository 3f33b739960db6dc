#!/usr/bin/env python3
"""
Resolution of ``${property}`` placeholders declared in build descriptors.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

logger = logging.getLogger(__name__)

PROJECT_VERSION = "project.version"


class PropertyResolver:
    """Resolves Maven-style property references."""

    @staticmethod
    def placeholder_name(value: str | None) -> str | None:
        """Return ``name`` for a value of the exact form ``${name}``, else None."""
        if value and value.startswith("${") and value.endswith("}") and len(value) > 3:
            return value[2:-1]
        return None

    @classmethod
    def is_unresolved(cls, value: str | None) -> bool:
        """An unresolved placeholder counts as a missing version."""
        return not value or "${" in value

    @classmethod
    def resolve(
        cls,
        value: str | None,
        properties: Mapping[str, str],
        project_version: str | None = None,
    ) -> str | None:
        """Resolve ``value`` against ``properties``.

        Chains such as ``${a} -> ${b} -> 1.2`` are followed. A chain that comes
        back to a placeholder already seen stops and returns the original
        input, as does a name that cannot be found.
        """
        if cls.placeholder_name(value) is None:
            return value

        seen: set[str] = set()
        current = value
        while True:
            name = cls.placeholder_name(current)
            if name is None:
                return current
            if name in seen:
                logger.debug(f"Property cycle detected while resolving {value}")
                return value
            seen.add(name)

            resolved = properties.get(name)
            if resolved is None and name == PROJECT_VERSION:
                resolved = project_version
            if resolved is None:
                logger.debug(f"Could not resolve property '{name}'")
                return value
            current = resolved.strip()


def effective_properties(
    own: Mapping[str, str],
    ancestors: Iterable[Mapping[str, str]] = (),
    builtins: Mapping[str, str | None] | None = None,
) -> dict[str, str]:
    """Overlay a descriptor's properties on its ancestors' (nearest wins).

    ``ancestors`` is ordered nearest first. ``builtins`` (e.g. ``project.version``)
    only fill names that no descriptor declares.
    """
    merged: dict[str, str] = {}
    for props in reversed(list(ancestors)):
        merged.update(props)
    merged.update(own)
    for key, val in (builtins or {}).items():
        if val is not None and key not in merged:
            merged[key] = val
    return merged
