"""Shared fixtures: fake local repositories and descriptor builders.

Every fixture works under ``tmp_path``; nothing touches the real ``~/.m2`` or
``~/.gradle``.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from src.utils.settings import ResolverSettings

POM_HEADER = '<project xmlns="http://maven.apache.org/POM/4.0.0">'


def dependency_xml(group_id: str, artifact_id: str, version: str | None = None, **extra) -> str:
    parts = [f"<groupId>{group_id}</groupId>", f"<artifactId>{artifact_id}</artifactId>"]
    if version is not None:
        parts.append(f"<version>{version}</version>")
    for tag, value in extra.items():
        parts.append(f"<{tag}>{value}</{tag}>")
    return "<dependency>" + "".join(parts) + "</dependency>"


def pom_xml(
    group_id: str = "com.example",
    artifact_id: str = "demo",
    version: str | None = "1.0.0",
    dependencies: list[str] | None = None,
    managed: list[str] | None = None,
    properties: dict[str, str] | None = None,
    modules: list[str] | None = None,
    parent: str | None = None,
    build: str = "",
) -> str:
    body = ["<modelVersion>4.0.0</modelVersion>"]
    if parent:
        body.append(parent)
    if group_id:
        body.append(f"<groupId>{group_id}</groupId>")
    body.append(f"<artifactId>{artifact_id}</artifactId>")
    if version:
        body.append(f"<version>{version}</version>")
    if properties:
        body.append(
            "<properties>"
            + "".join(f"<{k}>{v}</{k}>" for k, v in properties.items())
            + "</properties>"
        )
    if modules:
        body.append("<modules>" + "".join(f"<module>{m}</module>" for m in modules) + "</modules>")
    if managed:
        body.append(
            "<dependencyManagement><dependencies>"
            + "".join(managed)
            + "</dependencies></dependencyManagement>"
        )
    if dependencies:
        body.append("<dependencies>" + "".join(dependencies) + "</dependencies>")
    if build:
        body.append(build)
    return POM_HEADER + "\n  " + "\n  ".join(body) + "\n</project>\n"


class FakeMavenRepository:
    """A local repository laid out the Maven way under ``root``."""

    def __init__(self, root: Path):
        self.root = root
        root.mkdir(parents=True, exist_ok=True)

    def version_dir(self, group_id: str, artifact_id: str, version: str) -> Path:
        return self.root.joinpath(*group_id.split("."), artifact_id, version)

    def add_jar(self, group_id: str, artifact_id: str, version: str) -> Path:
        path = self.version_dir(group_id, artifact_id, version) / f"{artifact_id}-{version}.jar"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"PK\x03\x04")
        return path

    def add_pom(self, group_id: str, artifact_id: str, version: str, content: str) -> Path:
        path = self.version_dir(group_id, artifact_id, version) / f"{artifact_id}-{version}.pom"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path


class FakeGradleCache:
    """A ``files-2.1`` cache: dotted group directory plus a hash directory per file."""

    def __init__(self, root: Path):
        self.root = root
        root.mkdir(parents=True, exist_ok=True)

    def add_jar(self, group_id: str, artifact_id: str, version: str, digest: str = "0a1b2c") -> Path:
        path = self.root / group_id / artifact_id / version / digest / f"{artifact_id}-{version}.jar"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"PK\x03\x04")
        return path


@pytest.fixture
def maven_repo(tmp_path: Path) -> FakeMavenRepository:
    return FakeMavenRepository(tmp_path / "m2" / "repository")


@pytest.fixture
def gradle_cache(tmp_path: Path) -> FakeGradleCache:
    return FakeGradleCache(tmp_path / "gradle-home" / "caches" / "modules-2" / "files-2.1")


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def settings(tmp_path: Path, maven_repo: FakeMavenRepository) -> ResolverSettings:
    """Settings pointing every lookup into ``tmp_path``."""
    return ResolverSettings(
        maven_repo_local=maven_repo.root,
        gradle_user_home=tmp_path / "gradle-home",
        user_home=tmp_path / "home",
        gradle_tooling=False,
        progress=False,
    )


@pytest.fixture
def pom():
    """Builder for ``pom.xml`` content (see ``pom_xml``)."""
    return pom_xml


@pytest.fixture
def dep():
    """Builder for a ``<dependency>`` element (see ``dependency_xml``)."""
    return dependency_xml
