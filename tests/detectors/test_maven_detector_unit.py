#!/usr/bin/env python3

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import pytest

from src.detectors.base import ProjectDetectionError
from src.detectors.maven import MavenDetector

SETTINGS_XML = """<settings xmlns="http://maven.apache.org/SETTINGS/1.0.0">
  <localRepository>{path}</localRepository>
</settings>
"""


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_local_repository_setting_wins(settings) -> None:
    assert MavenDetector(settings).local_repository() == settings.maven_repo_local


def test_local_repository_from_m2_home_then_user_settings(settings, tmp_path: Path) -> None:
    home = tmp_path / "home"
    _write(home / ".m2" / "settings.xml", SETTINGS_XML.format(path="${user.home}/custom-repo"))
    base = replace(settings, maven_repo_local=None)

    assert MavenDetector(base).local_repository() == home / "custom-repo"

    m2_home = tmp_path / "maven"
    _write(m2_home / "conf" / "settings.xml", SETTINGS_XML.format(path=str(tmp_path / "global")))
    with_m2 = base.with_overrides(m2_home=m2_home)
    assert MavenDetector(with_m2).local_repository() == tmp_path / "global"


def test_local_repository_default(settings, tmp_path: Path) -> None:
    bare = replace(settings, maven_repo_local=None)
    assert MavenDetector(bare).local_repository() == tmp_path / "home" / ".m2" / "repository"


def test_detect_rejects_unsupported_root(settings, project_dir: Path) -> None:
    with pytest.raises(ProjectDetectionError):
        MavenDetector(settings).detect(project_dir)


def test_detect_single_module_project(settings, project_dir: Path, maven_repo, pom, dep) -> None:
    guava = maven_repo.add_jar("com.google.guava", "guava", "32.1.3-jre")
    junit = maven_repo.add_jar("junit", "junit", "4.13.2")
    _write(
        project_dir / "pom.xml",
        pom(
            properties={
                "project.build.sourceEncoding": "ISO-8859-1",
                "maven.compiler.source": "1.8",
            },
            dependencies=[
                dep("com.google.guava", "guava", "32.1.3-jre"),
                dep("org.missing", "missing", "1.0"),
            ],
        ),
    )
    (project_dir / "src" / "main" / "java").mkdir(parents=True)
    (project_dir / "src" / "test" / "java").mkdir(parents=True)
    (project_dir / "target" / "classes").mkdir(parents=True)

    config = MavenDetector(settings).detect(project_dir)

    assert config.compliance_level == "8"
    assert config.encodings == ("ISO-8859-1",)
    assert config.sourcepath == (
        str(project_dir / "src" / "main" / "java"),
        str(project_dir / "src" / "test" / "java"),
    )
    assert str(project_dir / "target" / "classes") in config.classpath
    assert str(guava) in config.classpath
    # Undeclared but always-resolved test library
    assert str(junit) in config.classpath
    skipped = {(s.kind, s.item) for s in config.skipped}
    assert ("dependency", "org.missing:missing:1.0") in skipped
    assert ("jdk", "JAVA_HOME") in skipped


def test_detect_uses_inherited_versions(settings, project_dir: Path, maven_repo, pom, dep) -> None:
    maven_repo.add_pom(
        "com.acme", "acme-parent", "3",
        pom(group_id="com.acme", artifact_id="acme-parent", version="3",
            properties={"maven.compiler.release": "21"},
            managed=[dep("org.assertj", "assertj-core", "3.24.2")]),
    )
    maven_repo.add_jar("org.assertj", "assertj-core", "3.24.2")
    maven_repo.add_jar("org.assertj", "assertj-core", "3.25.1")
    _write(
        project_dir / "pom.xml",
        pom(
            parent="<parent><groupId>com.acme</groupId><artifactId>acme-parent</artifactId>"
            "<version>3</version></parent>",
            dependencies=[dep("org.assertj", "assertj-core", scope="test")],
        ),
    )

    config = MavenDetector(settings).detect(project_dir)

    assert config.compliance_level == "21"
    jars = [Path(p).name for p in config.classpath]
    assert jars.count("assertj-core-3.24.2.jar") == 1
    assert "assertj-core-3.25.1.jar" not in jars


def test_compliance_from_compiler_plugin(settings, project_dir: Path, pom) -> None:
    plugin = (
        "<build><plugins><plugin><groupId>org.apache.maven.plugins</groupId>"
        "<artifactId>maven-compiler-plugin</artifactId>"
        "<configuration><release>17</release></configuration></plugin></plugins></build>"
    )
    _write(project_dir / "pom.xml", pom(build=plugin))
    assert MavenDetector(settings).detect(project_dir).compliance_level == "17"


def test_settings_override_descriptor_values(settings, project_dir: Path, pom) -> None:
    _write(project_dir / "pom.xml", pom(properties={"maven.compiler.source": "11"}))
    overridden = settings.with_overrides(compliance_level="21", encoding="UTF-16")
    config = MavenDetector(overridden).detect(project_dir)
    assert config.compliance_level == "21"
    assert config.encodings == ("UTF-16",)


def test_malformed_descriptor_degrades_to_conventions(settings, project_dir: Path) -> None:
    _write(project_dir / "pom.xml", "<project><dependencies></project>")
    (project_dir / "src" / "main" / "java").mkdir(parents=True)

    config = MavenDetector(settings).detect(project_dir)

    assert config.sourcepath == (str(project_dir / "src" / "main" / "java"),)
    assert config.skipped[0].kind == "descriptor"


@pytest.mark.parametrize("jar_name", ["rt.jar", "jrt-fs.jar"])
def test_jdk_library_added(settings, project_dir: Path, pom, tmp_path: Path, jar_name) -> None:
    java_home = tmp_path / "jdk"
    _write(java_home / "lib" / jar_name, "")
    _write(project_dir / "pom.xml", pom())
    config = MavenDetector(settings.with_overrides(java_home=java_home)).detect(project_dir)
    assert str(java_home / "lib" / jar_name) in config.classpath
    assert all(s.kind != "jdk" for s in config.skipped)


def test_source_encoding_placeholder_is_resolved(settings, project_dir: Path, pom) -> None:
    _write(
        project_dir / "pom.xml",
        pom(properties={"enc": "ISO-8859-1", "project.build.sourceEncoding": "${enc}"}),
    )
    assert MavenDetector(settings).detect(project_dir).encodings == ("ISO-8859-1",)


@pytest.mark.parametrize("declared", ["${undefined}", "no-such-codec"])
def test_unusable_source_encoding_falls_back_to_default(
    settings, project_dir: Path, pom, declared: str
) -> None:
    _write(project_dir / "pom.xml", pom(properties={"project.build.sourceEncoding": declared}))
    assert MavenDetector(settings).detect(project_dir).encodings == ("UTF-8",)
