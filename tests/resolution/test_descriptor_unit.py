#!/usr/bin/env python3

from __future__ import annotations

from pathlib import Path

import pytest

from src.resolution.descriptor import (
    DescriptorError,
    load_descriptor,
    parse_descriptor,
    read_local_repository,
)


def test_reads_core_elements(tmp_path: Path, pom, dep) -> None:
    path = tmp_path / "pom.xml"
    path.write_text(
        pom(
            properties={"junit.version": "5.10.0", "maven.compiler.release": "21"},
            modules=["core", "web"],
            dependencies=[dep("org.junit.jupiter", "junit-jupiter-api", "${junit.version}", scope="test")],
            managed=[dep("org.slf4j", "slf4j-api", "2.0.9")],
            build="<build><sourceDirectory>src/java</sourceDirectory></build>",
        ),
        encoding="utf-8",
    )
    d = load_descriptor(path)
    assert d.package_key == "com.example:demo"
    assert d.properties["junit.version"] == "5.10.0"
    assert d.modules == ["core", "web"]
    assert [c.full_coordinate for c in d.dependencies] == [
        "org.junit.jupiter:junit-jupiter-api:${junit.version}"
    ]
    assert d.dependencies[0].scope == "test"
    assert d.managed_dependencies[0].version == "2.0.9"
    assert d.source_directory == "src/java"
    assert d.test_source_directory is None


def test_plugin_dependencies_are_not_project_dependencies(tmp_path: Path) -> None:
    content = """
    <project xmlns="http://maven.apache.org/POM/4.0.0">
      <artifactId>x</artifactId>
      <build><plugins><plugin>
        <artifactId>maven-compiler-plugin</artifactId>
        <configuration><release>11</release></configuration>
        <dependencies><dependency><groupId>p</groupId><artifactId>q</artifactId>
        <version>1</version></dependency></dependencies>
      </plugin></plugins></build>
    </project>
    """
    d = parse_descriptor(content.strip(), tmp_path / "pom.xml")
    assert d.dependencies == []
    assert d.compiler_release == "11"


def test_without_namespace_and_parent_fallbacks(tmp_path: Path) -> None:
    content = """
    <project>
      <parent>
        <groupId>com.acme</groupId><artifactId>parent</artifactId><version>7</version>
      </parent>
      <artifactId>child</artifactId>
    </project>
    """
    d = parse_descriptor(content.strip(), tmp_path / "pom.xml")
    assert d.effective_group_id == "com.acme"
    assert d.effective_version == "7"
    assert d.parent.relative_path == "../pom.xml"
    assert d.builtin_properties()["project.version"] == "7"


def test_empty_relative_path_is_kept(tmp_path: Path) -> None:
    content = (
        "<project><parent><groupId>g</groupId><artifactId>p</artifactId>"
        "<version>1</version><relativePath/></parent><artifactId>c</artifactId></project>"
    )
    d = parse_descriptor(content, tmp_path / "pom.xml")
    assert d.parent.relative_path == ""


def test_malformed_and_missing_descriptors_raise(tmp_path: Path) -> None:
    bad = tmp_path / "pom.xml"
    bad.write_text("<project><unclosed></project>", encoding="utf-8")
    with pytest.raises(DescriptorError):
        load_descriptor(bad)
    with pytest.raises(DescriptorError):
        load_descriptor(tmp_path / "missing.xml")
    with pytest.raises(DescriptorError):
        parse_descriptor("<settings/>", bad)


def test_read_local_repository_expands_user_home(tmp_path: Path) -> None:
    settings_file = tmp_path / "settings.xml"
    settings_file.write_text(
        '<settings xmlns="http://maven.apache.org/SETTINGS/1.0.0">'
        "<localRepository>${user.home}/custom-repo</localRepository></settings>",
        encoding="utf-8",
    )
    assert read_local_repository(settings_file, tmp_path / "home") == tmp_path / "home" / "custom-repo"
    assert read_local_repository(tmp_path / "absent.xml", tmp_path) is None
