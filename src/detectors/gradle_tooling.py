#!/usr/bin/env python3
"""
Scoped connection to Gradle for project model introspection.

Gradle is asked for its own view of the build through a temporary init script
that registers a ``scoutModel`` task in every project. Each project prints one
``SCOUT_MODEL <json>`` line with its source directories, class output
directories and resolved compile classpath.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
import subprocess
import tempfile
from dataclasses import dataclass, field
from pathlib import Path

from src.constants import DEFAULT_TOOLING_TIMEOUT_SECONDS, TOOLING_MODEL_MARKER

logger = logging.getLogger(__name__)

MODEL_TASK = "scoutModel"

INIT_SCRIPT = """
allprojects {
    tasks.register("%(task)s") {
        doLast {
            def model = [path: project.path, projectDir: project.projectDir.absolutePath,
                         sourceDirs: [], testSourceDirs: [], resourceDirs: [], outputDirs: [],
                         classpath: []]
            def sourceSets = project.extensions.findByName("sourceSets")
            if (sourceSets != null) {
                sourceSets.each { ss ->
                    def target = ss.name.toLowerCase().contains("test") ? model.testSourceDirs : model.sourceDirs
                    ss.java.srcDirs.each { target << it.absolutePath }
                    ss.resources.srcDirs.each { model.resourceDirs << it.absolutePath }
                    ss.output.classesDirs.each { model.outputDirs << it.absolutePath }
                    try {
                        ss.compileClasspath.files.each {
                            if (it.name.endsWith(".jar")) { model.classpath << it.absolutePath }
                        }
                    } catch (Exception e) {
                        logger.warn("classpath of " + ss.name + " unavailable: " + e.message)
                    }
                }
            }
            println "%(marker)s" + groovy.json.JsonOutput.toJson(model)
        }
    }
}
"""


class ToolingUnavailableError(RuntimeError):
    pass


@dataclass
class GradleProjectModel:
    """One Gradle project as reported by the build itself."""

    path: str
    project_dir: Path
    source_dirs: list[Path] = field(default_factory=list)
    test_source_dirs: list[Path] = field(default_factory=list)
    resource_dirs: list[Path] = field(default_factory=list)
    output_dirs: list[Path] = field(default_factory=list)
    classpath: list[Path] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> GradleProjectModel:
        return cls(
            path=data.get("path", ":"),
            project_dir=Path(data["projectDir"]),
            source_dirs=[Path(p) for p in data.get("sourceDirs", [])],
            test_source_dirs=[Path(p) for p in data.get("testSourceDirs", [])],
            resource_dirs=[Path(p) for p in data.get("resourceDirs", [])],
            output_dirs=[Path(p) for p in data.get("outputDirs", [])],
            classpath=[Path(p) for p in data.get("classpath", [])],
        )


def find_gradle_executable(project_root: Path) -> str | None:
    """Project wrapper first, then ``gradle`` on PATH."""
    wrapper = project_root / ("gradlew.bat" if os.name == "nt" else "gradlew")
    if wrapper.is_file():
        return str(wrapper)
    return shutil.which("gradle")


def parse_models(output: str) -> list[GradleProjectModel]:
    models = []
    for line in output.splitlines():
        if not line.startswith(TOOLING_MODEL_MARKER):
            continue
        try:
            models.append(GradleProjectModel.from_dict(json.loads(line[len(TOOLING_MODEL_MARKER) :])))
        except (ValueError, KeyError) as e:
            logger.debug(f"Ignoring malformed model line: {e}")
    return models


class GradleToolingConnection:
    """Acquire with ``with``; the temporary init script is removed on every exit path."""

    def __init__(
        self,
        project_root: Path,
        executable: str | None = None,
        timeout: int = DEFAULT_TOOLING_TIMEOUT_SECONDS,
    ):
        self.project_root = project_root
        self.executable = executable
        self.timeout = timeout
        self._workdir: Path | None = None
        self.closed = False

    def __enter__(self) -> GradleToolingConnection:
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        if self.executable is None:
            self.executable = find_gradle_executable(self.project_root)
        if self.executable is None:
            raise ToolingUnavailableError("No Gradle wrapper or gradle executable found")
        self._workdir = Path(tempfile.mkdtemp(prefix="classpath-scout-"))
        try:
            init_script = self._workdir / "scout-model.gradle"
            init_script.write_text(
                INIT_SCRIPT % {"task": MODEL_TASK, "marker": TOOLING_MODEL_MARKER},
                encoding="utf-8",
            )
        except BaseException:
            # __exit__ never runs when __enter__ fails
            self.close()
            raise
        logger.debug(f"Gradle tooling connection opened with {self.executable}")

    def models(self) -> list[GradleProjectModel]:
        if self._workdir is None or self.closed:
            raise ToolingUnavailableError("Connection is not open")
        cmd = [
            self.executable,
            "-q",
            "--console=plain",
            "--init-script",
            str(self._workdir / "scout-model.gradle"),
            MODEL_TASK,
        ]
        logger.info(f"Querying Gradle project model via: {' '.join(cmd)}")
        try:
            result = subprocess.run(
                cmd,
                cwd=self.project_root,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as e:
            raise ToolingUnavailableError(f"Gradle timed out after {self.timeout} seconds") from e
        except OSError as e:
            raise ToolingUnavailableError(f"Could not run Gradle: {e}") from e

        if result.returncode != 0:
            tail = (result.stderr or "").strip().splitlines()[-5:]
            raise ToolingUnavailableError(
                f"Gradle exited with {result.returncode}: {' | '.join(tail)}"
            )
        models = parse_models(result.stdout)
        if not models:
            raise ToolingUnavailableError("Gradle reported no project models")
        return models

    def close(self) -> None:
        if self._workdir is not None:
            shutil.rmtree(self._workdir, ignore_errors=True)
            self._workdir = None
        self.closed = True
        logger.debug("Gradle tooling connection closed")
