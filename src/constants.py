#!/usr/bin/env python3
"""
Centralized constants for classpath-scout.

Marker file names, repository conventions, default versions and the
annotation sets used by the test visitor live here so that detectors and
resolvers share one definition.
"""

import os

# Configuration defaults
DEFAULT_ENCODING = "UTF-8"
DEFAULT_COMPLIANCE_LEVEL = "17"

# Maven (ecosystem A)
POM_FILE = "pom.xml"
SETTINGS_FILE = "settings.xml"
DEFAULT_M2_DIR = ".m2"
DEFAULT_M2_REPOSITORY = "repository"
DEFAULT_PARENT_RELATIVE_PATH = "../pom.xml"

# Directory conventions contributed per Maven module: (relative parts, target)
MAVEN_CLASSPATH_DIRS = [
    ("target", "classes"),
    ("target", "test-classes"),
    ("src", "main", "resources"),
    ("src", "test", "resources"),
]
MAVEN_SOURCE_DIRS = [
    ("src", "main", "java"),
    ("src", "test", "java"),
]

# Gradle (ecosystem B)
GRADLE_BUILD_FILES = ["build.gradle", "build.gradle.kts"]
GRADLE_SETTINGS_FILES = ["settings.gradle", "settings.gradle.kts"]
GRADLE_WRAPPER_PROPERTIES = ("gradle", "wrapper", "gradle-wrapper.properties")
GRADLE_DEPENDENCY_DEFINITIONS = ("gradle", "scripts", "dependencyDefinitions.gradle")
GRADLE_CACHE_PARTS = (".gradle", "caches", "modules-2", "files-2.1")
DEFAULT_GRADLE_VERSION = "7.0"
# Introspection is known to work from this Gradle release onwards
MIN_TOOLING_GRADLE_VERSION = "6.0"
GRADLE_SOURCE_DIRS = [
    ("src", "main", "java"),
    ("src", "test", "java"),
]
GRADLE_RESOURCE_DIRS = [
    ("src", "main", "resources"),
    ("src", "test", "resources"),
]
GRADLE_OUTPUT_DIRS = [
    ("build", "classes", "java", "main"),
    ("build", "classes", "java", "test"),
    ("build", "resources", "main"),
    ("build", "resources", "test"),
    ("build", "classes", "main"),  # Gradle < 4
    ("build", "classes", "test"),
]
# Directories never searched for module build scripts
GRADLE_SKIP_DIRS = {"build", ".gradle", ".git", "node_modules", "out", "target", ".idea"}

# JDK libraries (first existing wins)
JDK_LIBRARY_CANDIDATES = [
    ("lib", "rt.jar"),  # Java 8 and earlier
    ("lib", "jrt-fs.jar"),
]

# Dependency scopes that contribute to the analysis classpath
CLASSPATH_SCOPES = {"compile", "provided", "test"}
DEFAULT_SCOPE = "compile"

# Version stability heuristic
UNSTABLE_VERSION_MARKERS = ("snapshot", "rc", "alpha", "beta", "m1", "m2", "cr")

# Test-framework coordinates always resolved, with their fallback versions
COMMON_TEST_DEPENDENCIES = [
    ("org.junit.jupiter", "junit-jupiter-api", "5.11.4"),
    ("org.junit.jupiter", "junit-jupiter-engine", "5.11.4"),
    ("org.junit.jupiter", "junit-jupiter-params", "5.11.4"),
    ("junit", "junit", "4.13.2"),
    ("org.testng", "testng", "7.7.1"),
    ("org.mockito", "mockito-core", "5.15.2"),
    ("org.hamcrest", "hamcrest", "3.0"),
    ("org.hamcrest", "hamcrest-core", "1.3"),
    ("org.assertj", "assertj-core", "3.26.3"),
]

# Approximate compatibility between related test libraries.
# target package key -> [(known source package key, rule)]
# rule: "same" copies the version, "platform"/"jupiter" shift between the
# JUnit Jupiter 5.x and JUnit Platform 1.x lines, a dict maps source major
# version to a fixed target version.
COMPATIBILITY_TABLE: dict[str, list[tuple[str, object]]] = {
    "org.junit.jupiter:junit-jupiter-api": [
        ("org.junit.jupiter:junit-jupiter", "same"),
        ("org.junit.jupiter:junit-jupiter-engine", "same"),
        ("org.junit.jupiter:junit-jupiter-params", "same"),
        ("org.junit:junit-bom", "same"),
        ("org.junit.platform:junit-platform-commons", "jupiter"),
    ],
    "org.junit.jupiter:junit-jupiter-engine": [
        ("org.junit.jupiter:junit-jupiter", "same"),
        ("org.junit.jupiter:junit-jupiter-api", "same"),
        ("org.junit:junit-bom", "same"),
    ],
    "org.junit.jupiter:junit-jupiter-params": [
        ("org.junit.jupiter:junit-jupiter", "same"),
        ("org.junit.jupiter:junit-jupiter-api", "same"),
        ("org.junit:junit-bom", "same"),
    ],
    "org.junit.platform:junit-platform-commons": [
        ("org.junit.jupiter:junit-jupiter-api", "platform"),
        ("org.junit.jupiter:junit-jupiter", "platform"),
    ],
    "org.hamcrest:hamcrest-core": [
        ("junit:junit", {"4": "1.3"}),
    ],
    "org.mockito:mockito-core": [
        ("org.mockito:mockito-junit-jupiter", "same"),
        ("org.mockito:mockito-inline", "same"),
    ],
    "org.mockito:mockito-junit-jupiter": [
        ("org.mockito:mockito-core", "same"),
    ],
}

# Annotation names that mark a test method (JUnit 4, JUnit 5, TestNG)
TEST_ANNOTATIONS = {
    "Test",
    "org.junit.Test",
    "org.junit.jupiter.api.Test",
    "org.testng.annotations.Test",
}

# File Processing
SUPPORTED_JAVA_EXTENSIONS = {".java"}
# Path segments marking a test source root
TEST_SEGMENTS = {"test", "tests"}

# Gradle tooling
# Environment overrides: export SCOUT_TOOLING_TIMEOUT=600 for very large builds
DEFAULT_TOOLING_TIMEOUT_SECONDS = int(os.getenv("SCOUT_TOOLING_TIMEOUT", "300"))
TOOLING_MODEL_MARKER = "SCOUT_MODEL "

# Logging
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DEFAULT_LOG_FILE = "classpath-scout.log"

