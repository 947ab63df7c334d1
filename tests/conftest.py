"""
Root pytest configuration for jargo.

Provides fixtures for building throwaway jars and Maven-layout repositories
so no test needs network access or a JDK.
"""

import zipfile
from pathlib import Path

import pytest

from jargo.config.logging import bootstrap_logging
from jargo.config.settings import Settings

bootstrap_logging()

GSON = "com.google.code.gson:gson:2.10.1"
JUNIT = "org.junit.jupiter:junit-jupiter:5.10.0"

REPOSITORY_CONTENT = {
    GSON: {
        "com/google/gson/Gson.class": b"gson-class",
        "META-INF/MANIFEST.MF": b"Manifest-Version: 1.0\r\n\r\n",
    },
    JUNIT: {
        "org/junit/jupiter/api/Test.class": b"junit-class",
        "META-INF/services/org.junit.platform.engine.TestEngine": b"org.junit.jupiter.engine.JupiterTestEngine\n",
    },
}


def write_jar(path: Path, entries: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, 'w') as jar:
        for name, data in entries.items():
            jar.writestr(name, data)
    return path


def maven_path(root: Path, coordinate: str) -> Path:
    group, artifact, version = coordinate.split(':')
    return root / group.replace('.', '/') / artifact / version / f"{artifact}-{version}.jar"


@pytest.fixture
def jar_factory(tmp_path):
    """Return a function writing a jar with the given entries under tmp_path/jars."""
    def make(name: str, entries: dict) -> Path:
        return write_jar(tmp_path / "jars" / name, entries)
    return make


@pytest.fixture
def file_repository(tmp_path):
    """A file:// Maven repository holding gson and junit-jupiter."""
    root = tmp_path / "repo"
    for coordinate, entries in REPOSITORY_CONTENT.items():
        write_jar(maven_path(root, coordinate), entries)
    return root


@pytest.fixture
def settings(tmp_path):
    """Settings isolated from the user's ~/.jargo."""
    return Settings(home=tmp_path / "jargo-home")
