"""Pydantic models for the build descriptor.

A descriptor is loaded once per build and never mutated, so every model here
is frozen.
"""

import re
from enum import Enum
from typing import FrozenSet, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from jargo.exceptions import MalformedDependencyError

_COORDINATE_SEGMENT = re.compile(r'^[^\s:]+$')

# Repository names usable without a URL
KNOWN_REPOSITORIES = {
    "central": "https://repo.maven.apache.org/maven2",
    "google": "https://maven.google.com",
}


class Capability(str, Enum):
    """Named build behaviors a descriptor can enable."""
    COMPILE = "compile"
    APPLICATION = "application"
    SHADED_PACKAGING = "shaded-packaging"


class DependencyScope(str, Enum):
    """Which classpath a dependency lands on."""
    COMPILE = "compile"  # compile and runtime
    RUNTIME_ONLY = "runtime-only"


class Coordinate(BaseModel):
    """Maven coordinate of a dependency."""
    model_config = ConfigDict(frozen=True)

    group: str
    artifact: str
    version: str

    @classmethod
    def parse(cls, text: str) -> 'Coordinate':
        """Parse 'group:artifact:version'.

        Raises:
            MalformedDependencyError: If the text does not have exactly three
                non-empty segments.
        """
        if not isinstance(text, str):
            raise MalformedDependencyError(
                f"Dependency coordinate must be a string, got {type(text).__name__}",
                coordinate=repr(text),
            )
        parts = text.strip().split(':')
        if len(parts) != 3 or not all(_COORDINATE_SEGMENT.match(p) for p in parts):
            raise MalformedDependencyError(
                f"Malformed dependency coordinate '{text}': expected group:artifact:version",
                coordinate=text,
            )
        return cls(group=parts[0], artifact=parts[1], version=parts[2])

    @property
    def key(self) -> str:
        return f"{self.group}:{self.artifact}"

    def __str__(self) -> str:
        return f"{self.group}:{self.artifact}:{self.version}"


class Dependency(BaseModel):
    """One declared dependency."""
    model_config = ConfigDict(frozen=True)

    coordinate: Coordinate
    scope: DependencyScope = DependencyScope.COMPILE
    repository: Optional[str] = None  # None means every declared repository


class PackagingParams(BaseModel):
    """Naming of the shaded archive."""
    model_config = ConfigDict(frozen=True)

    base_name: str
    classifier: str = ""
    version: str

    def archive_name(self, ext: str = "jar") -> str:
        """File name of the packaged archive.

        The classifier separator only appears when a classifier is set:
        ``hello-jvm-0.1.0.jar`` vs ``hello-jvm-0.1.0-all.jar``.
        """
        suffix = f"-{self.classifier}" if self.classifier else ""
        return f"{self.base_name}-{self.version}{suffix}.{ext}"


class BuildDescriptor(BaseModel):
    """Everything a build needs to know about a project."""
    model_config = ConfigDict(frozen=True)

    name: Optional[str] = None
    capabilities: FrozenSet[Capability] = frozenset({Capability.COMPILE, Capability.APPLICATION})
    repositories: Tuple[str, ...] = ("central",)
    dependencies: Tuple[Dependency, ...] = ()
    main_entry_point: str
    packaging: Optional[PackagingParams] = None

    def has(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def compile_dependencies(self) -> Tuple[Dependency, ...]:
        return tuple(d for d in self.dependencies if d.scope == DependencyScope.COMPILE)

    def runtime_only_dependencies(self) -> Tuple[Dependency, ...]:
        return tuple(d for d in self.dependencies if d.scope == DependencyScope.RUNTIME_ONLY)

    def archive_name(self, ext: str = "jar") -> Optional[str]:
        """Archive file name, or None when nothing gets packaged."""
        if not self.has(Capability.SHADED_PACKAGING) or self.packaging is None:
            return None
        return self.packaging.archive_name(ext)
