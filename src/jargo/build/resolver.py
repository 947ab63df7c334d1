"""
Dependency resolution.

Locates every declared dependency as a jar in the local cache, fetching it
from the descriptor's repositories when missing. Only the declared
dependencies are resolved; their own dependencies are not walked.
"""

import hashlib
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import List, Optional, Sequence
from urllib.parse import unquote, urlparse

import requests
from pydantic import BaseModel

from jargo.descriptor.models import KNOWN_REPOSITORIES, BuildDescriptor, Dependency, DependencyScope
from jargo.exceptions import DependencyResolutionError

logger = logging.getLogger(__name__)


class ResolvedArtifact(BaseModel):
    """A dependency located on disk."""
    dependency: Dependency
    path: Path


class ResolvedClasspath(BaseModel):
    """Resolved artifacts split by scope."""
    artifacts: List[ResolvedArtifact] = []

    @property
    def compile_classpath(self) -> List[Path]:
        return [a.path for a in self.artifacts if a.dependency.scope == DependencyScope.COMPILE]

    @property
    def runtime_classpath(self) -> List[Path]:
        # compile-scope artifacts are needed at runtime too
        return [a.path for a in self.artifacts]


class DependencyResolver(ABC):
    """Abstract base class for dependency resolvers."""

    @abstractmethod
    def resolve(self, dependency: Dependency) -> ResolvedArtifact:
        """Locate a dependency on disk.

        Raises:
            DependencyResolutionError: If the artifact cannot be located
        """
        pass


def artifact_path(dependency: Dependency, ext: str = "jar") -> str:
    """Relative path of an artifact in the Maven repository layout."""
    c = dependency.coordinate
    return f"{c.group.replace('.', '/')}/{c.artifact}/{c.version}/{c.artifact}-{c.version}.{ext}"


def repository_url(repository: str) -> str:
    """Base URL of a repository given by name or URL."""
    return KNOWN_REPOSITORIES.get(repository, repository).rstrip('/')


class MavenRepositoryResolver(DependencyResolver):
    """Resolves dependencies from Maven-layout repositories into a local cache."""

    def __init__(self, repositories: Sequence[str], cache_dir: Path,
                 timeout: float = 30.0, verify_checksums: bool = True,
                 session: Optional[requests.Session] = None):
        """
        Args:
            repositories: Repository names or URLs, in lookup order
            cache_dir: Local cache root, laid out like a Maven repository
            timeout: HTTP timeout in seconds
            verify_checksums: Compare downloads against their .sha1 sidecar
            session: requests session to use (mainly for tests)
        """
        self.repositories = list(repositories)
        self.cache_dir = Path(cache_dir)
        self.timeout = timeout
        self.verify_checksums = verify_checksums
        self._owns_session = session is None
        self.session = session or requests.Session()

    def close(self):
        """Close the HTTP session if this resolver created it."""
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def resolve(self, dependency: Dependency) -> ResolvedArtifact:
        relative = artifact_path(dependency)
        cached = self.cache_dir / relative
        if cached.is_file():
            logger.debug(f"Cache hit for {dependency.coordinate}: {cached}")
            return ResolvedArtifact(dependency=dependency, path=cached)

        candidates = [dependency.repository] if dependency.repository else self.repositories
        tried = []
        for repository in candidates:
            url = f"{repository_url(repository)}/{relative}"
            tried.append(url)
            logger.debug(f"Looking for {dependency.coordinate} at {url}")
            if self._fetch(url, cached, dependency):
                logger.info(f"Resolved {dependency.coordinate} from {repository}")
                return ResolvedArtifact(dependency=dependency, path=cached)

        raise DependencyResolutionError(
            f"Could not resolve {dependency.coordinate}: not found in any repository",
            coordinate=str(dependency.coordinate),
            tried=tried,
        )

    def _fetch(self, url: str, target: Path, dependency: Dependency) -> bool:
        """Copy url into target. Returns False when the artifact is not there."""
        content = self._read(url, dependency)
        if content is None:
            return False

        if self.verify_checksums:
            expected = self._read(f"{url}.sha1", dependency)
            if expected is not None:
                tokens = expected.decode('ascii', errors='replace').split()
                if not tokens:
                    raise DependencyResolutionError(
                        f"Empty checksum file for {dependency.coordinate} at {url}.sha1",
                        coordinate=str(dependency.coordinate),
                        tried=[url],
                    )
                expected_hash = tokens[0].lower()
                actual_hash = hashlib.sha1(content).hexdigest()
                if expected_hash != actual_hash:
                    raise DependencyResolutionError(
                        f"Checksum mismatch for {dependency.coordinate}: "
                        f"expected {expected_hash}, got {actual_hash}",
                        coordinate=str(dependency.coordinate),
                        tried=[url],
                    )

        # Write next to the target and rename so the cache never holds partial jars
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(dir=target.parent, prefix=".jargo-", suffix=".part")
        try:
            with os.fdopen(fd, 'wb') as f:
                f.write(content)
            os.replace(temp_name, target)
        except OSError as e:
            if os.path.exists(temp_name):
                os.unlink(temp_name)
            raise DependencyResolutionError(
                f"Could not store {dependency.coordinate} in {target}: {e}",
                coordinate=str(dependency.coordinate),
                tried=[url],
            ) from e
        return True

    def _read(self, url: str, dependency: Dependency) -> Optional[bytes]:
        """Read url; None when it does not exist."""
        if url.startswith("file://"):
            path = Path(unquote(urlparse(url).path))
            if not path.is_file():
                return None
            return path.read_bytes()

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise DependencyResolutionError(
                f"Could not fetch {dependency.coordinate}: {e}",
                coordinate=str(dependency.coordinate),
                tried=[url],
            ) from e

        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise DependencyResolutionError(
                f"Could not fetch {dependency.coordinate}: HTTP {response.status_code} from {url}",
                coordinate=str(dependency.coordinate),
                tried=[url],
            )
        return response.content


def resolve_classpath(descriptor: BuildDescriptor, resolver: DependencyResolver) -> ResolvedClasspath:
    """Resolve every dependency of a descriptor, in declaration order."""
    artifacts = [resolver.resolve(dependency) for dependency in descriptor.dependencies]
    return ResolvedClasspath(artifacts=artifacts)

