"""
Shaded archive packaging.

Assembles the compiled classes and every runtime dependency into a single
executable jar. The archive is written to a temporary file and renamed into
place, so it either exists complete or not at all.
"""

import logging
import os
import tempfile
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List

from pydantic import BaseModel

from jargo import __version__
from jargo.descriptor.models import PackagingParams
from jargo.exceptions import PackagingError

logger = logging.getLogger(__name__)

MANIFEST_PATH = "META-INF/MANIFEST.MF"
SERVICES_PREFIX = "META-INF/services/"
SIGNATURE_SUFFIXES = (".SF", ".DSA", ".RSA", ".EC")


class PackagingRequest(BaseModel):
    """Everything the packager needs from the build."""
    params: PackagingParams
    main_entry_point: str
    classes_dir: Path
    artifacts: List[Path] = []
    output_dir: Path

    @property
    def archive_path(self) -> Path:
        return self.output_dir / self.params.archive_name()


class Packager(ABC):
    """Abstract base class for packagers."""

    @abstractmethod
    def package(self, request: PackagingRequest) -> Path:
        """Build the archive and return its path.

        Raises:
            PackagingError: If the archive cannot be produced
        """
        pass


def build_manifest(main_entry_point: str) -> str:
    lines = [
        "Manifest-Version: 1.0",
        f"Main-Class: {main_entry_point}",
        f"Created-By: jargo {__version__}",
    ]
    # Manifests use CRLF and must end with a blank line
    return "\r\n".join(lines) + "\r\n\r\n"


def _is_dropped(name: str) -> bool:
    """Entries never copied from dependency jars."""
    upper = name.upper()
    if upper == MANIFEST_PATH:
        return True
    return upper.startswith("META-INF/") and upper.endswith(SIGNATURE_SUFFIXES)


class ShadedJarPackager(Packager):
    """Merges classes and dependency jars into one fat jar."""

    def package(self, request: PackagingRequest) -> Path:
        target = request.archive_path
        logger.info(f"Packaging {target.name}")

        try:
            request.output_dir.mkdir(parents=True, exist_ok=True)
            fd, temp_name = tempfile.mkstemp(dir=request.output_dir, prefix=".jargo-", suffix=".part")
            os.close(fd)
        except OSError as e:
            raise PackagingError(f"Could not prepare {request.output_dir}: {e}") from e

        try:
            with zipfile.ZipFile(temp_name, 'w', compression=zipfile.ZIP_DEFLATED) as archive:
                self._write(archive, request)
            os.replace(temp_name, target)
        except (OSError, ValueError, zipfile.BadZipFile) as e:
            raise PackagingError(f"Could not package {target.name}: {e}") from e
        finally:
            if os.path.exists(temp_name):
                os.unlink(temp_name)

        logger.info(f"Packaged {target}")
        return target

    def _write(self, archive: zipfile.ZipFile, request: PackagingRequest):
        archive.writestr(MANIFEST_PATH, build_manifest(request.main_entry_point))
        written = {MANIFEST_PATH}
        services: Dict[str, List[bytes]] = {}

        classes_dir = request.classes_dir
        if classes_dir.is_dir():
            for path in sorted(classes_dir.rglob("*")):
                if not path.is_file():
                    continue
                name = path.relative_to(classes_dir).as_posix()
                if name.startswith(SERVICES_PREFIX):
                    services.setdefault(name, []).append(path.read_bytes())
                elif name not in written:
                    archive.write(path, name)
                    written.add(name)

        for artifact in request.artifacts:
            logger.debug(f"Merging {artifact}")
            with zipfile.ZipFile(artifact) as dependency:
                for info in dependency.infolist():
                    name = info.filename
                    if info.is_dir() or _is_dropped(name):
                        continue
                    if name.startswith(SERVICES_PREFIX):
                        services.setdefault(name, []).append(dependency.read(info))
                    elif name not in written:
                        archive.writestr(info, dependency.read(info))
                        written.add(name)
                    else:
                        logger.debug(f"Skipping duplicate {name} from {artifact.name}")

        for name, parts in services.items():
            lines = []
            for part in parts:
                for line in part.decode('utf-8').splitlines():
                    line = line.strip()
                    if line and line not in lines:
                        lines.append(line)
            archive.writestr(name, "\n".join(lines) + "\n")
