"""
Running a built application.
"""

import logging
import os
import shlex
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from jargo.build.gradle import find_gradle
from jargo.build.pipeline import BuildResult
from jargo.config.settings import Settings
from jargo.descriptor.models import Capability
from jargo.exceptions import JargoException

logger = logging.getLogger(__name__)


def find_java(java_home: Optional[Path] = None) -> Optional[Path]:
    java_home = java_home or os.environ.get('JAVA_HOME')
    if java_home:
        for name in ("java", "java.exe"):
            candidate = Path(java_home) / "bin" / name
            if candidate.is_file():
                return candidate
    found = shutil.which("java")
    return Path(found) if found else None


def application_command(result: BuildResult, java: Path, args: Sequence[str] = ()) -> List[str]:
    """java -jar for packaged builds, java -cp otherwise."""
    if result.archive is not None:
        return [str(java), "-jar", str(result.archive)] + list(args)

    entries = []
    if result.classes_dir is not None:
        entries.append(str(result.classes_dir))
    entries += [str(p) for p in result.classpath.runtime_classpath]
    return [str(java), "-cp", os.pathsep.join(entries), result.descriptor.main_entry_point] + list(args)


def gradle_run_command(result: BuildResult, gradle: Path, args: Sequence[str] = ()) -> List[str]:
    """gradle run, for Gradle builds that produced no archive.

    Gradle holds the dependency jars in its own cache, so only its
    application plugin knows the runtime classpath.
    """
    if not result.descriptor.has(Capability.APPLICATION):
        raise JargoException(
            "Cannot run a Gradle build without an archive unless the 'application' capability is enabled"
        )
    cmd = [str(gradle), "--quiet", "--project-dir", str(result.descriptor_path.parent), "run"]
    if args:
        cmd.append(f"--args={shlex.join(args)}")
    return cmd


def run_application(result: BuildResult, args: Sequence[str] = (), settings: Optional[Settings] = None) -> int:
    """
    Run the built application in the foreground.

    Returns:
        Exit code of the Java process

    Raises:
        JargoException: If no java (or, for Gradle builds without an archive,
            no gradle) executable can be found
    """
    settings = settings or Settings.load()
    env = None
    if result.backend == "gradle" and result.archive is None:
        gradle = find_gradle(settings)
        if gradle is None:
            raise JargoException(
                f"Gradle not found: install it or put a wrapper in {settings.gradle_wrapper_dir}"
            )
        cmd = gradle_run_command(result, gradle, args)
        if settings.java_home:
            env = dict(os.environ, JAVA_HOME=str(settings.java_home))
    else:
        java = find_java(settings.java_home)
        if java is None:
            raise JargoException("java not found: install a JDK or set JAVA_HOME")
        cmd = application_command(result, java, args)

    logger.info(f"Running {result.descriptor.main_entry_point}")
    logger.debug(f"Running: {' '.join(cmd)}")
    completed = subprocess.run(cmd, cwd=result.descriptor_path.parent, env=env)
    return completed.returncode
