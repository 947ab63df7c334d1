"""
Java compilation.

Compiles src/main/java with javac and copies src/main/resources next to the
compiled classes, following the Gradle source layout.
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from jargo.exceptions import CompilationError

logger = logging.getLogger(__name__)

SOURCE_DIR = Path("src/main/java")
RESOURCE_DIR = Path("src/main/resources")


def find_javac(java_home: Optional[Path] = None) -> Optional[Path]:
    """Locate javac in java_home (or $JAVA_HOME), then on PATH."""
    java_home = java_home or os.environ.get('JAVA_HOME')
    if java_home:
        for name in ("javac", "javac.exe"):
            candidate = Path(java_home) / "bin" / name
            if candidate.is_file():
                return candidate
    found = shutil.which("javac")
    return Path(found) if found else None


class JavaCompiler:
    """Runs javac over a project's sources."""

    def __init__(self, javac: Optional[Path] = None, java_home: Optional[Path] = None):
        self.javac = javac or find_javac(java_home)

    def compile(self, project_dir: Path, classpath: Sequence[Path], output_dir: Path) -> Path:
        """
        Compile every .java file under src/main/java.

        Args:
            project_dir: Project root
            classpath: Compile classpath (compile-scope artifacts)
            output_dir: Directory receiving .class files and resources

        Returns:
            output_dir

        Raises:
            CompilationError: If javac is missing, there is nothing to compile,
                or javac reports errors
        """
        project_dir = Path(project_dir)
        sources = sorted((project_dir / SOURCE_DIR).rglob("*.java"))
        if not sources:
            raise CompilationError(f"No Java sources found under {project_dir / SOURCE_DIR}")
        if self.javac is None:
            raise CompilationError("javac not found: install a JDK or set JAVA_HOME")

        if output_dir.exists():
            shutil.rmtree(output_dir)
        output_dir.mkdir(parents=True)

        cmd = self._command(sources, classpath, output_dir)
        logger.info(f"Compiling {len(sources)} source file(s)")
        logger.debug(f"Running: {' '.join(cmd)}")

        try:
            result = subprocess.run(cmd, cwd=project_dir, capture_output=True, text=True)
        except OSError as e:
            raise CompilationError(f"Could not run {self.javac}: {e}") from e

        if result.returncode != 0:
            output = (result.stderr or '') + (result.stdout or '')
            raise CompilationError(f"javac failed with exit code {result.returncode}", output=output)
        if result.stderr:
            # warnings
            logger.warning(result.stderr.rstrip())

        self._copy_resources(project_dir / RESOURCE_DIR, output_dir)
        return output_dir

    def _command(self, sources: Sequence[Path], classpath: Sequence[Path], output_dir: Path) -> List[str]:
        cmd = [str(self.javac), "-encoding", "UTF-8", "-d", str(output_dir)]
        if classpath:
            cmd += ["-cp", os.pathsep.join(str(p) for p in classpath)]
        cmd += [str(s) for s in sources]
        return cmd

    @staticmethod
    def _copy_resources(resource_dir: Path, output_dir: Path):
        if not resource_dir.is_dir():
            return
        count = 0
        for path in resource_dir.rglob("*"):
            if path.is_file():
                destination = output_dir / path.relative_to(resource_dir)
                destination.parent.mkdir(parents=True, exist_ok=True)
                shutil.copy2(path, destination)
                count += 1
        logger.debug(f"Copied {count} resource file(s)")
