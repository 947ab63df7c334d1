"""
Gradle interop.

Renders the descriptor as Gradle Kotlin DSL files and drives a Gradle build
with them (the 'gradle' backend).
"""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import List, Optional

from jargo.config.settings import Settings
from jargo.descriptor.models import BuildDescriptor, Capability, DependencyScope
from jargo.exceptions import CompilationError, PackagingError

logger = logging.getLogger(__name__)

SHADOW_PLUGIN_VERSION = "8.1.1"
SETTINGS_FILE = "settings.gradle.kts"
BUILD_FILE = "build.gradle.kts"

_GRADLE_SCOPES = {
    DependencyScope.COMPILE: "implementation",
    DependencyScope.RUNTIME_ONLY: "runtimeOnly",
}

_GRADLE_REPOSITORIES = {
    "central": "mavenCentral()",
    "google": "google()",
}


def render_settings(descriptor: BuildDescriptor, project_dir: Optional[Path] = None) -> str:
    """settings.gradle.kts; the root project name falls back to the directory name."""
    name = descriptor.name or (Path(project_dir).resolve().name if project_dir else "app")
    return f"rootProject.name = {_quote(name)}\n"


def render_build_script(descriptor: BuildDescriptor) -> str:
    """build.gradle.kts equivalent of the descriptor."""
    shaded = descriptor.has(Capability.SHADED_PACKAGING) and descriptor.packaging is not None

    plugins = []
    if descriptor.has(Capability.COMPILE):
        plugins.append("    java")
    if descriptor.has(Capability.APPLICATION):
        plugins.append("    application")
    if shaded:
        plugins.append(f'    id("com.github.johnrengelman.shadow") version {_quote(SHADOW_PLUGIN_VERSION)}')

    repositories = [f"    {_render_repository(r)}" for r in descriptor.repositories]
    dependencies = [
        f"    {_GRADLE_SCOPES[d.scope]}({_quote(str(d.coordinate))})" for d in descriptor.dependencies
    ]

    sections = [
        _block("plugins", plugins),
        _block("repositories", repositories),
        _block("dependencies", dependencies),
    ]
    if descriptor.has(Capability.APPLICATION):
        sections.append(_block("application", [f"    mainClass.set({_quote(descriptor.main_entry_point)})"]))
    if shaded:
        packaging = descriptor.packaging
        sections.append(_block("tasks", [
            '    named<com.github.jengelman.gradle.plugins.shadow.tasks.ShadowJar>("shadowJar") {',
            f"        archiveBaseName.set({_quote(packaging.base_name)})",
            f"        archiveClassifier.set({_quote(packaging.classifier)})",
            f"        archiveVersion.set({_quote(packaging.version)})",
            '    }',
            '',
            '    build {',
            '        dependsOn(shadowJar)',
            '    }',
        ]))
    return "\n\n".join(sections) + "\n"


def _render_repository(repository: str) -> str:
    if repository in _GRADLE_REPOSITORIES:
        return _GRADLE_REPOSITORIES[repository]
    return f"maven {{ url = uri({_quote(repository)}) }}"


def _quote(value: str) -> str:
    """Kotlin string literal; '$' would otherwise start a template."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"').replace("$", "\\$").replace("\n", "\\n")
    return f'"{escaped}"'


def _block(name: str, lines: List[str]) -> str:
    body = "\n".join(lines)
    if body:
        return f"{name} {{\n{body}\n}}"
    return f"{name} {{\n}}"


def generate_gradle_files(project_dir: Path, descriptor: BuildDescriptor) -> List[Path]:
    """Write settings.gradle.kts and build.gradle.kts into project_dir."""
    project_dir = Path(project_dir)
    project_dir.mkdir(parents=True, exist_ok=True)

    settings_path = project_dir / SETTINGS_FILE
    settings_path.write_text(render_settings(descriptor, project_dir), encoding='utf-8')
    build_path = project_dir / BUILD_FILE
    build_path.write_text(render_build_script(descriptor), encoding='utf-8')

    logger.info(f"Generated {SETTINGS_FILE} and {BUILD_FILE} in {project_dir}")
    return [settings_path, build_path]


def find_gradle(settings: Settings) -> Optional[Path]:
    """Locate gradlew in the configured wrapper directory, else gradle on PATH."""
    wrapper_dir = settings.gradle_wrapper_dir
    script = "gradlew.bat" if os.name == "nt" else "gradlew"
    if wrapper_dir is not None:
        wrapper = wrapper_dir / script
        if wrapper.is_file():
            if os.name != "nt" and not os.access(wrapper, os.X_OK):
                wrapper.chmod(0o755)
            return wrapper
    found = shutil.which("gradle")
    return Path(found) if found else None


def run_gradle_build(project_dir: Path, descriptor: BuildDescriptor, settings: Settings) -> Optional[Path]:
    """
    Build the project with Gradle.

    Returns:
        Path of the shaded archive when packaging is enabled, else None

    Raises:
        CompilationError: Gradle is missing, or the build failed without packaging
        PackagingError: The build failed while packaging was enabled
    """
    project_dir = Path(project_dir)
    generate_gradle_files(project_dir, descriptor)

    gradle = find_gradle(settings)
    if gradle is None:
        raise CompilationError(
            f"Gradle not found: install it or put a wrapper in {settings.gradle_wrapper_dir}"
        )

    archive_name = descriptor.archive_name()
    tasks = ["clean", "shadowJar"] if archive_name else ["clean", "build"]
    cmd = [str(gradle), "--project-dir", str(project_dir)] + tasks
    logger.info(f"Running Gradle: {' '.join(tasks)}")
    logger.debug(f"Running: {' '.join(cmd)}")

    env = dict(os.environ)
    if settings.java_home:
        env['JAVA_HOME'] = str(settings.java_home)

    try:
        result = subprocess.run(cmd, cwd=project_dir, capture_output=True, text=True, env=env)
    except OSError as e:
        raise CompilationError(f"Could not run {gradle}: {e}") from e

    logger.debug(f"Gradle output: {result.stdout}")
    if result.returncode != 0:
        output = (result.stdout or '') + (result.stderr or '')
        if archive_name:
            raise PackagingError(f"Gradle build failed with exit code {result.returncode}\n{output}")
        raise CompilationError(f"Gradle build failed with exit code {result.returncode}", output=output)

    if archive_name is None:
        return None
    archive = project_dir / "build" / "libs" / archive_name
    if not archive.is_file():
        raise PackagingError(f"Gradle finished but {archive} was not produced")
    return archive
