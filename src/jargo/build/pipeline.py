"""Build pipeline.

Runs the stages of a build in their fixed order:
load descriptor -> resolve dependencies -> compile -> package (optional).
Any stage failure propagates unchanged; there is no partial success.
"""

import logging
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from jargo.build.compiler import JavaCompiler
from jargo.build.gradle import run_gradle_build
from jargo.build.packager import Packager, PackagingRequest, ShadedJarPackager
from jargo.build.resolver import (
    DependencyResolver,
    MavenRepositoryResolver,
    ResolvedClasspath,
    resolve_classpath,
)
from jargo.config.settings import Settings
from jargo.descriptor.loading import load_descriptor
from jargo.descriptor.models import BuildDescriptor, Capability

logger = logging.getLogger(__name__)

BUILD_DIR = "build"
CLASSES_DIR = Path(BUILD_DIR) / "classes" / "java" / "main"
LIBS_DIR = Path(BUILD_DIR) / "libs"


class BuildResult(BaseModel):
    """Outcome of a successful build."""
    descriptor: BuildDescriptor
    descriptor_path: Path
    classpath: ResolvedClasspath
    classes_dir: Optional[Path] = None
    archive: Optional[Path] = None
    backend: str = "native"


def run_build(project_dir, settings: Optional[Settings] = None,
              resolver: Optional[DependencyResolver] = None,
              compiler: Optional[JavaCompiler] = None,
              packager: Optional[Packager] = None) -> BuildResult:
    """
    Build a project.

    Args:
        project_dir: Project root holding the descriptor
        settings: Tool settings (loaded from the environment when omitted)
        resolver: Dependency resolver (Maven repositories of the descriptor by default)
        compiler: Java compiler (javac by default)
        packager: Archive packager (shaded jar by default)

    Returns:
        BuildResult describing what was produced

    Raises:
        JargoException: Any loader, resolution, compilation or packaging error
    """
    project_dir = Path(project_dir).resolve()
    settings = settings or Settings.load()

    logger.info(f"Loading descriptor from {project_dir}")
    descriptor, descriptor_path = load_descriptor(project_dir)
    logger.info(f"Loaded {descriptor_path.name}: {len(descriptor.dependencies)} dependencies, "
                f"entry point {descriptor.main_entry_point}")

    if settings.backend == "gradle":
        # Gradle resolves, compiles and packages on its own
        archive = run_gradle_build(project_dir, descriptor, settings)
        logger.info("Build successful")
        return BuildResult(
            descriptor=descriptor,
            descriptor_path=descriptor_path,
            classpath=ResolvedClasspath(),
            classes_dir=project_dir / CLASSES_DIR,
            archive=archive,
            backend="gradle",
        )

    logger.info("Resolving dependencies")
    if resolver is None:
        with MavenRepositoryResolver(
            descriptor.repositories,
            settings.cache_dir,
            timeout=settings.http_timeout,
            verify_checksums=settings.verify_checksums,
        ) as maven_resolver:
            classpath = resolve_classpath(descriptor, maven_resolver)
    else:
        classpath = resolve_classpath(descriptor, resolver)
    logger.info(f"Resolved {len(classpath.artifacts)} artifact(s)")

    classes_dir = None
    if descriptor.has(Capability.COMPILE):
        compiler = compiler or JavaCompiler(java_home=settings.java_home)
        classes_dir = compiler.compile(project_dir, classpath.compile_classpath, project_dir / CLASSES_DIR)
        logger.info(f"Compiled classes into {classes_dir}")
    else:
        logger.info("Skipping compilation: 'compile' capability is not enabled")

    archive = None
    if descriptor.archive_name():
        packager = packager or ShadedJarPackager()
        archive = packager.package(PackagingRequest(
            params=descriptor.packaging,
            main_entry_point=descriptor.main_entry_point,
            classes_dir=classes_dir or project_dir / CLASSES_DIR,
            artifacts=classpath.runtime_classpath,
            output_dir=project_dir / LIBS_DIR,
        ))

    logger.info("Build successful")
    return BuildResult(
        descriptor=descriptor,
        descriptor_path=descriptor_path,
        classpath=classpath,
        classes_dir=classes_dir,
        archive=archive,
    )
