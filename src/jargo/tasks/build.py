"""Build tasks: build, run and clean a project."""

import dataclasses
import logging
import shlex
import shutil
from pathlib import Path

from invoke import task
from invoke.exceptions import Exit

from jargo.build.launcher import run_application
from jargo.build.pipeline import BUILD_DIR, run_build
from jargo.config.settings import Settings
from jargo.tasks.decorators import reports_errors

logger = logging.getLogger(__name__)


def get_project_dir(directory=None) -> Path:
    """Project directory given on the command line, else the working directory."""
    return Path(directory) if directory else Path.cwd()


def load_settings(backend=None) -> Settings:
    settings = Settings.load()
    if backend:
        settings = dataclasses.replace(settings, backend=backend)
    return settings


@task(help={
    'directory': 'Project directory (default: current directory)',
    'backend': 'Build backend: native or gradle (default: JARGO_BACKEND or native)',
})
@reports_errors
def build(ctx, directory=None, backend=None):
    """
    Build the project: load descriptor, resolve, compile, package.

    Examples:
        jargo build                        # Build the project in the current directory
        jargo build --directory=hello-jvm  # Build another project
        jargo build --backend=gradle       # Let Gradle do the work
    """
    project_dir = get_project_dir(directory)
    print(f"🏗️  Building {project_dir.resolve()}")
    result = run_build(project_dir, load_settings(backend))

    print("🎉 Build successful!")
    if result.archive:
        print(f"📦 Archive: {result.archive}")
    elif result.classes_dir:
        print(f"📁 Classes: {result.classes_dir}")
    return result


@task(help={
    'directory': 'Project directory (default: current directory)',
    'backend': 'Build backend: native or gradle',
    'app_args': 'Arguments passed to the application, as one quoted string',
})
@reports_errors
def run(ctx, directory=None, backend=None, app_args=""):
    """
    Build the project, then run it.

    Examples:
        jargo run
        jargo run --app-args="--name world"
    """
    settings = load_settings(backend)
    result = run_build(get_project_dir(directory), settings)
    code = run_application(result, shlex.split(app_args or ""), settings)
    if code != 0:
        raise Exit(code=code)


@task(help={'directory': 'Project directory (default: current directory)'})
def clean(ctx, directory=None):
    """Delete the build directory."""
    build_dir = get_project_dir(directory) / BUILD_DIR
    if build_dir.exists():
        shutil.rmtree(build_dir)
        print(f"🧹 Removed {build_dir}")
    else:
        print("✅ Nothing to clean")
