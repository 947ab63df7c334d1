"""
Project tasks: scaffolding, descriptor inspection and Gradle export.
"""

from invoke import task

from jargo.build.gradle import generate_gradle_files
from jargo.build.scaffold import create_project
from jargo.descriptor.loading import dump_descriptor, load_descriptor
from jargo.tasks.build import get_project_dir
from jargo.tasks.decorators import reports_errors


@task(help={
    'directory': 'Directory of the new project',
    'format': 'Descriptor format: yaml (jargo.yaml) or toml (Jargo.toml)',
})
@reports_errors
def new(ctx, directory, format="yaml"):
    """
    Create a new project skeleton with a default descriptor.

    Examples:
        jargo new hello-jvm
        jargo new hello-jvm --format=toml
    """
    files = create_project(directory, format)
    print(f"✅ Project created at {directory}")
    for path in files:
        print(f"   {path}")


@task(help={'directory': 'Project directory (default: current directory)'})
@reports_errors
def show(ctx, directory=None):
    """Print the descriptor as jargo understands it."""
    descriptor, path = load_descriptor(get_project_dir(directory))
    print(f"# {path}")
    print(dump_descriptor(descriptor), end='')


@task(help={'directory': 'Project directory (default: current directory)'})
@reports_errors
def gradle(ctx, directory=None):
    """Write settings.gradle.kts and build.gradle.kts for the project."""
    project_dir = get_project_dir(directory)
    descriptor, _ = load_descriptor(project_dir)
    for path in generate_gradle_files(project_dir, descriptor):
        print(f"📝 Wrote {path}")
