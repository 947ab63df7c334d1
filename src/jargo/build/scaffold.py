"""
Project scaffolding for `jargo new`.
"""

import logging
import re
from pathlib import Path
from typing import List

import yaml

from jargo.exceptions import ProjectExistsError

logger = logging.getLogger(__name__)

DEFAULT_MAIN_CLASS = "com.example.Main"


def _yaml_descriptor(name: str, main: str) -> str:
    # Names such as "null" or "yes" must stay strings
    return yaml.safe_dump({
        'name': name,
        'capabilities': ['compile', 'application', 'shaded-packaging'],
        'repositories': ['central'],
        'dependencies': [],
        'application': {'mainEntryPoint': main},
        'packaging': {'baseName': name, 'classifier': '', 'version': '0.1.0'},
    }, sort_keys=False)


TOML_TEMPLATE = """\
[package]
name = "{name}"
version = "0.1.0"
main = "{main}"

[dependencies]
"""

GITIGNORE = """\
build/
.gradle/
build.gradle.kts
settings.gradle.kts
"""

MAIN_TEMPLATE = """\
package {package};

public class {cls} {{
    public static void main(String[] args) {{
        System.out.println("Hello from {name}!");
    }}
}}
"""


def _project_name(directory: Path) -> str:
    # Archive names end up in file names and Gradle strings
    name = re.sub(r'[^A-Za-z0-9._-]+', '-', directory.resolve().name).strip('-')
    return name or "app"


def create_project(directory, fmt: str = "yaml") -> List[Path]:
    """
    Create a new project skeleton.

    Args:
        directory: Project directory; created if missing, must be empty if present
        fmt: Descriptor format, 'yaml' (jargo.yaml) or 'toml' (Jargo.toml)

    Returns:
        Paths of the files written

    Raises:
        ProjectExistsError: If the directory exists and is not empty
    """
    if fmt not in ("yaml", "toml"):
        raise ValueError(f"Unknown descriptor format '{fmt}'. Available: yaml, toml")

    directory = Path(directory)
    if directory.exists() and (not directory.is_dir() or any(directory.iterdir())):
        raise ProjectExistsError(f"{directory} already exists and is not empty")
    directory.mkdir(parents=True, exist_ok=True)

    name = _project_name(directory)
    package, cls = DEFAULT_MAIN_CLASS.rsplit('.', 1)

    if fmt == "toml":
        descriptor_path = directory / "Jargo.toml"
        descriptor_path.write_text(TOML_TEMPLATE.format(name=name, main=DEFAULT_MAIN_CLASS), encoding='utf-8')
    else:
        descriptor_path = directory / "jargo.yaml"
        descriptor_path.write_text(_yaml_descriptor(name, DEFAULT_MAIN_CLASS), encoding='utf-8')

    gitignore_path = directory / ".gitignore"
    gitignore_path.write_text(GITIGNORE, encoding='utf-8')

    main_path = directory / "src" / "main" / "java" / Path(*package.split('.')) / f"{cls}.java"
    main_path.parent.mkdir(parents=True, exist_ok=True)
    main_path.write_text(MAIN_TEMPLATE.format(package=package, cls=cls, name=name), encoding='utf-8')

    logger.info(f"Project created at {directory}")
    return [descriptor_path, gitignore_path, main_path]
