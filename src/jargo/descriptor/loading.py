"""
Descriptor loading.

Turns descriptor text (YAML or TOML) into a validated BuildDescriptor and
back. Validation happens in a fixed order: entry point, capabilities,
repositories, dependencies, packaging.
"""

import logging
import re
import tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from jargo.descriptor.models import (
    KNOWN_REPOSITORIES,
    BuildDescriptor,
    Capability,
    Coordinate,
    Dependency,
    DependencyScope,
    PackagingParams,
)
from jargo.exceptions import (
    DescriptorNotFoundError,
    DescriptorSyntaxError,
    DuplicateDependencyError,
    IncompletePackagingConfigError,
    MalformedDependencyError,
    MissingEntryPointError,
    UnknownCapabilityError,
    UnknownRepositoryError,
)

logger = logging.getLogger(__name__)

# Looked up in this order inside a project directory
DESCRIPTOR_FILES = (
    ("jargo.yaml", "yaml"),
    ("jargo.yml", "yaml"),
    ("Jargo.toml", "toml"),
)

DEFAULT_CAPABILITIES = frozenset({Capability.COMPILE, Capability.APPLICATION})
DEFAULT_REPOSITORIES = ("central",)

_JAVA_NAME = re.compile(r'^[A-Za-z_$][A-Za-z0-9_$]*(\.[A-Za-z_$][A-Za-z0-9_$]*)*$')

_CAPABILITY_ALIASES = {
    "compile": Capability.COMPILE,
    "java": Capability.COMPILE,
    "application": Capability.APPLICATION,
    "shaded-packaging": Capability.SHADED_PACKAGING,
    "shadow": Capability.SHADED_PACKAGING,
    "shadow-jar": Capability.SHADED_PACKAGING,
}

_SCOPE_ALIASES = {
    "compile": DependencyScope.COMPILE,
    "implementation": DependencyScope.COMPILE,
    "runtime-only": DependencyScope.RUNTIME_ONLY,
    "runtimeonly": DependencyScope.RUNTIME_ONLY,
    "runtime": DependencyScope.RUNTIME_ONLY,
}

_URL_PREFIXES = ("http://", "https://", "file://")


def parse_descriptor(text: str, fmt: str = "yaml") -> BuildDescriptor:
    """
    Parse descriptor text into a BuildDescriptor.

    Args:
        text: Descriptor source
        fmt: 'yaml' or 'toml'

    Returns:
        Validated, immutable descriptor

    Raises:
        DescriptorError: Any subclass, naming the offending field
    """
    return build_descriptor(_parse_text(text, fmt))


def load_descriptor(project_dir) -> Tuple[BuildDescriptor, Path]:
    """
    Find and parse the descriptor of a project.

    Returns:
        Tuple of (descriptor, path it was read from)

    Raises:
        DescriptorNotFoundError: If none of the known descriptor files exist
    """
    project_dir = Path(project_dir)
    for filename, fmt in DESCRIPTOR_FILES:
        path = project_dir / filename
        if path.is_file():
            logger.debug(f"Loading descriptor from {path}")
            return parse_descriptor(path.read_text(encoding='utf-8'), fmt), path

    names = ', '.join(name for name, _ in DESCRIPTOR_FILES)
    raise DescriptorNotFoundError(f"No descriptor found in {project_dir} (looked for {names})")


def dump_descriptor(descriptor: BuildDescriptor) -> str:
    """Serialize a descriptor to canonical YAML that parses back to an equal descriptor."""
    return yaml.safe_dump(descriptor_to_dict(descriptor), sort_keys=False)


def descriptor_to_dict(descriptor: BuildDescriptor) -> Dict[str, Any]:
    data: Dict[str, Any] = {}
    if descriptor.name is not None:
        data['name'] = descriptor.name
    # Enum order keeps the output stable
    data['capabilities'] = [c.value for c in Capability if c in descriptor.capabilities]
    data['repositories'] = list(descriptor.repositories)

    dependencies = []
    for dep in descriptor.dependencies:
        entry = {'coordinate': str(dep.coordinate), 'scope': dep.scope.value}
        if dep.repository:
            entry['repository'] = dep.repository
        dependencies.append(entry)
    data['dependencies'] = dependencies

    data['application'] = {'mainEntryPoint': descriptor.main_entry_point}
    if descriptor.packaging is not None:
        data['packaging'] = {
            'baseName': descriptor.packaging.base_name,
            'classifier': descriptor.packaging.classifier,
            'version': descriptor.packaging.version,
        }
    return data


def build_descriptor(data: Dict[str, Any]) -> BuildDescriptor:
    """Validate an already-parsed mapping and build the descriptor from it."""
    data = _expand_package_table(data)

    main_entry_point = _read_entry_point(data)
    capabilities = _read_capabilities(data.get('capabilities'))
    repositories = _read_repositories(data.get('repositories'))
    dependencies = _read_dependencies(data.get('dependencies'), repositories)
    packaging = _read_packaging(data.get('packaging'), capabilities)

    name = data.get('name')
    if name is not None:
        name = str(name).strip() or None
    return BuildDescriptor(
        name=name,
        capabilities=capabilities,
        repositories=repositories,
        dependencies=dependencies,
        main_entry_point=main_entry_point,
        packaging=packaging,
    )


def _parse_text(text: str, fmt: str) -> Dict[str, Any]:
    if fmt == "yaml":
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise DescriptorSyntaxError(f"Invalid YAML descriptor: {e}") from e
    elif fmt == "toml":
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as e:
            raise DescriptorSyntaxError(f"Invalid TOML descriptor: {e}") from e
    else:
        raise ValueError(f"Unknown descriptor format '{fmt}'. Available: yaml, toml")

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DescriptorSyntaxError("Descriptor must be a mapping at the top level")
    return data


def _expand_package_table(data: Dict[str, Any]) -> Dict[str, Any]:
    """Expand the compact [package] form (name, version, main) into the full schema."""
    package = data.get('package')
    if package is None:
        return data
    if not isinstance(package, dict):
        raise DescriptorSyntaxError("'package' must be a table with name, version and main")

    expanded = dict(data)
    if expanded.get('name') is None:
        expanded['name'] = package.get('name')

    application = _section(expanded, 'application')
    if 'main' in package:
        application.setdefault('mainEntryPoint', package['main'])
    expanded['application'] = application

    if expanded.get('packaging') is None:
        expanded['packaging'] = {
            'baseName': package.get('name'),
            'classifier': '',
            'version': package.get('version'),
        }
        capabilities = expanded.get('capabilities')
        if capabilities is None:
            capabilities = [c.value for c in Capability if c in DEFAULT_CAPABILITIES]
        capabilities = [capabilities] if isinstance(capabilities, str) else list(capabilities)
        if Capability.SHADED_PACKAGING.value not in capabilities:
            capabilities.append(Capability.SHADED_PACKAGING.value)
        expanded['capabilities'] = capabilities
    return expanded


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise DescriptorSyntaxError(f"'{key}' must be a mapping", field=key)
    return dict(value)


def _read_entry_point(data: Dict[str, Any]) -> str:
    value = _section(data, 'application').get('mainEntryPoint')
    if value is None or (isinstance(value, str) and not value.strip()):
        raise MissingEntryPointError("application.mainEntryPoint is required")
    if not isinstance(value, str) or not _JAVA_NAME.match(value.strip()):
        raise MissingEntryPointError(
            f"application.mainEntryPoint '{value}' is not a fully-qualified class name"
        )
    return value.strip()


def _read_capabilities(raw) -> frozenset:
    if raw is None:
        return DEFAULT_CAPABILITIES
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        raise UnknownCapabilityError("capabilities must be a list of names")

    capabilities = set()
    for item in raw:
        capability = _CAPABILITY_ALIASES.get(str(item).strip().lower())
        if capability is None:
            raise UnknownCapabilityError(f"Unknown capability '{item}'")
        capabilities.add(capability)
    return frozenset(capabilities)


def _read_repositories(raw) -> Tuple[str, ...]:
    if raw is None:
        return DEFAULT_REPOSITORIES
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        raise UnknownRepositoryError("repositories must be a list")

    repositories: List[str] = []
    for item in raw:
        if not isinstance(item, str):
            raise UnknownRepositoryError(f"Repository entry {item!r} must be a string")
        name = item.strip()
        if name not in KNOWN_REPOSITORIES and not name.startswith(_URL_PREFIXES):
            raise UnknownRepositoryError(f"Unknown repository '{name}'")
        if name not in repositories:
            repositories.append(name)
    return tuple(repositories)


def _read_dependencies(raw, repositories: Tuple[str, ...]) -> Tuple[Dependency, ...]:
    if raw is None:
        return ()
    if isinstance(raw, dict):
        # Compact alias -> coordinate table
        items = list(raw.values())
    elif isinstance(raw, list):
        items = raw
    else:
        raise MalformedDependencyError("dependencies must be a list or a table")

    dependencies: List[Dependency] = []
    seen = {}
    for item in items:
        dependency = _read_dependency(item, repositories)
        key = dependency.coordinate.key
        if key in seen:
            raise DuplicateDependencyError(
                f"Dependency '{key}' declared twice ({seen[key]} and {dependency.coordinate})",
                key=key,
            )
        seen[key] = dependency.coordinate
        dependencies.append(dependency)
    return tuple(dependencies)


def _read_dependency(item, repositories: Tuple[str, ...]) -> Dependency:
    if isinstance(item, str):
        return Dependency(coordinate=Coordinate.parse(item), scope=DependencyScope.COMPILE, repository=None)
    if not isinstance(item, dict):
        raise MalformedDependencyError(f"Dependency entry {item!r} must be a string or a mapping")

    text = item.get('coordinate', item.get('value'))
    if text is None:
        raise MalformedDependencyError(f"Dependency entry {item!r} has no coordinate")
    coordinate = Coordinate.parse(text)

    scope = DependencyScope.COMPILE
    if item.get('scope') is not None:
        scope = _SCOPE_ALIASES.get(str(item['scope']).strip().lower())
        if scope is None:
            raise MalformedDependencyError(
                f"Unknown scope '{item['scope']}' for {coordinate}", coordinate=str(coordinate)
            )

    repository = item.get('repository')
    if repository is not None:
        if not isinstance(repository, str):
            raise UnknownRepositoryError(
                f"Repository {repository!r} of dependency {coordinate} must be a string"
            )
        repository = repository.strip()
        if repository not in repositories:
            raise UnknownRepositoryError(
                f"Dependency {coordinate} uses repository '{repository}' which is not declared"
            )
    return Dependency(coordinate=coordinate, scope=scope, repository=repository)


def _read_packaging(raw, capabilities: frozenset) -> Optional[PackagingParams]:
    enabled = Capability.SHADED_PACKAGING in capabilities
    if raw is None:
        if enabled:
            raise IncompletePackagingConfigError(
                "shaded-packaging is enabled but no packaging section is declared",
                missing=['baseName', 'version'],
            )
        return None
    if not isinstance(raw, dict):
        raise DescriptorSyntaxError("'packaging' must be a mapping", field='packaging')

    values = {key: _scalar(raw.get(key)) for key in ('baseName', 'classifier', 'version')}
    missing = [key for key in ('baseName', 'version') if not values[key]]
    if missing:
        if enabled:
            raise IncompletePackagingConfigError(
                f"shaded-packaging is enabled but packaging is missing {', '.join(missing)}",
                missing=missing,
            )
        logger.debug(f"Ignoring incomplete packaging section (missing {missing})")
        return None

    return PackagingParams(
        base_name=values['baseName'],
        classifier=values['classifier'] or '',
        version=values['version'],
    )


def _scalar(value) -> Optional[str]:
    # YAML reads 1.0 as a float
    if value is None:
        return None
    return str(value).strip()
