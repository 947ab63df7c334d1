"""Tests for descriptor parsing, validation and serialization."""

import pytest

from jargo.descriptor.loading import dump_descriptor, load_descriptor, parse_descriptor
from jargo.descriptor.models import Capability, DependencyScope
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

HELLO_JVM_YAML = """\
name: hello-jvm
capabilities: [compile, application, shaded-packaging]
repositories: [central]
dependencies:
  - coordinate: com.google.code.gson:gson:2.10.1
    scope: compile
  - coordinate: org.junit.jupiter:junit-jupiter:5.10.0
    scope: runtime-only
application:
  mainEntryPoint: com.example.Main
packaging:
  baseName: hello-jvm
  classifier: ""
  version: 0.1.0
"""

HELLO_JVM_TOML = """\
[package]
name = "hello-jvm"
version = "0.1.0"
main = "com.example.Main"

[dependencies]
gson = "com.google.code.gson:gson:2.10.1"
junit = { value = "org.junit.jupiter:junit-jupiter:5.10.0", scope = "Runtime" }
"""


def _minimal(extra: str = "") -> str:
    return "application:\n  mainEntryPoint: com.example.Main\n" + extra


class TestParsing:

    def test_scopes_are_split(self):
        descriptor = parse_descriptor(HELLO_JVM_YAML)

        assert len(descriptor.dependencies) == 2
        assert {d.coordinate.artifact for d in descriptor.compile_dependencies()} == {"gson"}
        assert {d.coordinate.artifact for d in descriptor.runtime_only_dependencies()} == {"junit-jupiter"}
        assert descriptor.main_entry_point == "com.example.Main"

    def test_defaults(self):
        descriptor = parse_descriptor(_minimal())

        assert descriptor.capabilities == {Capability.COMPILE, Capability.APPLICATION}
        assert descriptor.repositories == ("central",)
        assert descriptor.dependencies == ()
        assert descriptor.packaging is None
        assert descriptor.archive_name() is None

    def test_shorthand_dependency_is_compile_scope(self):
        descriptor = parse_descriptor(_minimal("dependencies:\n  - com.google.code.gson:gson:2.10.1\n"))

        assert descriptor.dependencies[0].scope == DependencyScope.COMPILE
        assert str(descriptor.dependencies[0].coordinate) == "com.google.code.gson:gson:2.10.1"

    def test_capability_and_scope_aliases(self):
        descriptor = parse_descriptor(_minimal(
            "capabilities: [java, shadow]\n"
            "packaging: {baseName: app, version: '1.0'}\n"
            "dependencies:\n"
            "  - {coordinate: 'a:b:1', scope: runtimeOnly}\n"
            "  - {coordinate: 'a:c:1', scope: implementation}\n"
        ))

        assert descriptor.capabilities == {Capability.COMPILE, Capability.SHADED_PACKAGING}
        assert [d.scope for d in descriptor.dependencies] == [
            DependencyScope.RUNTIME_ONLY, DependencyScope.COMPILE,
        ]

    def test_package_table_toml_form_matches_yaml(self):
        from_toml = parse_descriptor(HELLO_JVM_TOML, fmt="toml")
        from_yaml = parse_descriptor(HELLO_JVM_YAML)

        assert from_toml == from_yaml
        assert from_toml.archive_name() == "hello-jvm-0.1.0.jar"

    def test_numeric_version_is_kept_as_text(self):
        descriptor = parse_descriptor(_minimal(
            "capabilities: [compile, shaded-packaging]\n"
            "packaging: {baseName: app, version: 2.5}\n"
        ))

        assert descriptor.packaging.version == "2.5"

    def test_dependency_repository_must_be_declared(self):
        text = _minimal(
            "repositories: [central, google]\n"
            "dependencies:\n  - {coordinate: 'a:b:1', repository: google}\n"
        )
        assert parse_descriptor(text).dependencies[0].repository == "google"

        with pytest.raises(UnknownRepositoryError):
            parse_descriptor(_minimal("dependencies:\n  - {coordinate: 'a:b:1', repository: google}\n"))

    def test_dependency_repository_is_trimmed(self):
        text = _minimal(
            "repositories: [central, google]\n"
            "dependencies:\n  - {coordinate: 'a:b:1', repository: ' google '}\n"
        )
        descriptor = parse_descriptor(text)

        assert descriptor.dependencies[0].repository == "google"
        assert parse_descriptor(dump_descriptor(descriptor)) == descriptor

    def test_dependency_repository_must_be_text(self):
        with pytest.raises(UnknownRepositoryError):
            parse_descriptor(_minimal("dependencies:\n  - {coordinate: 'a:b:1', repository: 5}\n"))

    def test_url_repositories(self):
        descriptor = parse_descriptor(_minimal("repositories:\n  - https://repo.example.com/maven\n"))
        assert descriptor.repositories == ("https://repo.example.com/maven",)


class TestValidation:

    def test_missing_entry_point(self):
        with pytest.raises(MissingEntryPointError) as excinfo:
            parse_descriptor("dependencies: []\n")
        assert excinfo.value.field == "application.mainEntryPoint"

    @pytest.mark.parametrize("value", ["''", "com..Main", "com.example.1Main", "com example"])
    def test_invalid_entry_point(self, value):
        with pytest.raises(MissingEntryPointError):
            parse_descriptor(f"application:\n  mainEntryPoint: {value}\n")

    def test_coordinate_without_version(self):
        with pytest.raises(MalformedDependencyError) as excinfo:
            parse_descriptor(_minimal("dependencies:\n  - com.google.code.gson:gson\n"))
        assert excinfo.value.coordinate == "com.google.code.gson:gson"

    def test_unknown_scope(self):
        with pytest.raises(MalformedDependencyError):
            parse_descriptor(_minimal("dependencies:\n  - {coordinate: 'a:b:1', scope: test}\n"))

    def test_duplicate_coordinate(self):
        text = _minimal("dependencies:\n  - a:b:1\n  - {coordinate: 'a:b:2', scope: runtime-only}\n")
        with pytest.raises(DuplicateDependencyError) as excinfo:
            parse_descriptor(text)
        assert excinfo.value.key == "a:b"

    def test_packaging_without_base_name(self):
        text = _minimal(
            "capabilities: [compile, application, shaded-packaging]\n"
            "packaging:\n  classifier: ''\n  version: 0.1.0\n"
        )
        with pytest.raises(IncompletePackagingConfigError) as excinfo:
            parse_descriptor(text)
        assert excinfo.value.missing == ["baseName"]

    def test_packaging_enabled_without_section(self):
        with pytest.raises(IncompletePackagingConfigError):
            parse_descriptor(_minimal("capabilities: [shaded-packaging]\n"))

    def test_incomplete_packaging_ignored_when_disabled(self):
        descriptor = parse_descriptor(_minimal("packaging:\n  version: 0.1.0\n"))
        assert descriptor.packaging is None

    def test_unknown_capability(self):
        with pytest.raises(UnknownCapabilityError):
            parse_descriptor(_minimal("capabilities: [compile, kotlin]\n"))

    def test_unknown_repository(self):
        with pytest.raises(UnknownRepositoryError):
            parse_descriptor(_minimal("repositories: [jcenter]\n"))

    def test_entry_point_checked_before_dependencies(self):
        with pytest.raises(MissingEntryPointError):
            parse_descriptor("dependencies:\n  - not-a-coordinate\n")

    def test_syntax_errors(self):
        with pytest.raises(DescriptorSyntaxError):
            parse_descriptor("application: [unclosed\n")
        with pytest.raises(DescriptorSyntaxError):
            parse_descriptor("[package\n", fmt="toml")
        with pytest.raises(DescriptorSyntaxError):
            parse_descriptor("- just\n- a list\n")


class TestSerialization:

    def test_round_trip(self):
        descriptor = parse_descriptor(HELLO_JVM_YAML)
        assert parse_descriptor(dump_descriptor(descriptor)) == descriptor

    def test_round_trip_without_packaging(self):
        descriptor = parse_descriptor(_minimal(
            "capabilities: [compile]\n"
            "repositories: [central, google]\n"
            "dependencies:\n  - {coordinate: 'a:b:1.0', repository: google}\n"
        ))
        assert parse_descriptor(dump_descriptor(descriptor)) == descriptor

    @pytest.mark.parametrize("raw", ['""', '"  "', "null", "1.5", "' app '"])
    def test_round_trip_of_name(self, raw):
        descriptor = parse_descriptor(_minimal(f"name: {raw}\n"))
        assert parse_descriptor(dump_descriptor(descriptor)) == descriptor

    def test_blank_name_is_absent(self):
        assert parse_descriptor(_minimal('name: ""\n')).name is None

    def test_loading_twice_is_equal(self):
        assert parse_descriptor(HELLO_JVM_YAML) == parse_descriptor(HELLO_JVM_YAML)


class TestLoadDescriptor:

    def test_prefers_yaml_over_toml(self, tmp_path):
        (tmp_path / "jargo.yaml").write_text(_minimal())
        (tmp_path / "Jargo.toml").write_text(HELLO_JVM_TOML)

        descriptor, path = load_descriptor(tmp_path)

        assert path.name == "jargo.yaml"
        assert descriptor.packaging is None

    def test_reads_toml(self, tmp_path):
        (tmp_path / "Jargo.toml").write_text(HELLO_JVM_TOML)

        descriptor, path = load_descriptor(tmp_path)

        assert path.name == "Jargo.toml"
        assert descriptor.name == "hello-jvm"

    def test_missing_descriptor(self, tmp_path):
        with pytest.raises(DescriptorNotFoundError):
            load_descriptor(tmp_path)
