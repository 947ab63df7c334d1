import pytest

from jargo.build.scaffold import create_project
from jargo.descriptor.loading import load_descriptor
from jargo.descriptor.models import Capability
from jargo.exceptions import ProjectExistsError


def test_yaml_project(tmp_path):
    project = tmp_path / "hello-jvm"

    files = create_project(project)

    assert [p.name for p in files] == ["jargo.yaml", ".gitignore", "Main.java"]
    descriptor, _ = load_descriptor(project)
    assert descriptor.name == "hello-jvm"
    assert descriptor.main_entry_point == "com.example.Main"
    assert descriptor.has(Capability.SHADED_PACKAGING)
    assert descriptor.archive_name() == "hello-jvm-0.1.0.jar"
    assert "package com.example;" in (project / "src/main/java/com/example/Main.java").read_text()
    assert "build/" in (project / ".gitignore").read_text()


def test_toml_project_matches_yaml(tmp_path):
    create_project(tmp_path / "yaml" / "app")
    create_project(tmp_path / "toml" / "app", fmt="toml")

    from_yaml, _ = load_descriptor(tmp_path / "yaml" / "app")
    from_toml, path = load_descriptor(tmp_path / "toml" / "app")

    assert path.name == "Jargo.toml"
    assert from_toml == from_yaml


def test_existing_project_is_refused(tmp_path):
    create_project(tmp_path / "app")

    with pytest.raises(ProjectExistsError):
        create_project(tmp_path / "app")


def test_empty_directory_is_accepted(tmp_path):
    (tmp_path / "app").mkdir()
    create_project(tmp_path / "app")
    assert (tmp_path / "app" / "jargo.yaml").exists()


def test_unknown_format(tmp_path):
    with pytest.raises(ValueError):
        create_project(tmp_path / "app", fmt="xml")


@pytest.mark.parametrize("dirname", ["null", "true", "yes", "1e3", "0.1"])
@pytest.mark.parametrize("fmt", ["yaml", "toml"])
def test_yaml_keyword_directory_names_stay_strings(tmp_path, dirname, fmt):
    create_project(tmp_path / dirname, fmt=fmt)

    descriptor, _ = load_descriptor(tmp_path / dirname)

    assert descriptor.name == dirname
    assert descriptor.archive_name() == f"{dirname}-0.1.0.jar"
