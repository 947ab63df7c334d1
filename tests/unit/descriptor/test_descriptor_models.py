import unittest

from pydantic import ValidationError

from jargo.descriptor.models import (
    BuildDescriptor,
    Capability,
    Coordinate,
    Dependency,
    DependencyScope,
    PackagingParams,
)
from jargo.exceptions import MalformedDependencyError


class TestCoordinate(unittest.TestCase):

    def test_parse(self):
        coordinate = Coordinate.parse("com.google.code.gson:gson:2.10.1")
        self.assertEqual(coordinate.group, "com.google.code.gson")
        self.assertEqual(coordinate.artifact, "gson")
        self.assertEqual(coordinate.version, "2.10.1")
        self.assertEqual(coordinate.key, "com.google.code.gson:gson")
        self.assertEqual(str(coordinate), "com.google.code.gson:gson:2.10.1")

    def test_rejects_malformed(self):
        for text in ["gson", "a:b", "a:b:c:d", "a::1", "a:b:", "a b:c:1", ""]:
            with self.subTest(text=text):
                with self.assertRaises(MalformedDependencyError):
                    Coordinate.parse(text)

    def test_rejects_non_string(self):
        with self.assertRaises(MalformedDependencyError):
            Coordinate.parse(42)


class TestPackagingParams(unittest.TestCase):

    def test_archive_name_without_classifier(self):
        params = PackagingParams(base_name="hello-jvm", classifier="", version="0.1.0")
        self.assertEqual(params.archive_name(), "hello-jvm-0.1.0.jar")

    def test_archive_name_with_classifier(self):
        params = PackagingParams(base_name="hello-jvm", classifier="all", version="0.1.0")
        self.assertEqual(params.archive_name("zip"), "hello-jvm-0.1.0-all.zip")


class TestBuildDescriptor(unittest.TestCase):

    def test_is_immutable(self):
        descriptor = BuildDescriptor(main_entry_point="com.example.Main")
        with self.assertRaises(ValidationError):
            descriptor.main_entry_point = "com.example.Other"

    def test_archive_name_requires_capability(self):
        packaging = PackagingParams(base_name="app", version="1.0")
        plain = BuildDescriptor(main_entry_point="Main", packaging=packaging)
        shaded = BuildDescriptor(
            main_entry_point="Main",
            packaging=packaging,
            capabilities=frozenset({Capability.SHADED_PACKAGING}),
        )
        self.assertIsNone(plain.archive_name())
        self.assertEqual(shaded.archive_name(), "app-1.0.jar")

    def test_scope_helpers(self):
        descriptor = BuildDescriptor(
            main_entry_point="Main",
            dependencies=(
                Dependency(coordinate=Coordinate.parse("a:b:1")),
                Dependency(coordinate=Coordinate.parse("a:c:1"), scope=DependencyScope.RUNTIME_ONLY),
            ),
        )
        self.assertEqual([d.coordinate.artifact for d in descriptor.compile_dependencies()], ["b"])
        self.assertEqual([d.coordinate.artifact for d in descriptor.runtime_only_dependencies()], ["c"])
