"""
Index module behavioral tests (package specifiers, master/group indexes, POMs).

Scope
- Validate "<name>:<version>" parsing and the rejection of malformed specifiers.
- Validate master index lookups for both name forms (group-as-package and group.artifact).
- Validate group index version resolution and POM packaging detection.

Conventions
- Test method names follow CamelCase per project convention.
- XML documents are small inline byte strings shaped like maven.google.com files.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from adept.index import (
    PACKAGE_FORMAT,
    PackageSpec,
    Package,
    parse_spec,
    group_path,
    MasterIndex,
    GroupIndex,
    packaging,
)
from adept.faults import (
    FaultCode,
    InvalidPackageSpecError,
    PackageNotFoundError,
    MalformedIndexError,
)

MASTER = b"""<?xml version='1.0' encoding='UTF-8'?>
<metadata>
  <androidx.core/>
  <com.google.android.material/>
</metadata>
"""

GROUP = b"""<?xml version='1.0' encoding='UTF-8'?>
<androidx.core>
  <core versions="1.0.0,1.5.0, 1.6.0"/>
  <core-ktx versions="1.6.0"/>
</androidx.core>
"""


class TestParseSpec(TestCase):
    def testValidSpec(self):
        spec = parse_spec("com.google.android.material:1.4.0")
        self.assertEqual(spec, PackageSpec("com.google.android.material", "1.4.0"))
        self.assertEqual(spec.name, "com.google.android.material")
        self.assertEqual(spec.version, "1.4.0")
        self.assertEqual(str(spec), "com.google.android.material:1.4.0")

    def testInvalidSpecs(self):
        for token in ("com.example", "a:b:c", ":1.0", "a:", "", "a :1.0"):
            with self.subTest(token=token):
                with self.assertRaises(InvalidPackageSpecError) as context:
                    parse_spec(token)
                self.assertEqual(context.exception.options["token"], token)
                self.assertEqual(context.exception.options["hint"], PACKAGE_FORMAT)
                self.assertEqual(context.exception.status, -1)

    def testInvalidSpecCarriesCode(self):
        with self.assertRaises(InvalidPackageSpecError) as context:
            parse_spec("nope")
        self.assertIs(context.exception.code, FaultCode.INVALID_PACKAGE_SPEC)
        self.assertIn("'nope'", str(context.exception))

    def testNonStringSpec(self):
        with self.assertRaises(TypeError):
            parse_spec(None)


class TestPackage(TestCase):
    def testPaths(self):
        package = Package("androidx.core", "core", "1.6.0")
        self.assertEqual(package.path, "androidx/core/core/1.6.0")
        self.assertEqual(package.stem, "core-1.6.0")
        self.assertEqual(str(package), "androidx.core:core:1.6.0")

    def testGroupPath(self):
        self.assertEqual(group_path("com.google.android.material"), "com/google/android/material")


class TestMasterIndex(TestCase):
    def setUp(self):
        self.master = MasterIndex.parse(MASTER)

    def testGroups(self):
        self.assertEqual(self.master.groups, frozenset({"androidx.core", "com.google.android.material"}))
        self.assertEqual(len(self.master), 2)
        self.assertIn("androidx.core", self.master)
        self.assertNotIn("androidx", self.master)

    def testLocateGroupName(self):
        location = self.master.locate(PackageSpec("com.google.android.material", "1.4.0"))
        self.assertEqual(location, ("com.google.android.material", "material"))

    def testLocateGroupAndArtifact(self):
        self.assertEqual(self.master.locate(PackageSpec("androidx.core.core-ktx", "1.6.0")), ("androidx.core", "core-ktx"))

    def testLocateUnknown(self):
        with self.assertRaises(PackageNotFoundError) as context:
            self.master.locate(PackageSpec("org.example.lib", "1.0"))
        self.assertEqual(context.exception.status, -2)
        self.assertEqual(context.exception.options["spec"], PackageSpec("org.example.lib", "1.0"))

    def testEmptyIndex(self):
        master = MasterIndex.parse(b"<metadata/>")
        self.assertEqual(len(master), 0)
        with self.assertRaises(PackageNotFoundError):
            master.locate(PackageSpec("androidx.core", "1.0"))

    def testMalformedIndex(self):
        with self.assertRaises(MalformedIndexError) as context:
            MasterIndex.parse(b"<html><body>not found")
        self.assertEqual(context.exception.status, -3)
        self.assertIs(context.exception.code, FaultCode.MALFORMED_INDEX)


class TestGroupIndex(TestCase):
    def setUp(self):
        self.group = GroupIndex.parse(GROUP)

    def testParse(self):
        self.assertEqual(self.group.group, "androidx.core")
        self.assertEqual(self.group.artifacts, {"core": ("1.0.0", "1.5.0", "1.6.0"), "core-ktx": ("1.6.0",)})
        self.assertEqual(self.group.versions("core-ktx"), ("1.6.0",))
        self.assertEqual(self.group.versions("missing"), ())

    def testArtifactsAreACopy(self):
        self.group.artifacts.clear()
        self.assertEqual(len(self.group.artifacts), 2)

    def testResolve(self):
        self.assertEqual(self.group.resolve("core", "1.5.0"), Package("androidx.core", "core", "1.5.0"))

    def testResolveMissingVersion(self):
        with self.assertRaises(PackageNotFoundError) as context:
            self.group.resolve("core", "9.9.9")
        self.assertIn("1.0.0, 1.5.0, 1.6.0", context.exception.options["hint"])

    def testResolveMissingArtifact(self):
        with self.assertRaises(PackageNotFoundError) as context:
            self.group.resolve("appcompat", "1.0.0")
        self.assertIn("core, core-ktx", context.exception.options["hint"])

    def testArtifactWithoutVersions(self):
        group = GroupIndex.parse(b"<g><bare/></g>")
        self.assertEqual(group.versions("bare"), ())
        with self.assertRaises(PackageNotFoundError):
            group.resolve("bare", "1.0")


class TestPackaging(TestCase):
    def testDeclaredPackaging(self):
        self.assertEqual(packaging(b"<project><packaging>aar</packaging></project>"), "aar")

    def testDefaultsToJar(self):
        self.assertEqual(packaging(b"<project><artifactId>core</artifactId></project>"), "jar")

    def testBundleIsJar(self):
        self.assertEqual(packaging(b"<project><packaging> bundle </packaging></project>"), "jar")

    def testNamespacedDescriptor(self):
        pom = (
            b'<project xmlns="http://maven.apache.org/POM/4.0.0">'
            b'<modelVersion>4.0.0</modelVersion><packaging>aar</packaging></project>'
        )
        self.assertEqual(packaging(pom), "aar")

    def testNestedPackagingIsIgnored(self):
        pom = b"<project><build><packaging>war</packaging></build></project>"
        self.assertEqual(packaging(pom), "jar")

    def testMalformedDescriptor(self):
        with self.assertRaises(MalformedIndexError):
            packaging(b"")


if __name__ == '__main__':
    unittest.main()
