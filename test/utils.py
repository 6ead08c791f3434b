"""
Tests for the utility helpers.

This module verifies:
- The `Unset` sentinel (singleton identity, falsy semantics, finality, unions).
- coalesce() resolving only `Unset`.
- mirror() exposing frozen snapshots of private fields.
- ensure_scheme() adding a scheme to bare hosts.
"""
import copy
import pickle
import unittest
from types import MappingProxyType
from unittest import TestCase

from adept.utils import *


class UnsetTest(TestCase):
    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testPickleRoundTrip(self) -> None:
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFalsy(self) -> None:
        self.assertFalse(Unset)
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testFinalClass(self) -> None:
        with self.assertRaises(TypeError):
            type("UnsetType", (UnsetType,), {})

    def testUnion(self) -> None:
        """
        `str | Unset` works in isinstance checks.
        """
        self.assertIsInstance("label", str | Unset)
        self.assertIsInstance(Unset, str | Unset)
        self.assertNotIsInstance(3, str | Unset)


class HelpersTest(TestCase):
    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))
        for value in (None, 0, "", ()):
            self.assertIs(coalesce(value, "fallback"), value)

    def testMirror(self) -> None:
        class Holder:
            items = mirror("items")
            table = mirror("table")

            def __init__(self):
                self._items = ["a", ["b"]]
                self._table = {"k": {"v"}}

        holder = Holder()
        self.assertEqual(holder.items, ("a", ("b",)))
        self.assertIsInstance(holder.table, MappingProxyType)
        self.assertEqual(holder.table["k"], frozenset({"v"}))
        with self.assertRaises(AttributeError):
            holder.items = ()

    def testMirrorName(self) -> None:
        with self.assertRaises(TypeError):
            mirror(3)

    def testEnsureScheme(self) -> None:
        self.assertEqual(ensure_scheme("maven.google.com"), "https://maven.google.com")
        self.assertEqual(ensure_scheme("http://repo.test/x"), "http://repo.test/x")
        self.assertEqual(ensure_scheme("repo.test", "http"), "http://repo.test")
        self.assertEqual(ensure_scheme("//repo.test"), "https://repo.test")


if __name__ == '__main__':
    unittest.main()
