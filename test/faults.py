"""
Faults module behavioral tests (rendering, triggering, option merging).

Scope
- Validate trigger() in both modes: raised outside the shell, rendered inside it.
- Validate deferred triggering and exit statuses of fatal faults.
- Validate option merging through __replace__ and the fault hierarchy.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering goes to colorless in-memory consoles.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from adept.faults import (
    FaultCode,
    AdeptException,
    MalformedOptionError,
    OptionIndexError,
    InvalidPackageSpecError,
    PackageNotFoundError,
    FetchError,
    TransportFailureError,
    UnhandledStatusError,
    BrokenRedirectError,
    TooManyRedirectsError,
    FetchCancelledError,
    OutputError,
    trigger,
)


class TestTrigger(TestCase):
    def setUp(self):
        self.output = io.StringIO()
        self.console = Console(file=self.output, width=200, color_system=None)

    def testRaisesOutsideShell(self):
        with self.assertRaises(PackageNotFoundError) as context:
            trigger(PackageNotFoundError("missing"), title="package not found")
        self.assertEqual(context.exception.options["title"], "package not found")

    def testDeferredShellPrints(self):
        trigger(
            InvalidPackageSpecError("invalid package name: 'x'", title="invalid package", hint="use <name>:<version>"),
            shell=True,
            deferred=True,
            colorful=False,
            console=self.console,
        )
        output = self.output.getvalue()
        self.assertIn("Invalid Package", output)
        self.assertIn(str(int(FaultCode.INVALID_PACKAGE_SPEC)), output)
        self.assertIn("invalid package name: 'x'", output)
        self.assertIn("use <name>:<version>", output)

    def testShellExitsWithStatus(self):
        with self.assertRaises(SystemExit) as context:
            trigger(PackageNotFoundError("missing"), shell=True, colorful=False, console=self.console)
        self.assertEqual(context.exception.code, -2)
        self.assertIn("missing", self.output.getvalue())

    def testFancyPanel(self):
        trigger(
            MalformedOptionError("bad option", title="malformed option"),
            shell=True,
            deferred=True,
            fancy=True,
            colorful=False,
            console=self.console,
        )
        output = self.output.getvalue()
        self.assertIn("Malformed Option", output)
        self.assertIn("bad option", output)

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))


class TestFaultObjects(TestCase):
    def testReplaceMergesOptions(self):
        fault = UnhandledStatusError("server returned code 404", code=FaultCode.UNHANDLED_STATUS, url="u")
        replaced = fault.__replace__(url="v", shell=True)
        self.assertIsInstance(replaced, UnhandledStatusError)
        self.assertIsNot(replaced, fault)
        self.assertEqual(replaced.message, fault.message)
        self.assertEqual(dict(replaced.options), {"code": FaultCode.UNHANDLED_STATUS, "url": "v", "shell": True})
        self.assertEqual(fault.options["url"], "u")

    def testOptionsAreReadOnly(self):
        with self.assertRaises(TypeError):
            AdeptException("x", title="t").options["title"] = "other"

    def testStr(self):
        self.assertEqual(str(AdeptException("message")), "message")
        self.assertEqual(str(FetchCancelledError()), "FetchCancelledError")

    def testOptionIndexErrorIsIndexError(self):
        self.assertTrue(issubclass(OptionIndexError, IndexError))
        self.assertTrue(issubclass(OptionIndexError, AdeptException))

    def testFetchHierarchy(self):
        for fault in (TransportFailureError, UnhandledStatusError, BrokenRedirectError, TooManyRedirectsError, FetchCancelledError):
            with self.subTest(fault=fault.__name__):
                self.assertTrue(issubclass(fault, FetchError))
                self.assertEqual(fault.status, -3)

    def testStatuses(self):
        self.assertEqual(MalformedOptionError.status, 1)
        self.assertEqual(InvalidPackageSpecError.status, -1)
        self.assertEqual(PackageNotFoundError.status, -2)
        self.assertEqual(OutputError.status, -4)
        self.assertIs(OutputError.code, FaultCode.OUTPUT_FAILURE)

    def testNormalize(self):
        self.assertEqual(FaultCode.TOO_MANY_REDIRECTS.normalize(), "11304")

    def testCodesAreUnique(self):
        self.assertEqual(len(set(FaultCode)), len(FaultCode.__members__))


if __name__ == '__main__':
    unittest.main()
