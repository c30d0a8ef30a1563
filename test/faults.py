"""
Faults module behavioral tests (codes, options, rendering, trigger).

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is checked on an in-memory console without colors.
"""

from __future__ import annotations

import copy
import io
import unittest
from unittest import TestCase
from unittest.mock import patch

from rich.console import Console

from commando.faults import (
    CommandException,
    FaultCode,
    ParseError,
    InvalidSyntaxError,
    UnknownOptionError,
    ExpectedArgumentError,
    InvalidValueError,
    FileResolutionError,
    RequiredMissingError,
    UnmetDependencyError,
    UsageError,
    UnknownVerbError,
    trigger,
    getdoc,
)


class TestFaults(TestCase):
    """Fault hierarchy, options and copy protocol."""

    def testParseErrorsShareBase(self):
        for fault in (
                InvalidSyntaxError,
                UnknownOptionError,
                ExpectedArgumentError,
                InvalidValueError,
                FileResolutionError,
                RequiredMissingError,
                UnmetDependencyError,
        ):
            with self.subTest(fault=fault.__name__):
                self.assertTrue(issubclass(fault, ParseError))
        self.assertFalse(issubclass(UsageError, ParseError))

    def testUnknownVerbIsUsageAndAttributeError(self):
        fault = UnknownVerbError("unknown function 'x' called")
        self.assertIsInstance(fault, UsageError)
        self.assertIsInstance(fault, AttributeError)
        self.assertIs(fault.options["code"], FaultCode.USAGE)
        self.assertEqual(fault.options["title"], "unknown verb")

    def testCodesAreUnique(self):
        codes = [fault.__code__ for fault in (
            InvalidSyntaxError,
            UnknownOptionError,
            ExpectedArgumentError,
            InvalidValueError,
            FileResolutionError,
            RequiredMissingError,
            UnmetDependencyError,
            UsageError,
        )]
        self.assertEqual(len(set(codes)), len(codes))

    def testOptionsCarryCodeAndTitle(self):
        fault = InvalidValueError("bad", option="n")
        self.assertIs(fault.options["code"], FaultCode.INVALID_VALUE)
        self.assertEqual(fault.options["title"], "invalid value")
        self.assertEqual(fault.options["option"], "n")
        self.assertEqual(str(fault), "bad")

    def testOptionsAreReadOnly(self):
        with self.assertRaises(TypeError):
            UsageError("x").options["code"] = None  # type: ignore[index]

    def testReplaceMergesOptions(self):
        fault = UnknownOptionError("unknown", option="x")
        replaced = copy.replace(fault, prog="tool")
        self.assertIsInstance(replaced, UnknownOptionError)
        self.assertEqual(replaced.options["prog"], "tool")
        self.assertEqual(replaced.options["option"], "x")
        self.assertNotIn("prog", fault.options)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.USAGE.normalize(), "11201")

    def testGetdocRejectsNonCodes(self):
        with self.assertRaises(TypeError):
            getdoc(11201)
        self.assertIsNone(getdoc(FaultCode.USAGE))


class TestTrigger(TestCase):
    """Rendering through trigger()."""

    def setUp(self):
        self.console = Console(file=io.StringIO(), color_system=None, width=80)
        patcher = patch("commando.faults.console", self.console)
        patcher.start()
        self.addCleanup(patcher.stop)

    def testRendersHeaderMessageAndHint(self):
        trigger(RequiredMissingError("required option 'f' must be specified", hint="pass -f"), prog="tool")
        output = self.console.file.getvalue()
        self.assertIn("[ tool — 11131 | Required Option Missing ]", output)
        self.assertIn("ERROR: required option 'f' must be specified", output)
        self.assertIn("→ pass -f", output)

    def testBeepOnlyWhenAsked(self):
        with patch.object(self.console, "bell") as bell:
            trigger(UsageError("x"))
            bell.assert_not_called()
            trigger(UsageError("x"), beep=True)
            bell.assert_called_once_with()

    def testTriggerRejectsPlainExceptions(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("x"))

    def testUncodedFaultRendersDash(self):
        trigger(CommandException("plain"), colorful=False)
        self.assertIn("commando — - | Error", self.console.file.getvalue())


if __name__ == "__main__":
    unittest.main()
