"""
Builders module behavioral tests (declaration verbs and the synonym table).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from commando import Command, Declaration, VERBS
from commando.faults import UsageError


class TestDeclaration(TestCase):
    """Every canonical verb configures the declared option."""

    def setUp(self):
        self.cmd = Command(["prog"], trap=False)

    def testVerbsReturnTheDeclaration(self):
        declaration = self.cmd.option("f")
        self.assertIsInstance(declaration, Declaration)
        self.assertIs(declaration.describe("x"), declaration)
        self.assertIs(declaration.title("X"), declaration)

    def testConfigurationVerbs(self):
        option = (
            self.cmd.option("f")
            .alias("foo")
            .title("File")
            .describe("input file")
            .require()
            .needs("g")
            .must(callable)
            .map(str)
            .target
        )
        self.assertEqual(option.aliases, ["foo"])
        self.assertEqual(option.title, "File")
        self.assertEqual(option.description, "input file")
        self.assertTrue(option.required)
        self.assertEqual(option.needs, ["g"])
        self.assertIs(option.rule, callable)
        self.assertIs(option.transform, str)

    def testIncrementAndFileVerbs(self):
        self.assertEqual(self.cmd.option("v").increment(2).target.maximum, 2)
        option = self.cmd.option("g").file(False, True).target
        self.assertTrue(option.file)
        self.assertFalse(option.require_exists)
        self.assertTrue(option.allow_globbing)

    def testChainingStartsNextDeclaration(self):
        declaration = self.cmd.option("a").boolean().flag("b")
        self.assertEqual(declaration.target.identity, "b")
        self.assertEqual(declaration.argument().target.identity, 0)

    def testEverySynonymResolves(self):
        for synonym, verb in VERBS.items():
            with self.subTest(synonym=synonym):
                declaration = self.cmd.option("z")
                self.assertEqual(getattr(declaration, synonym).__name__, verb)

    def testSynonymsOnlyNameKnownVerbs(self):
        for verb in set(VERBS.values()):
            with self.subTest(verb=verb):
                self.assertTrue(callable(getattr(Declaration, verb)))

    def testPrivateNamesAreNotVerbs(self):
        with self.assertRaises(AttributeError):
            getattr(self.cmd.option("f"), "_missing")

    def testUnknownVerbIsQuietForHasattr(self):
        self.assertFalse(hasattr(self.cmd.option("f"), "frobnicate"))
        self.assertFalse(hasattr(self.cmd, "frobnicate"))
        with self.assertRaises(UsageError):
            self.cmd.option("f").frobnicate()

    def testAliasMustBeAName(self):
        with self.assertRaises(UsageError):
            self.cmd.option("f").alias(3)

    def testIncrementMaximumMustBeNonNegative(self):
        with self.assertRaises(UsageError):
            self.cmd.option("v").increment(-1)

    def testDefaultVerbRunsPipeline(self):
        self.assertEqual(self.cmd.option("n").map(int).default("3").target.value, 3)


if __name__ == "__main__":
    unittest.main()
