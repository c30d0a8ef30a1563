"""
Utilities and token kinds behavioral tests.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from commando.kinds import TokenKind
from commando.utils import Unset, UnsetType, coalesce, mirror, natural, rename


class TestUnset(TestCase):
    """The Unset sentinel and coalesce."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testFalsyAndPrintable(self):
        self.assertFalse(Unset)
        self.assertEqual(repr(Unset), "Unset")

    def testNotSubclassable(self):
        with self.assertRaises(TypeError):
            type("Derived", (UnsetType,), {})

    def testUnionInIsinstance(self):
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", str | Unset))

    def testCoalescePreservesFalsyValues(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)


class TestHelpers(TestCase):
    """rename, mirror and natural."""

    def testRenameDecorator(self):
        @rename("renamed")
        def original():
            pass

        self.assertEqual(original.__name__, "renamed")
        self.assertEqual(original.__qualname__, "renamed")

    def testRenameRejectsBadArity(self):
        with self.assertRaises(TypeError):
            rename()

    def testMirrorCopiesContainers(self):
        class Holder:
            items = mirror("items")

            def __init__(self):
                self._items = [1, 2]

        holder = Holder()
        holder.items.append(3)
        self.assertEqual(holder.items, [1, 2])

    def testNaturalOrder(self):
        self.assertEqual(
            sorted(["v10", "help", 1, "v2", 0, "h"], key=natural),
            [0, 1, "h", "help", "v2", "v10"],
        )


class TestTokenKind(TestCase):
    """Classification of option identities."""

    def testKinds(self):
        self.assertIs(TokenKind.of(3), TokenKind.ARGUMENT)
        self.assertIs(TokenKind.of("v"), TokenKind.SHORT)
        self.assertIs(TokenKind.of("verbose"), TokenKind.LONG)

    def testNamedAndPrefix(self):
        self.assertTrue(TokenKind.SHORT.named)
        self.assertTrue(TokenKind.LONG.named)
        self.assertFalse(TokenKind.ARGUMENT.named)
        self.assertEqual(
            [kind.prefix for kind in TokenKind],
            ["-", "--", ""],
        )


if __name__ == "__main__":
    unittest.main()
