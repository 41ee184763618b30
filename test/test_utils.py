"""
Tests for the shared utilities.

Scope
- Unset: singleton identity, falsy semantics, unions, copying and pickling, finality.
- coalesce(): replaces only Unset, never other falsy values.
- byte_offset(): character index to UTF-8 byte offset translation.

Conventions
- Test method names follow CamelCase per project convention.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from rtformat.utils import *


class UnsetTest(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testSingleton(self):
        self.assertIs(UnsetType(), Unset)
        self.assertIs(UnsetType(), UnsetType())

    def testFalsy(self):
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)
        self.assertNotEqual(Unset, None)

    def testRepr(self):
        self.assertEqual(repr(Unset), "Unset")
        self.assertEqual(str(Unset), "Unset")

    def testUnionsInIsinstance(self):
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("text", str | Unset)
        self.assertIsInstance(Unset, Unset | int)
        self.assertNotIsInstance(1.5, str | Unset)

    def testCopyDeepcopyPickle(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)

    def testFinalClass(self):
        with self.assertRaises(TypeError):
            type("UnsetSubtype", (UnsetType,), {})


class CoalesceTest(TestCase):
    """Behavioral tests for coalesce()."""

    def testReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testPreservesFalsyValues(self):
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertEqual(coalesce("", "fallback"), "")
        self.assertEqual(coalesce([], [1]), [])


class ByteOffsetTest(TestCase):
    """Behavioral tests for byte_offset()."""

    def testAsciiAgreesWithIndex(self):
        self.assertEqual(byte_offset("foo {", 4), 4)
        self.assertEqual(byte_offset("foo {", 5), 5)
        self.assertEqual(byte_offset("", 0), 0)

    def testMultiByteCharacters(self):
        self.assertEqual(byte_offset("уникод {", 7), 13)
        self.assertEqual(byte_offset("€{", 1), 3)
        self.assertEqual(byte_offset("😀{}", 1), 4)

    def testOutOfRangeIndexRejected(self):
        with self.assertRaises(ValueError):
            byte_offset("abc", 4)
        with self.assertRaises(ValueError):
            byte_offset("abc", -1)

    def testNonStringRejected(self):
        with self.assertRaises(TypeError):
            byte_offset(b"abc", 1)


if __name__ == '__main__':
    unittest.main()
