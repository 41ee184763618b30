"""
Fault taxonomy and reporting tests.

Scope
- FaultCode: stable numeric identifiers and host normalization (__codes__).
- FormatException: message/options handling, location properties,
  copy.replace() stamping, pickling.
- trigger(): always raises; unknown parser options are rejected.
- Rich rendering: header, template excerpt with caret, hint, fancy panel.
- getdoc(): host documentation lookup (__docs__).

Conventions
- Test method names follow CamelCase per project convention.
- Console output is captured with color disabled for deterministic comparison.
"""
import copy
import pickle
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from rtformat import parse
from rtformat.faults import *


def capture(renderable):
    console = Console(color_system=None, force_terminal=False, width=100)
    with console.capture() as captured:
        console.print(renderable)
    return captured.get()


class TestFaultCode(TestCase):
    """Stable codes and normalization."""

    def testCodesAreStable(self):
        self.assertEqual(FaultCode.UNMATCHED_BRACE, 21101)
        self.assertEqual(FaultCode.MALFORMED_PLACEHOLDER, 21102)
        self.assertEqual(FaultCode.INVALID_SPECIFIER, 21111)
        self.assertEqual(FaultCode.MISSING_ARGUMENT, 21121)
        self.assertEqual(FaultCode.MISSING_SIZE_ARGUMENT, 21122)
        self.assertEqual(FaultCode.INVALID_SIZE, 21123)
        self.assertEqual(FaultCode.UNSUPPORTED_SPECIFIER, 21131)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.INVALID_SIZE.normalize(), "21123")

    def testNormalizeHonoursHostMapping(self):
        codes = {FaultCode.INVALID_SIZE: "E-SIZE"}
        with mock.patch.object(sys.modules["__main__"], "__codes__", codes, create=True):
            self.assertEqual(FaultCode.INVALID_SIZE.normalize(), "E-SIZE")
            self.assertEqual(FaultCode.UNMATCHED_BRACE.normalize(), "21101")

    def testEveryFaultHasItsOwnCode(self):
        classes = (
            UnmatchedBraceError,
            MalformedPlaceholderError,
            InvalidSpecifierError,
            MissingArgumentError,
            MissingSizeArgumentError,
            InvalidSizeError,
            UnsupportedSpecifierError,
        )
        self.assertEqual({cls().code for cls in classes}, set(FaultCode))
        for cls in classes:
            self.assertTrue(issubclass(cls, FormatException))


class TestFormatException(TestCase):
    """Message, options and location handling."""

    def testDefaultMessageIsTitle(self):
        fault = MissingArgumentError()
        self.assertEqual(fault.message, "missing argument")
        self.assertEqual(fault.options["title"], "missing argument")
        self.assertIs(fault.code, FaultCode.MISSING_ARGUMENT)

    def testUnlocatedFault(self):
        fault = InvalidSizeError("bad size")
        self.assertIsNone(fault.position)
        self.assertIsNone(fault.index)
        self.assertIsNone(fault.template)
        self.assertEqual(str(fault), "bad size")

    def testOptionsAreReadOnly(self):
        fault = InvalidSizeError("bad size", hint="use digits")
        with self.assertRaises(TypeError):
            fault.options["hint"] = "other"

    def testReplaceStampsLocation(self):
        fault = InvalidSizeError("bad size", hint="use digits")
        located = copy.replace(fault, template="ab {:1$}", index=3, position=3)
        self.assertIsInstance(located, InvalidSizeError)
        self.assertIsNot(located, fault)
        self.assertEqual(located.position, 3)
        self.assertEqual(located.template, "ab {:1$}")
        self.assertEqual(located.options["hint"], "use digits")
        self.assertEqual(str(located), "bad size at offset 3")
        self.assertIsNone(fault.position)

    def testPickle(self):
        fault = MissingArgumentError("gone", position=5, index=5, template="01234{}")
        restored = pickle.loads(pickle.dumps(fault))
        self.assertIsInstance(restored, MissingArgumentError)
        self.assertEqual(restored.message, "gone")
        self.assertEqual(restored.position, 5)
        self.assertEqual(dict(restored.options), dict(fault.options))


class TestTrigger(TestCase):
    """Surfacing faults."""

    def testRaisesWithMergedOptions(self):
        with self.assertRaises(UnmatchedBraceError) as context:
            trigger(UnmatchedBraceError("stray"), position=2, index=2, template="a }")
        self.assertEqual(context.exception.position, 2)

    def testRejectsNonTriggerables(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))

    def testRaisesWhateverTheRenderingOptions(self):
        fault = UnmatchedBraceError("stray", fancy=True, colorful=True)
        with self.assertRaises(UnmatchedBraceError):
            trigger(fault, position=2, index=2, template="a }")

    def testParserFaultStaysCatchable(self):
        with self.assertRaises(UnmatchedBraceError) as context:
            parse("foo {", fancy=True)
        self.assertTrue(context.exception.options["fancy"])
        output = capture(context.exception)
        self.assertIn("21101", output)
        self.assertIn("unmatched '{' at offset 4", output)
        self.assertIn("  foo {", output)

    def testProcessLevelOptionsAreRejected(self):
        for option in ("shell", "ratio"):
            with self.subTest(option=option):
                with self.assertRaises(TypeError):
                    parse("foo {", **{option: True})


class TestRendering(TestCase):
    """Rich rendering of located faults."""

    def setUp(self):
        self.fault = InvalidSpecifierError(
            "invalid specifier 'Z'",
            hint="check the specifier",
            template="first line\nfoo {:Z} bar",
            index=15,
            position=15,
        )

    def testPlainRendering(self):
        output = capture(self.fault)
        self.assertIn("21111 | Invalid Specifier ]", output)
        self.assertIn("invalid specifier 'Z' at offset 15", output)
        self.assertIn("  foo {:Z} bar\n      ^", output)
        self.assertNotIn("first line", output)
        self.assertIn("check the specifier", output)

    def testFancyRendering(self):
        output = capture(copy.replace(self.fault, fancy=True))
        self.assertIn("Invalid Specifier", output)
        self.assertIn("check the specifier", output)

    def testUnlocatedRenderingHasNoCaret(self):
        output = capture(InvalidSizeError("bad size"))
        self.assertIn("bad size", output)
        self.assertNotIn("^", output)


class TestGetdoc(TestCase):
    """Host documentation lookup."""

    def testMissingDocsIsNone(self):
        with mock.patch.object(sys.modules["__main__"], "__docs__", {}, create=True):
            self.assertIsNone(getdoc(FaultCode.INVALID_SIZE))

    def testHostDocs(self):
        docs = {FaultCode.INVALID_SIZE: "Sizes must be non-negative integers."}
        with mock.patch.object(sys.modules["__main__"], "__docs__", docs, create=True):
            self.assertEqual(getdoc(FaultCode.INVALID_SIZE), "Sizes must be non-negative integers.")

    def testParserAttachesHostDocs(self):
        docs = {FaultCode.UNMATCHED_BRACE: "Braces come in pairs."}
        with mock.patch.object(sys.modules["__main__"], "__docs__", docs, create=True):
            with self.assertRaises(UnmatchedBraceError) as context:
                parse("foo {")
        self.assertEqual(context.exception.options["docs"], "Braces come in pairs.")
        self.assertIn("Braces come in pairs.", capture(context.exception))

    def testRejectsPlainIntegers(self):
        with self.assertRaises(TypeError):
            getdoc(21123)


if __name__ == '__main__':
    unittest.main()
