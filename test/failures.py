"""
Fault tests (options, replacement, triggering and rendering).

Conventions
- Test method names follow CamelCase per project convention.
"""
import io
import unittest
from unittest import TestCase, mock

from rich.console import Console

import kiln.faults
from kiln.faults import *


class TestException(TestCase):

    def testMessageAndOptions(self):
        fault = RecipeNotFoundError("could not find recipe 'x'", command="x")
        self.assertEqual(str(fault), "could not find recipe 'x'")
        self.assertEqual(fault["command"], "x")

    def testDefaults(self):
        fault = MissingArgumentsError("missing")
        self.assertEqual(fault["code"], FaultCode.MISSING_ARGUMENTS)
        self.assertEqual(fault["prog"], "kiln")
        self.assertIs(fault["shell"], False)
        with self.assertRaises(KeyError):
            fault["unknown"]

    def testOptionsAreReadOnly(self):
        fault = RecipeException("x", title="t")
        with self.assertRaises(TypeError):
            fault.options["title"] = "other"

    def testReplaceMergesOptions(self):
        fault = UncastableValueError("bad", token="a")
        replaced = fault.__replace__(shell=True)
        self.assertIsInstance(replaced, UncastableValueError)
        self.assertIsNot(replaced, fault)
        self.assertEqual(replaced["token"], "a")
        self.assertIs(replaced["shell"], True)
        self.assertIs(fault["shell"], False)

    def testUncastableIsValueError(self):
        self.assertTrue(issubclass(UncastableValueError, ValueError))


class TestTrigger(TestCase):

    def testRaisesOutsideShell(self):
        with self.assertRaises(RecipeNotFoundError) as context:
            trigger(RecipeNotFoundError("nope"), command="nope")
        self.assertEqual(context.exception["command"], "nope")

    def testExitsInShell(self):
        buffer = io.StringIO()
        with mock.patch.object(kiln.faults, "console", Console(file=buffer, width=200)):
            with self.assertRaises(SystemExit) as context:
                trigger(MissingArgumentsError("missing <name>", hint="pass <name>"), shell=True, prog="bake")
        self.assertEqual(context.exception.code, 1)
        output = buffer.getvalue()
        self.assertIn("11125", output)
        self.assertIn("missing <name>", output)
        self.assertIn("pass <name>", output)

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("x"))


class TestDocs(TestCase):

    def testNoDocs(self):
        self.assertIsNone(getdoc(FaultCode.RECIPE_NOT_FOUND))

    def testHostDocs(self):
        main = __import__("__main__")
        with mock.patch.object(main, "__docs__", {FaultCode.RECIPE_NOT_FOUND: "see the listing"}, create=True):
            self.assertEqual(getdoc(FaultCode.RECIPE_NOT_FOUND), "see the listing")

    def testRejectsNonCodes(self):
        with self.assertRaises(TypeError):
            getdoc(11101)

    def testHostCodes(self):
        main = __import__("__main__")
        with mock.patch.object(main, "__codes__", {FaultCode.UNCASTABLE_VALUE: "E-CAST"}, create=True):
            self.assertEqual(FaultCode.UNCASTABLE_VALUE.normalize(), "E-CAST")
        self.assertEqual(FaultCode.UNCASTABLE_VALUE.normalize(), "11126")


if __name__ == "__main__":
    unittest.main()
