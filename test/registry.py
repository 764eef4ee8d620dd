"""
Type registry tests (name resolution and token coercion).

Conventions
- Test method names follow CamelCase per project convention.
"""
import unittest
from unittest import TestCase

from kiln import types


class TestParse(TestCase):
    """Resolution of type-name tokens."""

    def testKnownNames(self):
        self.assertIs(types.parse("String"), types.String)
        self.assertIs(types.parse("Integer"), types.Integer)
        self.assertIs(types.parse("Float"), types.Float)
        self.assertIs(types.parse("Boolean"), types.Boolean)
        self.assertIs(types.parse("Array"), types.Array)
        self.assertIs(types.parse("Any"), types.Any)

    def testAliases(self):
        self.assertIs(types.parse("str"), types.String)
        self.assertIs(types.parse("int"), types.Integer)
        self.assertIs(types.parse("Number"), types.Float)
        self.assertIs(types.parse("bool"), types.Boolean)
        self.assertIs(types.parse("Array(String)"), types.Array)
        self.assertIs(types.parse("list"), types.Array)

    def testSurroundingWhitespaceIgnored(self):
        self.assertIs(types.parse("  Integer "), types.Integer)

    def testUnknownNameFallsBackToAny(self):
        self.assertIs(types.parse("Whatever"), types.Any)
        self.assertIs(types.parse(""), types.Any)
        self.assertIs(types.parse("integer"), types.Any)

    def testNonStringFallsBackToAny(self):
        self.assertIs(types.parse(None), types.Any)
        self.assertIs(types.parse(42), types.Any)

    def testNames(self):
        names = types.names()
        self.assertIn("Integer", names)
        self.assertIn("Array(String)", names)
        self.assertIsInstance(names, tuple)


class TestCoercion(TestCase):
    """Coercion of raw tokens."""

    def testAnyIsIdentity(self):
        self.assertEqual(types.Any.parse(" raw "), " raw ")

    def testString(self):
        self.assertEqual(types.String.parse("5"), "5")

    def testInteger(self):
        self.assertEqual(types.Integer.parse("5"), 5)
        self.assertEqual(types.Integer.parse("-12"), -12)
        with self.assertRaises(ValueError):
            types.Integer.parse("five")
        with self.assertRaises(ValueError):
            types.Integer.parse("1.5")

    def testFloat(self):
        self.assertEqual(types.Float.parse("0.5"), 0.5)
        self.assertEqual(types.Float.parse("2"), 2.0)
        with self.assertRaises(ValueError):
            types.Float.parse("half")

    def testBoolean(self):
        for raw in ("true", "TRUE", "yes", "on", "1"):
            self.assertIs(types.Boolean.parse(raw), True, raw)
        for raw in ("false", "False", "no", "off", "0"):
            self.assertIs(types.Boolean.parse(raw), False, raw)
        with self.assertRaises(ValueError):
            types.Boolean.parse("maybe")

    def testArray(self):
        self.assertEqual(types.Array.parse("a, b,c"), ["a", "b", "c"])
        self.assertEqual(types.Array.parse("single"), ["single"])
        self.assertEqual(types.Array.parse(""), [])

    def testCallIsParse(self):
        self.assertEqual(types.Integer("7"), 7)

    def testDeterministic(self):
        self.assertEqual(types.Array.parse("x,y"), types.Array.parse("x,y"))

    def testNonStringRejected(self):
        with self.assertRaises(TypeError):
            types.Integer.parse(5)


class TestType(TestCase):
    """Type instances."""

    def testName(self):
        self.assertEqual(types.Integer.name, "Integer")

    def testRepr(self):
        self.assertEqual(repr(types.Boolean), "type(Boolean)")

    def testImmutable(self):
        with self.assertRaises(AttributeError):
            types.Integer.name = "Other"
        with self.assertRaises(AttributeError):
            types.Integer._converter = str

    def testCustomType(self):
        upper = types.Type("Upper", str.upper)
        self.assertEqual(upper.parse("abc"), "ABC")

    def testInvalidType(self):
        with self.assertRaises(TypeError):
            types.Type("", str)
        with self.assertRaises(TypeError):
            types.Type("Broken", None)


if __name__ == "__main__":
    unittest.main()
