"""
Listing tests (plain rendering of scopes and contexts).

Conventions
- Test method names follow CamelCase per project convention.
- Output is compared with whitespace collapsed, tabs are expanded by rich.
"""
import io
import unittest
from unittest import TestCase

from rich.console import Console

from kiln import Base, Context
from kiln.listing import format_parameters, format_recipe, print_context, print_scope, _palette


class Project(Base):
    # Greet someone.
    # @param count [Integer] number of repetitions
    def greet(self, name, *, count=1):
        pass


class Release(Base, path="release"):
    # Publish everything.
    def publish(self, *targets, **options):
        pass

    def release(self, version, *, dry):
        pass


def render(function, *arguments, **options):
    buffer = io.StringIO()
    function(Console(file=buffer, width=200, highlight=False), *arguments, **options)
    return " ".join(buffer.getvalue().split())


class TestFormat(TestCase):

    def testParameterKinds(self):
        styler = _palette(False)
        recipe = Release().recipe_for("publish")
        self.assertEqual(format_parameters(recipe.parameters, styler).plain, " *targets **options")

    def testRequiredKeyword(self):
        styler = _palette(False)
        self.assertEqual(format_recipe(Release().recipe_for("release"), styler).plain, "release version dry=")

    def testRecipeWithoutParameters(self):
        scope = Base.derive(("x",), {"run": lambda self: None})
        self.assertEqual(format_recipe(scope().recipe_for("run"), _palette(False)).plain, "x:run")

    def testPaletteWithoutColor(self):
        self.assertEqual(_palette(False)("command"), "")
        self.assertNotEqual(_palette(True)("command"), "")


class TestPrint(TestCase):

    def testPrintScope(self):
        output = render(print_scope, Project(), colorful=False)
        self.assertIn("greet name count=", output)
        self.assertIn("Greet someone.", output)
        self.assertIn("count [Integer] number of repetitions", output)

    def testPrintContext(self):
        context = Context(Project, Release, name="bake")
        buffer = io.StringIO()
        print_context(context, Console(file=buffer, width=200, highlight=False))
        output = " ".join(buffer.getvalue().split())
        self.assertTrue(output.startswith("bake"))
        self.assertIn("release release:publish *targets **options", output)
        self.assertIn("Publish everything. release version dry=", output)
        self.assertLess(output.index("greet"), output.index("release"))


if __name__ == "__main__":
    unittest.main()
