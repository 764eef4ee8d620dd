"""
Kiln listings: render scopes and their recipes with rich.

Layout
    <scope>
        <command> <parameters...>
            <description line>
            <name> [<Type>] <details>        (documented parameters)

Parameters are shown by kind: `name` for positionals, `*name` for variadic
positionals, `name=` for keywords and `**name` for variadic keywords.

Palette keys
- context, scope, command, description
- parameter, type (documented parameters)
- req, opt, rest, keyreq, key, keyrest (parameter kinds)

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When colorful is False, styling is suppressed.
"""
from collections import defaultdict

from rich.console import Console
from rich.text import Text

from .recipes import PARAMETER, ParameterKind


def _palette(colorful):
    styles = defaultdict(str, {
        # === Heads ===
        "context": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "scope": "bold #FFFFFF",  # Pure white headers

        # === Recipes ===
        "command": "bold #00E6FF",  # CYAN for commands
        "description": "#9CA3AF",  # Muted gray

        # === Documented parameters ===
        "parameter": "bold #FFD600",  # AMBER for parameters
        "type": "bold #22C55E",  # GREEN for types

        # === Parameter kinds ===
        "req": "#FFD600",
        "opt": "italic #FFD600",
        "rest": "italic #FFD600",
        "keyreq": "#36C5F0",
        "key": "italic #36C5F0",
        "keyrest": "italic #36C5F0",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    return styler


def format_parameters(parameters, styler):
    text = Text()

    for kind, name, _ in parameters:
        match kind:
            case ParameterKind.KEYWORD | ParameterKind.KEYWORD_REQUIRED:
                name = "%s=" % name
            case ParameterKind.KEYWORD_REST:
                name = "**%s" % name
            case ParameterKind.REST:
                name = "*%s" % name

        text.append(" ")
        text.append(name, styler(str(kind)))

    return text


def format_recipe(recipe, styler):
    text = Text(recipe.command, styler("command"))

    if parameters := recipe.parameters:
        text.append_text(format_parameters(parameters, styler))

    return text


def print_scope(console, scope, *, colorful=True):
    """
    print every recipe of a scope instance, in source order.
    """
    styler = _palette(colorful)

    for recipe in sorted(scope.recipes()):
        console.print()
        console.print(Text("\t").append_text(format_recipe(recipe, styler)))

        for line in recipe.description:
            if match := PARAMETER.search(line):
                console.print(Text.assemble(
                    "\t\t",
                    (match["name"], styler("parameter")),
                    " [",
                    (match["type"], styler("type")),
                    "] ",
                    (match["details"], styler("description")),
                ))
            else:
                console.print(Text.assemble("\t\t", (line, styler("description"))))


def print_context(context, console=None, /):
    """
    print every scope registered in a context, the root scope first.
    """
    console = console or Console(highlight=False)
    styler = _palette(context.colorful)

    console.print(Text(context.name, styler("context")))

    scopes = sorted(context.scopes(), key=lambda scope: len(scope.path or ()))
    for scope in scopes:
        if scope.path:
            console.print(Text(str(type(scope)), styler("scope")))
        print_scope(console, scope, colorful=context.colorful)
        console.print()


__all__ = (
    "format_parameters",
    "format_recipe",
    "print_scope",
    "print_context",
)
