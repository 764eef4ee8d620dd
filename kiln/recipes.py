r"""
Kiln recipes: bind one scope operation to a command and its arguments.

What this module provides
- Recipe: the bound representation of one invocable operation of a scope instance.
  • command: the colon-joined command path ("deploy:build"), without redundant
    repetition of the last path segment ("deploy", not "deploy:deploy").
  • parameters / arity / has_options: signature-driven binding metadata.
  • description / types: documentation mined from the declaring source text.
  • prepare(tokens): greedy, single-pass parsing of raw tokens into positional
    values and named options, with type coercion.
  • call(*arguments, **options): invoke the operation, forwarding options only
    when it accepts keywords.
- Parameter / ParameterKind: the (kind, name, type) view of each parameter.

Source mining
- Marker form: an operation marked with @recipe(description=...) reports that
  single text, wherever the marker sits among stacked decorators.
- Legacy form: when the declaration line (the `def` line, or the first decorator
  line of a decorated operation) carries `description="..."`, that single text
  is the whole description.
- Otherwise the contiguous block of `#` comment lines right above the declaration
  is the description, top to bottom; the first non-comment line (a blank line
  included) ends the block.
- Lines shaped `@param <name> [<Type>] <details>` document the type of a parameter;
  the type name is resolved through kiln.types.parse(). The details may be
  omitted (`@param size [Integer]`).

Argument grammar
- Any token with a non-empty name before its first "=" is a named option
  `name=value`; the value keeps any further "=" verbatim. Such tokens are taken as
  options even before every positional slot is filled and after all of them are.
- Other tokens fill the required positional parameters in declared order; once
  they are filled, parsing stops and the remaining tokens are left to the caller.

Memoization
- Every derived field is computed at most once per Recipe, under a per-recipe lock.
"""
import inspect
import linecache
import logging
import re
import threading
from collections import deque
from enum import StrEnum
from inspect import Parameter as _Signature
from types import MappingProxyType
from typing import NamedTuple

from rich.console import Console

from .faults import UncastableValueError, FaultCode, getdoc
from .types import Type, names, parse
from .utils import *

logger = logging.getLogger(__name__)

console = Console(highlight=False)

PARAMETER = re.compile(r"@param\s+(?P<name>.*?)\s+\[(?P<type>.*?)\]\s*(?P<details>.*?)\Z")
DESCRIPTION = re.compile(r"""description\s*=\s*(?P<quote>["'])(?P<text>.*?)(?P=quote)""")
COMMENT = re.compile(r"^\s*#\s?(?P<text>.*?)$")


class ParameterKind(StrEnum):
    """
    kind of a recipe parameter, derived from the operation signature.

    values double as style names in listings.
    """
    REQUIRED = "req"
    OPTIONAL = "opt"
    REST = "rest"
    KEYWORD_REQUIRED = "keyreq"
    KEYWORD = "key"
    KEYWORD_REST = "keyrest"


_KEYWORDS = frozenset((
    ParameterKind.KEYWORD_REQUIRED,
    ParameterKind.KEYWORD,
    ParameterKind.KEYWORD_REST,
))


class Parameter(NamedTuple):
    kind: ParameterKind
    name: str
    type: Type | None = None


def _kindof(parameter):
    match parameter.kind:
        case _Signature.VAR_POSITIONAL:
            return ParameterKind.REST
        case _Signature.VAR_KEYWORD:
            return ParameterKind.KEYWORD_REST
        case _Signature.KEYWORD_ONLY:
            if parameter.default is _Signature.empty:
                return ParameterKind.KEYWORD_REQUIRED
            return ParameterKind.KEYWORD
        case _:
            if parameter.default is _Signature.empty:
                return ParameterKind.REQUIRED
            return ParameterKind.OPTIONAL


class Recipe:
    """
    One operation of a scope instance, bound to its command.

    A recipe is cheap to build: nothing is inspected or read until the
    corresponding property is first accessed. The function may be passed
    explicitly; otherwise it is looked up on the instance by name.
    """

    instance = mirror("instance")
    name = mirror("name")

    def __init__(self, instance, name, function=Unset, /):
        if not isinstance(name, str) or not name:
            raise TypeError("recipe name must be a non-empty string")
        self._instance = instance
        self._name = name
        self._function = function
        self._lock = threading.RLock()

    @memoize
    def function(self):
        """
        the bound callable implementing this recipe.
        """
        return getattr(self._instance, self._name)

    @memoize
    def source_location(self):
        """
        (file, line) of the declaration, or None when it has no Python source.

        for decorated operations the line is the first decorator line.
        """
        function = inspect.unwrap(getattr(self.function, "__func__", self.function))
        if (code := getattr(function, "__code__", None)) is None:
            return None
        try:
            file = inspect.getsourcefile(function) or code.co_filename
        except TypeError:
            file = code.co_filename
        return file, code.co_firstlineno

    def __lt__(self, other):
        if not isinstance(other, Recipe):
            return NotImplemented
        return _sortkey(self) < _sortkey(other)

    @memoize
    def command(self):
        """
        the command that selects this recipe, e.g. "deploy:build".
        """
        path = self._instance.path or ()

        if not path:
            return self._name
        elif path[-1] == self._name:
            return ":".join(path)
        return ":".join((*path, self._name))

    def __str__(self):
        return self.command

    @memoize
    def signature(self):
        try:
            return tuple(inspect.signature(self.function).parameters.values())
        except (TypeError, ValueError):
            logger.debug("recipe %r has no inspectable signature", self._name)
            return ()

    @memoize
    def parameters(self):
        """
        tuple of Parameter(kind, name, type), or None when the operation takes no parameters.
        """
        if not (signature := self.signature):
            return None
        types = self.types
        return tuple(
            Parameter(_kindof(parameter), parameter.name, types.get(parameter.name))
            for parameter in signature
        )

    @property
    def has_options(self):
        """
        whether the last parameter is a keyword one (so call() forwards options).
        """
        if parameters := self.parameters:
            return parameters[-1].kind in _KEYWORDS
        return False

    @memoize
    def arity(self):
        """
        number of required positional parameters.
        """
        return sum(_kindof(parameter) is ParameterKind.REQUIRED for parameter in self.signature)

    def prepare(self, arguments):
        """
        consume raw tokens from the front of 'arguments' (a list or deque, mutated in place).

        returns
        - (ordered, options): the positional values in declared order and the named
          options mapping; values are coerced through their documented types.

        raises
        - UncastableValueError when a token cannot be coerced to its documented type.
          nothing has been invoked at that point.
        """
        ordered = []
        options = {}
        names = deque(
            parameter.name for parameter in self.signature
            if _kindof(parameter) is ParameterKind.REQUIRED
        )
        types = self.types

        while arguments:
            argument = arguments[0]
            name, separator, value = argument.partition("=")

            if name and separator:
                del arguments[0]
                options[name] = self._coerce(types.get(name), name, value)
            elif len(ordered) < self.arity:
                del arguments[0]
                name = names.popleft()
                ordered.append(self._coerce(types.get(name), name, argument))
            else:
                break

        return ordered, options

    def _coerce(self, type, name, value):
        if type is None:
            return value
        try:
            return type.parse(value)
        except ValueError:
            raise UncastableValueError(
                "cannot parse %r as %s for parameter %r of %r" % (value, type.name.lower(), name, self.command),
                title="uncastable value",
                code=FaultCode.UNCASTABLE_VALUE,
                hint="pass a value of type %s for %r (for example: %s=<value>)" % (type.name, name, name),
                docs=getdoc(FaultCode.UNCASTABLE_VALUE),
                command=self.command,
                parameter=name,
                token=value,
                type=type,
            ) from None

    def call(self, *arguments, **options):
        """
        invoke the operation.

        options are forwarded only when the operation declares keyword parameters;
        names it does not declare are dropped unless it takes **kwargs. options
        naming a positional parameter already bound by 'arguments' are dropped.
        """
        if not self.has_options:
            if options:
                logger.debug("%s takes no options, discarding %s", self, sorted(options))
            return self.function(*arguments)

        if not any(parameter.kind is ParameterKind.KEYWORD_REST for parameter in self.parameters):
            keywords = {parameter.name for parameter in self.parameters if parameter.kind in _KEYWORDS}
            if discarded := options.keys() - keywords:
                logger.debug("%s does not declare %s, discarding", self, sorted(discarded))
            options = {name: value for name, value in options.items() if name in keywords}
        else:
            # Positionals already bound by arguments cannot be passed again by name.
            bound = [
                parameter.name for parameter in self.parameters
                if parameter.kind in (ParameterKind.REQUIRED, ParameterKind.OPTIONAL)
            ][:len(arguments)]
            if discarded := options.keys() & set(bound):
                logger.debug("%s already binds %s positionally, discarding", self, sorted(discarded))
                options = {name: value for name, value in options.items() if name not in discarded}

        return self.function(*arguments, **options)

    def explain(self, *arguments, **options):
        """
        print the call that would be made, without making it.
        """
        if self.has_options:
            console.print("%s(%s, %r)" % (self, ", ".join(map(str, arguments)), options), markup=False)
        else:
            console.print("%s(%s)" % (self, ", ".join(map(str, arguments))), markup=False)

    @memoize
    def description(self):
        """
        tuple of human-authored lines documenting the operation (possibly empty).
        """
        function = inspect.unwrap(getattr(self.function, "__func__", self.function))

        # Marked with @recipe(description=...), wherever the decorator sits:
        if (text := getattr(function, "__recipe__", {}).get("description")) is not None:
            return (text,)

        if (location := self.source_location) is None:
            return ()

        file, number = location
        lines = linecache.getlines(file, getattr(function, "__globals__", None))
        index = number - 1

        if not 0 <= index < len(lines):
            logger.debug("no source line %d in %r for recipe %r", number, file, self._name)
            return ()

        # Legacy inline form:
        if match := DESCRIPTION.search(lines[index]):
            return (match["text"],)

        description = deque()
        index -= 1

        while index >= 0 and (match := COMMENT.match(lines[index].rstrip("\r\n"))):
            description.appendleft(match["text"])
            index -= 1

        return tuple(description)

    @memoize
    def types(self):
        """
        read-only mapping of parameter name to Type, from `@param` description lines.
        """
        types = {}

        for line in self.description:
            if match := PARAMETER.search(line):
                if match["type"].strip() not in names():
                    logger.debug("unknown type %r for parameter %r of %s, using Any", match["type"], match["name"], self)
                types[match["name"]] = parse(match["type"])

        return MappingProxyType(types)

    def __rich_repr__(self):
        yield "command", self.command
        yield "parameters", self.parameters
        yield "description", self.description

    def __repr__(self):
        return "recipe(%s)" % ", ".join("%s=%r" % pair for pair in self.__rich_repr__())


def _sortkey(recipe):
    file, line = recipe.source_location or ("", 0)
    return file, line


__all__ = (
    "Recipe",
    "Parameter",
    "ParameterKind",
    "PARAMETER",
)
