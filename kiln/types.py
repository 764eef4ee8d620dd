"""
Kiln type registry: coercion of raw command-line tokens.

Overview
- Type: a named, deterministic and side-effect-free coercion from a raw string
  token to a typed value. Calling a Type (or its parse method) performs the
  conversion; invalid input raises ValueError.
- parse(name): resolve a type-name token (as written in `@param name [Type] ...`
  documentation lines) to its Type. Unknown names never raise; they resolve to
  Any so unexpected documentation never breaks argument binding.

Registered names
- Any                          pass-through (the fallback)
- String, str                  the raw token
- Integer, int                 base-10 integer
- Float, Number, float         floating point number
- Boolean, bool                true/yes/on/1 or false/no/off/0 (case-insensitive)
- Array, Array(String), list   comma separated list of strings

Example
    >>> parse("Integer").parse("5")
    5
    >>> parse("Whatever") is Any
    True
"""
from types import MappingProxyType
from typing import final

from .utils import *


@final
class Type:
    """
    A named coercion capability.

    Instances are immutable; their name is exposed read-only and they are
    compared by identity (the registry holds one instance per type).
    """
    __slots__ = ("_name", "_converter")

    name = mirror("name")

    def __init__(self, name, converter, /):
        if not isinstance(name, str) or not name:
            raise TypeError("type name must be a non-empty string")
        if not callable(converter):
            raise TypeError("type converter must be callable")
        object.__setattr__(self, "_name", name)
        object.__setattr__(self, "_converter", converter)

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__!r} object is immutable")

    def parse(self, raw, /):
        """
        coerce a raw token; raise ValueError when it cannot be represented.
        """
        if not isinstance(raw, str):
            raise TypeError(f"{self._name} parse() argument must be a string")
        return self._converter(raw)

    __call__ = parse

    def __repr__(self):
        return f"type({self._name})"

    def __rich_repr__(self):
        yield "name", self._name


def _boolean(raw):
    match raw.strip().lower():
        case "true" | "yes" | "on" | "1":
            return True
        case "false" | "no" | "off" | "0":
            return False
    raise ValueError(f"invalid literal for Boolean: {raw!r}")


def _array(raw):
    return [item.strip() for item in raw.split(",")] if raw else []


Any = Type("Any", lambda raw: raw)
String = Type("String", str)
Integer = Type("Integer", int)
Float = Type("Float", float)
Boolean = Type("Boolean", _boolean)
Array = Type("Array", _array)

_registry = MappingProxyType({
    "Any": Any,
    "String": String,
    "str": String,
    "Integer": Integer,
    "int": Integer,
    "Float": Float,
    "Number": Float,
    "float": Float,
    "Boolean": Boolean,
    "bool": Boolean,
    "Array": Array,
    "Array(String)": Array,
    "list": Array,
})


def parse(name, /):
    """
    resolve a type-name token to its Type, falling back to Any.

    leading/trailing whitespace is ignored; the lookup is otherwise exact.
    """
    if not isinstance(name, str):
        return Any
    return _registry.get(name.strip(), Any)


def names():
    """
    return the registered type names (aliases included).
    """
    return tuple(_registry.keys())


__all__ = (
    "Type",
    "Any",
    "String",
    "Integer",
    "Float",
    "Boolean",
    "Array",
    "parse",
    "names",
)
