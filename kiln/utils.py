"""
Kiln utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the recipe, scope and dispatcher layers.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not computed/provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/().

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks.

- mirror("attr")
  • Read-only property exposing a private backing field (self._attr) as a frozen copy.

- memoize(compute)
  • Read-only property computed once per instance under the instance lock (self._lock)
    and stored in self._<name>. A stored None is a valid, cached result.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
"""
import builtins
import functools
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided (or not yet computed).

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Return object unless it is the Unset sentinel, in which case return default.

    Falsey values like None, 0, "" or () are preserved as-is.
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    - Function form: rename(callable, name) -> callable
    - Decorator form: rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _freeze(object):
    """
    Recursively freeze container values.

    - Sequence (non-string): tuple of frozen items (named tuples are kept as-is).
    - Mapping: read-only mapping proxy over a frozen copy.
    - Set: frozenset of frozen items.
    - Anything else: returned as-is.
    """
    if isinstance(object, tuple):
        return object
    if isinstance(object, Sequence) and not isinstance(object, str):
        return tuple(map(_freeze, object))
    elif isinstance(object, Mapping):
        return MappingProxyType(dict(zip(object.keys(), map(_freeze, object.values()))))
    elif isinstance(object, Set):
        return frozenset(map(_freeze, object))
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors the private backing attribute "_{name}".

    Container values are returned frozen to discourage accidental mutation
    through the public API.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _freeze(getattr(self, "_" + name))

    return property(getter)


def memoize(compute, /):
    """
    Turn a zero-argument method into a read-only, compute-once property.

    Contract
    - The owner must provide a re-entrant lock as self._lock; computations may
      read other memoized properties of the same instance while holding it.
    - The result is stored in self._{name}; until then the backing field holds Unset.
    - Double-checked: the fast path reads without locking, the slow path computes
      under the lock so concurrent first access runs compute exactly once.
    """
    if not callable(compute):
        raise TypeError("memoize() argument must be callable")
    attribute = "_" + compute.__name__

    @functools.wraps(compute)
    def getter(self):
        if (value := getattr(self, attribute, Unset)) is not Unset:
            return value
        with self._lock:
            if (value := getattr(self, attribute, Unset)) is Unset:
                setattr(self, attribute, value := compute(self))
            return value

    return property(getter)


Unset = UnsetType()
"""
Internal sentinel for “not provided” and “not computed yet”.

Typical pattern: value = coalesce(user_value, default) to materialize a fallback
only when user_value is Unset (None and other falsey values are preserved).
"""


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "memoize",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
