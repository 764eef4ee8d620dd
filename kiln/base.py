"""
Kiln scopes: path-identified collections of recipes.

What this module provides
- Base: the generic scope type. A scope class groups the operations of one
  script under a command path; every public callable it (or a mixin below Base)
  introduces is a recipe. A scope instance is bound to the dispatcher context that
  drives it, so one recipe can call another by command through Base.call().
- recipe(description=...): legacy marker for operations documented inline; see
  kiln.recipes for how the declaration line is read.

Defining scopes
    class Deploy(Base, path="deploy"):
        # Deploy the current build.
        def deploy(self):
            ...

        # Build a fresh image.
        # @param tag [String] the image tag.
        def build(self, tag, *, push=False):
            ...

    Deploy = Base.derive(("deploy",), {"deploy": deploy, "build": build})  # equivalent

Paths
- A path is a tuple of segments; strings are split on ":". The path is fixed when
  the scope class is defined; Base itself has none (path is None).
- str(scope_class) renders the colon-joined path.
"""
from types import MappingProxyType

from .recipes import Recipe
from .utils import *


def _normalize(path):
    if isinstance(path, str):
        path = path.split(":") if path else ()
    try:
        path = tuple(path)
    except TypeError:
        raise TypeError("scope path must be a string or an iterable of strings") from None
    for segment in path:
        if not isinstance(segment, str) or not segment:
            raise ValueError("scope path segments must be non-empty strings")
    return path


class BaseType(type):
    """
    Metaclass of scopes: exposes the class-level path and renders scopes by path.
    """

    @property
    def path(cls):
        return getattr(cls, "PATH", None)

    def __str__(cls):
        if (path := cls.path) is not None:
            return ":".join(path)
        return super().__str__()

    def __repr__(cls):
        if (path := cls.path) is not None:
            return "kiln.Base<%s>" % ":".join(path)
        return super().__repr__()


class Base(metaclass=BaseType):
    """
    Generic scope. Subclass it (or use Base.derive) to define recipes.
    """

    def __init_subclass__(cls, /, path=Unset, **options):
        super().__init_subclass__(**options)
        if path is not Unset:
            cls.PATH = _normalize(path)

    def __init__(self, context=None, /):
        self.context = context

    @classmethod
    def derive(cls, path=(), namespace=None, /):
        """
        return a new scope class bound to 'path', optionally populated from 'namespace'.
        """
        return type(cls)(cls.__name__, (cls,), dict(namespace or {}), path=path)

    @property
    def path(self):
        return type(self).path

    def call(self, *arguments):
        """
        invoke other recipes by command through the bound context.
        """
        if self.context is None:
            raise RuntimeError("%r is not bound to a context" % type(self))
        return self.context.call(*arguments)

    @classmethod
    def recipe_names(cls):
        """
        names of the public callables introduced below Base, most-derived first.
        """
        excluded = set(dir(Base))
        names = []

        for klass in cls.__mro__:
            if klass in Base.__mro__:
                continue
            for name, value in vars(klass).items():
                if name.startswith("_") or name in excluded or name in names:
                    continue
                if isinstance(value, type) or not callable(getattr(cls, name, None)):
                    continue
                names.append(name)

        return tuple(names)

    def recipes(self):
        """
        yield one Recipe per operation of this scope (a fresh generator on every call).
        """
        for name in type(self).recipe_names():
            yield self.recipe_for(name)

    def recipe_for(self, name):
        return Recipe(self, name)

    def __repr__(self):
        return "<%r context=%r>" % (type(self), self.context)


def recipe(function=Unset, /, *, description=Unset):
    """
    mark an operation as a recipe, optionally with an inline description.

    written on the declaration line, the description is what the recipe reports:

        @recipe(description="Build a fresh image.")
        def build(self, tag): ...
    """
    def wrapper(function, /):
        if not callable(function):
            raise TypeError("@recipe() must be applied to a callable")
        function.__recipe__ = MappingProxyType({"description": coalesce(description)})
        return function

    return wrapper(function) if function is not Unset else wrapper


__all__ = (
    "Base",
    "recipe",
)
