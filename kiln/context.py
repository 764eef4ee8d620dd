"""
Kiln dispatcher: resolve commands to recipes and run them.

What this module provides
- Context: an in-memory registry of scope classes keyed by path. It resolves a
  command ("deploy:build") to the matching scope instance and recipe, binds the
  following tokens with Recipe.prepare(), and invokes the recipe. Scope instances
  are bound to the context so recipes can call each other through Base.call().
- invoke(context, prompt): convenience runner mirroring Context.__invoke__.

Command vector
- A vector holds successive invocations: "build tag=v1 deploy production" runs
  `build` with option tag="v1", then `deploy` with positional "production".
  Each recipe consumes what it can bind; the next unconsumed token names the
  next command.

Resolution
- "a:b:c" is looked up first as recipe "c" of the scope at path a:b:c (the
  "deploy" == "deploy:deploy" shorthand), then as recipe "c" of the scope at a:b.
  A bare name resolves against the root scope (empty path) or a scope of that
  name.

Runtime flags
- shell: render faults to stderr and exit(1) instead of raising them.
- fancy: render faults in a rich panel.
- colorful: style the rendered faults.
"""
import difflib
import logging
import shlex
import sys
from collections import deque
from collections.abc import Iterable

from .base import Base, _normalize
from .faults import *
from .utils import *

logger = logging.getLogger(__name__)


class Context:
    """
    Registry of scopes and the dispatcher driving recipe invocation.
    """

    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    name = mirror("name")

    def __init__(self, *scopes, shell=False, fancy=False, colorful=False, name="kiln"):
        self._shell = bool(shell)
        self._fancy = bool(fancy)
        self._colorful = bool(colorful)
        self._name = name
        self._scopes = {}
        self._instances = {}
        self._recipes = {}

        for scope in scopes:
            self.register(scope)

    def register(self, scope, /):
        """
        add a scope class under its path (classes without a path register at the root).

        returns the class, so it can be used as a class decorator.
        """
        if not isinstance(scope, type) or not issubclass(scope, Base):
            raise TypeError("register() argument must be a scope class")
        if (path := scope.path or ()) in self._scopes:
            raise ValueError("scope path %r is already in use" % ":".join(path))
        self._scopes[path] = scope
        return scope

    @property
    def scope(self):
        """
        the root scope instance (empty path), or None.
        """
        return self.scope_for(())

    def scope_for(self, path, /):
        """
        return the scope instance at 'path', or None. instances are created once per context.
        """
        path = _normalize(path)
        try:
            return self._instances[path]
        except KeyError:
            pass
        if (scope := self._scopes.get(path)) is None:
            return None
        return self._instances.setdefault(path, scope(self))

    def scopes(self):
        """
        yield every registered scope instance in registration order.
        """
        for path in self._scopes:
            yield self.scope_for(path)

    def recipes(self):
        """
        yield every recipe of every registered scope.
        """
        for scope in self.scopes():
            yield from map(self._cached, scope.recipes())

    def _cached(self, recipe):
        return self._recipes.setdefault(recipe.command, recipe)

    def lookup(self, command, /):
        """
        resolve a command to its recipe, or None.
        """
        try:
            return self._recipes[command]
        except KeyError:
            pass
        try:
            path = _normalize(command)
        except (TypeError, ValueError):
            return None
        if not path:
            return None

        name = path[-1]
        for candidate in (path, path[:-1]):
            scope = self.scope_for(candidate)
            if scope is not None and name in type(scope).recipe_names():
                return self._cached(scope.recipe_for(name))
        return None

    def trigger(self, fault, /, **options):
        trigger(
            fault,
            **options,
            shell=self.shell,
            fancy=self.fancy,
            colorful=self.colorful,
            prog=self.name,
        )

    def call(self, *commands):
        """
        run a command vector; return the result of the last invocation.
        """
        tokens = deque(commands)
        result = None

        while tokens:
            command = tokens.popleft()

            if (recipe := self.lookup(command)) is None:
                suggestions = difflib.get_close_matches(command, [recipe.command for recipe in self.recipes()], 5)
                try:
                    hint = "did you mean %r? you can also run '%s list' to see all recipes" % (suggestions[0], self.name)
                except IndexError:
                    hint = "run '%s list' to see all available recipes" % self.name
                self.trigger(RecipeNotFoundError(
                    "could not find recipe %r" % command,
                    title="recipe not found",
                    code=FaultCode.RECIPE_NOT_FOUND,
                    command=command,
                    suggestions=suggestions,
                    hint=hint,
                    docs=getdoc(FaultCode.RECIPE_NOT_FOUND),
                ))
                return None

            try:
                ordered, options = recipe.prepare(tokens)
            except RecipeException as exception:
                self.trigger(exception)
                return None

            if len(ordered) < recipe.arity:
                names = [parameter.name for parameter in recipe.parameters][len(ordered):recipe.arity]
                self.trigger(MissingArgumentsError(
                    "recipe %r is missing %d required argument(s): %s" % (
                        recipe.command, recipe.arity - len(ordered), ", ".join(names)
                    ),
                    title="missing arguments",
                    code=FaultCode.MISSING_ARGUMENTS,
                    command=recipe.command,
                    missing=names,
                    hint="pass %s after '%s'" % (" ".join("<%s>" % name for name in names), recipe.command),
                    docs=getdoc(FaultCode.MISSING_ARGUMENTS),
                ))
                return None

            logger.debug("calling %s with %r and %r", recipe, ordered, options)
            result = recipe.call(*ordered, **options)

        return result

    def __invoke__(self, prompt=Unset):
        """
        Execute a command vector.

        Parameters
        - prompt:
          • Unset: read tokens from sys.argv[1:].
          • str: shell-like string; will be split via shlex.split.
          • Iterable[str]: pre-tokenized sequence; each element is trimmed.
        """
        if prompt is Unset:
            tokens = sys.argv[1:]
        elif isinstance(prompt, str):
            tokens = shlex.split(prompt)
        elif isinstance(prompt, Iterable):
            def _sanitized(iterable):
                for item in iterable:
                    if not isinstance(item, str):
                        raise TypeError("__invoke__() argument must be a string or an iterable of strings")
                    if item := item.strip():
                        yield item
            tokens = list(_sanitized(prompt))
        else:
            raise TypeError("__invoke__() argument must be a string or an iterable of strings")

        return self.call(*tokens)

    def __repr__(self):
        return "context(name=%r, scopes=%r)" % (self._name, [str(scope) for scope in self._scopes.values()])


def invoke(object, prompt=Unset, /):
    """
    Convenience runner for contexts.

    - object: an instance providing __invoke__(prompt).
    - prompt: Unset (sys.argv[1:]), a str (shlex-split) or an iterable of str.
    """
    if hasattr(object, "__invoke__") and callable(object.__invoke__):
        return object.__invoke__(prompt)

    target = "argument" if prompt is Unset else "first argument"
    raise TypeError(f"invoke() {target} must implement __invoke__ method")


__all__ = (
    "Context",
    "invoke",
)
