"""
Commando declaration builder.

A Declaration is what Command.option()/flag()/argument() hand back: a small,
chainable object that configures exactly one Option. Every method returns the
declaration itself, except option()/flag()/argument() which start the next one.

    >>> from commando import Command
    >>> cmd = Command(["prog", "-vv", "report.txt"])
    >>> cmd.option("v").aka("verbose").count(3).describe("be chatty")
    >>> cmd.argument().require().title("path")

Short verbs
- VERBS maps every accepted synonym to its canonical method name ("o" → "option",
  "aka" → "alias", ...). It is static; unknown names raise UsageError.

Ownership
- Only the most recent declaration of a command may modify its option. Calling a
  configuration method on an older (stale) declaration raises UsageError.
"""
from types import MappingProxyType

from .faults import UsageError, UnknownVerbError
from .utils import *

VERBS = MappingProxyType({
    "o": "option",
    "bool": "boolean",
    "b": "boolean",
    "required": "require",
    "r": "require",
    "aka": "alias",
    "a": "alias",
    "refer_to_as": "title",
    "referred_to_as": "title",
    "d": "describe",
    "describe_as": "describe",
    "described_as": "describe",
    "description": "describe",
    "map_to": "map",
    "cast": "map",
    "cast_with": "map",
    "repeatable": "increment",
    "repeats": "increment",
    "count": "increment",
    "expects_file": "file",
    "defaults_to": "default",
})


class Declaration:
    """
    Chainable configuration of a single option, bound to its command.

    Verbs
    - option(name) / flag(name) / argument(index): start the next declaration
    - boolean(), require(), alias(name), title(text), describe(text)
    - map(transform), must(rule), needs(*names)
    - increment(maximum=0), file(require_exists=True, allow_globbing=False)
    - default(value)
    plus every synonym listed in VERBS.
    """

    def __init__(self, command, option, /):
        self._command = command
        self._option = option

    @property
    def target(self):
        """
        the option this declaration configures.
        """
        return self._option

    def _claim(self, verb):
        if self._command._current is not self:
            raise UsageError(
                "invalid option chain: cannot call %r on a stale declaration of option %r" % (verb, self._option.name),
                hint="configure an option right after declaring it, or declare it again to reopen it",
            )
        return self._option

    # ── Next declaration ───────────────────────────────────────────────────────

    def option(self, name=Unset, /):
        return self._command.option(name)

    def flag(self, name, /):
        return self._command.flag(name)

    def argument(self, index=Unset, /):
        return self._command.argument(index)

    # ── Configuration ──────────────────────────────────────────────────────────

    def boolean(self, boolean=True, /):
        self._claim("boolean").set_boolean(boolean)
        return self

    def require(self, required=True, /):
        self._claim("require").set_required(required)
        return self

    def alias(self, alias, /):
        self._command._register(self._claim("alias"), alias)
        return self

    def title(self, title, /):
        self._claim("title").set_title(title)
        return self

    def describe(self, description, /):
        self._claim("describe").set_description(description)
        return self

    def map(self, transform, /):
        self._claim("map").set_map(transform)
        return self

    def must(self, rule, /):
        self._claim("must").set_rule(rule)
        return self

    def needs(self, *names):
        self._claim("needs").set_needs(*names)
        return self

    def increment(self, maximum=0, /):
        self._claim("increment").set_increment(maximum)
        return self

    def file(self, require_exists=True, allow_globbing=False, /):
        self._claim("file").set_file_requirements(require_exists, allow_globbing)
        return self

    def default(self, value, /):
        self._claim("default").set_default(value)
        return self

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return getattr(self, VERBS[name])
        except KeyError:
            raise UnknownVerbError(
                "unknown function %r called on option %r" % (name, self._option.name),
                hint="see commando.builders.VERBS for the accepted short verbs",
            ) from None

    def __repr__(self):
        return "declaration(%r)" % (self._option.name,)


__all__ = (
    "Declaration",
    "VERBS",
)
