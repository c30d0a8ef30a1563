r"""
Commando option model and value pipeline.

Overview
- Option: a single declared parameter, identified either by a positional index
  (int, "argument") or by a name (str; one character is a short flag "-f",
  longer names are long flags "--foo").
- Satisfied / Unmet: tagged result of Option.has_needs(...).

Value pipeline (Option.set_value)
  1. boolean options only accept bool values.
  2. the custom rule (must) must accept the raw value.
  3. increment options only accept int values; values above a positive maximum are clamped.
  4. file options resolve the raw path to an absolute one (or the list of glob matches).
  5. the custom map (cast) transforms the validated value; the result is stored.
  A failing step raises and nothing is stored. Setting a default runs the same
  pipeline immediately, so invalid defaults fail at declaration time.

Introspection & representation
- OptionType metaclass exposes the fields listed in __introspectable__ as read-only
  properties (mirror()) and provides stable __repr__/__rich_repr__.

Quick example:
    >>> from commando.options import Option
    >>> option = Option("v").add_alias("verbosity").set_increment(3)
    >>> option.set_value(5)
    >>> option.value
    3
"""
import functools
import glob
import io
import logging
import operator
import os.path
from collections import defaultdict
from typing import NamedTuple

from rich.console import Console, Group
from rich.padding import Padding
from rich.text import Text

from .faults import InvalidValueError, FileResolutionError, UsageError
from .kinds import TokenKind
from .utils import *

logger = logging.getLogger(__name__)


class Satisfied(NamedTuple):
    """
    every needed option is declared and holds a truthy value.
    """

    def __bool__(self):
        return True


class Unmet(NamedTuple):
    """
    one or more needed options are missing or falsy; names keep declaration order.
    """
    names: tuple

    def __bool__(self):
        return False


class OptionType(type):
    """
    Metaclass that exposes option state as read-only, introspectable properties.

    Responsibilities
    - Expose every name in __introspectable__ as a read-only property reading
      the "_<name>" backing field (see mirror()).
    - Provide stable, readable __repr__/__rich_repr__ implementations.

    Conventions
    - __typename__ is derived from the class name and used in messages.
    - __displayable__ (if set) narrows what __rich_repr__ shows.
    """

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": name.lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(getattr(type(self), "__displayable__", Unset), type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Option(metaclass=OptionType):
    """
    A single declared parameter: its configuration, rules, and current value.

    Identity
    - int  → positional argument (its index)
    - str  → named flag/option; a single character is SHORT, otherwise LONG
    The identity never changes after construction. Aliases registered on a
    command point at this very instance; they are recorded here for help output.

    Properties
    - The names listed in __introspectable__ are exposed as read-only attributes;
      use the set_* methods to configure (each returns self for chaining).
    """

    __introspectable__ = (
        "identity",
        "kind",
        "title",
        "aliases",
        "description",
        "required",
        "boolean",
        "increment",
        "maximum",
        "file",
        "require_exists",
        "allow_globbing",
        "needs",
        "rule",
        "transform",
        "default",
        "value",
    )

    __displayable__ = (
        "identity",
        "title",
        "aliases",
        "required",
        "default",
        "value",
    )

    def __init__(self, identity, /):
        if isinstance(identity, bool) or not isinstance(identity, int | str):
            raise UsageError(
                "invalid option name %r: must be identified by a name or an integer" % (identity,),
                hint="use a single character (-f), a word (--foo), or a positional index (0, 1, ...)",
            )
        if isinstance(identity, int) and identity < 0:
            raise UsageError("invalid option index %r: must be a non-negative integer" % identity)
        if isinstance(identity, str) and not identity:
            raise UsageError("invalid option name: must not be empty")

        self._identity = identity
        self._kind = TokenKind.of(identity)
        self._title = None
        self._aliases = []
        self._description = None
        self._required = False
        self._boolean = False
        self._increment = False
        self._maximum = 0
        self._file = False
        self._require_exists = True
        self._allow_globbing = False
        self._needs = []
        self._rule = None
        self._transform = None
        self._default = None
        self._value = None

    @property
    def name(self):
        """
        externally visible name: the title for positional arguments that have one,
        otherwise the identity itself.
        """
        if self._title and not self.named:
            return self._title
        return self._identity

    @property
    def named(self):
        return self._kind.named

    # ── Configuration ──────────────────────────────────────────────────────────

    def add_alias(self, alias, /):
        if not isinstance(alias, str) or not alias:
            raise UsageError("alias of option %r must be a non-empty string" % (self.name,))
        self._aliases.append(alias)
        return self

    def set_description(self, description, /):
        self._description = description
        return self

    def set_title(self, title, /):
        self._title = title
        return self

    def set_required(self, required=True, /):
        self._required = bool(required)
        return self

    def set_boolean(self, boolean=True, /):
        """
        presence of a boolean option inverts its default; a missing default becomes False.
        """
        self._boolean = bool(boolean)
        if boolean:
            self.set_default(False if self._default is None else self._default)
        return self

    def set_increment(self, maximum=0, /):
        """
        count repeated occurrences (-vvv); values above a positive maximum are clamped.
        a missing default becomes 0.
        """
        if isinstance(maximum, bool) or not isinstance(maximum, int) or maximum < 0:
            raise UsageError("increment maximum of option %r must be a non-negative integer" % (self.name,))
        self._increment = True
        self._maximum = maximum
        self.set_default(0 if self._default is None else self._default)
        return self

    def set_file_requirements(self, require_exists=True, allow_globbing=False, /):
        """
        resolve values to absolute paths; with globbing, to the list of matching paths.
        """
        self._file = True
        self._require_exists = bool(require_exists)
        self._allow_globbing = bool(allow_globbing)
        return self

    def set_needs(self, *names):
        """
        declare other options that must hold a truthy value (duplicates are ignored).
        """
        for name in names:
            if isinstance(name, list | tuple | set | frozenset):
                self.set_needs(*name)
            elif name not in self._needs:
                self._needs.append(name)
        return self

    def set_rule(self, rule, /):
        if not callable(rule):
            raise UsageError("rule of option %r must be callable" % (self.name,))
        self._rule = rule
        return self

    def set_map(self, transform, /):
        if not callable(transform):
            raise UsageError("map of option %r must be callable" % (self.name,))
        self._transform = transform
        return self

    def set_default(self, value, /):
        """
        store the default and immediately run it through the value pipeline.
        """
        self._default = value
        self.set_value(value)
        return self

    # ── Value pipeline ─────────────────────────────────────────────────────────

    def validate(self, value, /):
        """
        true when no rule is configured or the rule accepts the value.
        """
        if self._rule is None:
            return True
        return bool(self._rule(value))

    def map(self, value, /):
        """
        apply the configured transform; pass through when none is configured.
        """
        if self._transform is None:
            return value
        return self._transform(value)

    def resolve_file(self, path, /):
        """
        resolve a raw path.

        returns
        - with globbing: the list of absolute paths of every match, in the order the
          filesystem enumeration yields them (possibly empty).
        - without globbing: the absolute path, or None when the path does not exist
          and existence is required.
        """
        if self._allow_globbing:
            return [os.path.realpath(match) for match in glob.glob(path)]
        if self._require_exists and not os.path.exists(path):
            return None
        return os.path.realpath(path)

    def set_value(self, value, /):
        if self._boolean and not isinstance(value, bool):
            raise InvalidValueError(
                "boolean expected for option %r, received %r instead" % (self.name, value),
                hint="boolean options take no value; pass the flag alone",
                option=self.name,
                value=value,
            )

        try:
            accepted = self.validate(value)
        except Exception as exception:
            raise InvalidValueError(
                "rule of option %r failed on %r: %s" % (self.name, value, exception),
                option=self.name,
                value=value,
            ) from exception
        if not accepted:
            raise InvalidValueError(
                "invalid value %r for option %r" % (value, self.name),
                option=self.name,
                value=value,
            )

        if self._increment:
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidValueError(
                    "integer expected as value for option %r, received %r instead" % (self.name, value),
                    option=self.name,
                    value=value,
                )
            if self._maximum > 0 and value > self._maximum:
                value = self._maximum

        if self._file:
            if not isinstance(value, str | os.PathLike):
                raise InvalidValueError(
                    "path expected as value for option %r, received %r instead" % (self.name, value),
                    option=self.name,
                    value=value,
                )
            resolved = self.resolve_file(value)
            if not resolved and self._require_exists:
                raise FileResolutionError(
                    "expected %r to be a valid file for option %r" % (os.fspath(value), self.name),
                    hint="check the path exists and is readable",
                    option=self.name,
                    value=value,
                )
            value = resolved

        try:
            self._value = self.map(value)
        except Exception as exception:
            raise InvalidValueError(
                "unable to convert %r for option %r: %s" % (value, self.name, exception),
                option=self.name,
                value=value,
            ) from exception
        logger.debug("option %r set to %r", self.name, self._value)

    def clear(self):
        """
        forget the current value; boolean and increment options fall back to their default.
        """
        if self._boolean or self._increment:
            self.set_value(self._default)
        else:
            self._value = None

    def has_needs(self, options, /):
        """
        check this option's needs against a mapping of declared options.

        a needed name is unmet when it is not a key of `options` or the option it
        names holds a falsy value (None, False, 0, "" all count as unmet).
        """
        unmet = []
        for need in self._needs:
            if need not in options:
                unmet.append(need)
            elif not options[need].value:
                unmet.append(need)
        if unmet:
            return Unmet(tuple(unmet))
        return Satisfied()

    # ── Rendering ──────────────────────────────────────────────────────────────

    def help(self, *, colorful=True):
        """
        render this option's help block.

        layout
        - named:      -f/--foo <argument>   (no placeholder for boolean/increment options)
        - positional: the title, or "arg <index>"
        - body (indented): "<title>." "required." description "(default: ...)"

        Customization
        - Define a mapping named __styles__ in __main__ to override any palette entry.
        """
        styles = defaultdict(str, {
            "option-name": "bold #00E6FF",
            "argument-name": "bold #FFD600",
            "separator": "bold",
            "placeholder": "bold underline",
            "title": "bold",
            "required": "bold red",
            "description": "#9CA3AF",
            "default": "italic #737373",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        head = Text()
        if self.named:
            for index, name in enumerate([self._identity, *self._aliases]):
                if index:
                    head.append("/", styler("separator"))
                head.append(TokenKind.of(name).prefix + name, styler("option-name"))
            if not self._boolean and not self._increment:
                head.append(" ").append("<argument>", styler("placeholder"))
        else:
            head.append(str(self._title or "arg %d" % self._identity), styler("argument-name"))

        parts = []
        if self.named and self._title:
            parts.append(Text(str(self._title) + ".", styler("title")))
        if self._required:
            parts.append(Text("required.", styler("required")))
        if self._description:
            parts.append(Text(str(self._description).strip(), styler("description")))
        if self._default:
            parts.append(Text("(default: %s)" % self._default, styler("default")))

        if not parts:
            return head
        return Group(head, Padding(Text(" ").join(parts), (0, 0, 0, 5)))

    def __rich__(self):
        return self.help()

    def __str__(self):
        console = Console(file=io.StringIO(), color_system=None, width=80)
        console.print(self.help(colorful=False))
        return console.file.getvalue()


__all__ = (
    "Option",
    "Satisfied",
    "Unmet",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del OptionType
