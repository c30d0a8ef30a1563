"""
Commando command layer: declare, parse, and query a flat command line.

What this module provides
- Command: owns the raw tokens and the registry of declared options, and runs
  the parse loop:
  • Classification of every token (SHORT "-f", LONG "--foo", ARGUMENT "value").
  • Short groups ("-xyz" ≡ "-x -y -z"), aliases, implicit positional arguments.
  • The value pipeline of each option, then required and needs checks.
  • A built-in -h/--help boolean that renders help (rich) and stops the parse.
  • An error boundary: parse faults are either rendered and mapped to status 1
    (trap) or re-raised (no trap).

Quick start
    from commando import Command

    cmd = Command()  # defaults to sys.argv
    cmd.option("f").aka("foo").describe("a file to read").file()
    cmd.option("v").aka("verbose").count(3)
    cmd.argument().require().title("target")

    if cmd.parse() == 0 and not cmd.showed_help:
        print(cmd["foo"], cmd["verbose"], cmd.get_argument_values())

Design notes
- Parsing happens once. Explicit parse() or the first accessor triggers it;
  later calls return the cached status and change nothing.
- Declarations (option/flag/argument) return a Declaration builder; short verbs
  like "o", "aka" or "r" are resolved through builders.VERBS.
- Usage errors (malformed declarations) always propagate; they are never trapped.

See also
- commando.options for the option model and its value pipeline.
- commando.faults for fault codes and rendering behavior.
"""
import difflib
import functools
import io
import logging
import operator
import re
import sys
from collections import defaultdict, deque

from rich.console import Console, Group
from rich.padding import Padding
from rich.panel import Panel
from rich.text import Text

from .builders import Declaration, VERBS
from .faults import *
from .kinds import TokenKind
from .options import Option
from .utils import *

logger = logging.getLogger(__name__)

console = Console()

_SYNTAX = re.compile(r"(?P<hyphen>--?)(?P<name>[a-z][a-z0-9_-]*)", re.IGNORECASE)


class CommandType(type):
    """
    Metaclass that exposes command state as read-only, introspectable properties.

    Responsibilities
    - Expose every name in __introspectable__ as a read-only property reading
      the "_<name>" backing field (see mirror()).
    - Provide stable, readable __repr__/__rich_repr__ for diagnostics.

    Conventions
    - __typename__ is derived from the class name and used in messages.
    - __displayable__ (if set) narrows which properties are shown by __rich_repr__.
    """

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - command(name='prog', tokens=['prog', '-v'], parsed=False, showed_help=False)
            """
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


class Command(metaclass=CommandType):
    """
    A single flat command line: declarations, tokens, parse state, and values.

    Lifecycle
    - Construct with the raw tokens (the first one is the program name); when
      none are given, sys.argv is used.
    - Declare options through option()/flag()/argument() and the returned builder.
    - Parse explicitly with parse(), or implicitly through any value accessor.
    - Read values with cmd[name], get_flag_values(), get_argument_values(), ...

    Runtime flags (constructor keywords or fluent setters)
    - trap (True): render parse faults and return 1 instead of raising them.
    - beep (True): ring the terminal bell when a fault is trapped.
    - default_help (True): attach -h/--help and stop the parse when it is seen.
    - colorful (True): apply styles to help and fault output.
    - fancy (False): render help inside a rich Panel.
    """

    __introspectable__ = (
        "name",
        "help",
        "tokens",
        "trap",
        "beep",
        "default_help",
        "colorful",
        "fancy",
        "parsed",
        "showed_help",
    )

    __displayable__ = (
        "name",
        "tokens",
        "parsed",
        "showed_help",
    )

    def __init__(self, tokens=Unset, /, *, trap=True, beep=True, default_help=True, colorful=True, fancy=False):
        self._tokens = []
        self._name = None
        self._help = None
        self._options = {}
        self._arguments = {}
        self._flags = {}
        self._sorted = []
        self._current = None
        self._parsed = False
        self._status = 0
        self._showed_help = False
        self._helped = False
        self._trap = bool(trap)
        self._beep = bool(beep)
        self._default_help = bool(default_help)
        self._colorful = bool(colorful)
        self._fancy = bool(fancy)
        self.set_tokens(tokens or sys.argv)

    @classmethod
    def define(cls, tokens=Unset, /, **options):
        """
        factory form: Command.define(["prog", "-v"]).option("v").boolean()
        """
        return cls(tokens, **options)

    # ── Declarations ───────────────────────────────────────────────────────────

    def option(self, name=Unset, /):
        """
        declare (or reopen) an option and return its builder.

        - str → named flag/option ("f" → -f, "foo" → --foo)
        - int → positional argument at that index
        - omitted → the next free positional index
        re-declaring an existing name or alias reopens the very same option.
        """
        if name is Unset:
            name = 0
            while name in self._options:
                name += 1

        if isinstance(name, int | str) and not isinstance(name, bool) and name in self._options:
            option = self._options[name]
        else:
            option = self._options[name] = Option(name)
            logger.debug("declared %s %r", option.kind.name.lower(), name)

        self._current = Declaration(self, option)
        return self._current

    def flag(self, name, /):
        if not isinstance(name, str):
            raise UsageError(
                "attempted to reference flag with a numeric index: %r" % (name,),
                hint="use argument(%r) for positional arguments" % (name,),
            )
        return self.option(name)

    def argument(self, index=Unset, /):
        if index is not Unset and (isinstance(index, bool) or not isinstance(index, int)):
            raise UsageError(
                "attempted to reference argument with a string name: %r" % (index,),
                hint="use flag(%r) or option(%r) for named options" % (index, index),
            )
        return self.option(index)

    def _register(self, option, alias, /):
        """
        make `alias` resolve to `option`; re-registering the same pair is a no-op.
        """
        if isinstance(alias, str) and (existing := self._options.get(alias)) is not None:
            if existing is not option:
                raise UsageError(
                    "alias %r of option %r is already in use by option %r" % (alias, option.name, existing.name)
                )
            return
        option.add_alias(alias)
        self._options[alias] = option

    def _attach_help(self):
        if not self._default_help or self._helped:
            return
        current = self._current
        self.option("h").alias("help").describe("Show the help page for this command.").boolean()
        self._current = current
        self._helped = True

    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)

        verb = VERBS.get(name, name)
        if verb in ("option", "flag", "argument"):
            return getattr(self, verb)
        if not callable(getattr(Declaration, verb, None)):
            raise UnknownVerbError("unknown function %r called" % name)
        if self._current is None:
            raise UsageError(
                "invalid option chain: attempting to call %r before an option declaration" % name,
                hint="start the chain with option(), flag() or argument()",
            )
        return getattr(self._current, verb)

    # ── Configuration ──────────────────────────────────────────────────────────

    def use_default_help(self, help=True, /):
        self._default_help = bool(help)
        return self

    def set_tokens(self, tokens, /):
        """
        replace the raw tokens (the first one is the program name).
        """
        if self._parsed:
            raise UsageError("tokens cannot change once the command has been parsed")
        if isinstance(tokens, str):
            raise UsageError("tokens must be a sequence of strings")
        tokens = list(tokens)
        if not all(isinstance(token, str) for token in tokens):
            raise UsageError("tokens must be a sequence of strings")
        self._tokens = tokens
        return self

    def trap_errors(self, trap=True, /):
        self._trap = bool(trap)
        return self

    def do_not_trap_errors(self):
        return self.trap_errors(False)

    def beep_on_error(self, beep=True, /):
        self._beep = bool(beep)
        return self

    def set_help(self, help, /):
        self._help = help
        return self

    # ── Parsing ────────────────────────────────────────────────────────────────

    def parse(self):
        """
        parse the tokens once and return the status (0 on success and on help,
        1 on a trapped fault); later calls return the cached status.
        """
        if self._parsed:
            return self._status
        self._parsed = True
        self._attach_help()
        self._current = None

        try:
            self._status = self._parse()
        except ParseError as exception:
            # stays cached when error() re-raises
            self._status = 1
            self._finish()
            self._status = self.error(exception)
        except BaseException:
            self._status = 1
            self._finish()
            raise
        return self._status

    def _ensure_parsed(self):
        if not self._parsed:
            self.parse()

    def _classify(self, token, /):
        """
        split a raw token into (name or value, TokenKind).
        """
        if not token.startswith("-"):
            return token, TokenKind.ARGUMENT
        if (match := _SYNTAX.fullmatch(token)) is None:
            raise InvalidSyntaxError(
                "unable to parse option %r: invalid syntax" % token,
                hint="options look like -f, -xyz or --foo (a letter, then letters, digits, '_' or '-')",
                token=token,
            )
        return match["name"], TokenKind.SHORT if len(match["hyphen"]) == 1 else TokenKind.LONG

    def _parse(self):
        tokens = deque(self._tokens)
        self._name = tokens.popleft() if tokens else None

        raw = {}
        count = 0

        while tokens:
            name, kind = self._classify(token := tokens.popleft())
            logger.debug("classified %r as %s", token, kind.name)

            if kind is TokenKind.SHORT and len(name) > 1:
                name, *group = name
                tokens.extendleft("-" + short for short in reversed(group))

            if kind is TokenKind.ARGUMENT:
                raw[count] = name
                if count not in self._options:
                    self._options[count] = Option(count)
                count += 1
                continue

            if self._default_help and name in ("h", "help"):
                self._finish()
                self.print_help()
                return 0

            option = self._lookup(name)
            key = option.identity
            if option.boolean:
                raw[key] = not option.default
            elif option.increment:
                raw[key] = raw.get(key, option.default) + 1
            else:
                if not tokens:
                    raise ExpectedArgumentError(
                        "unable to parse option %r: expected an argument" % token,
                        hint="pass a value right after %s" % token,
                        option=option.name,
                    )
                value, kind = self._classify(following := tokens.popleft())
                if kind is not TokenKind.ARGUMENT:
                    raise ExpectedArgumentError(
                        "unable to parse option %r: expected an argument, got %r" % (token, following),
                        hint="pass a value right after %s" % token,
                        option=option.name,
                    )
                raw[key] = value

        for key, value in raw.items():
            self._options[key].set_value(value)

        unique = list(dict.fromkeys(self._options.values()))

        for option in unique:
            if option.required and option.value is None:
                raise RequiredMissingError(
                    "required %s %r must be specified" % ("option" if option.named else "argument", option.name),
                    option=option.name,
                )

        for option in unique:
            if not (result := option.has_needs(self._options)):
                raise UnmetDependencyError(
                    "option %r does not have required option(s): %s" % (option.name, ", ".join(map(str, result.names))),
                    option=option.name,
                    unmet=result.names,
                )

        self._finish()
        return 0

    def _finish(self):
        self._arguments = {key: option for key, option in self._options.items() if isinstance(key, int)}
        self._flags = {key: option for key, option in self._options.items() if isinstance(key, str)}
        self._sorted = sorted(self._options, key=natural)

    def error(self, exception, /):
        """
        error boundary: re-raise when not trapping; otherwise beep (optional),
        render the fault to stderr and return the failure status 1.
        """
        logger.debug("parse failed: %s", exception)
        if not self._trap:
            raise exception
        trigger(exception, prog=self._name, beep=self._beep, colorful=self._colorful)
        return 1

    # ── Accessors ──────────────────────────────────────────────────────────────

    def _lookup(self, key, /):
        if isinstance(key, int | str) and not isinstance(key, bool) and key in self._options:
            return self._options[key]

        candidates = difflib.get_close_matches(str(key), [name for name in self._options if isinstance(name, str)], n=1)
        raise UnknownOptionError(
            "unknown option %r specified" % (key,),
            hint="did you mean %s%s?" % (TokenKind.of(candidates[0]).prefix, candidates[0]) if candidates else None,
            option=key,
        )

    def get_option(self, key, /):
        self._ensure_parsed()
        return self._lookup(key)

    def has_option(self, key, /):
        return isinstance(key, int | str) and not isinstance(key, bool) and key in self._options

    def get_options(self):
        self._ensure_parsed()
        return dict(self._options)

    def get_arguments(self):
        self._ensure_parsed()
        return dict(self._arguments)

    def get_flags(self):
        self._ensure_parsed()
        return dict(self._flags)

    def get_argument_values(self):
        """
        values of positional arguments in index order, skipping unset ones.
        """
        self._ensure_parsed()
        return [
            self._arguments[index].value for index in sorted(self._arguments)
            if self._arguments[index].value is not None
        ]

    def get_flag_values(self):
        """
        values of named options keyed by option name; aliases appear once.
        """
        self._ensure_parsed()
        values = {}
        for option in self._flags.values():
            values.setdefault(option.name, option.value)
        return values

    # ── Help ───────────────────────────────────────────────────────────────────

    def _helper(self):
        """
        Build the help renderable.

        Palette keys
        - header, help-section, panel-title
        (option blocks use the palette of Option.help)

        Customization
        - Define a mapping named __styles__ in __main__ to override any palette entry.
        - When colorful is False, styling is suppressed.
        """
        styles = defaultdict(str, {
            "header": "bold white on green",
            "help-section": "italic #A3A3A3",
            "panel-title": "bold #FF4D94",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self._colorful else ""

        name = self._name or (self._tokens[0] if self._tokens else "")

        renders = []
        if not self._fancy:
            renders.append(Padding(Text(str(name)), (0, 1), style=styler("header")))
            renders.append(Text(""))

        if self._help:
            renders.append(Text(str(self._help), styler("help-section")))
            renders.append(Text(""))

        seen = set()
        for key in sorted(self._options, key=natural):
            if (option := self._options[key]) in seen:
                continue
            seen.add(option)
            renders.append(option.help(colorful=self._colorful))
            renders.append(Text(""))

        if renders:
            renders.pop()

        renderable = Group(*renders)

        if self._fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[", " ", f"{name} HELP".upper(), " ", "]", style=styler("panel-title")),
                title_align="left",
            )
        return renderable

    def get_help(self):
        """
        render the help page to a string (ANSI styled when colorful).
        """
        self._attach_help()
        buffer = io.StringIO()
        Console(
            file=buffer,
            force_terminal=self._colorful,
            color_system="truecolor" if self._colorful else None,
            width=console.width,
        ).print(self._helper())
        return buffer.getvalue()

    def print_help(self):
        self._attach_help()
        self._showed_help = True
        console.print(self._helper())

    def __rich__(self):
        self._attach_help()
        return self._helper()

    # ── Mapping protocol ───────────────────────────────────────────────────────

    def __getitem__(self, key):
        self._ensure_parsed()
        if not self.has_option(key):
            return None
        return self._options[key].value

    def __setitem__(self, key, value):
        raise UsageError(
            "setting option %r to %r via index syntax is not permitted" % (key, value),
            hint="use option(...).default(...) to provide a value",
        )

    def __delitem__(self, key):
        self._ensure_parsed()
        self._lookup(key).clear()

    def __contains__(self, key):
        return self.has_option(key)

    def __len__(self):
        return len(self._options)

    def __iter__(self):
        self._ensure_parsed()
        return iter(self._sorted)

    def __str__(self):
        return self.get_help()


__all__ = (
    "Command",
)

# Remove the internal metaclass from the module namespace to avoid accidental
# exposure in docs, autocompletion, or star-imports. Not part of the public API.
del CommandType
