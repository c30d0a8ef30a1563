"""
Commando faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues.
  Codes are grouped by domain to keep copy consistent and make logs/searches predictable.
- CommandException: base type that carries message + options and knows how to render
  itself in a friendly, lowercased, and actionable way.
- ParseError / UsageError: the two families. Parse errors come from user input and
  go through the command's error boundary (trapped or propagated); usage errors come
  from malformed declarations and always propagate.
- trigger(): central entry point to surface a trapped fault (beep + render via rich).
- getdoc(): optional description lookup for a code from the host application.

Integration
- The parser raises faults; Command.error() decides whether to re-raise them
  (no-trap) or to render them and return a failure status (trap).
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the library (stable identifiers).

    grouping (by high-level domain)
    - tokens (1111x)
      • INVALID_SYNTAX, UNKNOWN_OPTION, EXPECTED_ARGUMENT
    - values (1112x)
      • INVALID_VALUE, FILE_RESOLUTION
    - post-parse constraints (1113x)
      • REQUIRED_MISSING, UNMET_DEPENDENCY
    - declarations (1120x)
      • USAGE

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- token errors (1111x) ---
    INVALID_SYNTAX              = 11111
    UNKNOWN_OPTION              = 11112
    EXPECTED_ARGUMENT           = 11113

    # --- value errors (1112x) ---
    INVALID_VALUE               = 11121
    FILE_RESOLUTION             = 11122

    # --- constraint errors (1113x) ---
    REQUIRED_MISSING            = 11131
    UNMET_DEPENDENCY            = 11132

    # --- declaration errors (1120x) ---
    USAGE                       = 11201

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class CommandException(Exception):
    """
    base fault: a message plus a read-only mapping of context options.

    well-known options
    - code: FaultCode (defaults to the class __code__)
    - title: short lowercased title (defaults to the class __title__)
    - hint: one actionable sentence, optional
    - prog: program name shown in the rendered header
    - colorful: whether rendering applies styles (default True)
    - beep: whether triggering rings the terminal bell (default False)
    any other keyword is kept as context (e.g. token, option, unmet).
    """
    __code__ = Unset
    __title__ = "error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType({"code": type(self).__code__, "title": type(self).__title__} | options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "bold white on red",  # classic terminal error banner
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "docs": "underline #00E5FF dim",
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        code = self.options["code"]
        prog = text(getattr(main, "__prog__", self.options.get("prog") or "commando"), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "-", styler("code")),
            " | ",
            text(str(self.options["title"]).title(), styler("error-title")),
            " ]"
        )
        renders = [header, text("ERROR: %s " % self, styler("error-message"))]

        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        # host-provided documentation for this code, if any
        if isinstance(code, FaultCode) and (docs := getdoc(code)):
            renders.append(text(docs, styler("docs")))

        return Group(*renders)

    def __trigger__(self):
        if self.options.get("beep", False):
            console.bell()
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ParseError(CommandException):
    """
    base for faults caused by user input; these go through the error boundary.
    """


class InvalidSyntaxError(ParseError):
    __code__ = FaultCode.INVALID_SYNTAX
    __title__ = "invalid syntax"


class UnknownOptionError(ParseError):
    __code__ = FaultCode.UNKNOWN_OPTION
    __title__ = "unknown option"


class ExpectedArgumentError(ParseError):
    __code__ = FaultCode.EXPECTED_ARGUMENT
    __title__ = "expected an argument"


class InvalidValueError(ParseError):
    __code__ = FaultCode.INVALID_VALUE
    __title__ = "invalid value"


class FileResolutionError(ParseError):
    __code__ = FaultCode.FILE_RESOLUTION
    __title__ = "expected a valid file"


class RequiredMissingError(ParseError):
    __code__ = FaultCode.REQUIRED_MISSING
    __title__ = "required option missing"


class UnmetDependencyError(ParseError):
    """
    an option's needs are unmet; unlike RequiredMissingError it names *other* options
    (available as options["unmet"], in declaration order).
    """
    __code__ = FaultCode.UNMET_DEPENDENCY
    __title__ = "unmet dependency"


class UsageError(CommandException):
    """
    malformed declaration (programming mistake); never trapped.
    """
    __code__ = FaultCode.USAGE
    __title__ = "usage error"


class UnknownVerbError(UsageError, AttributeError):
    """
    unknown declaration verb; also an AttributeError so hasattr() probes stay quiet.
    """
    __title__ = "unknown verb"


def trigger(fault, /, **options):
    """
    surface a trapped fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see CommandException).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.

    typical options
    - prog, colorful, beep, and any other context the renderer may want to show.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "ParseError",
    "InvalidSyntaxError",
    "UnknownOptionError",
    "ExpectedArgumentError",
    "InvalidValueError",
    "FileResolutionError",
    "RequiredMissingError",
    "UnmetDependencyError",
    "UsageError",
    "UnknownVerbError",
    "FaultCode",
    "trigger",
    "getdoc",
)
