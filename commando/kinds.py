"""
Token kinds shared by the classifier and the option model.

- SHORT: single leading hyphen, e.g. "-v" (and short groups like "-vvv").
- LONG: double leading hyphen, e.g. "--verbose".
- ARGUMENT: anything not starting with a hyphen (positional literal or value).

The numeric values are bit-like and stable so they can be combined in masks
by host code if needed.
"""
from enum import IntEnum


class TokenKind(IntEnum):
    """
    classification of a raw token (and of an option identity).
    """
    SHORT = 1
    LONG = 2
    ARGUMENT = 4

    @property
    def named(self):
        """
        true for SHORT and LONG (named flags/options), false for ARGUMENT.
        """
        return self in (TokenKind.SHORT, TokenKind.LONG)

    @classmethod
    def of(cls, identity, /):
        """
        kind of an option identity: int → ARGUMENT, one character → SHORT, else LONG.
        """
        if isinstance(identity, int):
            return cls.ARGUMENT
        return cls.SHORT if len(identity) == 1 else cls.LONG

    @property
    def prefix(self):
        """
        hyphen prefix used when rendering a name of this kind ("" for arguments).
        """
        return {TokenKind.SHORT: "-", TokenKind.LONG: "--"}.get(self, "")


__all__ = (
    "TokenKind",
)
