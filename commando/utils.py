"""
Commando utilities shared by the options and commands layers.

- Unset: "not provided" sentinel, distinct from None (options legitimately hold None).
- coalesce(): resolve Unset to a default.
- rename(): stable __name__/__qualname__ for generated accessors.
- mirror(): read-only property over a "_<name>" backing field.
- natural(): natural-order sort key over option identities.

    >>> sorted(["v10", 1, "v2", 0], key=natural)
    [0, 1, 'v2', 'v10']
"""
import builtins
import functools
import re
from collections.abc import Sequence, Mapping, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel: falsy, sealed, one instance per process.
    """

    def __or__(self, other, /):
        # lets `str | Unset` work in isinstance checks
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
    `default` when object is Unset, otherwise object (None, 0 and "" are kept).
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    rename(callable, name) -> callable, or @rename(name) as a decorator.
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


def _immortalize(object):
    # containers are copied so callers never hold backing state;
    # Option instances inside them are shared on purpose (aliases)
    if isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    return object


def mirror(name, /):
    """
    read-only property returning a copy of self._<name>,
    e.g. aliases = mirror("aliases").
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


def natural(key, /):
    """
    Natural-order sort key for option identities.

    Integers (positional identities) sort before strings; strings are split into
    digit and non-digit runs so that "v2" sorts before "v10".

    Examples
    - sorted(["h", "help", 1, 0], key=natural) -> [0, 1, "h", "help"]
    - sorted(["f10", "f9"], key=natural)       -> ["f9", "f10"]
    """
    if isinstance(key, int):
        return 0, ((0, key, ""),)
    return 1, tuple(
        (0, int(chunk), "") if chunk.isdigit() else (1, 0, chunk.lower())
        for chunk in re.findall(r"\d+|\D+", str(key))
    )


Unset = UnsetType()


__all__ = (
    "coalesce",
    "rename",
    "mirror",
    "natural",
    "UnsetType",
    "Unset",
)
