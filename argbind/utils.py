"""
argbind utilities shared by the argument, registry, session and parser layers.

- Unset: sentinel for "not provided" on optional argument fields (flag, name,
  storage, help, choices), kept apart from None and empty values.
- coalesce(value, default): turn Unset into a concrete default.
- mirror("attr"): read-only property over a private backing field.
- ordinal(number): "first", "second", ..., "11th" for 1-based token positions.

    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> ordinal(3)
    'third'
"""
import functools
from typing import final


@final
class UnsetType:
    """
    type of the Unset sentinel.

    there is exactly one instance; it is falsy, prints as "Unset" and takes
    part in unions so that 'isinstance(x, str | Unset)' reads naturally.
    """
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    def __or__(self, other, /):
        try:
            return other | UnsetType
        except TypeError:
            return NotImplemented

    __ror__ = __or__

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"


Unset = UnsetType()


def coalesce(object, default=None, /):
    """return 'object', or 'default' when it is Unset (None, 0 and "" are kept)."""
    if object is Unset:
        return default
    return object


def mirror(name, /):
    """
    read-only property exposing self._<name>.

    argument records declare their fields this way, so a record the registry
    validated keeps its shape; only the slot value and the counter change.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    def getter(self):
        return getattr(self, "_" + name)

    getter.__name__ = getter.__qualname__ = name
    return property(getter)


_WORDS = ("first", "second", "third", "fourth", "fifth", "sixth", "seventh", "eighth", "ninth", "tenth")


@functools.cache
def ordinal(number, /):
    """ordinal label for a 1-based position: words up to ten, then '11th', '22nd', ..."""
    if 1 <= number <= len(_WORDS):
        return _WORDS[number - 1]
    if 10 < number % 100 < 20:
        return "%dth" % number
    return "%d%s" % (number, {1: "st", 2: "nd", 3: "rd"}.get(number % 10, "th"))


__all__ = (
    "coalesce",
    "mirror",
    "ordinal",
    "UnsetType",
    "Unset",
)
