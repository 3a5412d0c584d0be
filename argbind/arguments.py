r"""
argbind argument records, storage slots and declaration helpers.

Overview
- Enums
  • Type: value kind of an argument (INT, FLOAT, BOOL, STRING).
  • Action: effect of a successful match (STORE, STORE_TRUE, STORE_FALSE, COUNT, BOOLEAN_TOGGLE).

- Records
  • Slot: caller-owned, typed storage cell. Its kind is fixed at construction and
    checked once against the argument type when the argument is registered.
  • Argument: the declarative unit (type, action, identity, storage, choices,
    requiredness, help) plus its occurrence counter.

- Declaration helpers
  • positional(...), option(...), count(...), toggle(...), store_true(...), store_false(...)
  Each helper returns a ready-to-register Argument with the action/requiredness
  its name implies.

Identity
- flag: a single character addressed as '-x' on the command line (or Unset).
- name: '--long-name' for options, or a bare word ('FILE') for positionals.
- an argument whose name does not start with '-' is positional.

Construction is deliberately permissive: an Argument is plain data, and every
structural rule (type/action compatibility, reserved help names, conflicts) is
enforced by Registry.register(), which reports the first violation as a typed fault.

Quick example:
    >>> from argbind import Slot, Type, option, toggle
    >>> depth = Slot(Type.INT, 3)
    >>> arguments = [
    ...     option(Type.INT, "d", "--depth", depth, "maximum depth"),
    ...     toggle("v", "--verbose", help="chatty output"),
    ... ]
"""
from enum import Enum

from .utils import *


class Type(Enum):
    """
    value kind of an argument and of its storage slot.

    - INT: 32-bit signed integer (Python int checked against the range).
    - FLOAT: single-precision float, rounded when parsed.
    - BOOL: boolean, only reachable through the boolean actions.
    - STRING: raw command-line token, stored as-is.
    """
    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    STRING = "string"

    @property
    def builtin(self):
        """the Python type that values of this kind are instances of."""
        return {
            Type.INT: int,
            Type.FLOAT: float,
            Type.BOOL: bool,
            Type.STRING: str,
        }[self]


class Action(Enum):
    """
    effect a successful match has on the argument's storage.

    - STORE: coerce and store the value (next token, or the token itself for positionals).
    - STORE_TRUE / STORE_FALSE: store a fixed boolean.
    - COUNT: count occurrences; the total is stored once parsing completes.
    - BOOLEAN_TOGGLE: '--name' stores True, '--no-name' stores False.
    """
    STORE = "store"
    STORE_TRUE = "store-true"
    STORE_FALSE = "store-false"
    COUNT = "count"
    BOOLEAN_TOGGLE = "boolean-toggle"

    @property
    def boolean(self):
        return self in (Action.STORE_TRUE, Action.STORE_FALSE, Action.BOOLEAN_TOGGLE)


class Slot:
    """
    typed, mutable storage cell owned by the caller.

    the parser writes into slot.value; whatever the caller put there before
    parsing stays untouched for arguments that never occur.

        >>> depth = Slot(Type.INT, 3)
        >>> depth.value
        3
    """
    __slots__ = ("_kind", "value")

    kind = mirror("kind")

    def __init__(self, kind, value=None, /):
        if not isinstance(kind, Type):
            raise TypeError("Slot() first argument must be a Type")
        self._kind = kind
        self.value = value

    def __repr__(self):
        return "Slot(%s, %r)" % (self._kind.name, self.value)


class Argument:
    """
    one declared command-line argument and its bound storage.

    fields (read-only after construction)
    - type: Type
    - action: Action (defaults to STORE)
    - flag: Unset | str, single character without the leading '-'
    - name: Unset | str, '--long-name' for options or a bare word for positionals
    - storage: Slot, created from 'type' when omitted
    - help: Unset | str, opaque description used by the help renderer
    - required: bool, only meaningful for STORE
    - choices: Unset | tuple, admissible values for STORE

    mutable state
    - count: int, occurrences seen during the current parse (starts at 0)

    the registry keeps a reference to this object, not a copy; keep it alive
    (and do not reuse it in a concurrent parse) until parsing completes.
    """
    type = mirror("type")
    action = mirror("action")
    flag = mirror("flag")
    name = mirror("name")
    storage = mirror("storage")
    help = mirror("help")
    required = mirror("required")
    choices = mirror("choices")

    def __init__(
            self,
            type,
            /,
            flag=Unset,
            name=Unset,
            storage=Unset,
            action=Action.STORE,
            help=Unset,
            *,
            required=False,
            choices=Unset,
    ):
        if storage is Unset and isinstance(type, Type):
            storage = Slot(type)
        if choices is not Unset:
            choices = tuple(choices)

        self._type = type
        self._flag = flag
        self._name = name
        self._storage = storage
        self._action = action
        self._help = help
        self._required = required
        self._choices = choices
        self.count = 0

    @property
    def positional(self):
        """True when the argument is matched by position rather than by flag/name."""
        return isinstance(self._name, str) and bool(self._name) and not self._name.startswith("-")

    @property
    def display(self):
        """the spelling used in messages: the name when present, '-x' otherwise."""
        if self._name:
            return self._name
        return "-%s" % coalesce(self._flag, "")

    @property
    def value(self):
        """shortcut for storage.value."""
        return self._storage.value

    def __repr__(self):
        return "%s(%s)" % (
            type(self).__name__,
            ", ".join("%s=%r" % (key, value) for key, value in self.__rich_repr__())
        )

    def __rich_repr__(self):
        yield "type", self._type
        yield "action", self._action
        if self._flag is not Unset:
            yield "flag", self._flag
        if self._name is not Unset:
            yield "name", self._name
        if self._required:
            yield "required", self._required
        if self._choices is not Unset:
            yield "choices", self._choices
        yield "count", self.count


def positional(type, name, storage=Unset, help=Unset, *, choices=Unset):
    """
    declare a required positional argument matched by order of appearance.

        >>> positional(Type.STRING, "FILE", help="input file")
    """
    return Argument(type, Unset, name, storage, Action.STORE, help, required=True, choices=choices)


def option(type, flag=Unset, name=Unset, storage=Unset, help=Unset, *, required=False, choices=Unset):
    """
    declare a value-bearing option, addressed as '-x VALUE' and/or '--name VALUE'.

        >>> option(Type.FLOAT, "r", "--ratio", help="sampling ratio", choices=(0.5, 1.0))
    """
    return Argument(type, flag, name, storage, Action.STORE, help, required=required, choices=choices)


def count(flag=Unset, name=Unset, storage=Unset, help=Unset):
    """
    declare an integer option that counts its occurrences ('-vvv' stores 3).
    """
    return Argument(Type.INT, flag, name, storage, Action.COUNT, help)


def toggle(flag=Unset, name=Unset, storage=Unset, help=Unset):
    """
    declare a boolean option: '--name' stores True and '--no-name' stores False.
    """
    return Argument(Type.BOOL, flag, name, storage, Action.BOOLEAN_TOGGLE, help)


def store_true(flag=Unset, name=Unset, storage=Unset, help=Unset):
    """declare a boolean option that stores True when present."""
    return Argument(Type.BOOL, flag, name, storage, Action.STORE_TRUE, help)


def store_false(flag=Unset, name=Unset, storage=Unset, help=Unset):
    """declare a boolean option that stores False when present."""
    return Argument(Type.BOOL, flag, name, storage, Action.STORE_FALSE, help)


__all__ = (
    "Type",
    "Action",
    "Slot",
    "Argument",
    "positional",
    "option",
    "count",
    "toggle",
    "store_true",
    "store_false",
)
