"""
argbind parse session: token resolution, value binding and finalization.

What this module provides
- parse(registry, tokens): scan an argv-like token sequence (program name
  excluded) against a Registry, write values into the bound slots and enforce
  requiredness. Returns None on success; raises the first fault otherwise.
- Session: the per-call state behind parse() (token tuple, cursor, positional index).
- coerce(argument, text): textual coercion for a single value (INT/FLOAT/STRING).
- single(value): single-precision rounding applied to FLOAT values and choices.

Token grammar
- help:        '-h' or '--help' exactly → HelpRequested
- short flag:  '-x' (two characters) → flag lookup among options
- long option: '--name', or '--no-name' for BOOLEAN_TOGGLE options
- group:       '-abc' that is not a long option → each character is a flag
- positional:  anything without the leading '-', consumed in registration order

Resolution order for dash-prefixed tokens longer than two characters
    '--no-X' as a negated toggle  →  exact long name  →  grouped flags
so '--no-X' is only read as a literal option named '--no-X' when no toggle
named '--X' exists.

States
    Scanning → (resolve, bind) → Scanning … → Finalizing → Done | Failed
The first fault ends the session; nothing is retried or resumed.

Concurrency
- single-threaded and not re-entrant: occurrence counters and slots are
  mutated in place, so one registry must not be parsed by two sessions at once.
"""
import math
import re
import struct
from collections import namedtuple

from .arguments import Action, Type
from .faults import *
from .registry import HELP_FLAG, HELP_NAME, OPTION_PREFIX
from .utils import Unset, coalesce, ordinal

# Prefix of the negated spelling of a BOOLEAN_TOGGLE option.
NEGATED_PREFIX = OPTION_PREFIX + "no-"

# Tolerance for float choices, absorbs textual/formatting imprecision.
EPSILON = 1e-5

INT32_MIN = -2 ** 31
INT32_MAX = 2 ** 31 - 1

# Signed integer in base 16 ('0x'), 2 ('0b'), 8 ('0o' or a leading '0') or 10.
# A leading '0' followed by 8 or 9 matches nothing.
_INTEGER = re.compile(r"""
    \s*(?P<sign>[+-]?)
    (?:
        0[xX](?P<hexadecimal>[0-9a-fA-F]+)
      | 0[bB](?P<binary>[01]+)
      | 0[oO]?(?P<octal>[0-7]+)
      | (?P<decimal>[1-9][0-9]*|0)
    )\s*
""", re.VERBOSE)

# What to look for in a sequence of arguments: a flag, a name (optionally
# behind a prefix that the candidate's name must carry) or a position.
Target = namedtuple("Target", ("tag", "value", "prefix"), defaults=(None,))


def _lookup(arguments, target):
    for index, argument in enumerate(arguments):
        match target:
            case Target(tag="flag"):
                if argument.flag and argument.flag == target.value:
                    return argument
            case Target(tag="name", prefix=None):
                if argument.name and argument.name == target.value:
                    return argument
            case Target(tag="name"):
                name = coalesce(argument.name, "")
                if name.startswith(target.prefix) and name[len(target.prefix):] == target.value:
                    return argument
            case Target(tag="index"):
                if index == target.value:
                    return argument
            case _:
                raise RuntimeError("unexpected lookup target")
    return None


def _identity(argument):
    return {"name": coalesce(argument.name), "flag": coalesce(argument.flag)}


def single(value, /):
    """
    round a float to single precision, the storage width of FLOAT values.

    magnitudes past the single-precision range become a signed infinity.
    """
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def coerce(argument, text, /):
    """
    convert one raw token to the argument's value type.

    - INT: signed integer in any base prefix ('0x1f', '-017', '0b101', '42');
      outside the 32-bit signed range → IntRangeExceededError.
    - FLOAT: standard float literal ('1.5', '-2e3', 'inf') rounded to single
      precision; magnitudes past its range become infinite.
    - STRING: the token object itself.
    - unreadable numeric text → InvalidValueError.
    """
    match argument.type:
        case Type.INT:
            match = _INTEGER.fullmatch(text)
            if not match:
                raise InvalidValueError(
                    "value %r for %s is not an integer" % (text, argument.display),
                    title="invalid value",
                    code=FaultCode.INVALID_VALUE,
                    hint="pass a whole number such as 42, -7 or 0x2a",
                    value=text,
                    docs=getdoc(FaultCode.INVALID_VALUE),
                    **_identity(argument)
                )
            if match["hexadecimal"]:
                value = int(match["hexadecimal"], 16)
            elif match["binary"]:
                value = int(match["binary"], 2)
            elif match["octal"]:
                value = int(match["octal"], 8)
            else:
                value = int(match["decimal"], 10)
            if match["sign"] == "-":
                value = -value
            if not INT32_MIN <= value <= INT32_MAX:
                raise IntRangeExceededError(
                    "value for %s exceeds range of integer" % argument.display,
                    title="integer out of range",
                    code=FaultCode.INT_RANGE_EXCEEDED,
                    hint="pass a value between %d and %d" % (INT32_MIN, INT32_MAX),
                    value=text,
                    docs=getdoc(FaultCode.INT_RANGE_EXCEEDED),
                    **_identity(argument)
                )
            return value
        case Type.FLOAT:
            try:
                return single(float(text))
            except ValueError:
                raise InvalidValueError(
                    "value %r for %s is not a number" % (text, argument.display),
                    title="invalid value",
                    code=FaultCode.INVALID_VALUE,
                    hint="pass a number such as 1.5, -2 or 3e-4",
                    value=text,
                    docs=getdoc(FaultCode.INVALID_VALUE),
                    **_identity(argument)
                ) from None
        case Type.STRING:
            return text
        case _:
            raise RuntimeError("bool arguments are never coerced from text")


def _chosen(argument, value):
    if argument.type is Type.FLOAT:
        # choices compare at the width values are stored with
        return any(single(choice) - EPSILON <= value <= single(choice) + EPSILON for choice in argument.choices)
    return any(value == choice for choice in argument.choices)


class Session:
    """
    one pass over a token sequence against a registry.

    state
    - tokens: tuple of the raw tokens (never modified)
    - cursor: index of the token being dispatched
    - index: number of positionals consumed so far (next positional to match)

    a session runs once; create a new one (or call parse()) for every pass.
    """

    def __init__(self, registry, tokens, /):
        self._registry = registry
        self._tokens = tuple(tokens)
        self._cursor = 0
        self._index = 0

    @property
    def cursor(self):
        return self._cursor

    def run(self):
        while self._cursor < len(self._tokens):
            self._dispatch(self._tokens[self._cursor])
            self._cursor += 1
        self._finalize()

    def _unknown(self, token):
        raise UnknownArgumentError(
            "unknown argument %r at %s position" % (token, ordinal(self._cursor + 1)),
            title="unknown argument",
            code=FaultCode.UNKNOWN_ARGUMENT,
            hint="run with '--help' to see the accepted arguments",
            token=token,
            index=self._cursor + 1,
            docs=getdoc(FaultCode.UNKNOWN_ARGUMENT),
        )

    def _dispatch(self, token):
        if token in ("-" + HELP_FLAG, HELP_NAME):
            raise HelpRequested(token)

        options = self._registry.options

        if len(token) == 2 and token.startswith("-"):
            argument = _lookup(options, Target("flag", token[1]))
            if argument is None:
                self._unknown(token)
            return self._bind(argument)

        if token == "-":
            self._unknown(token)

        if token.startswith("-"):
            argument, negated = self._resolve(options, token)
            if argument is None:
                return self._group(options, token)
            return self._bind(argument, negated=negated)

        argument = _lookup(self._registry.positionals, Target("index", self._index))
        self._index += 1
        if argument is None:
            self._unknown(token)
        self._bind(argument, positional=True)

    def _resolve(self, options, token):
        argument = None
        if token.startswith(NEGATED_PREFIX):
            argument = _lookup(options, Target("name", token[len(NEGATED_PREFIX):], OPTION_PREFIX))
            if argument is not None and argument.action is Action.BOOLEAN_TOGGLE:
                return argument, True
        return _lookup(options, Target("name", token)), False

    def _group(self, options, token):
        """
        bind every character of '-abc' as its own flag.

        a STORE flag inside the group takes the next whole token as its value,
        not the rest of the group.
        """
        for character in token[1:]:
            argument = _lookup(options, Target("flag", character))
            if argument is None:
                self._unknown(token)
            self._bind(argument)

    def _bind(self, argument, *, positional=False, negated=False):
        argument.count += 1

        match argument.action:
            case Action.STORE:
                if positional:
                    text = self._tokens[self._cursor]
                else:
                    if self._cursor + 1 == len(self._tokens):
                        token = self._tokens[self._cursor]
                        raise MissingValueError(
                            "expected value for %s at %s position" % (token, ordinal(self._cursor + 1)),
                            title="missing value",
                            code=FaultCode.MISSING_VALUE,
                            hint="pass a value after %s (for example: %s <value>)" % (token, token),
                            token=token,
                            index=self._cursor + 1,
                            docs=getdoc(FaultCode.MISSING_VALUE),
                            **_identity(argument)
                        )
                    self._cursor += 1
                    text = self._tokens[self._cursor]

                value = coerce(argument, text)

                if argument.choices is not Unset and not _chosen(argument, value):
                    raise InvalidChoiceError(
                        "value %r provided for %s is not a valid choice" % (text, argument.display),
                        title="invalid choice",
                        code=FaultCode.INVALID_CHOICE,
                        hint="choose from %s" % ", ".join(map(repr, argument.choices)),
                        value=text,
                        choices=argument.choices,
                        index=self._cursor + 1,
                        docs=getdoc(FaultCode.INVALID_CHOICE),
                        **_identity(argument)
                    )

                argument.storage.value = value
            case Action.STORE_TRUE:
                argument.storage.value = True
            case Action.STORE_FALSE:
                argument.storage.value = False
            case Action.BOOLEAN_TOGGLE:
                argument.storage.value = not negated
            case Action.COUNT:
                # committed once, in _finalize
                pass
            case _:
                raise RuntimeError("unexpected action")

    def _finalize(self):
        # options first, then positionals, both in registration order
        for argument in self._registry:
            if argument.action is Action.COUNT:
                argument.storage.value = argument.count
            elif argument.count == 0 and argument.required:
                raise MissingArgumentError(
                    "missing required argument %s" % argument.display,
                    title="missing argument",
                    code=FaultCode.MISSING_ARGUMENT,
                    hint="pass %s%s" % (argument.display, "" if argument.positional else " <value>"),
                    docs=getdoc(FaultCode.MISSING_ARGUMENT),
                    **_identity(argument)
                )


def parse(registry, tokens, /):
    """
    scan 'tokens' (argv without the program name) against 'registry'.

    raises
    - HelpRequested on '-h'/'--help'
    - UnknownArgumentError, MissingValueError, IntRangeExceededError,
      InvalidChoiceError, InvalidValueError, MissingArgumentError
    """
    Session(registry, tokens).run()


__all__ = (
    "Session",
    "parse",
    "coerce",
    "single",
    "EPSILON",
    "INT32_MIN",
    "INT32_MAX",
)
