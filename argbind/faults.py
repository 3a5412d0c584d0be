"""
argbind faults (registration and parsing errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every failure the engine
  can report. Codes are grouped by domain (registration vs. parsing) so logs and
  searches stay predictable.
- ArgumentException: base type that carries message + options and knows how to
  render itself in a friendly, lowercased and actionable way.
- RegistrationError / ParsingError: the two families, one subclass per kind.
- HelpRequested: control-flow signal raised when '-h' or '--help' is scanned.
- trigger(): central entry point to surface a fault (raise, or print and exit).
- getdoc(): optional description lookup for a code from the host application.

Contract with the core
- The registry and the session only raise. They never print, log or exit.
- Every fault carries 'code', 'title', 'hint' and the identity needed to name
  the offending argument: 'name' and/or 'flag' for declared arguments, 'token'
  for raw command-line input.
- Rendering options (prog, shell, fancy, colorful) are merged in later through
  copy.replace(fault, **options), which is what trigger() does.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the engine (stable identifiers).

    grouping (by high-level domain)
    - registration (101xx)
      • INVALID_IDENTITY, INVALID_TYPE, INVALID_ACTION, UNSUPPORTED_CHOICES,
        UNSUPPORTED_ACTION, CONFLICTING_OPTIONS, UNSUPPORTED_REQUIRE
    - parsing (102xx)
      • UNKNOWN_ARGUMENT, MISSING_VALUE, INT_RANGE_EXCEEDED, INVALID_CHOICE,
        MISSING_ARGUMENT, INVALID_VALUE

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- registration errors (101xx) ---
    INVALID_IDENTITY    = 10101
    INVALID_TYPE        = 10102
    INVALID_ACTION      = 10103
    UNSUPPORTED_CHOICES = 10104
    UNSUPPORTED_ACTION  = 10105
    CONFLICTING_OPTIONS = 10106
    UNSUPPORTED_REQUIRE = 10107

    # --- parsing errors (102xx) ---
    UNKNOWN_ARGUMENT    = 10201
    MISSING_VALUE       = 10202
    INT_RANGE_EXCEEDED  = 10203
    INVALID_CHOICE      = 10204
    MISSING_ARGUMENT    = 10205
    INVALID_VALUE       = 10206

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ArgumentException(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

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

        prog = text(getattr(main, "__prog__", self.options.get("prog", "argbind")), styler("prog-name"))

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(self.options["code"].normalize(), styler("code")),
            " | ",
            text(self.options["title"].title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        hint = Text.assemble(text(" → ", styler("hint-arrow")), text(self.options["hint"], styler("hint")))

        if fancy:
            return Panel(Group(message, hint), title=header, title_align="left")

        return Group(header, message, hint)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class RegistrationError(ArgumentException): ...
class InvalidIdentityError(RegistrationError): ...
class InvalidTypeError(RegistrationError): ...
class InvalidActionError(RegistrationError): ...
class UnsupportedChoicesError(RegistrationError): ...
class UnsupportedActionError(RegistrationError): ...
class ConflictingOptionsError(RegistrationError): ...
class UnsupportedRequireError(RegistrationError): ...


class ParsingError(ArgumentException): ...
class UnknownArgumentError(ParsingError): ...
class MissingValueError(ParsingError): ...
class IntRangeExceededError(ParsingError): ...
class InvalidChoiceError(ParsingError): ...
class MissingArgumentError(ParsingError): ...
class InvalidValueError(ParsingError): ...


class HelpRequested(Exception):
    """
    raised by the session when '-h' or '--help' is scanned.

    not a fault: the parser façade answers it by printing help and exiting
    with status 0. callers of the bare parse() function decide themselves.
    """
    def __init__(self, token, /):
        super().__init__(token)
        self.token = token


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ArgumentException).
    - options are merged into the fault via copy.replace(fault, **options) before triggering.
    - in shell mode, the fault is rendered on stderr via rich and the process exits
      with status 1; otherwise the merged fault is raised.

    typical options
    - prog, shell, fancy, colorful.
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
    are FaultCode instances and values are short documentation strings. when
    not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ArgumentException",
    "RegistrationError",
    "InvalidIdentityError",
    "InvalidTypeError",
    "InvalidActionError",
    "UnsupportedChoicesError",
    "UnsupportedActionError",
    "ConflictingOptionsError",
    "UnsupportedRequireError",
    "ParsingError",
    "UnknownArgumentError",
    "MissingValueError",
    "IntRangeExceededError",
    "InvalidChoiceError",
    "MissingArgumentError",
    "InvalidValueError",
    "HelpRequested",
    "FaultCode",
    "trigger",
    "getdoc",
)
