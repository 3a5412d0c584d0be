"""
argbind registry: validated, insertion-ordered argument collections.

A Registry holds two sequences of Argument references:
- options: flag/name-addressed arguments, in registration order (also help order).
- positionals: arguments matched by position, in registration order (matching order).

Registration is atomic per argument: the checks below run in a fixed order and
the first violation raises a RegistrationError subclass without inserting
anything.

    1. identity      flag or non-empty name present; flag is one character
    2. type          a Type member; storage is a Slot of that kind
    3. action        an Action member
    4. compatibility bool actions need BOOL, COUNT needs INT, STORE refuses BOOL;
                     non-STORE actions refuse choices, positionals and 'required'
    5. positional    positionals carry no flag
    6. bare prefix   option names are longer than '--'
    7. reserved      '-h' and '--help' belong to the help request
    8. conflicts     no flag/name shared with a record of the same sequence

register_many() stops at the first failing argument; the ones accepted before
it stay registered.
"""
from .arguments import Action, Argument, Slot, Type
from .faults import *
from .utils import Unset, coalesce

# Reserved spellings of the built-in help request.
HELP_FLAG = "h"
HELP_NAME = "--help"

# Every option name starts with this prefix; names of this length or shorter are bare.
OPTION_PREFIX = "--"


class Registry:
    """
    ordered option/positional collections with structural validation.

        >>> registry = Registry()
        >>> registry.register(option(Type.INT, "x", "--value"))
        >>> registry.options
        (Argument(type=<Type.INT: 'int'>, ...),)
    """

    def __init__(self):
        self._options = []
        self._positionals = []

    @property
    def options(self):
        return tuple(self._options)

    @property
    def positionals(self):
        return tuple(self._positionals)

    def __iter__(self):
        """iterate options first, then positionals (finalization order)."""
        yield from self._options
        yield from self._positionals

    def __len__(self):
        return len(self._options) + len(self._positionals)

    def __contains__(self, argument):
        return any(argument is other for other in self)

    def _fail(self, exception, message, /, *, code, title, hint, argument):
        raise exception(
            message,
            title=title,
            code=code,
            hint=hint,
            name=coalesce(argument.name),
            flag=coalesce(argument.flag),
            docs=getdoc(code),
        )

    def register(self, argument, /):
        """
        validate one argument and append it to the matching sequence.

        raises
        - InvalidIdentityError, InvalidTypeError, InvalidActionError,
          UnsupportedActionError, UnsupportedChoicesError, UnsupportedRequireError,
          ConflictingOptionsError (first violation wins; nothing is inserted).
        """
        if not isinstance(argument, Argument):
            raise TypeError("register() argument must be an Argument")

        flag = argument.flag
        name = argument.name

        # 1. identity
        if not flag and not name:
            self._fail(
                InvalidIdentityError,
                "argument must contain at least one of flag or name",
                code=FaultCode.INVALID_IDENTITY,
                title="invalid flag or name",
                hint="give the argument a single-character flag, a name, or both",
                argument=argument,
            )
        if flag and not (isinstance(flag, str) and len(flag) == 1):
            self._fail(
                InvalidIdentityError,
                "flag %r must be a single character" % (flag,),
                code=FaultCode.INVALID_IDENTITY,
                title="invalid flag or name",
                hint="use one character without the leading '-' (for example: 'v')",
                argument=argument,
            )
        if name and not isinstance(name, str):
            self._fail(
                InvalidIdentityError,
                "name %r must be a string" % (name,),
                code=FaultCode.INVALID_IDENTITY,
                title="invalid flag or name",
                hint="use '--long-name' for options or a bare word for positionals",
                argument=argument,
            )

        # 2. type
        if not isinstance(argument.type, Type):
            self._fail(
                InvalidTypeError,
                "%r is not a valid type for %s" % (argument.type, argument.display),
                code=FaultCode.INVALID_TYPE,
                title="invalid type",
                hint="use one of %s" % ", ".join("Type.%s" % member.name for member in Type),
                argument=argument,
            )
        if not isinstance(argument.storage, Slot) or argument.storage.kind is not argument.type:
            self._fail(
                InvalidTypeError,
                "storage for %s must be a slot of kind %s" % (argument.display, argument.type.name),
                code=FaultCode.INVALID_TYPE,
                title="invalid type",
                hint="bind a Slot(Type.%s, ...) or leave storage out to get one" % argument.type.name,
                argument=argument,
            )

        # 3. action
        if not isinstance(argument.action, Action):
            self._fail(
                InvalidActionError,
                "%r is not a valid action for %s" % (argument.action, argument.display),
                code=FaultCode.INVALID_ACTION,
                title="invalid action",
                hint="use one of %s" % ", ".join("Action.%s" % member.name for member in Action),
                argument=argument,
            )

        # 4. action/type compatibility
        action = argument.action
        if action.boolean or action is Action.COUNT:
            if action.boolean and argument.type is not Type.BOOL:
                self._fail(
                    UnsupportedActionError,
                    "store-true/false and boolean-toggle actions must have bool type for %s" % argument.display,
                    code=FaultCode.UNSUPPORTED_ACTION,
                    title="unsupported action",
                    hint="declare the argument with Type.BOOL",
                    argument=argument,
                )
            if action is Action.COUNT and argument.type is not Type.INT:
                self._fail(
                    UnsupportedActionError,
                    "count action must have int type for %s" % argument.display,
                    code=FaultCode.UNSUPPORTED_ACTION,
                    title="unsupported action",
                    hint="declare the argument with Type.INT",
                    argument=argument,
                )
            if argument.choices is not Unset:
                self._fail(
                    UnsupportedChoicesError,
                    "only store action supports choices for %s" % argument.display,
                    code=FaultCode.UNSUPPORTED_CHOICES,
                    title="unsupported choices",
                    hint="remove the choices or use Action.STORE",
                    argument=argument,
                )
            if argument.positional:
                self._fail(
                    UnsupportedActionError,
                    "positional argument %s must have store action" % argument.display,
                    code=FaultCode.UNSUPPORTED_ACTION,
                    title="unsupported action",
                    hint="use Action.STORE, or prefix the name with '--' to make it an option",
                    argument=argument,
                )
            if argument.required:
                self._fail(
                    UnsupportedRequireError,
                    "only store actions can be required for %s" % argument.display,
                    code=FaultCode.UNSUPPORTED_REQUIRE,
                    title="unsupported require",
                    hint="drop 'required' from this argument",
                    argument=argument,
                )
        elif argument.type is Type.BOOL:
            self._fail(
                UnsupportedActionError,
                "store action must have non-bool type for %s" % argument.display,
                code=FaultCode.UNSUPPORTED_ACTION,
                title="unsupported action",
                hint="use Action.STORE_TRUE, Action.STORE_FALSE or Action.BOOLEAN_TOGGLE",
                argument=argument,
            )
        elif argument.choices is not Unset:
            self._check_choices(argument)

        # 5. positional/flag exclusivity
        if argument.positional and flag:
            self._fail(
                InvalidIdentityError,
                "option string %r must start with '-'" % name,
                code=FaultCode.INVALID_IDENTITY,
                title="invalid flag or name",
                hint="drop the flag to keep %r positional, or spell it '--%s'" % (name, name),
                argument=argument,
            )

        # 6. bare prefix
        if name and not argument.positional and len(name) <= len(OPTION_PREFIX):
            self._fail(
                InvalidIdentityError,
                "must provide name for options like %r" % OPTION_PREFIX,
                code=FaultCode.INVALID_IDENTITY,
                title="invalid flag or name",
                hint="spell long names with at least two characters after the prefix",
                argument=argument,
            )

        # 7. reserved help
        if flag == HELP_FLAG:
            self._fail(
                ConflictingOptionsError,
                "-%s flag reserved for help" % HELP_FLAG,
                code=FaultCode.CONFLICTING_OPTIONS,
                title="conflicting option",
                hint="pick another flag; '-h' always shows help",
                argument=argument,
            )
        if name == HELP_NAME:
            self._fail(
                ConflictingOptionsError,
                "%s option string reserved for help" % HELP_NAME,
                code=FaultCode.CONFLICTING_OPTIONS,
                title="conflicting option",
                hint="pick another name; '--help' always shows help",
                argument=argument,
            )

        # 8. conflicts within the same sequence
        sequence = self._positionals if argument.positional else self._options
        for added in sequence:
            if flag and flag == added.flag:
                self._fail(
                    ConflictingOptionsError,
                    "option string -%s already in use" % flag,
                    code=FaultCode.CONFLICTING_OPTIONS,
                    title="conflicting option",
                    hint="every flag can be registered only once",
                    argument=argument,
                )
            if name and name == added.name:
                self._fail(
                    ConflictingOptionsError,
                    "option string %s already in use" % name,
                    code=FaultCode.CONFLICTING_OPTIONS,
                    title="conflicting option",
                    hint="every name can be registered only once",
                    argument=argument,
                )

        sequence.append(argument)

    def register_many(self, arguments, /):
        """
        register arguments in order, stopping at the first failure.

        arguments accepted before the failing one are kept.
        """
        for argument in arguments:
            self.register(argument)

    def _check_choices(self, argument):
        if not argument.choices:
            self._fail(
                UnsupportedChoicesError,
                "choices for %s must not be empty" % argument.display,
                code=FaultCode.UNSUPPORTED_CHOICES,
                title="unsupported choices",
                hint="list at least one admissible value or drop the choices",
                argument=argument,
            )

        # bool is an int subclass; it is never a valid choice
        accepted = (int, float) if argument.type is Type.FLOAT else argument.type.builtin
        for choice in argument.choices:
            if isinstance(choice, bool) or not isinstance(choice, accepted):
                self._fail(
                    UnsupportedChoicesError,
                    "choice %r for %s is not of type %s" % (choice, argument.display, argument.type.name.lower()),
                    code=FaultCode.UNSUPPORTED_CHOICES,
                    title="unsupported choices",
                    hint="make every choice a %s value" % argument.type.name.lower(),
                    argument=argument,
                )


__all__ = (
    "Registry",
    "HELP_FLAG",
    "HELP_NAME",
    "OPTION_PREFIX",
)
