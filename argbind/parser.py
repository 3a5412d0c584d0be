"""
argbind parser: program-level façade over the registry and the parse session.

What this module provides
- Parser: owns a Registry plus program metadata (prog, description, epilog)
  and the UI options used when reporting (shell, fancy, colorful).
  • add_argument / add_arguments: register arguments (faults are triggered).
  • parse_args: parse sys.argv[1:] (or given tokens); '-h'/'--help' prints
    help and exits with status 0; faults are triggered.
  • render_help / print_help: Rich-based usage and argument tables.
  • check / check_and_exit: print a fault (if any) and report its code.

Reporting modes
- shell=True (default): faults are printed on stderr and the process exits with 1.
- shell=False: faults are raised to the caller, enriched with the UI options.

Customization
- Define __prog__ in __main__ to override the program name in help and faults.
- Define __styles__ in __main__ to override any palette entry (see render_help).

Quick start
    from argbind import Parser, Slot, Type, option, positional, toggle

    parser = Parser(description="sum two numbers")
    total = Slot(Type.INT, 0)
    parser.add_arguments([
        positional(Type.STRING, "FILE", help="input file"),
        option(Type.INT, "s", "--sum", total, "expected total", required=True),
        toggle("v", "--verbose", help="chatty output"),
    ])
    parser.parse_args()
"""
import copy
import os.path
import sys
from collections import defaultdict

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .arguments import Action, Type
from .faults import *
from .faults import console
from .registry import HELP_FLAG, HELP_NAME, OPTION_PREFIX, Registry
from .session import parse
from .utils import Unset, coalesce


def _metavar(argument):
    # '--max-depth' → 'MAX_DEPTH', flag-only 'd' → 'D'
    if argument.name:
        return argument.name.lstrip("-").replace("-", "_").upper()
    return argument.flag.upper()


def _choice(argument, choice):
    match argument.type:
        case Type.FLOAT:
            return "%.3f" % choice
        case Type.STRING:
            return '"%s"' % choice
        case _:
            return str(choice)


class Parser:
    """
    program-level entry point: registration, parsing, help and reporting.

        >>> parser = Parser(prog="tool", shell=False)
        >>> parser.add_argument(count("v", "--verbose"))
        >>> parser.parse_args(["-vvv"])
    """

    def __init__(
            self,
            prog=Unset,
            description=Unset,
            epilog=Unset,
            *,
            shell=True,
            fancy=False,
            colorful=True,
    ):
        self.prog = coalesce(prog, os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "argbind")
        self.description = description
        self.epilog = epilog
        self.shell = shell
        self.fancy = fancy
        self.colorful = colorful
        self.registry = Registry()

    def __repr__(self):
        return "%s(prog=%r, arguments=%d)" % (type(self).__name__, self.prog, len(self.registry))

    def trigger(self, fault, /):
        trigger(fault, prog=self.prog, shell=self.shell, fancy=self.fancy, colorful=self.colorful)

    def add_argument(self, argument, /):
        try:
            self.registry.register(argument)
        except RegistrationError as fault:
            self.trigger(fault)

    def add_arguments(self, arguments, /):
        try:
            self.registry.register_many(arguments)
        except RegistrationError as fault:
            self.trigger(fault)

    def parse_args(self, tokens=Unset, /):
        """
        parse tokens (defaults to sys.argv[1:]) into the registered slots.

        '-h'/'--help' renders help and exits with status 0. any other fault is
        triggered: printed and exit(1) in shell mode, raised otherwise.
        """
        tokens = coalesce(tokens, sys.argv[1:])
        try:
            parse(self.registry, tokens)
        except HelpRequested:
            self.print_help()
            sys.exit(0)
        except ParsingError as fault:
            self.trigger(fault)

    def check(self, fault=None, /):
        """
        print 'fault' on stderr (when given) and return its code, 0 otherwise.
        """
        if fault is None:
            return 0
        console.print(copy.replace(fault, prog=self.prog, shell=self.shell, fancy=self.fancy, colorful=self.colorful))
        return int(fault.options["code"])

    def check_and_exit(self, fault=None, /):
        """print 'fault' and exit with status 1 when one is given."""
        if self.check(fault):
            sys.exit(1)

    def _styles(self):
        return defaultdict(str, {
            "usage-label": "bold #00E6FF",  # cyan, signature info
            "program-name": "bold #FF4D94",  # magenta-pink, brand pop
            "description-section": "italic #A3A3A3",
            "epilog-section": "#737373",
            "group-label": "bold #FFFFFF",
            "argument-description": "#9CA3AF",
            "option-name": "bold #00E6FF",
            "flag-name": "bold #22C55E",
            "positional-name": "bold #36C5F0",
            "metavar": "bold #FFD600",
            "choice": "bold #FF4D94",
            "panel-title": "bold #FF4D94",
        } | getattr(__import__("__main__"), "__styles__", {}))

    def render_help(self):
        """
        build the help screen as a Rich renderable.

        layout
        - usage: PROG [-h] [OPTION ...] POSITIONAL ...
          optional entries are bracketed; toggles show '-f | --name | --no-name';
          store options show a metavar or their '{choices}'.
        - description, 'positional arguments:', 'options:' (with the built-in
          help line and '(choices: ...)' suffixes), epilog.

        palette keys
        - usage-label, program-name, description-section, epilog-section,
          group-label, argument-description, option-name, flag-name,
          positional-name, metavar, choice, panel-title
        """
        styles = self._styles()
        prog = getattr(__import__("__main__"), "__prog__", self.prog)

        def styler(style):
            return styles[style] if self.colorful else ""

        def text(fragment, style=""):
            return Text(str(fragment), styler(style))

        def choices(argument, curly):
            rendered = Text(",").join(text(_choice(argument, choice), "choice") for choice in argument.choices)
            if curly:
                return Text.assemble(" {", rendered, "}")
            return Text.assemble(" (choices: ", rendered, ")")

        usage = Text.assemble(
            text("usage", "usage-label"), ": ",
            text(prog, "program-name"), " [", text("-" + HELP_FLAG, "flag-name"), "]",
        )

        for argument in self.registry.options:
            spellings = []
            if argument.flag:
                spellings.append(text("-" + argument.flag, "flag-name"))
            if argument.action is Action.BOOLEAN_TOGGLE:
                if argument.name:
                    spellings.append(text(argument.name, "option-name"))
                    spellings.append(text("%sno-%s" % (OPTION_PREFIX, argument.name[len(OPTION_PREFIX):]), "option-name"))
                entry = Text(" | ").join(spellings)
            else:
                # one spelling is enough for the usage line: the flag wins
                entry = spellings[0] if spellings else text(argument.name, "option-name")

            if argument.action is Action.STORE:
                if argument.choices is Unset:
                    entry = Text.assemble(entry, " ", text(_metavar(argument), "metavar"))
                else:
                    entry = Text.assemble(entry, choices(argument, True))

            usage.append(" ")
            usage.append_text(entry if argument.required else Text.assemble("[", entry, "]"))

        for argument in self.registry.positionals:
            usage.append(" ")
            usage.append_text(text(argument.name, "positional-name"))

        renders = [usage]

        if self.description:
            renders.extend([Text(""), text(self.description, "description-section")])

        if self.registry.positionals:
            table = Table.grid(padding=(0, 2))
            table.add_column(min_width=24, no_wrap=True)
            table.add_column()
            for argument in self.registry.positionals:
                table.add_row(
                    Text.assemble("  ", text(argument.name, "positional-name")),
                    text(coalesce(argument.help, ""), "argument-description"),
                )
            renders.extend([Text(""), text("positional arguments:", "group-label"), table])

        table = Table.grid(padding=(0, 2))
        table.add_column(min_width=24, no_wrap=True)
        table.add_column()
        table.add_row(
            Text.assemble("  ", text("-" + HELP_FLAG, "flag-name"), ", ", text(HELP_NAME, "option-name")),
            text("show this help message and exit", "argument-description"),
        )
        for argument in self.registry.options:
            names = Text("  ")
            names.append_text(text("-" + argument.flag, "flag-name") if argument.flag else Text("  "))
            if argument.name:
                names.append(", " if argument.flag else "  ")
                names.append_text(text(argument.name, "option-name"))
            description = text(coalesce(argument.help, ""), "argument-description")
            if argument.choices is not Unset:
                description.append_text(choices(argument, False))
            table.add_row(names, description)
        renders.extend([Text(""), text("options:", "group-label"), table])

        if self.epilog:
            renders.extend([Text(""), text(self.epilog, "epilog-section")])

        if self.fancy:
            return Panel(Group(*renders), title=text(prog, "panel-title"), title_align="left")
        return Group(*renders)

    def print_help(self, console=Unset, /):
        coalesce(console, Console()).print(self.render_help())


__all__ = (
    "Parser",
)
