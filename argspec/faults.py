"""
argspec faults (errors and warnings), rendering and diagnostic sinks.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain (definition, matching, access, warnings).
- ArgumentException / ArgumentWarning: base types that carry message + options and
  know how to render themselves with rich, how to surface themselves, and how to
  copy themselves with extra options.
- trigger(): central entry point to surface a programmer-facing fault.
- report() / Collector: diagnostic sinks for faults found while matching; they
  never raise.
- getdoc(): optional description lookup for a code from the host application.

Propagation
- Definition and access faults are surfaced with trigger(). Outside shell mode
  exceptions are raised and warnings go through warnings.warn; in shell mode both
  are printed on the stderr console, and fatal exceptions exit the process unless
  the run is deferred.
- Matching faults are handed to a sink. The default sink, report(), prints them.
"""
import inspect
import sys
import warnings
from abc import ABC
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
    canonical fault codes (stable identifiers).

    grouping
    - definition (211xx): grammar violations found while compiling a definition.
    - matching (221xx): problems found while scanning an argument vector.
    - access (231xx): typed getters and slot binding used against the wrong kind.
    - warnings (241xx): non-fatal observations.

    normalize() lets a host remap codes to its own labels through a __codes__
    mapping in __main__.
    """
    # --- definition errors (21xxx) ---
    INVALID_CHARACTER     = 21101
    UNKNOWN_KIND          = 21102
    MISSING_CHOICES       = 21103
    INVALID_COUNT         = 21104
    INVALID_DEFAULT       = 21105
    MULTIPLE_VALUES       = 21106

    # --- matching errors (22xxx) ---
    MISSING_VALUE         = 22101
    INVALID_VALUE         = 22102
    REQUIRED_MISSING      = 22103

    # --- access errors (23xxx) ---
    TYPE_MISMATCH         = 23101
    SLOT_MISMATCH         = 23102

    # --- warnings (24xxx) ---
    UNRECOGNISED_ARGUMENT = 24101
    UNHANDLED_OPTION      = 24102
    IGNORED_MULTIPLE      = 24103

    def normalize(self):
        """
        return a host-normalized string for this code.

        when __main__ has no __codes__ mapping the numeric value is used.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette):
    """
    build the rich renderable shared by exceptions and warnings.

    layout: a "[ prog — code | Title ]" header above the message and the optional
    hint; the header becomes a panel title when the fault carries fancy=True.
    """
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", True)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

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

    tool = options.get("tool")
    prog = getattr(main, "__prog__", getattr(tool, "program", None) or "argspec")
    code = options.get("code")
    title = options.get("title")
    title = title.title() if title else type(fault).__name__

    header = Text.assemble(
        "[ ",
        text(prog, styler("prog-name")),
        " — ",
        text(code.normalize() if isinstance(code, FaultCode) else "-", styler("code")),
        " | ",
        text(title, styler("title")),
        " ]"
    )
    message = text(_message(fault), styler("message"))
    renders = [message]
    if hint := options.get("hint"):
        renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

    if options.get("fancy", False):
        return Panel(Group(*renders), title=header, title_align="left")

    return Group(header, *renders)


def _message(fault):
    return fault.message if fault.message is not Unset else ""


class ArgumentException(Exception):
    """
    base of every argspec error.

    options are free-form keyword context; the renderer reads title, code, hint,
    colorful, fancy and tool, and __trigger__ reads shell and deferred.
    """
    __fatal__ = False

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "title": "bold #FF4DA6",
            "message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self from None
        self.options.get("console", console).print(self)
        if self.__fatal__ and not self.options.get("deferred", False):
            sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class CompileError(ArgumentException):
    """a definition string violates the option grammar."""
    __fatal__ = True


class InvalidCharacterError(CompileError): ...
class UnknownKindError(CompileError): ...
class MissingChoicesError(CompileError): ...
class InvalidCountError(CompileError): ...
class InvalidDefaultError(CompileError): ...
class MultipleValuesError(CompileError): ...

class MissingValueError(ArgumentException): ...
class InvalidValueError(ArgumentException): ...
class RequiredMissingError(ArgumentException): ...

class TypeMismatchError(ArgumentException): ...
class SlotMismatchError(ArgumentException): ...


class ArgumentWarning(ABC, Warning):
    """base of every argspec warning."""

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",
            "title": "bold #FFC2E0",
            "message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        self.options.get("console", console).print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class UnrecognisedArgumentWarning(ArgumentWarning): ...
class UnhandledOptionWarning(ArgumentWarning): ...
class IgnoredMultipleWarning(ArgumentWarning): ...


def _check(fault, caller):
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError(f"{caller}() argument must have a __trigger__ and __replace__ methods")


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ (see the base classes).
    - options are merged into a copy of the fault before triggering.
    - outside shell mode exceptions are raised and warnings are emitted via
      warnings.warn; in shell mode both are printed on the stderr console.

    typical options
    - tool, shell, fancy, colorful, deferred, console, title, code, hint.
    """
    _check(fault, "trigger")
    fault.__replace__(**options).__trigger__()


def report(fault, /):
    """
    default diagnostic sink: print the fault on its console, never raise.
    """
    _check(fault, "report")
    fault.options.get("console", console).print(fault, soft_wrap=True)


class Collector(list):
    """
    diagnostic sink that records faults instead of printing them.

    >>> sink = Collector()
    >>> registry = Registry("-i:i", sink=sink)
    >>> registry.parse(["prog", "-i", "x"])
    True
    >>> sink.codes
    [<FaultCode.INVALID_VALUE: 22102>]
    """

    def __call__(self, fault, /):
        _check(fault, "Collector")
        self.append(fault)

    @property
    def errors(self):
        return [fault for fault in self if isinstance(fault, ArgumentException)]

    @property
    def warnings(self):
        return [fault for fault in self if isinstance(fault, ArgumentWarning)]

    @property
    def codes(self):
        return [fault.options.get("code") for fault in self]


def getdoc(code, /):
    """
    optional documentation for a fault code from a __docs__ mapping in __main__.

    returns None when the host does not document the code.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "ArgumentException",
    "CompileError",
    "InvalidCharacterError",
    "UnknownKindError",
    "MissingChoicesError",
    "InvalidCountError",
    "InvalidDefaultError",
    "MultipleValuesError",
    "MissingValueError",
    "InvalidValueError",
    "RequiredMissingError",
    "TypeMismatchError",
    "SlotMismatchError",
    "ArgumentWarning",
    "UnrecognisedArgumentWarning",
    "UnhandledOptionWarning",
    "IgnoredMultipleWarning",
    "Collector",
    "FaultCode",
    "trigger",
    "report",
    "getdoc",
)
