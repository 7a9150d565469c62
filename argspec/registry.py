"""
argspec registry: the public facade over definitions, matching and typed access.

What this module provides
- Registry: owns an ordered descriptor list compiled from a definition string (or
  given as Argument objects) and exposes:
  • parse(args, compact=...): match an argument vector, optionally rewriting it in
    place without the consumed options.
  • Typed getters (getboolean, getinteger, getreal, getstring, getstringlist,
    getchoice) and a generic get(key, type), by name or index.
  • Kind predicates (isboolean, ...) and set predicates (isbooleanset, ...).
  • bind(*slots) / vparse(args, *slots): positional binding of every non-SKIP
    value to a tuple, type-checked against the requested slot types.
  • usage(program): rich-rendered synopsis plus one line per option.
  • checkoption(token) / unhandled(option): helpers for callers that scan the
    compacted vector by hand.

Fault flow
- Diagnostics found while matching (missing/invalid values, unrecognised
  arguments, unset required options) go to the sink given at construction; the
  default sink prints them on the registry console and never raises.
- Programmer-facing faults (definition errors, type mismatches on access) go
  through Registry.trigger: collected when deferred, handed to the fallback when
  one is registered, and surfaced with argspec.faults.trigger otherwise.

Quick start
    from argspec import Registry

    registry = Registry("-v (verbose) -n:ir=1 (count) -I:Sm (include path)")
    if registry.parse(sys.argv, compact=True):
        count = registry.getinteger("-n")
        paths = registry.getstringlist("-I")
"""
import copy
import shlex
from collections import defaultdict
from collections.abc import Iterable, MutableSequence

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .arguments import *
from .faults import *
from .faults import console as _console
from .grammar import scan
from .matcher import Matcher
from .utils import *

_VARIANTS = {
    ArgumentKind.BOOLEAN: Boolean,
    ArgumentKind.INTEGER: Integer,
    ArgumentKind.REAL: Real,
    ArgumentKind.STRING: String,
    ArgumentKind.STRINGLIST: StringList,
    ArgumentKind.CHOICE: Choice,
}

_SLOTS = (bool, int, float, str, list)


def _sanitize_options(cls, metadata):
    """
    Internal: validate the keyword options of a Registry.

    - program: Unset or a string.
    - sink: Unset or a callable receiving one fault.
    - console: Unset or a rich Console.
    - every other option is coerced to bool.
    """
    if not isinstance(metadata["program"], str | Unset):
        raise TypeError(f"{cls.__name__.lower()} 'program' must be a string")
    if metadata["sink"] is not Unset and not callable(metadata["sink"]):
        raise TypeError(f"{cls.__name__.lower()} 'sink' must be callable")
    if not isinstance(metadata["console"], Console | Unset):
        raise TypeError(f"{cls.__name__.lower()} 'console' must be a rich console")
    for name in ("shell", "fancy", "colorful", "deferred", "resume"):
        metadata[name] = bool(metadata[name])
    metadata["sink"] = coalesce(metadata["sink"], report)
    metadata["console"] = coalesce(metadata["console"], _console)


class Registry:
    """
    Ordered set of option descriptors plus the state of the latest parse.

    Options (keyword-only)
    - program: name shown in usage and diagnostics (defaults to args[0]).
    - shell: print triggered faults instead of raising them; definition errors
      then terminate the process unless deferred.
    - fancy: wrap usage and diagnostics in rich panels.
    - colorful: style output (on by default).
    - deferred: collect triggered faults in self.faults instead of surfacing them.
    - resume: keep scanning after a missing value instead of stopping.
    - sink: callable receiving every matching diagnostic (default: report).
    - console: rich Console used for usage and diagnostics (default: stderr).

    Caller contract
    - parse() may be called repeatedly; values and set flags carry over unless
      resetset() is called in between.
    """

    program = mirror("program")
    console = mirror("console")
    shell = mirror("shell")
    fancy = mirror("fancy")
    colorful = mirror("colorful")
    deferred = mirror("deferred")
    faults = mirror("faults")

    def __init__(
            self,
            source="",
            /,
            *,
            program=Unset,
            shell=False,
            fancy=False,
            colorful=True,
            deferred=False,
            resume=False,
            sink=Unset,
            console=Unset
    ):
        metadata = {
            "program": program,
            "shell": shell,
            "fancy": fancy,
            "colorful": colorful,
            "deferred": deferred,
            "resume": resume,
            "sink": sink,
            "console": console,
        }
        _sanitize_options(type(self), metadata)
        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._arguments = []
        self._faults = []
        self._fallback = Unset
        self._matcher = Matcher(self._arguments, self._emit, helper=self.usage, resume=self._resume)
        self.define(source)

    def __repr__(self):
        return f"registry({", ".join(argument.name for argument in self._arguments)})"

    def __rich_repr__(self):
        yield "arguments", self.arguments
        yield "program", self._program

    def __len__(self):
        return len(self._arguments)

    def __getitem__(self, index):
        return self._arguments[index]

    def __iter__(self):
        return iter(tuple(self._arguments))

    @property
    def arguments(self):
        return tuple(self._arguments)

    @property
    def help(self):
        """True once a --help token has been seen by any parse."""
        return self._matcher.help

    @property
    def skipping(self):
        """True when the latest scan met a literal '--'."""
        return self._matcher.skipping

    def define(self, source, /):
        """
        Discard the current descriptors and install new ones.

        source is a definition string (compiled with argspec.grammar.scan) or an
        iterable of Argument objects. On a definition error the descriptors read
        before the failing record are kept and the error goes through trigger().
        """
        self._arguments.clear()

        if isinstance(source, str):
            try:
                for argument in scan(source):
                    self._arguments.append(argument)
            except CompileError as error:
                self.trigger(error)
            return

        if not isinstance(source, Iterable):
            raise TypeError("define() argument must be a string or an iterable of arguments")
        for argument in source:
            if not isinstance(argument, Argument):
                raise TypeError("define() argument must be a string or an iterable of arguments")
            self._arguments.append(argument)

    def fallback(self, fallback, /):
        """
        Register a one-time fallback handler for triggered faults.

        Returns the same callable, enabling decorator-style usage: @registry.fallback
        """
        if not callable(fallback):
            raise TypeError("registry fallback must be callable")
        if self._fallback is not Unset:
            raise TypeError("registry fallback cannot be overridden")
        self._fallback = fallback
        return fallback

    def trigger(self, fault, /, **options):
        if (
                not hasattr(fault, "__trigger__") or
                not callable(fault.__trigger__) or
                not hasattr(fault, "__replace__") or
                not callable(fault.__replace__)
        ):
            raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
        fault = copy.replace(
            fault,
            **options,
            tool=self,
            shell=self._shell,
            fancy=self._fancy,
            colorful=self._colorful,
            deferred=self._deferred,
            console=self._console,
        )
        if self._deferred:
            return self._faults.append(fault)
        if self._fallback is not Unset:
            self._fallback(fault)
        else:
            trigger(fault)

    def _emit(self, fault):
        self._sink(copy.replace(
            fault,
            tool=self,
            fancy=self._fancy,
            colorful=self._colorful,
            console=self._console,
        ))

    def parse(self, args, /, *, compact=False):
        """
        Match an argument vector (args[0] being the program name).

        args is a sequence of strings or a single shell-like string split with
        shlex. With compact=True args must be a mutable sequence; it is rewritten
        in place with the consumed options removed (SKIP options are kept).

        Returns False only when a required option is left unset.
        """
        if isinstance(args, str):
            if compact:
                raise TypeError("parse() cannot compact a string, pass a list instead")
            tokens = shlex.split(args)
        elif isinstance(args, Iterable):
            tokens = list(args)
        else:
            raise TypeError("parse() argument must be a string or a sequence of strings")

        if not all(isinstance(token, str) for token in tokens):
            raise TypeError("parse() argument must be a string or a sequence of strings")
        if compact and not isinstance(args, MutableSequence):
            raise TypeError("parse() argument must be a mutable sequence when compact is set")

        success, output = self._matcher.match(tokens)
        if compact:
            args[:] = output
        return success

    def vparse(self, args, /, *slots, compact=False):
        """parse() followed by bind(*slots); returns (success, values)."""
        return self.parse(args, compact=compact), self.bind(*slots)

    def bind(self, *slots):
        """
        Pair every non-SKIP descriptor, in declaration order, with one slot type
        and return the bound values as a tuple.

        A slot the descriptor cannot be bound to is reported as a SlotMismatchError
        through trigger() and yields None.
        """
        arguments = [argument for argument in self._arguments if not argument.skip]
        if len(slots) != len(arguments):
            raise TypeError(f"bind() takes {len(arguments)} slots but {len(slots)} were given")

        values = []
        for argument, slot in zip(arguments, slots):
            if slot not in argument.slots:
                self.trigger(SlotMismatchError(
                    f"{argument.kind} option {argument.name!r} cannot be bound to {getattr(slot, '__name__', slot)!r}",
                    title="slot mismatch",
                    code=FaultCode.SLOT_MISMATCH,
                    hint="expected " + " or ".join(repr(slot.__name__) for slot in argument.slots),
                ))
                values.append(None)
            else:
                values.append(argument.bind(slot))
        return tuple(values)

    def _lookup(self, key):
        if isinstance(key, int) and not isinstance(key, bool):
            return self._arguments[key]
        if not isinstance(key, str):
            raise TypeError("key must be an option name or an index")
        for argument in self._arguments:
            if argument.isnamed(key):
                return argument
        return None

    def _mismatch(self, key, argument, expected):
        if argument is None:
            message = f"no option named {key!r}"
        else:
            message = f"option {argument.name!r} is declared as {argument.kind}, requested as {expected}"
        self.trigger(TypeMismatchError(
            message,
            title="type mismatch",
            code=FaultCode.TYPE_MISMATCH,
        ))

    def _getvalue(self, key, kind):
        argument = self._lookup(key)
        if argument is None or argument.kind is not kind:
            self._mismatch(key, argument, kind)
            return copy.copy(_VARIANTS[kind].zero)
        return argument.value

    def get(self, key, type, /):
        """
        Generic typed getter; type is one of bool, int, float, str or list.

        int reads integer and choice options; str reads string options and the
        first value of string lists.
        """
        if type not in _SLOTS:
            raise TypeError("get() type must be one of bool, int, float, str or list")
        argument = self._lookup(key)
        if argument is None or type not in argument.slots:
            self._mismatch(key, argument, type.__name__)
            return type()
        return argument.bind(type)

    def getboolean(self, key, /):
        return self._getvalue(key, ArgumentKind.BOOLEAN)

    def getinteger(self, key, /):
        return self._getvalue(key, ArgumentKind.INTEGER)

    def getreal(self, key, /):
        return self._getvalue(key, ArgumentKind.REAL)

    def getstring(self, key, /):
        return self._getvalue(key, ArgumentKind.STRING)

    def getstringlist(self, key, /):
        return self._getvalue(key, ArgumentKind.STRINGLIST)

    def getchoice(self, key, /):
        return self._getvalue(key, ArgumentKind.CHOICE)

    def _iskind(self, key, kind):
        argument = self._lookup(key)
        return argument is not None and argument.kind is kind

    def isboolean(self, key, /):
        return self._iskind(key, ArgumentKind.BOOLEAN)

    def isinteger(self, key, /):
        return self._iskind(key, ArgumentKind.INTEGER)

    def isreal(self, key, /):
        return self._iskind(key, ArgumentKind.REAL)

    def isstring(self, key, /):
        return self._iskind(key, ArgumentKind.STRING)

    def isstringlist(self, key, /):
        return self._iskind(key, ArgumentKind.STRINGLIST)

    def ischoice(self, key, /):
        return self._iskind(key, ArgumentKind.CHOICE)

    def _isset(self, name, kind):
        argument = self._lookup(name)
        return argument is not None and argument.kind is kind and argument.isset

    def isbooleanset(self, name, /):
        return self._isset(name, ArgumentKind.BOOLEAN)

    def isintegerset(self, name, /):
        return self._isset(name, ArgumentKind.INTEGER)

    def isrealset(self, name, /):
        return self._isset(name, ArgumentKind.REAL)

    def isstringset(self, name, /):
        return self._isset(name, ArgumentKind.STRING)

    def isstringlistset(self, name, /):
        return self._isset(name, ArgumentKind.STRINGLIST)

    def ischoiceset(self, name, /):
        return self._isset(name, ArgumentKind.CHOICE)

    def resetset(self):
        """Clear every set flag; values are kept."""
        for argument in self._arguments:
            argument.reset()

    def checkrequired(self):
        """Report unset required options to the sink; True when there is none."""
        return self._matcher.checkrequired()

    def checkoption(self, token, /):
        """
        Classify a token left in the compacted vector.

        Returns the option text after the dash, "" for a literal "--" (which also
        starts skipping), or None for non-options and for anything after "--".
        """
        if token == "--":
            self._matcher.skipping = True
            return ""
        if self._matcher.skipping or not token.startswith("-"):
            return None
        return token[1:]

    def unhandled(self, option, /):
        """Report an option (as returned by checkoption) the caller did not handle."""
        if option:
            self._emit(UnhandledOptionWarning(
                f"unhandled option '-{option}'",
                title="unhandled option",
                code=FaultCode.UNHANDLED_OPTION,
            ))

    def usage(self, program=Unset, /):
        """
        Print the usage text on the registry console.

        Layout
        - synopsis: program name then every option; optional ones in brackets,
          value placeholders after the name (separated by a space unless attached).
        - one " name<pad> : descr" line per option, names padded to the longest.

        Palette keys: program-name, option-name, required-name, metavar, punctuation,
        description, panel-title. Override them with a __styles__ mapping in __main__.
        """
        styles = defaultdict(str, {
            "program-name": "bold #FF4D94",
            "option-name": "bold #00E6FF",
            "required-name": "bold #22C55E",
            "metavar": "bold #FFD600",
            "punctuation": "#737373",
            "description": "#9CA3AF",
            "panel-title": "bold #FF4D94",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self._colorful else ""

        program = coalesce(program, coalesce(self._program, ""))

        synopsis = Text(program, styler("program-name"))
        for argument in self._arguments:
            synopsis.append(" ")
            if not argument.required:
                synopsis.append("[", styler("punctuation"))
            synopsis.append(argument.name, styler("required-name" if argument.required else "option-name"))
            if argument.placeholder:
                if not argument.attached:
                    synopsis.append(" ")
                synopsis.append(argument.placeholder, styler("metavar"))
            if not argument.required:
                synopsis.append("]", styler("punctuation"))

        width = max((len(argument.name) for argument in self._arguments), default=0)
        lines = [synopsis]
        for argument in self._arguments:
            lines.append(Text.assemble(
                " ",
                (argument.name.ljust(width), styler("option-name")),
                (" : ", styler("punctuation")),
                (argument.descr, styler("description")),
            ))

        renderable = Group(*lines)
        if self._fancy:
            renderable = Panel(
                renderable,
                title=Text.assemble("[ ", "USAGE", " ]", style=styler("panel-title")),
                title_align="left",
            )
        self._console.print(renderable, soft_wrap=True)


__all__ = (
    "Registry",
)
