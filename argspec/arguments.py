r"""
argspec argument descriptors.

Overview
- Argument: abstract descriptor of one declared option. It is never built directly;
  one of its six sealed kinds is used instead:
  • Boolean: presence-only flag (never attached, consumes no value).
  • Integer: signed integer value.
  • Real: floating-point value.
  • String: verbatim text value.
  • StringList: verbatim text values accumulated across occurrences.
  • Choice: one label out of an ordered list; the value is the label's 0-based index.

- ArgumentKind: the closed set of kinds above.
- ArgumentFlag: combinable bits NOCASE, REQUIRED, SKIP and MULTIPLE.

Shared contract (every kind)
- arity: value tokens consumed by an unattached occurrence (0 for Boolean, the
  number of values collected so far for StringList, 1 otherwise).
- matches(token): option-match predicate used while scanning an argument vector.
  • unattached: the token must equal the name.
  • attached: the token must be strictly longer than the name and start with it.
  • NOCASE makes both comparisons case-insensitive.
- isnamed(name): name lookup predicate used by the typed getters.
- assign(values): kind-specific setter; returns whether the text was accepted.
  The set flag (isset) always follows the outcome of the latest assignment and a
  rejected text never touches the current value.
- reset(): clear the set flag, keeping the current value.
- bind(slot): current value shaped for one of the kind's slot types.

Introspection & representation
- ArgumentType metaclass provides stable __repr__/__rich_repr__ and exposes the
  fields listed in __introspectable__ as read-only properties (containers are copied
  on read, so descriptor state cannot be mutated through them).
- Concrete kinds are sealed: subclassing one raises TypeError.

Quick example:
    >>> from argspec.arguments import Integer, ArgumentFlag
    >>> count = Integer("-n", default=3, flags=ArgumentFlag.REQUIRED)
    >>> count.matches("-n"), count.arity
    (True, 1)
    >>> count.assign(["12"]), count.value, count.isset
    (True, 12, True)
"""
import functools
import operator
import re
from collections.abc import Iterable
from enum import Enum, IntFlag

from .coercion import casecmp, isinteger, tointeger, isreal, toreal
from .utils import *


class ArgumentKind(Enum):
    BOOLEAN    = "boolean"
    INTEGER    = "integer"
    REAL       = "real"
    STRING     = "string"
    STRINGLIST = "string list"
    CHOICE     = "choice"

    def __str__(self):
        return self.value


class ArgumentFlag(IntFlag):
    NONE     = 0
    NOCASE   = 1 << 0
    REQUIRED = 1 << 1
    SKIP     = 1 << 2
    MULTIPLE = 1 << 3


class ArgumentType(type):
    """
    Metaclass that turns descriptor classes into introspectable, sealed kinds.

    Responsibilities
    - Provide stable, readable __repr__/__rich_repr__ implementations.
    - Expose every name listed in __introspectable__ as a read-only property
      backed by the private "_<name>" field.
    - Seal classes declared with sealed=True against subclassing.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens)
      and used in messages.
    """
    __introspectable__ = ()
    __displayable__ = Unset

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            """
            Return a concise, stable representation with key metadata.

            Example
            - integer(name='-n', kind=<ArgumentKind.INTEGER: 'integer'>, ...)
            """
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in coalesce(type(self).__displayable__, type(self).__introspectable__):
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        if options.get("sealed", False):
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _sanitize_metadata(cls, metadata, /):
    """
    Internal: validate and normalize the metadata shared by every kind.

    - name: string of one or more dashes followed by an ASCII letter or digit and
      then letters, digits or underscores (e.g. "-v", "--max_depth", "-I").
    - flags: ArgumentFlag or a plain int; bool is rejected.
    - attached: bool; Boolean kinds can never be attached.
    - descr: Unset or a string; Unset becomes "".

    The dict is mutated in place.
    """
    if not isinstance(name := metadata["name"], str):
        raise TypeError(f"{cls.__typename__} 'name' must be a string")
    elif not re.fullmatch(r"-+[A-Za-z0-9][A-Za-z0-9_]*", name):
        raise ValueError(f"{cls.__typename__} 'name' must be dashes followed by letters, digits or underscores")

    if not isinstance(flags := metadata["flags"], int) or isinstance(flags, bool):
        raise TypeError(f"{cls.__typename__} 'flags' must be an argument-flag")
    metadata["flags"] = ArgumentFlag(flags)

    metadata["attached"] = bool(metadata["attached"])
    if metadata["attached"] and cls._kind is ArgumentKind.BOOLEAN:
        raise TypeError(f"{cls.__typename__} cannot be attached")

    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    metadata["descr"] = coalesce(descr, "")


class Argument(metaclass=ArgumentType):
    """
    Abstract option descriptor; see the module documentation for the contract.

    Kind-specific class attributes
    - _kind: the ArgumentKind of the class.
    - arity: value tokens per unattached occurrence.
    - zero: value handed out by the registry on a type-mismatched access.
    - placeholder: usage text for the value ("" for presence-only kinds).
    - slots: Python types the value can be bound to.
    """

    __introspectable__ = (
        "name",
        "kind",
        "flags",
        "attached",
        "default",
        "value",
        "isset",
        "descr",
    )

    _kind = Unset
    arity = 1
    zero = None
    placeholder = ""
    slots = ()

    def __init__(self, name, /, default=Unset, flags=ArgumentFlag.NONE, *, attached=False, descr=Unset):
        if self._kind is Unset:
            raise TypeError("argument is abstract, use one of its kinds instead")

        metadata = {
            "name": name,
            "default": default,
            "flags": flags,
            "attached": attached,
            "descr": descr,
        }
        _sanitize_metadata(type(self), metadata)
        metadata["default"] = self._sanitize_default(metadata["default"])

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

        self._value = self._initial()
        self._isset = False

    def _sanitize_default(self, default):
        raise NotImplementedError

    def _initial(self):
        return self._default

    def _assign(self, values):
        raise NotImplementedError

    @property
    def nocase(self):
        return bool(self._flags & ArgumentFlag.NOCASE)

    @property
    def required(self):
        return bool(self._flags & ArgumentFlag.REQUIRED)

    @property
    def skip(self):
        return bool(self._flags & ArgumentFlag.SKIP)

    @property
    def multiple(self):
        return bool(self._flags & ArgumentFlag.MULTIPLE)

    def matches(self, token, /):
        """
        Option-match predicate for a raw argument token.
        """
        if not self._attached:
            return casecmp(token, self._name) if self.nocase else token == self._name

        if len(token) <= len(self._name):
            return False

        prefix = token[:len(self._name)]
        return casecmp(prefix, self._name) if self.nocase else prefix == self._name

    def isnamed(self, name, /):
        """
        Name comparison used by lookups; honors NOCASE.
        """
        return casecmp(name, self._name) if self.nocase else name == self._name

    def assign(self, values, /):
        """
        Run the kind-specific setter over the raw value texts.

        For attached options the caller passes the text that followed the name
        as the first value.
        """
        self._isset = bool(self._assign(tuple(values)))
        return self._isset

    def reset(self):
        self._isset = False

    def bind(self, slot, /):
        """
        Return the current value for a slot type listed in self.slots.
        """
        if slot not in self.slots:
            raise TypeError(f"{type(self).__typename__} cannot be bound to {getattr(slot, '__name__', slot)!r}")
        return self.value


class Boolean(Argument, sealed=True):
    _kind = ArgumentKind.BOOLEAN
    arity = 0
    zero = False
    slots = (bool,)

    def _sanitize_default(self, default):
        if not isinstance(default := coalesce(default, False), bool):
            raise TypeError(f"{type(self).__typename__} 'default' must be a boolean")
        return default

    def _assign(self, values):
        # presence alone sets the flag, any supplied text is ignored
        self._value = True
        return True


class Integer(Argument, sealed=True):
    _kind = ArgumentKind.INTEGER
    zero = 0
    placeholder = "<integer>"
    slots = (int,)

    def _sanitize_default(self, default):
        if not isinstance(default := coalesce(default, 0), int) or isinstance(default, bool):
            raise TypeError(f"{type(self).__typename__} 'default' must be an integer")
        return default

    def _assign(self, values):
        if not values or not isinteger(values[0]):
            return False
        self._value = tointeger(values[0])
        return True


class Real(Argument, sealed=True):
    _kind = ArgumentKind.REAL
    zero = 0.0
    placeholder = "<real>"
    slots = (float,)

    def _sanitize_default(self, default):
        if not isinstance(default := coalesce(default, 0.0), int | float) or isinstance(default, bool):
            raise TypeError(f"{type(self).__typename__} 'default' must be a real number")
        return float(default)

    def _assign(self, values):
        if not values or not isreal(values[0]):
            return False
        self._value = toreal(values[0])
        return True


class String(Argument, sealed=True):
    _kind = ArgumentKind.STRING
    zero = ""
    placeholder = "<string>"
    slots = (str,)

    def _sanitize_default(self, default):
        if not isinstance(default := coalesce(default, ""), str):
            raise TypeError(f"{type(self).__typename__} 'default' must be a string")
        return default

    def _assign(self, values):
        if not values:
            return False
        self._value = values[0]
        return True


class StringList(Argument, sealed=True):
    """
    Accumulating string option (declared with the MULTIPLE flag).

    The default, when not empty, is the first element of the list; every accepted
    occurrence appends to it.

    Its arity is the number of values collected so far: the first unattached
    occurrence reads the next token without consuming it, the second consumes one
    token, and so on.
    """
    _kind = ArgumentKind.STRINGLIST
    zero = []
    placeholder = "<string>"
    slots = (list, str)

    def __init__(self, name, /, default=Unset, flags=ArgumentFlag.MULTIPLE, *, attached=False, descr=Unset):
        super().__init__(name, default, flags, attached=attached, descr=descr)
        self._flags |= ArgumentFlag.MULTIPLE

    def _sanitize_default(self, default):
        if not isinstance(default := coalesce(default, ""), str):
            raise TypeError(f"{type(self).__typename__} 'default' must be a string")
        return default

    def _initial(self):
        return [self._default] if self._default else []

    @property
    def arity(self):
        return len(self._value)

    def _assign(self, values):
        if not values:
            return False
        self._value.append(values[0])
        return True

    def bind(self, slot, /):
        value = super().bind(slot)
        if slot is str:
            return value[0] if value else None
        return value


class Choice(Argument, sealed=True):
    """
    One label out of an ordered list of choices.

    The value is the 0-based index of the label given on the command line; the
    label must match exactly (case-sensitive, NOCASE only affects the option name).
    """
    __introspectable__ = Argument.__introspectable__ + ("choices",)

    _kind = ArgumentKind.CHOICE
    zero = -1
    placeholder = "<choice>"
    slots = (int,)

    def __init__(self, name, choices, /, default=Unset, flags=ArgumentFlag.NONE, *, attached=False, descr=Unset):
        if isinstance(choices, str) or not isinstance(choices, Iterable):
            raise TypeError(f"{type(self).__typename__} 'choices' must be an iterable of strings")
        choices = tuple(choices)
        if not all(isinstance(choice, str) for choice in choices):
            raise TypeError(f"{type(self).__typename__} 'choices' must be an iterable of strings")
        self._choices = choices
        super().__init__(name, default, flags, attached=attached, descr=descr)

    def _sanitize_default(self, default):
        if not isinstance(default := coalesce(default, 0), int) or isinstance(default, bool):
            raise TypeError(f"{type(self).__typename__} 'default' must be an integer index")
        return default

    def _assign(self, values):
        if not values or values[0] not in self._choices:
            return False
        self._value = self._choices.index(values[0])
        return True


__all__ = (
    # Enumerations
    "ArgumentKind",
    "ArgumentFlag",

    # Descriptors
    "Argument",
    "Boolean",
    "Integer",
    "Real",
    "String",
    "StringList",
    "Choice",
)

# The metaclass is an implementation detail, not part of the public API.
del ArgumentType
