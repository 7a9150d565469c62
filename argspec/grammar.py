r"""
argspec definition compiler.

A definition is a whitespace-separated sequence of option records:

    record := '-'+ alnum (alnum | '_')* [':' kind [choices] [count] flag*] ['=' default] [ws* '(' descr ')']

- kind: f (boolean), i/I (integer), r/R (real), s/S (string), c/C (choice);
  uppercase kinds take their value attached to the option token (-I/usr/include).
- choices: '[' labels ']' right after a choice kind; labels are separated by spaces
  and/or commas.
- count: decimal number of values (only 1 is supported, except for string lists).
- flags: n (case-insensitive), r (required), s (skip: keep in compacted output),
  m (multiple: turns a string into a string list).
- default: runs to the next whitespace; a backslash escapes the next character.
- descr: parenthesized help text; a backslash escapes the next character.

scan() yields descriptors lazily and stops on the first violation, raising the
matching CompileError subclass; compile() collects the whole list.

    >>> [argument.name for argument in compile("-v -n:ir=3 (count) -I:Sm")]
    ['-v', '-n', '-I']
"""
import warnings

from .arguments import *
from .coercion import fields, isbool, tobool, isinteger, tointeger, isreal, toreal
from .faults import *
from .utils import Unset

_KINDS = {
    "f": ArgumentKind.BOOLEAN,
    "i": ArgumentKind.INTEGER,
    "r": ArgumentKind.REAL,
    "s": ArgumentKind.STRING,
    "c": ArgumentKind.CHOICE,
}

_FLAGS = {
    "n": ArgumentFlag.NOCASE,
    "r": ArgumentFlag.REQUIRED,
    "s": ArgumentFlag.SKIP,
    "m": ArgumentFlag.MULTIPLE,
}


class _Cursor:
    """Position over a definition string; peek() returns "" past the end."""

    def __init__(self, source):
        self.source = source
        self.index = 0

    def peek(self):
        return self.source[self.index:self.index + 1]

    def advance(self):
        char = self.peek()
        self.index += 1
        return char

    def exhausted(self):
        return self.index >= len(self.source)

    def skipspaces(self):
        while not self.exhausted() and self.peek().isspace():
            self.index += 1

    def escaped(self, stop):
        """read up to a character for which stop() holds, resolving backslash escapes."""
        chunk = []
        while not self.exhausted() and not stop(self.peek()):
            if self.peek() == "\\":
                self.index += 1
                if self.exhausted():
                    break
            chunk.append(self.advance())
        return "".join(chunk)


def _invalid(cursor):
    char = cursor.peek()
    return InvalidCharacterError(
        f"invalid character {char!r} at offset {cursor.index}" if char else
        f"unexpected end of definition at offset {cursor.index}",
        title="invalid character",
        code=FaultCode.INVALID_CHARACTER,
        hint="records start with dashes followed by a letter or digit and are separated by whitespace",
    )


def _isalnum(char):
    return char.isascii() and char.isalnum()


def _readname(cursor):
    start = cursor.index
    cursor.advance()
    while cursor.peek() == "-":
        cursor.advance()
    if not _isalnum(cursor.peek()):
        raise _invalid(cursor)
    while _isalnum(cursor.peek()) or cursor.peek() == "_":
        cursor.advance()
    return cursor.source[start:cursor.index]


def _readtype(cursor, name):
    """read the ':' kind [choices] [count] flag* part; returns kind, attached, choices, count, flags."""
    kind, attached, choices, count, flags = ArgumentKind.BOOLEAN, False, (), 1, ArgumentFlag.NONE
    if cursor.peek() != ":":
        return kind, attached, choices, count, flags

    cursor.advance()
    letter = cursor.advance()
    if letter.lower() not in _KINDS or letter == "F":
        raise UnknownKindError(
            f"unknown kind {letter!r} for option {name!r}" if letter else
            f"missing kind for option {name!r}",
            title="unknown kind",
            code=FaultCode.UNKNOWN_KIND,
            hint="use one of f, i, I, r, R, s, S, c or C",
        )
    kind = _KINDS[letter.lower()]
    attached = letter.isupper()

    if kind is ArgumentKind.CHOICE:
        if cursor.peek() != "[":
            raise MissingChoicesError(
                f"missing choices for option {name!r}",
                title="missing choices",
                code=FaultCode.MISSING_CHOICES,
                hint="list the labels right after the kind, e.g. -mode:c[fast,slow]",
            )
        cursor.advance()
        start = cursor.index
        while not cursor.exhausted() and cursor.peek() != "]":
            cursor.advance()
        choices = tuple(fields(cursor.source[start:cursor.index], " ,"))
        cursor.advance()

    start = cursor.index
    while cursor.peek().isdigit() and cursor.peek().isascii():
        cursor.advance()
    if cursor.index > start:
        if (count := int(cursor.source[start:cursor.index])) <= 0:
            raise InvalidCountError(
                f"invalid value count {cursor.source[start:cursor.index]!r} for option {name!r}",
                title="invalid count",
                code=FaultCode.INVALID_COUNT,
                hint="counts must be positive",
            )

    while cursor.peek() in _FLAGS:
        flags |= _FLAGS[cursor.advance()]

    return kind, attached, choices, count, flags


def _convert(kind, text, name):
    """validate and convert a textual default for its kind; "" means no default."""
    if not text:
        return Unset

    match kind:
        case ArgumentKind.BOOLEAN:
            valid, convert, label = isbool, tobool, "boolean"
        case ArgumentKind.INTEGER | ArgumentKind.CHOICE:
            valid, convert, label = isinteger, tointeger, "integer"
        case ArgumentKind.REAL:
            valid, convert, label = isreal, toreal, "real"
        case _:
            return text

    if not valid(text):
        raise InvalidDefaultError(
            f"invalid {label} default {text!r} for option {name!r}",
            title="invalid default",
            code=FaultCode.INVALID_DEFAULT,
        )
    return convert(text)


def _build(name, kind, attached, choices, count, flags, default, descr):
    if kind is ArgumentKind.STRING and flags & ArgumentFlag.MULTIPLE:
        return StringList(name, default, flags, attached=attached, descr=descr)

    if count != 1:
        raise MultipleValuesError(
            f"multiple values not supported for option {name!r}",
            title="multiple values",
            code=FaultCode.MULTIPLE_VALUES,
            hint="only string options accept several values, through the m flag",
        )

    if flags & ArgumentFlag.MULTIPLE:
        warnings.warn(IgnoredMultipleWarning(
            f"multiple flag ignored for {kind} option {name!r}",
            title="ignored multiple",
            code=FaultCode.IGNORED_MULTIPLE,
        ), stacklevel=4)

    match kind:
        case ArgumentKind.BOOLEAN:
            return Boolean(name, default, flags, descr=descr)
        case ArgumentKind.INTEGER:
            return Integer(name, default, flags, attached=attached, descr=descr)
        case ArgumentKind.REAL:
            return Real(name, default, flags, attached=attached, descr=descr)
        case ArgumentKind.STRING:
            return String(name, default, flags, attached=attached, descr=descr)
        case ArgumentKind.CHOICE:
            return Choice(name, choices, default, flags, attached=attached, descr=descr)


def scan(source, /):
    """
    Lazily compile a definition string into descriptors, in declaration order.

    Raises a CompileError subclass on the first grammar violation; descriptors
    already yielded are unaffected.
    """
    if not isinstance(source, str):
        raise TypeError("scan() argument must be a string")

    cursor = _Cursor(source)
    while True:
        cursor.skipspaces()
        if cursor.exhausted():
            return
        if cursor.peek() != "-":
            raise _invalid(cursor)

        name = _readname(cursor)
        kind, attached, choices, count, flags = _readtype(cursor, name)

        default = ""
        if cursor.peek() == "=":
            cursor.advance()
            default = cursor.escaped(str.isspace)

        descr = ""
        mark = cursor.index
        cursor.skipspaces()
        if cursor.peek() == "(":
            cursor.advance()
            descr = cursor.escaped(lambda char: char == ")")
            cursor.advance()
        else:
            cursor.index = mark

        if not cursor.exhausted() and not cursor.peek().isspace():
            raise _invalid(cursor)

        yield _build(name, kind, attached, choices, count, flags, _convert(kind, default, name), descr)


def compile(source, /):
    """Compile a whole definition string; see scan()."""
    return list(scan(source))


__all__ = (
    "scan",
    "compile",
)
