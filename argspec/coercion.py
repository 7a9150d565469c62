"""
Value coercion for option text.

The accepted grammars are part of the library contract:

- boolean: one of true/false, yes/no, on/off, 1/0 (case-insensitive)
- integer: optional sign followed by one or more ASCII digits
- real: optional sign, digits with an optional fraction (or a bare fraction),
  optional exponent; e.g. "3", "-4.5", ".5", "1.", "6.02e23"

No surrounding whitespace is accepted by any grammar.
"""
import re
import string

_TRUTHS = frozenset(("true", "yes", "on", "1"))
_FALSEHOODS = frozenset(("false", "no", "off", "0"))

_INTEGER = re.compile(r"[+-]?[0-9]+")
_REAL = re.compile(r"[+-]?([0-9]+(\.[0-9]*)?|\.[0-9]+)([eE][+-]?[0-9]+)?")

_ASCII_LOWER = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)


def isbool(text, /):
    """return True when text spells a boolean."""
    return isinstance(text, str) and text.lower() in _TRUTHS | _FALSEHOODS


def tobool(text, /):
    """
    convert boolean text to bool.

    raises ValueError when isbool(text) is False.
    """
    if not isbool(text):
        raise ValueError("invalid boolean literal %r" % (text,))
    return text.lower() in _TRUTHS


def isinteger(text, /):
    return isinstance(text, str) and _INTEGER.fullmatch(text) is not None


def tointeger(text, /):
    if not isinteger(text):
        raise ValueError("invalid integer literal %r" % (text,))
    return int(text)


def isreal(text, /):
    return isinstance(text, str) and _REAL.fullmatch(text) is not None


def toreal(text, /):
    if not isreal(text):
        raise ValueError("invalid real literal %r" % (text,))
    return float(text)


def casecmp(left, right, /):
    """
    case-insensitive equality of two strings.

    only ASCII letters are folded, so "-ß" does not match "-SS".
    """
    return left.translate(_ASCII_LOWER) == right.translate(_ASCII_LOWER)


def fields(text, delimiters, /):
    """
    split text on any of the delimiter characters, dropping empty fields.

    >>> fields("a, b,,c", " ,")
    ['a', 'b', 'c']
    """
    if not delimiters:
        return [text] if text else []
    pattern = "[" + re.escape(delimiters) + "]+"
    return [field for field in re.split(pattern, text) if field]


__all__ = (
    "isbool",
    "tobool",
    "isinteger",
    "tointeger",
    "isreal",
    "toreal",
    "casecmp",
    "fields",
)
