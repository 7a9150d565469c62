"""
Small helpers shared by the descriptor, matcher and registry layers.

- Unset: sentinel for an argument the caller did not pass. It is falsey and
  prints as "Unset", but unlike None it never collides with a real value.
- coalesce(value, default): swap Unset for a default, leaving every other value
  (None, 0, "", []) untouched.
- rename(name): decorator giving generated functions a stable name, or
  rename(function, name) to do it in place.
- mirror(field): read-only property over the private "_<field>" attribute.
  Lists, dicts and sets come back as fresh copies; tuples stay tuples.

    >>> coalesce(Unset, 3), coalesce(0, 3)
    (3, 0)
"""
import builtins
from collections.abc import Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    Type of the Unset sentinel; one instance per process, no subclasses.

    Unset | str (and str | Unset) build the union str | UnsetType, which makes
    the sentinel usable in isinstance() checks next to real types.
    """
    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")

    def __or__(self, other, /):
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __reduce__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self


Unset = UnsetType()


def coalesce(object, default=None, /):
    """Return default when object is Unset, object otherwise."""
    return default if object is Unset else object


def rename(*parameters):
    """
    rename(function, name) sets __name__ and __qualname__ and returns function;
    rename(name) returns a decorator doing the same.
    """
    if len(parameters) == 1:
        name, = parameters
        if not isinstance(name, str):
            raise TypeError("@rename() argument must be a string")
        return lambda function: rename(function, name)

    if len(parameters) != 2:
        raise TypeError(f"rename() takes 1 or 2 arguments but {len(parameters)} were given")

    function, name = parameters
    if not builtins.callable(function):
        raise TypeError("rename() first argument must be callable")
    if not isinstance(name, str):
        raise TypeError("rename() second argument must be a string")
    function.__name__ = function.__qualname__ = name
    return function


def _detach(object):
    match object:
        case str() | bytes():
            return object
        case tuple():
            return tuple(_detach(item) for item in object)
        case Mapping():
            return {key: _detach(value) for key, value in object.items()}
        case Set():
            return {_detach(item) for item in object}
        case Sequence():
            return [_detach(item) for item in object]
    return object


def mirror(field, /):
    """Read-only property returning a detached copy of self._<field>."""
    if not isinstance(field, str):
        raise TypeError("mirror() argument must be a string")

    @rename(field)
    def getter(self):
        return _detach(getattr(self, "_" + field))

    return property(getter)


__all__ = (
    "Unset",
    "UnsetType",
    "coalesce",
    "rename",
    "mirror",
)
