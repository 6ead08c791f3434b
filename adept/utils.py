"""
adept utilities (internal helpers)

Scope
- Small building blocks shared by the option model, the fetcher and the driver.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/().

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) as a frozen snapshot.

- ensure_scheme(url)
  • Prefix bare host names (e.g. "maven.google.com") with "https://".

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> ensure_scheme("maven.google.com/master-index.xml")
    'https://maven.google.com/master-index.xml'
"""
import functools
import re
from collections.abc import Sequence, Mapping, Set
from types import MappingProxyType
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations and isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns the given object unless it is Unset, in which case the default is
    returned. None, 0, "" and empty containers are preserved as-is.
    """
    return object if object is not Unset else default


def _freeze(object):
    """
    Recursively snapshot container values into immutable forms.

    - Sequence (non-string) → tuple
    - Mapping → read-only MappingProxyType over a fresh dict
    - Set → frozenset
    - Anything else is returned as-is.
    """
    if isinstance(object, Sequence) and not isinstance(object, (str, bytes)):
        return tuple(map(_freeze, object))
    elif isinstance(object, Mapping):
        return MappingProxyType(dict(zip(object.keys(), map(_freeze, object.values()))))
    elif isinstance(object, Set):
        return frozenset(map(_freeze, object))
    return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" from the instance and returns a
    frozen snapshot for container types, so callers cannot mutate internal
    state through the public API.
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    def getter(self):
        return _freeze(getattr(self, "_" + name))

    getter.__name__ = getter.__qualname__ = name
    return property(getter)


def ensure_scheme(url, /, scheme="https"):
    """
    Return url with an explicit scheme, adding `scheme://` to bare hosts.
    """
    if not isinstance(url, str):
        raise TypeError("ensure_scheme() argument must be a string")
    if re.match(r"[A-Za-z][A-Za-z0-9+.-]*://", url):
        return url
    return "%s://%s" % (scheme, url.lstrip("/"))


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Use Unset as a default when None is a valid, user-meaningful value but you still
need to distinguish “no input” from “explicitly passed None”.
"""


__all__ = (
    # Functions
    "coalesce",
    "mirror",
    "ensure_scheme",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
