"""
rtformat utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the specifier, argument and parser layers.

Overview
- UnsetType / Unset
  • Singleton sentinel meaning “nothing there”: an argument lookup that missed,
    or a parameter the caller did not provide.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.
  • Distinct from None, so a stored None stays a legitimate argument value.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- byte_offset(text, index)
  • Translate a character index of a template into its UTF-8 byte offset
    (the unit every fault position is reported in).

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
    >>> byte_offset("уникод {", 7)
    13
"""
import functools
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that is not there.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.

    Typical use
    - Argument sources return Unset when a lookup misses.
    - Entry points use Unset as the default of optional stores and materialize
      it with coalesce(value, default).
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in isinstance checks (e.g., str | Unset).
        """
        try:
            return type(self) | other
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        """
        Support reversed PEP 604 unions when Unset appears on the right.
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        """
        Ensure a single instance for this sentinel type.
        """
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        """
        Disallow subclassing to preserve sentinel semantics.
        """
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Returns the given object unless it is Unset, in which case the provided
    default is returned. Falsey values like None, 0, "" or [] are preserved.

    Examples
    - coalesce(5, 0)       -> 5
    - coalesce(Unset, 0)   -> 0
    - coalesce(None, 0)    -> None
    """
    return object if object is not Unset else default


def byte_offset(text, index, /):
    """
    Return the UTF-8 byte offset of the character at `index` in `text`.

    Templates are scanned as Python strings (character indices) while faults
    report offsets into the encoded template. For ASCII templates both agree.
    """
    if not isinstance(text, str):
        raise TypeError("byte_offset() first argument must be a string")
    if not isinstance(index, int) or not 0 <= index <= len(text):
        raise ValueError("byte_offset() index must lie within the text")
    return len(text[:index].encode("utf-8", "surrogatepass"))


Unset = UnsetType()
"""
Internal sentinel for “nothing there”.

Notes
- Singleton: there is only one Unset instance.
- Distinct from None: equality and identity checks must not treat it as None.
- Falsey: bool(Unset) is False, but it is not equivalent to None or 0.
"""


__all__ = (
    # Functions
    "coalesce",
    "byte_offset",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)
