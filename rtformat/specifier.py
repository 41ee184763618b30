r"""
rtformat specifier model.

Overview
- Dimensions
  • Align, Sign, Repr, Pad, Format: closed enumerations whose values are the
    exact template fragment of each variant ("" for the default one).
  • Width, Precision: sizes carrying an optional non-negative integer payload
    (Width.AUTO / Width.at_least(n), Precision.AUTO / Precision.exactly(n)).

- Specifier
  • Immutable, hashable aggregate of the seven dimensions above.
  • str(specifier) is the canonical fragment, e.g. "+#o" or "^042.17E", and
    Specifier.parse(str(specifier)) == specifier.
  • copy.replace(specifier, width=Width.at_least(8)) derives a modified copy.

Fragment conversion
- Every argument-less variant converts both ways through its value:
    >>> Align("<")
    <Align.LEFT: '<'>
    >>> str(Format.UPPER_HEX)
    'X'
- Width and Precision are excluded from that table: their fragment depends on
  the payload and is produced by the grammar parser.

Public API
- Enumerations: Align, Sign, Repr, Pad, Format
- Sizes: Width, Precision
- Aggregate: Specifier
"""
import enum
import functools
from typing import final

from rich.text import Text

from .utils import *


class _Dimension(enum.Enum):
    """
    Shared behavior of the enumerated dimensions.

    - str() yields the template fragment of the variant.
    - Rich renders the qualified member name (e.g. Align.LEFT).
    """

    def __str__(self):
        return self.value

    def __rich__(self):
        return Text("%s.%s" % (type(self).__name__, self.name), style="cyan")


class Align(_Dimension):
    """Alignment of an argument padded to a specific width."""
    NONE = ""
    LEFT = "<"
    CENTER = "^"
    RIGHT = ">"


class Sign(_Dimension):
    """Whether the sign of a numeric argument is always emitted."""
    DEFAULT = ""
    ALWAYS = "+"


class Repr(_Dimension):
    """Whether the alternate representation (0o/0x/0b prefixes) is used."""
    DEFAULT = ""
    ALTERNATE = "#"


class Pad(_Dimension):
    """Whether a numeric argument with a width is padded with spaces or zeroes."""
    SPACE = ""
    ZERO = "0"


class Format(_Dimension):
    """Elementary rendering mode of an argument."""
    DISPLAY = ""
    DEBUG = "?"
    OCTAL = "o"
    LOWER_HEX = "x"
    UPPER_HEX = "X"
    BINARY = "b"
    LOWER_EXP = "e"
    UPPER_EXP = "E"


class _Size:
    """
    Internal base of Width and Precision.

    storage
    - a single slot holding either None (automatic) or a non-negative int.

    behavior
    - instances are immutable, hashable and compare by payload and type.
    - the automatic instance of each subclass is cached (see AUTO).
    """
    __slots__ = ("_size",)
    __fragment__ = "%d"

    def __new__(cls, size=None, /):
        if size is None:
            return cls._auto()
        if not isinstance(size, int) or isinstance(size, bool):
            raise TypeError(f"{cls.__name__.lower()} must be an integer")
        if size < 0:
            raise ValueError(f"{cls.__name__.lower()} must be a non-negative integer")
        self = super().__new__(cls)
        object.__setattr__(self, "_size", size)
        return self

    @classmethod
    @functools.cache
    def _auto(cls):
        self = super().__new__(cls)
        object.__setattr__(self, "_size", None)
        return self

    @property
    def auto(self):
        """True when no explicit size was requested."""
        return self._size is None

    def __setattr__(self, name, value, /):
        raise AttributeError(f"{type(self).__name__.lower()} is read-only")

    def __delattr__(self, name, /):
        raise AttributeError(f"{type(self).__name__.lower()} is read-only")

    def __eq__(self, other, /):
        if type(other) is not type(self):
            return NotImplemented
        return self._size == other._size

    def __hash__(self):
        return hash((type(self).__name__, self._size))

    def __str__(self):
        return "" if self._size is None else type(self).__fragment__ % self._size

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return type(self), (self._size,)

    def __rich_repr__(self):
        if self._size is not None:
            yield self._size


@final
class Width(_Size):
    """
    Minimum width of a rendered argument.

    - Width.AUTO: no padding.
    - Width.at_least(n): pad the rendered argument to at least n characters.
    - Width(0) is Width.AUTO: a zero minimum never pads, so ":00" prints
      back as ":0".
    """
    __slots__ = ()

    def __new__(cls, size=None, /):
        if size == 0 and isinstance(size, int) and not isinstance(size, bool):
            size = None
        return super().__new__(cls, size)

    @classmethod
    def at_least(cls, width, /):
        return cls(width)

    @property
    def width(self):
        """The requested width, or None when automatic."""
        return self._size

    def __repr__(self):
        return "Width.AUTO" if self.auto else "Width.at_least(%d)" % self._size


@final
class Precision(_Size):
    """
    Precision of a rendered argument (meaning is up to the elementary renderer).

    - Precision.AUTO: renderer default.
    - Precision.exactly(n): n digits after the decimal point, or n characters
      of text, as the renderer sees fit.
    """
    __slots__ = ()
    __fragment__ = ".%d"

    @classmethod
    def exactly(cls, precision, /):
        return cls(precision)

    @property
    def precision(self):
        """The requested precision, or None when automatic."""
        return self._size

    def __repr__(self):
        return "Precision.AUTO" if self.auto else "Precision.exactly(%d)" % self._size


Width.AUTO = Width()
Precision.AUTO = Precision()


def _field(name, /):
    """
    internal: read-only property over the backing slot "_{name}".
    """
    getter = lambda self: object.__getattribute__(self, "_" + name)  # NOQA: E-731
    getter.__name__ = getter.__qualname__ = name
    return property(getter)


@final
class Specifier:
    """
    The resolved set of formatting modifiers for one placeholder.

    Fields (each independently valid, none depends on another)
    - align: Align          (default Align.NONE)
    - sign: Sign            (default Sign.DEFAULT)
    - repr: Repr            (default Repr.DEFAULT)
    - pad: Pad              (default Pad.SPACE)
    - width: Width          (default Width.AUTO)
    - precision: Precision  (default Precision.AUTO)
    - format: Format        (default Format.DISPLAY)

    Lifecycle
    - Built once per placeholder by the grammar parser, immutable thereafter.
    - Use copy.replace(specifier, **fields) to derive a variant.
    """

    # Ordered as in the template grammar; drives str(), repr() and rich output.
    __introspectable__ = (
        "align",
        "sign",
        "repr",
        "pad",
        "width",
        "precision",
        "format",
    )

    __types__ = {
        "align": Align,
        "sign": Sign,
        "repr": Repr,
        "pad": Pad,
        "width": Width,
        "precision": Precision,
        "format": Format,
    }

    __defaults__ = {
        "align": Align.NONE,
        "sign": Sign.DEFAULT,
        "repr": Repr.DEFAULT,
        "pad": Pad.SPACE,
        "width": Width.AUTO,
        "precision": Precision.AUTO,
        "format": Format.DISPLAY,
    }

    __slots__ = tuple("_" + name for name in __introspectable__)

    def __new__(
            cls,
            align=Align.NONE,
            sign=Sign.DEFAULT,
            repr=Repr.DEFAULT,
            pad=Pad.SPACE,
            width=Width.AUTO,
            precision=Precision.AUTO,
            format=Format.DISPLAY,
    ):
        metadata = {
            "align": align,
            "sign": sign,
            "repr": repr,
            "pad": pad,
            "width": width,
            "precision": precision,
            "format": format,
        }
        self = super().__new__(cls)
        for name, value in metadata.items():
            if not isinstance(value, expected := cls.__types__[name]):
                raise TypeError(f"specifier {name!r} must be {expected.__name__}")
            object.__setattr__(self, "_" + name, value)
        return self

    @classmethod
    def parse(cls, text, /):
        """
        Parse a bare specifier fragment (the part after ':' in a placeholder).

        Indirect sizes ("1$", "name$", "*") have no argument source to consult
        here, so they fail with a missing-size fault.
        """
        from .parser import parse_specifier
        return parse_specifier(text)

    def __setattr__(self, name, value, /):
        raise AttributeError("specifier is read-only")

    def __delattr__(self, name, /):
        raise AttributeError("specifier is read-only")

    def __iter__(self):
        for name in type(self).__introspectable__:
            yield getattr(self, name)

    def __eq__(self, other, /):
        if type(other) is not type(self):
            return NotImplemented
        return tuple(self) == tuple(other)

    def __hash__(self):
        return hash(tuple(self))

    def __str__(self):
        return "".join(map(str, self))

    def __repr__(self):
        return "Specifier(%s)" % ", ".join(
            "%s=%r" % (name, object)
            for name, object in zip(type(self).__introspectable__, self)
            if object != type(self).__defaults__[name]
        )

    def __rich_repr__(self):
        for name, object in zip(type(self).__introspectable__, self):
            yield name, object, type(self).__defaults__[name]

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return type(self), tuple(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        if unknown := overrides.keys() - type(self).__types__.keys():
            raise TypeError(f"specifier has no field {min(unknown)!r}")
        return type(self)(**{
            name: overrides.get(name, object)
            for name, object in zip(type(self).__introspectable__, self)
        })


# Publish the read-only views once the slots exist.
for _name in Specifier.__introspectable__:
    type.__setattr__(Specifier, _name, _field(_name))
del _name


__all__ = (
    # Enumerated dimensions
    "Align",
    "Sign",
    "Repr",
    "Pad",
    "Format",

    # Sized dimensions
    "Width",
    "Precision",

    # Aggregate
    "Specifier",
)
