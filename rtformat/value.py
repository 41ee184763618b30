"""
rtformat values and value dispatch.

What this module provides
- FormattableValue: the capability set a runtime value exposes to be
  formatted. A value answers supports_format(specifier) before any rendering
  is attempted (that is what lets parsing fail at a precise placeholder) and
  implements eight elementary renderers, one per Format kind.
- format_value(specifier, value): applies the specifier to a value in a fixed
  order on top of the elementary renderer.
- Native: reference adapter that formats plain Python bool/int/float/str
  values (and anything else through str()/repr()) with the same conventions
  as the host format macro.

Elementary renderer contract
- fmt_<kind>(specifier) -> str
- returns the bare body: digits or text, a leading "-" for negative numbers,
  no "+" sign, no radix prefix, no padding.
- specifier.precision is the renderer's to interpret (digits after the point
  for floats, truncation for text, ignored for integers by Native).

Dispatch order (format_value)
1. elementary renderer selected by specifier.format
2. sign: a leading "-" is split off; Sign.ALWAYS adds "+" to non-negative
   numeric output other than "NaN"
3. alternate prefix (Repr.ALTERNATE): "0o", "0x" (both hex kinds), "0b"
4. zero padding (Pad.ZERO, numeric output only): zeros between sign/prefix
   and digits, alignment ignored; "NaN" and "inf" bodies fall through to
   space padding
5. space padding to the width, by alignment; Align.NONE means right for
   numeric output and left for textual output

Output is numeric when the format kind is octal, hex, binary or exponential,
or when the value reports is_numeric().
"""
import math
from abc import ABC, abstractmethod
from decimal import Decimal

from rich.text import Text

from .specifier import *
from .utils import *


class FormattableValue(ABC):
    """
    A runtime value that can be substituted into a template.

    required
    - supports_format(specifier) -> bool
    - fmt_display / fmt_debug / fmt_octal / fmt_lower_hex / fmt_upper_hex /
      fmt_binary / fmt_lower_exp / fmt_upper_exp, each (specifier) -> str

    optional
    - to_size() -> int: interpret the value as a width or precision; the
      default refuses with TypeError.
    - is_numeric() -> bool: whether display/debug output is numeric (affects
      sign, zero padding and default alignment); the default is False.
    """

    __slots__ = ()

    @abstractmethod
    def supports_format(self, specifier, /):
        """Return True if the value can be formatted with `specifier`."""

    @abstractmethod
    def fmt_display(self, specifier, /): ...

    @abstractmethod
    def fmt_debug(self, specifier, /): ...

    @abstractmethod
    def fmt_octal(self, specifier, /): ...

    @abstractmethod
    def fmt_lower_hex(self, specifier, /): ...

    @abstractmethod
    def fmt_upper_hex(self, specifier, /): ...

    @abstractmethod
    def fmt_binary(self, specifier, /): ...

    @abstractmethod
    def fmt_lower_exp(self, specifier, /): ...

    @abstractmethod
    def fmt_upper_exp(self, specifier, /): ...

    def to_size(self):
        raise TypeError(f"{type(self).__name__} cannot be used as a size")

    def is_numeric(self):
        return False


_RENDERERS = {
    Format.DISPLAY: "fmt_display",
    Format.DEBUG: "fmt_debug",
    Format.OCTAL: "fmt_octal",
    Format.LOWER_HEX: "fmt_lower_hex",
    Format.UPPER_HEX: "fmt_upper_hex",
    Format.BINARY: "fmt_binary",
    Format.LOWER_EXP: "fmt_lower_exp",
    Format.UPPER_EXP: "fmt_upper_exp",
}

_PREFIXES = {
    Format.OCTAL: "0o",
    Format.LOWER_HEX: "0x",
    Format.UPPER_HEX: "0x",
    Format.BINARY: "0b",
}

_NUMERIC_FORMATS = frozenset((
    Format.OCTAL,
    Format.LOWER_HEX,
    Format.UPPER_HEX,
    Format.BINARY,
    Format.LOWER_EXP,
    Format.UPPER_EXP,
))

_NONFINITE = frozenset(("NaN", "inf"))


def format_value(specifier, value, /):
    """
    Render `value` according to `specifier` (see the module docstring for the order).

    The value is expected to support the specifier; the parser checks that
    before an Argument segment is ever built.
    """
    body = getattr(value, _RENDERERS[specifier.format])(specifier)
    if not isinstance(body, str):
        raise TypeError("%s.%s() must return a string, not %s" % (
            type(value).__name__,
            _RENDERERS[specifier.format],
            type(body).__name__
        ))

    numeric = specifier.format in _NUMERIC_FORMATS or bool(value.is_numeric())

    sign = ""
    if numeric:
        if body.startswith("-"):
            sign, body = "-", body[1:]
        elif specifier.sign is Sign.ALWAYS and body != "NaN":
            sign = "+"

    prefix = _PREFIXES.get(specifier.format, "") if specifier.repr is Repr.ALTERNATE else ""

    if specifier.width.auto:
        return sign + prefix + body
    width = specifier.width.width

    # Non-finite bodies are space padded like text, but keep the numeric alignment.
    if numeric and specifier.pad is Pad.ZERO and body not in _NONFINITE:
        return sign + prefix + body.rjust(width - len(sign) - len(prefix), "0")

    text = sign + prefix + body
    if (fill := width - len(text)) <= 0:
        return text

    align = specifier.align
    if align is Align.NONE:
        align = Align.RIGHT if numeric else Align.LEFT

    match align:
        case Align.LEFT:
            return text + " " * fill
        case Align.RIGHT:
            return " " * fill + text
        case Align.CENTER:
            return " " * (fill // 2) + text + " " * (fill - fill // 2)


def _truncate(text, precision):
    return text if precision.auto else text[:precision.precision]


def _nonfinite(number):
    if math.isnan(number):
        return "NaN"
    return "inf" if number > 0 else "-inf"


def _strip_fraction(text):
    # "1.500" -> "1.5", "42.000" -> "42"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _decimal(number, precision):
    if not math.isfinite(number):
        return _nonfinite(number)
    if not precision.auto:
        return format(number, ".%df" % precision.precision)
    return _strip_fraction(format(Decimal(repr(number)), "f"))


def _exponent(number, precision, marker):
    if isinstance(number, float) and not math.isfinite(number):
        return _nonfinite(number)
    if precision.auto:
        # repr() has at most 17 digits, so normalizing loses nothing; it gives
        # "0.0" and "-0.0" exponent 0 like the integer 0.
        digits = Decimal(repr(number)).normalize() if isinstance(number, float) else Decimal(number)
        mantissa, _, exponent = format(digits, "e").partition("e")
        mantissa = _strip_fraction(mantissa)
    else:
        mantissa, _, exponent = format(Decimal(number), ".%de" % precision.precision).partition("e")
    return "%s%s%d" % (mantissa, marker, int(exponent))


def _radix(number, code):
    # Sign-magnitude: Python integers have no fixed width to take a complement of.
    return ("-" if number < 0 else "") + format(abs(number), code)


_ESCAPES = {
    "\\": "\\\\",
    "\"": "\\\"",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\0": "\\0",
}


def _quote(text):
    return "\"%s\"" % "".join(
        _ESCAPES.get(char) or (char if char.isprintable() else "\\u{%x}" % ord(char))
        for char in text
    )


class Native(FormattableValue):
    """
    Reference FormattableValue over a plain Python object.

    support table
    - bool:  display, debug              ("true" / "false")
    - int:   every format kind           (radix formats are sign-magnitude)
    - float: display, debug, lower/upper exponent
    - str:   display, debug              (debug is a double-quoted, escaped literal)
    - other: display (str()), debug (repr())

    sizes
    - only non-negative ints convert to a width or precision.
    """

    __slots__ = ("_object",)

    def __init__(self, object, /):
        self._object = object

    @property
    def object(self):
        """The wrapped Python object."""
        return self._object

    def supports_format(self, specifier, /):
        match self._object:
            case bool():
                return specifier.format in (Format.DISPLAY, Format.DEBUG)
            case int():
                return True
            case float():
                return specifier.format in (Format.DISPLAY, Format.DEBUG, Format.LOWER_EXP, Format.UPPER_EXP)
            case _:
                return specifier.format in (Format.DISPLAY, Format.DEBUG)

    def fmt_display(self, specifier, /):
        match self._object:
            case bool():
                return _truncate("true" if self._object else "false", specifier.precision)
            case int():
                return str(self._object)
            case float():
                return _decimal(self._object, specifier.precision)
            case _:
                return _truncate(str(self._object), specifier.precision)

    def fmt_debug(self, specifier, /):
        match self._object:
            case bool() | int():
                return self.fmt_display(specifier)
            case float() if not specifier.precision.auto or not math.isfinite(self._object):
                return _decimal(self._object, specifier.precision)
            case float():
                mantissa, marker, exponent = repr(self._object).partition("e")
                return mantissa + marker + (str(int(exponent)) if marker else "")
            case str():
                return _quote(self._object)
            case _:
                return repr(self._object)

    def fmt_octal(self, specifier, /):
        return _radix(self._integer(), "o")

    def fmt_lower_hex(self, specifier, /):
        return _radix(self._integer(), "x")

    def fmt_upper_hex(self, specifier, /):
        return _radix(self._integer(), "X")

    def fmt_binary(self, specifier, /):
        return _radix(self._integer(), "b")

    def fmt_lower_exp(self, specifier, /):
        return _exponent(self._number(), specifier.precision, "e")

    def fmt_upper_exp(self, specifier, /):
        return _exponent(self._number(), specifier.precision, "E")

    def to_size(self):
        match self._object:
            case bool():
                raise TypeError("a bool cannot be used as a size")
            case int() if self._object >= 0:
                return self._object
            case int():
                raise ValueError("a size cannot be negative")
            case _:
                raise TypeError(f"{type(self._object).__name__} cannot be used as a size")

    def is_numeric(self):
        return isinstance(self._object, int | float) and not isinstance(self._object, bool)

    def _integer(self):
        if not isinstance(self._object, int) or isinstance(self._object, bool):
            raise TypeError(f"{type(self._object).__name__} has no radix representation")
        return self._object

    def _number(self):
        if not self.is_numeric():
            raise TypeError(f"{type(self._object).__name__} has no exponent representation")
        return self._object

    def __eq__(self, other, /):
        if not isinstance(other, Native):
            return NotImplemented
        return type(self._object) is type(other._object) and self._object == other._object

    def __hash__(self):
        return hash((type(self._object), self._object))

    def __repr__(self):
        return "Native(%r)" % (self._object,)

    def __rich__(self):
        return Text.assemble(("Native", "bold"), "(", repr(self._object), ")")


__all__ = (
    # Protocol
    "FormattableValue",

    # Dispatch
    "format_value",

    # Adapters
    "Native",
)
