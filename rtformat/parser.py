r"""
rtformat parser: size resolver, specifier grammar and segment tokenizer.

Template grammar
- Placeholders: '{' (index | name)? (':' specifier)? '}'
  • index: ASCII digits, an explicit positional reference.
  • name: an identifier (Unicode letters, digits and '_', not starting with a
    digit), an explicit named reference.
  • absent: the next positional argument by cursor order.
- '{{' and '}}' are literal single braces; everything else is literal text.

Specifier grammar (the part after ':')
    specifier := align? sign? alt? zero? width? ('.' precision)? format?
    align     := '<' | '^' | '>'
    sign      := '+'
    alt       := '#'
    zero      := '0'
    width     := digit+ '$'? | name '$'
    precision := digit+ '$'? | name '$' | '*'
    format    := '?' | 'o' | 'x' | 'X' | 'b' | 'e' | 'E'

Evaluation order inside one placeholder
1. width, then precision: indirect sizes are looked up on the argument source
   ('N$' by index, 'name$' by name, '*' consumes the next positional value);
2. the placeholder's own value (by index, by name, or the next positional);
3. value.supports_format(specifier).
So in "{:.*}" the precision takes the first implicit value and the placeholder
the second one.

Failure policy
- The first fault stops the scan for good: the rest of the template is
  discarded and iteration ends.
- Every fault is reported at the start of the failing placeholder (or at the
  stray brace), as a UTF-8 byte offset (fault.position) and a character index
  (fault.index).

Quick example
    >>> from rtformat import parse, Native
    >>> str(parse("{:#x} [{0:<5}] {foo:.1$}", [Native(42), Native(5)], {"foo": Native(42.042)}))
    '0x2a [42   ] 42.04200'
"""
import logging
import re

from .arguments import *
from .faults import *
from .segments import *
from .specifier import *
from .utils import *

logger = logging.getLogger(__name__)

_IDENTIFIER = r"(?!\d)\w+"

_SPECIFIER = rf"""
    (?P<align>[<^>])?
    (?P<sign>\+)?
    (?P<repr>\#)?
    (?P<pad>0)?
    (?P<width>
        [0-9]+\$? | {_IDENTIFIER}\$
    )?
    (?:\.(?P<precision>
        [0-9]+\$? | {_IDENTIFIER}\$ | \*
    ))?
    (?P<format>[?oxXbeE])?
"""

_SPECIFIER_RE = re.compile(_SPECIFIER, re.VERBOSE)

_PLACEHOLDER_RE = re.compile(rf"""
    \{{
        (?:(?P<index>[0-9]+) | (?P<name>{_IDENTIFIER}))?
        (?::{_SPECIFIER})?
    \}}
""", re.VERBOSE)

# A placeholder head that reached ':'; whatever fails after it is the specifier.
_HEAD_RE = re.compile(rf"\{{(?:[0-9]+|{_IDENTIFIER})?:")

_BRACES_RE = re.compile(r"[{}]")

_SPECIFIER_HINT = "specifiers read [<^>][+][#][0][width][.precision][?oxXbeE], e.g. '{:>8.2}'"

_OPTIONS = frozenset(("fancy", "colorful"))


def parse_size(token, source, /):
    """
    Resolve a width/precision token to a non-negative integer.

    tokens
    - "": not applicable, returns Unset (callers treat it as automatic).
    - "*": consumes the next positional value of `source`.
    - "N$": positional value N of `source` (cursor untouched).
    - "name$": named value of `source`.
    - "N": the literal integer N.

    errors
    - InvalidSpecifierError: malformed literal digits.
    - MissingSizeArgumentError: the referenced value does not exist.
    - InvalidSizeError: the value refuses to_size() or yields a negative/non-int.
    """
    if not isinstance(token, str):
        raise TypeError("parse_size() token must be a string")
    if not token:
        return Unset

    if token == "*":
        value = source.next()
        described = "next positional argument"
    elif token.endswith("$"):
        reference = token[:-1]
        if reference[:1].isdigit():
            if not (reference.isascii() and reference.isdigit()):
                raise InvalidSpecifierError(
                    "invalid size reference %r" % token,
                    hint="refer to an argument by index ('1$') or by name ('width$')",
                )
            value = source.by_index(int(reference))
            described = "positional argument %s" % reference
        else:
            value = source.by_name(reference)
            described = "named argument %r" % reference
    elif token.isascii() and token.isdigit():
        return int(token)
    else:
        raise InvalidSpecifierError(
            "invalid size %r" % token,
            hint="write sizes as decimal digits, 'N$', 'name$' or '*' (precision only)",
        )

    if value is Unset:
        raise MissingSizeArgumentError(
            "size refers to the %s, which does not exist" % described,
            hint="pass the argument or write the size as literal digits",
        )

    try:
        size = value.to_size()
    except (TypeError, ValueError) as error:
        raise InvalidSizeError(
            "the %s cannot be used as a size (%s)" % (described, error),
            hint="sizes must be non-negative integers",
        ) from None

    if not isinstance(size, int) or isinstance(size, bool) or size < 0:
        raise InvalidSizeError(
            "the %s converted to %r, which is not a non-negative integer" % (described, size),
            hint="to_size() must return a non-negative int",
        )
    return size


def _resolve_specifier(match, source):
    # Field order matters: width indirection resolves before precision indirection.
    align = Align(match["align"] or "")
    sign = Sign(match["sign"] or "")
    repr = Repr(match["repr"] or "")
    pad = Pad(match["pad"] or "")
    width = Width(coalesce(parse_size(match["width"] or "", source)))
    precision = Precision(coalesce(parse_size(match["precision"] or "", source)))
    format = Format(match["format"] or "")
    return Specifier(align, sign, repr, pad, width, precision, format)


def parse_specifier(text, source=Unset, /):
    """
    Parse a specifier fragment such as ">+#042.17E" into a Specifier.

    parameters
    - text: the fragment between ':' and '}' of a placeholder.
    - source: ArgumentSource consulted for indirect sizes; without one every
      indirect size fails with MissingSizeArgumentError.

    construction is all-or-nothing: any failure raises and nothing is returned.
    """
    if not isinstance(text, str):
        raise TypeError("parse_specifier() first argument must be a string")
    source = coalesce(source, NoArguments())
    if not isinstance(source, ArgumentSource):
        raise TypeError("parse_specifier() second argument must be an argument source")

    if (match := _SPECIFIER_RE.fullmatch(text)) is None:
        raise InvalidSpecifierError("invalid specifier %r" % text, hint=_SPECIFIER_HINT)
    return _resolve_specifier(match, source)


class Parser:
    """
    Tokenizer over one template: an iterator of Text and Argument segments.

    parameters
    - template: str
    - source: ArgumentSource shared by placeholder lookups and indirect sizes
      (defaults to NoArguments).
    - options: fancy / colorful, stamped on every fault for its rich report.

    behavior
    - lazy, finite and not restartable; a fault ends the iteration for good.
    - the cursor (index/position) only moves past fully parsed segments.
    """

    def __init__(self, template, source=Unset, /, **options):
        if not isinstance(template, str):
            raise TypeError("parser template must be a string")
        source = coalesce(source, NoArguments())
        if not isinstance(source, ArgumentSource):
            raise TypeError("parser source must be an argument source")
        if unknown := options.keys() - _OPTIONS:
            raise TypeError(f"parser got an unexpected option {min(unknown)!r}")

        self._template = template
        self._source = source
        self._index = 0
        self._options = options

    @property
    def template(self):
        return self._template

    @property
    def index(self):
        """Characters of the template consumed so far."""
        return self._index

    @property
    def position(self):
        """Bytes (UTF-8) of the template consumed so far."""
        return byte_offset(self._template, self._index)

    def __iter__(self):
        return self

    def __next__(self):
        template, index = self._template, self._index

        if index >= len(template):
            raise StopIteration

        if (brace := _BRACES_RE.search(template, index)) is None:
            return self._text(len(template))
        if brace.start() != index:
            return self._text(brace.start())
        return self._braces()

    def _text(self, stop):
        segment = Text(self._template, self._index, stop)
        self._index = stop
        return segment

    def _braces(self):
        template, index = self._template, self._index

        # '{{' and '}}' escape a single brace.
        if template.startswith(("{{", "}}"), index):
            self._index = index + 2
            return Text(template, index, index + 1)

        if (match := _PLACEHOLDER_RE.match(template, index)) is None:
            return self._fail(self._diagnose())

        try:
            specifier = _resolve_specifier(match, self._source)
            value = self._lookup(match)
            if not value.supports_format(specifier):
                raise UnsupportedSpecifierError(
                    "%r does not support the specifier %r" % (value, str(specifier)),
                    hint="pick a format kind the value supports or pass a different value",
                )
        except FormatException as fault:
            return self._fail(fault)

        self._index = match.end()
        return Argument(specifier, value, match.span())

    def _lookup(self, match):
        if (index := match["index"]) is not None:
            value = self._source.by_index(int(index))
            missing = "positional argument %s does not exist" % index
        elif (name := match["name"]) is not None:
            value = self._source.by_name(name)
            missing = "named argument %r does not exist" % name
        else:
            value = self._source.next()
            missing = "no positional argument left for this placeholder"

        if value is Unset:
            raise MissingArgumentError(
                missing,
                hint="pass the missing argument or escape the braces as '{{' and '}}'",
            )
        return value

    def _diagnose(self):
        template, index = self._template, self._index

        if template[index] == "}" or template.find("}", index) < 0:
            return UnmatchedBraceError(
                "unmatched %r" % template[index],
                hint="double the brace ('{{' or '}}') to write it literally",
            )

        excerpt = template[index:template.find("}", index) + 1]
        if _HEAD_RE.match(template, index):
            return InvalidSpecifierError(
                "invalid specifier %r" % excerpt[excerpt.index(":") + 1:-1],
                hint=_SPECIFIER_HINT,
            )
        return MalformedPlaceholderError(
            "malformed placeholder %r" % excerpt,
            hint="write '{}', '{0}' or '{name}', optionally followed by ':' and a specifier",
        )

    def _fail(self, fault):
        template, index = self._template, self._index
        position = byte_offset(template, index)

        # Not resumable: drop the remaining input before reporting.
        self._index = len(template)

        logger.debug("template fault %s at offset %d in %r: %s", fault.code, position, template, fault.message)
        trigger(
            fault,
            template=template,
            index=index,
            position=position,
            docs=getdoc(fault.code) if isinstance(fault.code, FaultCode) else None,
            **self._options
        )
        raise StopIteration

    def __repr__(self):
        return "%s(template=%r, index=%d)" % (type(self).__name__, self._template, self._index)


def parse(template, positional=Unset, named=Unset, /, **options):
    """
    Parse `template` against positional and named argument stores.

    parameters
    - template: str
    - positional: Sequence of FormattableValue (default: NoPositionalArguments)
    - named: Mapping[str, FormattableValue] (default: NoNamedArguments)
    - options: fancy / colorful (stamped on faults, see FormatException)

    returns
    - ParsedFormat; str() of it is the formatted output.

    raises
    - a FormatException subclass carrying the offset of the failing placeholder.
    """
    return ParsedFormat(Parser(template, ArgumentCursor(positional, named), **options))


__all__ = (
    "parse_size",
    "parse_specifier",
    "Parser",
    "parse",
)
