"""
rtformat segments and parsed templates.

Overview
- Text: a literal run of the template. It stores the template and a
  [start, stop) character span instead of copying the text.
- Argument: one resolved placeholder; holds its Specifier, a reference to the
  caller's value and the placeholder span.
- ParsedFormat: the ordered segments of one fully resolved template. Rendering
  is pure: no lookups happen after parsing, so str(parsed) can be called any
  number of times and never fails for format reasons.

Ownership
- Segments reference the caller's template and values; they do not copy them.
  Keep the argument values alive (and unmodified) while the ParsedFormat is
  in use.
"""
from collections.abc import Sequence

from .specifier import Specifier
from .value import format_value


class Text:
    """
    Literal segment: template[start:stop].

    Escaped braces produce a one-character Text whose span covers only the
    first of the two braces.
    """
    __slots__ = ("_template", "_start", "_stop")

    def __init__(self, template, start, stop, /):
        if not isinstance(template, str):
            raise TypeError("text segment template must be a string")
        if not 0 <= start <= stop <= len(template):
            raise ValueError("text segment span must lie within the template")
        self._template = template
        self._start = start
        self._stop = stop

    @property
    def span(self):
        return self._start, self._stop

    @property
    def text(self):
        return self._template[self._start:self._stop]

    def render(self):
        return self.text

    def __eq__(self, other, /):
        if not isinstance(other, Text):
            return NotImplemented
        return self.text == other.text

    def __hash__(self):
        return hash(self.text)

    def __repr__(self):
        return "Text(%r)" % self.text

    def __rich_repr__(self):
        yield self.text


class Argument:
    """
    Resolved placeholder segment: a Specifier applied to a value.

    Built only by the parser, after value.supports_format(specifier) answered
    True; render() therefore never fails for format reasons.
    """
    __slots__ = ("_specifier", "_value", "_span")

    def __init__(self, specifier, value, span=(0, 0), /):
        if not isinstance(specifier, Specifier):
            raise TypeError("argument segment specifier must be a Specifier")
        self._specifier = specifier
        self._value = value
        self._span = tuple(span)

    @property
    def specifier(self):
        return self._specifier

    @property
    def value(self):
        return self._value

    @property
    def span(self):
        """Character span of the placeholder (braces included)."""
        return self._span

    def render(self):
        return format_value(self._specifier, self._value)

    def __eq__(self, other, /):
        if not isinstance(other, Argument):
            return NotImplemented
        return self._specifier == other._specifier and self._value is other._value

    def __hash__(self):
        return hash((self._specifier, id(self._value)))

    def __repr__(self):
        return "Argument(%r, %r)" % (self._specifier, self._value)

    def __rich_repr__(self):
        yield self._specifier
        yield self._value


class ParsedFormat(Sequence):
    """
    Ordered segments of one parsed template.

    - str(parsed) / parsed.render(): the formatted output.
    - parsed.write(sink): stream every rendered segment to sink.write().
    - behaves as a read-only sequence of Text/Argument segments.
    """

    def __init__(self, segments=(), /):
        segments = tuple(segments)
        for segment in segments:
            if not isinstance(segment, Text | Argument):
                raise TypeError("parsed format segments must be Text or Argument")
        self._segments = segments

    @property
    def arguments(self):
        """The Argument segments, in template order."""
        return tuple(segment for segment in self._segments if isinstance(segment, Argument))

    def render(self):
        return "".join(segment.render() for segment in self._segments)

    def write(self, sink, /):
        """
        Write the rendered segments to a text sink (anything with .write(str)).

        Sink I/O errors are the sink's own and propagate unchanged.
        """
        for segment in self._segments:
            sink.write(segment.render())

    def __str__(self):
        return self.render()

    def __format__(self, spec, /):
        return format(self.render(), spec)

    def __getitem__(self, index, /):
        if isinstance(index, slice):
            return type(self)(self._segments[index])
        return self._segments[index]

    def __len__(self):
        return len(self._segments)

    def __eq__(self, other, /):
        if not isinstance(other, ParsedFormat):
            return NotImplemented
        return self._segments == other._segments

    def __hash__(self):
        return hash(self._segments)

    def __repr__(self):
        return "ParsedFormat(%r)" % (self._segments,)

    def __rich_repr__(self):
        yield from self._segments


__all__ = (
    "Text",
    "Argument",
    "ParsedFormat",
)
