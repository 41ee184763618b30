"""
rtformat faults (parse errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every way a template
  can fail to parse. Codes are grouped by domain to keep messages consistent
  and make logs/searches predictable.
- FormatException: base type that carries a message + options and knows how to
  render itself (rich) with the failing template excerpt and a caret.
- trigger(): central entry point to surface a fault (stamp options, then raise).
- getdoc(): optional description lookup for a code from the host application.

Positions
- Every fault reported by the parser carries:
  • position: byte offset (UTF-8) into the template where the failing
    placeholder begins, or where scanning could make no further progress.
  • index: the same location as a character index of the Python string.
  • template: the template being parsed.
- Faults raised below the tokenizer (size resolution, specifier parsing) start
  without a location; the tokenizer stamps it with copy.replace().

Integration
- Every fault is raised to the caller; nothing here prints or exits.
- Hosts that want a report print the caught fault with rich:
  Console(stderr=True).print(fault). The fancy/colorful options pick the layout.
"""
import copy
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Group
from rich.panel import Panel
from rich.text import Text

from .utils import *

class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - braces (2110x)
      • UNMATCHED_BRACE, MALFORMED_PLACEHOLDER
    - specifiers (2111x)
      • INVALID_SPECIFIER
    - arguments (2112x)
      • MISSING_ARGUMENT, MISSING_SIZE_ARGUMENT, INVALID_SIZE
    - values (2113x)
      • UNSUPPORTED_SPECIFIER

    normalize() allows a host remapping to custom labels while keeping the
    numeric codes stable.
    """
    # --- brace errors (2110x) ---
    UNMATCHED_BRACE             = 21101
    MALFORMED_PLACEHOLDER       = 21102

    # --- specifier errors (2111x) ---
    INVALID_SPECIFIER           = 21111

    # --- argument errors (2112x) ---
    MISSING_ARGUMENT            = 21121
    MISSING_SIZE_ARGUMENT       = 21122
    INVALID_SIZE                = 21123

    # --- value errors (2113x) ---
    UNSUPPORTED_SPECIFIER       = 21131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class FormatException(Exception):
    """
    Base of every template parse fault.

    options (read-only mapping, all optional)
    - code: FaultCode          - title: short headline
    - hint: one actionable sentence
    - template / index / position: location of the fault (see module docs)
    - docs: host documentation for the code (see getdoc)
    - fancy / colorful: rendering switches used by __rich__()
    """

    # Subclasses declare their code and title so bare constructions stay meaningful.
    __code__ = Unset
    __title__ = "format error"

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        self.message = coalesce(message, type(self).__title__)
        self.options = MappingProxyType({
            "code": type(self).__code__,
            "title": type(self).__title__,
        } | options)

    @property
    def code(self):
        return self.options["code"]

    @property
    def position(self):
        """Byte offset of the fault in the template, or None when unlocated."""
        return self.options.get("position")

    @property
    def index(self):
        """Character index of the fault in the template, or None when unlocated."""
        return self.options.get("index")

    @property
    def template(self):
        return self.options.get("template")

    def __str__(self):
        if self.position is None:
            return self.message
        return "%s at offset %d" % (self.message, self.position)

    def __reduce__(self):
        return _rebuild, (type(self), self.message, dict(self.options))

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "error-message": "#C8C8D0",  # soft light gray message
            "template": "#E6E6F0",  # the template excerpt
            "caret": "bold #FF4DA6",  # caret under the failing offset
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
            "docs": "underline #00E5FF dim",  # host documentation footer
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = text(getattr(main, "__prog__", "rtformat"), styler("prog-name"))
        code = self.options["code"]

        header = Text.assemble(
            "[ ",
            prog,
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
            " | ",
            text(self.options["title"].title(), styler("error-title")),
            " ]"
        )
        renders = [text(str(self), styler("error-message"))]

        # Single-line excerpt of the template with a caret under the fault.
        if isinstance(template := self.template, str) and self.index is not None:
            start = template.rfind("\n", 0, self.index) + 1
            stop = template.find("\n", self.index)
            line = template[start:stop if stop >= 0 else len(template)]
            renders.append(Text.assemble("  ", text(line, styler("template"))))
            renders.append(Text.assemble("  ", " " * (self.index - start), text("^", styler("caret"))))

        if hint := self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if docs := self.options.get("docs"):
            renders.append(text(docs, styler("docs")))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self):
        raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


def _rebuild(cls, message, options):
    return cls(message, **options)


class UnmatchedBraceError(FormatException):
    __code__ = FaultCode.UNMATCHED_BRACE
    __title__ = "unmatched brace"


class MalformedPlaceholderError(FormatException):
    __code__ = FaultCode.MALFORMED_PLACEHOLDER
    __title__ = "malformed placeholder"


class InvalidSpecifierError(FormatException):
    __code__ = FaultCode.INVALID_SPECIFIER
    __title__ = "invalid specifier"


class MissingArgumentError(FormatException):
    __code__ = FaultCode.MISSING_ARGUMENT
    __title__ = "missing argument"


class MissingSizeArgumentError(FormatException):
    __code__ = FaultCode.MISSING_SIZE_ARGUMENT
    __title__ = "missing size argument"


class InvalidSizeError(FormatException):
    __code__ = FaultCode.INVALID_SIZE
    __title__ = "invalid size"


class UnsupportedSpecifierError(FormatException):
    __code__ = FaultCode.UNSUPPORTED_SPECIFIER
    __title__ = "unsupported specifier"


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see FormatException).
    - options are merged into the fault via copy.replace() before triggering.
    - FormatException always raises: the caller decides whether to report it.

    typical options
    - template, index, position, fancy, colorful, docs, hint.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    lookup
    - the host application may expose a __docs__ mapping in __main__ where keys
      are FaultCode instances and values are short documentation strings.
    - when not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FormatException",
    "UnmatchedBraceError",
    "MalformedPlaceholderError",
    "InvalidSpecifierError",
    "MissingArgumentError",
    "MissingSizeArgumentError",
    "InvalidSizeError",
    "UnsupportedSpecifierError",
    "FaultCode",
    "trigger",
    "getdoc",
)
