"""
rtformat argument sources.

Overview
- ArgumentSource: the resolution protocol the tokenizer and the size resolver
  consume while parsing a template.
  • next(): the next positional value by cursor order (the only call that
    advances the cursor).
  • by_index(index): random-access positional lookup (cursor untouched).
  • by_name(name): named lookup (cursor untouched).
  Every lookup answers Unset when nothing is found, so None remains a valid
  argument value.

- ArgumentCursor: list/mapping backed source; owns the cursor of one parse.
- NoArguments: singleton source that never finds anything.
- NoPositionalArguments / NoNamedArguments: empty store sentinels (an empty
  Sequence and an empty Mapping) for templates that take no arguments of one kind.

Ownership
- A cursor is created per parse and must not be shared between parsers.
- Stores are only read; callers keep them alive while segments reference them.
"""
import functools
from abc import ABC, abstractmethod
from collections.abc import Sequence, Mapping

from rich.text import Text

from .utils import *
from .value import FormattableValue


class ArgumentSource(ABC):
    """
    Source of argument values consulted while parsing a template.

    contract
    - next() consumes one positional value; by_index()/by_name() never do.
    - all three return Unset when the requested value does not exist.
    """

    @abstractmethod
    def next(self):
        """Return the next positional value and advance the cursor, or Unset."""

    @abstractmethod
    def by_index(self, index, /):
        """Return the positional value at `index`, or Unset."""

    @abstractmethod
    def by_name(self, name, /):
        """Return the value named `name`, or Unset."""


class _Sentinel:
    """
    Internal singleton base for the empty sources/stores.

    - one instance per subclass (cached __new__), falsy, stable repr.
    - subclasses of concrete sentinels are rejected.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return type(self).__name__

    def __rich__(self):
        return Text(repr(self), style="dim")

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return type(self), ()

    def __init_subclass__(cls, **options):
        if _Sentinel not in cls.__bases__:
            raise TypeError(f"type {cls.__mro__[1].__name__!r} is not an acceptable base type")
        super().__init_subclass__(**options)


class NoPositionalArguments(_Sentinel, Sequence):
    """
    Empty positional store: no index resolves and iteration yields nothing.
    """

    def __getitem__(self, index, /):
        if isinstance(index, slice):
            return ()
        raise IndexError("no positional arguments")

    def __len__(self):
        return 0


class NoNamedArguments(_Sentinel, Mapping):
    """
    Empty named store: no name resolves.
    """

    def __getitem__(self, name, /):
        raise KeyError(name)

    def __iter__(self):
        return iter(())

    def __len__(self):
        return 0


class NoArguments(_Sentinel, ArgumentSource):
    """
    Argument source that never finds anything (templates without arguments).
    """

    def next(self):
        return Unset

    def by_index(self, index, /):
        return Unset

    def by_name(self, name, /):
        return Unset


class ArgumentCursor(ArgumentSource):
    """
    Argument source over a positional Sequence and a named Mapping.

    parameters
    - positional: Sequence of FormattableValue (not a string); defaults to
      NoPositionalArguments.
    - named: Mapping[str, FormattableValue]; defaults to NoNamedArguments.

    behavior
    - next() walks the positional store with a forward iterator, exactly like
      an implicit "{}" placeholder does.
    - by_index() rejects negative indices instead of counting from the end.

    errors
    - TypeError when a store has the wrong shape or holds a value that is not
      a FormattableValue.
    """

    def __init__(self, positional=Unset, named=Unset, /):
        positional = coalesce(positional, NoPositionalArguments())
        named = coalesce(named, NoNamedArguments())

        if not isinstance(positional, Sequence) or isinstance(positional, str | bytes | bytearray):
            raise TypeError("positional arguments must be a sequence")
        if not isinstance(named, Mapping):
            raise TypeError("named arguments must be a mapping")

        for index, value in enumerate(positional):
            if not isinstance(value, FormattableValue):
                raise TypeError("positional argument %d must be a formattable value, not %s" % (
                    index,
                    type(value).__name__
                ))
        for name, value in named.items():
            if not isinstance(name, str):
                raise TypeError("named argument keys must be strings")
            if not isinstance(value, FormattableValue):
                raise TypeError("named argument %r must be a formattable value, not %s" % (
                    name,
                    type(value).__name__
                ))

        self._positional = positional
        self._named = named
        self._iterator = iter(positional)
        self._consumed = 0

    @property
    def consumed(self):
        """How many positional values next() has handed out so far."""
        return self._consumed

    def next(self):
        value = next(self._iterator, Unset)
        if value is not Unset:
            self._consumed += 1
        return value

    def by_index(self, index, /):
        if index < 0:
            return Unset
        try:
            return self._positional[index]
        except IndexError:
            return Unset

    def by_name(self, name, /):
        try:
            return self._named[name]
        except KeyError:
            return Unset

    def __repr__(self):
        return "%s(consumed=%d, positional=%d, named=%d)" % (
            type(self).__name__,
            self._consumed,
            len(self._positional),
            len(self._named),
        )

    def __rich_repr__(self):
        yield "consumed", self._consumed
        yield "positional", self._positional
        yield "named", self._named


__all__ = (
    # Protocol
    "ArgumentSource",

    # Sources
    "ArgumentCursor",
    "NoArguments",

    # Store sentinels
    "NoPositionalArguments",
    "NoNamedArguments",
)
