"""
Incremental JSON event parser.

Turns JSON text, delivered in arbitrary chunks, into a stream of
:class:`~streamval.parser.events.Event` values. The parser never builds the
document: it only remembers the nesting stack and the current token, whose
scalar value can be read on demand.

Usage::

    parser = JsonEventParser()
    parser.feed('{"name": "Al')
    list(parser.events())        # [START_OBJECT, KEY_NAME]
    parser.feed('ice"}')
    parser.close()
    for event in parser.events():
        ...                      # VALUE_STRING, END_OBJECT
"""

from __future__ import annotations

import codecs
import json
import re
from collections.abc import Iterator
from decimal import Decimal

from ..exceptions import JsonParsingError, StateError
from .events import Event, Location

__all__ = ["JsonEventParser"]

# =============================================================================
# Lexer
# =============================================================================

_WHITESPACE = r"[ \t\n\r]+"
_NUMBER = r"-?(?:0|[1-9]\d*)(?:\.\d+)?(?:[eE][+-]?\d+)?"
_ESCAPE = r'\\(?:["\\/bfnrt]|u[0-9a-fA-F]{4})'
_STRING = r'"(?:[^"\\\x00-\x1f]|' + _ESCAPE + r')*"'
_LITERAL = r"true|false|null"

_TOKEN_RE = re.compile(
    rf"(?P<WHITESPACE>{_WHITESPACE})|"
    rf"(?P<STRING>{_STRING})|"
    rf"(?P<NUMBER>{_NUMBER})|"
    rf"(?P<LITERAL>{_LITERAL})|"
    r"(?P<PUNCT>[{}\[\]:,])"
)

# Text that may still grow into a valid token once more input arrives.
_PARTIAL_STRING_RE = re.compile(r'"(?:[^"\\\x00-\x1f]|' + _ESCAPE + r')*(?:\\u?[0-9a-fA-F]{0,3})?')
_PARTIAL_NUMBER_RE = re.compile(r"-?(?:0|[1-9]\d*)?(?:\.\d*)?(?:[eE][+-]?\d*)?")
_LITERALS = ("true", "false", "null")

_SCALAR_EVENTS = {
    "true": Event.VALUE_TRUE,
    "false": Event.VALUE_FALSE,
    "null": Event.VALUE_NULL,
}

# Grammar states
_VALUE = "value"  # any value
_VALUE_OR_END = "value_or_end"  # first array element or "]"
_KEY = "key"  # object key after ","
_KEY_OR_END = "key_or_end"  # first object key or "}"
_COLON = "colon"
_COMMA_OR_END = "comma_or_end"
_DONE = "done"  # root value complete


class JsonEventParser:
    """
    Pull parser producing JSON events from chunked text.

    Parameters
    ----------
    encoding : str, default "utf-8"
        Encoding used to decode ``bytes`` chunks. Multi-byte sequences may be
        split across chunks.

    Notes
    -----
    Integers are read as :class:`int`, every other number as
    :class:`decimal.Decimal` so that ``multipleOf`` and equality stay exact.
    """

    def __init__(self, encoding: str = "utf-8") -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)()
        self._buffer = ""
        self._pos = 0
        self._closed = False

        # Position of self._pos in the stream
        self._line = 1
        self._column = 1
        self._offset = 0

        self._stack: list[str] = []
        self._state = _VALUE

        self._event: Event | None = None
        self._token = ""
        self._location: Location | None = None

    # =========================================================================
    # Input
    # =========================================================================

    def feed(self, chunk: str | bytes) -> None:
        """Append a chunk of the document."""
        if self._closed:
            raise StateError(
                "Cannot feed a closed parser",
                code="ALREADY_CLOSED",
            )
        if isinstance(chunk, bytes):
            chunk = self._decode(chunk)
        self._buffer += chunk

    def close(self) -> None:
        """Mark the end of input. Remaining events become available."""
        if self._closed:
            return
        self._buffer += self._decode(b"", final=True)
        self._closed = True

    def _decode(self, data: bytes, final: bool = False) -> str:
        try:
            return self._decoder.decode(data, final)
        except UnicodeDecodeError as e:
            raise JsonParsingError(f"Invalid {e.encoding} byte sequence: {e.reason}", self._here()) from e

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def is_done(self) -> bool:
        """True once the root value has been completely parsed."""
        return self._state == _DONE

    @property
    def depth(self) -> int:
        """Number of currently open objects and arrays."""
        return len(self._stack)

    # =========================================================================
    # Events
    # =========================================================================

    def events(self) -> Iterator[Event]:
        """
        Yield every event available from the input fed so far.

        Stops when the buffered text ends in the middle of a token or
        structure; call again after the next :meth:`feed`. After
        :meth:`close`, a truncated document raises
        :class:`~streamval.exceptions.JsonParsingError`.
        """
        while True:
            event = self._next_event()
            if event is None:
                break
            yield event
        self._compact()
        if self._closed and self._state != _DONE:
            raise JsonParsingError("Unexpected end of input", self._here())

    def _next_event(self) -> Event | None:
        while True:
            token = self._next_token()
            if token is None:
                return None
            kind, text, location = token
            event = self._accept(kind, text, location)
            if event is not None:
                self._event = event
                self._token = text
                self._location = location
                return event

    def _next_token(self) -> tuple[str, str, Location] | None:
        buffer, pos = self._buffer, self._pos
        if pos >= len(buffer):
            return None
        match = _TOKEN_RE.match(buffer, pos)
        if match is None:
            if self._closed or not self._is_partial(pos):
                raise JsonParsingError(f"Unexpected character {buffer[pos]!r}", self._here())
            return None
        if (
            match.lastgroup == "NUMBER"
            and not self._closed
            and _PARTIAL_NUMBER_RE.fullmatch(buffer, pos) is not None
        ):
            # "1" or "1." at the end of the buffer may still continue
            return None
        location = self._here()
        text = match.group()
        self._advance(text)
        return match.lastgroup, text, location

    def _is_partial(self, pos: int) -> bool:
        rest = self._buffer[pos:]
        head = rest[0]
        if head == '"':
            return _PARTIAL_STRING_RE.fullmatch(rest) is not None
        if head == "-" or head.isdigit():
            return _PARTIAL_NUMBER_RE.fullmatch(rest) is not None
        return any(literal.startswith(rest) for literal in _LITERALS)

    def _advance(self, text: str) -> None:
        newlines = text.count("\n")
        if newlines:
            self._line += newlines
            self._column = len(text) - text.rindex("\n")
        else:
            self._column += len(text)
        self._offset += len(text)
        self._pos += len(text)

    def _here(self) -> Location:
        return Location(self._line, self._column, self._offset)

    def _compact(self) -> None:
        if self._pos:
            self._buffer = self._buffer[self._pos :]
            self._pos = 0

    # =========================================================================
    # Grammar
    # =========================================================================

    def _accept(self, kind: str, text: str, location: Location) -> Event | None:
        if kind == "WHITESPACE":
            return None

        state = self._state
        if state == _DONE:
            raise JsonParsingError(f"Unexpected {text!r} after the root value", location)

        if kind == "PUNCT":
            return self._accept_punct(text, state, location)

        if state in (_KEY, _KEY_OR_END):
            if kind != "STRING":
                raise JsonParsingError(f"Expected property name, got {text!r}", location)
            self._state = _COLON
            return Event.KEY_NAME

        if state not in (_VALUE, _VALUE_OR_END):
            raise JsonParsingError(f"Unexpected {text!r}", location)

        self._value_done()
        if kind == "STRING":
            return Event.VALUE_STRING
        if kind == "NUMBER":
            return Event.VALUE_NUMBER
        return _SCALAR_EVENTS[text]

    def _accept_punct(self, char: str, state: str, location: Location) -> Event | None:
        if char in "{[":
            if state not in (_VALUE, _VALUE_OR_END):
                raise JsonParsingError(f"Unexpected {char!r}", location)
            self._stack.append(char)
            if char == "{":
                self._state = _KEY_OR_END
                return Event.START_OBJECT
            self._state = _VALUE_OR_END
            return Event.START_ARRAY

        if char == "}":
            if not self._stack or self._stack[-1] != "{" or state not in (_KEY_OR_END, _COMMA_OR_END):
                raise JsonParsingError("Unexpected '}'", location)
            self._stack.pop()
            self._value_done()
            return Event.END_OBJECT

        if char == "]":
            if not self._stack or self._stack[-1] != "[" or state not in (_VALUE_OR_END, _COMMA_OR_END):
                raise JsonParsingError("Unexpected ']'", location)
            self._stack.pop()
            self._value_done()
            return Event.END_ARRAY

        if char == ":":
            if state != _COLON:
                raise JsonParsingError("Unexpected ':'", location)
            self._state = _VALUE
            return None

        # ","
        if state != _COMMA_OR_END:
            raise JsonParsingError("Unexpected ','", location)
        self._state = _KEY if self._stack[-1] == "{" else _VALUE
        return None

    def _value_done(self) -> None:
        self._state = _COMMA_OR_END if self._stack else _DONE

    # =========================================================================
    # Current token
    # =========================================================================

    @property
    def event(self) -> Event | None:
        """The most recently produced event."""
        return self._event

    @property
    def location(self) -> Location | None:
        """Location of the most recently produced event's token."""
        return self._location

    @property
    def string(self) -> str:
        """Text of the current key name or string value."""
        if self._event not in (Event.KEY_NAME, Event.VALUE_STRING):
            raise self._unavailable("string")
        return json.loads(self._token)

    @property
    def number(self) -> int | Decimal:
        """Value of the current number."""
        if self._event is not Event.VALUE_NUMBER:
            raise self._unavailable("number")
        token = self._token
        if any(c in token for c in ".eE"):
            return Decimal(token)
        return int(token)

    @property
    def value(self) -> str | int | Decimal | bool | None:
        """Value of the current scalar event."""
        event = self._event
        if event is Event.VALUE_STRING:
            return self.string
        if event is Event.VALUE_NUMBER:
            return self.number
        if event is Event.VALUE_TRUE:
            return True
        if event is Event.VALUE_FALSE:
            return False
        if event is Event.VALUE_NULL:
            return None
        raise self._unavailable("scalar value")

    def _unavailable(self, what: str) -> StateError:
        current = self._event.name if self._event is not None else "no event"
        return StateError(
            f"No {what} is available at {current}",
            code="VALUE_UNAVAILABLE",
            details={"event": current, "requested": what},
        )
