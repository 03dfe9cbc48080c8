"""
JSON Pointer (RFC 6901) helpers.

Pointers identify both instance locations in diagnostics and subschema
locations for ``$ref`` fragments.
"""

from __future__ import annotations

from collections.abc import Iterable

from .exceptions import ValidationError
from .parser.events import END_EVENTS, START_EVENTS, Event, is_value_start
from .parser.tokenizer import JsonEventParser

__all__ = ["escape", "unescape", "parse_pointer", "join_pointer", "PointerTracker"]


def escape(token: str) -> str:
    """Escape a reference token (``~`` → ``~0``, ``/`` → ``~1``)."""
    return token.replace("~", "~0").replace("/", "~1")


def unescape(token: str) -> str:
    """Reverse of :func:`escape`."""
    return token.replace("~1", "/").replace("~0", "~")


def parse_pointer(pointer: str) -> list[str]:
    """
    Split a JSON Pointer into unescaped reference tokens.

    Raises
    ------
    ValidationError
        If the pointer is neither empty nor starts with ``/``.
    """
    if pointer == "":
        return []
    if not pointer.startswith("/"):
        raise ValidationError(
            f"JSON pointer must start with '/', got {pointer!r}",
            code="INVALID_ARGUMENT",
            details={"pointer": pointer},
        )
    return [unescape(token) for token in pointer[1:].split("/")]


def join_pointer(tokens: Iterable[str | int]) -> str:
    """Build a JSON Pointer from reference tokens."""
    return "".join("/" + escape(str(token)) for token in tokens)


class PointerTracker:
    """
    Follows the instance location while events stream past.

    Call :meth:`update` with every event before it is evaluated. The
    :attr:`pointer` then names the value the event belongs to: the value
    being opened for start and scalar events, the property for key names,
    and the enclosing container for end events.
    """

    def __init__(self) -> None:
        # Per open container: [is_array, current token, last index]
        self._frames: list[list] = []

    def update(self, event: Event, parser: JsonEventParser) -> None:
        frames = self._frames
        if event in END_EVENTS:
            frames.pop()
            return
        if frames:
            top = frames[-1]
            if event is Event.KEY_NAME:
                top[1] = parser.string
            elif top[0] and is_value_start(event):
                top[2] += 1
                top[1] = str(top[2])
        if event in START_EVENTS:
            frames.append([event is Event.START_ARRAY, None, -1])

    @property
    def pointer(self) -> str:
        return join_pointer(frame[1] for frame in self._frames if frame[1] is not None)
