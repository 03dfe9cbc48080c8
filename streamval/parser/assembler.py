"""Assembly of a single JSON value from parse events."""

from __future__ import annotations

from typing import Any

from .events import Event
from .tokenizer import JsonEventParser

__all__ = ["ValueAssembler"]


class ValueAssembler:
    """
    Build the Python value of one JSON value from its events.

    Feed the events of exactly one value, starting with its first event.
    :meth:`append` returns True on the event that completes the value.
    """

    def __init__(self) -> None:
        self._stack: list[dict[str, Any] | list[Any]] = []
        self._keys: list[str | None] = []
        self._value: Any = None
        self._complete = False

    def append(self, event: Event, parser: JsonEventParser) -> bool:
        match event:
            case Event.START_OBJECT:
                self._stack.append({})
                self._keys.append(None)
                return False
            case Event.START_ARRAY:
                self._stack.append([])
                self._keys.append(None)
                return False
            case Event.KEY_NAME:
                self._keys[-1] = parser.string
                return False
            case Event.END_OBJECT | Event.END_ARRAY:
                self._keys.pop()
                value = self._stack.pop()
            case Event.VALUE_STRING:
                # Property names are evaluated as strings while on KEY_NAME.
                value = parser.string
            case _:
                value = parser.value
        return self._add(value)

    def _add(self, value: Any) -> bool:
        if not self._stack:
            self._value = value
            self._complete = True
            return True
        container = self._stack[-1]
        if isinstance(container, list):
            container.append(value)
        else:
            container[self._keys[-1]] = value
        return False

    @property
    def complete(self) -> bool:
        return self._complete

    @property
    def value(self) -> Any:
        return self._value
