"""Parse event vocabulary shared by the parser and the evaluators."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .tokenizer import JsonEventParser

__all__ = [
    "Event",
    "InstanceType",
    "Location",
    "instance_type_of",
    "is_integral",
    "is_value_start",
    "START_EVENTS",
    "END_EVENTS",
]


class Event(Enum):
    """A single step of a JSON document in document order."""

    START_OBJECT = "START_OBJECT"
    END_OBJECT = "END_OBJECT"
    START_ARRAY = "START_ARRAY"
    END_ARRAY = "END_ARRAY"
    KEY_NAME = "KEY_NAME"
    VALUE_STRING = "VALUE_STRING"
    VALUE_NUMBER = "VALUE_NUMBER"
    VALUE_TRUE = "VALUE_TRUE"
    VALUE_FALSE = "VALUE_FALSE"
    VALUE_NULL = "VALUE_NULL"


class InstanceType(Enum):
    """JSON Schema instance types."""

    ARRAY = "array"
    BOOLEAN = "boolean"
    INTEGER = "integer"
    NULL = "null"
    NUMBER = "number"
    OBJECT = "object"
    STRING = "string"

    def __str__(self) -> str:
        return self.value


START_EVENTS = frozenset({Event.START_OBJECT, Event.START_ARRAY})
END_EVENTS = frozenset({Event.END_OBJECT, Event.END_ARRAY})


@dataclass(frozen=True)
class Location:
    """
    Position of a token in the source text.

    Attributes
    ----------
    line : int
        1-based line number.
    column : int
        1-based column number, counted in characters.
    offset : int
        0-based character offset from the start of the stream.
    """

    line: int
    column: int
    offset: int

    def __str__(self) -> str:
        return f"[{self.line},{self.column}]"


def is_value_start(event: Event) -> bool:
    """Whether the event opens a value (a scalar or a structure)."""
    return event is not Event.KEY_NAME and event not in END_EVENTS


_SIMPLE_TYPES = {
    Event.START_OBJECT: InstanceType.OBJECT,
    Event.START_ARRAY: InstanceType.ARRAY,
    Event.VALUE_STRING: InstanceType.STRING,
    Event.VALUE_TRUE: InstanceType.BOOLEAN,
    Event.VALUE_FALSE: InstanceType.BOOLEAN,
    Event.VALUE_NULL: InstanceType.NULL,
}


def instance_type_of(event: Event, parser: JsonEventParser) -> InstanceType:
    """
    Instance type of the value opened by ``event``.

    Numbers with an integral value are reported as ``INTEGER`` even when
    written with a fraction or exponent (``1.0``, ``1e2``).
    """
    if event is Event.VALUE_NUMBER:
        return InstanceType.INTEGER if is_integral(parser.number) else InstanceType.NUMBER
    try:
        return _SIMPLE_TYPES[event]
    except KeyError:
        raise ValueError(f"{event.name} does not start a value") from None


def is_integral(number: int | Decimal) -> bool:
    if isinstance(number, int):
        return True
    return number.is_finite() and number == number.to_integral_value()
