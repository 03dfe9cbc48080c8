"""
JSON event parsing.

The evaluation engine consumes JSON as a stream of events rather than a
parsed document. This package provides the event vocabulary and a default
incremental parser that accepts text in arbitrary chunks.
"""

from .assembler import ValueAssembler
from .events import (
    END_EVENTS,
    START_EVENTS,
    Event,
    InstanceType,
    Location,
    instance_type_of,
    is_integral,
    is_value_start,
)
from .tokenizer import JsonEventParser

__all__ = [
    "Event",
    "InstanceType",
    "Location",
    "JsonEventParser",
    "ValueAssembler",
    "instance_type_of",
    "is_integral",
    "is_value_start",
    "START_EVENTS",
    "END_EVENTS",
]
