"""
Streamval exceptions.

This module defines the exception hierarchy for streamval:

    StreamvalError (base)
    ├── JsonParsingError - Malformed JSON input
    ├── InvalidSchemaError - Schema could not be read without problems
    ├── StateError - Operation called in an invalid state
    ├── ValidationError - Invalid parameter value
    └── StreamingValidationError - Instance failed validation (strict mode)

Instance-time validation problems are never raised on their own. They are
collected as :class:`~streamval.problem.Problem` records and only surface as
an exception when the caller opts in with ``strict=True``.

Usage:
    try:
        validator.feed(chunk, strict=True)
    except streamval.StreamingValidationError as e:
        for problem in e.problems:
            print(problem)
    except streamval.StreamvalError as e:
        # Catch any streamval error with structured details
        print(f"Error {e.code}: {e}")
        print(f"Details: {e.details}")

See Also
--------
    StreamvalError : Base exception for all streamval errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..parser.events import Location
    from ..problem.problem import Problem
    from ..schema.schema import Schema

__all__ = [
    # Base
    "StreamvalError",
    # Parsing
    "JsonParsingError",
    # Schema
    "InvalidSchemaError",
    # State
    "StateError",
    # Validation
    "ValidationError",
    "StreamingValidationError",
]


class StreamvalError(Exception):
    """
    Base exception for all streamval errors.

    All streamval-specific exceptions inherit from this class, enabling:
    - Catch-all handling: ``except streamval.StreamvalError``
    - Stable string-based error codes for programmatic handling
    - Structured details for debugging and logging

    Attributes
    ----------
    message : str
        Human-readable error description.
    code : str
        Stable, string-based error code (e.g., "VALUE_UNAVAILABLE").
        Use this for programmatic error handling.
    details : dict[str, Any]
        Structured context (e.g., {"event": "START_OBJECT"}).
    """

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.details = details or {}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.args[0]!r}, code={self.code!r})"


# =============================================================================
# Parsing Errors
# =============================================================================


class JsonParsingError(StreamvalError, ValueError):
    """
    Malformed JSON input.

    Raised by the event parser when the text cannot be a JSON document:
    - Unexpected character or token
    - Unterminated string, array or object at end of input
    - Content after the root value

    Attributes
    ----------
    location : Location | None
        Line, column and offset of the offending token.
    """

    def __init__(
        self,
        message: str,
        location: Location | None = None,
        code: str = "JSON_PARSING_FAILED",
        details: dict[str, Any] | None = None,
    ):
        self.location = location
        if location is not None:
            message = f"{message} at line {location.line}, column {location.column}"
        super().__init__(message, code, details)


# =============================================================================
# Schema Errors
# =============================================================================


class InvalidSchemaError(StreamvalError, ValueError):
    """
    Schema was read with compile-time problems.

    Reading never stops at the first problem, so this exception carries the
    whole batch together with the schema that was built anyway. The schema
    is still usable: unresolved references and reference loops evaluate to
    false.

    Attributes
    ----------
    problems : tuple[Problem, ...]
        Every compile-time problem, in document order.
    schema : Schema | None
        The schema built despite the problems.
    """

    def __init__(
        self,
        problems: tuple[Problem, ...],
        schema: Schema | None = None,
        code: str = "INVALID_SCHEMA",
    ):
        self.problems = tuple(problems)
        self.schema = schema
        count = len(self.problems)
        message = f"Schema has {count} problem{'s' if count != 1 else ''}"
        if self.problems:
            message += ": " + "; ".join(str(problem) for problem in self.problems[:3])
            if count > 3:
                message += "; ..."
        super().__init__(message, code, {"problems": [p.message for p in self.problems]})


# =============================================================================
# State Errors
# =============================================================================


class StateError(StreamvalError, RuntimeError):
    """
    Invalid object state error.

    Raised when an operation is attempted in a state that does not allow it.
    These indicate a programming error by the caller, not a data problem.
    Test against ``code`` rather than the message:

    - ``VALUE_UNAVAILABLE``: reading a scalar the parser is not positioned on
    - ``ALREADY_FLUSHED``: replaying a deferred problem buffer twice
    - ``REFERENCE_ALREADY_BOUND``: binding a schema reference a second time
    - ``GRAPH_SEALED``: changing a schema graph after resolution
    - ``ALREADY_CLOSED``: feeding a closed parser or validator
    """

    def __init__(
        self,
        message: str,
        code: str = "STATE_ERROR",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(StreamvalError, ValueError):
    """
    Invalid parameter value.

    Raised when a function receives an argument of the correct type
    but an inappropriate value (e.g., a JSON pointer without leading slash).

    This exception inherits from both StreamvalError and ValueError, so both work::

        except streamval.StreamvalError:   # catches all streamval errors
        except ValueError:                 # catches validation errors (Pythonic)
    """

    def __init__(
        self,
        message: str,
        code: str = "INVALID_ARGUMENT",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, code, details)


class StreamingValidationError(StreamvalError):
    """
    Streaming JSON validation failed.

    Raised when ``Validator.feed(chunk, strict=True)`` observes the instance
    failing the schema. Carries every problem dispatched so far.

    Attributes
    ----------
    problems : tuple[Problem, ...]
        Problems reported for the instance.
    location : Location | None
        Where the verdict was reached.

    Example
    -------
    >>> validator = Validator({"properties": {"age": {"type": "integer"}}})
    >>> try:
    ...     validator.feed('{"age": "five"}', strict=True)
    ... except StreamingValidationError as e:
    ...     print(e.problems[0])
    [1,9][/age] The value must be of "integer" type, but actual type is "string".
    """

    def __init__(
        self,
        problems: tuple[Problem, ...],
        location: Location | None = None,
        code: str = "STREAMING_VALIDATION_FAILED",
    ):
        self.problems = tuple(problems)
        self.location = location

        message = "Instance is not valid against the schema"
        if location is not None:
            message += f" (line {location.line}, column {location.column})"
        if self.problems:
            message += f": {self.problems[0]}"

        super().__init__(
            message,
            code,
            {
                "problems": [p.message for p in self.problems],
                "offset": location.offset if location is not None else None,
            },
        )
