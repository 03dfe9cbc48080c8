"""
JSON schema validator with streaming support.

This module provides a Validator class for schema-based JSON validation
that evaluates the instance while it is tokenized: chunks can be fed as
they arrive, and a violation is reported as soon as it is detected.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any

from .._logging import scoped_logger
from ..config import config
from ..evaluator.base import Result
from ..exceptions import StateError, StreamingValidationError
from ..parser.assembler import ValueAssembler
from ..parser.events import Event
from ..parser.tokenizer import JsonEventParser
from ..problem.dispatcher import CollectingDispatcher
from ..schema.reader import read_schema
from ..schema.schema import Schema
from .defaults import DefaultValues, replay
from .driver import ValidationRun

if TYPE_CHECKING:
    from pydantic import BaseModel

    from ..problem.problem import Problem

log = scoped_logger("validate")

__all__ = ["Validator"]


class Validator:
    """
    JSON schema validator with streaming support.

    Validates JSON against a schema without building the document in
    memory, with the ability to validate incrementally as data streams in.
    This enables early abort when schema violations are detected.

    Parameters
    ----------
    schema : Schema | type[BaseModel] | dict[str, Any] | str | bytes | bool
        The schema to validate against. Can be:
        - A schema read with :func:`read_schema`
        - A Pydantic model class
        - A JSON schema dictionary or boolean
        - A JSON schema string
    handler : callable, optional
        Called with every problem as soon as it is reported.
    negate : bool, optional
        Validate against the negation of the schema.

    Examples
    --------
    Complete validation::

        from pydantic import BaseModel
        from streamval import Validator

        class User(BaseModel):
            name: str
            age: int

        validator = Validator(User)
        validator.validate('{"name":"Alice","age":30}')  # True
        validator.validate('{"name":123}')  # False

    Streaming validation::

        validator = Validator(User)
        validator.feed('{"name":')      # True - valid so far
        validator.feed('"Alice",')      # True
        validator.feed('"age":30}')     # True
        validator.finish()              # True

    Early abort on violation::

        validator = Validator({"type": "array", "maxItems": 2})
        validator.feed("[1, 2")         # True
        validator.feed(", 3, 4")        # False - abort here!
        validator.problems[0].pointer   # ''

    Raises
    ------
    InvalidSchemaError
        If the schema has compile-time problems.
    """

    def __init__(
        self,
        schema: Schema | type[BaseModel] | dict[str, Any] | str | bytes | bool,
        *,
        handler: Callable[[Problem], None] | None = None,
        negate: bool = False,
    ):
        if not isinstance(schema, Schema):
            schema = read_schema(schema)
        self._schema = schema
        self._handler = handler
        self._negate = negate
        self._closed = False
        self._start()

    def _start(self) -> None:
        self._parser = JsonEventParser()
        self._source = self._parser
        self._dispatcher = CollectingDispatcher(self._handler, config.max_problems)
        self._run = ValidationRun(self._schema, self._parser, self._dispatcher, self._negate)

    @property
    def schema(self) -> Schema:
        return self._schema

    @property
    def parser(self) -> JsonEventParser:
        """
        The parser positioned on the current event; exposes its value.

        While default values are inserted this is a parser of the inserted
        member, otherwise the parser of the current run.
        """
        return self._source

    def close(self) -> None:
        """
        Finish with the validator.

        After calling close(), the validator cannot be fed. Safe to call
        multiple times (idempotent).
        """
        self._closed = True

    def __enter__(self) -> Validator:
        """Context manager entry."""
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit — calls close()."""
        self.close()

    # =========================================================================
    # Core validation API
    # =========================================================================

    def validate(self, data: bytes | str) -> bool:
        """
        Validate complete JSON data against the schema.

        This is the simple, one-shot validation API. For streaming
        validation, use feed() instead. Starts a new run, so problems of
        earlier runs are discarded.

        Parameters
        ----------
        data : bytes | str
            The complete JSON data to validate.

        Returns
        -------
        bool
            True if the data is valid according to the schema.

        Raises
        ------
        JsonParsingError
            If the data is not well-formed JSON before a violation is found.

        Examples
        --------
        >>> validator = Validator({"type": "object", "properties": {"x": {"type": "integer"}}})
        >>> validator.validate('{"x": 42}')
        True
        >>> validator.validate('{"x": "not an int"}')
        False
        """
        self.reset()
        if not self.feed(data):
            return False
        return self.finish()

    # =========================================================================
    # Streaming validation API
    # =========================================================================

    def feed(self, chunk: bytes | str, *, strict: bool = False) -> bool:
        """
        Feed a chunk of data for streaming validation.

        Call repeatedly as data arrives. Returns False as soon as the
        instance is known to violate the schema, enabling early abort.
        Chunks fed after that are ignored.

        Parameters
        ----------
        chunk : bytes | str
            A chunk of JSON data. Tokens may be split across chunks.
        strict : bool, optional
            If True, raises StreamingValidationError on failure with the
            problems reported so far.

        Returns
        -------
        bool
            False if the schema was violated, True otherwise.

        Raises
        ------
        StreamingValidationError
            If strict=True and validation fails.
        StateError
            If the validator or its current run is closed.
        JsonParsingError
            If the data is not well-formed JSON.
        """
        self._check_open()
        if self._run.result is not Result.FALSE:
            self._parser.feed(chunk)
            self._drain()
        if self._run.result is Result.FALSE:
            if strict:
                raise self.error  # type: ignore[misc]
            return False
        return True

    def finish(self, *, strict: bool = False) -> bool:
        """
        Mark the end of the data and return the final verdict.

        Raises
        ------
        JsonParsingError
            If the document is truncated.
        StreamingValidationError
            If strict=True and validation failed.
        """
        self._check_open()
        if self._run.result is not Result.FALSE:
            self._parser.close()
            self._drain()
        valid = self._run.result is Result.TRUE
        log.debug(
            "Validation finished",
            extra={"valid": valid, "problems": len(self._dispatcher.problems)},
        )
        if not valid and strict:
            raise self.error  # type: ignore[misc]
        return valid

    def _drain(self) -> None:
        run = self._run
        for event in self._parser.events():
            if run.step(event) is Result.FALSE:
                log.debug("Violation detected", extra={"location": str(self._parser.location)})
                return

    def reset(self) -> None:
        """
        Reset validator to initial state.

        Call this to reuse the validator for a new validation.
        """
        self._check_open()
        self._start()

    @property
    def result(self) -> Result:
        """Verdict of the current run so far."""
        return self._run.result

    @property
    def is_complete(self) -> bool:
        """
        True if the data fed so far is valid AND complete.

        A complete JSON document has been fully parsed and matches the
        schema.
        """
        return self._parser.is_done and self._run.result is Result.TRUE

    @property
    def problems(self) -> tuple[Problem, ...]:
        """Problems reported in the current run."""
        return tuple(self._dispatcher.problems)

    @property
    def error(self) -> StreamingValidationError | None:
        """
        Error describing the current run's failure.

        Returns None if validation hasn't failed.

        Example
        -------
        >>> validator.feed('{"age": "five"}')
        False
        >>> print(validator.error.problems[0])
        [1,9][/age] The value must be of "integer" type, but actual type is "string".
        """
        if self._run.result is not Result.FALSE:
            return None
        return StreamingValidationError(self.problems, self._parser.location)

    # =========================================================================
    # Validating parser
    # =========================================================================

    def iter_events(self, data: bytes | str, *, default_values: bool = False) -> Iterator[Event]:
        """
        Parse ``data`` and yield its events while validating them.

        The value of the current event is available from :attr:`parser`.
        Starts a new run.

        Parameters
        ----------
        data : bytes | str
            The complete JSON document.
        default_values : bool, optional
            If True, every object gets the ``default`` of each of its
            ``properties`` it lacks, as ``KEY_NAME`` and value events just
            before its ``END_OBJECT``. Inserted members are not validated.

        Raises
        ------
        StreamingValidationError
            As soon as the instance is known to be invalid.

        Example
        -------
        >>> validator = Validator({"properties": {"lang": {"default": "en"}}})
        >>> [e.name for e in validator.iter_events("{}", default_values=True)]
        ['START_OBJECT', 'KEY_NAME', 'VALUE_STRING', 'END_OBJECT']
        """
        self.reset()
        self._parser.feed(data)
        self._parser.close()
        run = self._run
        defaults = DefaultValues(self._schema) if default_values else None
        for event in self._parser.events():
            missing = defaults.update(event, self._parser) if defaults is not None else None
            if run.step(event) is Result.FALSE:
                raise self.error  # type: ignore[misc]
            if missing:
                yield from self._inject(missing)
            yield event
        if run.result is not Result.TRUE:
            raise self.error  # type: ignore[misc]

    def _inject(self, members: list[tuple[str, Any]]) -> Iterator[Event]:
        try:
            for name, value in members:
                log.debug("Inserting default value", extra={"property": name})
                for event, source in replay(name, value):
                    self._source = source
                    yield event
        finally:
            self._source = self._parser

    def read(self, data: bytes | str, *, default_values: bool = False) -> Any:
        """
        Parse ``data`` into Python values, validating along the way.

        Numbers are read as ``int`` or ``decimal.Decimal``. With
        ``default_values``, missing properties are filled in from their
        ``default`` as described for :meth:`iter_events`.

        Raises
        ------
        StreamingValidationError
            If the instance is invalid.

        Example
        -------
        >>> Validator({"type": "array"}).read("[1, 2]")
        [1, 2]
        >>> Validator({"properties": {"n": {"default": 1}}}).read("{}", default_values=True)
        {'n': 1}
        """
        assembler = ValueAssembler()
        for event in self.iter_events(data, default_values=default_values):
            assembler.append(event, self.parser)
        return assembler.value

    def _check_open(self) -> None:
        if self._closed:
            raise StateError("Validator is closed", code="ALREADY_CLOSED")
