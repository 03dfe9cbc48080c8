"""
Streamval - Streaming JSON Schema validation.

Streamval validates a JSON document against a JSON Schema while the
document is still being tokenized. The instance is never built in memory:
every keyword is a small state machine fed one parse event at a time, and
violations are reported the moment they are detected.

Quick Start
-----------

One-shot validation:

    >>> from streamval import Validator
    >>>
    >>> validator = Validator({"type": "object", "required": ["name"]})
    >>> validator.validate('{"name": "Alice"}')
    True
    >>> validator.validate('{"age": 30}')
    False
    >>> print(validator.problems[0])
    [1,11][] The object must have properties ["name"].

Streaming, chunk by chunk:

    >>> validator = Validator({"type": "array", "maxItems": 2})
    >>> validator.feed("[1, 2")
    True
    >>> validator.feed(", 3, 4")  # the third item already breaks maxItems
    False

Reading a schema once, with references and a resolver:

    >>> from streamval import read_schema
    >>>
    >>> common = read_schema({"definitions": {"id": {"type": "integer"}}},
    ...                      base_uri="http://example.com/common.json")
    >>> schema = read_schema(
    ...     {"properties": {"id": {"$ref": "common.json#/definitions/id"}}},
    ...     base_uri="http://example.com/root.json",
    ...     resolvers=[{"http://example.com/common.json": common}.get],
    ... )
    >>> Validator(schema).validate('{"id": "x"}')
    False

Printing problems:

    >>> from streamval import ProblemPrinter
    >>> ProblemPrinter(print).handle_problems(validator.problems)


Core Classes
------------

- `Validator` - Validate instances; one-shot, streaming or as a parser
- `read_schema` / `SchemaReader` - Read and resolve schema documents
- `Schema` - Immutable, shareable schema node
- `Problem` - Structured diagnostic, possibly with alternative branches
- `ProblemPrinter` - Render problems as ``[line,col][pointer] message``


Supported Vocabulary
--------------------

JSON Schema draft-07, plus ``minContains``/``maxContains`` and ``$defs``.
``format`` checks are provided by ``jsonschema.FormatChecker``.
"""

from streamval._logging import setup_logging
from streamval.config import config

# Evaluation
from streamval.evaluator import Result

# Exceptions (commonly-used exceptions at root; all via streamval.exceptions)
from streamval.exceptions import (
    InvalidSchemaError as InvalidSchemaError,
)
from streamval.exceptions import (
    JsonParsingError as JsonParsingError,
)
from streamval.exceptions import (
    StateError as StateError,
)
from streamval.exceptions import (
    StreamingValidationError as StreamingValidationError,
)
from streamval.exceptions import (
    StreamvalError,
)
from streamval.exceptions import (
    ValidationError as ValidationError,
)

# Parsing
from streamval.parser import Event, InstanceType, JsonEventParser, Location

# Problems
from streamval.problem import Problem, ProblemPrinter, format_problems

# Schema
from streamval.schema import Schema, SchemaReader, read_schema

# Validate
from streamval.validate import Validator


def set_log_level(level: str) -> None:
    """Set logging verbosity level.

    Args:
        level: One of 'trace', 'debug', 'info', 'warn', 'error', 'off'.
               Default is 'warn' (silent operation).

    Example:
        >>> import streamval
        >>> streamval.set_log_level('debug')  # Enable debug output
        >>> streamval.set_log_level('warn')   # Back to silent (default)
    """
    setup_logging(level)


# =============================================================================
# Public API
# =============================================================================
#
# Only symbols that deserve top-level documentation are listed here; the
# rest stay importable through their subpackages
# (e.g., from streamval.schema import SchemaGraph).
#
__all__ = [
    # Validate
    "Validator",
    "Result",
    # Schema
    "read_schema",
    "SchemaReader",
    "Schema",
    # Problems
    "Problem",
    "ProblemPrinter",
    "format_problems",
    # Parsing
    "JsonEventParser",
    "Event",
    "InstanceType",
    "Location",
    # Configuration
    "config",
    "setup_logging",
    "set_log_level",
    # Exceptions
    "StreamvalError",
    "JsonParsingError",
    "InvalidSchemaError",
    "StateError",
    "ValidationError",
    "StreamingValidationError",
]
