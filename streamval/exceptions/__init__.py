"""
Streamval exceptions.

This module defines the exception hierarchy for streamval:

    StreamvalError (base)
    ├── JsonParsingError - Malformed JSON input
    ├── InvalidSchemaError - Schema could not be read without problems
    ├── StateError - Operation called in an invalid state
    ├── ValidationError - Invalid parameter value
    └── StreamingValidationError - Instance failed validation (strict mode)
"""

from .exceptions import (
    InvalidSchemaError,
    JsonParsingError,
    StateError,
    StreamingValidationError,
    StreamvalError,
    ValidationError,
)

# =============================================================================
# Public API - See streamval/__init__.py for the top-level re-exports
# =============================================================================
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
