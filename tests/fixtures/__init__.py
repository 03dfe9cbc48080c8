"""
Shared test fixtures for streamval.

This module provides validation shortcuts and sample schemas used across
the keyword, schema and validate tests.

Maps to: N/A (shared test fixtures)
"""

from .schemas import api_response_schema, tree_schema
from .validation import check, chunked, problems_of

__all__ = [
    # Validation helpers
    "check",
    "problems_of",
    "chunked",
    # Sample schemas
    "api_response_schema",
    "tree_schema",
]
