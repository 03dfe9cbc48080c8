"""
Schema model, compilation and reading.

Schemas are read once into an immutable graph and shared by every
validation run::

    from streamval.schema import read_schema

    schema = read_schema({"type": "array", "items": {"$ref": "#"}})
"""

from .compiler import EvaluatorSource, compile_sources, create_evaluator
from .graph import SchemaGraph
from .reader import Resolver, SchemaReader, read_schema
from .schema import EMPTY_SCHEMA, FALSE_SCHEMA, TRUE_SCHEMA, BooleanSchema, ReferenceSchema, Schema

__all__ = [
    # Model
    "Schema",
    "BooleanSchema",
    "ReferenceSchema",
    "TRUE_SCHEMA",
    "FALSE_SCHEMA",
    "EMPTY_SCHEMA",
    "SchemaGraph",
    # Compilation
    "EvaluatorSource",
    "compile_sources",
    "create_evaluator",
    # Reading
    "Resolver",
    "SchemaReader",
    "read_schema",
]
