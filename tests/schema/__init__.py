"""
Schema tests.

Tests for streamval.schema module:
- test_reader.py: Reading documents, compile-time problems and logging
- test_references.py: $ref and $id resolution, resolvers, reference loops
- test_graph.py: SchemaGraph arena, binding and sealing
- test_schema.py: Schema navigation and serialization
- test_compiler.py: Evaluator sources and schema evaluators

Maps to: streamval/schema/
"""
