"""
Parser tests.

Tests for streamval.parser module:
- test_tokenizer.py: Event production, chunking, scalar values, errors
- test_assembler.py: Building Python values from events

Maps to: streamval/parser/
"""
