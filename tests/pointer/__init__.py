"""
JSON Pointer tests.

Tests for streamval.pointer module:
- test_pointer.py: Escaping, parsing, joining and instance tracking

Maps to: streamval/pointer.py
"""
