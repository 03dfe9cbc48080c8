"""
Exception handling tests.

Tests for streamval.exceptions module:
- Exception hierarchy and built-in base classes
- Stable error codes and structured details
- Errors raised by the parser, reader, validator and config

Maps to: streamval/exceptions/
"""
