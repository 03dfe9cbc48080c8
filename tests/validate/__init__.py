"""
Validate tests.

Tests for streamval.validate module:
- test_validator.py: One-shot validation, results, problems, lifecycle
- test_streaming.py: Chunked feeding, early abort, finish
- test_strict_mode.py: strict=True raising StreamingValidationError
- test_parsing.py: read() and iter_events() as a validating parser
- test_default_values.py: Default values inserted for missing properties
- test_schema_types.py: Schema sources accepted by Validator, pydantic models

Maps to: streamval/validate/
"""
