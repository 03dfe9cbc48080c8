"""
Evaluator tests.

Tests for streamval.evaluator module:
- test_logical.py: AND/OR/XOR/not-XOR combinators and their scalar variants
- test_children.py: Per-item and per-property children evaluators

Evaluators are driven directly with scripted operands, independent of
any keyword.

Maps to: streamval/evaluator/
"""
