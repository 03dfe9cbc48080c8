"""
Keyword tests.

Tests for streamval.keywords module:
- test_assertions.py: Type, value, numeric, string, count assertions
- test_applicators.py: Logic, array, object and dependency applicators
- test_negation.py: Negated evaluation agrees with affirmative evaluation
- test_vocabulary.py: Reading keyword values into variants
- test_formats.py: Format and content predicates

Keywords are exercised end to end through Validator.

Maps to: streamval/keywords/
"""
