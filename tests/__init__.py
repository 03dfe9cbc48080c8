"""
Streamval test suite.

One directory per package:

- parser/: incremental tokenizer and value assembly
- pointer/: JSON Pointer helpers and instance tracking
- problem/: problem records, dispatchers and rendering
- evaluator/: combinators and children evaluators
- keywords/: every keyword, affirmative and negated
- schema/: reading, references, graph and compilation
- validate/: the Validator API and streaming behavior
- log/, exceptions/, config/: ambient infrastructure
"""
