"""
JSON schema validation with streaming support.

This module provides schema-based JSON validation, with a distinguishing
capability: **streaming validation** - validate JSON chunk by chunk as it
arrives, without holding the document in memory.

Quick Start
-----------

Validate complete JSON::

    from pydantic import BaseModel
    from streamval.validate import Validator

    class User(BaseModel):
        name: str
        age: int

    validator = Validator(User)
    validator.validate('{"name":"Alice","age":30}')  # True
    validator.validate('{"name":123}')  # False (wrong type)

Streaming validation::

    validator = Validator(User)

    # Feed chunks as they arrive
    validator.feed('{"name":')
    validator.feed('"Alice",')
    validator.feed('"age":30}')

    validator.finish()  # True - valid complete JSON

Early abort on schema violation::

    validator = Validator({"type": "array", "maxItems": 2})
    validator.feed("[1, 2")
    validator.feed(", 3, 4")  # Returns False - the third item is one too many
    print(validator.problems[0])

Filling in defaults while parsing::

    validator = Validator({"properties": {"lang": {"default": "en"}}})
    validator.read("{}", default_values=True)  # {"lang": "en"}

See Also
--------
streamval.schema.read_schema : Read a schema once and share it between validators.
"""

from .defaults import DefaultValues
from .driver import ValidationRun
from .validator import Validator

__all__ = ["Validator", "ValidationRun", "DefaultValues"]
