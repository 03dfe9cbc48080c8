"""
Keyword vocabulary and keyword evaluators.

- :mod:`.variants`: one frozen dataclass per keyword.
- :mod:`.vocabulary`: readers turning raw keyword values into variants.
- :mod:`.assertions` and :mod:`.applicators`: the evaluators.
- :mod:`.formats`: ``format`` and content predicates.
"""

from .variants import Keyword, Unknown, child_subschema, in_place_subschemas, subschemas
from .vocabulary import VOCABULARY, MalformedKeyword, read_keyword

__all__ = [
    "Keyword",
    "Unknown",
    "subschemas",
    "in_place_subschemas",
    "child_subschema",
    "VOCABULARY",
    "MalformedKeyword",
    "read_keyword",
]
