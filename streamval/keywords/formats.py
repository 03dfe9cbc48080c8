"""
Format and content predicates.

``format`` checks are delegated to :class:`jsonschema.FormatChecker`; a format
name is supported exactly when the checker has a predicate registered for
it. Content checks cover the ``base64`` encoding and the
``application/json`` media type.
"""

from __future__ import annotations

import base64
import binascii
import json

from jsonschema import FormatChecker

__all__ = [
    "is_format_supported",
    "conforms",
    "is_encoding_supported",
    "decode_content",
    "is_media_type_supported",
    "is_media_type",
]

_checker = FormatChecker()

_ENCODINGS = frozenset({"base64"})
_MEDIA_TYPES = frozenset({"application/json"})


def is_format_supported(attribute: str) -> bool:
    return attribute in _checker.checkers


def conforms(value: str, attribute: str) -> bool:
    """Whether ``value`` is a valid instance of the format ``attribute``."""
    return _checker.conforms(value, attribute)


def is_encoding_supported(encoding: str) -> bool:
    return encoding.lower() in _ENCODINGS


def decode_content(value: str, encoding: str) -> bytes | None:
    """Decode ``value``; None if it is not valid in ``encoding``."""
    if encoding.lower() == "base64":
        try:
            return base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError):
            return None
    return value.encode("utf-8")


def is_media_type_supported(media_type: str) -> bool:
    return _essence(media_type) in _MEDIA_TYPES


def is_media_type(content: str | bytes, media_type: str) -> bool:
    """Whether ``content`` parses as ``media_type``."""
    if _essence(media_type) == "application/json":
        try:
            json.loads(content)
        except (ValueError, UnicodeDecodeError):
            return False
        return True
    return True


def _essence(media_type: str) -> str:
    # Drop parameters such as "; charset=utf-8"
    return media_type.split(";", 1)[0].strip().lower()
