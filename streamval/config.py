"""
Runtime configuration.

Provides defaults for schema reading and validation. Settings can be
modified programmatically without environment variables, and every
reader or validator accepts per-instance overrides.

Example:
    >>> from streamval import config
    >>> config.strict = True  # Report unknown keywords as schema problems
"""

from .exceptions import ValidationError


class _StreamvalConfig:
    """
    Singleton configuration for streamval settings.

    This is a singleton - import and modify `config` directly:

        from streamval import config
        config.strict = True

    Attributes
    ----------
        strict: When True, unknown keywords are reported as compile-time
            problems. They are retained for serialization either way.
        strict_formats: When True, unknown ``format``, ``contentEncoding`` and
            ``contentMediaType`` names are reported as compile-time problems.
        max_problems: Upper bound on the number of instance problems a
            validator collects per run, or None for no bound.
    """

    __slots__ = ("_strict", "_strict_formats", "_max_problems")

    def __init__(self) -> None:
        self._strict = False
        self._strict_formats = True
        self._max_problems: int | None = None

    @property
    def strict(self) -> bool:
        """Report unknown keywords as schema problems."""
        return self._strict

    @strict.setter
    def strict(self, value: bool) -> None:
        self._strict = _check_bool("strict", value)

    @property
    def strict_formats(self) -> bool:
        """Report unknown format and content names as schema problems."""
        return self._strict_formats

    @strict_formats.setter
    def strict_formats(self, value: bool) -> None:
        self._strict_formats = _check_bool("strict_formats", value)

    @property
    def max_problems(self) -> int | None:
        """Cap on collected instance problems per validation run."""
        return self._max_problems

    @max_problems.setter
    def max_problems(self, value: int | None) -> None:
        if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
            raise ValidationError(
                f"max_problems must be int or None, got {type(value).__name__}",
                code="INVALID_ARGUMENT",
                details={"param": "max_problems", "type": type(value).__name__},
            )
        if value is not None and value < 1:
            raise ValidationError(
                f"max_problems must be positive, got {value}",
                code="INVALID_ARGUMENT",
                details={"param": "max_problems", "value": value},
            )
        self._max_problems = value

    def __repr__(self) -> str:
        return (
            f"StreamvalConfig(strict={self._strict}, "
            f"strict_formats={self._strict_formats}, max_problems={self._max_problems})"
        )


def _check_bool(name: str, value: bool) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(
            f"{name} must be bool, got {type(value).__name__}",
            code="INVALID_ARGUMENT",
            details={"param": name, "type": type(value).__name__},
        )
    return value


# Module-level singleton
config = _StreamvalConfig()
