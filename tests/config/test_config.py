"""Tests for the config singleton."""

import pytest

from streamval import InvalidSchemaError, ValidationError, Validator, config, read_schema


class TestDefaults:
    """Tests for default settings."""

    def test_defaults(self):
        assert config.strict is False
        assert config.strict_formats is True
        assert config.max_problems is None

    def test_repr(self):
        assert repr(config) == "StreamvalConfig(strict=False, strict_formats=True, max_problems=None)"


class TestValidation:
    """Settings reject values of the wrong type."""

    @pytest.mark.parametrize("value", [1, "true", None])
    def test_strict_must_be_bool(self, value):
        with pytest.raises(ValidationError):
            config.strict = value

    @pytest.mark.parametrize("value", [0, -3, True, 2.5, "10"])
    def test_max_problems_must_be_positive_int(self, value):
        with pytest.raises(ValidationError) as exc_info:
            config.max_problems = value

        assert exc_info.value.details["param"] == "max_problems"

    def test_max_problems_accepts_none(self):
        config.max_problems = 5
        config.max_problems = None

        assert config.max_problems is None


class TestEffects:
    """Settings reach readers and validators."""

    def test_strict_read(self):
        config.strict = True

        with pytest.raises(InvalidSchemaError) as exc_info:
            read_schema({"x-custom": 1})

        assert exc_info.value.code == "INVALID_SCHEMA"

    def test_override_beats_config(self):
        config.strict = True

        schema = read_schema({"x-custom": 1}, strict=False)

        assert schema.to_json() == {"x-custom": 1}

    def test_max_problems_read_per_run(self):
        validator = Validator({"allOf": [{"type": "string"}, {"maximum": 0}]})
        config.max_problems = 1

        validator.validate("1")

        assert len(validator.problems) == 1
