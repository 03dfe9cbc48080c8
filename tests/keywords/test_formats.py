"""Tests for format and content predicates."""

import pytest

from streamval import InvalidSchemaError, Validator, read_schema
from streamval.keywords import formats


class TestFormats:
    """Tests for format predicates."""

    def test_supported(self):
        assert formats.is_format_supported("email")
        assert formats.is_format_supported("ipv4")
        assert not formats.is_format_supported("no-such")

    @pytest.mark.parametrize(
        "value, attribute, expected",
        [
            ("a@example.com", "email", True),
            ("example.com", "email", False),
            ("192.168.0.1", "ipv4", True),
            ("192.168.0", "ipv4", False),
        ],
    )
    def test_conforms(self, value, attribute, expected):
        assert formats.conforms(value, attribute) is expected


class TestContent:
    """Tests for content predicates."""

    def test_encoding_names(self):
        assert formats.is_encoding_supported("base64")
        assert formats.is_encoding_supported("BASE64")
        assert not formats.is_encoding_supported("base32")

    def test_decode_base64(self):
        assert formats.decode_content("aGVsbG8=", "base64") == b"hello"
        assert formats.decode_content("aGVsbG8", "base64") is None

    def test_media_type_names(self):
        assert formats.is_media_type_supported("application/json")
        assert formats.is_media_type_supported("Application/JSON; charset=utf-8")
        assert not formats.is_media_type_supported("text/plain")

    def test_json_media_type(self):
        assert formats.is_media_type('{"a": 1}', "application/json")
        assert formats.is_media_type(b"[1, 2]", "application/json")
        assert not formats.is_media_type("{", "application/json")


class TestUnknownNames:
    """Unknown format and content names in schemas."""

    def test_strict_formats_reports(self):
        with pytest.raises(InvalidSchemaError) as exc_info:
            read_schema({"format": "no-such"}, strict_formats=True)

        (problem,) = exc_info.value.problems
        assert problem.message == "schema.problem.format.unknown"
        assert problem.pointer == "/format"

    def test_unknown_media_type_reported(self):
        with pytest.raises(InvalidSchemaError) as exc_info:
            read_schema({"contentMediaType": "text/plain"}, strict_formats=True)

        assert exc_info.value.problems[0].message == "schema.problem.contentMediaType.unknown"

    def test_lenient_formats_skip_check(self):
        schema = read_schema({"format": "no-such"}, strict_formats=False)

        assert Validator(schema).validate('"anything"') is True

    def test_config_default(self):
        from streamval import config

        config.strict_formats = False

        assert Validator({"format": "no-such"}).validate('"x"') is True
