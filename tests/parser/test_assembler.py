"""Tests for ValueAssembler."""

from decimal import Decimal

from streamval.parser import JsonEventParser, ValueAssembler


def assemble(text):
    parser = JsonEventParser()
    parser.feed(text)
    parser.close()
    assembler = ValueAssembler()
    completions = [assembler.append(event, parser) for event in parser.events()]
    return assembler, completions


class TestValueAssembler:
    """Tests for building values from events."""

    def test_nested_value(self):
        """Objects, arrays and scalars are rebuilt."""
        assembler, _ = assemble('{"a": [1, {"b": null}], "c": 1.5, "d": "x"}')

        assert assembler.value == {"a": [1, {"b": None}], "c": Decimal("1.5"), "d": "x"}

    def test_completes_on_last_event(self):
        """append() answers True only for the closing event."""
        assembler, completions = assemble("[1, [2]]")

        assert completions == [False, False, False, False, False, True]
        assert assembler.complete is True

    def test_scalar(self):
        """A scalar value completes on its single event."""
        assembler, completions = assemble("false")

        assert completions == [True]
        assert assembler.value is False

    def test_key_order_preserved(self):
        """Keys keep document order."""
        assembler, _ = assemble('{"z": 1, "a": 2}')

        assert list(assembler.value) == ["z", "a"]
