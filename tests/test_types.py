"""
Tests for value variants and entity decoding.
"""

from __future__ import annotations

from opts.entities import decode_entities, normalize
from opts.types import Scalar, Structured, classify, generate_id, is_array_like


class TestClassify:
    """Test wrapping raw values in their variant."""

    def test_scalars(self) -> None:
        assert classify("x") == Scalar("x")
        assert classify(0) == Scalar(0)
        assert classify(False) == Scalar(False)

    def test_none_is_empty_scalar(self) -> None:
        assert classify(None) == Scalar("")

    def test_structured(self) -> None:
        assert classify({"a": 1}) == Structured({"a": 1})
        assert classify([1, 2]) == Structured([1, 2])
        assert classify((1, 2)) == Structured([1, 2])

    def test_already_wrapped(self) -> None:
        value = Scalar("x")
        assert classify(value) is value

    def test_other_objects_stringified(self) -> None:
        class Thing:
            def __str__(self) -> str:
                return "thing"

        assert classify(Thing()) == Scalar("thing")

    def test_is_array_like(self) -> None:
        assert is_array_like({})
        assert not is_array_like([])
        assert not is_array_like("text")
        assert not is_array_like(None)


class TestDecodeEntities:
    """Test numeric character reference decoding."""

    def test_decimal(self) -> None:
        assert decode_entities("Caf&#233;") == "Café"

    def test_hex(self) -> None:
        assert decode_entities("a&#x26;b&#X3C;") == "a&b<"

    def test_named_entities_untouched(self) -> None:
        assert decode_entities("&amp; &lt;") == "&amp; &lt;"

    def test_invalid_code_points_untouched(self) -> None:
        assert decode_entities("&#99999999;") == "&#99999999;"
        assert decode_entities("&#xD800;") == "&#xD800;"

    def test_plain_text(self) -> None:
        assert decode_entities("plain") == "plain"

    def test_leading_zeros_ignored(self) -> None:
        """Test that zero padding does not count against the digit limit."""
        assert decode_entities("&#" + "0" * 5000 + "65;") == "A"
        assert decode_entities("&#x" + "0" * 5000 + "41;") == "A"
        assert decode_entities("&#0000041;") == ")"

    def test_overlong_references_untouched(self) -> None:
        long_decimal = "&#" + "9" * 5000 + ";"
        long_hex = "&#x" + "F" * 5000 + ";"
        assert decode_entities(long_decimal) == long_decimal
        assert decode_entities(long_hex) == long_hex
        assert decode_entities("&#x110000;") == "&#x110000;"

    def test_only_ascii_digits(self) -> None:
        assert decode_entities("&#\u0666\u0665;") == "&#\u0666\u0665;"


class TestNormalize:
    """Test that decoding only touches string scalars."""

    def test_string_scalar_decoded(self) -> None:
        assert normalize(Scalar("&#65;")) == Scalar("A")

    def test_number_scalar_untouched(self) -> None:
        assert normalize(Scalar(65)) == Scalar(65)

    def test_structured_untouched(self) -> None:
        value = Structured({"k": "&#65;"})
        assert normalize(value) is value


class TestRender:
    def test_bool_rendering(self) -> None:
        assert Scalar(True).render() == "1"
        assert Scalar(False).render() == ""
        assert Scalar(1.5).render() == "1.5"


def test_generate_id_prefix() -> None:
    assert generate_id("req").startswith("req_")
    assert generate_id("req") != generate_id("req")
