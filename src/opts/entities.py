"""Numeric character reference decoding for scalar setting values.

Only numeric references are decoded (``&#38;`` and ``&#x26;``). Named
entities such as ``&amp;`` are left as they are stored.
"""

from __future__ import annotations

import re

from opts.types import OptionValue, Scalar

_DECIMAL_RE = re.compile(r"&#([0-9]+);")
_HEX_RE = re.compile(r"&#[Xx]([0-9A-Fa-f]+);")

_MAX_CODE_POINT = 0x10FFFF

# Longest digit strings that can still be a valid code point
_MAX_DIGITS = {10: 7, 16: 6}


def _to_char(match: re.Match[str], base: int) -> str:
    digits = match.group(1).lstrip("0") or "0"
    if len(digits) > _MAX_DIGITS[base]:
        return match.group(0)
    code_point = int(digits, base)
    if code_point > _MAX_CODE_POINT or 0xD800 <= code_point <= 0xDFFF:
        return match.group(0)
    return chr(code_point)


def decode_entities(text: str) -> str:
    """Decode decimal and hexadecimal character references in text.

    Args:
        text: Stored string value.

    Returns:
        Text with valid numeric references replaced by their characters.
    """
    if "&#" not in text:
        return text
    text = _DECIMAL_RE.sub(lambda m: _to_char(m, 10), text)
    return _HEX_RE.sub(lambda m: _to_char(m, 16), text)


def normalize(value: OptionValue) -> OptionValue:
    """Decode entities in string scalars; pass everything else through."""
    if isinstance(value, Scalar) and isinstance(value.value, str):
        return Scalar(decode_entities(value.value))
    return value
