"""
Core types for the settings accessor.

A stored setting is either a scalar (string, number, bool) or a structured
value (a mapping or a list). The two are kept apart as frozen dataclasses so
that entity decoding can only ever touch the scalar variant:

- Scalar: wraps str | int | float | bool
- Structured: wraps a mapping or a list, passed through untouched
- classify(): wrap a raw stored value in the right variant
- UNSET: the update value that deletes a key instead of assigning it
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from uuid6 import uuid7

DEFAULT_GROUP = "wps-settings"
UNSET = "unset"

OVERRIDE_HOOK_PREFIX = "pre_get_option_"
GROUP_FILTER_HOOK = "options_filter"


def generate_id(prefix: str = "") -> str:
    """Generate a time-ordered unique ID using UUID7.

    Args:
        prefix: Optional prefix for the ID (e.g., "req")

    Returns:
        A unique ID string, optionally prefixed.
    """
    uid = str(uuid7())
    return f"{prefix}_{uid}" if prefix else uid


@dataclass(frozen=True)
class Scalar:
    """A scalar setting value."""

    value: str | int | float | bool

    def unwrap(self) -> str | int | float | bool:
        return self.value

    def render(self) -> str:
        """Render the way the host prints scalars (True -> "1", False -> "")."""
        if isinstance(self.value, bool):
            return "1" if self.value else ""
        return str(self.value)


@dataclass(frozen=True)
class Structured:
    """A structured setting value (mapping or list)."""

    value: Mapping[str, Any] | list[Any]

    def unwrap(self) -> Mapping[str, Any] | list[Any]:
        return self.value


OptionValue = Union[Scalar, Structured]


def is_structured(raw: Any) -> bool:
    """Check whether a raw stored value is structured (mapping or list)."""
    return isinstance(raw, (Mapping, list, tuple))


def is_array_like(raw: Any) -> bool:
    """Check whether a raw group value can hold named settings."""
    return isinstance(raw, Mapping)


def classify(raw: Any) -> OptionValue:
    """Wrap a raw stored value in its variant.

    Args:
        raw: Value as read from the store or returned by a hook.

    Returns:
        Structured for mappings and sequences, Scalar otherwise.
        None becomes an empty Scalar.
    """
    if isinstance(raw, (Scalar, Structured)):
        return raw
    if isinstance(raw, tuple):
        return Structured(list(raw))
    if is_structured(raw):
        return Structured(raw)
    if raw is None:
        return Scalar("")
    if isinstance(raw, (str, int, float, bool)):
        return Scalar(raw)
    return Scalar(str(raw))
