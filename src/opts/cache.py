"""
Request-scoped memoization for settings lookups.

Two levels, both keyed by group name:
- group cache: group -> settings group as returned by the group filter
- key cache: group -> key -> resolved value

A key that was looked up and not found is cached too (as MISSING), so a
repeated lookup never goes back to the store. A RequestCache lives for one
invocation; create a new one per request rather than sharing it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from opts.types import OptionValue


class _Missing:
    """Marker for a key that was looked up and not found."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING = _Missing()


@dataclass
class CacheStats:
    """Counters for one request cache."""

    hits: int = 0
    misses: int = 0
    store_reads: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "store_reads": self.store_reads,
        }


@dataclass
class RequestCache:
    """Group cache and key cache for a single invocation."""

    groups: dict[str, Any] = field(default_factory=dict)
    options: dict[str, dict[str, OptionValue | _Missing]] = field(default_factory=dict)
    stats: CacheStats = field(default_factory=CacheStats)

    def has_option(self, group: str, key: str) -> bool:
        return key in self.options.get(group, {})

    def get_option(self, group: str, key: str) -> OptionValue | _Missing:
        """Get a cached key. Raises KeyError if it was never cached."""
        return self.options[group][key]

    def set_option(self, group: str, key: str, value: OptionValue | _Missing) -> None:
        self.options.setdefault(group, {})[key] = value

    def has_group(self, group: str) -> bool:
        return group in self.groups

    def get_group(self, group: str) -> Any:
        return self.groups[group]

    def set_group(self, group: str, value: Any) -> None:
        self.groups[group] = value

    def invalidate(self, group: str) -> bool:
        """Drop both cache levels for one group.

        Returns:
            True if anything was cached for the group.
        """
        cached = group in self.groups or group in self.options
        self.groups.pop(group, None)
        self.options.pop(group, None)
        return cached

    def clear(self) -> None:
        """Drop everything cached."""
        self.groups.clear()
        self.options.clear()

    def __len__(self) -> int:
        return sum(len(keys) for keys in self.options.values())
