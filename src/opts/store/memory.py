"""In-memory settings store, for tests and embedding."""

from __future__ import annotations

import copy
from typing import Any

from opts.logging import get_logger

logger = get_logger(__name__)


def _identical(a: Any, b: Any) -> bool:
    """Compare values the way they would persist; 1, 1.0 and True all differ."""
    if type(a) is not type(b):
        return False
    if isinstance(a, dict):
        return a.keys() == b.keys() and all(_identical(a[k], b[k]) for k in a)
    if isinstance(a, (list, tuple)):
        return len(a) == len(b) and all(_identical(x, y) for x, y in zip(a, b))
    return a == b


class InMemorySettingsStore:
    """Dict-backed settings store.

    Values are deep-copied on the way in and out so callers never share
    state with the store. Read and write calls are counted.
    """

    def __init__(self, groups: dict[str, Any] | None = None) -> None:
        self._groups: dict[str, Any] = copy.deepcopy(groups) if groups else {}
        self.reads = 0
        self.writes = 0

    def read_group(self, name: str) -> Any:
        self.reads += 1
        return copy.deepcopy(self._groups.get(name))

    def write_group(self, name: str, value: Any) -> bool:
        if name in self._groups and _identical(self._groups[name], value):
            return False
        self._groups[name] = copy.deepcopy(value)
        self.writes += 1
        logger.debug("Wrote settings group", group=name)
        return True

    def delete_group(self, name: str) -> bool:
        if name not in self._groups:
            return False
        del self._groups[name]
        return True

    def list_groups(self) -> list[str]:
        return sorted(self._groups)

    def reset_counters(self) -> None:
        self.reads = 0
        self.writes = 0
