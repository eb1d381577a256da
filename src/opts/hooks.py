"""
Filter hook registry.

Other components register callbacks against a named hook; the accessor
threads a value through every callback registered for that name. Callbacks
run in ascending priority order, ties in registration order.

Hooks used by the accessor:
- pre_get_option_{key}: called as (None, group); a non-None result
  short-circuits resolution of that key.
- options_filter: called as (group_value, group) whenever a group is taken
  from the store or the group cache.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Callable

from opts.logging import get_logger
from opts.types import GROUP_FILTER_HOOK, OVERRIDE_HOOK_PREFIX

logger = get_logger(__name__)

FilterCallback = Callable[..., Any]

DEFAULT_PRIORITY = 10


@dataclass(frozen=True)
class _Registration:
    priority: int
    order: int
    callback: FilterCallback


class HookRegistry:
    """Named, priority-ordered filter callbacks."""

    def __init__(self) -> None:
        self._filters: dict[str, list[_Registration]] = defaultdict(list)
        self._counter = 0

    def add_filter(
        self,
        name: str,
        callback: FilterCallback,
        priority: int = DEFAULT_PRIORITY,
    ) -> None:
        """Register a callback for a hook.

        Args:
            name: Hook name.
            callback: Called as callback(value, *args); its return value
                replaces value for the next callback.
            priority: Lower runs earlier.
        """
        self._counter += 1
        registrations = self._filters[name]
        registrations.append(_Registration(priority, self._counter, callback))
        registrations.sort(key=lambda r: (r.priority, r.order))

    def remove_filter(self, name: str, callback: FilterCallback) -> bool:
        """Remove every registration of callback for a hook.

        Returns:
            True if anything was removed.
        """
        registrations = self._filters.get(name)
        if not registrations:
            return False
        kept = [r for r in registrations if r.callback is not callback]
        removed = len(kept) != len(registrations)
        if kept:
            self._filters[name] = kept
        else:
            del self._filters[name]
        return removed

    def has_filter(self, name: str) -> bool:
        """Check whether any callback is registered for a hook."""
        return bool(self._filters.get(name))

    def clear(self, name: str | None = None) -> None:
        """Remove callbacks for one hook, or for all hooks."""
        if name is None:
            self._filters.clear()
        else:
            self._filters.pop(name, None)

    def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        """Thread value through the callbacks registered for name.

        Args:
            name: Hook name.
            value: Initial value.
            *args: Extra arguments passed to every callback.

        Returns:
            The value returned by the last callback, or value unchanged
            when nothing is registered.
        """
        registrations = self._filters.get(name)
        if not registrations:
            return value

        # Copy so callbacks may register or remove filters while running
        for registration in list(registrations):
            value = registration.callback(value, *args)

        logger.debug("Applied filters", hook=name, callbacks=len(registrations))
        return value

    def override_resolver(self, key: str, group: str) -> Any | None:
        """Return the short-circuit value for key, or None."""
        return self.apply_filters(f"{OVERRIDE_HOOK_PREFIX}{key}", None, group)

    def group_post_processor(self, group: str, raw: Any) -> Any:
        """Return the group value after the group-level filter."""
        return self.apply_filters(GROUP_FILTER_HOOK, raw, group)
