"""
Settings accessor.

Resolves single settings out of named settings groups, memoizing both the
group and the resolved key in a RequestCache, and merges updates back into
the store.

Resolution order for get_option(key, group):
1. pre_get_option_{key} hook; a non-None result is returned as-is
2. preview mode forces the cache off
3. cache off: read the group straight from the store, nothing is cached
4. cache on: key cache, then group cache (re-filtered), then the store

A missing group or key resolves to "" and is never an error.
"""

from __future__ import annotations

import copy
import html
import sys
from collections.abc import Mapping
from typing import Any, Callable, TextIO
from urllib.parse import parse_qsl

import orjson

from opts.cache import MISSING, RequestCache
from opts.entities import normalize
from opts.hooks import HookRegistry
from opts.logging import get_logger, log_context
from opts.store.base import SettingsStore
from opts.types import (
    DEFAULT_GROUP,
    UNSET,
    OptionValue,
    Structured,
    classify,
    is_array_like,
)

logger = get_logger(__name__)

Decoder = Callable[[OptionValue], OptionValue]


def _never_preview() -> bool:
    return False


def _detached(value: OptionValue | None) -> OptionValue | None:
    """Copy structured values so callers never share state with the cache."""
    if isinstance(value, Structured):
        return Structured(copy.deepcopy(value.value))
    return value


def parse_settings(new: Mapping[str, Any] | str | None) -> dict[str, Any]:
    """Turn an update argument into a mapping.

    Mappings are copied; strings are parsed as URL query strings
    ("a=1&b=2"); None and "" give an empty mapping.
    """
    if new is None:
        return {}
    if isinstance(new, Mapping):
        return dict(new)
    if isinstance(new, str):
        return dict(parse_qsl(new, keep_blank_values=True))
    raise TypeError(f"settings must be a mapping or a query string, not {type(new).__name__}")


class SettingsAccessor:
    """Request-scoped reader and writer for settings groups.

    One accessor owns one RequestCache. Create a new accessor (or pass a new
    cache) per request; see opts.context.request_scope.
    """

    def __init__(
        self,
        store: SettingsStore,
        hooks: HookRegistry | None = None,
        cache: RequestCache | None = None,
        preview: Callable[[], bool] | None = None,
        decoder: Decoder = normalize,
        default_group: str = DEFAULT_GROUP,
        invalidate_on_update: bool = True,
    ) -> None:
        """Initialize the accessor.

        Args:
            store: Persistent settings store.
            hooks: Filter registry for the override and group hooks.
            cache: Request cache; a fresh one is created if omitted.
            preview: Predicate that is True during live-preview sessions.
                While it holds, every read bypasses the cache.
            decoder: Normalizer applied to resolved values.
            default_group: Group used when none is given.
            invalidate_on_update: Drop a group's cache entries after
                update_settings changes it.
        """
        self.store = store
        self.hooks = hooks if hooks is not None else HookRegistry()
        self.cache = cache if cache is not None else RequestCache()
        self.preview = preview or _never_preview
        self.decoder = decoder
        self.default_group = default_group
        self.invalidate_on_update = invalidate_on_update

    def lookup(
        self,
        key: str,
        group: str | None = None,
        use_cache: bool = True,
    ) -> OptionValue | None:
        """Resolve a setting to its tagged value.

        Args:
            key: Setting name.
            group: Settings group name; falls back to the default group.
            use_cache: Whether to read through the request cache.

        Returns:
            Scalar or Structured value, or None if the setting is absent.
        """
        group = group or self.default_group

        pre = self.hooks.override_resolver(key, group)
        if pre is not None:
            return classify(pre)

        return _detached(self._resolve(key, group, use_cache))

    def _resolve(self, key: str, group: str, use_cache: bool) -> OptionValue | None:
        if use_cache and self.preview():
            use_cache = False

        if not use_cache:
            return self._read_uncached(key, group)

        if self.cache.has_option(group, key):
            self.cache.stats.hits += 1
            cached = self.cache.get_option(group, key)
            return None if cached is MISSING else cached

        self.cache.stats.misses += 1

        if self.cache.has_group(group):
            options = self.hooks.group_post_processor(group, self.cache.get_group(group))
        else:
            self.cache.stats.store_reads += 1
            logger.debug("Loading settings group", group=group, key=key)
            options = self.hooks.group_post_processor(group, self.store.read_group(group))
            self.cache.set_group(group, options)

        if not is_array_like(options) or key not in options:
            self.cache.set_option(group, key, MISSING)
            return None

        value = self.decoder(classify(options[key]))
        self.cache.set_option(group, key, value)
        return value

    def _read_uncached(self, key: str, group: str) -> OptionValue | None:
        options = self.store.read_group(group)
        if not is_array_like(options) or key not in options:
            return None
        return self.decoder(classify(options[key]))

    def get_option(
        self,
        key: str,
        group: str | None = None,
        use_cache: bool = True,
    ) -> Any:
        """Return a setting's value.

        Values pulled from the store are cached for the life of the accessor,
        so asking twice for the same setting reads the store once.

        Args:
            key: Setting name.
            group: Settings group name; falls back to the default group.
            use_cache: Whether to read through the request cache.

        Returns:
            The setting value, the pre_get_option_{key} hook result if that
            is not None, or "" if the setting does not exist.
        """
        group = group or self.default_group
        pre = self.hooks.override_resolver(key, group)
        if pre is not None:
            return pre

        value = _detached(self._resolve(key, group, use_cache))
        return "" if value is None else value.unwrap()

    def echo_option(
        self,
        key: str,
        group: str | None = None,
        use_cache: bool = True,
        stream: TextIO | None = None,
        escape: bool = False,
    ) -> None:
        """Write a setting's value to a stream.

        The value is written verbatim; escaping for the output context is
        the caller's job unless escape=True.

        Args:
            key: Setting name.
            group: Settings group name.
            use_cache: Whether to read through the request cache.
            stream: Output stream, sys.stdout by default.
            escape: HTML-escape the rendered value.
        """
        rendered = render_value(self.get_option(key, group, use_cache))
        if escape:
            rendered = html.escape(rendered)
        (stream or sys.stdout).write(rendered)

    def update_settings(
        self,
        new: Mapping[str, Any] | str | None = "",
        group: str | None = None,
    ) -> bool:
        """Merge new settings into a stored group and persist the result.

        The current group is always read from the store, never from the
        cache. Keys in new replace stored keys, other stored keys are kept,
        and any key whose merged value is "unset" is removed.

        Args:
            new: Mapping of settings, or a query string such as "a=1&b=2".
            group: Settings group name; falls back to the default group.

        Returns:
            True if the stored group changed, False otherwise.
        """
        group = group or self.default_group
        old = self.store.read_group(group)
        merged = {**old} if is_array_like(old) else {}
        merged.update(parse_settings(new))

        settings = {k: v for k, v in merged.items() if v != UNSET}

        with log_context(group=group):
            changed = self.store.write_group(group, settings)
            logger.info(
                "Updated settings group",
                changed=changed,
                keys=len(settings),
                removed=len(merged) - len(settings),
            )

        if changed and self.invalidate_on_update:
            self.cache.invalidate(group)

        return changed


def render_value(value: Any) -> str:
    """Render a resolved value for output.

    Structured values are written as compact JSON, scalars the way the host
    prints them.
    """
    option = classify(value)
    if isinstance(option, Structured):
        return orjson.dumps(_plain(option.value)).decode("utf-8")
    return option.render()


def _plain(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value
