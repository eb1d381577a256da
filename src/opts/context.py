"""
Per-invocation scoping for the settings accessor.

request_scope() builds a fresh RequestCache and SettingsAccessor for one
invocation (one web request, one CLI run), binds it to a context variable
and to the logging request_id, and restores the previous binding on exit.
Cached values therefore never outlive the invocation that loaded them.

Module-level get_option/echo_option/update_settings delegate to the accessor
bound by the innermost active scope.
"""

from __future__ import annotations

from collections.abc import Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Callable, Generator, TextIO

from opts.accessor import SettingsAccessor
from opts.cache import RequestCache
from opts.exceptions import NoActiveRequestError
from opts.hooks import HookRegistry
from opts.logging import get_logger, log_context
from opts.store.base import SettingsStore
from opts.types import generate_id

logger = get_logger(__name__)

_accessor_var: ContextVar[SettingsAccessor | None] = ContextVar("accessor", default=None)


@contextmanager
def request_scope(
    store: SettingsStore,
    hooks: HookRegistry | None = None,
    preview: bool | Callable[[], bool] = False,
    request_id: str | None = None,
    **kwargs: Any,
) -> Generator[SettingsAccessor, None, None]:
    """Run a block with its own settings cache.

    Args:
        store: Persistent settings store.
        hooks: Filter registry shared by the host application.
        preview: True (or a predicate returning True) for live-preview
            sessions, which always read the store directly.
        request_id: ID for log records; generated if omitted.
        **kwargs: Passed through to SettingsAccessor.

    Yields:
        The accessor bound for the duration of the block.
    """
    request_id = request_id or generate_id("req")
    predicate = preview if callable(preview) else (lambda: bool(preview))

    accessor = SettingsAccessor(
        store=store,
        hooks=hooks,
        cache=RequestCache(),
        preview=predicate,
        **kwargs,
    )

    token = _accessor_var.set(accessor)
    try:
        with log_context(request_id=request_id):
            yield accessor
            logger.debug("Request scope closed", **accessor.cache.stats.to_dict())
    finally:
        _accessor_var.reset(token)


def current_accessor() -> SettingsAccessor:
    """Return the accessor bound by the innermost request_scope().

    Raises:
        NoActiveRequestError: If no scope is active.
    """
    accessor = _accessor_var.get()
    if accessor is None:
        raise NoActiveRequestError("No active request scope; wrap the call in request_scope()")
    return accessor


def get_option(key: str, group: str | None = None, use_cache: bool = True) -> Any:
    """Resolve a setting through the current request's accessor."""
    return current_accessor().get_option(key, group, use_cache)


def echo_option(
    key: str,
    group: str | None = None,
    use_cache: bool = True,
    stream: TextIO | None = None,
    escape: bool = False,
) -> None:
    """Write a setting through the current request's accessor."""
    current_accessor().echo_option(key, group, use_cache, stream=stream, escape=escape)


def update_settings(
    new: Mapping[str, Any] | str | None = "",
    group: str | None = None,
) -> bool:
    """Merge settings into a group through the current request's accessor."""
    return current_accessor().update_settings(new, group)
