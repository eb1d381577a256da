"""Request-scoped caching accessor for persisted settings groups."""

from opts.accessor import SettingsAccessor
from opts.cache import RequestCache
from opts.context import (
    current_accessor,
    echo_option,
    get_option,
    request_scope,
    update_settings,
)
from opts.hooks import HookRegistry
from opts.store import InMemorySettingsStore, SettingsStore, SQLiteSettingsStore
from opts.types import DEFAULT_GROUP, UNSET, Scalar, Structured

__version__ = "0.2.0"

__all__ = [
    "DEFAULT_GROUP",
    "UNSET",
    "HookRegistry",
    "InMemorySettingsStore",
    "RequestCache",
    "SQLiteSettingsStore",
    "Scalar",
    "SettingsAccessor",
    "SettingsStore",
    "Structured",
    "__version__",
    "current_accessor",
    "echo_option",
    "get_option",
    "request_scope",
    "update_settings",
]
