"""
Settings group persistence.

This package provides:
- SettingsStore (base.py): the protocol the accessor reads and writes through
- InMemorySettingsStore (memory.py): dict-backed store for tests and embedding
- SQLiteSettingsStore (sqlite.py): JSON rows in a SQLite options table
"""

from opts.store.base import SettingsStore
from opts.store.memory import InMemorySettingsStore
from opts.store.sqlite import SQLiteSettingsStore

__all__ = ["SettingsStore", "InMemorySettingsStore", "SQLiteSettingsStore"]
