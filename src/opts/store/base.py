"""
Store interface for persisted settings groups.

A settings group is one named value, normally a mapping of setting keys to
values, persisted as a single serialized blob.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class SettingsStore(Protocol):
    """Protocol for settings group persistence.

    All backends must implement this interface.
    """

    def read_group(self, name: str) -> Any:
        """Read a settings group.

        Args:
            name: Group name.

        Returns:
            The stored value, or None when the group does not exist.
        """
        ...

    def write_group(self, name: str, value: Any) -> bool:
        """Persist a settings group, creating it if needed.

        Args:
            name: Group name.
            value: Value to store.

        Returns:
            True if the stored value changed, False if it already held value.
        """
        ...

    def delete_group(self, name: str) -> bool:
        """Delete a settings group.

        Returns:
            True if the group existed.
        """
        ...

    def list_groups(self) -> list[str]:
        """List stored group names in sorted order."""
        ...
