"""
Tests for the filter hook registry.
"""

from __future__ import annotations

from typing import Any

from opts.hooks import HookRegistry


class TestApplyFilters:
    """Test threading values through callbacks."""

    def test_no_callbacks_returns_value(self, hooks: HookRegistry) -> None:
        assert hooks.apply_filters("anything", "value", "extra") == "value"

    def test_callbacks_chain(self, hooks: HookRegistry) -> None:
        hooks.add_filter("h", lambda value: value + "a")
        hooks.add_filter("h", lambda value: value + "b")

        assert hooks.apply_filters("h", "") == "ab"

    def test_extra_args_passed(self, hooks: HookRegistry) -> None:
        seen: list[tuple[Any, ...]] = []

        def record(value: Any, *args: Any) -> Any:
            seen.append(args)
            return value

        hooks.add_filter("h", record)
        hooks.apply_filters("h", None, "group", 3)

        assert seen == [("group", 3)]

    def test_priority_order(self, hooks: HookRegistry) -> None:
        """Test that lower priorities run first and ties keep registration order."""
        hooks.add_filter("h", lambda value: value + ["late"], priority=20)
        hooks.add_filter("h", lambda value: value + ["first"], priority=5)
        hooks.add_filter("h", lambda value: value + ["default-1"])
        hooks.add_filter("h", lambda value: value + ["default-2"])

        assert hooks.apply_filters("h", []) == ["first", "default-1", "default-2", "late"]

    def test_callback_may_remove_itself(self, hooks: HookRegistry) -> None:
        def once(value: int) -> int:
            hooks.remove_filter("h", once)
            return value + 1

        hooks.add_filter("h", once)

        assert hooks.apply_filters("h", 0) == 1
        assert hooks.apply_filters("h", 0) == 0


class TestRegistryManagement:
    """Test adding, removing and clearing callbacks."""

    def test_has_filter(self, hooks: HookRegistry) -> None:
        assert hooks.has_filter("h") is False
        hooks.add_filter("h", lambda value: value)
        assert hooks.has_filter("h") is True

    def test_remove_filter(self, hooks: HookRegistry) -> None:
        def double(value: int) -> int:
            return value * 2

        hooks.add_filter("h", double)

        assert hooks.remove_filter("h", double) is True
        assert hooks.remove_filter("h", double) is False
        assert hooks.has_filter("h") is False
        assert hooks.apply_filters("h", 2) == 2

    def test_remove_keeps_other_callbacks(self, hooks: HookRegistry) -> None:
        def double(value: int) -> int:
            return value * 2

        hooks.add_filter("h", double)
        hooks.add_filter("h", lambda value: value + 1)
        hooks.remove_filter("h", double)

        assert hooks.apply_filters("h", 2) == 3

    def test_clear_one(self, hooks: HookRegistry) -> None:
        hooks.add_filter("a", lambda value: value)
        hooks.add_filter("b", lambda value: value)
        hooks.clear("a")

        assert not hooks.has_filter("a")
        assert hooks.has_filter("b")

    def test_clear_all(self, hooks: HookRegistry) -> None:
        hooks.add_filter("a", lambda value: value)
        hooks.add_filter("b", lambda value: value)
        hooks.clear()

        assert not hooks.has_filter("a")
        assert not hooks.has_filter("b")


class TestAccessorHooks:
    """Test the two hook wrappers used by the accessor."""

    def test_override_resolver(self, hooks: HookRegistry) -> None:
        hooks.add_filter("pre_get_option_title", lambda value, group: f"{group}:title")

        assert hooks.override_resolver("title", "g") == "g:title"
        assert hooks.override_resolver("other", "g") is None

    def test_group_post_processor(self, hooks: HookRegistry) -> None:
        hooks.add_filter("options_filter", lambda options, group: {**options, "group": group})

        assert hooks.group_post_processor("g", {"a": 1}) == {"a": 1, "group": "g"}
