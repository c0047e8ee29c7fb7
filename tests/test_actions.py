"""Tests for restactions.actions -- default tables and the table merge."""

from __future__ import annotations

import pytest

from restactions.actions import (
    GROUP_ACTIONS,
    SINGLETON_ACTIONS,
    RawAction,
    base_actions,
    merge_actions,
    to_entry,
)
from restactions.exceptions import ConfigError
from restactions.models import ActionDescriptor, Modifiers


def _get_map(data):
    return data


def _put_map(fields):
    return fields


def _context(fields):
    return {**fields, "tenant": "t1"}


# ---------------------------------------------------------------------------
# Base selection
# ---------------------------------------------------------------------------


class TestBaseSelection:
    def test_default_is_group(self) -> None:
        table = merge_actions()
        assert set(table) == {"create", "get", "init", "find", "remove", "update"}

    def test_singleton(self) -> None:
        table = merge_actions(modifiers=Modifiers(base="singleton"))
        assert set(table) == {"create", "get", "init", "remove", "update"}
        assert "find" not in table

    def test_none_yields_only_custom(self) -> None:
        table = merge_actions(
            {"ping": {"method": "GET", "uri": "/ping"}},
            Modifiers(base="none"),
        )
        assert set(table) == {"ping"}

    def test_none_without_custom_is_empty(self) -> None:
        assert merge_actions(modifiers=Modifiers(base="none")) == {}

    def test_group_false_selects_no_defaults(self) -> None:
        table = merge_actions(
            {"ping": {"method": "GET", "uri": "/ping"}},
            Modifiers(group=False),
        )
        assert set(table) == {"ping"}

    def test_explicit_base_wins_over_group(self) -> None:
        assert base_actions(Modifiers(group=False, base="singleton")) is SINGLETON_ACTIONS
        assert base_actions(Modifiers(group=False, base="group")) is GROUP_ACTIONS

    def test_base_actions_returns_shared_defaults(self) -> None:
        assert base_actions(Modifiers()) is GROUP_ACTIONS
        assert base_actions(Modifiers(base="singleton")) is SINGLETON_ACTIONS

    def test_defaults_are_post(self) -> None:
        table = merge_actions()
        for name, entry in table.items():
            assert entry.method == "POST"
            assert entry.uri == f"/:controller/{name}"

    def test_remove_is_nomap(self) -> None:
        assert merge_actions()["remove"].nomap is True


# ---------------------------------------------------------------------------
# Custom overrides
# ---------------------------------------------------------------------------


class TestCustomOverride:
    def test_custom_fully_replaces_default(self) -> None:
        table = merge_actions({"get": {"method": "GET", "uri": "/:controller/:id"}})
        entry = table["get"]
        assert entry.method == "GET"
        assert entry.uri == "/:controller/:id"
        assert entry.nomap is False

    def test_no_field_level_merge(self) -> None:
        # remove is nomap by default; a custom remove without nomap must not inherit it.
        table = merge_actions({"remove": {"method": "DELETE", "uri": "/:controller/:id"}})
        assert table["remove"].nomap is False

    def test_custom_added_alongside_defaults(self) -> None:
        table = merge_actions({"check": {"method": "POST", "uri": "/:controller/check"}})
        assert "check" in table
        assert "get" in table

    def test_descriptor_instances_accepted(self) -> None:
        custom = ActionDescriptor(method="post", uri="/x")
        table = merge_actions({"x": custom})
        assert table["x"].method == "POST"
        assert table["x"] is not custom

    def test_extra_transport_options_kept(self) -> None:
        table = merge_actions(
            {"login": {"method": "POST", "uri": "/login", "raw": True, "headers": {"X-A": "1"}}}
        )
        options = table["login"].transport_options()
        assert options["raw"] is True
        assert options["headers"] == {"X-A": "1"}

    def test_camel_case_hooks_accepted(self) -> None:
        table = merge_actions({"x": {"method": "POST", "uri": "/x", "getMap": _get_map}})
        assert table["x"].get_map is _get_map


# ---------------------------------------------------------------------------
# Raw callables
# ---------------------------------------------------------------------------


class TestRawCallables:
    def test_function_becomes_raw_action(self) -> None:
        async def custom(fields=None, options=None):
            return "custom"

        table = merge_actions({"special": custom})
        assert isinstance(table["special"], RawAction)
        assert table["special"].func is custom

    def test_raw_action_replaces_default(self) -> None:
        def custom(fields=None, options=None):
            return None

        table = merge_actions({"get": custom}, Modifiers(get_map=_get_map))
        assert isinstance(table["get"], RawAction)

    def test_invalid_entry_raises(self) -> None:
        with pytest.raises(ConfigError, match="'bad'"):
            to_entry("bad", 42)


# ---------------------------------------------------------------------------
# Modifier backfill
# ---------------------------------------------------------------------------


class TestBackfill:
    def test_maps_backfilled_into_defaults(self) -> None:
        table = merge_actions(modifiers=Modifiers(get_map=_get_map, put_map=_put_map))
        assert table["get"].get_map is _get_map
        assert table["get"].put_map is _put_map

    def test_nomap_default_not_backfilled(self) -> None:
        table = merge_actions(modifiers=Modifiers(get_map=_get_map, put_map=_put_map))
        assert table["remove"].get_map is None
        assert table["remove"].put_map is None

    def test_custom_entries_not_backfilled(self) -> None:
        table = merge_actions(
            {"check": {"method": "POST", "uri": "/check"}},
            Modifiers(get_map=_get_map, context=_context),
        )
        assert table["check"].get_map is None
        assert table["check"].context is None

    def test_context_backfilled_even_for_nomap(self) -> None:
        table = merge_actions(modifiers=Modifiers(context=_context))
        assert table["remove"].context is _context
        assert table["get"].context is _context

    def test_context_backfilled_without_maps(self) -> None:
        table = merge_actions(modifiers=Modifiers(context=_context))
        assert table["get"].get_map is None
        assert table["get"].context is _context

    def test_explicit_none_is_not_absence(self, monkeypatch: pytest.MonkeyPatch) -> None:
        explicit = {
            "get": ActionDescriptor(method="POST", uri="/:controller/get", get_map=None),
        }
        monkeypatch.setattr("restactions.actions.GROUP_ACTIONS", explicit)
        table = merge_actions(modifiers=Modifiers(get_map=_get_map, put_map=_put_map))
        assert table["get"].get_map is None
        assert table["get"].put_map is _put_map

    def test_shared_defaults_never_mutated(self) -> None:
        merge_actions(modifiers=Modifiers(get_map=_get_map, context=_context))
        for entry in GROUP_ACTIONS.values():
            assert entry.get_map is None
            assert entry.context is None
            assert entry.action is None


# ---------------------------------------------------------------------------
# Stamping and validation
# ---------------------------------------------------------------------------


class TestStampingAndValidation:
    def test_action_equals_key(self) -> None:
        table = merge_actions({"check": {"method": "POST", "uri": "/check"}})
        for name, entry in table.items():
            assert entry.action == name

    def test_missing_uri_raises(self) -> None:
        with pytest.raises(ConfigError, match="Action 'check' is missing 'uri'"):
            merge_actions({"check": {"method": "POST"}})

    def test_missing_method_raises(self) -> None:
        with pytest.raises(ConfigError, match="Action 'check' is missing 'method'"):
            merge_actions({"check": {"uri": "/check"}})

    def test_empty_uri_raises(self) -> None:
        with pytest.raises(ConfigError, match="missing 'uri'"):
            merge_actions({"check": {"method": "POST", "uri": ""}})

    def test_invalid_hook_type_raises(self) -> None:
        with pytest.raises(ConfigError, match="Invalid descriptor for action 'x'"):
            merge_actions({"x": {"method": "POST", "uri": "/x", "get_map": "not callable"}})
