"""Tests for restactions.loader."""

from __future__ import annotations

import asyncio
import json
import textwrap
from pathlib import Path

import pytest

from conftest import RecordingTransport
from restactions.exceptions import DefinitionError
from restactions.loader import _parse_content, load_definitions
from restactions.resource import Resource

FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ---------------------------------------------------------------------------
# load_definitions
# ---------------------------------------------------------------------------


class TestLoadDefinitions:
    def test_loads_yaml_fixture(self) -> None:
        defs = load_definitions(str(FIXTURES_DIR / "definitions.yaml"))
        assert list(defs) == ["user", "settings", "status"]
        assert defs["user"].modifiers.service == "api"
        assert defs["settings"].modifiers.base == "singleton"
        assert defs["status"].actions["ping"]["method"] == "get"

    def test_loads_json(self, tmp_path: Path) -> None:
        path = tmp_path / "defs.json"
        path.write_text(json.dumps({"resources": {"order": {"actions": {}}}}))
        defs = load_definitions(str(path))
        assert defs["order"].name == "order"
        assert defs["order"].modifiers.base == "group"

    def test_null_entry_means_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "defs.yaml"
        path.write_text("resources:\n  order:\n")
        defs = load_definitions(str(path))
        assert defs["order"].actions == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(DefinitionError, match="not found"):
            load_definitions(str(tmp_path / "missing.yaml"))

    def test_empty_file(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.yaml"
        path.write_text("   \n")
        with pytest.raises(DefinitionError, match="empty"):
            load_definitions(str(path))

    def test_missing_resources_key(self, tmp_path: Path) -> None:
        path = tmp_path / "defs.yaml"
        path.write_text("other: 1\n")
        with pytest.raises(DefinitionError, match="'resources' mapping"):
            load_definitions(str(path))

    def test_resource_not_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "defs.yaml"
        path.write_text("resources:\n  order: [1, 2]\n")
        with pytest.raises(DefinitionError, match="resource 'order' must be a mapping"):
            load_definitions(str(path))

    def test_invalid_modifiers(self, tmp_path: Path) -> None:
        path = tmp_path / "defs.yaml"
        path.write_text("resources:\n  order:\n    modifiers: {base: plural}\n")
        with pytest.raises(DefinitionError, match="invalid resource 'order'"):
            load_definitions(str(path))


# ---------------------------------------------------------------------------
# _parse_content
# ---------------------------------------------------------------------------


class TestParseContent:
    def test_json_without_hint(self) -> None:
        assert _parse_content('{"resources": {}}') == {"resources": {}}

    def test_yaml_fallback(self) -> None:
        content = textwrap.dedent("""\
            resources:
              user: {}
        """)
        assert _parse_content(content) == {"resources": {"user": {}}}

    def test_json_hint_rejects_yaml(self) -> None:
        with pytest.raises(DefinitionError, match="Invalid JSON"):
            _parse_content("resources: {}", hint="json")

    def test_non_object_rejected(self) -> None:
        with pytest.raises(DefinitionError, match="got list"):
            _parse_content("[1, 2]")

    def test_unparseable(self) -> None:
        with pytest.raises(DefinitionError, match="JSON or YAML"):
            _parse_content("{unclosed: [")


# ---------------------------------------------------------------------------
# Building resources
# ---------------------------------------------------------------------------


class TestBuild:
    def test_build_resource(self, transport: RecordingTransport) -> None:
        defs = load_definitions(str(FIXTURES_DIR / "definitions.yaml"))
        user = defs["user"].build(transport)
        assert isinstance(user, Resource)
        assert set(user.actions) == {
            "create", "get", "init", "find", "remove", "update", "check", "login", "profile",
        }
        assert user["login"].descriptor.nomap is True

    def test_built_resource_dispatches(self, transport: RecordingTransport) -> None:
        defs = load_definitions(str(FIXTURES_DIR / "definitions.yaml"))
        user = defs["user"].build(transport)
        asyncio.run(user.check({"email": "a@b.c"}))
        uri, args = transport.last
        assert uri == "/api/user/check"
        assert args["method"] == "POST"
        assert transport.last_body()["fields"] == {"email": "a@b.c"}

    def test_build_none_base(self, transport: RecordingTransport) -> None:
        defs = load_definitions(str(FIXTURES_DIR / "definitions.yaml"))
        status = defs["status"].build(transport)
        assert list(status) == ["ping"]
        assert status["ping"].descriptor.method == "GET"
