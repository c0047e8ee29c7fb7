"""Shared test fixtures for restactions.

Provides a recording transport for exercising the action pipeline without
network I/O, isolated config environments, output state management, and a
CLI runner. These fixtures are discovered automatically by pytest.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Optional

import pytest

from restactions.output import OutputFormat, OutputManager, reset_output, set_output
from restactions.transport.base import Transport


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager caches sys.stdout/sys.stderr at creation time; a
    manager created under CliRunner would hold closed streams afterwards.
    """
    yield
    reset_output()


# ---------------------------------------------------------------------------
# Recording transport
# ---------------------------------------------------------------------------


class RecordingTransport(Transport):
    """Transport stub that records every call and returns a canned result.

    Args:
        result: Value returned from :meth:`fetch`, or a callable
            ``(uri, args) -> value`` computing it per call.
    """

    def __init__(self, result: Any = None) -> None:
        self.result = result
        self.calls: list[tuple[str, dict[str, Any]]] = []

    async def fetch(self, uri: str, args: dict[str, Any]) -> Any:
        self.calls.append((uri, args))
        if callable(self.result):
            return self.result(uri, args)
        return self.result

    @property
    def last(self) -> tuple[str, dict[str, Any]]:
        return self.calls[-1]

    def last_body(self) -> Optional[dict[str, Any]]:
        """Decode the JSON body of the last POST call."""
        _, args = self.last
        body = args.get("body")
        return json.loads(body) if body is not None else None


@pytest.fixture
def transport() -> RecordingTransport:
    """A recording transport returning ``{"ok": True}``."""
    return RecordingTransport({"ok": True})


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate configuration to a temporary directory.

    Points the XDG directories at subdirectories of tmp_path, clears all
    RESTACTIONS_* environment variables and changes the working directory
    to tmp_path.
    """
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.setattr("restactions.config._is_xdg_platform", lambda: True)

    for var in ["RESTACTIONS_API", "RESTACTIONS_VERSION"]:
        monkeypatch.delenv(var, raising=False)

    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a quiet PLAIN output manager."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


# ---------------------------------------------------------------------------
# CLI runner fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def cli_runner():
    """Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
