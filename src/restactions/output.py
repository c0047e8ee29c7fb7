"""Rendering of action results and CLI diagnostics.

Action results go to stdout, everything else to stderr. A result is one
of three shapes, and :meth:`OutputManager.render_result` picks the
rendering from the shape:

* an :class:`httpx.Response` (the action ran with ``raw: True``) -- the
  status line goes to stderr, the decoded body to stdout;
* a dry-run payload (``{"dry_run": True, "method", "url", "body"}``) --
  the request line and its JSON body;
* anything else -- the decoded payload, as JSON, tab-separated text or
  highlighted JSON depending on the format.

Library code (the invoker, the transports) logs through :func:`debug`,
which is silent unless a verbose :class:`OutputManager` has been
installed with :func:`set_output`. Colour follows ``NO_COLOR``,
``TERM=dumb`` and the ``--no-color`` flag.
"""

from __future__ import annotations

import json
import os
import sys
from enum import Enum
from typing import Any, Optional

import httpx
from rich.console import Console
from rich.markup import escape
from rich.syntax import Syntax
from rich.table import Table


class OutputFormat(str, Enum):
    """How results are written to stdout.

    ``AUTO`` resolves to ``RICH`` on an interactive TTY with colour
    enabled, and to ``PLAIN`` otherwise.
    """

    AUTO = "auto"
    JSON = "json"
    PLAIN = "plain"
    RICH = "rich"


def is_dry_run(result: Any) -> bool:
    """True for the synthetic payload a dry-run transport returns."""
    return isinstance(result, dict) and result.get("dry_run") is True


class OutputManager:
    """Writes action results to stdout and diagnostics to stderr.

    Args:
        format: Result format. ``AUTO`` resolves based on TTY detection.
        no_color: Disable colour and Rich markup.
        quiet: Suppress :meth:`info` messages.
        verbose: Show :meth:`debug` messages.
    """

    def __init__(
        self,
        format: OutputFormat = OutputFormat.AUTO,
        no_color: bool = False,
        quiet: bool = False,
        verbose: bool = False,
    ) -> None:
        self._no_color = no_color or _should_disable_color()
        self._quiet = quiet
        self._verbose = verbose

        if format == OutputFormat.AUTO:
            rich_ok = _is_tty() and not self._no_color
            self._format = OutputFormat.RICH if rich_ok else OutputFormat.PLAIN
        else:
            self._format = format

        self._stdout = Console(
            file=sys.stdout,
            no_color=self._no_color,
            force_terminal=(self._format == OutputFormat.RICH),
        )
        self._stderr = Console(file=sys.stderr, no_color=self._no_color, stderr=True)

    @property
    def format(self) -> OutputFormat:
        return self._format

    # ------------------------------------------------------------------ #
    # Results (stdout)
    # ------------------------------------------------------------------ #

    def render_result(self, result: Any) -> None:
        """Write one action result to stdout in the active format."""
        if isinstance(result, httpx.Response):
            self._render_response(result)
        elif is_dry_run(result):
            self._render_dry_run(result)
        else:
            self._render_data(result)

    def print_table(
        self,
        headers: list[str],
        rows: list[list[str]],
        title: Optional[str] = None,
    ) -> None:
        """Write rows as a Rich table, a JSON array of objects, or TSV."""
        if self._format == OutputFormat.JSON:
            records = [dict(zip(headers, row)) for row in rows]
            self._emit(json.dumps(records, indent=2, ensure_ascii=False))
        elif self._format == OutputFormat.PLAIN:
            for row in [headers, *rows]:
                self._emit("\t".join(row))
        else:
            table = Table(title=title, show_header=True, header_style="bold cyan")
            for header in headers:
                table.add_column(header)
            for row in rows:
                table.add_row(*(escape(cell) for cell in row))
            self._stdout.print(table)

    # ------------------------------------------------------------------ #
    # Diagnostics (stderr)
    # ------------------------------------------------------------------ #

    def info(self, message: str) -> None:
        """Status line. Suppressed by ``--quiet``; printed without markup."""
        if self._quiet:
            return
        if self._no_color:
            print(message, file=sys.stderr, flush=True)
        else:
            self._stderr.print(message, markup=False, highlight=False)

    def error(self, message: str) -> None:
        """Error line. Never suppressed."""
        if self._no_color:
            print(f"Error: {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[bold red]Error:[/bold red] {escape(message)}")

    def debug(self, message: str) -> None:
        """Trace line, shown only with ``--verbose``."""
        if not self._verbose:
            return
        if self._no_color:
            print(f"[debug] {message}", file=sys.stderr, flush=True)
        else:
            self._stderr.print(f"[dim]\\[debug] {escape(message)}[/dim]")

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _emit(self, text: str) -> None:
        print(text, file=sys.stdout, flush=True)

    def _render_response(self, response: httpx.Response) -> None:
        self.info(f"HTTP {response.status_code} {response.reason_phrase}".rstrip())
        if not response.content:
            return
        try:
            data = response.json()
        except ValueError:
            data = response.text
        self._render_data(data)

    def _render_dry_run(self, payload: dict[str, Any]) -> None:
        if self._format == OutputFormat.JSON:
            self._render_data(payload)
            return
        self._emit(f"{payload.get('method')} {payload.get('url')}")
        body = payload.get("body")
        if body is None:
            return
        try:
            body = json.loads(body)
        except (json.JSONDecodeError, TypeError):
            self._emit(str(body))
            return
        if self._format == OutputFormat.RICH:
            self._render_data(body)
        else:
            self._emit(json.dumps(body, indent=2, ensure_ascii=False))

    def _render_data(self, data: Any) -> None:
        if isinstance(data, str):
            try:
                data = json.loads(data)
            except json.JSONDecodeError:
                pass
        if self._format == OutputFormat.JSON:
            self._emit(json.dumps(data, indent=2, ensure_ascii=False, default=str))
        elif self._format == OutputFormat.PLAIN:
            self._render_plain(data)
        elif isinstance(data, (dict, list)):
            text = json.dumps(data, indent=2, ensure_ascii=False, default=str)
            self._stdout.print(Syntax(text, "json", theme="monokai", word_wrap=True))
        elif data is not None:
            self._stdout.print(str(data), markup=False)

    def _render_plain(self, data: Any) -> None:
        if isinstance(data, dict):
            for key, value in data.items():
                self._emit(f"{key}\t{value}")
        elif isinstance(data, list):
            for item in data:
                if isinstance(item, dict):
                    self._emit("\t".join(str(v) for v in item.values()))
                else:
                    self._emit(str(item))
        elif data is not None:
            self._emit(str(data))


# ------------------------------------------------------------------ #
# Module-level helpers
# ------------------------------------------------------------------ #


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _should_disable_color() -> bool:
    """True when ``NO_COLOR`` is set (any value) or ``TERM=dumb``."""
    if os.environ.get("NO_COLOR") is not None:
        return True
    return os.environ.get("TERM") == "dumb"


_output: Optional[OutputManager] = None


def get_output() -> OutputManager:
    """Return the global :class:`OutputManager`, creating a default one lazily."""
    global _output
    if _output is None:
        _output = OutputManager()
    return _output


def set_output(output: OutputManager) -> None:
    global _output
    _output = output


def reset_output() -> None:
    """Drop the global :class:`OutputManager` (used between tests)."""
    global _output
    _output = None


def render_result(result: Any) -> None:
    get_output().render_result(result)


def info(message: str) -> None:
    get_output().info(message)


def error(message: str) -> None:
    get_output().error(message)


def debug(message: str) -> None:
    get_output().debug(message)
