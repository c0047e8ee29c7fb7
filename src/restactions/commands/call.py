"""Invoke one action of a declared resource over HTTP.

Fields and options are given as repeated ``key=value`` pairs. Values are
decoded as JSON when possible (``limit=10`` is an integer, ``tags=["a"]``
a list) and kept as strings otherwise.
"""

from __future__ import annotations

import asyncio
import json
from typing import Any, Optional

import typer

from restactions.exceptions import RestActionsError
from restactions.output import debug, error, render_result


def call_command(
    ctx: typer.Context,
    file: str = typer.Argument(help="Resource definition file (JSON or YAML)."),
    resource: str = typer.Argument(help="Resource name."),
    action: str = typer.Argument(help="Action name."),
    field: Optional[list[str]] = typer.Option(
        None, "--field", "-f", help="Field as key=value (repeatable)."
    ),
    option: Optional[list[str]] = typer.Option(
        None, "--option", "-O", help="Option as key=value (repeatable)."
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", "-n", help="Print the request instead of sending it."
    ),
) -> None:
    """Call an action and print its result.

    Example::

        restactions call resources.yaml user get -f id=7
        restactions call resources.yaml user find -O limit=10 -O offset=20
    """
    from restactions.config import build_session, resolve_config
    from restactions.loader import load_definitions

    obj = ctx.obj or {}
    try:
        fields = parse_pairs(field or [])
        options = parse_pairs(option or [])
        definitions = load_definitions(file)
        if resource not in definitions:
            error(f"Resource '{resource}' is not defined in {file}")
            raise typer.Exit(code=2)
        config = resolve_config(cli_api=obj.get("api"))
        session = build_session(config)
        result = asyncio.run(
            _invoke(definitions[resource], action, fields, options, config, session, dry_run)
        )
    except RestActionsError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    render_result(result)


async def _invoke(
    definition: Any,
    action: str,
    fields: dict[str, Any],
    options: dict[str, Any],
    config: Any,
    session: Any,
    dry_run: bool,
) -> Any:
    from restactions.transport import HttpxTransport

    if config.service and definition.modifiers.service is None:
        modifiers = definition.modifiers.model_copy(update={"service": config.service})
        definition = definition.model_copy(update={"modifiers": modifiers})

    async with HttpxTransport(config.request, base_url=config.api, dry_run=dry_run) as transport:
        resource = definition.build(transport, session)
        debug(f"Calling {resource.model}.{action} (client {resource.client_id})")
        return await resource.call(action, fields or None, options or None)


def parse_pairs(pairs: list[str]) -> dict[str, Any]:
    """Parse ``key=value`` strings, decoding JSON values where possible.

    Raises:
        RestActionsError: If a pair has no ``=`` or an empty key.
    """
    result: dict[str, Any] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise RestActionsError(f"Expected key=value, got: {pair}", exit_code=2)
        result[key] = _parse_value(value)
    return result


def _parse_value(value: str) -> Any:
    try:
        return json.loads(value)
    except (json.JSONDecodeError, TypeError):
        return value
