"""List the resolved action tables of declared resources.

Resolution runs the same merge as application code, so the listing shows
exactly which defaults a resource inherits, which entries were overridden,
and where each action's URI expands to.
"""

from __future__ import annotations

from typing import Optional

import typer

from restactions.exceptions import RestActionsError
from restactions.output import error, get_output


def actions_command(
    file: str = typer.Argument(help="Resource definition file (JSON or YAML)."),
    resource: Optional[str] = typer.Argument(
        None, help="Only list this resource."
    ),
) -> None:
    """List resolved actions.

    Example::

        restactions actions resources.yaml
        restactions --json actions resources.yaml user
    """
    from restactions.actions import RawAction
    from restactions.loader import load_definitions
    from restactions.routes import expand_uri, placeholders
    from restactions.transport import HttpxTransport

    try:
        definitions = load_definitions(file)
        if resource is not None:
            if resource not in definitions:
                error(f"Resource '{resource}' is not defined in {file}")
                raise typer.Exit(code=2)
            definitions = {resource: definitions[resource]}
        resources = [d.build(HttpxTransport()) for d in definitions.values()]
    except RestActionsError as exc:
        error(str(exc))
        raise typer.Exit(code=exc.exit_code) from None

    headers = ["Resource", "Action", "Method", "URI", "Path", "Params", "Nomap"]
    rows: list[list[str]] = []
    for res in resources:
        for name, entry in res.table.items():
            if isinstance(entry, RawAction):
                rows.append([res.name, name, "-", "-", "-", "-", ""])
                continue
            params = [p for p in placeholders(entry.uri) if p not in ("controller", "service")]
            rows.append([
                res.name,
                name,
                entry.method,
                entry.uri,
                expand_uri(entry.uri, res.name, service=res.service),
                ", ".join(params) or "-",
                "Yes" if entry.nomap else "",
            ])

    get_output().print_table(headers, rows, title=f"Actions ({len(rows)})")
