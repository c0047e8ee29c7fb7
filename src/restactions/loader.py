"""Load resource definitions from JSON or YAML files.

A definition file declares resources and their action tables so that the
CLI (or application code) can build :class:`~restactions.resource.Resource`
facades without writing Python::

    resources:
      user:
        modifiers: {base: group, service: api}
        actions:
          check: {method: POST, uri: /:controller/check}
          login: {method: POST, uri: /:controller/login, nomap: true}
      settings:
        modifiers: {base: singleton}

The format is auto-detected: JSON is tried first (unless the extension says
YAML), then YAML.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from restactions.exceptions import DefinitionError
from restactions.models import ResourceDefinition


def load_definitions(path: str) -> dict[str, ResourceDefinition]:
    """Load every resource declared in the file at *path*.

    Args:
        path: Path to a ``.json``, ``.yaml`` or ``.yml`` file.

    Returns:
        Resource definitions keyed by resource name, in file order.

    Raises:
        DefinitionError: If the file cannot be read or parsed, or a
            resource entry is malformed.
    """
    raw = _load_file(path)
    resources = raw.get("resources")
    if not isinstance(resources, dict):
        raise DefinitionError(f"{path}: expected a 'resources' mapping")

    result: dict[str, ResourceDefinition] = {}
    for name, entry in resources.items():
        entry = entry or {}
        if not isinstance(entry, dict):
            raise DefinitionError(f"{path}: resource '{name}' must be a mapping")
        try:
            result[name] = ResourceDefinition.model_validate({"name": name, **entry})
        except ValueError as exc:
            raise DefinitionError(f"{path}: invalid resource '{name}': {exc}") from exc
    return result


def _load_file(path: str) -> dict[str, Any]:
    """Read and parse a definition file."""
    file_path = Path(path)
    if not file_path.is_file():
        raise DefinitionError(f"Definition file not found: {path}")

    try:
        content = file_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise DefinitionError(f"Failed to read definition file {path}: {exc}") from exc

    if not content.strip():
        raise DefinitionError(f"Definition file is empty: {path}")

    suffix = file_path.suffix.lower()
    hint = ""
    if suffix == ".json":
        hint = "json"
    elif suffix in (".yaml", ".yml"):
        hint = "yaml"

    return _parse_content(content, hint=hint)


def _parse_content(content: str, hint: str = "") -> dict[str, Any]:
    """Parse content as JSON or YAML.

    Tries JSON first (unless hinted as YAML), then falls back to YAML.

    Raises:
        DefinitionError: If the content is not an object in either format.
    """
    json_error: Exception | None = None

    if hint != "yaml":
        try:
            result = json.loads(content)
        except json.JSONDecodeError as exc:
            json_error = exc
            if hint == "json":
                raise DefinitionError(f"Invalid JSON: {exc}") from exc
        else:
            if not isinstance(result, dict):
                raise DefinitionError(
                    f"Definitions must be a JSON/YAML object (got {type(result).__name__})"
                )
            return result

    try:
        result = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        msg = "Failed to parse definitions as JSON or YAML"
        if json_error:
            msg += f"\n  JSON error: {json_error}"
        msg += f"\n  YAML error: {exc}"
        raise DefinitionError(msg) from exc

    if not isinstance(result, dict):
        raise DefinitionError(
            "Definitions must be a JSON/YAML object (got "
            f"{type(result).__name__ if result is not None else 'empty document'})"
        )
    return result
