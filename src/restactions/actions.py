"""Default action tables and the merge that resolves a resource's table.

A resource's action table is assembled in layers, highest precedence last:

1. **Base** -- the default actions for the resource kind
   (:data:`GROUP_ACTIONS`, :data:`SINGLETON_ACTIONS`, or nothing), deep
   copied so resolution never corrupts the shared defaults.
2. **Custom** -- caller-supplied entries. A custom entry replaces the base
   entry of the same name wholesale; descriptors are never merged field
   by field.
3. **Modifiers** -- resource-wide ``get_map``/``put_map``/``context``
   hooks, backfilled only into entries the caller did not supply and only
   where the entry left the hook absent.

Each resolved entry is either an :class:`~restactions.models.ActionDescriptor`
or a :class:`RawAction` wrapping a caller-supplied callable that bypasses
the request pipeline entirely.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Union

from restactions.exceptions import ConfigError
from restactions.models import ActionDescriptor, Modifiers

logger = logging.getLogger(__name__)


GROUP_ACTIONS: dict[str, ActionDescriptor] = {
    "create": ActionDescriptor(method="POST", uri="/:controller/create"),
    "get": ActionDescriptor(method="POST", uri="/:controller/get"),
    "init": ActionDescriptor(method="POST", uri="/:controller/init"),
    "find": ActionDescriptor(method="POST", uri="/:controller/find"),
    "remove": ActionDescriptor(method="POST", uri="/:controller/remove", nomap=True),
    "update": ActionDescriptor(method="POST", uri="/:controller/update"),
}
"""Defaults for resources holding many records."""

SINGLETON_ACTIONS: dict[str, ActionDescriptor] = {
    "create": ActionDescriptor(method="POST", uri="/:controller/create"),
    "get": ActionDescriptor(method="POST", uri="/:controller/get"),
    "init": ActionDescriptor(method="POST", uri="/:controller/init"),
    "remove": ActionDescriptor(method="POST", uri="/:controller/remove", nomap=True),
    "update": ActionDescriptor(method="POST", uri="/:controller/update"),
}
"""Defaults for resources holding exactly one record."""


@dataclass(frozen=True)
class RawAction:
    """A caller-supplied callable installed as an action verbatim.

    No URI expansion, body composition or hook backfill is applied.
    """

    func: Callable[..., Any]


ActionEntry = Union[ActionDescriptor, RawAction]
ActionTable = dict[str, ActionEntry]


def base_actions(modifiers: Modifiers) -> dict[str, ActionDescriptor]:
    """Select the default table for the resource kind described by *modifiers*."""
    if modifiers.base == "singleton":
        return SINGLETON_ACTIONS
    if modifiers.base == "none":
        return {}
    if not modifiers.group and "base" not in modifiers.model_fields_set:
        return {}
    return GROUP_ACTIONS


def to_entry(name: str, value: Any) -> ActionEntry:
    """Normalise one custom table value into a tagged table entry.

    Accepts an :class:`ActionDescriptor`, a :class:`RawAction`, a plain
    callable, or a mapping of descriptor fields.

    Raises:
        ConfigError: If *value* is none of the above.
    """
    if isinstance(value, (ActionDescriptor, RawAction)):
        return value
    if isinstance(value, Mapping):
        try:
            return ActionDescriptor.model_validate(dict(value))
        except ValueError as exc:
            raise ConfigError(f"Invalid descriptor for action '{name}': {exc}") from exc
    if callable(value):
        return RawAction(value)
    raise ConfigError(
        f"Action '{name}' must be a descriptor or a callable "
        f"(got {type(value).__name__})"
    )


def merge_actions(
    custom: Optional[Mapping[str, Any]] = None,
    modifiers: Optional[Modifiers] = None,
) -> ActionTable:
    """Resolve the action table for one resource.

    Args:
        custom: Caller-supplied entries keyed by action name.
        modifiers: Resource-wide settings. Defaults to group actions with
            no hooks.

    Returns:
        A fresh table. Every descriptor has ``action`` set to its key.

    Raises:
        ConfigError: If an entry cannot be normalised, or a descriptor is
            missing its ``method`` or ``uri``.
    """
    modifiers = modifiers or Modifiers()
    custom = dict(custom or {})

    table: ActionTable = {
        name: descriptor.model_copy(deep=True)
        for name, descriptor in base_actions(modifiers).items()
    }
    for name, value in custom.items():
        entry = to_entry(name, value)
        if isinstance(entry, ActionDescriptor):
            entry = entry.model_copy(deep=True)
        if name in table:
            logger.debug("Custom action '%s' replaces the default", name)
        table[name] = entry

    for name, entry in table.items():
        if isinstance(entry, RawAction):
            continue
        if name not in custom:
            _backfill(entry, modifiers)
        entry.action = name
        _validate(name, entry)

    return table


def _backfill(descriptor: ActionDescriptor, modifiers: Modifiers) -> None:
    """Fill absent hooks on a default descriptor from resource-wide modifiers."""
    if not descriptor.nomap:
        if modifiers.get_map is not None and not descriptor.is_set("get_map"):
            descriptor.get_map = modifiers.get_map
        if modifiers.put_map is not None and not descriptor.is_set("put_map"):
            descriptor.put_map = modifiers.put_map
    if modifiers.context is not None and not descriptor.is_set("context"):
        descriptor.context = modifiers.context


def _validate(name: str, descriptor: ActionDescriptor) -> None:
    for field in ("method", "uri"):
        if not getattr(descriptor, field):
            raise ConfigError(f"Action '{name}' is missing '{field}'")
