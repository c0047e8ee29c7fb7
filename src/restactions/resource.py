"""The per-resource facade exposing one async callable per action.

Usage::

    users = Resource(
        "User",
        {
            "check": {"method": "POST", "uri": "/:controller/check"},
            "login": {"method": "POST", "uri": "/:controller/login", "nomap": True},
        },
        Modifiers(get_map=hydrate_user),
        transport=transport,
        session=SessionState(auth_token=token),
    )

    await users.get({"id": 7})                  # attribute dispatch
    await users.call("find", {}, {"limit": 10})  # explicit dispatch
    await users["check"]({"email": email})       # item dispatch

The table is resolved once, at construction, by
:func:`~restactions.actions.merge_actions`. Malformed descriptors, and
action names that the facade's own attributes would hide, fail there with
a :class:`~restactions.exceptions.ConfigError`.
"""

from __future__ import annotations

import uuid
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional, Union

from restactions.actions import ActionTable, RawAction, merge_actions
from restactions.exceptions import ConfigError, UnknownActionError
from restactions.invoker import ActionInvoker
from restactions.models import Modifiers, SessionState
from restactions.transport.base import Transport


def new_client_id() -> str:
    """Return a process-unique client identity."""
    return str(uuid.uuid4())


def to_title(name: str) -> str:
    """Display form of a resource name: ``"user"`` -> ``"User"``."""
    return name[:1].upper() + name[1:]


class Resource:
    """Facade over one remote resource.

    Args:
        name: Resource (controller) name. Stored lower-cased.
        actions: Custom action table. Values may be descriptors, dicts of
            descriptor fields, or plain callables installed verbatim.
        modifiers: Resource-wide settings, as a :class:`Modifiers` or a
            dict of its fields.
        transport: The transport every action calls.
        session: Session snapshot attached to every request.
        id_factory: Zero-argument callable producing the client identity.

    Raises:
        ConfigError: If a descriptor is malformed or an action name is
            one of :data:`RESERVED_NAMES`.
    """

    def __init__(
        self,
        name: str,
        actions: Optional[Mapping[str, Any]] = None,
        modifiers: Union[Modifiers, Mapping[str, Any], None] = None,
        *,
        transport: Transport,
        session: Optional[SessionState] = None,
        id_factory: Callable[[], str] = new_client_id,
    ) -> None:
        if modifiers is None:
            modifiers = Modifiers()
        elif not isinstance(modifiers, Modifiers):
            modifiers = Modifiers.model_validate(dict(modifiers))

        self.name = name.lower()
        self.model = to_title(name)
        self.client_id = id_factory()
        self.modifiers = modifiers
        self.transport = transport
        self.session = session or SessionState()

        self._table: ActionTable = merge_actions(actions, modifiers)
        clashes = sorted(set(self._table) & RESERVED_NAMES)
        if clashes:
            raise ConfigError(
                f"Action '{clashes[0]}' of resource '{self.name}' collides with a "
                f"Resource attribute"
            )
        self._invokers: dict[str, Callable[..., Any]] = {}
        for action, entry in self._table.items():
            if isinstance(entry, RawAction):
                self._invokers[action] = entry.func
            else:
                self._invokers[action] = ActionInvoker(self, entry)

    @property
    def service(self) -> Optional[str]:
        return self.modifiers.service

    @property
    def table(self) -> Mapping[str, Any]:
        """The resolved action table (read-only view)."""
        return MappingProxyType(self._table)

    @property
    def actions(self) -> Mapping[str, Callable[..., Any]]:
        """Action name -> callable (read-only view)."""
        return MappingProxyType(self._invokers)

    def __contains__(self, action: object) -> bool:
        return action in self._invokers

    def __iter__(self):
        return iter(self._invokers)

    def __getitem__(self, action: str) -> Callable[..., Any]:
        try:
            return self._invokers[action]
        except KeyError:
            raise UnknownActionError(
                f"Resource '{self.name}' has no action '{action}'"
            ) from None

    def __getattr__(self, action: str) -> Callable[..., Any]:
        # Only reached for names that are not real attributes.
        if action.startswith("_"):
            raise AttributeError(action)
        return self[action]

    def __repr__(self) -> str:
        return f"<Resource {self.name} actions={sorted(self._invokers)}>"

    async def call(
        self,
        action: str,
        fields: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Invoke *action* by name.

        Raises:
            UnknownActionError: If the table has no such action.
        """
        return await self[action](fields, options)


RESERVED_NAMES = frozenset(
    {attr for attr in dir(Resource) if not attr.startswith("_")}
    | {"name", "model", "client_id", "modifiers", "transport", "session"}
)
"""Names an action may not take because the facade itself uses them."""
