"""restactions -- declarative REST actions for resource facades.

Give a resource name and a table of action descriptors (HTTP method + URI
template, plus optional field/response transforms) and get back an object
with one async callable per action::

    from restactions import Resource, SessionState

    users = Resource("user", {"check": {"method": "POST", "uri": "/:controller/check"}},
                     transport=transport, session=SessionState(auth_token=token))
    record = await users.get({"id": 7})

Route expansion, JSON body composition, option whitelisting and
session metadata are handled per call; the network is left to a
:class:`~restactions.transport.Transport`.

Modules:
    routes: URI template expansion.
    actions: Default tables and the table merge.
    compose: Field stages, wire body composition and encoding.
    invoker: The callable behind each action.
    resource: The per-resource facade.
    transport: Transport interface and the httpx implementation.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and session construction.
    loader: JSON/YAML resource definition files.
    app: Typer CLI entry point.
"""

__version__ = "0.3.0"

from restactions.actions import GROUP_ACTIONS, SINGLETON_ACTIONS, RawAction, merge_actions
from restactions.exceptions import ConfigError, RestActionsError, UnknownActionError
from restactions.models import ActionDescriptor, Modifiers, SessionState
from restactions.resource import Resource
from restactions.transport import HttpxTransport, Transport

__all__ = [
    "__version__",
    "ActionDescriptor",
    "ConfigError",
    "GROUP_ACTIONS",
    "HttpxTransport",
    "Modifiers",
    "RawAction",
    "Resource",
    "RestActionsError",
    "SINGLETON_ACTIONS",
    "SessionState",
    "Transport",
    "UnknownActionError",
    "merge_actions",
]
