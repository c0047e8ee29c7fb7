"""Canonical Pydantic models shared across all restactions modules.

This is the single source of truth for data shapes in the project. The
models fall into three groups:

**Action models** -- the declarative input of the pipeline:
    :class:`ActionDescriptor` and :class:`Modifiers`.

**Session model** -- the explicit snapshot of ambient state consulted on
every invocation: :class:`SessionState`.

**Configuration models** -- serialised as JSON in the user's config
directory or read from definition files: :class:`RequestConfig`,
:class:`ClientConfig`, and :class:`ResourceDefinition`.

All models use Pydantic v2. :class:`ActionDescriptor` uses
``extra="allow"`` so that transport options (``headers``, ``base``,
``raw``, ``throw``, ...) are preserved verbatim in ``model_extra``.
"""

from __future__ import annotations

from typing import Any, Callable, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


# --- Action models ---


HOOK_FIELDS = frozenset({"get_map", "put_map", "context"})
"""Descriptor fields holding transform callables, never forwarded to the transport."""


class ActionDescriptor(BaseModel):
    """Declarative record describing one remote operation.

    ``method`` and ``uri`` are optional at the model level so that a
    partially specified entry can be reported with a precise
    :class:`~restactions.exceptions.ConfigError` by
    :func:`~restactions.actions.merge_actions` instead of a raw
    validation error.

    Hook fields accept their camelCase spelling (``getMap``, ``putMap``)
    so that tables written for JavaScript clients can be reused as-is.

    Example::

        ActionDescriptor(
            method="POST",
            uri="/:controller/check",
            get_map=lambda data: {**data, "checked": True},
            headers={"X-Trace": "1"},
        )
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    method: Optional[str] = Field(default=None, description="HTTP verb")
    uri: Optional[str] = Field(
        default=None, description="URI template with :name placeholders"
    )
    get_map: Optional[Callable[..., Any]] = Field(
        default=None, alias="getMap", description="Response transform"
    )
    put_map: Optional[Callable[..., Any]] = Field(
        default=None, alias="putMap", description="Outgoing field transform"
    )
    nomap: bool = Field(default=False, description="Suppress map hooks")
    context: Optional[Callable[..., Any]] = Field(
        default=None, description="Outgoing field-set transform"
    )
    action: Optional[str] = Field(
        default=None, description="Resolved action name, stamped at merge time"
    )

    @field_validator("method")
    @classmethod
    def _upper_method(cls, value: Optional[str]) -> Optional[str]:
        return value.upper() if isinstance(value, str) else value

    def is_set(self, field: str) -> bool:
        """Return ``True`` if *field* was given explicitly (even as ``None``)."""
        return field in self.model_fields_set

    def transport_options(self) -> dict[str, Any]:
        """Return the descriptor as request arguments for the transport.

        Hook callables and the ``nomap`` switch are pipeline concerns and
        are left out; every other declared or extra field is included.
        """
        data = self.model_dump(exclude=set(HOOK_FIELDS) | {"nomap"})
        return {k: v for k, v in data.items() if v is not None}


class Modifiers(BaseModel):
    """Resource-wide settings applied while resolving an action table.

    Attributes:
        group: Use the group default actions (the default). ``False``
            selects no defaults unless ``base`` is given explicitly.
        base: ``"singleton"`` selects the singleton defaults, ``"none"``
            disables defaults entirely. An explicit ``base`` wins over
            ``group``.
        get_map: Response transform backfilled into default actions.
        put_map: Outgoing field transform backfilled into default actions.
        context: Field-set transform backfilled into default actions.
        service: URI prefix prepended to every expanded path unless the
            template places it itself via ``:service``.
    """

    model_config = ConfigDict(populate_by_name=True)

    group: bool = True
    base: Literal["group", "singleton", "none"] = "group"
    get_map: Optional[Callable[..., Any]] = Field(default=None, alias="getMap")
    put_map: Optional[Callable[..., Any]] = Field(default=None, alias="putMap")
    context: Optional[Callable[..., Any]] = None
    service: Optional[str] = None


# --- Session ---


class SessionState(BaseModel):
    """Read-only snapshot of session metadata attached to every request.

    Replaces process-wide application state: the resource receives one
    of these at construction (or per call) and never reaches for globals.
    """

    model_config = ConfigDict(frozen=True)

    auth_token: Optional[str] = Field(
        default=None, description="Sent as the Authorization header"
    )
    token: Optional[str] = Field(
        default=None, description="Sent as 'token' inside the wire body"
    )
    assume: Optional[Any] = Field(
        default=None, description="Assumed-identity flag merged into options"
    )
    logging: Optional[bool] = Field(
        default=None, description="Server-side logging flag merged into options"
    )
    api: Optional[str] = Field(default=None, description="API base URL")
    version: Optional[str] = Field(
        default=None, description="Protocol version stamped into the wire body"
    )


# --- Configuration ---


class RequestConfig(BaseModel):
    """Default HTTP settings used by :class:`~restactions.transport.HttpxTransport`."""

    timeout: int = Field(default=30, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    max_retries: int = Field(default=3, description="Max retry attempts")


class ClientConfig(BaseModel):
    """User-wide configuration persisted at ``~/.config/restactions/config.json``.

    Loaded and saved by :func:`~restactions.config.load_global_config` and
    :func:`~restactions.config.save_global_config`. See
    :func:`~restactions.config.resolve_config` for the precedence chain and
    :func:`~restactions.config.build_session` for how it becomes a
    :class:`SessionState`.
    """

    api: Optional[str] = Field(default=None, description="API base URL")
    version: Optional[str] = Field(default=None, description="Protocol version")
    service: Optional[str] = Field(
        default=None, description="Default service prefix for all resources"
    )
    logging: bool = Field(default=False, description="Ask the server to log requests")
    assume: Optional[str] = Field(default=None, description="Assumed identity")
    token_source: Optional[str] = Field(
        default=None, description="Credential source for the body token (env:VAR, file:/path, prompt)"
    )
    auth_source: Optional[str] = Field(
        default=None, description="Credential source for the Authorization header"
    )
    request: RequestConfig = Field(default_factory=RequestConfig)


class ResourceDefinition(BaseModel):
    """One resource declared in a JSON/YAML definition file.

    Produced by :func:`~restactions.loader.load_definitions`. Hooks cannot
    be expressed in a file, so only the declarative parts are carried.
    """

    name: str
    actions: dict[str, dict[str, Any]] = Field(default_factory=dict)
    modifiers: Modifiers = Field(default_factory=Modifiers)

    def build(self, transport: Any, session: Optional[SessionState] = None) -> Any:
        """Construct a :class:`~restactions.resource.Resource` from this definition."""
        from restactions.resource import Resource

        return Resource(
            self.name,
            self.actions,
            self.modifiers,
            transport=transport,
            session=session,
        )
