"""Request preparation: field stages, wire body composition and encoding.

This module turns one invocation's ``(fields, options)`` envelope into the
``(uri, args)`` pair handed to the transport. Three pieces cooperate:

* :class:`FieldStage` / :func:`run_stages` -- the outgoing field set flows
  through an ordered pipeline of named transforms (``fields`` drops unset
  values, ``put_map`` reshapes, ``context`` injects scoping). Each stage
  may be synchronous or return an awaitable.
* :func:`compose_body` -- builds the wire body
  ``{fields?, options?, token?, version?}``. Options are a whitelist
  projection: transport knobs such as ``headers`` or ``progress`` stay in
  the request arguments and never reach the server-visible body.
* :func:`encode_request` -- method-dependent encoding. POST carries the
  JSON body; every other method appends the percent-encoded JSON to the
  URI and flags ``_encoded_json_`` in the arguments.

:func:`prepare_request` ties these together with
:func:`~restactions.routes.expand_uri`.
"""

from __future__ import annotations

import inspect
import json
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Mapping, Optional, Union
from urllib.parse import quote

from restactions.models import ActionDescriptor, SessionState
from restactions.routes import expand_uri


OPTION_WHITELIST = ("offset", "limit", "filter", "clientId", "logging", "assume", "create")
"""Option keys the server is allowed to see inside the wire body."""

ENCODED_JSON_FLAG = "_encoded_json_"
"""Request-argument flag marking a body carried in the query string."""

JSON_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}

Transform = Callable[[Any], Union[Any, Awaitable[Any]]]


async def resolve(value: Any) -> Any:
    """Await *value* if it is awaitable, otherwise return it unchanged."""
    if inspect.isawaitable(value):
        return await value
    return value


# --- Field stages ---


@dataclass(frozen=True)
class FieldStage:
    """One named transform in the outgoing field pipeline.

    Attributes:
        name: Stage label (``"fields"``, ``"put_map"``, ``"context"``).
        func: ``(fields) -> fields`` or its async equivalent.
        skip_empty: Leave an empty field set untouched instead of
            running *func* on it.
    """

    name: str
    func: Transform
    skip_empty: bool = False


def drop_unset(fields: Mapping[str, Any]) -> dict[str, Any]:
    """Copy *fields*, dropping ``None`` values (unset, not cleared)."""
    return {k: v for k, v in fields.items() if v is not None}


def field_stages(descriptor: ActionDescriptor) -> list[FieldStage]:
    """Return the ordered field pipeline for *descriptor*."""
    stages = [FieldStage("fields", drop_unset)]
    if descriptor.put_map is not None and not descriptor.nomap:
        stages.append(FieldStage("put_map", descriptor.put_map, skip_empty=True))
    if descriptor.context is not None:
        stages.append(FieldStage("context", descriptor.context))
    return stages


async def run_stages(stages: list[FieldStage], fields: Mapping[str, Any]) -> Any:
    """Thread *fields* through *stages* in order, awaiting async stages."""
    payload: Any = fields
    for stage in stages:
        if stage.skip_empty and not payload:
            continue
        payload = await resolve(stage.func(payload))
    return payload


# --- Body composition ---


async def compose_body(
    descriptor: ActionDescriptor,
    fields: Optional[Mapping[str, Any]],
    options: Optional[Mapping[str, Any]],
    session: SessionState,
    client_id: str,
) -> dict[str, Any]:
    """Build the wire body for one invocation.

    Args:
        descriptor: The resolved action descriptor.
        fields: Caller fields. ``None`` values are dropped.
        options: Caller options. Never mutated.
        session: Ambient session snapshot.
        client_id: The resource's client identity.

    Returns:
        The wire body. ``options`` in it is the whitelist projection of
        the caller options plus ambient defaults and ``clientId``.
    """
    body: dict[str, Any] = {}

    body_fields = await run_stages(field_stages(descriptor), fields or {})
    if body_fields:
        body["fields"] = body_fields

    effective = dict(options or {})
    if session.logging and effective.get("logging") is None:
        effective["logging"] = session.logging
    if session.assume is not None and effective.get("assume") is None:
        effective["assume"] = session.assume
    effective["clientId"] = client_id

    projected = {k: effective[k] for k in OPTION_WHITELIST if k in effective}
    if projected:
        body["options"] = projected

    if session.token:
        body["token"] = session.token
    if session.version:
        body["version"] = session.version

    return body


def serialize_body(body: Mapping[str, Any]) -> str:
    """Serialize *body* to compact JSON, deterministic for equal inputs.

    Raises:
        TypeError: If a field or option value is not JSON serializable.
    """
    return json.dumps(body, separators=(",", ":"), ensure_ascii=False)


def encode_request(method: str, uri: str, body: Mapping[str, Any], args: dict[str, Any]) -> str:
    """Attach *body* to the request according to *method*.

    An empty body (zero keys) is not encoded at all. For ``POST`` the JSON
    string is stored in ``args["body"]``. Any other method gets the
    percent-encoded JSON appended to *uri* and ``_encoded_json_`` set in
    *args*.

    Returns:
        The (possibly extended) URI.
    """
    if len(body) == 0:
        return uri
    payload = serialize_body(body)
    if method.upper() == "POST":
        args["body"] = payload
        return uri
    sep = "&" if "?" in uri else "?"
    args[ENCODED_JSON_FLAG] = True
    return f"{uri}{sep}{quote(payload, safe='')}"


# --- Request preparation ---


@dataclass
class PreparedRequest:
    """Final transport input for one invocation."""

    uri: str
    args: dict[str, Any] = field(default_factory=dict)
    body: dict[str, Any] = field(default_factory=dict)


async def prepare_request(
    descriptor: ActionDescriptor,
    fields: Optional[Mapping[str, Any]],
    options: Optional[Mapping[str, Any]],
    *,
    name: str,
    client_id: str,
    session: Optional[SessionState] = None,
    service: Optional[str] = None,
) -> PreparedRequest:
    """Expand the route and compose the body for one invocation.

    The request arguments start as the descriptor's transport options
    overlaid with the caller's *options* (caller wins), then gain the JSON
    headers, an ``Authorization`` header when the session carries an auth
    token, and the session's base URL unless a ``base`` was given.
    """
    session = session or SessionState()
    args: dict[str, Any] = {**descriptor.transport_options(), **(options or {})}

    uri = expand_uri(descriptor.uri or "", name, fields, service)
    body = await compose_body(descriptor, fields, options, session, client_id)
    method = str(args.get("method") or descriptor.method or "GET").upper()
    args["method"] = method
    uri = encode_request(method, uri, body, args)

    headers = dict(args.get("headers") or {})
    headers.update(JSON_HEADERS)
    if session.auth_token:
        headers["Authorization"] = session.auth_token
    args["headers"] = headers
    if session.api and not args.get("base"):
        args["base"] = session.api

    return PreparedRequest(uri=uri, args=args, body=body)
