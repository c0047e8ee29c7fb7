"""URI template expansion for action descriptors.

Action URIs are templates such as ``/:controller/:id/archive``. Every
placeholder is a colon followed by word characters and is replaced by:

* ``:controller`` -- the lower-cased resource name,
* ``:service`` -- the resource's service name,
* anything else -- the caller field of the same name.

Expansion is permissive: a placeholder that cannot be resolved becomes the
empty string rather than an error, so optional path segments simply
collapse.

When the resource has a service configured, the expanded path is prefixed
with ``/<service>`` unless the template already placed the service itself
through ``:service``.
"""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional

PLACEHOLDER_RE = re.compile(r":(\w+)")
"""Lexical shape of a template placeholder."""


def expand_uri(
    template: str,
    name: str,
    fields: Optional[Mapping[str, Any]] = None,
    service: Optional[str] = None,
) -> str:
    """Expand a URI template into a concrete path.

    Args:
        template: URI template containing ``:name`` placeholders.
        name: Resource (controller) name substituted for ``:controller``.
        fields: Caller fields used to resolve all other placeholders.
            ``None`` values count as unresolved.
        service: Optional service name. Substituted for ``:service`` or
            prepended to the result.

    Returns:
        The expanded path.

    Example::

        expand_uri("/:controller/:id", "User", {"id": 7})
        # "/user/7"
        expand_uri("/:controller/get", "user", service="billing")
        # "/billing/user/get"
    """
    fields = fields or {}
    service_override = False

    def _resolve(match: re.Match[str]) -> str:
        nonlocal service_override
        token = match.group(1)
        if token == "controller":
            return name.lower()
        if token == "service":
            if service:
                service_override = True
                return service
            return ""
        return _segment(fields.get(token))

    path = PLACEHOLDER_RE.sub(_resolve, template)

    if service and not service_override:
        path = _join_prefix(service, path)
    return path


def _segment(value: Any) -> str:
    """Path spelling of a field value. Booleans use their JSON spelling."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _join_prefix(service: str, path: str) -> str:
    """Prepend ``/<service>`` to *path* with exactly one slash between them."""
    prefix = "/" + service.strip("/")
    if not path:
        return prefix
    if not path.startswith("/"):
        path = "/" + path
    return prefix + path


def placeholders(template: str) -> list[str]:
    """Return the placeholder names of *template* in order of appearance."""
    return PLACEHOLDER_RE.findall(template)
