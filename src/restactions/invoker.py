"""The callable synthesized for each resolved action descriptor.

An :class:`ActionInvoker` is bound to one descriptor of one resource. Each
call prepares the request (route expansion plus body composition), hands it
to the transport, and runs the descriptor's ``get_map`` over the result.

Invokers hold no per-call state: concurrent calls build independent
envelopes, bodies and request arguments.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping, Optional

from restactions.compose import PreparedRequest, prepare_request, resolve
from restactions.models import ActionDescriptor, SessionState
from restactions.output import get_output

if TYPE_CHECKING:
    from restactions.resource import Resource


class ActionInvoker:
    """Async callable implementing one action of a :class:`~restactions.resource.Resource`.

    Args:
        resource: The owning resource (name, client identity, service,
            session and transport are read from it on every call).
        descriptor: The resolved descriptor for this action.
    """

    def __init__(self, resource: Resource, descriptor: ActionDescriptor) -> None:
        self._resource = resource
        self.descriptor = descriptor

    @property
    def name(self) -> str:
        return self.descriptor.action or ""

    def __repr__(self) -> str:
        return (
            f"<ActionInvoker {self._resource.name}.{self.name} "
            f"{self.descriptor.method} {self.descriptor.uri}>"
        )

    async def prepare(
        self,
        fields: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
        session: Optional[SessionState] = None,
    ) -> PreparedRequest:
        """Build the transport input for a call without sending it."""
        resource = self._resource
        return await prepare_request(
            self.descriptor,
            fields,
            options,
            name=resource.name,
            client_id=resource.client_id,
            session=session or resource.session,
            service=resource.service,
        )

    async def __call__(
        self,
        fields: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
        session: Optional[SessionState] = None,
    ) -> Any:
        """Invoke the action.

        Args:
            fields: Record fields. ``None`` values are not sent.
            options: Paging/filter options and per-call transport
                overrides. Keys here win over the descriptor's.
            session: Session snapshot for this call only. Defaults to
                the resource's session.

        Returns:
            The transport's result, passed through ``get_map`` when the
            descriptor has one and ``nomap`` is not set.
        """
        request = await self.prepare(fields, options, session)
        get_output().debug(
            f"{self._resource.model}.{self.name}: {request.args['method']} {request.uri}"
        )
        result = await self._resource.transport.fetch(request.uri, request.args)
        descriptor = self.descriptor
        if result is not None and descriptor.get_map is not None and not descriptor.nomap:
            result = await resolve(descriptor.get_map(result))
        return result
