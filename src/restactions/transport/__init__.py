"""Transports -- the collaborators that actually issue HTTP requests.

The action pipeline only ever sees the :class:`Transport` interface:
``await transport.fetch(uri, args)``. This package provides:

Classes:
    :class:`Transport` -- abstract base every transport extends.
    :class:`HttpxTransport` -- non-blocking transport backed by
        :class:`httpx.AsyncClient` with retry, error mapping and dry-run.

Example::

    from restactions.transport import HttpxTransport

    async with HttpxTransport(config.request, base_url=config.api) as transport:
        users = Resource("user", transport=transport)
        await users.get({"id": 7})
"""

from restactions.transport.base import Transport
from restactions.transport.httpx_transport import HttpxTransport

__all__ = ["Transport", "HttpxTransport"]
