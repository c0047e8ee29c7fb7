"""Abstract base class for transports.

A transport receives the fully prepared ``(uri, args)`` pair produced by
:func:`~restactions.compose.prepare_request` and performs the network
call. ``args`` carries ``method``, ``headers``, an optional ``body``
string, an optional ``base`` URL and any transport flags declared on the
action or passed by the caller (``raw``, ``throw``, ``log``, ...).

Transports own retries, timeouts, cancellation and error policy. The
action pipeline never inspects their failures.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class Transport(ABC):
    """Abstract base class for transports.

    Subclasses implement :meth:`fetch`. Implementations must be safe to
    call concurrently: the pipeline issues one ``fetch`` per invocation
    and shares the transport across every action of every resource.
    """

    @abstractmethod
    async def fetch(self, uri: str, args: dict[str, Any]) -> Any:
        """Issue the request and return its result.

        Args:
            uri: Expanded request path, possibly carrying an encoded JSON
                query blob.
            args: Request arguments (method, headers, body, flags).

        Returns:
            Whatever the transport considers the result of the call --
            typically the decoded response payload.
        """
