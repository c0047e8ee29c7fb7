"""Asynchronous HTTP transport backed by :class:`httpx.AsyncClient`.

:class:`HttpxTransport` is the default :class:`~restactions.transport.Transport`
used by the CLI. It resolves the base URL, sends the prepared request, and
retries with exponential backoff on 5xx responses and network errors.

Error statuses are mapped to typed exceptions
(:class:`~restactions.exceptions.AuthError`,
:class:`~restactions.exceptions.NotFoundError`,
:class:`~restactions.exceptions.ServerError`) unless the request sets
``throw: False``, in which case ``None`` is returned.

Recognised request-argument flags:

* ``base`` -- base URL overriding the transport default.
* ``noprefix`` -- send the URI as-is, without any base URL.
* ``raw`` -- return the :class:`httpx.Response` instead of its payload.
* ``noparse`` -- return the body text without JSON decoding.
* ``throw`` -- ``False`` turns error statuses into a ``None`` result.
* ``log`` -- trace request and response on the debug channel.

Presentation flags (``progress``, ``feedback``, ``clear``, ``nologout``)
belong to interactive front ends and are ignored here.
"""

from __future__ import annotations

import asyncio
from typing import Any, Optional

import httpx

from restactions.exceptions import AuthError, ConnectionError_, NotFoundError, ServerError
from restactions.models import RequestConfig
from restactions.output import get_output
from restactions.transport.base import Transport


class HttpxTransport(Transport):
    """Transport issuing requests through :class:`httpx.AsyncClient`.

    Must be used as an async context manager.

    Args:
        config: Timeout, SSL verification and retry settings.
        base_url: Default base URL, used when a request carries no ``base``.
        dry_run: When ``True``, requests are printed to stderr and a
            synthetic payload is returned without network I/O.

    Example::

        async with HttpxTransport(RequestConfig(), base_url="https://api.example.com") as t:
            data = await t.fetch("/user/get", {"method": "POST", "body": "{}"})
    """

    def __init__(
        self,
        config: Optional[RequestConfig] = None,
        base_url: Optional[str] = None,
        dry_run: bool = False,
    ) -> None:
        self._config = config or RequestConfig()
        self._base_url = base_url
        self._dry_run = dry_run
        self._client: Optional[httpx.AsyncClient] = None

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> HttpxTransport:
        self._client = httpx.AsyncClient(
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, *args: object) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # ------------------------------------------------------------------ #
    # Transport interface
    # ------------------------------------------------------------------ #

    async def fetch(self, uri: str, args: dict[str, Any]) -> Any:
        """Send the request described by *uri* and *args*.

        Returns:
            The decoded payload, the raw response when ``raw`` is set, or
            ``None`` for an empty body or a suppressed error.

        Raises:
            AuthError: On 401 / 403.
            NotFoundError: On 404.
            ServerError: On any other error status after retries.
            ConnectionError_: On network / timeout errors after all retries.
        """
        method = str(args.get("method") or "GET").upper()
        url = self.build_url(uri, args)
        headers: dict[str, str] = dict(args.get("headers") or {})
        body: Optional[str] = args.get("body")
        output = get_output()

        if args.get("log"):
            output.debug(f"{method} {url}")
            if body is not None:
                output.debug(f"  Body: {body}")

        if self._dry_run:
            return self._print_dry_run(method, url, headers, body)

        response = await self._execute_with_retry(method, url, headers, body)

        if args.get("log"):
            output.debug(f"HTTP {response.status_code} {response.reason_phrase or ''}")

        if response.status_code >= 400:
            if args.get("throw") is False:
                output.debug(f"Suppressed HTTP {response.status_code} for {method} {url}")
                return None
            self._map_response_error(response)

        if args.get("raw"):
            return response
        return extract_response_data(response, parse=not args.get("noparse"))

    def build_url(self, uri: str, args: dict[str, Any]) -> str:
        """Join the request base URL and *uri*."""
        if args.get("noprefix") or uri.startswith(("http://", "https://")):
            return uri
        base = args.get("base") or self._base_url or ""
        if not base:
            return uri
        return f"{base.rstrip('/')}/{uri.lstrip('/')}"

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    async def _execute_with_retry(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Optional[str],
    ) -> httpx.Response:
        """Execute the HTTP request with exponential-backoff retry.

        Retries on 5xx status codes and connection / timeout errors up to
        ``max_retries`` times. The delay doubles each attempt: 1 s, 2 s, 4 s, ...
        """
        assert self._client is not None, "Transport not initialised -- use as async context manager"

        max_retries = self._config.max_retries
        output = get_output()

        for attempt in range(max_retries + 1):
            try:
                kwargs: dict[str, Any] = {
                    "method": method,
                    "url": url,
                    "headers": headers,
                }
                if body is not None:
                    kwargs["content"] = body

                response = await self._client.request(**kwargs)

                if response.status_code >= 500 and attempt < max_retries:
                    delay = 2 ** attempt
                    output.debug(
                        f"Server error {response.status_code}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    await asyncio.sleep(delay)
                    continue

                return response

            except (httpx.ConnectError, httpx.TimeoutException, httpx.NetworkError) as exc:
                if attempt < max_retries:
                    delay = 2 ** attempt
                    output.debug(
                        f"Connection error: {exc}, retrying in {delay}s "
                        f"(attempt {attempt + 1}/{max_retries})"
                    )
                    await asyncio.sleep(delay)
                    continue

                raise ConnectionError_(
                    f"Connection failed after {max_retries + 1} attempts: {exc}"
                ) from exc

        raise ServerError("Request failed after all retries")  # pragma: no cover

    def _map_response_error(self, response: httpx.Response) -> None:
        """Raise a typed exception for an error HTTP status code."""
        status = response.status_code
        try:
            detail = response.json()
            if isinstance(detail, dict):
                msg = detail.get("message") or detail.get("error") or detail.get("detail") or ""
            else:
                msg = str(detail)
        except ValueError:
            msg = response.text[:200] if response.text else ""

        prefix = f"HTTP {status}"
        full_msg = f"{prefix}: {msg}" if msg else prefix

        if status in (401, 403):
            raise AuthError(full_msg)
        if status == 404:
            raise NotFoundError(full_msg)
        raise ServerError(full_msg)

    def _print_dry_run(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: Optional[str],
    ) -> dict[str, Any]:
        """Print request details to stderr and return a synthetic payload."""
        output = get_output()
        output.info(f"[dry-run] {method} {url}")
        for key, value in headers.items():
            output.info(f"  Header: {key}: {value}")
        if body is not None:
            output.info(f"  Body: {body}")
        return {"dry_run": True, "method": method, "url": url, "body": body}


def extract_response_data(response: httpx.Response, parse: bool = True) -> Any:
    """Extract the body from an HTTP response.

    Attempts to parse the body as JSON first (unless *parse* is false).
    Falls back to the raw text. Returns ``None`` for responses with no
    content.
    """
    if not response.content:
        return None
    if parse:
        try:
            return response.json()
        except ValueError:
            pass
    return response.text
