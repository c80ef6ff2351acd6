"""
Transport facade.

The core never talks to the network directly. It hands a method, URL,
headers and optional body to an ``HttpFacade`` and gets back a status code
and raw bytes. Tests swap in fakes; production uses ``HttpxFacade``:

    async with HttpxFacade(timeout=10.0) as facade:
        response = await facade.send(HttpMethod.GET, url, headers)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol, runtime_checkable

import httpx

from dreamfactory.errors import TransportError, TransportTimeoutError

logger = logging.getLogger(__name__)


class HttpMethod(str, Enum):
    """HTTP verbs used by the client."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


@dataclass(frozen=True)
class HttpResponse:
    """Status code and raw body of a completed request."""

    status_code: int
    body: bytes = b""

    @property
    def is_success(self) -> bool:
        """True for 2xx status codes."""
        return 200 <= self.status_code < 300


@runtime_checkable
class HttpFacade(Protocol):
    """Anything that can perform one request and return its response."""

    async def send(
        self,
        method: HttpMethod,
        url: str,
        headers: Mapping[str, str],
        body: bytes | None = None,
    ) -> HttpResponse:
        """Perform the request; raise ``TransportError`` if no response arrives."""
        ...


@dataclass
class HttpxFacade:
    """
    ``HttpFacade`` backed by ``httpx.AsyncClient``.

    Must be used as an async context manager unless an already open
    ``httpx.AsyncClient`` is supplied, in which case the caller keeps
    ownership of it.

    Attributes:
        timeout: Request timeout in seconds.
        client: Optional externally managed ``httpx.AsyncClient``.
    """

    timeout: float = 30.0
    client: httpx.AsyncClient | None = field(default=None, repr=False)
    _owns_client: bool = field(default=False, init=False, repr=False)

    async def __aenter__(self) -> HttpxFacade:
        if self.client is None:
            self.client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._owns_client and self.client is not None:
            await self.client.aclose()
            self.client = None
            self._owns_client = False

    @property
    def http_client(self) -> httpx.AsyncClient:
        """
        Get the HTTP client, ensuring it's been initialized.

        Raises:
            RuntimeError: If used outside of the async context manager.
        """
        if self.client is None:
            raise RuntimeError(
                "HttpxFacade must be used as an async context manager. "
                "Use 'async with HttpxFacade() as facade:'"
            )
        return self.client

    async def send(
        self,
        method: HttpMethod,
        url: str,
        headers: Mapping[str, str],
        body: bytes | None = None,
    ) -> HttpResponse:
        verb = HttpMethod(method).value
        try:
            response = await self.http_client.request(
                verb,
                url,
                headers=dict(headers),
                content=body,
            )
        except httpx.TimeoutException as e:
            logger.warning("%s %s timed out after %.1fs", verb, url, self.timeout)
            raise TransportTimeoutError(f"{verb} {url} timed out: {e}") from e
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", verb, url, e)
            raise TransportError(f"{verb} {url} failed: {e}") from e

        return HttpResponse(status_code=response.status_code, body=response.content)
