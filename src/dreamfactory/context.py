"""
Request preparation and dispatch shared by every API surface.

``ApiContext`` bundles the per-client collaborators (address, header bag,
serializer, transport) and implements the one request protocol the rest of
the package builds on:

1. ``prepare`` runs synchronously. It resolves the URL, snapshots the
   headers and encodes the body. Nothing suspends before the snapshot is
   taken, so concurrent logins and logouts cannot leak into a request that
   is already being built.
2. ``execute`` awaits the transport and turns any non-2xx status into a
   typed ``UpstreamError`` (``NotFoundError`` where requested).
3. ``decode`` maps the body onto the expected model.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, TypeVar

from dreamfactory.errors import NotFoundError, SerializationError, UpstreamError
from dreamfactory.http.address import HttpAddress
from dreamfactory.http.facade import HttpFacade, HttpMethod, HttpResponse
from dreamfactory.http.headers import HttpHeaders
from dreamfactory.serialization import ContentSerializer

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Sentinel distinguishing "no body" from a body that encodes to null.
_NO_BODY: Any = object()


@dataclass(frozen=True)
class PreparedRequest:
    """A fully built request: nothing about it depends on shared state any more."""

    method: HttpMethod
    url: str
    headers: dict[str, str]
    body: bytes | None = None


@dataclass
class ApiContext:
    """
    The collaborators one client instance sends its requests through.

    Attributes:
        address: Versioned base address.
        headers: The client's header bag (the only shared mutable state).
        serializer: Body encoder/decoder.
        facade: Transport performing the actual I/O.
    """

    address: HttpAddress
    headers: HttpHeaders
    serializer: ContentSerializer
    facade: HttpFacade

    def prepare(
        self,
        method: HttpMethod,
        resource_path: str,
        *segments: str | int,
        params: Sequence[tuple[str, str]] | None = None,
        body: Any = _NO_BODY,
    ) -> PreparedRequest:
        """Build a request synchronously, snapshotting the headers."""
        url = self.address.resolve(resource_path, *segments, params=params)
        headers = self.headers.snapshot()
        encoded: bytes | None = None
        if body is not _NO_BODY:
            encoded = self.serializer.encode(body)
            if not any(name.lower() == "content-type" for name in headers):
                headers["Content-Type"] = self.serializer.content_type
        return PreparedRequest(method=method, url=url, headers=headers, body=encoded)

    async def execute(self, request: PreparedRequest, *, not_found: bool = False) -> HttpResponse:
        """
        Send a prepared request and check its status.

        Args:
            request: The request to send.
            not_found: Raise ``NotFoundError`` instead of ``UpstreamError``
                       for a 404.

        Raises:
            TransportError: If the transport produced no response.
            UpstreamError: For any non-2xx status.
        """
        logger.debug("%s %s", request.method.value, request.url)
        response = await self.facade.send(request.method, request.url, request.headers, request.body)
        logger.debug("%s %s -> %d", request.method.value, request.url, response.status_code)

        if not response.is_success:
            raise self.error_from_response(response, not_found=not_found)
        return response

    def decode(self, response: HttpResponse, shape: type[T] | Any) -> T:
        """Decode a successful response body into ``shape``."""
        return self.serializer.decode(response.body, shape)

    def error_from_response(self, response: HttpResponse, *, not_found: bool = False) -> UpstreamError:
        """
        Build the typed failure for a non-success response.

        Understands ``{"error": {...}}``, ``{"error": [{...}]}`` and
        ``{"error": "message"}`` bodies; anything else falls back to a
        generic message carrying the status code.
        """
        payload: dict[str, Any] = {}
        message = f"Request failed with status {response.status_code}"

        try:
            decoded = self.serializer.decode(response.body, dict[str, Any])
        except SerializationError:
            decoded = None

        if decoded is not None:
            payload = decoded
            error_field = decoded.get("error")
            if isinstance(error_field, list) and error_field:
                error_field = error_field[0]
            if isinstance(error_field, dict):
                message = str(error_field.get("message") or message)
            elif isinstance(error_field, str) and error_field:
                message = error_field
            elif isinstance(decoded.get("message"), str):
                message = decoded["message"]

        error_type = NotFoundError if (not_found and response.status_code == 404) else UpstreamError
        return error_type(message, status_code=response.status_code, payload=payload)
