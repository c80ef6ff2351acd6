"""Typed exception hierarchy for the DreamFactory client.

Every failure surfaced by the client derives from ``DreamFactoryError`` so
callers can catch the whole family with one clause, while still being able
to distinguish the individual kinds:

    - ``InvalidArgumentError``: rejected locally, before any network call.
    - ``InvalidAddressError``: malformed base URI, raised at construction.
    - ``NotAuthenticatedError`` / ``SessionStateError``: session misuse.
    - ``SerializationError``: payload did not match the expected shape.
    - ``TransportError`` / ``TransportTimeoutError``: the request never
      produced a response.
    - ``UpstreamError`` / ``NotFoundError``: the service answered with a
      non-success status.
"""

from __future__ import annotations

from typing import Any

# Raw payloads attached to errors are cut to this many bytes.
MAX_PAYLOAD_BYTES = 512


def truncate_payload(payload: bytes | None) -> bytes:
    """Return at most ``MAX_PAYLOAD_BYTES`` of ``payload``."""
    if not payload:
        return b""
    return payload[:MAX_PAYLOAD_BYTES]


class DreamFactoryError(Exception):
    """Base exception for all client failures."""


class InvalidArgumentError(DreamFactoryError, ValueError):
    """A required input was missing, empty or out of range."""


class InvalidAddressError(DreamFactoryError, ValueError):
    """The configured base URI is not a usable absolute http(s) URI."""


class NotAuthenticatedError(DreamFactoryError):
    """A session-requiring call was made without an active session."""


class SessionStateError(DreamFactoryError):
    """An illegal session transition was requested (e.g. concurrent login)."""


class SerializationError(DreamFactoryError):
    """
    A payload could not be encoded, or decoded into the expected shape.

    Attributes:
        payload: The offending raw bytes, truncated to ``MAX_PAYLOAD_BYTES``.
        shape: Human-readable name of the expected shape.
    """

    def __init__(self, message: str, *, payload: bytes | None = None, shape: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.payload = truncate_payload(payload)
        self.shape = shape


class TransportError(DreamFactoryError):
    """The transport failed before a response was received."""


class TransportTimeoutError(TransportError):
    """The transport gave up waiting for a response."""


class UpstreamError(DreamFactoryError):
    """
    The service answered with a non-success status code.

    Attributes:
        status_code: HTTP status code of the response.
        message: Upstream error message, or a generic description.
        payload: Decoded upstream error object, when the body carried one.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int,
        payload: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}

    def __str__(self) -> str:
        return f"{self.status_code}: {self.message}"


class NotFoundError(UpstreamError):
    """A single-resource fetch matched no record."""
