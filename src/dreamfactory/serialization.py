"""
Content serialization between typed values and wire bytes.

``JsonContentSerializer`` is the default ``ContentSerializer``. It is built
on pydantic ``TypeAdapter``s, so the same model classes describe both what
is sent and what is accepted back:

    serializer = JsonContentSerializer()
    body = serializer.encode([AppRequest(name="todo")])
    apps = serializer.decode(raw, list[AppResponse])

Encoding uses field aliases and leaves out fields the caller never set, so
a PATCH only carries the supplied values. Decoding ignores unknown fields
but never coerces a payload into a shape it does not match: any mismatch
raises ``SerializationError`` with the (truncated) raw bytes attached.
"""

from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from decimal import Decimal
from typing import Annotated, Any, Protocol, TypeVar

from pydantic import (
    AfterValidator,
    BaseModel,
    PlainSerializer,
    Strict,
    TypeAdapter,
    ValidationError,
)

from dreamfactory.errors import SerializationError

logger = logging.getLogger(__name__)

T = TypeVar("T")

JSON_CONTENT_TYPE = "application/json"


# =============================================================================
# CANONICAL TIMESTAMPS
# =============================================================================


def to_utc(value: datetime) -> datetime:
    """Normalize a datetime to timezone-aware UTC; naive values are taken as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def format_utc(value: datetime) -> str:
    """Render a datetime as ISO-8601 UTC with a ``Z`` suffix."""
    return to_utc(value).isoformat().replace("+00:00", "Z")


# Timestamps stay lax inside strict models: the service sends them as strings.
UtcDateTime = Annotated[
    datetime,
    Strict(False),
    AfterValidator(to_utc),
    PlainSerializer(format_utc, return_type=str, when_used="json"),
]


# =============================================================================
# SERIALIZER PROTOCOL
# =============================================================================


class ContentSerializer(Protocol):
    """Converts values to request bodies and response bodies to values."""

    content_type: str

    def encode(self, value: Any) -> bytes:
        """Serialize ``value`` to bytes."""
        ...

    def decode(self, data: bytes, shape: type[T] | Any) -> T:
        """Deserialize ``data`` into ``shape``; raise ``SerializationError`` on mismatch."""
        ...


def _shape_name(shape: Any) -> str:
    return getattr(shape, "__name__", None) or repr(shape)


def _to_plain(value: Any) -> Any:
    """Reduce models, containers and scalars to JSON-compatible values."""
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json", by_alias=True, exclude_unset=True)
    if isinstance(value, dict):
        return {str(key): _to_plain(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    if isinstance(value, datetime):
        return format_utc(value)
    if isinstance(value, Decimal):
        return str(value)
    return value


class JsonContentSerializer:
    """JSON ``ContentSerializer`` backed by pydantic."""

    content_type = JSON_CONTENT_TYPE

    def __init__(self) -> None:
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    def _adapter(self, shape: Any) -> TypeAdapter[Any]:
        adapter = self._adapters.get(shape)
        if adapter is None:
            adapter = TypeAdapter(shape)
            self._adapters[shape] = adapter
        return adapter

    def encode(self, value: Any) -> bytes:
        try:
            return json.dumps(_to_plain(value), separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise SerializationError(
                f"Cannot encode {type(value).__name__}: {e}",
                shape=type(value).__name__,
            ) from e

    def decode(self, data: bytes, shape: type[T] | Any) -> T:
        name = _shape_name(shape)
        if not data or not data.strip():
            raise SerializationError(f"Empty payload where {name} was expected", shape=name)

        try:
            return self._adapter(shape).validate_json(data)  # type: ignore[no-any-return]
        except ValidationError as e:
            logger.debug("Payload does not match %s: %s", name, e)
            raise SerializationError(
                f"Payload does not match {name}: {e.error_count()} error(s)",
                payload=data,
                shape=name,
            ) from e
