"""
Generic CRUD engine for one resource family.

A ``ResourceClient`` is parameterized by a ``ResourceDescriptor``, which
names the family's path, its request/response models, the identifier field
and which filter-based bulk operations the family supports. Every family
exposed by the service is just another descriptor; none has code of its own.

All verbs validate their arguments and build the request *synchronously*
when called, then return an awaitable that performs the call. Misuse
therefore raises ``InvalidArgumentError`` at the call site, and no
transport call is ever made for it:

    apps = ResourceClient(APPS, context)
    with pytest.raises(InvalidArgumentError):
        apps.create()                     # raises before anything is awaited

    created = await apps.create(AppRequest(name="todo"))
    await apps.delete(created[0].id)
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Mapping
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from dreamfactory.context import ApiContext, PreparedRequest
from dreamfactory.errors import InvalidArgumentError
from dreamfactory.http.facade import HttpMethod
from dreamfactory.models.base import ResourceList
from dreamfactory.query import SqlQuery

logger = logging.getLogger(__name__)

RequestT = TypeVar("RequestT", bound=BaseModel)
ResponseT = TypeVar("ResponseT", bound=BaseModel)

Identifier = int | str


@dataclass(frozen=True)
class ResourceDescriptor(Generic[RequestT, ResponseT]):
    """
    Shape and capabilities of one resource family.

    Attributes:
        name: Human-readable family name used in messages and logs.
        path: Resource path below the API root, e.g. ``"system/app"``.
        request_type: Model sent on create and update.
        response_type: Model returned by every verb.
        id_field: Name of the identifier field on both models.
        id_type: Type of that identifier, ``int`` or ``str``.
        supports_filter_delete: Whether ``delete`` accepts a filter query
            instead of identifiers.
        supports_filter_update: Whether ``update_by_filter`` is available.
    """

    name: str
    path: str
    request_type: type[RequestT]
    response_type: type[ResponseT]
    id_field: str = "id"
    id_type: type[int] | type[str] = int
    supports_filter_delete: bool = False
    supports_filter_update: bool = False


def _validate_identifier(value: Any, descriptor: ResourceDescriptor[Any, Any]) -> Identifier:
    family = descriptor.name
    if descriptor.id_type is str:
        if not isinstance(value, str) or not value.strip():
            raise InvalidArgumentError(
                f"{family} identifiers must be non-blank strings, got {value!r}"
            )
        return value
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgumentError(f"{family} identifiers must be positive integers, got {value!r}")
    return value


class ResourceClient(Generic[RequestT, ResponseT]):
    """
    List, get, create, update and delete for one resource family.

    Args:
        descriptor: The family to operate on.
        context: Collaborators shared with the rest of the client.
    """

    def __init__(
        self,
        descriptor: ResourceDescriptor[RequestT, ResponseT],
        context: ApiContext,
    ) -> None:
        self.descriptor = descriptor
        self._context = context

    def __repr__(self) -> str:
        return f"ResourceClient({self.descriptor.name!r}, path={self.descriptor.path!r})"

    # -------------------------------------------------------------------------
    # Verbs
    # -------------------------------------------------------------------------

    def list(self, query: SqlQuery | None = None) -> Awaitable[list[ResponseT]]:
        """
        Fetch the records matching ``query`` (all records when omitted).

        An empty result is returned as an empty list, never as an error.
        """
        params = query.to_params() if query is not None else None
        request = self._context.prepare(HttpMethod.GET, self.descriptor.path, params=params)
        return self._send_many(request)

    def get(self, identifier: Identifier, query: SqlQuery | None = None) -> Awaitable[ResponseT]:
        """
        Fetch one record by identifier.

        Only the ``fields`` and ``related`` parts of ``query`` apply.

        Raises:
            InvalidArgumentError: If the identifier is missing or invalid.
            NotFoundError: If no record has that identifier.
        """
        identifier = _validate_identifier(identifier, self.descriptor)
        params = query.selection_params() if query is not None else None
        request = self._context.prepare(
            HttpMethod.GET, self.descriptor.path, identifier, params=params
        )
        return self._send_one(request)

    def create(self, *records: RequestT | Mapping[str, Any]) -> Awaitable[list[ResponseT]]:
        """
        Create one or more records.

        Returns the created records, with their assigned identifiers, in
        submission order.

        Raises:
            InvalidArgumentError: If no records are given or one is ``None``.
        """
        payload = self._coerce_records(records, verb="create")
        request = self._context.prepare(HttpMethod.POST, self.descriptor.path, body=payload)
        return self._send_many(request)

    def update(self, *records: RequestT | Mapping[str, Any]) -> Awaitable[list[ResponseT]]:
        """
        Partially update one or more records, matched by identifier.

        Only fields explicitly set on each record are sent.

        Raises:
            InvalidArgumentError: If no records are given, one is ``None``, or
                one has no identifier.
        """
        payload = self._coerce_records(records, verb="update")
        for position, record in enumerate(payload):
            if getattr(record, self.descriptor.id_field, None) is None:
                raise InvalidArgumentError(
                    f"Cannot update {self.descriptor.name} record #{position}: "
                    f"'{self.descriptor.id_field}' is not set"
                )
        request = self._context.prepare(HttpMethod.PATCH, self.descriptor.path, body=payload)
        return self._send_many(request)

    def update_by_filter(
        self, record: RequestT | Mapping[str, Any], query: SqlQuery
    ) -> Awaitable[list[ResponseT]]:
        """
        Apply one partial record to every row matching ``query.filter``.

        Raises:
            InvalidArgumentError: If the family does not support filter
                updates, the record is missing, or the query has no filter.
        """
        if not self.descriptor.supports_filter_update:
            raise InvalidArgumentError(
                f"{self.descriptor.name} does not support updates by filter"
            )
        if query is None or not query.has_filter:
            raise InvalidArgumentError("A filter is required for an update by filter")
        payload = self._coerce_records((record,), verb="update")
        request = self._context.prepare(
            HttpMethod.PATCH, self.descriptor.path, params=query.to_params(), body=payload
        )
        return self._send_many(request)

    def delete(
        self,
        *identifiers: Identifier,
        query: SqlQuery | None = None,
        params: Mapping[str, str] | None = None,
    ) -> Awaitable[list[ResponseT]]:
        """
        Delete records by identifier, or by filter where supported.

        The service echoes the deleted records, which are returned.

        Args:
            *identifiers: Identifiers of the records to delete.
            query: Either a filter (when no identifiers are given) or a
                   field selection for the echoed records.
            params: Extra family-specific parameters, appended last.

        Raises:
            InvalidArgumentError: If neither identifiers nor a supported
                filter are given, or both are.
        """
        family = self.descriptor.name
        query_params: list[tuple[str, str]] = []

        if identifiers:
            if query is not None and query.has_filter:
                raise InvalidArgumentError("Pass either identifiers or a filter, not both")
            ids = [str(_validate_identifier(value, self.descriptor)) for value in identifiers]
            query_params.append(("ids", ",".join(ids)))
            if query is not None:
                query_params.extend(query.selection_params())
        elif query is not None and query.has_filter:
            if not self.descriptor.supports_filter_delete:
                raise InvalidArgumentError(f"{family} does not support deletes by filter")
            query_params.extend(query.to_params())
        else:
            raise InvalidArgumentError(f"At least one {family} identifier is required")

        if params:
            query_params.extend((str(key), str(value)) for key, value in params.items())

        request = self._context.prepare(
            HttpMethod.DELETE, self.descriptor.path, params=query_params
        )
        return self._send_many(request)

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _coerce_records(
        self, records: tuple[RequestT | Mapping[str, Any], ...], *, verb: str
    ) -> list[RequestT]:
        """Check the record set and turn mappings into request models."""
        family = self.descriptor.name
        if not records:
            raise InvalidArgumentError(f"At least one {family} record is required to {verb}")

        coerced: list[RequestT] = []
        for position, record in enumerate(records):
            if record is None:
                raise InvalidArgumentError(f"{family} record #{position} is None")
            if isinstance(record, self.descriptor.request_type):
                coerced.append(record)
            elif isinstance(record, Mapping):
                try:
                    coerced.append(self.descriptor.request_type.model_validate(dict(record)))
                except ValidationError as e:
                    raise InvalidArgumentError(
                        f"{family} record #{position} is invalid: {e.error_count()} error(s)"
                    ) from e
            else:
                raise InvalidArgumentError(
                    f"{family} record #{position} must be a "
                    f"{self.descriptor.request_type.__name__}, got {type(record).__name__}"
                )
        return coerced

    async def _send_many(self, request: PreparedRequest) -> list[ResponseT]:
        response = await self._context.execute(request)
        envelope = self._context.decode(response, ResourceList[self.descriptor.response_type])
        logger.debug("%s: %d record(s)", self.descriptor.name, len(envelope.resource))
        return list(envelope.resource)

    async def _send_one(self, request: PreparedRequest) -> ResponseT:
        response = await self._context.execute(request, not_found=True)
        return self._context.decode(response, self.descriptor.response_type)
