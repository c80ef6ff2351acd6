"""
SQL-like query descriptor for list, get and bulk operations.

``SqlQuery`` flattens into query-string parameters in a fixed order
(filter, fields, related, limit, offset, order) so the same query always
produces the same URL.

A field left as ``None`` is omitted and means "unrestricted". An empty list
is *not* the same thing: ``fields=[]`` is sent as an empty ``fields=``
parameter.

Example:
    query = SqlQuery(filter="name like 'todo%'", fields=["id", "name"], limit=10)
    query.to_params()
    # [("filter", "name like 'todo%'"), ("fields", "id,name"), ("limit", "10")]
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from dreamfactory.errors import InvalidArgumentError


def _join(values: Sequence[str]) -> str:
    return ",".join(str(value) for value in values)


@dataclass(frozen=True)
class SqlQuery:
    """
    Filtering, field selection and paging for one request.

    Attributes:
        filter: SQL-like filter expression, e.g. ``"id > 3"``.
        fields: Fields to return. ``None`` returns all fields.
        related: Related resources to embed in each record.
        limit: Maximum number of records to return.
        offset: Number of records to skip.
        order: Ordering expression, e.g. ``"name desc"``.
        include_count: Ask the service to report the total record count.
    """

    filter: str | None = None
    fields: Sequence[str] | None = None
    related: Sequence[str] | None = None
    limit: int | None = None
    offset: int | None = None
    order: str | None = None
    include_count: bool = False

    def __post_init__(self) -> None:
        if self.limit is not None and self.limit < 0:
            raise InvalidArgumentError("limit cannot be negative")
        if self.offset is not None and self.offset < 0:
            raise InvalidArgumentError("offset cannot be negative")
        # Freeze caller-owned lists so later mutation cannot change the query.
        if self.fields is not None:
            object.__setattr__(self, "fields", tuple(self.fields))
        if self.related is not None:
            object.__setattr__(self, "related", tuple(self.related))

    @property
    def has_filter(self) -> bool:
        """True when a non-empty filter expression is set."""
        return bool(self.filter)

    def selection_params(self) -> list[tuple[str, str]]:
        """Only the field/related selection, for single-record requests."""
        params: list[tuple[str, str]] = []
        if self.fields is not None:
            params.append(("fields", _join(self.fields)))
        if self.related is not None:
            params.append(("related", _join(self.related)))
        return params

    def to_params(self) -> list[tuple[str, str]]:
        """Flatten into ordered query-string pairs."""
        params: list[tuple[str, str]] = []
        if self.filter is not None:
            params.append(("filter", self.filter))
        params.extend(self.selection_params())
        if self.limit is not None:
            params.append(("limit", str(self.limit)))
        if self.offset is not None:
            params.append(("offset", str(self.offset)))
        if self.order is not None:
            params.append(("order", self.order))
        if self.include_count:
            params.append(("include_count", "true"))
        return params
