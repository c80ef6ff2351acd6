"""
Shared pydantic building blocks for request and response models.

Request models leave their identifier optional (``None`` means "not yet
created"); the matching response model re-declares it as required, so a
decoded record always carries its identifier.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator

from dreamfactory.serialization import UtcDateTime

T = TypeVar("T")


class DreamFactoryModel(BaseModel):
    """
    Base model: unknown fields are ignored, aliases and names both accepted.

    Validation is strict: a JSON string never becomes a number or a boolean,
    and a float never becomes an int.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, strict=True)


class AuditFields(DreamFactoryModel):
    """Bookkeeping fields the service adds to most records."""

    created_date: UtcDateTime | None = None
    created_by_id: int | None = None
    last_modified_date: UtcDateTime | None = None
    last_modified_by_id: int | None = None


class ResourceList(DreamFactoryModel, Generic[T]):
    """
    Records returned by list and bulk operations.

    Accepts a bare JSON array, the ``{"resource": [...]}`` envelope and the
    older ``{"record": [...]}`` envelope.
    """

    resource: list[T]
    meta: dict[str, Any] | None = None

    @model_validator(mode="before")
    @classmethod
    def _unwrap(cls, data: Any) -> Any:
        if isinstance(data, list):
            return {"resource": data}
        if isinstance(data, dict) and "resource" not in data and "record" in data:
            return {**data, "resource": data["record"]}
        return data
