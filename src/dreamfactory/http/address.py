"""
Versioned endpoint addresses.

Every request URL has the shape::

    {base_uri}/api/{version}/{resource path}[/{segment}...][?query]

``HttpAddress`` validates the base URI once, at construction, so a
misconfigured client fails immediately instead of on its first call.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from urllib.parse import quote, urlencode, urlsplit

from dreamfactory.errors import InvalidAddressError, InvalidArgumentError

API_ROOT = "api"


class RestApiVersion(str, Enum):
    """REST API versions understood by the upstream service."""

    V1 = "v1"
    V2 = "v2"

    @classmethod
    def parse(cls, value: str) -> RestApiVersion:
        """Parse "v2", "V2" or "2" into a member."""
        text = str(value).strip().lower()
        if not text.startswith("v"):
            text = f"v{text}"
        try:
            return cls(text)
        except ValueError:
            allowed = ", ".join(member.value for member in cls)
            raise ValueError(
                f"Unsupported API version {value!r} (expected one of {allowed})"
            ) from None


def _encode_segment(segment: str) -> str:
    # Segments are raw values: a literal "%" is encoded like any other byte.
    return quote(segment, safe="")


@dataclass(frozen=True)
class HttpAddress:
    """
    Base URI plus API version, resolving resource paths to request URLs.

    Attributes:
        base_uri: Absolute http(s) URI of the service, without trailing slash.
        version: API version segment inserted after ``/api``.

    Raises:
        InvalidAddressError: If ``base_uri`` is not an absolute http(s) URI
            with a host and without query or fragment, or if ``version``
            is not a supported API version.
    """

    base_uri: str
    version: RestApiVersion = RestApiVersion.V2

    def __post_init__(self) -> None:
        if not self.base_uri or not isinstance(self.base_uri, str):
            raise InvalidAddressError("Base URI cannot be empty")

        parts = urlsplit(self.base_uri.strip())
        if parts.scheme not in ("http", "https"):
            raise InvalidAddressError(f"Base URI must use http or https: {self.base_uri!r}")
        if not parts.netloc or not parts.hostname:
            raise InvalidAddressError(f"Base URI has no host: {self.base_uri!r}")
        if parts.query or parts.fragment:
            raise InvalidAddressError(
                f"Base URI must not carry a query or fragment: {self.base_uri!r}"
            )

        object.__setattr__(self, "base_uri", self.base_uri.strip().rstrip("/"))
        if not isinstance(self.version, RestApiVersion):
            try:
                version = RestApiVersion.parse(self.version)
            except ValueError as e:
                raise InvalidAddressError(str(e)) from e
            object.__setattr__(self, "version", version)

    @property
    def api_root(self) -> str:
        """The versioned API root, e.g. ``http://host/api/v2``."""
        return f"{self.base_uri}/{API_ROOT}/{self.version.value}"

    def resolve(
        self,
        resource_path: str,
        *segments: str | int,
        params: Sequence[tuple[str, str]] | None = None,
    ) -> str:
        """
        Build the URL of a resource.

        Args:
            resource_path: Resource family path, e.g. ``"system/app"``. Extra
                slashes are collapsed.
            *segments: Positional path segments (typically one identifier),
                taken as raw values and percent-encoded.
            params: Ordered query parameters; order is preserved verbatim.

        Returns:
            str: The full request URL.

        Raises:
            InvalidArgumentError: If the resource path or a segment is empty.
        """
        path_parts = [part for part in str(resource_path).split("/") if part]
        if not path_parts:
            raise InvalidArgumentError("Resource path cannot be empty")

        encoded = [_encode_segment(part) for part in path_parts]
        for segment in segments:
            text = str(segment) if segment is not None else ""
            if not text:
                raise InvalidArgumentError("Path segments cannot be empty")
            encoded.append(_encode_segment(text))

        url = f"{self.api_root}/{'/'.join(encoded)}"
        if params:
            url = f"{url}?{urlencode(list(params), quote_via=quote, safe=',*')}"
        return url
