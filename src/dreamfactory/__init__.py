"""DreamFactory client: typed async access to the DreamFactory admin REST API.

The package is organized in layers:

- ``dreamfactory.http``: address resolution, header state, transport
- ``dreamfactory.serialization`` and ``dreamfactory.models``: wire formats
- ``dreamfactory.resource``: the generic CRUD engine
- ``dreamfactory.session``: login/logout state machine
- ``dreamfactory.client``: ``DreamFactoryClient``, wiring it all together
"""

from __future__ import annotations

from importlib.metadata import PackageNotFoundError, version

from dreamfactory.client import DreamFactoryClient
from dreamfactory.config import Config
from dreamfactory.errors import (
    DreamFactoryError,
    InvalidAddressError,
    InvalidArgumentError,
    NotAuthenticatedError,
    NotFoundError,
    SerializationError,
    SessionStateError,
    TransportError,
    TransportTimeoutError,
    UpstreamError,
)
from dreamfactory.http import HttpAddress, HttpHeaders, HttpMethod, HttpResponse, RestApiVersion
from dreamfactory.query import SqlQuery
from dreamfactory.resource import ResourceClient, ResourceDescriptor
from dreamfactory.session import SessionManager, SessionState

try:
    __version__: str = version("dreamfactory-client")
except PackageNotFoundError:
    __version__ = "0.3.0"

__all__ = [
    "Config",
    "DreamFactoryClient",
    "DreamFactoryError",
    "HttpAddress",
    "HttpHeaders",
    "HttpMethod",
    "HttpResponse",
    "InvalidAddressError",
    "InvalidArgumentError",
    "NotAuthenticatedError",
    "NotFoundError",
    "ResourceClient",
    "ResourceDescriptor",
    "RestApiVersion",
    "SerializationError",
    "SessionManager",
    "SessionState",
    "SessionStateError",
    "SqlQuery",
    "TransportError",
    "TransportTimeoutError",
    "UpstreamError",
    "__version__",
]
