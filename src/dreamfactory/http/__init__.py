"""
HTTP plumbing for the DreamFactory client.

This package holds the pieces every request passes through: the versioned
address resolver, the per-client header bag and the transport facade with
its httpx-backed default implementation.
"""

from dreamfactory.http.address import HttpAddress, RestApiVersion
from dreamfactory.http.facade import HttpFacade, HttpMethod, HttpResponse, HttpxFacade
from dreamfactory.http.headers import API_KEY_HEADER, SESSION_TOKEN_HEADER, HttpHeaders

__all__ = [
    "API_KEY_HEADER",
    "SESSION_TOKEN_HEADER",
    "HttpAddress",
    "HttpFacade",
    "HttpHeaders",
    "HttpMethod",
    "HttpResponse",
    "HttpxFacade",
    "RestApiVersion",
]
