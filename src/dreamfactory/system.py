"""
The ``system`` service: administrative resource families and settings.

Every family is declared once as a ``ResourceDescriptor`` and served by the
generic ``ResourceClient``:

    apps = await client.system.apps.list(SqlQuery(filter="is_active = true"))
    await client.system.users.delete(1, 2, 3)

Families differ only in data: their path, models, identifier field and
whether the service accepts filter-based bulk deletes and updates for them.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable

from dreamfactory.context import ApiContext, PreparedRequest
from dreamfactory.errors import InvalidArgumentError
from dreamfactory.http.facade import HttpMethod
from dreamfactory.models.system import (
    AppRequest,
    AppResponse,
    ConfigRequest,
    ConfigResponse,
    CorsRequest,
    CorsResponse,
    EmailTemplateRequest,
    EmailTemplateResponse,
    EnvironmentResponse,
    EventScriptRequest,
    EventScriptResponse,
    LookupRequest,
    LookupResponse,
    RoleRequest,
    RoleResponse,
    ServiceRequest,
    ServiceResponse,
    UserRequest,
    UserResponse,
)
from dreamfactory.resource import ResourceClient, ResourceDescriptor

logger = logging.getLogger(__name__)

# =============================================================================
# RESOURCE FAMILIES
# =============================================================================

APPS = ResourceDescriptor(
    name="app",
    path="system/app",
    request_type=AppRequest,
    response_type=AppResponse,
    supports_filter_delete=True,
    supports_filter_update=True,
)
USERS = ResourceDescriptor(
    name="user",
    path="system/user",
    request_type=UserRequest,
    response_type=UserResponse,
    supports_filter_delete=True,
    supports_filter_update=True,
)
ADMINS = ResourceDescriptor(
    name="admin",
    path="system/admin",
    request_type=UserRequest,
    response_type=UserResponse,
    supports_filter_delete=True,
    supports_filter_update=True,
)
ROLES = ResourceDescriptor(
    name="role",
    path="system/role",
    request_type=RoleRequest,
    response_type=RoleResponse,
    supports_filter_delete=True,
    supports_filter_update=True,
)
SERVICES = ResourceDescriptor(
    name="service",
    path="system/service",
    request_type=ServiceRequest,
    response_type=ServiceResponse,
    supports_filter_delete=True,
    supports_filter_update=True,
)
EMAIL_TEMPLATES = ResourceDescriptor(
    name="email_template",
    path="system/email_template",
    request_type=EmailTemplateRequest,
    response_type=EmailTemplateResponse,
    supports_filter_delete=True,
    supports_filter_update=True,
)
CORS = ResourceDescriptor(
    name="cors",
    path="system/cors",
    request_type=CorsRequest,
    response_type=CorsResponse,
)
LOOKUPS = ResourceDescriptor(
    name="lookup",
    path="system/lookup",
    request_type=LookupRequest,
    response_type=LookupResponse,
    supports_filter_delete=True,
    supports_filter_update=True,
)
EVENT_SCRIPTS = ResourceDescriptor(
    name="event_script",
    path="system/event_script",
    request_type=EventScriptRequest,
    response_type=EventScriptResponse,
    id_field="name",
    id_type=str,
)

CONFIG_PATH = "system/config"
ENVIRONMENT_PATH = "system/environment"


class SystemApi:
    """
    Administrative surface of the ``system`` service.

    Attributes:
        apps, users, admins, roles, services, email_templates, cors,
        lookups, event_scripts: One ``ResourceClient`` per family.
    """

    def __init__(self, context: ApiContext) -> None:
        self._context = context
        self.apps = ResourceClient(APPS, context)
        self.users = ResourceClient(USERS, context)
        self.admins = ResourceClient(ADMINS, context)
        self.roles = ResourceClient(ROLES, context)
        self.services = ResourceClient(SERVICES, context)
        self.email_templates = ResourceClient(EMAIL_TEMPLATES, context)
        self.cors = ResourceClient(CORS, context)
        self.lookups = ResourceClient(LOOKUPS, context)
        self.event_scripts = ResourceClient(EVENT_SCRIPTS, context)

    # -------------------------------------------------------------------------
    # Configuration and environment
    # -------------------------------------------------------------------------

    async def get_config(self) -> ConfigResponse:
        """Fetch the instance-wide system configuration."""
        request = self._context.prepare(HttpMethod.GET, CONFIG_PATH)
        response = await self._context.execute(request)
        return self._context.decode(response, ConfigResponse)

    def set_config(self, config: ConfigRequest) -> Awaitable[ConfigResponse]:
        """
        Update the system configuration; only fields set on ``config`` are sent.

        Raises:
            InvalidArgumentError: If ``config`` is None.
        """
        if config is None:
            raise InvalidArgumentError("config is required")
        request = self._context.prepare(HttpMethod.POST, CONFIG_PATH, body=config)
        return self._send_config(request)

    async def _send_config(self, request: PreparedRequest) -> ConfigResponse:
        response = await self._context.execute(request)
        return self._context.decode(response, ConfigResponse)

    async def get_environment(self) -> EnvironmentResponse:
        """Fetch platform and server information."""
        request = self._context.prepare(HttpMethod.GET, ENVIRONMENT_PATH)
        response = await self._context.execute(request)
        return self._context.decode(response, EnvironmentResponse)

    # -------------------------------------------------------------------------
    # Application downloads
    # -------------------------------------------------------------------------

    def download_app_package(self, app_id: int) -> Awaitable[bytes]:
        """Download an application as an importable package."""
        return self._download(app_id, "pkg")

    def download_app_sdk(self, app_id: int) -> Awaitable[bytes]:
        """Download the client SDK generated for an application."""
        return self._download(app_id, "sdk")

    def _download(self, app_id: int, flag: str) -> Awaitable[bytes]:
        if isinstance(app_id, bool) or not isinstance(app_id, int) or app_id <= 0:
            raise InvalidArgumentError(f"app_id must be a positive integer, got {app_id!r}")
        request = self._context.prepare(
            HttpMethod.GET, APPS.path, app_id, params=[(flag, "true")]
        )
        return self._fetch_bytes(request)

    async def _fetch_bytes(self, request: PreparedRequest) -> bytes:
        response = await self._context.execute(request, not_found=True)
        logger.debug("Downloaded %d bytes from %s", len(response.body), request.url)
        return response.body
