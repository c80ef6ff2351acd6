"""
Composition root of the DreamFactory client.

``DreamFactoryClient`` builds one address, one header bag, one serializer
and one transport per instance and wires them into the session manager and
the API surfaces. Two clients never share header state.

The client is designed to be used as an async context manager so the
default httpx transport is closed properly:

    config = Config.load(base_url="http://localhost", api_key="abc123")

    async with DreamFactoryClient(config) as client:
        await client.session.login("dream@factory.com", "dreamfactory")
        apps = await client.system.apps.list()
        await client.session.logout()
"""

from __future__ import annotations

import logging
from typing import Any

from dreamfactory.config import Config
from dreamfactory.context import ApiContext
from dreamfactory.http.address import HttpAddress
from dreamfactory.http.facade import HttpFacade, HttpxFacade
from dreamfactory.http.headers import API_KEY_HEADER, HttpHeaders
from dreamfactory.serialization import ContentSerializer, JsonContentSerializer
from dreamfactory.session import SessionManager
from dreamfactory.system import SystemApi
from dreamfactory.user import UserApi

logger = logging.getLogger(__name__)


class DreamFactoryClient:
    """
    Typed async client for one DreamFactory instance.

    Args:
        config: Client configuration.
        facade: Transport to use. When omitted an ``HttpxFacade`` is created
                and owned by the client (opened and closed with it).
        serializer: Body serializer; JSON by default.

    Attributes:
        config: The configuration the client was built from.
        headers: The header bag shared by every request of this client.
        session: Login/logout and session state.
        user: Password operations for the logged-in user.
        system: Administrative resource families and settings.

    Raises:
        InvalidAddressError: If ``config.base_url`` is malformed.
    """

    def __init__(
        self,
        config: Config,
        *,
        facade: HttpFacade | None = None,
        serializer: ContentSerializer | None = None,
    ) -> None:
        self.config = config
        self._owned_facade: HttpxFacade | None = None
        if facade is None:
            self._owned_facade = HttpxFacade(timeout=config.timeout)
            facade = self._owned_facade
        serializer = serializer or JsonContentSerializer()

        address = HttpAddress(config.base_url, config.api_version)
        self.headers = HttpHeaders({"Accept": serializer.content_type})
        if config.api_key:
            self.headers.set(API_KEY_HEADER, config.api_key)

        self.context = ApiContext(
            address=address,
            headers=self.headers,
            serializer=serializer,
            facade=facade,
        )
        self.session = SessionManager(
            self.context, implicit_refresh=config.implicit_session_refresh
        )
        self.user = UserApi(self.context, self.session)
        self.system = SystemApi(self.context)

    @property
    def address(self) -> HttpAddress:
        """The versioned base address requests are resolved against."""
        return self.context.address

    async def __aenter__(self) -> DreamFactoryClient:
        if self._owned_facade is not None:
            await self._owned_facade.__aenter__()
        logger.debug("Client opened for %s", self.address.api_root)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._owned_facade is not None:
            await self._owned_facade.__aexit__(exc_type, exc_val, exc_tb)
        logger.debug("Client closed for %s", self.address.api_root)
