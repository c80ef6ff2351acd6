"""
Account operations of the ``user`` service.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable

from dreamfactory.context import ApiContext, PreparedRequest
from dreamfactory.errors import InvalidArgumentError
from dreamfactory.http.facade import HttpMethod
from dreamfactory.models.user import PasswordRequest, PasswordResponse
from dreamfactory.session import SessionManager

logger = logging.getLogger(__name__)

PASSWORD_PATH = "user/password"


class UserApi:
    """Password change and reset for the logged-in user."""

    def __init__(self, context: ApiContext, session: SessionManager) -> None:
        self._context = context
        self._session = session

    def change_password(self, old_password: str, new_password: str) -> Awaitable[PasswordResponse]:
        """
        Change the current user's password.

        Raises:
            InvalidArgumentError: If either password is empty.
            NotAuthenticatedError: If not logged in.
        """
        if not old_password:
            raise InvalidArgumentError("old_password is required")
        if not new_password:
            raise InvalidArgumentError("new_password is required")
        self._session.require_authenticated()

        body = PasswordRequest(old_password=old_password, new_password=new_password)
        request = self._context.prepare(HttpMethod.POST, PASSWORD_PATH, body=body)
        return self._send(request)

    def request_password_reset(self, email: str) -> Awaitable[PasswordResponse]:
        """
        Ask for a password reset for ``email``.

        Depending on the service configuration the response either carries
        the account's security question or confirms that an email was sent.
        """
        if not email:
            raise InvalidArgumentError("email is required")

        request = self._context.prepare(
            HttpMethod.POST,
            PASSWORD_PATH,
            params=[("reset", "true")],
            body=PasswordRequest(email=email),
        )
        return self._send(request)

    async def _send(self, request: PreparedRequest) -> PasswordResponse:
        response = await self._context.execute(request)
        result = self._context.decode(response, PasswordResponse)
        logger.info("Password request completed (success=%s)", result.success)
        return result
