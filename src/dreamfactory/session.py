"""
Session management for the DreamFactory client.

``SessionManager`` is the only writer of the session-token header. It keeps
an explicit state value instead of inferring the state from the header bag:

    ANONYMOUS --login()--> AUTHENTICATING --success--> AUTHENTICATED
        ^                        |                          |
        +------- failure --------+---------- logout() ------+

A second ``login`` while one is in flight raises ``SessionStateError``.
``logout`` always ends in ``ANONYMOUS``, even when the server cannot be
reached, because the caller's intent to stop being authenticated must be
honored locally.

Example:
    session = await client.session.login("dream@factory.com", "dreamfactory")
    print(session.name)
    await client.session.logout()
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable
from enum import Enum
from typing import Any

from dreamfactory.context import ApiContext
from dreamfactory.errors import (
    InvalidArgumentError,
    NotAuthenticatedError,
    SerializationError,
    SessionStateError,
    TransportError,
    UpstreamError,
)
from dreamfactory.http.facade import HttpMethod, HttpResponse
from dreamfactory.http.headers import SESSION_TOKEN_HEADER
from dreamfactory.models.user import LoginRequest, Session

logger = logging.getLogger(__name__)

USER_SESSION_PATH = "user/session"
ADMIN_SESSION_PATH = "system/admin/session"


class SessionState(str, Enum):
    """Authentication state of one client."""

    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class SessionManager:
    """
    Login, logout and session inspection for one client.

    Args:
        context: Collaborators shared with the rest of the client; the
                 session token is installed into ``context.headers``.
        implicit_refresh: When True, ``get_current_session`` asks the server
                 for its view of the session while anonymous instead of
                 raising ``NotAuthenticatedError`` straight away.
    """

    def __init__(self, context: ApiContext, *, implicit_refresh: bool = False) -> None:
        self._context = context
        self._implicit_refresh = implicit_refresh
        self._state = SessionState.ANONYMOUS
        self._session: Session | None = None
        self._path = USER_SESSION_PATH
        # Bumped on every logout so a login that was in flight cannot
        # install its token afterwards.
        self._generation = 0

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def state(self) -> SessionState:
        """The current authentication state."""
        return self._state

    @property
    def is_authenticated(self) -> bool:
        """Check if we have an active session."""
        return self._state is SessionState.AUTHENTICATED

    @property
    def current_session(self) -> Session:
        """
        The session returned by the last login or refresh.

        Raises:
            NotAuthenticatedError: If not currently authenticated.
        """
        if self._state is not SessionState.AUTHENTICATED or self._session is None:
            raise NotAuthenticatedError("No active session; log in first")
        return self._session

    def require_authenticated(self) -> None:
        """
        Verify that we have an active session.

        Raises:
            NotAuthenticatedError: If not currently authenticated.
        """
        if self._state is not SessionState.AUTHENTICATED:
            raise NotAuthenticatedError("You must be logged in to perform this action")

    def _install(self, session: Session, path: str) -> None:
        self._context.headers.set(SESSION_TOKEN_HEADER, session.token or "")
        self._session = session
        self._path = path
        self._state = SessionState.AUTHENTICATED

    def _clear(self) -> None:
        self._context.headers.remove(SESSION_TOKEN_HEADER)
        self._session = None
        self._path = USER_SESSION_PATH
        self._state = SessionState.ANONYMOUS

    def _decode_session(self, response: HttpResponse) -> Session:
        session = self._context.decode(response, Session)
        if not session.token:
            raise SerializationError(
                "Session response carried no session token",
                payload=response.body,
                shape="Session",
            )
        return session

    # -------------------------------------------------------------------------
    # Login / logout
    # -------------------------------------------------------------------------

    def login(
        self,
        email: str,
        password: str,
        duration: int | None = None,
        *,
        admin: bool = False,
    ) -> Awaitable[Session]:
        """
        Open a session and install its token.

        Arguments are checked immediately; nothing is sent for invalid input.

        Args:
            email: Account email address.
            password: Account password.
            duration: Optional session lifetime in minutes; must be positive.
            admin: Log in through the system admin session endpoint.

        Returns:
            Awaitable resolving to the new ``Session``.

        Raises:
            InvalidArgumentError: If email or password is empty, or duration
                is not a positive integer.
            SessionStateError: If another login is already in flight.
            UpstreamError: If the service rejects the credentials.
            TransportError: If the service cannot be reached.
        """
        if not email or not isinstance(email, str):
            raise InvalidArgumentError("email is required")
        if not password or not isinstance(password, str):
            raise InvalidArgumentError("password is required")
        if duration is not None and (
            isinstance(duration, bool) or not isinstance(duration, int) or duration <= 0
        ):
            raise InvalidArgumentError(
                f"duration must be a positive number of minutes, got {duration!r}"
            )

        fields: dict[str, Any] = {"email": email, "password": password}
        if duration is not None:
            fields["duration"] = duration
        body = LoginRequest(**fields)
        path = ADMIN_SESSION_PATH if admin else USER_SESSION_PATH
        return self._login(body, path)

    async def _login(self, body: LoginRequest, path: str) -> Session:
        if self._state is SessionState.AUTHENTICATING:
            raise SessionStateError("A login is already in progress")

        request = self._context.prepare(HttpMethod.POST, path, body=body)
        generation = self._generation
        self._state = SessionState.AUTHENTICATING
        try:
            response = await self._context.execute(request)
            session = self._decode_session(response)
        except BaseException:
            # A logout in the meantime already reset the state.
            if generation == self._generation:
                self._clear()
            raise

        if generation != self._generation:
            raise SessionStateError("Logged out while the login was in progress")
        self._install(session, path)

        logger.info("Logged in as %s", session.email or body.email)
        return session

    async def logout(self) -> bool:
        """
        End the current session.

        The server is notified on a best-effort basis; local state is always
        cleared, even if that request fails.

        Returns:
            bool: True if a session was ended, False if already anonymous.
        """
        if self._state is SessionState.ANONYMOUS:
            return False

        self._generation += 1
        request = self._context.prepare(HttpMethod.DELETE, self._path)
        try:
            await self._context.execute(request)
        except (TransportError, UpstreamError) as e:
            # The server expires abandoned sessions on its own.
            logger.warning("Server-side logout failed, clearing local session: %s", e)
        finally:
            self._clear()

        logger.info("Logged out")
        return True

    # -------------------------------------------------------------------------
    # Session inspection and renewal
    # -------------------------------------------------------------------------

    async def get_current_session(self) -> Session:
        """
        Fetch the server's view of the current session.

        While anonymous this raises ``NotAuthenticatedError``, unless implicit
        refresh is enabled, in which case the server is asked; a session is
        only adopted if the server returns one with a token.

        Raises:
            NotAuthenticatedError: If there is no session to return.
            SessionStateError: If a login is in progress, or a logout lands
                while the session is being fetched.
        """
        authenticated = self._state is SessionState.AUTHENTICATED
        if not authenticated and not self._implicit_refresh:
            raise NotAuthenticatedError("No active session; log in first")
        if self._state is SessionState.AUTHENTICATING:
            raise SessionStateError("A login is in progress")

        path = self._path
        generation = self._generation
        request = self._context.prepare(HttpMethod.GET, path)

        if authenticated:
            response = await self._context.execute(request)
            session = self._context.decode(response, Session)
            if not session.token and self._session is not None:
                session = session.model_copy(
                    update={
                        "session_token": self._session.session_token,
                        "session_id": self._session.session_id,
                    }
                )
        else:
            try:
                response = await self._context.execute(request)
                session = self._decode_session(response)
            except (UpstreamError, SerializationError) as e:
                raise NotAuthenticatedError(f"No session available: {e}") from e

        if generation != self._generation:
            raise SessionStateError("Logged out while the session was being fetched")
        self._install(session, path)
        return session

    async def refresh(self) -> Session:
        """
        Renew the session token.

        Raises:
            NotAuthenticatedError: If not currently authenticated.
        """
        self.require_authenticated()
        path = self._path
        generation = self._generation
        request = self._context.prepare(HttpMethod.PUT, path)
        response = await self._context.execute(request)
        session = self._decode_session(response)
        if generation != self._generation:
            raise SessionStateError("Logged out while the refresh was in progress")
        self._install(session, path)
        logger.debug("Session token refreshed")
        return session
