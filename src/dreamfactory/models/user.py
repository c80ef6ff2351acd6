"""
Session and account models for the ``user`` service.
"""

from __future__ import annotations

from pydantic import Field

from dreamfactory.models.base import DreamFactoryModel
from dreamfactory.serialization import UtcDateTime


class LoginRequest(DreamFactoryModel):
    """Credentials posted to open a session."""

    email: str
    password: str = Field(repr=False)
    duration: int | None = None


class Session(DreamFactoryModel):
    """
    An authenticated session.

    ``session_token`` and ``session_id`` are secrets and are kept out of
    ``repr``. The core never persists a session.
    """

    id: int | None = None
    name: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    email: str | None = None
    is_sys_admin: bool = False
    role: str | None = None
    role_id: int | None = None
    last_login_date: UtcDateTime | None = None
    host: str | None = None
    session_token: str | None = Field(default=None, repr=False)
    session_id: str | None = Field(default=None, repr=False)

    @property
    def token(self) -> str | None:
        """The credential to send back on later requests."""
        return self.session_token or self.session_id


class PasswordRequest(DreamFactoryModel):
    """Password change or reset request."""

    email: str | None = None
    old_password: str | None = Field(default=None, repr=False)
    new_password: str | None = Field(default=None, repr=False)


class PasswordResponse(DreamFactoryModel):
    """
    Outcome of a password change or reset request.

    Attributes:
        security_question: Returned on reset when no email confirmation is
            required.
        success: True if the password was updated, or a reset was granted
            via email confirmation.
    """

    security_question: str | None = None
    success: bool | None = None
