"""
Request and response models for the ``system`` service families.

Each family has a ``*Request`` model (identifier optional) and a
``*Response`` model that requires the identifier and adds audit fields.
These are plain shapes; all behavior lives in the generic resource engine.
"""

from __future__ import annotations

from typing import Any

from pydantic import Field

from dreamfactory.models.base import AuditFields, DreamFactoryModel
from dreamfactory.serialization import UtcDateTime

# =============================================================================
# Applications
# =============================================================================


class AppRequest(DreamFactoryModel):
    """An application definition."""

    id: int | None = None
    name: str | None = None
    api_name: str | None = None
    description: str | None = None
    is_active: bool | None = None
    url: str | None = None
    is_url_external: bool | None = None
    import_url: str | None = None
    storage_service_id: int | str | None = None
    storage_container: str | None = None
    requires_fullscreen: bool | None = None
    allow_fullscreen_toggle: bool | None = None
    toggle_location: str | None = None
    requires_plugin: bool | None = None
    role_id: int | None = None


class AppResponse(AppRequest, AuditFields):
    id: int
    launch_url: str | None = None


# =============================================================================
# Users and admins
# =============================================================================


class UserFields(DreamFactoryModel):
    """Account fields shared by user requests and responses."""

    id: int | None = None
    name: str | None = None
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    display_name: str | None = None
    email: str | None = None
    phone: str | None = None
    is_active: bool | None = None
    is_sys_admin: bool | None = None
    default_app_id: int | None = None
    role_id: int | None = None


class UserRequest(UserFields):
    """A user account. ``password`` is only ever sent, never returned."""

    password: str | None = Field(default=None, repr=False)


class UserResponse(UserFields, AuditFields):
    id: int
    confirmed: bool | None = None
    last_login_date: UtcDateTime | None = None


# =============================================================================
# Roles
# =============================================================================


class RoleRequest(DreamFactoryModel):
    """A role and the service access it grants."""

    id: int | None = None
    name: str | None = None
    description: str | None = None
    is_active: bool | None = None
    default_app_id: int | None = None
    role_service_access: list[dict[str, Any]] | None = None


class RoleResponse(RoleRequest, AuditFields):
    id: int


# =============================================================================
# Services
# =============================================================================


class ServiceRequest(DreamFactoryModel):
    """A configured service (database, storage, email, ...)."""

    id: int | None = None
    name: str | None = None
    label: str | None = None
    description: str | None = None
    is_active: bool | None = None
    type: str | None = None
    config: dict[str, Any] | None = None


class ServiceResponse(ServiceRequest, AuditFields):
    id: int
    mutable: bool | None = None
    deletable: bool | None = None


# =============================================================================
# Email templates
# =============================================================================


class EmailAddress(DreamFactoryModel):
    """Name and address of an email participant."""

    name: str | None = None
    email: str


class EmailTemplateRequest(DreamFactoryModel):
    """An email template with default replacement values."""

    id: int | None = None
    name: str | None = None
    description: str | None = None
    to: list[EmailAddress] | None = None
    cc: list[EmailAddress] | None = None
    bcc: list[EmailAddress] | None = None
    subject: str | None = None
    body_text: str | None = None
    body_html: str | None = None
    from_: EmailAddress | None = Field(default=None, alias="from")
    reply_to: EmailAddress | None = None
    defaults: list[str] | None = None


class EmailTemplateResponse(EmailTemplateRequest, AuditFields):
    id: int


# =============================================================================
# CORS, lookups, event scripts
# =============================================================================


class CorsRequest(DreamFactoryModel):
    """A cross-origin resource sharing rule."""

    id: int | None = None
    description: str | None = None
    path: str | None = None
    origin: str | None = None
    header: str | None = None
    method: list[str] | None = None
    max_age: int | None = None
    enabled: bool | None = None


class CorsResponse(CorsRequest, AuditFields):
    id: int


class LookupRequest(DreamFactoryModel):
    """A global lookup (name/value pair usable in filters and scripts)."""

    id: int | None = None
    name: str | None = None
    value: str | None = None
    private: bool | None = None
    description: str | None = None


class LookupResponse(LookupRequest, AuditFields):
    id: int


class EventScriptRequest(DreamFactoryModel):
    """A server-side script bound to an event; keyed by its event name."""

    name: str | None = None
    type: str | None = None
    content: str | None = None
    config: str | None = None
    is_active: bool | None = None
    allow_event_modification: bool | None = None


class EventScriptResponse(EventScriptRequest, AuditFields):
    name: str


# =============================================================================
# System configuration and environment
# =============================================================================


class ConfigRequest(DreamFactoryModel):
    """Instance-wide system configuration."""

    editable_profile_fields: str | None = None
    restricted_verbs: list[str] | None = None
    timestamp_format: str | None = None
    allow_open_registration: bool | None = None
    open_reg_role_id: int | None = None
    open_reg_email_service_id: int | None = None
    open_reg_email_template_id: int | None = None
    invite_email_service_id: int | None = None
    invite_email_template_id: int | None = None
    password_email_service_id: int | None = None
    password_email_template_id: int | None = None
    allow_guest_user: bool | None = None
    guest_role_id: int | None = None


class ConfigResponse(ConfigRequest):
    db_version: str | None = None


class EnvironmentResponse(DreamFactoryModel):
    """Read-only platform and server information."""

    platform: dict[str, Any] | None = None
    authentication: dict[str, Any] | None = None
    server: dict[str, Any] | None = None
    php: dict[str, Any] | None = None
