"""
Typed request and response models.

Models are organized into three modules:
1. base: shared configuration, audit fields and the list envelope
2. user: sessions, login and password models
3. system: one request/response pair per system resource family
"""

from dreamfactory.models.base import AuditFields, DreamFactoryModel, ResourceList
from dreamfactory.models.system import (
    AppRequest,
    AppResponse,
    ConfigRequest,
    ConfigResponse,
    CorsRequest,
    CorsResponse,
    EmailAddress,
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
    UserFields,
    UserRequest,
    UserResponse,
)
from dreamfactory.models.user import LoginRequest, PasswordRequest, PasswordResponse, Session

__all__ = [
    "AppRequest",
    "AppResponse",
    "AuditFields",
    "ConfigRequest",
    "ConfigResponse",
    "CorsRequest",
    "CorsResponse",
    "DreamFactoryModel",
    "EmailAddress",
    "EmailTemplateRequest",
    "EmailTemplateResponse",
    "EnvironmentResponse",
    "EventScriptRequest",
    "EventScriptResponse",
    "LoginRequest",
    "LookupRequest",
    "LookupResponse",
    "PasswordRequest",
    "PasswordResponse",
    "ResourceList",
    "RoleRequest",
    "RoleResponse",
    "ServiceRequest",
    "ServiceResponse",
    "Session",
    "UserFields",
    "UserRequest",
    "UserResponse",
]
