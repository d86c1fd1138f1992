"""
shelter_platform.errors

Typed failure kinds raised by the auth pipeline and the resource services.

Responsibilities:
- Give every expected failure a stable `code` and HTTP status.
- Let the transport layer map failures to responses without reading messages.
"""

from __future__ import annotations

from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_403_FORBIDDEN,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
    HTTP_500_INTERNAL_SERVER_ERROR,
)


class ShelterPlatformError(Exception):
    status_code: int = HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "internal_error"
    default_message: str = "Internal error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


# Identity stage


class MissingToken(ShelterPlatformError):
    status_code = HTTP_401_UNAUTHORIZED
    code = "missing_token"
    default_message = "Missing or invalid authorization header"


class InvalidToken(ShelterPlatformError):
    status_code = HTTP_401_UNAUTHORIZED
    code = "invalid_token"
    default_message = "Invalid or expired token"


class NotConfigured(ShelterPlatformError):
    status_code = HTTP_500_INTERNAL_SERVER_ERROR
    code = "auth_not_configured"
    default_message = "Authentication not configured"


# Tenant resolution / handlers


class NotFound(ShelterPlatformError):
    status_code = HTTP_404_NOT_FOUND
    code = "not_found"
    default_message = "Resource not found"


# Authorization stage


class Unauthenticated(ShelterPlatformError):
    status_code = HTTP_401_UNAUTHORIZED
    code = "unauthenticated"
    default_message = "Authentication required"


class MissingShelterId(ShelterPlatformError):
    status_code = HTTP_400_BAD_REQUEST
    code = "missing_shelter_id"
    default_message = "Shelter ID is required"


class Forbidden(ShelterPlatformError):
    status_code = HTTP_403_FORBIDDEN
    code = "forbidden"
    default_message = "You do not have access to this shelter"


# Memberships


class Conflict(ShelterPlatformError):
    status_code = HTTP_409_CONFLICT
    code = "conflict"
    default_message = "Resource already exists"


# Resources


class UnknownReference(ShelterPlatformError):
    status_code = HTTP_400_BAD_REQUEST
    code = "unknown_reference"
    default_message = "Value is not a known reference"


# --- Module Notes -----------------------------------------------------------
# `api.app.create_app` installs the single handler that renders these as
# {"detail": ..., "code": ...}. Anything else escaping a handler is a bug.
