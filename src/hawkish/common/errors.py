"""Shared error helpers and codes."""

from __future__ import annotations

from typing import Any

from starlette.responses import JSONResponse


class BewitError(Exception):
    """Base error for misuse of the bewit API."""

    pass


class InvalidTTLError(BewitError, ValueError):
    """Raised when a bewit is requested with a negative time-to-live."""

    pass


class UnknownSchemeError(BewitError, ValueError):
    """Raised when no port is given and the scheme has no default port."""

    def __init__(self, scheme: str) -> None:
        super().__init__(f'Unknown URI scheme "{scheme}"')
        self.scheme = scheme


class ClockError(BewitError):
    """Raised when a clock yields a timezone-naive instant."""

    pass


class InvalidBewitError(BewitError):
    """A bewit token could not be decoded."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ErrorCode:
    MISSING_BEWIT = "missing_bewit"
    INVALID_BEWIT = "invalid_bewit"
    BEWIT_EXPIRED = "bewit_expired"
    UNAUTHORIZED = "unauthorized"
    SERVER_MISCONFIGURED = "server_misconfigured"


def error_response(
    code: str,
    message: str,
    status_code: int,
    details: dict[str, Any] | None = None,
) -> JSONResponse:
    payload: dict[str, Any] = {
        "error": {
            "code": code,
            "message": message,
        }
    }
    if details:
        payload["error"]["details"] = details
    return JSONResponse(payload, status_code=status_code)
