"""Bewit authentication helpers and middleware."""

from __future__ import annotations

from urllib.parse import unquote

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from hawkish.bewit.credentials import Credentials
from hawkish.bewit.request import RequestDescriptor, format_host, normalize_path
from hawkish.bewit.validator import AuthenticationError, Bad, Expired, Good, HawkBewit
from hawkish.common.errors import BewitError, ErrorCode, error_response
from hawkish.common.logging import get_logger
from hawkish.common.settings import Settings, get_settings

logger = get_logger(__name__)


def strip_bewit(raw_query: str | None, param: str = "bewit") -> tuple[str | None, str | None]:
    """
    Split the bewit parameter out of a raw query string.

    Args:
        raw_query: Raw query string, without the leading "?"
        param: Name of the bewit parameter

    Returns:
        Tuple of (bewit or None, remaining raw query or None if nothing remains)
    """
    if not raw_query:
        return None, None

    bewit: str | None = None
    remaining: list[str] = []
    for pair in raw_query.split("&"):
        name, sep, value = pair.partition("=")
        if sep and name == param and bewit is None:
            bewit = unquote(value)
        else:
            remaining.append(pair)

    return bewit, "&".join(remaining) or None


def descriptor_from_request(request: Request, param: str = "bewit") -> tuple[str | None, RequestDescriptor]:
    """
    Build the unsigned request descriptor for an incoming request.

    Returns:
        Tuple of (bewit or None, descriptor with the bewit removed)
    """
    raw_path = request.scope.get("raw_path")
    if raw_path:
        path = raw_path.decode("latin-1").split("?", 1)[0]
    else:
        path = request.url.path

    query = request.scope.get("query_string", b"").decode("latin-1")
    bewit, remaining = strip_bewit(query, param)

    descriptor = RequestDescriptor(
        scheme=request.url.scheme,
        host=format_host(request.url.hostname or ""),
        port=request.url.port,
        raw_path=normalize_path(path),
        raw_query=remaining,
    )
    return bewit, descriptor


class BewitAuthMiddleware(BaseHTTPMiddleware):
    """Bewit auth middleware for signed links."""

    def __init__(
        self,
        app: ASGIApp,
        credentials: Credentials | None = None,
        bewit: HawkBewit | None = None,
        settings: Settings | None = None,
    ) -> None:
        super().__init__(app)
        self._settings = settings or get_settings()
        self._credentials = credentials
        self._bewit = bewit or HawkBewit()
        self._exempt_paths = set(self._settings.auth_exempt_paths)

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if request.url.path in self._exempt_paths:
            return await call_next(request)

        credentials = self._credentials
        if credentials is None:
            try:
                credentials = self._settings.credentials()
            except BewitError as exc:
                logger.error("Bewit credentials not configured", error=str(exc))
                return error_response(
                    ErrorCode.SERVER_MISCONFIGURED,
                    "Bewit key not configured",
                    status_code=500,
                )

        token, descriptor = descriptor_from_request(request, self._settings.bewit_param)
        if not token:
            return error_response(ErrorCode.MISSING_BEWIT, "Missing bewit", status_code=401)

        result = self._bewit.validate(credentials, descriptor, token)
        match result:
            case Good(expiry=expiry):
                request.state.bewit_expiry = expiry
                return await call_next(request)
            case Bad(message=message):
                return error_response(ErrorCode.INVALID_BEWIT, message, status_code=400)
            case Expired(expiry=expiry):
                return error_response(
                    ErrorCode.BEWIT_EXPIRED,
                    "Bewit expired",
                    status_code=401,
                    details={"expiry": expiry.isoformat()},
                )
            case AuthenticationError(message=message):
                return error_response(ErrorCode.UNAUTHORIZED, message, status_code=401)
