"""Canonical string construction for bewit MACs."""

from __future__ import annotations

from hawkish.bewit.request import RequestDescriptor
from hawkish.common.errors import UnknownSchemeError

# Not compatible with Hawk 1.0: the scheme is signed as well.
HAWK_VERSION = "1a"
AUTH_TYPE_BEWIT = "BEWIT"
BEWIT_METHOD = "GET"

DEFAULT_PORTS = {
    "http": 80,
    "https": 443,
}


def resolve_port(request: RequestDescriptor) -> int:
    """Explicit port, or the default port of the request's scheme."""
    if request.port is not None:
        return request.port
    try:
        return DEFAULT_PORTS[request.scheme.lower()]
    except KeyError:
        raise UnknownSchemeError(request.scheme) from None


def build_canonical_string(expiry_seconds: int, request: RequestDescriptor) -> str:
    """
    Build the newline-delimited string covered by a bewit MAC.

    Lines: header, expiry, empty nonce, method, path and query, scheme,
    host, port. There is no trailing newline.

    Args:
        expiry_seconds: Bewit expiry as Unix epoch seconds
        request: Request the bewit is bound to

    Returns:
        Canonical string

    Raises:
        UnknownSchemeError: If the port cannot be resolved
    """
    resource = request.raw_path
    if request.raw_query is not None:
        resource = f"{resource}?{request.raw_query}"

    return "\n".join(
        [
            f"hawk.{HAWK_VERSION}.{AUTH_TYPE_BEWIT}",
            str(expiry_seconds),
            "",
            BEWIT_METHOD,
            resource,
            request.scheme.lower(),
            request.host.lower(),
            str(resolve_port(request)),
        ]
    )
