"""Request descriptors: the URI components a bewit is bound to."""

from __future__ import annotations

from dataclasses import dataclass
from urllib.parse import quote, unquote_plus, urlsplit

# Characters left unescaped in a re-encoded path segment.
_PATH_SAFE = "/@!$&'()*+,;=:~"


def normalize_path(raw_path: str) -> str:
    """Form-decode a raw path and percent-encode it again. An empty path is the root."""
    if not raw_path:
        return "/"
    return quote(unquote_plus(raw_path), safe=_PATH_SAFE)


def format_host(hostname: str) -> str:
    """Bracket IPv6 literals the way they appear in a URI authority."""
    if ":" in hostname:
        return f"[{hostname}]"
    return hostname


@dataclass(frozen=True)
class RequestDescriptor:
    """
    An unsigned request URI, split into the parts that are signed.

    Paths and queries are raw (still percent-encoded) and must be encoded
    the same way when a bewit is generated and when it is validated.
    """

    scheme: str
    host: str
    port: int | None = None
    raw_path: str = "/"
    raw_query: str | None = None

    @classmethod
    def from_url(cls, url: str) -> RequestDescriptor:
        """
        Build a descriptor from an encoded URL string.

        The path is decoded (treating ``+`` as a space) and re-encoded so
        that form-encoded and percent-encoded paths canonicalize alike.
        An empty path becomes ``/`` and IPv6 hosts keep their brackets.
        A bare ``?`` yields an empty query, no ``?`` yields no query at all.
        The fragment is dropped.

        Args:
            url: Encoded absolute URL, without any bewit

        Returns:
            RequestDescriptor for the URL

        Raises:
            ValueError: If the URL has no host or an invalid port
        """
        parts = urlsplit(url)
        if not parts.hostname:
            raise ValueError(f"URL has no host: {url!r}")

        has_query = "?" in url.split("#", 1)[0]
        return cls(
            scheme=parts.scheme,
            host=format_host(parts.hostname),
            port=parts.port,
            raw_path=normalize_path(parts.path),
            raw_query=parts.query if has_query else None,
        )
