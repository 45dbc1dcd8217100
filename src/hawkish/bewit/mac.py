"""HMAC computation and comparison."""

from __future__ import annotations

import hashlib
import hmac
from collections.abc import Callable
from types import MappingProxyType
from typing import Any

from hawkish.bewit.credentials import Algorithm, Credentials

DIGESTS: MappingProxyType[Algorithm, Callable[..., Any]] = MappingProxyType(
    {
        Algorithm.SHA1: hashlib.sha1,
        Algorithm.SHA256: hashlib.sha256,
    }
)


def compute_mac(credentials: Credentials, text: str) -> bytes:
    """Compute the raw HMAC digest of text with the credentials' key."""
    digest = DIGESTS[credentials.algorithm]
    return hmac.new(credentials.key_bytes, text.encode("utf-8"), digest).digest()


def constant_time_equal(a: bytes, b: bytes) -> bool:
    """Compare two MACs in constant time."""
    return hmac.compare_digest(a, b)
