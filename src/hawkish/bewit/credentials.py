"""Hawk credentials used to sign and verify bewits."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Algorithm(str, Enum):
    """Supported HMAC digest algorithms."""

    SHA1 = "sha1"
    SHA256 = "sha256"


@dataclass(frozen=True)
class Credentials:
    """A key identifier, its shared secret, and the MAC algorithm."""

    key_id: str
    key: str | bytes = field(repr=False)
    algorithm: Algorithm = Algorithm.SHA256

    @property
    def key_bytes(self) -> bytes:
        """Key material as raw bytes (UTF-8 for text keys)."""
        if isinstance(self.key, bytes):
            return self.key
        return self.key.encode("utf-8")
