"""Bewit envelope encoding and decoding.

A bewit is the Base64 URL-safe (unpadded) encoding of::

    <key id>\\<expiry epoch seconds>\\<Base64 URL-safe MAC>\\

The trailing backslash yields a fourth, empty field when decoding.
"""

from __future__ import annotations

import base64
import re
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from hawkish.common.errors import InvalidBewitError

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

# Expiries must be representable as datetimes
MIN_EXPIRY_SECONDS = (datetime.min.replace(tzinfo=timezone.utc) - EPOCH) // timedelta(seconds=1)
MAX_EXPIRY_SECONDS = (datetime.max.replace(tzinfo=timezone.utc) - EPOCH) // timedelta(seconds=1)

BEWIT_SEPARATOR = "\\"
BEWIT_FIELDS = 4
BEWIT_FIELD_ID = 0
BEWIT_FIELD_EXPIRY = 1
BEWIT_FIELD_MAC = 2

INVALID_BEWIT = "Invalid bewit"
ILLEGAL_BEWIT_FORMAT = "Illegal bewit format"

_B64URL_RE = re.compile(r"[A-Za-z0-9_-]*")
_EXPIRY_RE = re.compile(r"[+-]?[0-9]{1,20}")


def b64url_encode_nopad(raw: bytes) -> str:
    """Encode bytes to Base64 URL-safe without padding."""
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def b64url_decode_nopad(text: str) -> bytes:
    """
    Decode an unpadded Base64 URL-safe string.

    Args:
        text: Base64 URL-safe text without padding

    Returns:
        Decoded bytes

    Raises:
        ValueError: If text is not unpadded Base64 URL-safe
    """
    if not _B64URL_RE.fullmatch(text):
        raise ValueError("Not unpadded Base64 URL-safe text")
    # Add padding back
    pad = "=" * ((4 - (len(text) % 4)) % 4)
    return base64.urlsafe_b64decode((text + pad).encode("ascii"))


@dataclass(frozen=True)
class BewitEnvelope:
    """Decoded contents of a bewit."""

    key_id: str
    expiry_seconds: int
    mac: bytes

    @property
    def expiry(self) -> datetime:
        """Expiry as a UTC datetime."""
        return EPOCH + timedelta(seconds=self.expiry_seconds)


def encode_bewit(envelope: BewitEnvelope) -> str:
    """Serialize an envelope into a bewit token."""
    bewit = BEWIT_SEPARATOR.join(
        [
            envelope.key_id,
            str(envelope.expiry_seconds),
            b64url_encode_nopad(envelope.mac),
            "",
        ]
    )
    return b64url_encode_nopad(bewit.encode("utf-8"))


def decode_bewit(bewit: str) -> BewitEnvelope:
    """
    Parse a bewit token into its envelope.

    The fourth field is not checked for emptiness.

    Args:
        bewit: Bewit token

    Returns:
        Decoded BewitEnvelope

    Raises:
        InvalidBewitError: If the token is malformed
    """
    try:
        decoded = b64url_decode_nopad(bewit).decode("utf-8")
    except ValueError as e:
        raise InvalidBewitError(ILLEGAL_BEWIT_FORMAT) from e

    fields = decoded.split(BEWIT_SEPARATOR)
    if len(fields) != BEWIT_FIELDS:
        raise InvalidBewitError(INVALID_BEWIT)

    expiry_field = fields[BEWIT_FIELD_EXPIRY]
    if not _EXPIRY_RE.fullmatch(expiry_field):
        raise InvalidBewitError(ILLEGAL_BEWIT_FORMAT)

    try:
        mac = b64url_decode_nopad(fields[BEWIT_FIELD_MAC])
    except ValueError as e:
        raise InvalidBewitError(ILLEGAL_BEWIT_FORMAT) from e

    expiry_seconds = int(expiry_field)
    if not MIN_EXPIRY_SECONDS <= expiry_seconds <= MAX_EXPIRY_SECONDS:
        raise InvalidBewitError(ILLEGAL_BEWIT_FORMAT)

    return BewitEnvelope(
        key_id=fields[BEWIT_FIELD_ID],
        expiry_seconds=expiry_seconds,
        mac=mac,
    )
