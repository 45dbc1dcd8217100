"""Bewit generation and validation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import TypeAlias

from hawkish.bewit.canonical import build_canonical_string
from hawkish.bewit.clock import Clock, SystemClock
from hawkish.bewit.codec import EPOCH, BewitEnvelope, decode_bewit, encode_bewit
from hawkish.bewit.credentials import Credentials
from hawkish.bewit.mac import compute_mac, constant_time_equal
from hawkish.bewit.request import RequestDescriptor
from hawkish.common.errors import ClockError, InvalidBewitError, InvalidTTLError
from hawkish.common.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Bad:
    """The bewit is malformed or issued for another key."""

    message: str


@dataclass(frozen=True)
class Expired:
    """The bewit is authentic in form but past its expiry."""

    expiry: datetime


@dataclass(frozen=True)
class AuthenticationError:
    """The bewit MAC does not match the request."""

    message: str


@dataclass(frozen=True)
class Good:
    """The bewit is valid for the request until its expiry."""

    expiry: datetime


BewitValidationResult: TypeAlias = Bad | Expired | AuthenticationError | Good


class HawkBewit:
    """
    Generate and validate bewits for signed URLs.

    The caller adds the bewit to a link after generation, and extracts and
    removes it from the link before validation. Where the bewit lives (query
    parameter, path segment, out of band) does not matter as long as the
    unsigned request passed to validate() matches the one passed to
    generate().

    Instances hold no state beyond the clock and may be shared freely.
    """

    def __init__(self, clock: Clock | None = None):
        """
        Initialize the bewit engine.

        Args:
            clock: Source of the current instant (defaults to the system clock)
        """
        self._clock = clock or SystemClock()

    def _now(self) -> datetime:
        now = self._clock.now()
        if now.tzinfo is None:
            raise ClockError("Clock returned a timezone-naive datetime")
        return now

    def generate(
        self,
        credentials: Credentials,
        request: RequestDescriptor,
        ttl: timedelta,
    ) -> str:
        """
        Generate a bewit for a request, valid for ttl from now.

        Args:
            credentials: Credentials to sign with
            request: Unsigned request the bewit is bound to
            ttl: Time until the bewit expires

        Returns:
            Bewit token

        Raises:
            InvalidTTLError: If ttl is negative
            UnknownSchemeError: If the request port cannot be resolved
        """
        if ttl < timedelta(0):
            raise InvalidTTLError("TTL must not be negative")

        expiry_seconds = (self._now() + ttl - EPOCH) // timedelta(seconds=1)
        mac = compute_mac(credentials, build_canonical_string(expiry_seconds, request))

        return encode_bewit(
            BewitEnvelope(
                key_id=credentials.key_id,
                expiry_seconds=expiry_seconds,
                mac=mac,
            )
        )

    def validate(
        self,
        credentials: Credentials,
        request: RequestDescriptor,
        bewit: str,
    ) -> BewitValidationResult:
        """
        Validate a bewit against credentials and an unsigned request.

        Malformed, expired and forged bewits are reported through the
        result, never raised.

        Args:
            credentials: Credentials expected to have signed the bewit
            request: Unsigned request, with the bewit removed
            bewit: Bewit token

        Returns:
            Exactly one of Bad, Expired, AuthenticationError or Good

        Raises:
            UnknownSchemeError: If the request port cannot be resolved
        """
        try:
            envelope = decode_bewit(bewit)
        except InvalidBewitError as e:
            logger.debug("Bewit rejected", reason=e.message)
            return Bad(e.message)

        if envelope.key_id != credentials.key_id:
            logger.debug("Bewit rejected", reason="key_id_mismatch", key_id=envelope.key_id)
            return Bad("Key id mismatch")

        expiry = envelope.expiry
        if self._now() > expiry:
            logger.debug("Bewit expired", key_id=envelope.key_id, expiry=expiry.isoformat())
            return Expired(expiry)

        calculated = compute_mac(
            credentials,
            build_canonical_string(envelope.expiry_seconds, request),
        )
        if not constant_time_equal(calculated, envelope.mac):
            logger.debug("Bewit rejected", reason="mac_mismatch", key_id=envelope.key_id)
            return AuthenticationError("MAC mismatch")

        return Good(expiry)

    def unsigned_request(self, url: str) -> RequestDescriptor:
        """Build the unsigned request descriptor for an encoded URL."""
        return RequestDescriptor.from_url(url)
