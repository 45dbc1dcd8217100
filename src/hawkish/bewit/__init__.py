"""Bewit generation and validation."""

from hawkish.bewit.clock import Clock, FixedClock, SystemClock
from hawkish.bewit.credentials import Algorithm, Credentials
from hawkish.bewit.request import RequestDescriptor
from hawkish.bewit.validator import (
    AuthenticationError,
    Bad,
    BewitValidationResult,
    Expired,
    Good,
    HawkBewit,
)

__all__ = [
    "Algorithm",
    "AuthenticationError",
    "Bad",
    "BewitValidationResult",
    "Clock",
    "Credentials",
    "Expired",
    "FixedClock",
    "Good",
    "HawkBewit",
    "RequestDescriptor",
    "SystemClock",
]
