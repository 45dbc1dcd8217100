"""Common utilities for Hawkish."""

from hawkish.common.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
