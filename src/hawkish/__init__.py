"""
Hawkish: expiring, HMAC-authenticated bewits for signed URLs.

A bewit binds a credential, a request URI and an expiry, so that a link
can carry its own proof of authorization.
"""

__version__ = "1.0.0"
