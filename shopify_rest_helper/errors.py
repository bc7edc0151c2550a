"""Error classes for Shopify REST helper."""
from __future__ import annotations

from typing import Optional


class ShopifyAPIError(Exception):
    """Base class for every error raised by this package."""


class ValidationError(ShopifyAPIError, ValueError):
    """Raised when a session is built from a malformed shop domain."""


class InvalidSessionError(ShopifyAPIError):
    """Raised when activating a missing or invalid session."""


class NoActiveSessionError(ShopifyAPIError):
    """Raised when a tenant-scoped call is made with no session and no default site."""


class ShopifyHTTPError(ShopifyAPIError):
    """Raised when Shopify answers with an HTTP error status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        snippet = message if len(message) <= 300 else message[:300]
        if status_code is not None:
            msg = f"HTTP {status_code}: {snippet}"
        else:
            msg = snippet
        super().__init__(msg)
        self.status_code = status_code
