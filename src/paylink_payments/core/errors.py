"""
Exception hierarchy raised by the Paylink client.
"""

from __future__ import annotations

from typing import Optional

__all__ = [
    "AuthenticationError",
    "ConfigurationError",
    "EnvironmentRestrictionError",
    "GatewayRequestError",
    "InvalidArgumentError",
    "PaylinkError",
]


class PaylinkError(Exception):
    """Base class for every error raised by this package."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class ConfigurationError(PaylinkError):
    """Raised when a client cannot be configured, e.g. missing production credentials."""


class AuthenticationError(PaylinkError):
    """Raised when the gateway rejects the credentials or returns no token."""


class InvalidArgumentError(PaylinkError, ValueError):
    """Raised before any network call when caller data breaks a local precondition."""


class GatewayRequestError(PaylinkError):
    """Raised when an operation call fails or returns an empty or unusable body."""


class EnvironmentRestrictionError(PaylinkError):
    """Raised when a sandbox-only operation is invoked against production."""
