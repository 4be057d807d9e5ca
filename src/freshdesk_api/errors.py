"""Typed errors raised by the Freshdesk client."""

from __future__ import annotations

from typing import Any


class FreshdeskError(Exception):
    """Base class for every error raised by FreshdeskClient."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AuthenticationError(FreshdeskError):
    """API key rejected (401)."""


class PermissionDeniedError(FreshdeskError):
    """Key is valid but lacks access to the resource (403)."""


class NotFoundError(FreshdeskError):
    """Remote record does not exist (404)."""


class ValidationError(FreshdeskError):
    """Remote rejected the payload.

    ``errors`` holds the field-level detail Freshdesk returns, e.g.
    ``[{"field": "email", "message": "...", "code": "invalid_value"}]``.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(message, status_code)
        self.errors = errors or []


class RateLimitError(FreshdeskError):
    """Too many requests (429)."""

    def __init__(self, message: str, status_code: int | None = 429, retry_after: int | None = None):
        super().__init__(message, status_code)
        self.retry_after = retry_after


class ServiceUnavailableError(FreshdeskError):
    """Remote failed on its side (5xx)."""


class RequestError(FreshdeskError):
    """Transport failure, unexpected status, or unparseable body."""
