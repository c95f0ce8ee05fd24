"""Exceptions raised by the credential lifecycle layer."""

from __future__ import annotations


class AccessError(Exception):
    """Base class for accessctl errors."""


class ValidationError(AccessError):
    """Input rejected locally, before any request is sent."""


class RequestFailure(AccessError):
    """A panel request failed: transport error or an unsuccessful envelope."""

    def __init__(self, message: str = "", *, status_code: int | None = None) -> None:
        super().__init__(message or "request failed")
        self.status_code = status_code
