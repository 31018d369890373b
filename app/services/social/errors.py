# app/services/social/errors.py

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    PRECONDITION = "precondition"   # content/media rule violated, nothing was sent
    CREDENTIAL = "credential"       # token expired and could not be refreshed
    UPSTREAM = "upstream"           # platform answered with an error
    TRANSPORT = "transport"         # timeout / connection failure
    INTERNAL = "internal"           # anything else, caught at the orchestrator boundary


class PublishError(Exception):
    """Base for every error that is contained to a single account's attempt."""

    kind = ErrorKind.INTERNAL

    def __init__(self, message: str, *, platform: str | None = None):
        super().__init__(message)
        self.message = message
        self.platform = platform


class PreconditionError(PublishError):
    kind = ErrorKind.PRECONDITION


class CredentialError(PublishError):
    kind = ErrorKind.CREDENTIAL


class UpstreamError(PublishError):
    kind = ErrorKind.UPSTREAM

    def __init__(self, message: str, *, platform: str | None = None, status_code: int | None = None, body=None):
        super().__init__(message, platform=platform)
        self.status_code = status_code
        self.body = body


class TransportError(PublishError):
    kind = ErrorKind.TRANSPORT
