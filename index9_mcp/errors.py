# -*- coding: utf-8 -*-
"""Location: ./index9_mcp/errors.py
Copyright 2025
SPDX-License-Identifier: Apache-2.0
Authors: index9 contributors

Error taxonomy shared by the rate limiter, backend client, handlers and dispatcher.
Every failure a tool call can produce is one of the ``ErrorKind`` values below.
"""

# Standard
from enum import Enum


class ErrorKind(str, Enum):
    """Normalized failure kinds."""

    RATE_LIMITED = "rate_limited"
    MISSING_CREDENTIAL = "missing_credential"
    NOT_FOUND = "not_found"
    REMOTE_ERROR = "remote_error"
    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"
    VALIDATION_ERROR = "validation_error"
    UNKNOWN = "unknown"


class GatewayError(Exception):
    """Base class for tool gateway failures.

    Examples:
        >>> err = NotFoundError("model not found")
        >>> err.kind.value, err.message, str(err)
        ('not_found', 'model not found', 'model not found')
    """

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str):
        """Initialize the error.

        Args:
            message: Human-readable message surfaced to the caller.
        """
        super().__init__(message)
        self.message = message


class RateLimitedError(GatewayError):
    """Raised when a tool has used up its quota for the current window."""

    kind = ErrorKind.RATE_LIMITED


class MissingCredentialError(GatewayError):
    """Raised when a capability needs a third-party credential that is not configured."""

    kind = ErrorKind.MISSING_CREDENTIAL


class NotFoundError(GatewayError):
    """Raised when the backend answers 404."""

    kind = ErrorKind.NOT_FOUND


class RemoteError(GatewayError):
    """Raised when the backend returns an error body with a message."""

    kind = ErrorKind.REMOTE_ERROR


class BackendTimeoutError(GatewayError):
    """Raised when no response arrives before the client timeout."""

    kind = ErrorKind.TIMEOUT


class UnreachableError(GatewayError):
    """Raised when a connection to the backend cannot be established."""

    kind = ErrorKind.UNREACHABLE


class ToolValidationError(GatewayError):
    """Raised when tool input is malformed or insufficient."""

    kind = ErrorKind.VALIDATION_ERROR


class UnknownBackendError(GatewayError):
    """Raised for any other backend failure."""

    kind = ErrorKind.UNKNOWN
