"""Exception hierarchy for the MtGox REST client."""

from __future__ import annotations

from typing import Any


class GoxError(Exception):
    """Base exception for all client errors."""


class InvalidCurrency(GoxError, ValueError):
    """Currency code is not one of the supported codes."""

    def __init__(self, code: Any) -> None:
        super().__init__(f"Invalid currency: {code!r}")
        self.code = code


class UnknownEndpoint(GoxError, ValueError):
    """Endpoint is not in the whitelist; raised before any network I/O."""

    def __init__(self, endpoint: str) -> None:
        super().__init__(f"The API endpoint {endpoint} does not exist!")
        self.endpoint = endpoint


class InvalidCredentials(GoxError):
    """Key/secret missing, or the secret is not valid base64."""


class TransportError(GoxError):
    """The HTTP transport failed; `cause` holds the underlying exception."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class InvalidResponse(GoxError):
    """Response body was unparseable or empty."""

    def __init__(self, message: str, body: str | None = None) -> None:
        super().__init__(message)
        self.body = body


class ApiError(GoxError):
    """The API answered with a `{"result": "error"}` envelope."""

    def __init__(self, error: str, token: str | None = None) -> None:
        super().__init__(error)
        self.error = error
        self.token = token
