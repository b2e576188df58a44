"""Signed REST client for the MtGox v2 API."""

from goxclient.io.mtgox.client import AsyncMtGoxClient, Credentials, MtGoxClient
from goxclient.io.mtgox.endpoints import Endpoint
from goxclient.io.mtgox.errors import (
    ApiError,
    GoxError,
    InvalidCredentials,
    InvalidCurrency,
    InvalidResponse,
    TransportError,
    UnknownEndpoint,
)

__all__ = [
    "ApiError",
    "AsyncMtGoxClient",
    "Credentials",
    "Endpoint",
    "GoxError",
    "InvalidCredentials",
    "InvalidCurrency",
    "InvalidResponse",
    "MtGoxClient",
    "TransportError",
    "UnknownEndpoint",
]
