from __future__ import annotations

import platform
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Mapping

import httpx

from goxclient.config.settings import Settings, get_settings
from goxclient.io.mtgox import currency as currency_table
from goxclient.io.mtgox.endpoints import (
    METHOD_ENDPOINTS,
    Endpoint,
    endpoint_from_method_name,
    endpoint_name,
    exists,
    requires_currency,
)
from goxclient.io.mtgox.errors import InvalidResponse, TransportError, UnknownEndpoint
from goxclient.io.mtgox.paths import BASE_URL, build_path, relative_path
from goxclient.io.mtgox.responses import decode_response
from goxclient.io.mtgox.signer import SignedRequest, sign_request
from goxclient.observability.metrics import metrics
from goxclient.utils.logging_redaction import get_logger

_LOGGER = get_logger(__name__)

USER_AGENT = (
    f"Mozilla/4.0 (compatible; MtGox Python client; {platform.system()}; "
    f"Python/{platform.python_version()})"
)


@dataclass(frozen=True)
class Credentials:
    key: str
    secret: str = field(repr=False)


class _BaseClient:
    """Gemensam state och request-pipeline för sync/async-klienterna.

    - Validerar endpoint mot whitelist innan någon I/O sker
    - Lägger till BTC<CCY>/ för valutaberoende endpoints
    - Signerar med HMAC-SHA512 (Rest-Key/Rest-Sign)

    Not thread-safe: currency/version/credentials are meant to be set once at
    configuration time. Use one client per thread or serialize access.
    """

    def __init__(
        self,
        key: str = "",
        secret: str = "",
        *,
        currency: str = currency_table.DEFAULT_CURRENCY,
        version: int = 2,
        base_url: str = BASE_URL,
        http_client: Any = None,
        verify_tls: bool = False,
        timeout: float = 10.0,
        cache: Any = None,
    ) -> None:
        self._credentials: Credentials | None = None
        self._currency = currency_table.DEFAULT_CURRENCY
        self._version = 2
        self._base_url = base_url
        self._verify_tls = verify_tls
        self._timeout = timeout
        # Injicerad cache lagras men används inte av request-pipelinen
        self.cache = cache
        self._http = http_client
        self._owns_http = http_client is None
        self.set_currency(currency)
        self.set_version(version)
        if key and secret:
            self.authenticate(key, secret)

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **overrides: Any):
        s = settings or get_settings()
        kwargs: dict[str, Any] = {
            "key": (s.MTGOX_API_KEY or "").strip(),
            "secret": (s.MTGOX_API_SECRET or "").strip(),
            "currency": s.MTGOX_CURRENCY,
            "version": s.MTGOX_API_VERSION,
            "base_url": s.MTGOX_BASE_URL,
            "verify_tls": s.MTGOX_VERIFY_TLS,
            "timeout": s.MTGOX_TIMEOUT,
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    # --- configuration -------------------------------------------------

    def authenticate(self, key: str, secret: str) -> None:
        """Set credentials. The secret is only checked when a request is signed."""
        self._credentials = Credentials(key=key, secret=secret)

    @property
    def credentials(self) -> Credentials | None:
        return self._credentials

    def set_currency(self, code: str = currency_table.DEFAULT_CURRENCY) -> None:
        self._currency = currency_table.normalize(code)

    def get_currency(self) -> str:
        return self._currency

    @property
    def currency(self) -> str:
        return self._currency

    def set_version(self, version: int = 2) -> None:
        value = int(version)
        if value < 1:
            raise ValueError(f"API version must be a positive integer, got {version!r}")
        self._version = value

    @property
    def version(self) -> int:
        return self._version

    def convert_to_btc(self, value: int) -> Decimal:
        """Convert a `value_int` in the active currency to a decimal amount."""
        return currency_table.convert(value, self._currency)

    # --- request pipeline ----------------------------------------------

    def prepare(
        self, endpoint: str | Endpoint, params: Mapping[str, Any] | None = None
    ) -> SignedRequest:
        """Validate, route and sign a request without sending it."""
        name = endpoint_name(endpoint)
        if not exists(name):
            metrics.inc("rest_auth_unknown_endpoint")
            raise UnknownEndpoint(name)
        needs_ccy = requires_currency(name)
        path = relative_path(self._version, self._currency, name, needs_ccy)
        url = build_path(self._version, self._currency, name, needs_ccy, base_url=self._base_url)
        creds = self._credentials
        return sign_request(
            url,
            path,
            params,
            key=creds.key if creds else None,
            secret=creds.secret if creds else None,
            version=self._version,
        )

    def _resolve_method(self, method_name: str) -> str | Endpoint:
        return METHOD_ENDPOINTS.get(method_name) or endpoint_from_method_name(method_name)

    def _request_headers(self, signed: SignedRequest) -> dict[str, str]:
        headers = dict(signed.headers)
        headers["User-Agent"] = USER_AGENT
        return headers

    def _client_kwargs(self) -> dict[str, Any]:
        if not self._verify_tls:
            # Peer-certifikat verifieras inte när MTGOX_VERIFY_TLS är av
            _LOGGER.warning("TLS peer verification is disabled for %s", self._base_url)
        return {"verify": self._verify_tls, "timeout": self._timeout}

    def _before_send(self, signed: SignedRequest) -> None:
        metrics.inc("rest_auth_request")
        _LOGGER.info("REST POST %s", signed.path)

    def _transport_failed(self, signed: SignedRequest, exc: httpx.HTTPError) -> TransportError:
        metrics.inc("rest_auth_transport_error")
        _LOGGER.info("REST transport error %s: %s", signed.path, exc)
        return TransportError(f"No API response: {exc}", exc)

    def _handle_response(self, signed: SignedRequest, resp: httpx.Response) -> Any:
        if resp.status_code >= 400:
            _LOGGER.warning("REST %s status=%s", signed.path, resp.status_code)
        try:
            decoded = decode_response(resp.text)
        except InvalidResponse:
            metrics.inc("rest_auth_invalid_response")
            metrics.event(
                "rest_auth_invalid_response",
                {"endpoint": signed.path, "status": resp.status_code},
            )
            raise
        metrics.inc("rest_auth_success")
        return decoded


class MtGoxClient(_BaseClient):
    """Synchronous client over an owned or injected `httpx.Client`."""

    def _get_http_client(self) -> httpx.Client:
        if self._http is None:
            self._http = httpx.Client(**self._client_kwargs())
        return self._http

    def call(self, endpoint: str | Endpoint, params: Mapping[str, Any] | None = None) -> Any:
        signed = self.prepare(endpoint, params)
        self._before_send(signed)
        client = self._get_http_client()
        try:
            resp = client.post(signed.url, content=signed.body, headers=self._request_headers(signed))
        except httpx.HTTPError as exc:
            raise self._transport_failed(signed, exc) from exc
        return self._handle_response(signed, resp)

    query = call

    def dispatch(self, method_name: str, params: Mapping[str, Any] | None = None) -> Any:
        """`dispatch("money_info")` is `call("money/info")`."""
        return self.call(self._resolve_method(method_name), params)

    def close(self) -> None:
        if self._owns_http and self._http is not None:
            self._http.close()
            self._http = None

    def __enter__(self) -> MtGoxClient:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()


class AsyncMtGoxClient(_BaseClient):
    """Async variant over an owned or injected `httpx.AsyncClient`."""

    def _get_http_client(self) -> httpx.AsyncClient:
        if self._http is None:
            self._http = httpx.AsyncClient(**self._client_kwargs())
        return self._http

    async def call(
        self, endpoint: str | Endpoint, params: Mapping[str, Any] | None = None
    ) -> Any:
        signed = self.prepare(endpoint, params)
        self._before_send(signed)
        client = self._get_http_client()
        try:
            resp = await client.post(
                signed.url, content=signed.body, headers=self._request_headers(signed)
            )
        except httpx.HTTPError as exc:
            raise self._transport_failed(signed, exc) from exc
        return self._handle_response(signed, resp)

    query = call

    async def dispatch(self, method_name: str, params: Mapping[str, Any] | None = None) -> Any:
        return await self.call(self._resolve_method(method_name), params)

    async def aclose(self) -> None:
        if self._owns_http and self._http is not None:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> AsyncMtGoxClient:
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()
